"""
High-level use cases for the userhub API.

Each service module orchestrates the repository and the policy rules.
Routers (FastAPI endpoints) call these services instead of touching the
database or tokens directly.
"""

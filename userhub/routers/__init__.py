"""
FastAPI routers grouped by area (auth, admins, users).

Each module exposes an APIRouter included by ``userhub.app.create_app``.
"""

"""
Core utilities shared across the userhub API: settings, security helpers,
the error taxonomy, response envelopes and rate limiting.
"""

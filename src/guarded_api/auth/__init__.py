"""
guarded_api.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers and validation (token decoder).
- Principal resolution against role-specific account tables.
- Single-resource ownership checks.
- FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `resolver` and `ownership` are framework-free; only `deps` imports FastAPI.

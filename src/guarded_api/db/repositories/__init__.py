"""
guarded_api.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
- Implement the lookup capabilities the guard consumes (account and tenant directories).
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; authorization decisions belong in `auth`/`query`.

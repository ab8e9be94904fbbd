"""
guarded_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The resolver and visibility builder receive repositories as constructor
# arguments; only the role registry maps roles to ORM account models.

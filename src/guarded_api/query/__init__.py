"""
guarded_api.query

List-query building blocks.

Responsibilities:
- Typed filter specs rendered to SQLAlchemy predicates.
- Sort allow-lists with documented defaults.
- Page request/result contract.
- Visibility scoping of list queries per principal.
"""

# Package marker.

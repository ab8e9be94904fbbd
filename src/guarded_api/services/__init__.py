"""
guarded_api.services

Service layer (transaction + persistence owner).

Responsibilities:
- Implement each guarded operation as `(Principal, path params, body) -> DTO`.
- Run the ownership check / visibility builder before touching resource rows.
- Commit changes together with their audit events.
"""

# Package marker.

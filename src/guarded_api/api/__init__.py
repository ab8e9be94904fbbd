"""
guarded_api.api

HTTP layer: app factory, dependencies, error rendering and routers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers only validate input, resolve the principal and delegate to services.

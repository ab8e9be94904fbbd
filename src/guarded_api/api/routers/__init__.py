"""
guarded_api.api.routers

HTTP routers, one module per resource family.
"""

# Package marker.

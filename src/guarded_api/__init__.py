"""
guarded_api

Task-management API whose every operation passes one authorization and
visibility guard (principal resolution, ownership check, scoped list queries).
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

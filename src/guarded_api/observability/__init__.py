"""
guarded_api.observability

Structured logging and request context for the API and the guard.
"""

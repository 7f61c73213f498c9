"""
HTTP layer of the FitCoach Pro API.

``deps`` resolves per-application services for route handlers and
``v1`` holds the versioned routers mounted under ``/api``.
"""

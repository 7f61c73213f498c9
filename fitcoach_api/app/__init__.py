"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (auth, coaches, clients, workouts, iOS) has
its schemas in ``schemas``, its business logic in ``services`` and a
router defined in ``api/v1/endpoints``.  Coaches, clients and workouts
share one generic collection service (``services/resource_service``).
"""

from .main import app  # noqa: F401

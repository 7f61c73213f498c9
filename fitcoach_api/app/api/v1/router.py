"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (auth, coaches, clients,
workouts, iOS) under one router that ``create_app`` mounts below
``settings.api_prefix``.  When a new domain is introduced, include its
router here.
"""

from fastapi import APIRouter

from .endpoints import auth, clients, coaches, ios, workouts

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(coaches.router, prefix="/coaches", tags=["coaches"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
router.include_router(ios.router, prefix="/ios", tags=["ios"])

# Listed by ``GET /api`` for discoverability.
ENDPOINT_INDEX = {
    "auth": "/auth",
    "coaches": "/coaches",
    "clients": "/clients",
    "workouts": "/workouts",
    "ios": "/ios",
}

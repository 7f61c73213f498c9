"""
FastAPI dependencies resolving the services of the running application.

Services live on ``app.state.services`` (built by ``create_app``), so
every application instance, and every test, has its own data.
"""

from fastapi import Depends, Request

from ..core.security import Principal, require_roles
from ..services.client_service import ClientService
from ..services.coach_service import CoachService
from ..services.device_service import DeviceService
from ..services.notification_service import NotificationSink
from ..services.registry import Services
from ..services.user_service import UserService
from ..services.workout_service import WorkoutService

# Coach facing resources are also open to admins, who see only the
# records they own themselves.
coach_access = require_roles("coach", "admin")


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_user_service(services: Services = Depends(get_services)) -> UserService:
    return services.users


def get_coach_service(services: Services = Depends(get_services)) -> CoachService:
    return services.coaches


def get_client_service(services: Services = Depends(get_services)) -> ClientService:
    return services.clients


def get_workout_service(services: Services = Depends(get_services)) -> WorkoutService:
    return services.workouts


def get_device_service(services: Services = Depends(get_services)) -> DeviceService:
    return services.devices


def get_notification_sink(services: Services = Depends(get_services)) -> NotificationSink:
    return services.notifications


__all__ = [
    "Principal",
    "coach_access",
    "get_client_service",
    "get_coach_service",
    "get_device_service",
    "get_notification_sink",
    "get_services",
    "get_user_service",
    "get_workout_service",
]

"""
Business logic for the iOS companion app.

Covers push notification device registration, notification dispatch,
the static app configuration and the offline sync feed.  Each user
has at most one registered device; registering again replaces it.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..core.config import Settings
from ..core.db import Repository
from ..core.errors import NotFoundError
from ..schemas.device import DeviceRegistration, DeviceRegisterRequest, NotificationRequest, PushNotification
from .coach_service import CoachService
from .resource_service import Clock, ResourceCollectionService, utcnow

logger = logging.getLogger(__name__)

SYNC_INTERVAL = timedelta(minutes=5)

WORKOUT_TYPE_CATALOG = [
    {"id": "strength", "name": "Strength Training", "color": "#FF6B6B"},
    {"id": "cardio", "name": "Cardiovascular", "color": "#4ECDC4"},
    {"id": "flexibility", "name": "Flexibility & Mobility", "color": "#45B7D1"},
    {"id": "sports", "name": "Sports Training", "color": "#96CEB4"},
    {"id": "rehabilitation", "name": "Rehabilitation", "color": "#FECA57"},
]


class DeviceService:
    def __init__(
        self,
        repository: Repository,
        coaches: CoachService,
        clients: ResourceCollectionService,
        workouts: ResourceCollectionService,
        settings: Settings,
        clock: Clock = utcnow,
    ) -> None:
        self.repository = repository
        self.coaches = coaches
        self.clients = clients
        self.workouts = workouts
        self.settings = settings
        self.clock = clock

    def _registrations_of(self, user_id: str) -> List[DeviceRegistration]:
        return [reg for reg in self.repository.list() if reg.user_id == user_id]

    async def register_device(self, user_id: str, data: DeviceRegisterRequest) -> DeviceRegistration:
        with self.repository.lock:
            for existing in self._registrations_of(user_id):
                self.repository.delete(existing.id)
            registration = DeviceRegistration(
                id=uuid.uuid4().hex,
                user_id=user_id,
                device_token=data.device_token,
                platform=data.platform,
                app_version=data.app_version or "unknown",
                os_version=data.os_version or "unknown",
                registered_at=self.clock(),
            )
            self.repository.put(registration)
        logger.info("Registered iOS device for user %s (app %s)", user_id, registration.app_version)
        return registration

    async def unregister_device(self, user_id: str) -> bool:
        """Remove the user's registration; report whether one existed."""
        with self.repository.lock:
            existing = self._registrations_of(user_id)
            for registration in existing:
                self.repository.delete(registration.id)
        return bool(existing)

    async def prepare_notification(self, sender_id: str, data: NotificationRequest) -> PushNotification:
        """Resolve the recipient's device and build the notification.

        The recipient defaults to the sender.  Delivery itself is left
        to the caller's ``NotificationSink``.
        """
        target = data.user_id or sender_id
        with self.repository.lock:
            device = next((r for r in self._registrations_of(target) if r.is_active), None)
        if device is None:
            raise NotFoundError("The user has no active device registration", error="No device registration found for user")
        notification = PushNotification(
            id=uuid.uuid4().hex,
            user_id=target,
            device_token=device.device_token,
            title=data.title,
            message=data.message,
            data=data.data,
            sent_at=self.clock(),
        )
        logger.info("Queued notification %s from user %s to user %s", notification.id, sender_id, target)
        return notification

    def active_device_count(self) -> int:
        return sum(1 for reg in self.repository.list() if reg.is_active)

    async def app_config(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.settings.api_version,
            "minSupportedAppVersion": "1.0.0",
            "features": {
                "pushNotifications": True,
                "biometricAuth": True,
                "offlineMode": False,
                "darkMode": True,
                "multiLanguage": False,
            },
            "endpoints": {"baseUrl": self.settings.public_base_url, "websocket": self.settings.websocket_url},
            "settings": {
                "sessionTimeout": 3600000,
                "maxRetries": 3,
                "requestTimeout": 30000,
                "cacheExpiry": 300000,
            },
            "workoutTypes": WORKOUT_TYPE_CATALOG,
        }

    async def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": self.clock(),
            "version": self.settings.api_version,
            "platform": "ios",
            "services": {
                "authentication": "operational",
                "database": "operational",
                "pushNotifications": "operational",
            },
            "registeredDevices": self.active_device_count(),
        }

    async def sync(self, owner_id: str, last_sync: Optional[datetime] = None) -> Dict[str, Any]:
        """Everything of the owner's that changed after ``last_sync``.

        Soft deleted clients and cancelled workouts are reported by id
        under ``deleted``; everything else that changed is returned in
        full under ``updated``.  Without ``last_sync`` the full data set
        is returned.
        """
        now = self.clock()
        since = last_sync or datetime.min.replace(tzinfo=timezone.utc)
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)

        def split(collection: ResourceCollectionService) -> Dict[str, Any]:
            deleted_status = collection.descriptor.deleted_status
            changed = [r for r in collection.owned(owner_id) if r.updated_at > since]
            return {
                "updated": [r for r in changed if r.status != deleted_status],
                "deleted": [r.id for r in changed if r.status == deleted_status],
            }

        profile = None
        try:
            coach = await self.coaches.get_profile(owner_id)
        except NotFoundError:
            coach = None
        if coach is not None and coach.updated_at > since:
            profile = coach

        return {
            "timestamp": now,
            "clients": split(self.clients),
            "workouts": split(self.workouts),
            "profile": {"updated": profile},
            "nextSync": now + SYNC_INTERVAL,
        }

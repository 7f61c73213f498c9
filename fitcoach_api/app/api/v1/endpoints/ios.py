"""
Endpoints used by the iOS companion app.

Notification delivery runs as a background task after the response is
sent; the response only confirms that the notification was queued.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from ....core.security import Principal, get_current_user
from ....schemas.device import DeviceRegisterRequest, NotificationRequest
from ....services.device_service import DeviceService
from ....services.notification_service import NotificationSink
from ...deps import get_device_service, get_notification_sink

router = APIRouter()


@router.post("/register-device")
async def register_device(
    data: DeviceRegisterRequest,
    current_user: Principal = Depends(get_current_user),
    devices: DeviceService = Depends(get_device_service),
) -> Dict[str, Any]:
    """Register the caller's device, replacing any earlier registration."""
    registration = await devices.register_device(current_user.user_id, data)
    return {
        "success": True,
        "message": "Device registered successfully for push notifications",
        "data": {"registrationId": registration.id, "userId": registration.user_id},
    }


@router.delete("/unregister-device")
async def unregister_device(
    current_user: Principal = Depends(get_current_user),
    devices: DeviceService = Depends(get_device_service),
) -> Dict[str, Any]:
    removed = await devices.unregister_device(current_user.user_id)
    message = "Device unregistered successfully" if removed else "No device registration found"
    return {"success": True, "message": message, "removed": removed}


@router.post("/send-notification")
async def send_notification(
    data: NotificationRequest,
    background_tasks: BackgroundTasks,
    current_user: Principal = Depends(get_current_user),
    devices: DeviceService = Depends(get_device_service),
    sink: NotificationSink = Depends(get_notification_sink),
) -> Dict[str, Any]:
    """Push a notification to ``userId`` (the caller by default)."""
    notification = await devices.prepare_notification(current_user.user_id, data)
    background_tasks.add_task(sink.send, notification)
    return {
        "success": True,
        "message": "Notification sent successfully",
        "data": {
            "notificationId": notification.id,
            "deviceToken": notification.masked_token,
            "sentAt": notification.sent_at,
        },
    }


@router.get("/app-config")
async def app_config(
    current_user: Principal = Depends(get_current_user),
    devices: DeviceService = Depends(get_device_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await devices.app_config()}


@router.get("/ios-health")
async def ios_health(devices: DeviceService = Depends(get_device_service)) -> Dict[str, Any]:
    return await devices.health()


@router.get("/sync")
async def sync(
    last_sync: Optional[datetime] = Query(None, alias="lastSync"),
    current_user: Principal = Depends(get_current_user),
    devices: DeviceService = Depends(get_device_service),
) -> Dict[str, Any]:
    """Clients, workouts and profile changed since ``lastSync`` (ISO 8601)."""
    data = await devices.sync(current_user.user_id, last_sync)
    next_sync = data.pop("nextSync")
    return {"success": True, "data": data, "nextSync": next_sync}

"""
Pydantic models for iOS device registration and push notifications.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import Field

from .common import ApiModel

DEVICE_TOKEN_LENGTH = 64


class DeviceRegistration(ApiModel):
    id: str
    user_id: str
    device_token: str
    platform: str = "ios"
    app_version: str = "unknown"
    os_version: str = "unknown"
    registered_at: datetime
    is_active: bool = True


class DeviceRegisterRequest(ApiModel):
    device_token: str = Field(..., min_length=DEVICE_TOKEN_LENGTH, max_length=DEVICE_TOKEN_LENGTH)
    platform: Literal["ios"]
    app_version: Optional[str] = Field(None, examples=["1.2.0"])
    os_version: Optional[str] = Field(None, examples=["17.4"])


class NotificationRequest(ApiModel):
    user_id: Optional[str] = Field(None, description="Recipient; defaults to the caller")
    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=200)
    data: Dict[str, Any] = Field(default_factory=dict)


class PushNotification(ApiModel):
    id: str
    user_id: str
    device_token: str
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    sent_at: datetime
    status: str = "queued"

    @property
    def masked_token(self) -> str:
        return self.device_token[:8] + "..."

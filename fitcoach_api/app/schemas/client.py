"""
Pydantic models for client data.

``Client`` is the stored record.  ``ClientCreate`` and ``ClientUpdate``
validate request bodies before they reach the service; unknown keys
are dropped by Pydantic, so only declared fields can ever be written.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .common import ApiModel, EntityBase, normalize_email

PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9\s\-().]{5,19}$")


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class FitnessLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EmergencyContact(ApiModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None


class Measurements(ApiModel):
    height: Optional[float] = None
    weight: Optional[float] = None
    body_fat: Optional[float] = None
    last_updated: Optional[datetime] = None


class Preferences(ApiModel):
    workout_time: str = "morning"
    workout_duration: int = 60
    intensity: str = "moderate"
    workout_types: List[str] = Field(default_factory=lambda: ["cardio"])


class Progress(ApiModel):
    sessions_completed: int = 0
    total_hours: float = 0.0
    average_rating: float = 0.0
    last_session: Optional[datetime] = None


class Client(EntityBase):
    owner_id: str = Field(alias="coachId")
    name: str
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    avatar: Optional[str] = None
    status: ClientStatus = ClientStatus.ACTIVE
    join_date: Optional[datetime] = None
    goals: List[str] = Field(default_factory=list)
    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    medical_notes: str = ""
    emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)
    measurements: Measurements = Field(default_factory=Measurements)
    preferences: Preferences = Field(default_factory=Preferences)
    progress: Progress = Field(default_factory=Progress)


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is not None and not PHONE_PATTERN.match(value.strip()):
        raise ValueError("Valid phone number is required")
    return value.strip() if value is not None else None


class ClientCreate(ApiModel):
    """Schema for creating a client."""

    name: str = Field(..., min_length=2, examples=["Sarah Johnson"])
    email: str = Field(..., examples=["sarah.johnson@email.com"])
    phone: Optional[str] = Field(None, examples=["+1-555-0123"])
    date_of_birth: Optional[date] = Field(None, examples=["1990-05-15"])
    goals: List[str] = Field(default_factory=list)
    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    medical_notes: str = Field("", max_length=1000)
    emergency_contact: Optional[EmergencyContact] = None
    measurements: Optional[Measurements] = None
    preferences: Optional[Preferences] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)


class ClientUpdate(ApiModel):
    """Schema for updating a client.

    All fields are optional; only provided fields will be updated.
    """

    name: str | None = Field(None, min_length=2)
    email: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    goals: List[str] | None = None
    fitness_level: FitnessLevel | None = None
    medical_notes: str | None = Field(None, max_length=1000)
    emergency_contact: EmergencyContact | None = None
    measurements: Measurements | None = None
    preferences: Preferences | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else None

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

"""
Pydantic models for workout sessions and templates.

A workout occupies a ``(date, time)`` slot in its coach's calendar.
Times are normalised to zero padded ``HH:MM`` so that ``9:00`` and
``09:00`` name the same slot and sort correctly.
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .common import ApiModel, EntityBase, normalize_time

UNKNOWN_CLIENT = "Unknown Client"


class WorkoutType(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"
    REHABILITATION = "rehabilitation"


class WorkoutStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSED = "missed"


class Exercise(ApiModel):
    name: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    rest_time: Optional[int] = None
    duration: Optional[int] = None
    intensity: Optional[str] = None
    notes: Optional[str] = None


class Workout(EntityBase):
    owner_id: str = Field(alias="coachId")
    client_id: str
    client_name: str = UNKNOWN_CLIENT
    title: str
    type: WorkoutType
    date: dt.date
    time: str
    duration: int
    status: WorkoutStatus = WorkoutStatus.SCHEDULED
    location: str = ""
    exercises: List[Exercise] = Field(default_factory=list)
    notes: str = ""
    completed_at: Optional[dt.datetime] = None
    rating: Optional[float] = None
    feedback: Optional[str] = None

    @field_validator("time")
    @classmethod
    def _time(cls, value: str) -> str:
        return normalize_time(value)


class WorkoutCreate(ApiModel):
    """Schema for scheduling a workout."""

    client_id: str = Field(..., min_length=1, examples=["1"])
    client_name: Optional[str] = None
    title: str = Field(..., min_length=2, examples=["Upper Body Strength"])
    type: WorkoutType = Field(..., examples=["strength"])
    date: dt.date = Field(..., examples=["2024-11-01"])
    time: str = Field(..., examples=["09:00"])
    duration: int = Field(..., ge=15, le=180, examples=[60])
    location: str = ""
    exercises: List[Exercise] = Field(default_factory=list)
    notes: str = ""

    @field_validator("time")
    @classmethod
    def _time(cls, value: str) -> str:
        return normalize_time(value)


class WorkoutUpdate(ApiModel):
    """Schema for updating a workout.

    All fields are optional; only provided fields will be updated.
    """

    title: str | None = Field(None, min_length=2)
    type: WorkoutType | None = None
    date: Optional[dt.date] = None
    time: str | None = None
    duration: int | None = Field(None, ge=15, le=180)
    status: WorkoutStatus | None = None
    location: str | None = None
    exercises: List[Exercise] | None = None
    notes: str | None = None
    rating: float | None = Field(None, ge=1, le=5)
    feedback: str | None = Field(None, max_length=1000)

    @field_validator("time")
    @classmethod
    def _time(cls, value: Optional[str]) -> Optional[str]:
        return normalize_time(value) if value is not None else None


class WorkoutTemplate(ApiModel):
    id: str
    name: str
    type: WorkoutType
    duration: int
    exercises: List[Exercise] = Field(default_factory=list)

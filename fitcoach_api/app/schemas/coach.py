"""
Pydantic models for coach profiles.

A coach profile belongs to exactly one user account (``userId`` on the
wire) and carries a weekly availability schedule keyed by weekday.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from .common import ApiModel, EntityBase, normalize_time

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class CoachStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Period(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


PERIOD_DAYS = {Period.WEEK: 7, Period.MONTH: 30, Period.QUARTER: 90, Period.YEAR: 365}


class ScheduleDay(ApiModel):
    start: str = Field(..., examples=["06:00"])
    end: str = Field(..., examples=["20:00"])
    available: bool

    @field_validator("start", "end")
    @classmethod
    def _time(cls, value: str) -> str:
        return normalize_time(value)


def _check_schedule(value: Dict[str, ScheduleDay]) -> Dict[str, ScheduleDay]:
    normalized = {day.lower(): slot for day, slot in value.items()}
    unknown = sorted(set(normalized) - set(WEEKDAYS))
    if unknown:
        raise ValueError(f"Invalid schedule format: unknown day(s) {', '.join(unknown)}")
    return normalized


def default_schedule() -> Dict[str, ScheduleDay]:
    weekday = {"start": "06:00", "end": "20:00", "available": True}
    schedule = {day: ScheduleDay(**weekday) for day in WEEKDAYS[:5]}
    schedule["saturday"] = ScheduleDay(start="08:00", end="16:00", available=True)
    schedule["sunday"] = ScheduleDay(start="10:00", end="14:00", available=False)
    return schedule


class Coach(EntityBase):
    owner_id: str = Field(alias="userId")
    name: str
    email: str
    specialization: str = ""
    experience: str = ""
    certifications: List[str] = Field(default_factory=list)
    avatar: Optional[str] = None
    bio: str = ""
    schedule: Dict[str, ScheduleDay] = Field(default_factory=default_schedule)
    status: CoachStatus = CoachStatus.ACTIVE


class CoachProfileUpdate(ApiModel):
    """Editable profile fields; only provided fields will be updated."""

    name: str | None = Field(None, min_length=2)
    bio: str | None = Field(None, max_length=500)
    specialization: str | None = None
    experience: str | None = None
    certifications: List[str] | None = None


class ScheduleUpdate(ApiModel):
    """Replacement weekly schedule."""

    schedule: Dict[str, ScheduleDay]

    @field_validator("schedule")
    @classmethod
    def _schedule(cls, value: Dict[str, ScheduleDay]) -> Dict[str, ScheduleDay]:
        return _check_schedule(value)

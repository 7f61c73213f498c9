"""
Shared Pydantic building blocks.

``ApiModel`` is the base of every stored record and response body: it
renders field names in camelCase on the wire while keeping snake_case
attributes in Python.  ``EntityBase`` adds the bookkeeping fields that
the collection service manages on every record.  The envelope models
describe the ``{"success": true, "data": ...}`` shape returned by all
resource endpoints.
"""

import re
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def normalize_email(value: str) -> str:
    """Trim and lowercase ``value``; raise ``ValueError`` if it is not an email."""
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Valid email is required")
    return value


def normalize_time(value: str) -> str:
    """Return ``H:MM``/``HH:MM`` as zero padded ``HH:MM``."""
    if not TIME_PATTERN.match(value):
        raise ValueError("Valid time in HH:MM format is required")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


class ApiModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class EntityBase(ApiModel):
    """Fields owned by the collection service rather than the caller."""

    id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int


class DataResponse(ApiModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class ListResponse(ApiModel, Generic[T]):
    success: bool = True
    data: List[T] = Field(default_factory=list)
    pagination: Pagination
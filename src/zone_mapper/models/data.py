"""Pydantic models for data-layer records.

Timestamps on these models are naive wall-clock readings in the configured
local zone (``America/Chicago`` unless overridden). Because they live in a
``data`` module they are classified as Local provenance.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PersonDto(BaseModel):
    """A person row as stored by the data layer."""

    id: int = 0
    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None


class AppointmentDto(BaseModel):
    """An appointment row as stored by the data layer.

    ``appointment_time`` is a passthrough field: it keeps its wall-clock value
    in both directions.
    """

    id: int = 0
    person_id: int = 0
    description: str = ""
    appointment_time: Optional[datetime] = None
    created_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None


__all__ = ["AppointmentDto", "PersonDto"]

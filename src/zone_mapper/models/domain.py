"""Pydantic models for domain-layer entities.

Timestamps on these models are UTC-aware instants. Because they live in a
``domain`` module they are classified as UTC provenance.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Person(BaseModel):
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None
    # Display name produced by the injected NameFormatter; never copied back
    # to the data layer.
    full_name: str = ""


class Appointment(BaseModel):
    id: int = 0
    person_id: int = 0
    description: str = ""
    appointment_time: Optional[datetime] = None
    created_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None


__all__ = ["Appointment", "Person"]

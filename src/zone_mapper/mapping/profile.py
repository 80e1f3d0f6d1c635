"""Default mapping configuration for the Person and Appointment records.

Registers both directions of both pairs with the timestamp conversion hook
attached explicitly:

    PersonDto      -> Person        local -> UTC, full_name from NameFormatter
    Person         -> PersonDto     UTC -> local
    AppointmentDto -> Appointment   local -> UTC, appointment_time passthrough
    Appointment    -> AppointmentDto UTC -> local, appointment_time passthrough
"""
from __future__ import annotations

from typing import Any

from ..models.data import AppointmentDto, PersonDto
from ..models.domain import Appointment, Person
from ..services import NameFormatter
from .registry import MappingRegistry

__all__ = ["FullNameResolver", "register_default_pairs"]


class FullNameResolver:
    """Resolve ``Person.full_name`` from a PersonDto through a `NameFormatter`."""

    def __init__(self, formatter: NameFormatter) -> None:
        self.formatter = formatter

    def __call__(self, source: Any) -> str:
        return self.formatter.format_full_name(source.first_name, source.last_name)


def register_default_pairs(registry: MappingRegistry, formatter: NameFormatter) -> MappingRegistry:
    registry.register(PersonDto, Person).for_field("full_name", FullNameResolver(formatter))
    registry.register(Person, PersonDto)
    registry.register(AppointmentDto, Appointment)
    registry.register(Appointment, AppointmentDto)
    return registry

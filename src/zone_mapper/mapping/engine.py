"""Post-copy timestamp conversion.

The engine runs after the field copier has fully populated the destination
record. It walks the destination type's timestamp fields and rewrites each
value in place:

    LOCAL_TO_UTC: naive wall-clock (any tag stripped) -> UTC-aware instant
    UTC_TO_LOCAL: UTC instant (tag forced to UTC)     -> naive wall-clock

Skipped without error:
    - pairs whose direction is NONE
    - passthrough fields (name or alias, case-insensitive)
    - fields holding None

`TimestampConversionHook` binds one pair's zone, passthrough set and field
descriptors so the registry can attach it as an ordinary after-map hook.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel

from .fields import FieldDescriptor, timestamp_fields
from .provenance import Direction, direction
from .zones import ZoneHandle

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_PASSTHROUGH",
    "TimestampConversionHook",
    "convert_timestamps",
    "normalize_names",
]

DEFAULT_PASSTHROUGH: frozenset[str] = frozenset({"appointment_time"})


def normalize_names(names: Optional[Iterable[str]]) -> frozenset[str]:
    """Casefold a passthrough collection for case-insensitive lookups.

    ``None`` means `DEFAULT_PASSTHROUGH`; an empty collection disables
    passthrough. A single string is one field name, not a set of letters.
    """
    if names is None:
        names = DEFAULT_PASSTHROUGH
    elif isinstance(names, str):
        names = (names,)
    return frozenset(n.strip().casefold() for n in names if n and n.strip())


def _is_passthrough(descriptor: FieldDescriptor, passthrough: frozenset[str]) -> bool:
    return any(n.casefold() in passthrough for n in descriptor.names)


def _sweep(
    destination: BaseModel,
    fields: Sequence[FieldDescriptor],
    flow: Direction,
    zone: ZoneHandle,
    passthrough: frozenset[str],
) -> int:
    converted = 0
    for descriptor in fields:
        if _is_passthrough(descriptor, passthrough):
            continue
        value = getattr(destination, descriptor.name, None)
        if not isinstance(value, datetime):
            continue
        if flow is Direction.LOCAL_TO_UTC:
            new_value = zone.to_utc(value)
        else:
            new_value = zone.from_utc(value)
        setattr(destination, descriptor.name, new_value)
        logger.debug(
            "%s.%s %s: %s -> %s",
            type(destination).__name__,
            descriptor.name,
            flow.value,
            value.isoformat(),
            new_value.isoformat(),
        )
        converted += 1
    return converted


def convert_timestamps(
    source_type: type,
    dest_type: type[BaseModel],
    destination: BaseModel,
    zone: ZoneHandle,
    passthrough: Optional[Iterable[str]] = DEFAULT_PASSTHROUGH,
) -> BaseModel:
    """Convert the timestamp fields of an already-copied ``destination`` in place.

    Args:
        source_type: Type the destination was copied from (decides direction)
        dest_type: Declared destination type (decides which fields are swept)
        destination: Record produced by the field copier; mutated in place
        zone: Resolved local zone
        passthrough: Field names left untouched (case-insensitive); ``None``
            means `DEFAULT_PASSTHROUGH` and a plain string is a single name

    Returns:
        The same ``destination`` object, for chaining.
    """
    flow = direction(source_type, dest_type)
    if flow is Direction.NONE:
        return destination
    _sweep(destination, timestamp_fields(dest_type), flow, zone, normalize_names(passthrough))
    return destination


class TimestampConversionHook:
    """After-map hook converting one registered pair's timestamps.

    Direction and field descriptors are computed when the hook is built (at
    registration time); calling the hook only reads and writes field values.
    """

    def __init__(
        self,
        source_type: type,
        dest_type: type[BaseModel],
        zone: ZoneHandle,
        passthrough: Optional[Iterable[str]] = DEFAULT_PASSTHROUGH,
    ) -> None:
        self.source_type = source_type
        self.dest_type = dest_type
        self.zone = zone
        self.passthrough = normalize_names(passthrough)
        self.direction = direction(source_type, dest_type)
        self.fields = timestamp_fields(dest_type)

    @property
    def converted_fields(self) -> tuple[FieldDescriptor, ...]:
        if self.direction is Direction.NONE:
            return ()
        return tuple(f for f in self.fields if not _is_passthrough(f, self.passthrough))

    @property
    def passthrough_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if _is_passthrough(f, self.passthrough))

    def __call__(self, source: Any, destination: BaseModel) -> None:
        if self.direction is Direction.NONE:
            return
        _sweep(destination, self.fields, self.direction, self.zone, self.passthrough)

    def __repr__(self) -> str:
        return (
            f"TimestampConversionHook({self.source_type.__name__} -> {self.dest_type.__name__}, "
            f"{self.direction.value}, zone={self.zone.key})"
        )

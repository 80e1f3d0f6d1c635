"""Provenance classification of record types and mapping direction.

Provenance is structural: it comes from the module a record type is defined
in. A dotted module path with a ``data`` segment marks a Local type (naive
wall-clock timestamps in the configured zone); a ``domain`` segment marks a
UTC type. Segments are compared case-insensitively, so
``zone_mapper.models.data`` and ``billing.Data.records`` are both Local while
``app.database`` is not.

Direction Table:
    LOCAL -> UTC    LOCAL_TO_UTC
    UTC   -> LOCAL  UTC_TO_LOCAL
    anything else   NONE (pair is skipped, no error)
"""
from __future__ import annotations

from enum import Enum

from ..errors import ConfigurationError

__all__ = [
    "DATA_MARKER",
    "DOMAIN_MARKER",
    "Direction",
    "Provenance",
    "direction",
    "provenance_of",
]

DATA_MARKER = "data"
DOMAIN_MARKER = "domain"


class Provenance(str, Enum):
    LOCAL = "local"
    UTC = "utc"
    NONE = "none"


class Direction(str, Enum):
    LOCAL_TO_UTC = "local_to_utc"
    UTC_TO_LOCAL = "utc_to_local"
    NONE = "none"

    def reversed(self) -> "Direction":
        if self is Direction.LOCAL_TO_UTC:
            return Direction.UTC_TO_LOCAL
        if self is Direction.UTC_TO_LOCAL:
            return Direction.LOCAL_TO_UTC
        return Direction.NONE


def provenance_of(record_type: type) -> Provenance:
    """Classify ``record_type`` by its module path.

    Raises:
        ConfigurationError: the module path carries both markers
    """
    segments = {s.casefold() for s in (record_type.__module__ or "").split(".")}
    is_local = DATA_MARKER in segments
    is_utc = DOMAIN_MARKER in segments
    if is_local and is_utc:
        raise ConfigurationError(
            f"{record_type.__module__}.{record_type.__qualname__} is marked both "
            f"'{DATA_MARKER}' and '{DOMAIN_MARKER}'; a record type must have one provenance"
        )
    if is_local:
        return Provenance.LOCAL
    if is_utc:
        return Provenance.UTC
    return Provenance.NONE


def direction(source_type: type, dest_type: type) -> Direction:
    """Conversion direction for mapping ``source_type`` onto ``dest_type``."""
    src = provenance_of(source_type)
    dst = provenance_of(dest_type)
    if src is Provenance.LOCAL and dst is Provenance.UTC:
        return Direction.LOCAL_TO_UTC
    if src is Provenance.UTC and dst is Provenance.LOCAL:
        return Direction.UTC_TO_LOCAL
    return Direction.NONE

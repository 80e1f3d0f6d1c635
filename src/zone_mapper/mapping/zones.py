"""Zone resolution and DST-aware wall-clock <-> UTC conversion.

The data layer stores naive wall-clock readings in a single configured zone;
the domain layer stores UTC-aware instants. `resolve_zone` turns the configured
zone name into a `ZoneHandle` exactly once per name; the handle does every
conversion using the zone's transition rules for the date being converted,
never a fixed offset.

Accepted Identifiers:
    IANA keys (``America/Chicago``) and the Windows-style names listed in
    ``WINDOWS_ZONE_ALIASES`` (``Central Standard Time``).

DST Disambiguation:
    A wall-clock reading inside a spring-forward gap or a fall-back overlap has
    two candidate offsets. The standard-time candidate (``dst() == 0``) is
    used. When neither or both candidates are standard time, the
    pre-transition reading (``fold=0``) is used.

    America/Chicago examples:
        2024-03-10 02:30 (gap)     -> CST, UTC-6 -> 08:30Z
        2024-11-03 01:30 (overlap) -> CST, UTC-6 -> 07:30Z
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["WINDOWS_ZONE_ALIASES", "ZoneHandle", "resolve_zone"]

WINDOWS_ZONE_ALIASES: dict[str, str] = {
    "central standard time": "America/Chicago",
    "eastern standard time": "America/New_York",
    "mountain standard time": "America/Denver",
    "us mountain standard time": "America/Phoenix",
    "pacific standard time": "America/Los_Angeles",
    "alaskan standard time": "America/Anchorage",
    "hawaiian standard time": "Pacific/Honolulu",
    "utc": "UTC",
}


@dataclass(frozen=True)
class ZoneHandle:
    """Resolved local zone; immutable and safe to share across threads."""

    zone_id: str
    key: str
    zone: ZoneInfo

    def _candidates(self, local: datetime) -> tuple[datetime, datetime]:
        naive = local.replace(tzinfo=None)
        return (
            naive.replace(tzinfo=self.zone, fold=0),
            naive.replace(tzinfo=self.zone, fold=1),
        )

    def _resolve(self, local: datetime) -> datetime:
        early, late = self._candidates(local)
        if early.utcoffset() == late.utcoffset():
            return early
        early_standard = not early.dst()
        late_standard = not late.dst()
        if late_standard and not early_standard:
            return late
        return early

    def utc_offset(self, local: datetime) -> timedelta:
        """Offset applied to ``local`` (wall-clock) under the disambiguation rule."""
        offset = self._resolve(local).utcoffset()
        assert offset is not None
        return offset

    def is_ambiguous(self, local: datetime) -> bool:
        """True for a wall-clock reading that occurs twice (fall-back overlap)."""
        early, late = self._candidates(local)
        return early.utcoffset() != late.utcoffset() and not self.is_imaginary(local)

    def is_imaginary(self, local: datetime) -> bool:
        """True for a wall-clock reading skipped by a spring-forward gap."""
        naive = local.replace(tzinfo=None)
        early, _late = self._candidates(local)
        back = early.astimezone(timezone.utc).astimezone(self.zone).replace(tzinfo=None)
        return back != naive

    def to_utc(self, local: datetime) -> datetime:
        """Convert a wall-clock reading in this zone to a UTC-aware instant.

        Any tzinfo carried by ``local`` is discarded first: the value is read
        as a local wall clock regardless of its tag.
        """
        return self._resolve(local).astimezone(timezone.utc)

    def from_utc(self, instant: datetime) -> datetime:
        """Convert a UTC instant to a naive wall-clock reading in this zone.

        The value is relabelled as UTC whatever tzinfo it carries (a naive
        value is taken to already be UTC).
        """
        local = instant.replace(tzinfo=timezone.utc).astimezone(self.zone)
        return local.replace(tzinfo=None, fold=0)


@lru_cache(maxsize=None)
def resolve_zone(zone_id: str) -> ZoneHandle:
    """Resolve ``zone_id`` into a `ZoneHandle`.

    Args:
        zone_id: IANA key or a Windows-style alias

    Returns:
        Cached handle for the zone

    Raises:
        ConfigurationError: identifier is blank or unknown to the zone database
    """
    if not isinstance(zone_id, str) or not zone_id.strip():
        raise ConfigurationError(f"Time zone identifier must be a non-empty string, got {zone_id!r}")
    cleaned = zone_id.strip()
    key = WINDOWS_ZONE_ALIASES.get(cleaned.casefold(), cleaned)
    try:
        zone = ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ConfigurationError(f"Unknown time zone identifier {zone_id!r}") from e
    logger.debug("Resolved time zone %r -> %s", zone_id, key)
    return ZoneHandle(zone_id=cleaned, key=key, zone=zone)

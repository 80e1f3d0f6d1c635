"""Public facade for zone-aware record mapping.

This module provides the stable public API for converting between data-layer
records (local wall-clock timestamps) and domain-layer records (UTC
timestamps). The mechanics live in the `zone_mapper.mapping` package.

Public Functions:
    build_mapper: Resolve the zone, register the default pairs, validate
    get_default_mapper: Cached mapper built from `Settings`
    map_record: Convert a record with the default mapper

Startup Contract:
    `build_mapper` either returns a validated, frozen registry or raises
    `ConfigurationError`. Zone and configuration problems never surface on
    individual conversions.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional, TypeVar

from pydantic import BaseModel

from .config import Settings, get_settings
from .mapping.profile import register_default_pairs
from .mapping.registry import MappingRegistry
from .mapping.zones import resolve_zone
from .services import FullNameFormatter, NameFormatter, StaticZoneLabels

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

__all__ = ["build_mapper", "get_default_mapper", "map_record"]


def _formatter_from_settings(settings: Settings) -> NameFormatter:
    if settings.FULL_NAME_WITH_ZONE_LABEL:
        return FullNameFormatter(StaticZoneLabels(), provider_id=settings.ZONE_LABEL_PROVIDER_ID)
    return FullNameFormatter()


def build_mapper(
    settings: Optional[Settings] = None,
    *,
    zone_id: Optional[str] = None,
    formatter: Optional[NameFormatter] = None,
    passthrough: Optional[Iterable[str]] = None,
) -> MappingRegistry:
    """Build and validate the default mapping registry.

    Args:
        settings: Configuration source; `get_settings()` when omitted
        zone_id: Override for ``settings.LOCAL_TIMEZONE``
        formatter: Name formatter for ``Person.full_name``; derived from
            settings when omitted
        passthrough: Override for ``settings.PASSTHROUGH_FIELDS``

    Returns:
        Validated registry ready for `MappingRegistry.map`

    Raises:
        ConfigurationError: unknown zone or an unsatisfiable pair
    """
    settings = settings or get_settings()
    zone = resolve_zone(zone_id or settings.LOCAL_TIMEZONE)
    registry = MappingRegistry(
        zone,
        passthrough=settings.PASSTHROUGH_FIELDS if passthrough is None else passthrough,
    )
    register_default_pairs(registry, formatter or _formatter_from_settings(settings))
    registry.map_all()
    return registry


@lru_cache(maxsize=1)
def get_default_mapper() -> MappingRegistry:
    return build_mapper()


def map_record(value: BaseModel, dest_type: type[T]) -> T:
    """Convert ``value`` into ``dest_type`` using the default mapper."""
    return get_default_mapper().map(value, dest_type)

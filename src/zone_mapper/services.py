"""Collaborator services injected into the mapping registry.

The registry only knows the `NameFormatter` capability; which concrete
formatter (and which zone label source behind it) is used is decided by
whoever calls `build_mapper`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

__all__ = [
    "BlockingZoneLabelLookup",
    "FullNameFormatter",
    "NameFormatter",
    "StaticZoneLabels",
    "ZoneLabelLookup",
]


@runtime_checkable
class NameFormatter(Protocol):
    def format_full_name(self, first_name: str, last_name: str) -> str: ...


@runtime_checkable
class ZoneLabelLookup(Protocol):
    def get_zone_label(self, provider_id: int) -> str: ...


class StaticZoneLabels:
    """Provider 0 is the Central zone; every other provider is Eastern."""

    def get_zone_label(self, provider_id: int) -> str:
        return "Central" if provider_id == 0 else "Eastern"


class BlockingZoneLabelLookup:
    """Adapt an async label lookup to the synchronous `ZoneLabelLookup` protocol.

    Each call runs the coroutine to completion before returning, so the
    mapping pipeline never proceeds with a pending label. Must not be called
    from inside a running event loop.
    """

    def __init__(self, fetch: Callable[[int], Awaitable[str]]) -> None:
        self._fetch = fetch

    def get_zone_label(self, provider_id: int) -> str:
        async def _run() -> str:
            return await self._fetch(provider_id)

        return asyncio.run(_run())


class FullNameFormatter:
    """Format ``"Last, First"``, optionally suffixed with a zone label.

    With a ``label_lookup`` the result becomes ``"Last, First : Central"``.
    """

    def __init__(
        self,
        label_lookup: Optional[ZoneLabelLookup] = None,
        provider_id: int = 0,
    ) -> None:
        self.label_lookup = label_lookup
        self.provider_id = provider_id

    def format_full_name(self, first_name: str, last_name: str) -> str:
        name = f"{last_name}, {first_name}"
        if self.label_lookup is None:
            return name
        label = self.label_lookup.get_zone_label(self.provider_id)
        logger.debug("Zone label for provider %s: %s", self.provider_id, label)
        return f"{name} : {label}"

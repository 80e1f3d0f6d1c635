"""Mapping registry: one atomic copy + resolve + after-map operation per pair.

Each registered (source, destination) pair composes, in this order:

1. per-field resolvers, evaluated against the source record
2. the field copier (same-name, same-type fields) building the destination
3. after-map hooks, in registration order; the timestamp conversion hook is
   attached first when ``convert_timestamps`` is true

Lifecycle:
    register() ...  -> map_all() validates every pair and freezes the
    registry -> map() serves conversion requests. Registering after
    validation, or mapping before it, is a configuration error.

Validation:
    A destination field is satisfied when the copy plan fills it, a resolver
    is registered for it, or it is explicitly ignored. `map_all` collects every
    unsatisfied field across all pairs into one `ConfigurationError`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from pydantic import BaseModel

from ..errors import ConfigurationError, MappingNotFoundError
from .copier import build_copy_plan, copy_fields, optional_into_required
from .engine import TimestampConversionHook, normalize_names
from .provenance import Direction, direction
from .zones import ZoneHandle

logger = logging.getLogger(__name__)

__all__ = ["AfterMapHook", "Copier", "MappingHandle", "MappingRegistry", "Resolver"]

T = TypeVar("T", bound=BaseModel)

Resolver = Callable[[Any], Any]
AfterMapHook = Callable[[Any, Any], None]
Copier = Callable[..., BaseModel]


class MappingHandle:
    """Configuration and execution of a single registered pair."""

    def __init__(
        self,
        registry: "MappingRegistry",
        source_type: type[BaseModel],
        dest_type: type[BaseModel],
        *,
        passthrough: Iterable[str],
        convert_timestamps: bool,
        copier: Copier,
    ) -> None:
        self._registry = registry
        self.source_type = source_type
        self.dest_type = dest_type
        self.copier = copier
        self.copy_plan: Tuple[str, ...] = build_copy_plan(source_type, dest_type)
        self.resolvers: Dict[str, Resolver] = {}
        self.ignored: set[str] = set()
        self.hooks: List[AfterMapHook] = []
        self.timestamp_hook: Optional[TimestampConversionHook] = None
        if convert_timestamps:
            self.timestamp_hook = TimestampConversionHook(
                source_type, dest_type, registry.zone, passthrough
            )
            self.hooks.append(self.timestamp_hook)

    @property
    def direction(self) -> Direction:
        if self.timestamp_hook is None:
            return Direction.NONE
        return self.timestamp_hook.direction

    def _check_open(self) -> None:
        if self._registry.validated:
            raise ConfigurationError(
                f"Mapping {self} cannot be changed after map_all() has validated the registry"
            )

    def for_field(self, name: str, resolver: Resolver) -> "MappingHandle":
        """Fill destination field ``name`` with ``resolver(source)``."""
        self._check_open()
        if name in self.resolvers:
            raise ConfigurationError(f"{self}: field {name!r} already has a resolver")
        self.resolvers[name] = resolver
        return self

    def ignore(self, *names: str) -> "MappingHandle":
        """Leave destination fields at their declared defaults."""
        self._check_open()
        self.ignored.update(names)
        return self

    def after_map(self, hook: AfterMapHook) -> "MappingHandle":
        self._check_open()
        self.hooks.append(hook)
        return self

    def problems(self) -> List[str]:
        """Describe every reason this pair cannot be mapped."""
        dest_fields = self.dest_type.model_fields
        found: List[str] = []
        for name in list(self.resolvers) + sorted(self.ignored):
            if name not in dest_fields:
                found.append(f"{self.dest_type.__name__}.{name} does not exist ({self})")
        source_fields = self.source_type.model_fields
        covered = set(self.copy_plan) | set(self.resolvers) | self.ignored
        for name, dest_info in dest_fields.items():
            if name in covered:
                continue
            source_info = source_fields.get(name)
            if source_info is not None and optional_into_required(source_info, dest_info):
                found.append(
                    f"{self.dest_type.__name__}.{name} cannot hold None but "
                    f"{self.source_type.__name__}.{name} is optional ({self})"
                )
            else:
                found.append(
                    f"{self.dest_type.__name__}.{name} has no source field and no resolver ({self})"
                )
        return found

    def map(self, source: BaseModel) -> BaseModel:
        resolved = {name: resolver(source) for name, resolver in self.resolvers.items()}
        destination = self.copier(source, self.dest_type, self.copy_plan, resolved)
        for hook in self.hooks:
            hook(source, destination)
        return destination

    def __repr__(self) -> str:
        return f"{self.source_type.__name__} -> {self.dest_type.__name__}"


class MappingRegistry:
    """Registered pairs sharing one resolved zone and a default passthrough set."""

    def __init__(
        self,
        zone: ZoneHandle,
        *,
        passthrough: Optional[Iterable[str]] = None,
    ) -> None:
        self.zone = zone
        self.passthrough = normalize_names(passthrough)
        self._pairs: Dict[Tuple[type, type], MappingHandle] = {}
        self._validated = False

    @property
    def validated(self) -> bool:
        return self._validated

    def register(
        self,
        source_type: type[BaseModel],
        dest_type: type[BaseModel],
        passthrough: Optional[Iterable[str]] = None,
        *,
        resolvers: Optional[Dict[str, Resolver]] = None,
        ignore: Iterable[str] = (),
        convert_timestamps: bool = True,
        after_map: Iterable[AfterMapHook] = (),
        copier: Copier = copy_fields,
    ) -> MappingHandle:
        """Register the pair ``source_type -> dest_type``.

        Args:
            source_type: Record type mapped from
            dest_type: Record type mapped to
            passthrough: Timestamp field names exempt from conversion for this
                pair; defaults to the registry-wide set
            resolvers: Destination field name -> callable taking the source record
            ignore: Destination fields deliberately left at their defaults
            convert_timestamps: Attach the timestamp conversion hook
            after_map: Extra hooks run after the copy (and after conversion)
            copier: Field copy function; defaults to `copy_fields`

        Returns:
            Handle for further fluent configuration of the pair.

        Raises:
            ConfigurationError: duplicate pair, registry already validated, or
                a type marked with both provenances
        """
        if self._validated:
            raise ConfigurationError(
                f"Cannot register {source_type.__name__} -> {dest_type.__name__}: "
                "registry already validated"
            )
        key = (source_type, dest_type)
        if key in self._pairs:
            raise ConfigurationError(
                f"Mapping {source_type.__name__} -> {dest_type.__name__} is already registered"
            )
        # Raises for a type carrying both provenance markers.
        direction(source_type, dest_type)
        handle = MappingHandle(
            self,
            source_type,
            dest_type,
            passthrough=self.passthrough if passthrough is None else passthrough,
            convert_timestamps=convert_timestamps,
            copier=copier,
        )
        for name, resolver in (resolvers or {}).items():
            handle.for_field(name, resolver)
        handle.ignore(*ignore)
        for hook in after_map:
            handle.after_map(hook)
        self._pairs[key] = handle
        logger.debug("Registered mapping %s (%s)", handle, handle.direction.value)
        return handle

    def map_all(self) -> None:
        """Validate every registered pair, then freeze the registry.

        Raises:
            ConfigurationError: listing every unsatisfiable destination field
        """
        problems: List[str] = []
        for handle in self._pairs.values():
            problems.extend(handle.problems())
        if problems:
            raise ConfigurationError(
                f"Mapping configuration is invalid ({len(problems)} problem(s))", problems
            )
        self._validated = True
        logger.debug(
            "Validated %d mapping pair(s); local zone %s", len(self._pairs), self.zone.key
        )

    def find(self, source_type: type, dest_type: type) -> MappingHandle:
        """Look up the handle for ``source_type`` (or a base class) -> ``dest_type``."""
        for candidate in source_type.__mro__:
            handle = self._pairs.get((candidate, dest_type))
            if handle is not None:
                return handle
        raise MappingNotFoundError(source_type, dest_type)

    def map(self, value: BaseModel, dest_type: type[T]) -> T:
        """Convert ``value`` into a new ``dest_type`` record.

        Raises:
            ConfigurationError: `map_all` has not validated the registry yet
            MappingNotFoundError: the pair was never registered
        """
        if not self._validated:
            raise ConfigurationError("map_all() must validate the registry before mapping")
        handle = self.find(type(value), dest_type)
        return handle.map(value)  # type: ignore[return-value]

    def pairs(self) -> Iterator[MappingHandle]:
        return iter(self._pairs.values())

    def __len__(self) -> int:
        return len(self._pairs)

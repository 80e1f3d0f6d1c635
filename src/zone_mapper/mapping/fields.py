"""Timestamp field discovery for pydantic record types.

A field is a timestamp field when its declared annotation is exactly
``datetime`` or ``Optional[datetime]``. Field names play no part here;
passthrough exclusion by name is the conversion engine's job.

Excluded:
    - ``date`` / ``time`` / ``timedelta`` fields
    - collections of datetimes and nested models
    - fields that cannot be assigned (frozen models, ``Field(frozen=True)``)

Descriptor lists are computed once per type and cached, so the registry can
build them at registration time and conversions never re-inspect a type.
"""
from __future__ import annotations

import types
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional, Union, get_args, get_origin

from pydantic import BaseModel

__all__ = ["FieldDescriptor", "is_timestamp_annotation", "timestamp_fields", "unwrap_optional"]


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    alias: Optional[str] = None
    optional: bool = False

    @property
    def names(self) -> tuple[str, ...]:
        """Name plus alias (when set); passthrough matching checks both."""
        if self.alias and self.alias != self.name:
            return (self.name, self.alias)
        return (self.name,)


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(get_args(annotation)) == 2:
            return args[0], True
    return annotation, False


def is_timestamp_annotation(annotation: Any) -> bool:
    """True for ``datetime`` and ``Optional[datetime]``; nothing else."""
    inner, _optional = unwrap_optional(annotation)
    return inner is datetime


@lru_cache(maxsize=None)
def timestamp_fields(record_type: type[BaseModel]) -> tuple[FieldDescriptor, ...]:
    """Return the assignable timestamp fields of ``record_type`` in declaration order."""
    if record_type.model_config.get("frozen"):
        return ()
    found: list[FieldDescriptor] = []
    for name, info in record_type.model_fields.items():
        if info.frozen:
            continue
        if not is_timestamp_annotation(info.annotation):
            continue
        _, optional = unwrap_optional(info.annotation)
        found.append(FieldDescriptor(name=name, alias=info.alias, optional=optional))
    return tuple(found)

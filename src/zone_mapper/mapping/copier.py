"""Same-name, same-type field copy between pydantic record types.

A copy plan lists the destination fields that have a same-named source field
with the same declared type. ``datetime`` copies into ``Optional[datetime]``,
but an ``Optional`` source never fills a destination field that cannot hold
``None``; registry validation reports such fields instead. Plans are built
once per pair at registration time. Copying builds the destination through
normal pydantic validation; values are deep-copied so the destination never
shares mutable state with the source.
"""
from __future__ import annotations

import copy
from typing import Any, Mapping, Optional

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .fields import unwrap_optional

__all__ = ["build_copy_plan", "copy_fields", "optional_into_required"]


def _input_key(name: str, info: FieldInfo) -> str:
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def optional_into_required(source_info: FieldInfo, dest_info: FieldInfo) -> bool:
    """True when an ``Optional`` source would feed a destination that rejects ``None``."""
    _, source_optional = unwrap_optional(source_info.annotation)
    _, dest_optional = unwrap_optional(dest_info.annotation)
    return source_optional and not dest_optional


def _compatible(source_info: FieldInfo, dest_info: FieldInfo) -> bool:
    src, _ = unwrap_optional(source_info.annotation)
    dst, _ = unwrap_optional(dest_info.annotation)
    return src == dst and not optional_into_required(source_info, dest_info)


def build_copy_plan(source_type: type[BaseModel], dest_type: type[BaseModel]) -> tuple[str, ...]:
    """Destination field names the copier fills from ``source_type``."""
    source_fields = source_type.model_fields
    plan = []
    for name, dest_info in dest_type.model_fields.items():
        source_info = source_fields.get(name)
        if source_info is not None and _compatible(source_info, dest_info):
            plan.append(name)
    return tuple(plan)


def copy_fields(
    source: BaseModel,
    dest_type: type[BaseModel],
    plan: Optional[tuple[str, ...]] = None,
    resolved: Optional[Mapping[str, Any]] = None,
) -> BaseModel:
    """Build a ``dest_type`` record from ``source``.

    Args:
        source: Record to copy from
        dest_type: Destination record type
        plan: Field names to copy; computed on the fly when omitted
        resolved: Values produced by per-field resolvers; these win over copies

    Returns:
        New destination record. Fields outside ``plan`` and ``resolved`` keep
        their declared defaults.
    """
    if plan is None:
        plan = build_copy_plan(type(source), dest_type)
    dest_fields = dest_type.model_fields
    values: dict[str, Any] = {}
    for name in plan:
        values[_input_key(name, dest_fields[name])] = copy.deepcopy(getattr(source, name))
    for name, value in (resolved or {}).items():
        values[_input_key(name, dest_fields[name])] = value
    return dest_type.model_validate(values)

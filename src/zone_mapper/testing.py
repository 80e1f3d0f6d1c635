"""Assertion helpers for tests of mapped records.

`assert_equivalent_excluding_converted_dates` compares two records member by
member (they may be different types sharing field names) while skipping the
timestamp fields that undergo zone conversion. Passthrough timestamp fields
are still compared.
"""
from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel

from .mapping.engine import DEFAULT_PASSTHROUGH, normalize_names
from .mapping.fields import timestamp_fields

__all__ = ["assert_equivalent_excluding_converted_dates", "converted_date_fields"]


def converted_date_fields(
    *record_types: type[BaseModel],
    passthrough: Optional[Iterable[str]] = DEFAULT_PASSTHROUGH,
) -> frozenset[str]:
    """Names of timestamp fields on any of ``record_types`` that are not passthrough."""
    exempt = normalize_names(passthrough)
    names: set[str] = set()
    for record_type in record_types:
        for descriptor in timestamp_fields(record_type):
            if not any(n.casefold() in exempt for n in descriptor.names):
                names.add(descriptor.name)
    return frozenset(names)


def assert_equivalent_excluding_converted_dates(
    actual: BaseModel,
    expected: BaseModel,
    passthrough: Optional[Iterable[str]] = DEFAULT_PASSTHROUGH,
) -> None:
    """Assert every non-converted member of ``expected`` equals the one on ``actual``."""
    excluded = converted_date_fields(type(actual), type(expected), passthrough=passthrough)
    mismatches = []
    for name in type(expected).model_fields:
        if name in excluded:
            continue
        if name not in type(actual).model_fields:
            mismatches.append(f"{name}: missing on {type(actual).__name__}")
            continue
        got = getattr(actual, name)
        want = getattr(expected, name)
        if got != want:
            mismatches.append(f"{name}: expected {want!r}, got {got!r}")
    assert not mismatches, (
        f"{type(actual).__name__} is not equivalent to {type(expected).__name__}:\n"
        + "\n".join(mismatches)
    )

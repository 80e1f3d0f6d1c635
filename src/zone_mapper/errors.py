"""Exception types raised by zone-aware-mapper.

Only configuration problems are errors. Mapping a record never raises because
of its timestamps: absent values, non-timestamp fields and pairs without a
provenance direction are skipped silently by the conversion engine.
"""
from __future__ import annotations

__all__ = ["ConfigurationError", "MappingNotFoundError"]


class ConfigurationError(Exception):
    """Raised while building the mapper: unknown zone, unsatisfiable pair, etc.

    ``problems`` carries one line per offending item so callers (and the CLI)
    can show every problem at once instead of the first one only.
    """

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        self.problems = list(problems or [])
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class MappingNotFoundError(LookupError):
    """No mapping is registered for the requested (source, destination) pair."""

    def __init__(self, source_type: type, dest_type: type) -> None:
        self.source_type = source_type
        self.dest_type = dest_type
        super().__init__(
            f"No mapping registered for {source_type.__name__} -> {dest_type.__name__}"
        )

"""Internal mapping subpackage for zone-aware record conversion.

All functions within this package are pure apart from the in-place timestamp
rewrite of a freshly built destination record; there is no I/O.

The public API lives in the top-level `mapper.py` facade. Callers should not
import directly from this package unless accessing internal helpers for
testing purposes.

Modules:
    zones: Zone resolution and DST-aware wall-clock <-> UTC conversion
    fields: Timestamp field discovery on pydantic record types
    provenance: Local/UTC classification of types and pair direction
    engine: Post-copy in-place timestamp conversion
    copier: Same-name, same-type field copy
    registry: Pair registration, eager validation and mapping execution
    profile: Default Person/Appointment configuration

Design Invariants:
    - Exactly one zone handle per registry, resolved before any pair is registered
    - Timestamp conversion runs only after the destination is fully copied
    - Field classification is by declared type only
    - Only configuration raises; per-record conversion never does
"""
from __future__ import annotations

from . import engine as engine  # noqa: F401
from . import fields as fields  # noqa: F401
from . import provenance as provenance  # noqa: F401
from . import zones as zones  # noqa: F401

__all__ = ["engine", "fields", "provenance", "zones"]

"""Record models for the two layers.

`data` holds the persistence-side DTOs (naive wall-clock timestamps in the
configured local zone); `domain` holds the business entities (UTC-aware
timestamps). The module a model lives in is what gives it its provenance.
"""

__all__ = []

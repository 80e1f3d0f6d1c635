"""Package initialization for zone-aware-mapper.

Maps data-layer records (local wall-clock timestamps) to domain-layer records
(UTC timestamps) and back. See `zone_mapper.mapper` for the public API.
"""

from .errors import ConfigurationError, MappingNotFoundError
from .mapper import build_mapper, map_record

__all__ = ["ConfigurationError", "MappingNotFoundError", "build_mapper", "map_record"]

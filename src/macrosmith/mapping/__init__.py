"""Column-to-cell mapping model and macro configuration."""

from .models import (
    MacroConfig,
    Mapping,
    MappingField,
    MappingSet,
    default_mappings,
    new_mapping,
)

__all__ = [
    "MacroConfig",
    "Mapping",
    "MappingField",
    "MappingSet",
    "default_mappings",
    "new_mapping",
]

from .models import (
    BreakingChangeRules,
    ComparisonConfiguration,
    ExclusionConfig,
    FilterConfig,
    MappingConfig,
)
from .validation import find_cycles, validate_configuration, validate_raw
from .loader import config_from_dict, load_configuration


__all__ = [
    "MappingConfig",
    "ExclusionConfig",
    "BreakingChangeRules",
    "FilterConfig",
    "ComparisonConfiguration",
    "validate_configuration",
    "find_cycles",
    "validate_raw",
    "config_from_dict",
    "load_configuration",
]

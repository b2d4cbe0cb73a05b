"""
apidiff — сравнение публичного API двух версий компонента.

Быстрый старт:
    from apidiff import compare, ComparisonConfiguration
    result = compare(baseline_elements, target_elements, ComparisonConfiguration.create_default())
"""

from .core.constants import VERSION
from .core.models import ComparisonResult, Difference, Element
from .config import ComparisonConfiguration, load_configuration
from .comparison import Comparer, compare

__version__ = VERSION


__all__ = [
    "ComparisonResult",
    "Difference",
    "Element",
    "ComparisonConfiguration",
    "load_configuration",
    "Comparer",
    "compare",
]

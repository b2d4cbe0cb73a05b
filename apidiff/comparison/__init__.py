# __init__.py для пакета comparison
"""
comparison — ядро сравнения публичного API.

Экспортирует:
- NameMapper: переименования пространств имён и типов
- TypeMatcher / MemberMatcher / MatchResult: сопоставление элементов
- DifferenceCalculator: построение записей различий
- Comparer / compare: сравнение двух снимков целиком
"""

from .name_mapper import NameMapper
from .matcher import MatchResult, MemberMatcher, TypeMatcher
from .difference_calculator import DifferenceCalculator
from .comparer import Comparer, compare


__all__ = [
    "NameMapper",
    "MatchResult",
    "TypeMatcher",
    "MemberMatcher",
    "DifferenceCalculator",
    "Comparer",
    "compare",
]

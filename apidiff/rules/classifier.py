"""
Классификация различий: исключения, политика ломающих изменений, важность.

Классификатор чистый и детерминированный: результат зависит только
от (различие, конфигурация). Повторная классификация уже
классифицированной записи даёт равную запись.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..config.models import ComparisonConfiguration
from ..core.models import ApiElementType, ChangeKind, ChangeShape, Difference, Severity
from ..utils.naming import OBSOLETE_ATTRIBUTE, has_attribute
from ..utils.patterns import any_match, compile_wildcard

logger = logging.getLogger("apidiff.rules.classifier")


# формы, которые даже без нарушения политики стоит показать как предупреждение
_RISKY_SHAPES = frozenset({
    ChangeShape.TYPE_REMOVED,
    ChangeShape.MEMBER_REMOVED,
    ChangeShape.SIGNATURE_CHANGED,
    ChangeShape.ACCESSIBILITY_REDUCED,
    ChangeShape.INTERFACE_REMOVED,
    ChangeShape.PARAMETER_NAME_CHANGED,
    ChangeShape.OPTIONAL_PARAMETER_ADDED,
})


_CRITICAL_SHAPES = frozenset({
    ChangeShape.TYPE_REMOVED,
    ChangeShape.ACCESSIBILITY_REDUCED,
})


class ChangeClassifier:
    """
    Применяет к различию правила исключения и политику BreakingChangeRules.

    Порядок:
    1. исключение (перекрывает всё): Excluded, не ломающее, Info;
    2. ломающее ли изменение — по форме различия;
    3. важность.
    """

    def __init__(self, config: Optional[ComparisonConfiguration] = None):
        self.config = config or ComparisonConfiguration.create_default()
        self.exclusions = self.config.exclusions
        self.rules = self.config.breaking_change_rules

        self._excluded_types = frozenset(self.exclusions.excluded_types)
        self._excluded_members = frozenset(self.exclusions.excluded_members)
        # шаблоны компилируются один раз на классификатор
        self._type_patterns = tuple(compile_wildcard(p) for p in self.exclusions.excluded_type_patterns)
        self._member_patterns = tuple(compile_wildcard(p) for p in self.exclusions.excluded_member_patterns)

    # ==========
    # ИСКЛЮЧЕНИЯ
    # ==========

    def is_type_excluded(self, type_name: str) -> bool:
        if not type_name:
            return False
        if type_name in self._excluded_types:
            return True
        return any_match(self._type_patterns, type_name) is not None

    def is_member_excluded(self, member_name: str, container: Optional[str] = None) -> bool:
        """
        Член исключён явно, по шаблону или потому что исключён его тип.
        """
        if member_name:
            if member_name in self._excluded_members:
                return True
            if any_match(self._member_patterns, member_name) is not None:
                return True
        return bool(container) and self.is_type_excluded(container)

    def exclusion_reason(self, difference: Difference) -> Optional[str]:
        """Причина исключения или None."""
        if difference.element_kind == ApiElementType.TYPE:
            if self.is_type_excluded(difference.element_name):
                return "type"
        elif self.is_member_excluded(difference.element_name, difference.container):
            return "member"

        if self.exclusions.exclude_compiler_generated and difference.compiler_generated:
            return "compiler_generated"
        if self.exclusions.exclude_obsolete and has_attribute(difference.element_attributes, OBSOLETE_ATTRIBUTE):
            return "obsolete"
        return None

    # ==========
    # КЛАССИФИКАЦИЯ
    # ==========

    def is_breaking(self, difference: Difference) -> bool:
        if difference.signature_equivalent:
            return False
        return self.rules.is_breaking(difference.shape)

    @staticmethod
    def severity_for(difference: Difference, breaking: bool) -> Severity:
        shape = difference.shape
        if breaking:
            return Severity.CRITICAL if shape in _CRITICAL_SHAPES else Severity.ERROR
        if shape in _RISKY_SHAPES and not difference.signature_equivalent:
            return Severity.WARNING
        return Severity.INFO

    def classify(self, difference: Difference) -> Difference:
        reason = self.exclusion_reason(difference)
        if reason is not None:
            logger.debug("Исключено (%s): %s", reason, difference.element_name)
            return difference.finalize(
                change_kind=ChangeKind.EXCLUDED,
                is_breaking=False,
                severity=Severity.INFO,
                description=f"Excluded {difference.element_kind.value}: {difference.element_name}",
            )

        breaking = self.is_breaking(difference)
        return difference.finalize(
            change_kind=difference.shape.detected_kind,
            is_breaking=breaking,
            severity=self.severity_for(difference, breaking),
        )

    def classify_all(self, differences) -> Tuple[Difference, ...]:
        return tuple(self.classify(d) for d in differences)


def classify(difference: Difference, config: Optional[ComparisonConfiguration] = None) -> Difference:
    return ChangeClassifier(config).classify(difference)


__all__ = ["ChangeClassifier", "classify"]

"""
Сравнение двух снимков публичного API.

Конвейер одного сравнения:
  разделение на типы и члены -> сопоставление типов (NameMapper)
  -> таблица переименований -> различия типов -> сопоставление членов
  внутри каждой пары типов -> различия членов -> классификация
  -> ComparisonResult.

Сравнение не хранит состояния между вызовами: NameMapper,
DifferenceCalculator и ChangeClassifier создаются заново на каждый вызов.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config.models import ComparisonConfiguration
from ..core.models import ComparisonResult, Difference, Element
from ..rules.classifier import ChangeClassifier
from .difference_calculator import DifferenceCalculator
from .matcher import Diagnostics, MatchResult, MemberMatcher, TypeMatcher
from .name_mapper import NameMapper

logger = logging.getLogger("apidiff.comparison.comparer")


class Comparer:
    """
    Сравнивает наборы элементов базовой и целевой версии.

    diagnostics — необязательный обработчик сообщений о неоднозначностях
    и переименованиях; на результат сравнения не влияет.
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics

    def _report(self, message: str) -> None:
        logger.debug(message)
        if self.diagnostics is not None:
            self.diagnostics(message)

    # -------------------------
    # основной метод
    # -------------------------

    def compare(
        self,
        baseline_elements: Iterable[Element],
        target_elements: Iterable[Element],
        config: Optional[ComparisonConfiguration] = None,
    ) -> ComparisonResult:
        config = config or ComparisonConfiguration.create_default()

        mapper = NameMapper(config.mappings)
        calculator = DifferenceCalculator(ignore_case=mapper.ignore_case)
        classifier = ChangeClassifier(config)

        base_types, base_members = self._split(list(baseline_elements), mapper, "baseline")
        target_types, target_members = self._split(list(target_elements), mapper, "target")

        types = TypeMatcher(mapper, self.diagnostics).match(base_types, target_types)
        renames = self.build_renames(config, types)

        differences: List[Difference] = []
        differences.extend(calculator.removed_type(el) for el in types.unique_a)
        differences.extend(calculator.added_type(el) for el in types.unique_b)

        member_matcher = MemberMatcher(mapper, renames)
        for old_type, new_type in types.pairs:
            differences.extend(calculator.matched_pair(old_type, new_type, renames))
            differences.extend(self._compare_members(
                base_members.get(mapper.key(old_type.full_name), []),
                target_members.get(mapper.key(new_type.full_name), []),
                member_matcher,
                calculator,
                renames,
            ))

        classified = [classifier.classify(d) for d in differences]
        result = ComparisonResult.from_differences(classified, ignore_case=mapper.ignore_case)

        logger.debug(
            "Сравнение завершено: типов %d/%d, пар %d, различий %d",
            len(base_types), len(target_types), len(types.pairs), len(classified),
        )
        return result

    # -------------------------
    # вспомогательные этапы
    # -------------------------

    def _split(
        self, elements: Sequence[Element], mapper: NameMapper, label: str
    ) -> Tuple[List[Element], Dict[str, List[Element]]]:
        """
        Типы отдельно, члены — по ключу объявляющего типа.
        Члены без объявляющего типа в том же снимке сравниваются только
        через свой тип, поэтому здесь отбрасываются.
        """
        types = [el for el in elements if el.kind.is_type]
        type_keys = {mapper.key(t.full_name) for t in types}

        members: Dict[str, List[Element]] = {}
        orphans = 0
        for el in elements:
            if el.kind.is_type:
                continue
            container = mapper.key(el.declaring_container)
            if container not in type_keys:
                orphans += 1
                continue
            members.setdefault(container, []).append(el)

        if orphans:
            self._report(f"{label}: членов без объявляющего типа в снимке: {orphans}")
        return types, members

    @staticmethod
    def build_renames(config: ComparisonConfiguration, types: MatchResult) -> Dict[str, str]:
        """
        Таблица переименований для подстановки в сигнатуры:
        typeMappings + все сопоставленные пары типов с разными полными именами.
        """
        renames: Dict[str, str] = dict(config.mappings.type_mappings)
        for old, new in types.pairs:
            if old.full_name != new.full_name:
                renames[old.full_name] = new.full_name
        return renames

    def _compare_members(
        self,
        old_members: Sequence[Element],
        new_members: Sequence[Element],
        matcher: MemberMatcher,
        calculator: DifferenceCalculator,
        renames: Dict[str, str],
    ) -> List[Difference]:
        matched = matcher.match(old_members, new_members)
        reconciled, matched = matcher.reconcile_optional_parameters(matched)

        diffs: List[Difference] = []
        for old, new in matched.pairs:
            diffs.extend(calculator.matched_pair(old, new, renames))

        for old, new in reconciled:
            access = calculator.accessibility_changed(old, new)
            if access is not None:
                diffs.append(access)
            diffs.append(calculator.optional_parameter_added(old, new))

        diffs.extend(calculator.removed_member(el) for el in matched.unique_a)
        diffs.extend(calculator.added_member(el) for el in matched.unique_b)
        return diffs


def compare(
    baseline_elements: Iterable[Element],
    target_elements: Iterable[Element],
    config: Optional[ComparisonConfiguration] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> ComparisonResult:
    return Comparer(diagnostics).compare(baseline_elements, target_elements, config)


__all__ = ["Comparer", "compare"]

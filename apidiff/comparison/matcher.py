"""
Модуль сопоставления элементов API при сравнении.

Два уровня:
- TypeMatcher: типы базовой и целевой версии (с учётом переименований);
- MemberMatcher: члены внутри сопоставленной пары типов.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.models import Element
from ..utils.naming import namespace_of
from ..utils.signatures import rewrite_signature, signature_outline
from .name_mapper import NameMapper

logger = logging.getLogger("apidiff.comparison.matcher")

Diagnostics = Callable[[str], None]


@dataclass(frozen=True)
class MatchResult:
    """
    Результат сопоставления:
    - pairs: пары (базовый, целевой) в порядке базовой версии
    - unique_a: элементы только базовой версии
    - unique_b: элементы только целевой версии
    """
    pairs: List[Tuple[Element, Element]]
    unique_a: List[Element]
    unique_b: List[Element]


def _index(elements: Sequence[Element], key: Callable[[Element], object]) -> Dict[object, List[int]]:
    """key -> [позиция, ...] в порядке перечисления. Так видны дубликаты."""
    mapping: Dict[object, List[int]] = {}
    for i, el in enumerate(elements):
        mapping.setdefault(key(el), []).append(i)
    return mapping


def _first_unclaimed(positions: Optional[List[int]], claimed: set) -> Optional[int]:
    for i in positions or ():
        if i not in claimed:
            return i
    return None


# ==========
# ТИПЫ
# ==========

class TypeMatcher:
    """
    Сопоставляет типы двух снимков.

    Стратегии по убыванию приоритета:
    1. одинаковое полное имя;
    2. явное отображение типа (typeMappings);
    3. отображение пространства имён + то же простое имя (кандидаты по порядку);
    4. autoMapSameNameTypes: первый целевой тип с тем же простым именем.

    Каждая стратегия проходит по всем ещё не сопоставленным базовым типам
    в порядке перечисления, поэтому точное совпадение имени никогда
    не перехватывается отображением другого типа.
    Целевой тип может быть занят только один раз.
    """

    def __init__(self, mapper: NameMapper, diagnostics: Optional[Diagnostics] = None):
        self.mapper = mapper
        self.diagnostics = diagnostics

    def _report(self, message: str) -> None:
        logger.debug(message)
        if self.diagnostics is not None:
            self.diagnostics(message)

    def match(self, baseline: Sequence[Element], target: Sequence[Element]) -> MatchResult:
        key = self.mapper.key
        by_full = _index(target, lambda el: key(el.full_name))
        by_simple = _index(target, lambda el: self.mapper.simple_key(el.full_name))

        matched: Dict[int, int] = {}
        claimed: set = set()

        def claim(i: int, j: Optional[int]) -> bool:
            if j is None:
                return False
            matched[i] = j
            claimed.add(j)
            return True

        # 1. одинаковое полное имя
        for i, el in enumerate(baseline):
            claim(i, _first_unclaimed(by_full.get(key(el.full_name)), claimed))

        # 2-3. явные отображения типов и пространств имён
        for i, el in enumerate(baseline):
            if i in matched:
                continue
            if not (self.mapper.has_type_mapping(el.full_name)
                    or self.mapper.has_namespace_mapping(namespace_of(el.full_name))):
                continue
            for candidate in self.mapper.map_full_type_name(el.full_name):
                if claim(i, _first_unclaimed(by_full.get(key(candidate)), claimed)):
                    break

        # 4. одинаковое простое имя
        for i, el in enumerate(baseline):
            if i in matched or not self.mapper.should_auto_map(el.full_name):
                continue
            free = [j for j in by_simple.get(self.mapper.simple_key(el.full_name), ()) if j not in claimed]
            if len(free) > 1:
                self._report(
                    f"Неоднозначное автосопоставление {el.full_name}: "
                    f"{', '.join(target[j].full_name for j in free)}; выбран {target[free[0]].full_name}"
                )
            if free:
                claim(i, free[0])

        pairs: List[Tuple[Element, Element]] = []
        for i, el in enumerate(baseline):
            if i not in matched:
                continue
            other = target[matched[i]]
            pairs.append((el, other))
            if other.full_name != el.full_name:
                self._report(f"Тип {el.full_name} сопоставлен с {other.full_name}")

        return MatchResult(
            pairs=pairs,
            unique_a=[el for i, el in enumerate(baseline) if i not in matched],
            unique_b=[el for j, el in enumerate(target) if j not in claimed],
        )


# ==========
# ЧЛЕНЫ
# ==========

class MemberMatcher:
    """
    Сопоставляет члены внутри пары типов.

    Ключ: (имя, вид) и, для методов и конструкторов, последовательность
    типов параметров. Типы параметров базовой версии сначала переписываются
    через таблицу переименований. Имена параметров не учитываются.
    Одинаковые ключи сопоставляются в порядке перечисления.
    """

    def __init__(self, mapper: NameMapper, renames: Optional[Mapping[str, str]] = None):
        self.mapper = mapper
        self.renames: Mapping[str, str] = renames or {}

    def _base_key(self, el: Element) -> Tuple[str, str]:
        return self.mapper.key(el.name), el.kind.value

    def baseline_parameter_types(self, el: Element) -> Tuple[str, ...]:
        return tuple(
            self.mapper.key(rewrite_signature(t, self.renames, self.mapper.key))
            for t in el.parameter_types()
        )

    def target_parameter_types(self, el: Element) -> Tuple[str, ...]:
        return tuple(self.mapper.key(t) for t in el.parameter_types())

    def member_key(self, el: Element, baseline: bool = True) -> tuple:
        base = self._base_key(el)
        if not el.kind.has_parameters:
            return base
        params = self.baseline_parameter_types(el) if baseline else self.target_parameter_types(el)
        return base + (params,)

    def match(self, baseline: Sequence[Element], target: Sequence[Element]) -> MatchResult:
        by_key = _index(target, lambda el: self.member_key(el, baseline=False))

        matched: Dict[int, int] = {}
        claimed: set = set()
        for i, el in enumerate(baseline):
            j = _first_unclaimed(by_key.get(self.member_key(el, baseline=True)), claimed)
            if j is not None:
                matched[i] = j
                claimed.add(j)

        return MatchResult(
            pairs=[(el, target[matched[i]]) for i, el in enumerate(baseline) if i in matched],
            unique_a=[el for i, el in enumerate(baseline) if i not in matched],
            unique_b=[el for j, el in enumerate(target) if j not in claimed],
        )

    # -------------------------
    # добавленные необязательные параметры
    # -------------------------

    def extends_with_optionals(self, old: Element, new: Element) -> bool:
        """
        Новый список параметров = старый + только необязательные параметры в конце,
        а всё вне списка параметров (возвращаемый тип, модификаторы) не изменилось.
        """
        if not old.kind.has_parameters or old.kind != new.kind:
            return False
        if self.mapper.key(old.name) != self.mapper.key(new.name):
            return False

        old_types = self.baseline_parameter_types(old)
        new_params = new.parameter_list()
        if len(new_params) <= len(old_types):
            return False

        new_types = self.target_parameter_types(new)
        if new_types[:len(old_types)] != old_types:
            return False
        if not all(p.is_optional for p in new_params[len(old_types):]):
            return False

        old_outline = signature_outline(rewrite_signature(old.signature, self.renames, self.mapper.key))
        return self.mapper.key(old_outline) == self.mapper.key(signature_outline(new.signature))

    def reconcile_optional_parameters(self, result: MatchResult) -> Tuple[List[Tuple[Element, Element]], MatchResult]:
        """
        Сводит пары "удалён + добавлен", которые на деле являются добавлением
        необязательных параметров. Возвращает (такие пары, остаток сопоставления).
        """
        reconciled: List[Tuple[Element, Element]] = []
        taken: set = set()
        rest_a: List[Element] = []

        for old in result.unique_a:
            hit = None
            for j, new in enumerate(result.unique_b):
                if j not in taken and self.extends_with_optionals(old, new):
                    hit = j
                    break
            if hit is None:
                rest_a.append(old)
                continue
            taken.add(hit)
            reconciled.append((old, result.unique_b[hit]))

        rest = MatchResult(
            pairs=result.pairs,
            unique_a=rest_a,
            unique_b=[el for j, el in enumerate(result.unique_b) if j not in taken],
        )
        return reconciled, rest


__all__ = ["MatchResult", "TypeMatcher", "MemberMatcher"]

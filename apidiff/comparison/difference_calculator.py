"""
Построение записей различий.

Каждая функция строит запись одной формы (ChangeShape) в "открытом"
состоянии: is_breaking=False, severity=Info, classified=False.
Оценку выполняет ChangeClassifier.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from ..core.models import (
    ChangeShape,
    Difference,
    Element,
)
from ..utils.naming import name_key
from ..utils.signatures import rewrite_names, rewrite_signature, signatures_equivalent

logger = logging.getLogger("apidiff.comparison.difference_calculator")


def _attributes(*elements: Element) -> Tuple[str, ...]:
    seen: List[str] = []
    for el in elements:
        for name in el.custom_attribute_names:
            if name not in seen:
                seen.append(name)
    return tuple(seen)


def _parameter_names(el: Element) -> str:
    return ", ".join(p.name for p in el.parameter_list())


class DifferenceCalculator:
    """
    Чистые построители различий для сопоставленных и несопоставленных элементов.
    """

    def __init__(self, ignore_case: bool = False):
        self.ignore_case = ignore_case

    def key(self, text: Optional[str]) -> str:
        return name_key(text or "", self.ignore_case)

    def _open(
        self,
        shape: ChangeShape,
        element: Element,
        description: str,
        old: Optional[Element] = None,
        new: Optional[Element] = None,
        signature_equivalent: bool = False,
    ) -> Difference:
        involved = [el for el in (old, new) if el is not None] or [element]
        return Difference(
            change_kind=shape.detected_kind,
            element_kind=element.element_type,
            element_name=element.full_name,
            description=description,
            shape=shape,
            old_signature=old.signature if old is not None else None,
            new_signature=new.signature if new is not None else None,
            container=element.declaring_container if element.kind.is_member else None,
            signature_equivalent=signature_equivalent,
            element_attributes=_attributes(*involved),
            compiler_generated=any(el.is_compiler_generated for el in involved),
        )

    # ==========
    # ДОБАВЛЕНИЕ / УДАЛЕНИЕ
    # ==========

    def added_type(self, el: Element) -> Difference:
        return self._open(ChangeShape.TYPE_ADDED, el, f"Added {el.kind.value} '{el.full_name}'", new=el)

    def removed_type(self, el: Element) -> Difference:
        return self._open(ChangeShape.TYPE_REMOVED, el, f"Removed {el.kind.value} '{el.full_name}'", old=el)

    def added_member(self, el: Element) -> Difference:
        return self._open(ChangeShape.MEMBER_ADDED, el, f"Added {el.kind.value} '{el.full_name}'", new=el)

    def removed_member(self, el: Element) -> Difference:
        return self._open(ChangeShape.MEMBER_REMOVED, el, f"Removed {el.kind.value} '{el.full_name}'", old=el)

    # ==========
    # ИЗМЕНЕНИЯ
    # ==========

    def _signature_change(self, old: Element, new: Element, signature_equivalent: bool) -> Difference:
        description = f"Signature changed for {new.kind.value} '{new.full_name}'"
        if signature_equivalent:
            description += " (equivalent after type mapping)"
        return self._open(
            ChangeShape.SIGNATURE_CHANGED, new, description,
            old=old, new=new, signature_equivalent=signature_equivalent,
        )

    def type_changed(self, old: Element, new: Element, signature_equivalent: bool = False) -> Optional[Difference]:
        if self.key(old.signature) == self.key(new.signature):
            return None
        return self._signature_change(old, new, signature_equivalent)

    def member_changed(
        self,
        old: Element,
        new: Element,
        signature_equivalent: bool = False,
        renames: Optional[Mapping[str, str]] = None,
    ) -> Optional[Difference]:
        """
        Изменение сигнатуры члена.
        Если отличаются только имена параметров — отдельная форма
        PARAMETER_NAME_CHANGED.
        """
        if self.key(old.signature) == self.key(new.signature):
            return None

        if not signature_equivalent and self.only_parameter_names_differ(old, new, renames):
            return self._open(
                ChangeShape.PARAMETER_NAME_CHANGED, new,
                f"Parameter names changed from ({_parameter_names(old)}) to ({_parameter_names(new)})",
                old=old, new=new,
            )
        return self._signature_change(old, new, signature_equivalent)

    def only_parameter_names_differ(
        self, old: Element, new: Element, renames: Optional[Mapping[str, str]] = None
    ) -> bool:
        """
        Сигнатуры совпадают, если в старой заменить имена параметров на новые.
        Типы параметров сравниваются после подстановки переименований.
        """
        if not old.kind.has_parameters:
            return False
        old_params = old.parameter_list()
        new_params = new.parameter_list()
        if len(old_params) != len(new_params) or not old_params:
            return False

        name_map = {}
        for a, b in zip(old_params, new_params):
            if not a.name or not b.name:
                return False
            if self.key(a.name) != self.key(b.name):
                name_map[a.name] = b.name
        if not name_map:
            return False

        rewritten = rewrite_signature(old.signature, renames or {}, self.key)
        rewritten = rewrite_names(rewritten, name_map)
        return self.key(rewritten) == self.key(new.signature)

    def is_signature_equivalent(self, old: Element, new: Element, renames: Mapping[str, str]) -> bool:
        return signatures_equivalent(old.signature, new.signature, renames, self.key)

    def accessibility_changed(self, old: Element, new: Element) -> Optional[Difference]:
        if old.accessibility == new.accessibility:
            return None

        if new.accessibility.rank < old.accessibility.rank:
            shape = ChangeShape.ACCESSIBILITY_REDUCED
            verb = "reduced"
        else:
            shape = ChangeShape.ACCESSIBILITY_WIDENED
            verb = "widened"

        return self._open(
            shape, new,
            f"Accessibility {verb} from {old.accessibility.display_name} to {new.accessibility.display_name}",
            old=old, new=new,
        )

    def interface_changes(
        self, old: Element, new: Element, renames: Optional[Mapping[str, str]] = None
    ) -> List[Difference]:
        """
        Добавленные и удалённые интерфейсы типа, по одной записи на интерфейс.
        Интерфейсы базовой версии сначала переписываются через переименования.
        """
        renames = renames or {}
        old_keys = {
            self.key(rewrite_signature(name, renames, self.key)): name
            for name in old.interfaces
        }
        new_keys = {self.key(name): name for name in new.interfaces}

        diffs: List[Difference] = []
        for k in sorted(set(new_keys) - set(old_keys)):
            diffs.append(self._open(
                ChangeShape.INTERFACE_ADDED, new,
                f"Interface '{new_keys[k]}' added",
                old=old, new=new,
            ))
        for k in sorted(set(old_keys) - set(new_keys)):
            diffs.append(self._open(
                ChangeShape.INTERFACE_REMOVED, new,
                f"Interface '{old_keys[k]}' removed",
                old=old, new=new,
            ))
        return diffs

    def optional_parameter_added(self, old: Element, new: Element) -> Difference:
        added = new.parameter_list()[len(old.parameter_list()):]
        return self._open(
            ChangeShape.OPTIONAL_PARAMETER_ADDED, new,
            f"Optional parameter(s) added: {', '.join(p.render() for p in added)}",
            old=old, new=new,
        )

    # -------------------------
    # для пар, собранных сопоставителем
    # -------------------------

    def matched_pair(
        self, old: Element, new: Element, renames: Optional[Mapping[str, str]] = None
    ) -> List[Difference]:
        """
        Все различия сопоставленной пары: доступность, интерфейсы (для типов)
        и сигнатура. Каждое наблюдаемое изменение — отдельная запись.
        """
        renames = renames or {}
        diffs: List[Difference] = []

        access = self.accessibility_changed(old, new)
        if access is not None:
            diffs.append(access)

        equivalent = self.is_signature_equivalent(old, new, renames)
        if old.kind.is_type:
            diffs.extend(self.interface_changes(old, new, renames))
            change = self.type_changed(old, new, signature_equivalent=equivalent)
        else:
            change = self.member_changed(old, new, signature_equivalent=equivalent, renames=renames)
        if change is not None:
            diffs.append(change)

        if diffs:
            logger.debug("%s: различий %d", new.full_name, len(diffs))
        return diffs


__all__ = ["DifferenceCalculator"]

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from apidiff.core.exceptions import ResultInvariantError
from apidiff.utils.naming import (
    COMPILER_GENERATED_ATTRIBUTE,
    OBSOLETE_ATTRIBUTE,
    has_attribute,
    is_compiler_generated_name,
    name_key,
)
from apidiff.utils.signatures import parse_parameters


class ElementKind(Enum):
    # типы
    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"
    DELEGATE = "delegate"

    # члены
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"
    CONSTRUCTOR = "constructor"

    @property
    def is_type(self) -> bool:
        return self in _TYPE_KINDS

    @property
    def is_member(self) -> bool:
        return not self.is_type

    @property
    def has_parameters(self) -> bool:
        return self in (ElementKind.METHOD, ElementKind.CONSTRUCTOR)

    @classmethod
    def parse(cls, value: str) -> "ElementKind":
        s = str(value or "").strip().lower()
        for kind in cls:
            if kind.value == s:
                return kind
        raise ValueError(f"Неизвестный вид элемента: {value!r}")


_TYPE_KINDS = frozenset({
    ElementKind.CLASS,
    ElementKind.INTERFACE,
    ElementKind.STRUCT,
    ElementKind.ENUM,
    ElementKind.DELEGATE,
})


class ApiElementType(Enum):
    """Вид элемента, к которому относится различие."""
    TYPE = "type"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"

    @classmethod
    def from_element_kind(cls, kind: ElementKind) -> "ApiElementType":
        return _ELEMENT_TYPE_BY_KIND[kind]


_ELEMENT_TYPE_BY_KIND: Dict[ElementKind, ApiElementType] = {
    ElementKind.CLASS: ApiElementType.TYPE,
    ElementKind.INTERFACE: ApiElementType.TYPE,
    ElementKind.STRUCT: ApiElementType.TYPE,
    ElementKind.ENUM: ApiElementType.TYPE,
    ElementKind.DELEGATE: ApiElementType.TYPE,
    ElementKind.METHOD: ApiElementType.METHOD,
    ElementKind.PROPERTY: ApiElementType.PROPERTY,
    ElementKind.FIELD: ApiElementType.FIELD,
    ElementKind.EVENT: ApiElementType.EVENT,
    ElementKind.CONSTRUCTOR: ApiElementType.CONSTRUCTOR,
}


class Accessibility(Enum):
    PRIVATE = "private"
    PROTECTED_PRIVATE = "protected_private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected_internal"
    PUBLIC = "public"

    @property
    def rank(self) -> int:
        # больше = доступнее
        return _ACCESSIBILITY_RANK[self]

    @property
    def display_name(self) -> str:
        return "".join(part.capitalize() for part in self.value.split("_"))

    @property
    def is_public_surface(self) -> bool:
        return self in (Accessibility.PUBLIC, Accessibility.PROTECTED, Accessibility.PROTECTED_INTERNAL)

    @classmethod
    def parse(cls, value: Any) -> "Accessibility":
        """
        Принимает "public", "Public", "protected internal",
        "ProtectedInternal", "protected_internal", "private protected".
        """
        if isinstance(value, Accessibility):
            return value
        s = str(value or "").strip().lower().replace("_", "").replace(" ", "")
        if s == "privateprotected":
            s = "protectedprivate"
        for acc in cls:
            if acc.value.replace("_", "") == s:
                return acc
        raise ValueError(f"Неизвестный уровень доступа: {value!r}")


_ACCESSIBILITY_RANK: Dict[Accessibility, int] = {
    Accessibility.PUBLIC: 5,
    Accessibility.PROTECTED_INTERNAL: 4,
    Accessibility.INTERNAL: 3,
    Accessibility.PROTECTED: 2,
    Accessibility.PROTECTED_PRIVATE: 1,
    Accessibility.PRIVATE: 0,
}


class ChangeKind(Enum):
    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"
    MOVED = "Moved"
    EXCLUDED = "Excluded"


class Severity(Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"

    @property
    def order(self) -> int:
        return _SEVERITY_ORDER[self]


_SEVERITY_ORDER: Dict[Severity, int] = {s: i for i, s in enumerate(Severity)}


class ChangeShape(Enum):
    """
    Конкретная форма различия.
    Каждой форме соответствует ровно один флаг BreakingChangeRules
    (или ни одного, если форма никогда не ломает потребителей).
    """
    TYPE_ADDED = "type_added"
    TYPE_REMOVED = "type_removed"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    SIGNATURE_CHANGED = "signature_changed"
    ACCESSIBILITY_REDUCED = "accessibility_reduced"
    ACCESSIBILITY_WIDENED = "accessibility_widened"
    INTERFACE_ADDED = "interface_added"
    INTERFACE_REMOVED = "interface_removed"
    PARAMETER_NAME_CHANGED = "parameter_name_changed"
    OPTIONAL_PARAMETER_ADDED = "optional_parameter_added"

    @property
    def detected_kind(self) -> ChangeKind:
        return _DETECTED_KIND[self]


_DETECTED_KIND: Dict[ChangeShape, ChangeKind] = {
    ChangeShape.TYPE_ADDED: ChangeKind.ADDED,
    ChangeShape.MEMBER_ADDED: ChangeKind.ADDED,
    ChangeShape.TYPE_REMOVED: ChangeKind.REMOVED,
    ChangeShape.MEMBER_REMOVED: ChangeKind.REMOVED,
    ChangeShape.SIGNATURE_CHANGED: ChangeKind.MODIFIED,
    ChangeShape.ACCESSIBILITY_REDUCED: ChangeKind.MODIFIED,
    ChangeShape.ACCESSIBILITY_WIDENED: ChangeKind.MODIFIED,
    ChangeShape.INTERFACE_ADDED: ChangeKind.MODIFIED,
    ChangeShape.INTERFACE_REMOVED: ChangeKind.MODIFIED,
    ChangeShape.PARAMETER_NAME_CHANGED: ChangeKind.MODIFIED,
    ChangeShape.OPTIONAL_PARAMETER_ADDED: ChangeKind.MODIFIED,
}

_SHAPE_ORDER: Dict[ChangeShape, int] = {s: i for i, s in enumerate(ChangeShape)}
_ELEMENT_TYPE_ORDER: Dict[ApiElementType, int] = {t: i for i, t in enumerate(ApiElementType)}


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str
    is_optional: bool = False
    default: Optional[str] = None

    def render(self) -> str:
        text = f"{self.type} {self.name}".strip()
        if self.is_optional:
            text += f" = {self.default if self.default is not None else 'default'}"
        return text


@dataclass(frozen=True)
class Element:
    """
    Публичный элемент API (тип или член), полученный из снимка.
    Неизменяем после извлечения.
    """
    name: str
    full_name: str
    kind: ElementKind
    accessibility: Accessibility = Accessibility.PUBLIC
    signature: str = ""
    declaring_container: Optional[str] = None
    namespace: str = ""
    custom_attribute_names: Tuple[str, ...] = ()

    # необязательные структурные факты от извлечения
    parameters: Optional[Tuple[Parameter, ...]] = None
    interfaces: Tuple[str, ...] = ()

    @property
    def identity(self) -> Tuple[str, str]:
        return self.full_name, self.signature

    @property
    def element_type(self) -> ApiElementType:
        return ApiElementType.from_element_kind(self.kind)

    def parameter_list(self) -> Tuple[Parameter, ...]:
        """
        Параметры члена: явно переданные извлечением,
        иначе прочитанные из сигнатуры.
        """
        if self.parameters is not None:
            return self.parameters
        if not self.kind.has_parameters:
            return tuple()
        return tuple(
            Parameter(name=p.name, type=p.type, is_optional=p.is_optional, default=p.default)
            for p in parse_parameters(self.signature)
        )

    def parameter_types(self) -> Tuple[str, ...]:
        return tuple(p.type for p in self.parameter_list())

    @property
    def is_obsolete(self) -> bool:
        return has_attribute(self.custom_attribute_names, OBSOLETE_ATTRIBUTE)

    @property
    def is_compiler_generated(self) -> bool:
        return (
            has_attribute(self.custom_attribute_names, COMPILER_GENERATED_ATTRIBUTE)
            or is_compiler_generated_name(self.name or self.full_name)
        )

    def __str__(self) -> str:
        return f"{self.kind.value} {self.full_name} ({self.accessibility.display_name})"


@dataclass(frozen=True)
class Difference:
    """
    Одно обнаруженное различие.

    Создаётся DifferenceCalculator в "открытом" состоянии (classified=False)
    и один раз финализируется ChangeClassifier, который возвращает новый экземпляр.
    """
    change_kind: ChangeKind
    element_kind: ApiElementType
    element_name: str
    description: str
    shape: ChangeShape
    is_breaking: bool = False
    severity: Severity = Severity.INFO
    old_signature: Optional[str] = None
    new_signature: Optional[str] = None
    container: Optional[str] = None
    signature_equivalent: bool = False
    element_attributes: Tuple[str, ...] = ()
    compiler_generated: bool = False
    classified: bool = False

    def finalize(self, *, change_kind: ChangeKind, is_breaking: bool, severity: Severity,
                 description: Optional[str] = None) -> "Difference":
        return replace(
            self,
            change_kind=change_kind,
            is_breaking=is_breaking,
            severity=severity,
            description=self.description if description is None else description,
            classified=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "change_kind": self.change_kind.value,
            "element_kind": self.element_kind.value,
            "element_name": self.element_name,
            "description": self.description,
            "shape": self.shape.value,
            "is_breaking": self.is_breaking,
            "severity": self.severity.value,
        }
        if self.container:
            data["container"] = self.container
        if self.old_signature is not None:
            data["old_signature"] = self.old_signature
        if self.new_signature is not None:
            data["new_signature"] = self.new_signature
        if self.signature_equivalent:
            data["signature_equivalent"] = True
        return data

    def __str__(self) -> str:
        breaking = " [BREAKING]" if self.is_breaking else ""
        return f"{self.change_kind.value}: {self.element_name}{breaking}"


def difference_sort_key(diff: Difference, ignore_case: bool = False):
    """Детерминированный порядок: вид элемента, имя, форма, описание."""
    return (
        _ELEMENT_TYPE_ORDER[diff.element_kind],
        name_key(diff.element_name, ignore_case),
        diff.element_name,
        _SHAPE_ORDER[diff.shape],
        diff.description,
    )


_CATEGORY_BY_KIND: Dict[ChangeKind, Optional[str]] = {
    ChangeKind.ADDED: "additions",
    ChangeKind.REMOVED: "removals",
    ChangeKind.MODIFIED: "modifications",
    ChangeKind.EXCLUDED: "excluded",
    # перемещения не имеют своей категории: сопоставитель сводит их к парам
    ChangeKind.MOVED: None,
}


@dataclass(frozen=True)
class ComparisonResult:
    """
    Результат сравнения.
    Каждая категория содержит только различия соответствующего change_kind.
    """
    additions: Tuple[Difference, ...] = ()
    removals: Tuple[Difference, ...] = ()
    modifications: Tuple[Difference, ...] = ()
    excluded: Tuple[Difference, ...] = ()

    def __post_init__(self):
        for category, kind in (
            ("additions", ChangeKind.ADDED),
            ("removals", ChangeKind.REMOVED),
            ("modifications", ChangeKind.MODIFIED),
            ("excluded", ChangeKind.EXCLUDED),
        ):
            items = tuple(getattr(self, category))
            object.__setattr__(self, category, items)
            wrong = [d for d in items if d.change_kind != kind]
            if wrong:
                raise ResultInvariantError(category, kind.value, [str(d) for d in wrong])

    @classmethod
    def from_differences(cls, differences: Iterable[Difference], ignore_case: bool = False) -> "ComparisonResult":
        buckets: Dict[str, List[Difference]] = {
            "additions": [],
            "removals": [],
            "modifications": [],
            "excluded": [],
        }
        for diff in differences:
            category = _CATEGORY_BY_KIND[diff.change_kind]
            if category is None:
                raise ResultInvariantError("<none>", diff.change_kind.value, [str(diff)])
            buckets[category].append(diff)

        return cls(**{
            name: tuple(sorted(items, key=lambda d: difference_sort_key(d, ignore_case)))
            for name, items in buckets.items()
        })

    # ==========
    # ПРОИЗВОДНЫЕ ПОЛЯ
    # ==========

    @property
    def all_differences(self) -> Tuple[Difference, ...]:
        return self.additions + self.removals + self.modifications + self.excluded

    @property
    def breaking_changes(self) -> Tuple[Difference, ...]:
        return tuple(
            d for d in self.additions + self.removals + self.modifications
            if d.is_breaking
        )

    @property
    def breaking_changes_count(self) -> int:
        return len(self.breaking_changes)

    @property
    def has_breaking_changes(self) -> bool:
        return self.breaking_changes_count > 0

    @property
    def total_changes(self) -> int:
        return len(self.additions) + len(self.removals) + len(self.modifications)

    def summary(self) -> Dict[str, int]:
        return {
            "added": len(self.additions),
            "removed": len(self.removals),
            "modified": len(self.modifications),
            "excluded": len(self.excluded),
            "total_changes": self.total_changes,
            "breaking_changes": self.breaking_changes_count,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary(),
            "has_breaking_changes": self.has_breaking_changes,
            "additions": [d.to_dict() for d in self.additions],
            "removals": [d.to_dict() for d in self.removals],
            "modifications": [d.to_dict() for d in self.modifications],
            "excluded": [d.to_dict() for d in self.excluded],
        }


__all__ = [
    "ElementKind",
    "ApiElementType",
    "Accessibility",
    "ChangeKind",
    "Severity",
    "ChangeShape",
    "Parameter",
    "Element",
    "Difference",
    "ComparisonResult",
    "difference_sort_key",
]

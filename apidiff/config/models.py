"""
config/models.py

Неизменяемая конфигурация сравнения.

Все классы — frozen dataclass. Документ конфигурации — JSON
с ключами в camelCase; from_dict / to_dict переводят между ним и моделью.
Словари отдаются только на чтение (MappingProxyType), списки — кортежами.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from apidiff.core.constants import DEFAULT_REPORT_FORMAT
from apidiff.core.models import ChangeShape


def _frozen_map(data: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(data or {}))


def _strings(values: Optional[Iterable]) -> Tuple[str, ...]:
    return tuple(str(v) for v in (values or ()))


def _flag(data: Mapping, key: str, default: bool) -> bool:
    value = data.get(key, default)
    return default if value is None else bool(value)


# ==========
# СОПОСТАВЛЕНИЕ ИМЁН
# ==========

@dataclass(frozen=True)
class MappingConfig:
    """
    Переименования между базовой и целевой версией.

    namespace_mappings: исходное пространство имён -> упорядоченные кандидаты
    type_mappings: полное имя типа -> полное имя типа
    """
    namespace_mappings: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: _frozen_map(None))
    type_mappings: Mapping[str, str] = field(default_factory=lambda: _frozen_map(None))
    auto_map_same_name_types: bool = False
    ignore_case: bool = False

    def __post_init__(self):
        object.__setattr__(self, "namespace_mappings", _frozen_map(
            (str(k), _strings(v)) for k, v in dict(self.namespace_mappings or {}).items()
        ))
        object.__setattr__(self, "type_mappings", _frozen_map(
            (str(k), str(v)) for k, v in dict(self.type_mappings or {}).items()
        ))

    @classmethod
    def create_default(cls) -> "MappingConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "MappingConfig":
        data = data or {}
        return cls(
            namespace_mappings=data.get("namespaceMappings") or {},
            type_mappings=data.get("typeMappings") or {},
            auto_map_same_name_types=_flag(data, "autoMapSameNameTypes", False),
            ignore_case=_flag(data, "ignoreCase", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespaceMappings": {k: list(v) for k, v in self.namespace_mappings.items()},
            "typeMappings": dict(self.type_mappings),
            "autoMapSameNameTypes": self.auto_map_same_name_types,
            "ignoreCase": self.ignore_case,
        }


# ==========
# ИСКЛЮЧЕНИЯ
# ==========

@dataclass(frozen=True)
class ExclusionConfig:
    """Элементы, которые намеренно не учитываются при оценке изменений."""
    excluded_types: Tuple[str, ...] = ()
    excluded_members: Tuple[str, ...] = ()
    excluded_type_patterns: Tuple[str, ...] = ()
    excluded_member_patterns: Tuple[str, ...] = ()
    exclude_compiler_generated: bool = True
    exclude_obsolete: bool = False

    def __post_init__(self):
        for name in ("excluded_types", "excluded_members",
                     "excluded_type_patterns", "excluded_member_patterns"):
            object.__setattr__(self, name, _strings(getattr(self, name)))

    @classmethod
    def create_default(cls) -> "ExclusionConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ExclusionConfig":
        data = data or {}
        return cls(
            excluded_types=data.get("excludedTypes") or (),
            excluded_members=data.get("excludedMembers") or (),
            excluded_type_patterns=data.get("excludedTypePatterns") or (),
            excluded_member_patterns=data.get("excludedMemberPatterns") or (),
            exclude_compiler_generated=_flag(data, "excludeCompilerGenerated", True),
            exclude_obsolete=_flag(data, "excludeObsolete", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "excludedTypes": list(self.excluded_types),
            "excludedMembers": list(self.excluded_members),
            "excludedTypePatterns": list(self.excluded_type_patterns),
            "excludedMemberPatterns": list(self.excluded_member_patterns),
            "excludeCompilerGenerated": self.exclude_compiler_generated,
            "excludeObsolete": self.exclude_obsolete,
        }


# ==========
# ПОЛИТИКА ЛОМАЮЩИХ ИЗМЕНЕНИЙ
# ==========

# атрибут политики -> ключ JSON
_RULE_KEYS = {
    "treat_type_removal_as_breaking": "treatTypeRemovalAsBreaking",
    "treat_member_removal_as_breaking": "treatMemberRemovalAsBreaking",
    "treat_added_type_as_breaking": "treatAddedTypeAsBreaking",
    "treat_added_member_as_breaking": "treatAddedMemberAsBreaking",
    "treat_signature_change_as_breaking": "treatSignatureChangeAsBreaking",
    "treat_reduced_accessibility_as_breaking": "treatReducedAccessibilityAsBreaking",
    "treat_added_interface_as_breaking": "treatAddedInterfaceAsBreaking",
    "treat_removed_interface_as_breaking": "treatRemovedInterfaceAsBreaking",
    "treat_parameter_name_change_as_breaking": "treatParameterNameChangeAsBreaking",
    "treat_added_optional_parameter_as_breaking": "treatAddedOptionalParameterAsBreaking",
}

# форма различия -> флаг политики (None: форма никогда не ломает)
_RULE_BY_SHAPE: Dict[ChangeShape, Optional[str]] = {
    ChangeShape.TYPE_ADDED: "treat_added_type_as_breaking",
    ChangeShape.TYPE_REMOVED: "treat_type_removal_as_breaking",
    ChangeShape.MEMBER_ADDED: "treat_added_member_as_breaking",
    ChangeShape.MEMBER_REMOVED: "treat_member_removal_as_breaking",
    ChangeShape.SIGNATURE_CHANGED: "treat_signature_change_as_breaking",
    ChangeShape.ACCESSIBILITY_REDUCED: "treat_reduced_accessibility_as_breaking",
    ChangeShape.ACCESSIBILITY_WIDENED: None,
    ChangeShape.INTERFACE_ADDED: "treat_added_interface_as_breaking",
    ChangeShape.INTERFACE_REMOVED: "treat_removed_interface_as_breaking",
    ChangeShape.PARAMETER_NAME_CHANGED: "treat_parameter_name_change_as_breaking",
    ChangeShape.OPTIONAL_PARAMETER_ADDED: "treat_added_optional_parameter_as_breaking",
}


@dataclass(frozen=True)
class BreakingChangeRules:
    treat_type_removal_as_breaking: bool = True
    treat_member_removal_as_breaking: bool = True
    treat_added_type_as_breaking: bool = False
    treat_added_member_as_breaking: bool = False
    treat_signature_change_as_breaking: bool = True
    treat_reduced_accessibility_as_breaking: bool = True
    treat_added_interface_as_breaking: bool = False
    treat_removed_interface_as_breaking: bool = True
    treat_parameter_name_change_as_breaking: bool = False
    treat_added_optional_parameter_as_breaking: bool = False

    def is_breaking(self, shape: ChangeShape) -> bool:
        rule = _RULE_BY_SHAPE[shape]
        return bool(rule) and bool(getattr(self, rule))

    @classmethod
    def create_default(cls) -> "BreakingChangeRules":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BreakingChangeRules":
        data = data or {}
        defaults = cls()
        return cls(**{
            attr: _flag(data, key, getattr(defaults, attr))
            for attr, key in _RULE_KEYS.items()
        })

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _RULE_KEYS.items()}


# ==========
# ФИЛЬТРЫ СНИМКА
# ==========

@dataclass(frozen=True)
class FilterConfig:
    """
    Фильтрация элементов снимка до сравнения.
    Пустой include-список означает "включать всё".
    """
    include_namespaces: Tuple[str, ...] = ()
    exclude_namespaces: Tuple[str, ...] = ()
    include_types: Tuple[str, ...] = ()
    exclude_types: Tuple[str, ...] = ()
    include_internals: bool = False
    include_compiler_generated: bool = False

    def __post_init__(self):
        for name in ("include_namespaces", "exclude_namespaces", "include_types", "exclude_types"):
            object.__setattr__(self, name, _strings(getattr(self, name)))

    @classmethod
    def create_default(cls) -> "FilterConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FilterConfig":
        data = data or {}
        return cls(
            include_namespaces=data.get("includeNamespaces") or (),
            exclude_namespaces=data.get("excludeNamespaces") or (),
            include_types=data.get("includeTypes") or (),
            exclude_types=data.get("excludeTypes") or (),
            include_internals=_flag(data, "includeInternals", False),
            include_compiler_generated=_flag(data, "includeCompilerGenerated", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "includeNamespaces": list(self.include_namespaces),
            "excludeNamespaces": list(self.exclude_namespaces),
            "includeTypes": list(self.include_types),
            "excludeTypes": list(self.exclude_types),
            "includeInternals": self.include_internals,
            "includeCompilerGenerated": self.include_compiler_generated,
        }


# ==========
# КОНФИГУРАЦИЯ СРАВНЕНИЯ
# ==========

@dataclass(frozen=True)
class ComparisonConfiguration:
    mappings: MappingConfig = field(default_factory=MappingConfig)
    exclusions: ExclusionConfig = field(default_factory=ExclusionConfig)
    breaking_change_rules: BreakingChangeRules = field(default_factory=BreakingChangeRules)
    filters: FilterConfig = field(default_factory=FilterConfig)
    output_format: str = DEFAULT_REPORT_FORMAT
    output_path: Optional[str] = None
    fail_on_breaking_changes: bool = True

    @classmethod
    def create_default(cls) -> "ComparisonConfiguration":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ComparisonConfiguration":
        data = data or {}
        output_format = data.get("outputFormat") or DEFAULT_REPORT_FORMAT
        return cls(
            mappings=MappingConfig.from_dict(data.get("mappings")),
            exclusions=ExclusionConfig.from_dict(data.get("exclusions")),
            breaking_change_rules=BreakingChangeRules.from_dict(data.get("breakingChangeRules")),
            filters=FilterConfig.from_dict(data.get("filters")),
            output_format=str(output_format).lower(),
            output_path=data.get("outputPath") or None,
            fail_on_breaking_changes=_flag(data, "failOnBreakingChanges", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mappings": self.mappings.to_dict(),
            "exclusions": self.exclusions.to_dict(),
            "breakingChangeRules": self.breaking_change_rules.to_dict(),
            "filters": self.filters.to_dict(),
            "outputFormat": self.output_format,
            "outputPath": self.output_path,
            "failOnBreakingChanges": self.fail_on_breaking_changes,
        }

    def with_overrides(
        self,
        output_format: Optional[str] = None,
        output_path: Optional[str] = None,
        include_namespaces: Optional[Iterable[str]] = None,
        excluded_type_patterns: Optional[Iterable[str]] = None,
        fail_on_breaking_changes: Optional[bool] = None,
    ) -> "ComparisonConfiguration":
        """
        Применяет переопределения из командной строки.
        Списки из командной строки дополняют, а не заменяют списки из файла.
        """
        config = self
        if output_format:
            config = replace(config, output_format=output_format.lower())
        if output_path:
            config = replace(config, output_path=output_path)
        if include_namespaces:
            filters = replace(
                config.filters,
                include_namespaces=config.filters.include_namespaces + _strings(include_namespaces),
            )
            config = replace(config, filters=filters)
        if excluded_type_patterns:
            exclusions = replace(
                config.exclusions,
                excluded_type_patterns=config.exclusions.excluded_type_patterns + _strings(excluded_type_patterns),
            )
            config = replace(config, exclusions=exclusions)
        if fail_on_breaking_changes is not None:
            config = replace(config, fail_on_breaking_changes=fail_on_breaking_changes)
        return config


__all__ = [
    "MappingConfig",
    "ExclusionConfig",
    "BreakingChangeRules",
    "FilterConfig",
    "ComparisonConfiguration",
]

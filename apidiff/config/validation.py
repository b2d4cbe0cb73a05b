"""
config/validation.py

Проверка конфигурации сравнения.

Проверка — это проход, собирающий ВСЕ ошибки, а не остановка на первой:
так пользователь CLI видит сразу полный список, а тесты могут
проверять конкретные сообщения.

Два уровня:
- validate_raw: форма JSON-документа (типы значений);
- validate_configuration: смысловые ошибки уже построенной модели
  (пустые строки, циклы переименований, некорректные шаблоны, формат отчёта).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from apidiff.config.models import ComparisonConfiguration
from apidiff.core.constants import REPORT_FORMATS
from apidiff.utils.patterns import pattern_problem


# секция -> {ключ: ожидаемый вид значения}
_SECTION_SCHEMA: Dict[str, Dict[str, str]] = {
    "mappings": {
        "namespaceMappings": "namespace_map",
        "typeMappings": "string_map",
        "autoMapSameNameTypes": "bool",
        "ignoreCase": "bool",
    },
    "exclusions": {
        "excludedTypes": "string_list",
        "excludedMembers": "string_list",
        "excludedTypePatterns": "string_list",
        "excludedMemberPatterns": "string_list",
        "excludeCompilerGenerated": "bool",
        "excludeObsolete": "bool",
    },
    "breakingChangeRules": {
        "treatTypeRemovalAsBreaking": "bool",
        "treatMemberRemovalAsBreaking": "bool",
        "treatAddedTypeAsBreaking": "bool",
        "treatAddedMemberAsBreaking": "bool",
        "treatSignatureChangeAsBreaking": "bool",
        "treatReducedAccessibilityAsBreaking": "bool",
        "treatAddedInterfaceAsBreaking": "bool",
        "treatRemovedInterfaceAsBreaking": "bool",
        "treatParameterNameChangeAsBreaking": "bool",
        "treatAddedOptionalParameterAsBreaking": "bool",
    },
    "filters": {
        "includeNamespaces": "string_list",
        "excludeNamespaces": "string_list",
        "includeTypes": "string_list",
        "excludeTypes": "string_list",
        "includeInternals": "bool",
        "includeCompilerGenerated": "bool",
    },
}

_TOP_LEVEL_SCHEMA: Dict[str, str] = {
    "outputFormat": "string",
    "outputPath": "optional_string",
    "failOnBreakingChanges": "bool",
}


# ==========
# ФОРМА ДОКУМЕНТА
# ==========

def _check_value(path: str, kind: str, value: Any) -> List[str]:
    if value is None:
        return []

    if kind == "bool":
        if not isinstance(value, bool):
            return [f"{path}: ожидается true/false, получено {type(value).__name__}"]
        return []

    if kind == "string":
        if not isinstance(value, str):
            return [f"{path}: ожидается строка, получено {type(value).__name__}"]
        return []

    if kind == "optional_string":
        if not isinstance(value, str):
            return [f"{path}: ожидается строка или null, получено {type(value).__name__}"]
        return []

    if kind == "string_list":
        if not isinstance(value, list):
            return [f"{path}: ожидается список строк, получено {type(value).__name__}"]
        return [
            f"{path}[{i}]: ожидается строка, получено {type(item).__name__}"
            for i, item in enumerate(value)
            if not isinstance(item, str)
        ]

    if kind == "string_map":
        if not isinstance(value, dict):
            return [f"{path}: ожидается объект, получено {type(value).__name__}"]
        return [
            f"{path}.{k}: ожидается строка, получено {type(v).__name__}"
            for k, v in value.items()
            if not isinstance(v, str)
        ]

    if kind == "namespace_map":
        if not isinstance(value, dict):
            return [f"{path}: ожидается объект, получено {type(value).__name__}"]
        errors: List[str] = []
        for k, v in value.items():
            errors.extend(_check_value(f"{path}.{k}", "string_list", v))
        return errors

    raise ValueError(f"Неизвестный вид значения схемы: {kind}")


def validate_raw(data: Any) -> List[str]:
    """Проверяет типы значений JSON-документа конфигурации."""
    if not isinstance(data, dict):
        return [f"корень конфигурации: ожидается объект, получено {type(data).__name__}"]

    errors: List[str] = []
    for section, schema in _SECTION_SCHEMA.items():
        if section not in data or data[section] is None:
            continue
        body = data[section]
        if not isinstance(body, dict):
            errors.append(f"{section}: ожидается объект, получено {type(body).__name__}")
            continue
        for key, kind in schema.items():
            if key in body and body[key] is not None:
                errors.extend(_check_value(f"{section}.{key}", kind, body[key]))

    for key, kind in _TOP_LEVEL_SCHEMA.items():
        if key in data and data[key] is not None:
            errors.extend(_check_value(key, kind, data[key]))

    return errors


# ==========
# СМЫСЛОВАЯ ПРОВЕРКА
# ==========

def _blank(value: str) -> bool:
    return not value or not value.strip()


def find_cycles(edges: Mapping[str, Sequence[str]]) -> List[List[str]]:
    """
    Поиск циклов в графе переименований (DFS с раскраской).
    Каждый цикл возвращается один раз, в порядке обхода: [A, B, A].
    Петли (A -> A) тоже считаются циклами.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    color: Dict[str, int] = {}
    cycles: List[List[str]] = []
    path: List[str] = []

    def visit(node: str) -> None:
        color[node] = GREY
        path.append(node)
        for nxt in edges.get(node, ()):
            state = color.get(nxt, WHITE)
            if state == GREY:
                start = path.index(nxt)
                cycles.append(path[start:] + [nxt])
            elif state == WHITE and nxt in edges:
                visit(nxt)
        path.pop()
        color[node] = BLACK

    for node in edges:
        if color.get(node, WHITE) == WHITE:
            visit(node)
    return cycles


def _validate_patterns(section: str, patterns: Iterable[str]) -> List[str]:
    errors: List[str] = []
    for i, pattern in enumerate(patterns):
        problem = pattern_problem(pattern)
        if problem:
            errors.append(f"{section}[{i}]: {problem}")
    return errors


def _validate_names(section: str, names: Iterable[str]) -> List[str]:
    return [f"{section}[{i}]: пустое имя" for i, name in enumerate(names) if _blank(name)]


def validate_configuration(config: ComparisonConfiguration) -> List[str]:
    """
    Возвращает список всех ошибок конфигурации (пустой список — конфигурация корректна).
    """
    errors: List[str] = []

    # --- mappings ---
    mappings = config.mappings
    for source, candidates in mappings.namespace_mappings.items():
        if _blank(source):
            errors.append("mappings.namespaceMappings: пустое исходное пространство имён")
        if not candidates:
            errors.append(f"mappings.namespaceMappings.{source}: пустой список кандидатов")
        for i, candidate in enumerate(candidates):
            if _blank(candidate):
                errors.append(f"mappings.namespaceMappings.{source}[{i}]: пустое пространство имён")
            elif candidate == source:
                errors.append(f"mappings.namespaceMappings.{source}: отображение на само себя")

    for source, target in mappings.type_mappings.items():
        if _blank(source):
            errors.append("mappings.typeMappings: пустое исходное имя типа")
        if _blank(target):
            errors.append(f"mappings.typeMappings.{source}: пустое целевое имя типа")
        elif target == source:
            errors.append(f"mappings.typeMappings.{source}: отображение на само себя")

    ns_edges = {
        k: [c for c in v if c != k and not _blank(c)]
        for k, v in mappings.namespace_mappings.items()
    }
    for cycle in find_cycles(ns_edges):
        errors.append(f"mappings.namespaceMappings: цикл {' -> '.join(cycle)}")

    type_edges = {
        k: [v] for k, v in mappings.type_mappings.items()
        if v != k and not _blank(v)
    }
    for cycle in find_cycles(type_edges):
        errors.append(f"mappings.typeMappings: цикл {' -> '.join(cycle)}")

    # --- exclusions ---
    exclusions = config.exclusions
    errors.extend(_validate_names("exclusions.excludedTypes", exclusions.excluded_types))
    errors.extend(_validate_names("exclusions.excludedMembers", exclusions.excluded_members))
    errors.extend(_validate_patterns("exclusions.excludedTypePatterns", exclusions.excluded_type_patterns))
    errors.extend(_validate_patterns("exclusions.excludedMemberPatterns", exclusions.excluded_member_patterns))

    # --- filters ---
    filters = config.filters
    errors.extend(_validate_patterns("filters.includeNamespaces", filters.include_namespaces))
    errors.extend(_validate_patterns("filters.excludeNamespaces", filters.exclude_namespaces))
    errors.extend(_validate_patterns("filters.includeTypes", filters.include_types))
    errors.extend(_validate_patterns("filters.excludeTypes", filters.exclude_types))

    # --- output ---
    if config.output_format not in REPORT_FORMATS:
        errors.append(
            f"outputFormat: неизвестный формат '{config.output_format}' "
            f"(допустимо: {', '.join(REPORT_FORMATS)})"
        )
    if config.output_path is not None and _blank(config.output_path):
        errors.append("outputPath: пустой путь")

    return errors


__all__ = ["validate_raw", "validate_configuration", "find_cycles"]

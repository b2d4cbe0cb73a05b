"""
Модуль сопоставления имён между базовой и целевой версией API.

Все поиски — ровно один шаг: цепочки переименований не раскручиваются.
Отсутствие циклов гарантирует проверка конфигурации.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..config.models import MappingConfig
from ..utils.naming import combine_name, name_key, simple_name, split_full_name

logger = logging.getLogger("apidiff.comparison.name_mapper")


class NameMapper:
    """
    Разрешает настроенные переименования пространств имён и типов
    в упорядоченные списки имён-кандидатов.

    ignore_case — единственный переключатель регистра: все сравнения
    имён (здесь и в Comparer) проходят через key().
    """

    def __init__(self, config: Optional[MappingConfig] = None):
        self.config = config or MappingConfig.create_default()
        self.ignore_case = self.config.ignore_case

        self._namespaces: Dict[str, Tuple[str, Tuple[str, ...]]] = {
            self.key(ns): (ns, tuple(candidates))
            for ns, candidates in self.config.namespace_mappings.items()
        }
        self._types: Dict[str, Tuple[str, str]] = {
            self.key(src): (src, dst)
            for src, dst in self.config.type_mappings.items()
        }

    def key(self, name: Optional[str]) -> str:
        return name_key(name or "", self.ignore_case)

    # -------------------------
    # пространства имён
    # -------------------------

    def map_namespace(self, source_namespace: str) -> List[str]:
        """
        Кандидаты для пространства имён в настроенном порядке.
        Без явного отображения — [source_namespace].
        """
        entry = self._namespaces.get(self.key(source_namespace))
        if entry is None:
            return [source_namespace]

        candidates = list(entry[1])
        logger.debug("Пространство имён %s -> %s", source_namespace, candidates)
        return candidates

    def has_namespace_mapping(self, namespace: str) -> bool:
        return self.key(namespace) in self._namespaces

    # -------------------------
    # типы
    # -------------------------

    def has_type_mapping(self, full_name: str) -> bool:
        return self.key(full_name) in self._types

    def map_type_name(self, source_full_name: str) -> str:
        """Явное отображение типа или исходное имя."""
        entry = self._types.get(self.key(source_full_name))
        if entry is None:
            return source_full_name
        logger.debug("Тип %s -> %s (typeMappings)", source_full_name, entry[1])
        return entry[1]

    def map_full_type_name(self, source_full_name: str) -> List[str]:
        """
        Полные имена-кандидаты для типа.

        1. явное отображение типа — единственный кандидат;
        2. иначе — каждое пространство имён-кандидат + неизменное простое имя;
        3. имя без пространства имён отображается само в себя.
        """
        if self.has_type_mapping(source_full_name):
            return [self.map_type_name(source_full_name)]

        namespace, simple = split_full_name(source_full_name)
        if not namespace:
            return [source_full_name]

        return [combine_name(ns, simple) for ns in self.map_namespace(namespace)]

    def should_auto_map(self, type_name: str) -> bool:
        """
        Разрешено ли сопоставление по одинаковому простому имени.
        Только если включён autoMapSameNameTypes и для типа нет явных правил
        (ни отображения типа, ни отображения его пространства имён).
        """
        if not self.config.auto_map_same_name_types:
            return False
        if self.has_type_mapping(type_name):
            return False
        namespace, _ = split_full_name(type_name)
        if namespace and self.has_namespace_mapping(namespace):
            return False
        return True

    def simple_key(self, full_name: str) -> str:
        return self.key(simple_name(full_name))


__all__ = ["NameMapper"]

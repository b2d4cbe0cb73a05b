"""
Фильтрация элементов снимка до сравнения (FilterConfig).

Фильтры решают, какие ТИПЫ попадают в сравнение; члены
следуют за своим объявляющим типом.

Правила для типа (все должны выполняться):
- includeNamespaces пуст или пространство имён подходит хотя бы под один;
- пространство имён не подходит ни под один excludeNamespaces;
- includeTypes пуст или полное имя подходит хотя бы под один шаблон;
- полное имя не подходит ни под один excludeTypes;
- includeInternals выключен -> только типы публичной поверхности;
- includeCompilerGenerated выключен -> без сгенерированных компилятором.

Пространство имён подходит под фильтр, если совпадает с ним,
вложено в него ("Contoso" покрывает "Contoso.Core") или, при наличии
* и ?, подходит под шаблон. Сравнение без учёта регистра.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..config.models import FilterConfig
from ..core.models import Element
from ..utils.naming import namespace_of
from ..utils.patterns import any_match, compile_wildcard

logger = logging.getLogger("apidiff.snapshot.filters")


def _is_wildcard(pattern: str) -> bool:
    return "*" in pattern or "?" in pattern


class ElementFilter:
    def __init__(self, config: Optional[FilterConfig] = None):
        self.config = config or FilterConfig.create_default()
        self._include_types = tuple(compile_wildcard(p, ignore_case=True) for p in self.config.include_types)
        self._exclude_types = tuple(compile_wildcard(p, ignore_case=True) for p in self.config.exclude_types)

    @staticmethod
    def namespace_matches(namespace: str, filters: Sequence[str]) -> bool:
        ns = (namespace or "").casefold()
        for f in filters:
            if _is_wildcard(f):
                if compile_wildcard(f, ignore_case=True).match(namespace or ""):
                    return True
                continue
            prefix = f.casefold()
            if ns == prefix or ns.startswith(prefix + "."):
                return True
        return False

    def accepts_type(self, el: Element) -> bool:
        cfg = self.config
        namespace = el.namespace or namespace_of(el.full_name)

        if cfg.include_namespaces and not self.namespace_matches(namespace, cfg.include_namespaces):
            return False
        if cfg.exclude_namespaces and self.namespace_matches(namespace, cfg.exclude_namespaces):
            return False
        if self._include_types and any_match(self._include_types, el.full_name) is None:
            return False
        if self._exclude_types and any_match(self._exclude_types, el.full_name) is not None:
            return False
        if not cfg.include_internals and not el.accessibility.is_public_surface:
            return False
        if not cfg.include_compiler_generated and el.is_compiler_generated:
            return False
        return True

    def apply(self, elements: Iterable[Element]) -> List[Element]:
        """
        Возвращает отфильтрованные элементы в исходном порядке.
        """
        elements = list(elements)
        kept_types = {el.full_name for el in elements if el.kind.is_type and self.accepts_type(el)}

        result: List[Element] = []
        for el in elements:
            if el.kind.is_type:
                if el.full_name in kept_types:
                    result.append(el)
            elif el.declaring_container in kept_types:
                result.append(el)

        dropped = len(elements) - len(result)
        if dropped:
            logger.debug("Отфильтровано элементов: %d из %d", dropped, len(elements))
        return result


__all__ = ["ElementFilter"]

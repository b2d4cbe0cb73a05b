"""
utils/naming.py

Утилиты для работы с полными именами типов и членов API.
Нужны для:
- сопоставления типов (namespace + простое имя),
- ключей поиска с учётом/без учёта регистра,
- распознавания служебных атрибутов (Obsolete, CompilerGenerated).

Принцип:
- полное имя типа = "Namespace.SimpleName", пространство имён отделяется
  по ПОСЛЕДНЕЙ точке;
- вложенные типы приходят из извлечения через '+', поэтому точка внутри
  простого имени не встречается;
- имя члена = "<полное имя типа>.<имя члена>" без списка параметров.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


_ATTRIBUTE_SUFFIX = "Attribute"

OBSOLETE_ATTRIBUTE = "Obsolete"
COMPILER_GENERATED_ATTRIBUTE = "CompilerGenerated"


def split_full_name(full_name: str) -> Tuple[str, str]:
    """
    Делит полное имя на (namespace, simple_name).
    Примеры:
      "Contoso.Core.Widget" -> ("Contoso.Core", "Widget")
      "Widget" -> ("", "Widget")
    """
    if not full_name:
        return "", ""
    idx = full_name.rfind(".")
    if idx <= 0:
        return "", full_name
    return full_name[:idx], full_name[idx + 1:]


def simple_name(full_name: str) -> str:
    """Простое имя типа без пространства имён."""
    return split_full_name(full_name)[1]


def namespace_of(full_name: str) -> str:
    """Пространство имён полного имени ('' если его нет)."""
    return split_full_name(full_name)[0]


def combine_name(namespace: str, name: str) -> str:
    """Собирает namespace.name; пустое пространство имён не даёт ведущей точки."""
    if not namespace:
        return name
    return f"{namespace}.{name}"


def name_key(name: Optional[str], ignore_case: bool = False) -> str:
    """
    Ключ для словарей поиска.
    При ignore_case используется casefold, иначе имя как есть.
    """
    s = name or ""
    return s.casefold() if ignore_case else s


def normalize_attribute_name(attribute: str) -> str:
    """
    Приводит имя атрибута к простому виду:
      "System.ObsoleteAttribute" -> "Obsolete"
      "CompilerGenerated"        -> "CompilerGenerated"
    """
    s = (attribute or "").strip()
    s = s.rsplit(".", 1)[-1]
    if s.endswith(_ATTRIBUTE_SUFFIX) and len(s) > len(_ATTRIBUTE_SUFFIX):
        s = s[: -len(_ATTRIBUTE_SUFFIX)]
    return s


def has_attribute(attributes: Iterable[str], attribute: str) -> bool:
    """True если среди атрибутов есть нужный (сравнение по простому имени)."""
    wanted = normalize_attribute_name(attribute)
    return any(normalize_attribute_name(a) == wanted for a in attributes or ())


def is_compiler_generated_name(name: str) -> bool:
    """
    Имена, которые генерирует компилятор C#, начинаются с '<'
    (например, "<>c" или "<Main>$"); для вложенных типов смотрится
    последний сегмент после '+'.
    """
    return bool(name) and simple_name(name).rsplit("+", 1)[-1].startswith("<")


__all__ = [
    "OBSOLETE_ATTRIBUTE",
    "COMPILER_GENERATED_ATTRIBUTE",
    "split_full_name",
    "simple_name",
    "namespace_of",
    "combine_name",
    "name_key",
    "normalize_attribute_name",
    "has_attribute",
    "is_compiler_generated_name",
]

"""
utils/patterns.py

Шаблоны с подстановочными знаками для исключений и фильтров:
  *  — ноль или более любых символов
  ?  — ровно один символ
Шаблон должен совпасть со ВСЕЙ строкой, а не с подстрокой.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern


_BRACKETS = {"<": ">", "[": "]", "(": ")"}


def wildcard_to_regex(pattern: str) -> str:
    """
    "*.Internal.*" -> "^.*\\.Internal\\..*$"
    """
    parts: List[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "^" + "".join(parts) + "$"


def compile_wildcard(pattern: str, ignore_case: bool = False) -> Pattern[str]:
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile(wildcard_to_regex(pattern), flags | re.DOTALL)


def wildcard_match(pattern: str, value: str, ignore_case: bool = False) -> bool:
    return compile_wildcard(pattern, ignore_case).match(value or "") is not None


def pattern_problem(pattern: str) -> Optional[str]:
    """
    Проверяет синтаксис шаблона. Возвращает описание проблемы или None.

    Некорректным считается шаблон:
    - пустой или из одних пробелов;
    - с пробельными символами внутри;
    - с повторённой звёздочкой '**';
    - с пустым сегментом имени ('..', ведущая или завершающая точка);
    - с непарными скобками <>, [] или ().
    """
    if pattern is None or not str(pattern).strip():
        return "пустой шаблон"
    s = str(pattern)
    if any(ch.isspace() for ch in s):
        return f"шаблон '{s}' содержит пробельные символы"
    if "**" in s:
        return f"шаблон '{s}' содержит '**'"
    if ".." in s or s.startswith(".") or s.endswith("."):
        return f"шаблон '{s}' содержит пустой сегмент имени"

    stack: List[str] = []
    for ch in s:
        if ch in _BRACKETS:
            stack.append(_BRACKETS[ch])
        elif ch in _BRACKETS.values():
            if not stack or stack.pop() != ch:
                return f"шаблон '{s}' содержит непарную скобку '{ch}'"
    if stack:
        return f"шаблон '{s}' содержит незакрытую скобку"
    return None


def any_match(patterns: Iterable[Pattern[str]], value: str) -> Optional[Pattern[str]]:
    """Первый совпавший скомпилированный шаблон или None."""
    for p in patterns:
        if p.match(value or ""):
            return p
    return None


__all__ = [
    "wildcard_to_regex",
    "compile_wildcard",
    "wildcard_match",
    "pattern_problem",
    "any_match",
]

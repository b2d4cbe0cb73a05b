"""
utils/signatures.py

Разбор текста нормализованных сигнатур.

Сигнатуры приходят из извлечения уже нормализованными, поэтому здесь
нет никакой перенормализации: только чтение (список параметров)
и детерминированная подстановка имён типов (переименования).

Алгоритм подстановки:
1. Сигнатура разбивается на токены: квалифицированные идентификаторы
   (Ident(.Ident)*, допускается обратная кавычка generic-арности `1)
   и всё остальное (пробелы, скобки, запятые, ?, *, [] ...).
2. Каждый идентификатор заменяется ровно один раз, если он является
   ключом в таблице переименований. Заменённый текст повторно не сканируется.
3. Так как токенизация проходит все идентификаторы слева направо,
   вложенные generic-аргументы, массивы и параметры переписываются
   на любой глубине.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple


_IDENT_RE = re.compile(r"[A-Za-z_][\w`]*(?:\.[A-Za-z_][\w`]*)*")


_OPEN = "<[("
_CLOSE = ">])"


_PARAMETER_MODIFIERS = ("ref", "out", "in", "params", "this", "scoped", "readonly")


@dataclass(frozen=True)
class ParsedParameter:
    """Параметр, прочитанный из текста сигнатуры."""
    name: str
    type: str
    is_optional: bool = False
    default: Optional[str] = None


def tokenize(signature: str) -> List[Tuple[bool, str]]:
    """
    Разбивает сигнатуру на токены.
    Возвращает список (is_identifier, text); конкатенация текстов
    всегда равна исходной строке.
    """
    tokens: List[Tuple[bool, str]] = []
    pos = 0
    text = signature or ""
    for m in _IDENT_RE.finditer(text):
        if m.start() > pos:
            tokens.append((False, text[pos:m.start()]))
        tokens.append((True, m.group(0)))
        pos = m.end()
    if pos < len(text):
        tokens.append((False, text[pos:]))
    return tokens


def rewrite_names(signature: str, renames: Mapping[str, str], key=None) -> str:
    """
    Подставляет переименования во все идентификаторы сигнатуры.

    Args:
        signature: исходная сигнатура
        renames: таблица "ключ имени" -> новое имя
        key: функция построения ключа (например, casefold); по умолчанию identity
    """
    if not renames or not signature:
        return signature or ""

    key = key or (lambda s: s)
    out: List[str] = []
    for is_ident, text in tokenize(signature):
        if is_ident:
            out.append(renames.get(key(text), text))
        else:
            out.append(text)
    return "".join(out)


def _split_top_level(text: str, sep: str = ",") -> List[str]:
    """Делит строку по разделителю только на верхнем уровне вложенности скобок."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in text:
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth = max(depth - 1, 0)
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _follows_name(signature: str, pos: int) -> bool:
    """'(' в позиции pos стоит сразу после имени или списка generic-аргументов."""
    if pos == 0:
        return False
    prev = signature[pos - 1]
    return prev.isalnum() or prev in "_`>"


def parameter_group_span(signature: str) -> Optional[Tuple[int, int]]:
    """
    Границы (open, close) списка параметров сигнатуры метода.

    Список параметров — группа (...) верхнего уровня, стоящая сразу после
    имени члена: "(int, int) Bar(int a)" -> группа "(int a)", а не кортеж
    возвращаемого типа. Если такой группы нет, берётся первая группа
    верхнего уровня.
    """
    depth = 0
    start = -1
    first: Optional[Tuple[int, int]] = None
    for i, ch in enumerate(signature or ""):
        if ch in _OPEN:
            if ch == "(" and depth == 0:
                start = i
            depth += 1
        elif ch in _CLOSE:
            depth = max(depth - 1, 0)
            if ch == ")" and depth == 0 and start >= 0:
                if _follows_name(signature, start):
                    return start, i
                if first is None:
                    first = (start, i)
                start = -1
    return first


def _outer_parameter_group(signature: str) -> Optional[str]:
    span = parameter_group_span(signature)
    if span is None:
        return None
    return signature[span[0] + 1:span[1]]


def signature_outline(signature: str) -> str:
    """
    Сигнатура без содержимого списка параметров:
    "int Bar(int a, int b = 0)" -> "int Bar()".
    Остаются возвращаемый тип, модификаторы и имя.
    """
    signature = signature or ""
    span = parameter_group_span(signature)
    if span is None:
        return signature
    return signature[:span[0] + 1] + signature[span[1]:]


def _parse_one(raw: str) -> Optional[ParsedParameter]:
    chunk = raw.strip()
    if not chunk:
        return None

    default: Optional[str] = None
    eq = _split_top_level(chunk, "=")
    if len(eq) > 1:
        chunk = eq[0].strip()
        default = "=".join(eq[1:]).strip()

    words = chunk.split()
    while len(words) > 1 and words[0] in _PARAMETER_MODIFIERS:
        words = words[1:]

    if len(words) == 1:
        # только тип, без имени
        return ParsedParameter(name="", type=words[0], is_optional=default is not None, default=default)

    name = words[-1]
    type_text = " ".join(words[:-1])
    return ParsedParameter(name=name, type=type_text, is_optional=default is not None, default=default)


def parse_parameters(signature: str) -> Tuple[ParsedParameter, ...]:
    """
    Читает список параметров из сигнатуры вида
      "void Render(int width, Dictionary<string, int> map = null)".
    Для сигнатуры без скобок возвращает пустой кортеж.
    """
    group = _outer_parameter_group(signature or "")
    if group is None or not group.strip():
        return tuple()

    parsed = (_parse_one(p) for p in _split_top_level(group))
    return tuple(p for p in parsed if p is not None)


def unique_simple_renames(renames: Mapping[str, str], key=None) -> Dict[str, str]:
    """
    Строит таблицу переименований по простым именам для записей,
    у которых простое имя действительно меняется.
    Неоднозначные простые имена (одно старое -> разные новые) отбрасываются.
    """
    key = key or (lambda s: s)
    candidates: Dict[str, str] = {}
    ambiguous = set()

    for old_full, new_full in renames.items():
        old_simple = old_full.rsplit(".", 1)[-1]
        new_simple = new_full.rsplit(".", 1)[-1]
        if key(old_simple) == key(new_simple):
            continue
        k = key(old_simple)
        if k in candidates and candidates[k] != new_simple:
            ambiguous.add(k)
            continue
        candidates[k] = new_simple

    for k in ambiguous:
        candidates.pop(k, None)
    return candidates


def rewrite_signature(signature: str, renames: Mapping[str, str], key=None) -> str:
    """
    Переписывает сигнатуру через таблицу переименований полных имён
    и производную таблицу простых имён (см. unique_simple_renames).

    Полные имена имеют приоритет: токен сначала ищется среди полных
    имён, затем, если он не квалифицирован, среди простых.
    """
    if not renames or not signature:
        return signature or ""

    key = key or (lambda s: s)
    full = {key(old): new for old, new in renames.items()}
    simple = unique_simple_renames(renames, key)

    out: List[str] = []
    for is_ident, text in tokenize(signature):
        if not is_ident:
            out.append(text)
            continue
        k = key(text)
        if k in full:
            out.append(full[k])
        elif "." not in text and k in simple:
            out.append(simple[k])
        else:
            out.append(text)
    return "".join(out)


def signatures_equivalent(old: str, new: str, renames: Mapping[str, str], key=None) -> bool:
    """
    Сигнатуры различаются как строки, но совпадают после подстановки
    переименований в старую сигнатуру.
    """
    key = key or (lambda s: s)
    if key(old or "") == key(new or ""):
        return False
    return key(rewrite_signature(old, renames, key)) == key(new or "")


__all__ = [
    "ParsedParameter",
    "tokenize",
    "rewrite_names",
    "parse_parameters",
    "parameter_group_span",
    "signature_outline",
    "unique_simple_renames",
    "rewrite_signature",
    "signatures_equivalent",
]

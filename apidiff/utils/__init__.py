"""
Пакет utils: вспомогательные утилиты системы сравнения API.

Содержит чистые функции без побочных эффектов, используемые
различными слоями системы (comparison, rules, config, snapshot).

Состав пакета:
- naming: полные имена типов, ключи с учётом регистра, служебные атрибуты
- patterns: шаблоны с подстановочными знаками * и ?
- signatures: разбор сигнатур и подстановка переименований
"""

from .naming import (
    combine_name,
    has_attribute,
    is_compiler_generated_name,
    name_key,
    namespace_of,
    normalize_attribute_name,
    simple_name,
    split_full_name,
)

from .patterns import (
    compile_wildcard,
    pattern_problem,
    wildcard_match,
    wildcard_to_regex,
)

from .signatures import (
    parse_parameters,
    rewrite_signature,
    signature_outline,
    signatures_equivalent,
)


__all__ = [
    # naming
    "combine_name",
    "has_attribute",
    "is_compiler_generated_name",
    "name_key",
    "namespace_of",
    "normalize_attribute_name",
    "simple_name",
    "split_full_name",

    # patterns
    "compile_wildcard",
    "pattern_problem",
    "wildcard_match",
    "wildcard_to_regex",

    # signatures
    "parse_parameters",
    "rewrite_signature",
    "signature_outline",
    "signatures_equivalent",
]

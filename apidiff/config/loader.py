"""
Загрузка конфигурации сравнения из JSON-файла.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from apidiff.config.models import ComparisonConfiguration
from apidiff.config.validation import validate_configuration, validate_raw
from apidiff.core.exceptions import ConfigurationError, ConfigurationValidationError

logger = logging.getLogger("apidiff.config")


def config_from_dict(data: Mapping[str, Any], source: Optional[str] = None) -> ComparisonConfiguration:
    """
    Строит и проверяет конфигурацию.
    При ошибках бросает ConfigurationValidationError со списком ВСЕХ ошибок.
    """
    errors = validate_raw(data)
    if errors:
        raise ConfigurationValidationError(errors, source)

    config = ComparisonConfiguration.from_dict(data)
    errors = validate_configuration(config)
    if errors:
        raise ConfigurationValidationError(errors, source)
    return config


def load_configuration(path: Union[str, Path, None]) -> ComparisonConfiguration:
    """
    Читает конфигурацию из файла.
    Без пути возвращает конфигурацию по умолчанию.

    Raises:
        FileNotFoundError: файла нет
        ConfigurationError: файл не является корректным JSON
        ConfigurationValidationError: конфигурация не прошла проверку
    """
    if path is None:
        logger.debug("Файл конфигурации не задан, используются значения по умолчанию")
        return ComparisonConfiguration.create_default()

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Файл конфигурации не найден: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Некорректный JSON в файле конфигурации: {e.msg} (строка {e.lineno})",
            config_key=str(path),
        ) from e

    config = config_from_dict(data, source=str(path))
    logger.info("Конфигурация загружена: %s", path)
    return config


__all__ = ["config_from_dict", "load_configuration"]

"""
Пользовательские исключения системы сравнения публичного API.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence


class ApiDiffError(Exception):
    """Базовое исключение для системы сравнения API."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: Optional[dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class ConfigurationError(ApiDiffError):
    """Ошибка конфигурации сравнения."""

    def __init__(self, message: str, config_key: str = None, config_value: str = None):
        details: Dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = config_value
        super().__init__(message, "CONFIGURATION_ERROR", details)


class ConfigurationValidationError(ConfigurationError):
    """
    Конфигурация не прошла проверку.
    Содержит ВСЕ найденные ошибки, а не только первую.
    """

    def __init__(self, errors: Sequence[str], source: str = None):
        self.errors: List[str] = list(errors)
        message = f"Конфигурация содержит ошибок: {len(self.errors)}"
        if source:
            message += f" ({source})"
        super().__init__(message)
        self.code = "CONFIGURATION_VALIDATION_ERROR"
        self.details["errors"] = self.errors
        if source:
            self.details["source"] = source


class SnapshotError(ApiDiffError):
    """Ошибка чтения или проверки снимка API."""

    def __init__(self, message: str, file_path: str = None, errors: Optional[Sequence[str]] = None):
        details: Dict[str, Any] = {}
        if file_path:
            details["file_path"] = file_path
        self.errors: List[str] = list(errors or [])
        if self.errors:
            details["errors"] = self.errors
        super().__init__(message, "SNAPSHOT_ERROR", details)


class ReportError(ApiDiffError):
    """Ошибка формирования или экспорта отчёта."""

    def __init__(self, message: str, report_format: str = None):
        details: Dict[str, Any] = {}
        if report_format:
            details["format"] = report_format
        super().__init__(message, "REPORT_ERROR", details)


class ResultInvariantError(ApiDiffError):
    """Категория результата содержит различие чужого вида."""

    def __init__(self, category: str, expected_kind: str, offending: Sequence[str]):
        message = (
            f"Категория '{category}' должна содержать только '{expected_kind}', "
            f"найдено несоответствий: {len(offending)}"
        )
        super().__init__(message, "RESULT_INVARIANT_ERROR", {
            "category": category,
            "expected_kind": expected_kind,
            "offending": list(offending),
        })


def handle_exception(exception: Exception) -> dict:
    if isinstance(exception, ApiDiffError):
        return exception.to_dict()
    return {
        "error": str(exception),
        "code": "UNKNOWN_ERROR",
        "details": {
            "exception_type": exception.__class__.__name__,
        },
    }

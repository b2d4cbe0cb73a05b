"""
Коды завершения процесса.

  0  сравнение выполнено, ломающих изменений нет
  1  обнаружены ломающие изменения (только при failOnBreakingChanges)
  2  ошибка сравнения (снимки, отчёт, нарушение инвариантов результата)
  4  ошибка конфигурации
  5  некорректные аргументы
  6  файл не найден
  99 непредвиденная ошибка
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import (
    EXIT_BREAKING_CHANGES,
    EXIT_CODE_DESCRIPTIONS,
    EXIT_COMPARISON_ERROR,
    EXIT_CONFIGURATION_ERROR,
    EXIT_FILE_NOT_FOUND,
    EXIT_INVALID_ARGUMENTS,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED_ERROR,
)
from ..core.exceptions import (
    ConfigurationError,
    ReportError,
    ResultInvariantError,
    SnapshotError,
)
from ..core.models import ComparisonResult

logger = logging.getLogger("apidiff.pipeline.exit_codes")


class ExitCodeManager:
    def __init__(self, fail_on_breaking_changes: bool = True):
        self.fail_on_breaking_changes = fail_on_breaking_changes

    def exit_code(self, has_breaking_changes: bool, has_errors: bool = False) -> int:
        if has_errors:
            logger.warning("Во время сравнения возникли ошибки")
            return EXIT_COMPARISON_ERROR
        if has_breaking_changes and self.fail_on_breaking_changes:
            return EXIT_BREAKING_CHANGES
        return EXIT_SUCCESS

    def for_result(self, result: Optional[ComparisonResult]) -> int:
        if result is None:
            return EXIT_COMPARISON_ERROR
        if result.has_breaking_changes:
            logger.info("Ломающих изменений: %d", result.breaking_changes_count)
        return self.exit_code(result.has_breaking_changes)

    @staticmethod
    def for_exception(exception: BaseException) -> int:
        # порядок важен: FileNotFoundError — подкласс OSError
        if isinstance(exception, (FileNotFoundError, IsADirectoryError, NotADirectoryError)):
            code = EXIT_FILE_NOT_FOUND
        elif isinstance(exception, ConfigurationError):
            code = EXIT_CONFIGURATION_ERROR
        elif isinstance(exception, (SnapshotError, ReportError, ResultInvariantError)):
            code = EXIT_COMPARISON_ERROR
        elif isinstance(exception, (ValueError, TypeError)):
            code = EXIT_INVALID_ARGUMENTS
        else:
            code = EXIT_UNEXPECTED_ERROR

        logger.debug("%s -> код завершения %d", type(exception).__name__, code)
        return code

    @staticmethod
    def describe(exit_code: int) -> str:
        return EXIT_CODE_DESCRIPTIONS.get(exit_code, f"Неизвестный код завершения: {exit_code}")


__all__ = ["ExitCodeManager"]

# __init__.py для пакета pipeline
"""
Пакет pipeline: конвейер вокруг ядра сравнения.

- ApiDiffRunner — загрузка снимков, фильтрация, сравнение, отчёт
- Reporter — формирование и экспорт отчётов
- ExitCodeManager — коды завершения процесса
"""

from .orchestrator import ApiDiffRunner
from .reporter import Reporter
from .exit_codes import ExitCodeManager


__all__ = [
    "ApiDiffRunner",
    "Reporter",
    "ExitCodeManager",
]

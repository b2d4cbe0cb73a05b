"""
Координатор всего процесса сравнения API.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging
import time

from ..comparison import Comparer
from ..config.models import ComparisonConfiguration
from ..core.models import ComparisonResult, Element
from ..snapshot import ApiSnapshot, ElementFilter, load_snapshot
from .reporter import Reporter

logger = logging.getLogger("apidiff.pipeline")


class ApiDiffRunner:
    """
    Основной класс сравнения двух снимков API.
    Реализует полный конвейер: загрузка -> фильтрация -> сравнение -> отчёт.

    Исключения этапов не перехватываются: их превращает в коды
    завершения вызывающая сторона (см. ExitCodeManager).
    """

    def __init__(self, config: Optional[ComparisonConfiguration] = None, reporter: Optional[Reporter] = None):
        self.config = config or ComparisonConfiguration.create_default()
        self.reporter = reporter or Reporter()
        self.element_filter = ElementFilter(self.config.filters)

        self.diagnostics: List[str] = []
        self.result: Optional[ComparisonResult] = None
        self.stats: Dict[str, float] = {
            "loading_time": 0.0,
            "filtering_time": 0.0,
            "comparison_time": 0.0,
            "total_time": 0.0,
        }

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def compare_elements(self, baseline: Iterable[Element], target: Iterable[Element]) -> ComparisonResult:
        """
        Фильтрует и сравнивает уже загруженные элементы.
        """
        t0 = time.perf_counter()
        baseline = self.element_filter.apply(baseline)
        target = self.element_filter.apply(target)
        self.stats["filtering_time"] = time.perf_counter() - t0

        t0 = time.perf_counter()
        comparer = Comparer(diagnostics=self.diagnostics.append)
        result = comparer.compare(baseline, target, self.config)
        self.stats["comparison_time"] = time.perf_counter() - t0

        logger.info(
            "Сравнение: добавлено %d, удалено %d, изменено %d, исключено %d, ломающих %d",
            len(result.additions), len(result.removals), len(result.modifications),
            len(result.excluded), result.breaking_changes_count,
        )
        return result

    def run(self, baseline_path: str, target_path: str) -> Dict[str, Any]:
        """
        Полный конвейер для двух файлов снимков.
        Возвращает отчёт (см. Reporter.build_report) и сохраняет результат в self.result.
        """
        total_start = time.perf_counter()

        # ---------- Этап 1: Загрузка ----------
        t0 = time.perf_counter()
        baseline = load_snapshot(baseline_path)
        target = load_snapshot(target_path)
        self.stats["loading_time"] = time.perf_counter() - t0

        # ---------- Этап 2-3: Фильтрация и сравнение ----------
        self.result = self.compare_elements(baseline.elements, target.elements)

        self.stats["total_time"] = time.perf_counter() - total_start

        # ---------- Этап 4: Отчёт ----------
        return self._generate_report(self.result, baseline, target)

    # ==========================================================
    # REPORT GENERATION
    # ==========================================================

    def _generate_report(
        self,
        result: ComparisonResult,
        baseline: ApiSnapshot,
        target: ApiSnapshot,
    ) -> Dict[str, Any]:
        report = self.reporter.build_report(
            result,
            baseline=baseline.label,
            target=target.label,
            fail_on_breaking_changes=self.config.fail_on_breaking_changes,
            performance=dict(self.stats),
        )
        if self.diagnostics:
            report["diagnostics"] = list(self.diagnostics)
        return report


__all__ = ["ApiDiffRunner"]

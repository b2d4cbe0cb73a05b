"""
reporter.py

Генерация и экспорт отчётов о различиях публичного API.

Цели:
- единый контракт отчёта (metadata/summary/changes/by_severity/performance)
- экспорт: json / console (текст) / markdown / html

Важно:
- reporter не принимает решений о том, что ломает потребителей:
  он только показывает то, что уже классифицировал ChangeClassifier.
"""

from __future__ import annotations

from datetime import datetime
from html import escape
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from ..core.constants import (
    CHANGE_CATEGORIES,
    MAX_CHANGES_IN_TEXT_REPORT,
    REPORT_FORMATS,
    SEVERITY_LEVELS,
    SEVERITY_ORDER,
    TOOL_NAME,
    VERSION,
)
from ..core.exceptions import ReportError
from ..core.models import ComparisonResult

logger = logging.getLogger("apidiff.pipeline.reporter")


class Reporter:
    """
    Построитель и экспортёр отчётов.

    Конвенции:
    - report['changes'] хранит различия по категориям:
        {"removals": [...], "modifications": [...], "additions": [...], "excluded": [...]}
      каждое различие — Difference.to_dict().
    - report['by_severity'] — число не исключённых различий каждого уровня.
    """

    # "text" — синоним "console"
    FORMAT_ALIASES = {"text": "console"}

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.max_changes_in_text = int(self.config.get("max_changes_in_text", MAX_CHANGES_IN_TEXT_REPORT))
        self.tool_name = self.config.get("tool_name", TOOL_NAME)
        self.version = self.config.get("version", VERSION)

    # ---------------------------------------------------------------------
    # 1) BUILD REPORT
    # ---------------------------------------------------------------------

    def build_report(
            self,
            result: ComparisonResult,
            *,
            baseline: Optional[str] = None,
            target: Optional[str] = None,
            fail_on_breaking_changes: bool = True,
            performance: Optional[Dict[str, Any]] = None,
            metadata_overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Формирует единый отчёт.

        Args:
            result: результат Comparer.compare(...)
            baseline / target: подписи сравниваемых снимков
            fail_on_breaking_changes: блокируют ли ломающие изменения сборку
            performance: словарь с метриками времени (опционально)
            metadata_overrides: доп. поля metadata

        Returns:
            Единый отчёт-словарь.
        """
        metadata = {
            "timestamp": datetime.now().isoformat(),
            "version": self.version,
            "tool": self.tool_name,
            "baseline": baseline,
            "target": target,
        }
        if metadata_overrides:
            metadata.update(metadata_overrides)

        summary = dict(result.summary())
        summary["has_breaking_changes"] = result.has_breaking_changes
        summary["build_blocked"] = bool(fail_on_breaking_changes and result.has_breaking_changes)

        changes = {
            category: [d.to_dict() for d in getattr(result, category)]
            for category in CHANGE_CATEGORIES
        }

        by_severity = {level: 0 for level in SEVERITY_ORDER}
        for d in result.additions + result.removals + result.modifications:
            by_severity[d.severity.value] += 1

        return {
            "metadata": metadata,
            "summary": summary,
            "changes": changes,
            "by_severity": by_severity,
            "performance": performance or {},
        }

    def build_error_report(self, error: Dict[str, Any]) -> Dict[str, Any]:
        """Отчёт об ошибке (error — результат handle_exception)."""
        return {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "status": "ERROR",
                "version": self.version,
                "tool": self.tool_name,
            },
            "error": error,
            "summary": {},
            "changes": {category: [] for category in CHANGE_CATEGORIES},
            "by_severity": {},
            "performance": {},
        }

    # ---------------------------------------------------------------------
    # 2) EXPORT
    # ---------------------------------------------------------------------

    def export(
            self,
            report: Dict[str, Any],
            *,
            format: str = "console",
            output_file: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Экспорт отчёта в заданном формате.

        Args:
            report: отчёт
            format: console | json | markdown | html
            output_file: если задан — сохраняет в файл и возвращает пустую строку

        Returns:
            строка отчёта (если output_file=None)
        """
        fmt = (format or "console").lower().strip()
        fmt = self.FORMAT_ALIASES.get(fmt, fmt)

        if fmt == "json":
            output = self._export_json(report)
        elif fmt == "console":
            output = self._export_text(report)
        elif fmt == "markdown":
            output = self._export_markdown(report)
        elif fmt == "html":
            output = self._export_html(report)
        else:
            raise ReportError(
                f"Неподдерживаемый формат: {format}. Доступные: {', '.join(REPORT_FORMATS)}",
                report_format=format,
            )

        if output_file:
            path = Path(output_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(output, encoding="utf-8")
            logger.info("Отчёт (%s) сохранён: %s", fmt, path)
            return ""
        return output

    def _export_json(self, report: Dict[str, Any]) -> str:
        return json.dumps(report, indent=2, ensure_ascii=False)

    def _export_text(self, report: Dict[str, Any]) -> str:
        summary = report.get("summary", {}) or {}
        metadata = report.get("metadata", {}) or {}
        changes = report.get("changes", {}) or {}

        out: List[str] = []
        out.append("=" * 70)
        out.append("ОТЧЁТ О РАЗЛИЧИЯХ ПУБЛИЧНОГО API")
        out.append("=" * 70)
        out.append("")

        if "error" in report:
            error = report["error"] or {}
            out.append(f"ОШИБКА: {error.get('error', 'N/A')} [{error.get('code', 'N/A')}]")
            out.append("=" * 70)
            return "\n".join(out)

        out.append("МЕТАДАННЫЕ:")
        out.append(f"  Время анализа: {metadata.get('timestamp', 'N/A')}")
        out.append(f"  Инструмент: {metadata.get('tool', 'N/A')} {metadata.get('version', '')}".rstrip())
        out.append(f"  Базовая версия: {metadata.get('baseline') or 'N/A'}")
        out.append(f"  Целевая версия: {metadata.get('target') or 'N/A'}")
        out.append("")
        out.append("СВОДКА:")
        out.append(f"  Добавлено: {summary.get('added', 0)}")
        out.append(f"  Удалено: {summary.get('removed', 0)}")
        out.append(f"  Изменено: {summary.get('modified', 0)}")
        out.append(f"  Исключено: {summary.get('excluded', 0)}")
        out.append(f"  Всего изменений: {summary.get('total_changes', 0)}")
        out.append(f"  Ломающих изменений: {summary.get('breaking_changes', 0)}")
        out.append(f"  Сборка заблокирована: {'ДА' if summary.get('build_blocked') else 'НЕТ'}")

        if not any(changes.get(c) for c in CHANGE_CATEGORIES):
            out.append("")
            out.append("РАЗЛИЧИЙ НЕ ОБНАРУЖЕНО")
        else:
            for category, title in CHANGE_CATEGORIES.items():
                items = changes.get(category) or []
                if not items:
                    continue
                out.append(f"\n{title.upper()} ({len(items)}):")
                for i, d in enumerate(items[: self.max_changes_in_text], 1):
                    out.append(f"  {i}. {self._severity_badge(d)} {d.get('description', 'N/A')}{self._breaking_mark(d)}")
                    out.append(f"     Элемент: {d.get('element_kind')} {d.get('element_name')}")
                    if d.get("old_signature") and d.get("new_signature") and d["old_signature"] != d["new_signature"]:
                        out.append(f"     Было:  {d['old_signature']}")
                        out.append(f"     Стало: {d['new_signature']}")
                if len(items) > self.max_changes_in_text:
                    out.append(f"     ... и ещё {len(items) - self.max_changes_in_text}")

        perf = report.get("performance", {})
        if perf:
            out.append("\n" + "=" * 70)
            out.append("ПРОИЗВОДИТЕЛЬНОСТЬ:")
            out.append(f"  Общее время: {perf.get('total_time', 0):.4f}с")
            out.append(f"  Загрузка снимков: {perf.get('loading_time', 0):.4f}с")
            out.append(f"  Фильтрация: {perf.get('filtering_time', 0):.4f}с")
            out.append(f"  Сравнение: {perf.get('comparison_time', 0):.4f}с")

        out.append("\n" + "=" * 70)
        return "\n".join(out)

    def _export_markdown(self, report: Dict[str, Any]) -> str:
        """Экспорт в Markdown формат."""
        summary = report.get("summary", {}) or {}
        metadata = report.get("metadata", {}) or {}
        changes = report.get("changes", {}) or {}

        out: List[str] = []
        out.append("# Отчёт о различиях публичного API")
        out.append("")

        out.append("## Метаданные")
        out.append(f"- **Время анализа:** {metadata.get('timestamp', 'N/A')}")
        out.append(f"- **Инструмент:** {metadata.get('tool', 'N/A')} {metadata.get('version', '')}".rstrip())
        out.append(f"- **Базовая версия:** {metadata.get('baseline') or 'N/A'}")
        out.append(f"- **Целевая версия:** {metadata.get('target') or 'N/A'}")
        out.append("")

        out.append("## Сводка")
        out.append("| Категория | Количество |")
        out.append("|---|---|")
        for category, title in CHANGE_CATEGORIES.items():
            out.append(f"| {title} | {len(changes.get(category) or [])} |")
        out.append(f"| **Ломающих изменений** | **{summary.get('breaking_changes', 0)}** |")
        out.append("")
        out.append(f"- **Сборка заблокирована:** {'**ДА**' if summary.get('build_blocked') else 'нет'}")
        out.append("")

        if not any(changes.get(c) for c in CHANGE_CATEGORIES):
            out.append("## Различия")
            out.append("Различий не обнаружено.")
            return "\n".join(out)

        for category, title in CHANGE_CATEGORIES.items():
            items = changes.get(category) or []
            if not items:
                continue
            out.append(f"## {title} ({len(items)})")
            out.append("| Важность | Вид | Элемент | Описание | Ломает |")
            out.append("|---|---|---|---|---|")
            for d in items[: self.max_changes_in_text]:
                out.append(
                    f"| {self._severity_badge(d)} {d.get('severity', '')} "
                    f"| {d.get('element_kind', '')} "
                    f"| `{self._md_cell(d.get('element_name', ''))}` "
                    f"| {self._md_cell(d.get('description', ''))} "
                    f"| {'да' if d.get('is_breaking') else 'нет'} |"
                )
            if len(items) > self.max_changes_in_text:
                out.append("")
                out.append(f"... и ещё {len(items) - self.max_changes_in_text}")
            out.append("")

        return "\n".join(out)

    def _export_html(self, report: Dict[str, Any]) -> str:
        """Экспорт в HTML формат."""
        summary = report.get("summary", {}) or {}
        metadata = report.get("metadata", {}) or {}
        changes = report.get("changes", {}) or {}

        html = []
        html.append("""
        <!DOCTYPE html>
        <html lang="ru">
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
            <title>Отчёт о различиях публичного API</title>
            <style>
                body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
                h1 { color: #333; border-bottom: 2px solid #333; padding-bottom: 10px; }
                h2 { color: #555; border-bottom: 1px solid #ddd; padding-bottom: 5px; }
                .summary { background: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0; }
                .critical { border-left: 5px solid #dc3545; }
                .error { border-left: 5px solid #fd7e14; }
                .warning { border-left: 5px solid #ffc107; }
                .info { border-left: 5px solid #28a745; }
                .metadata { color: #666; font-size: 0.9em; }
                .no-changes { color: #28a745; font-weight: bold; }
                .blocked { color: #dc3545; font-weight: bold; }
                code { background: #f8f9fa; padding: 2px 4px; }
                table { border-collapse: collapse; width: 100%; margin: 20px 0; }
                th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
                th { background-color: #f2f2f2; }
            </style>
        </head>
        <body>
        """)

        html.append("<h1>Отчёт о различиях публичного API</h1>")

        # Метаданные
        html.append("<div class='metadata'>")
        html.append(f"<p><strong>Время анализа:</strong> {escape(str(metadata.get('timestamp', 'N/A')))}</p>")
        html.append(f"<p><strong>Инструмент:</strong> {escape(str(metadata.get('tool', 'N/A')))} "
                    f"{escape(str(metadata.get('version', '')))}</p>")
        html.append(f"<p><strong>Базовая версия:</strong> {escape(str(metadata.get('baseline') or 'N/A'))}</p>")
        html.append(f"<p><strong>Целевая версия:</strong> {escape(str(metadata.get('target') or 'N/A'))}</p>")
        html.append("</div>")

        # Сводка
        html.append("<div class='summary'>")
        html.append("<h2>Сводка</h2>")
        for category, title in CHANGE_CATEGORIES.items():
            html.append(f"<p><strong>{title}:</strong> {len(changes.get(category) or [])}</p>")
        html.append(f"<p><strong>Ломающих изменений:</strong> {summary.get('breaking_changes', 0)}</p>")
        blocked_html = '<span class="blocked">ДА</span>' if summary.get("build_blocked") else "нет"
        html.append(f"<p><strong>Сборка заблокирована:</strong> {blocked_html}</p>")
        html.append("</div>")

        if not any(changes.get(c) for c in CHANGE_CATEGORIES):
            html.append('<p class="no-changes">Различий не обнаружено.</p>')
        else:
            for category, title in CHANGE_CATEGORIES.items():
                items = changes.get(category) or []
                if not items:
                    continue
                html.append(f"<h2>{title} ({len(items)})</h2>")
                html.append("<table>")
                html.append("<tr><th>Важность</th><th>Вид</th><th>Элемент</th><th>Описание</th><th>Ломает</th></tr>")
                for d in items[: self.max_changes_in_text]:
                    level_class = str(d.get("severity", "Info")).lower()
                    html.append(f'<tr class="{escape(level_class)}">')
                    html.append(f"<td>{self._severity_badge(d)} {escape(str(d.get('severity', '')))}</td>")
                    html.append(f"<td>{escape(str(d.get('element_kind', '')))}</td>")
                    html.append(f"<td><code>{escape(str(d.get('element_name', '')))}</code></td>")
                    html.append(f"<td>{escape(str(d.get('description', '')))}</td>")
                    html.append(f"<td>{'да' if d.get('is_breaking') else 'нет'}</td>")
                    html.append("</tr>")
                html.append("</table>")

        html.append("""
        </body>
        </html>
        """)

        return "\n".join(html)

    # ---------------------------------------------------------------------
    # 3) INTERNAL HELPERS
    # ---------------------------------------------------------------------

    @staticmethod
    def _severity_badge(diff: Dict[str, Any]) -> str:
        level = SEVERITY_LEVELS.get(str(diff.get("severity", "")), {})
        return level.get("emoji", "")

    @staticmethod
    def _breaking_mark(diff: Dict[str, Any]) -> str:
        return " [BREAKING]" if diff.get("is_breaking") else ""

    @staticmethod
    def _md_cell(text: Any) -> str:
        return str(text).replace("|", "\\|")


__all__ = ["Reporter"]

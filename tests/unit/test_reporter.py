"""
Unit tests for report building and export.
"""

import json

import pytest

from apidiff.comparison import compare
from apidiff.core.exceptions import ReportError, SnapshotError, handle_exception
from apidiff.core.models import ComparisonResult
from apidiff.pipeline import Reporter
from builders import make_method, make_type


@pytest.fixture
def reporter():
    return Reporter()


@pytest.fixture
def breaking_result(default_config):
    baseline = [
        make_type("Contoso.Widget"),
        make_method("Contoso.Widget", "Render", "void Render(int width)"),
        make_type("Contoso.Legacy<T>"),
    ]
    target = [
        make_type("Contoso.Widget"),
        make_method("Contoso.Widget", "Render", "void Render(int size)"),
        make_type("Contoso.Gadget"),
    ]
    return compare(baseline, target, default_config)


class TestBuildReport:

    def test_report_sections(self, reporter, breaking_result):
        report = reporter.build_report(breaking_result, baseline="v1", target="v2", performance={"total_time": 0.5})

        assert set(report) == {"metadata", "summary", "changes", "by_severity", "performance"}
        assert report["metadata"]["baseline"] == "v1"
        assert report["metadata"]["target"] == "v2"
        assert report["summary"]["added"] == 1
        assert report["summary"]["removed"] == 1
        assert report["summary"]["modified"] == 1
        assert report["summary"]["has_breaking_changes"] is True
        assert report["summary"]["build_blocked"] is True
        assert report["by_severity"] == {"Critical": 1, "Error": 0, "Warning": 1, "Info": 1}
        assert report["performance"] == {"total_time": 0.5}
        assert report["changes"]["removals"][0]["element_name"] == "Contoso.Legacy<T>"

    def test_build_not_blocked_when_policy_allows(self, reporter, breaking_result):
        report = reporter.build_report(breaking_result, fail_on_breaking_changes=False)
        assert report["summary"]["build_blocked"] is False
        assert report["summary"]["has_breaking_changes"] is True

    def test_metadata_overrides(self, reporter):
        report = reporter.build_report(ComparisonResult(), metadata_overrides={"tool": "custom"})
        assert report["metadata"]["tool"] == "custom"

    def test_error_report(self, reporter):
        error = handle_exception(SnapshotError("bad", file_path="a.json"))
        report = reporter.build_error_report(error)
        assert report["metadata"]["status"] == "ERROR"
        assert report["error"]["code"] == "SNAPSHOT_ERROR"
        assert "ОШИБКА: bad [SNAPSHOT_ERROR]" in reporter.export(report)

    def test_unknown_error_report(self, reporter):
        error = handle_exception(RuntimeError("boom"))
        assert error["code"] == "UNKNOWN_ERROR"
        assert reporter.build_error_report(error)["error"]["details"]["exception_type"] == "RuntimeError"


class TestExport:

    def test_json(self, reporter, breaking_result):
        report = reporter.build_report(breaking_result)
        data = json.loads(reporter.export(report, format="json"))
        assert data["summary"]["breaking_changes"] == 1

    def test_console(self, reporter, breaking_result):
        text = reporter.export(reporter.build_report(breaking_result), format="console")
        assert "ОТЧЁТ О РАЗЛИЧИЯХ ПУБЛИЧНОГО API" in text
        assert "Removed class 'Contoso.Legacy<T>' [BREAKING]" in text
        assert "Было:  void Render(int width)" in text
        assert "Сборка заблокирована: ДА" in text

    def test_text_alias(self, reporter, breaking_result):
        report = reporter.build_report(breaking_result)
        assert reporter.export(report, format="text") == reporter.export(report, format="console")

    def test_console_without_changes(self, reporter):
        text = reporter.export(reporter.build_report(ComparisonResult()))
        assert "РАЗЛИЧИЙ НЕ ОБНАРУЖЕНО" in text

    def test_markdown(self, reporter, breaking_result):
        text = reporter.export(reporter.build_report(breaking_result), format="markdown")
        assert text.startswith("# Отчёт о различиях публичного API")
        assert "`Contoso.Legacy<T>`" in text
        assert "| **Ломающих изменений** | **1** |" in text

    def test_markdown_without_changes(self, reporter):
        text = reporter.export(reporter.build_report(ComparisonResult()), format="markdown")
        assert "Различий не обнаружено." in text

    def test_html_escapes_names(self, reporter, breaking_result):
        text = reporter.export(reporter.build_report(breaking_result), format="html")
        assert "<code>Contoso.Legacy&lt;T&gt;</code>" in text
        assert "Contoso.Legacy<T>" not in text

    def test_unknown_format(self, reporter):
        with pytest.raises(ReportError):
            reporter.export(reporter.build_report(ComparisonResult()), format="pdf")

    def test_output_file(self, reporter, breaking_result, tmp_path):
        path = tmp_path / "out" / "report.json"
        returned = reporter.export(reporter.build_report(breaking_result), format="json", output_file=path)

        assert returned == ""
        assert json.loads(path.read_text(encoding="utf-8"))["summary"]["added"] == 1

    def test_text_limit(self, breaking_result):
        reporter = Reporter({"max_changes_in_text": 0})
        text = reporter.export(reporter.build_report(breaking_result))
        assert "... и ещё 1" in text

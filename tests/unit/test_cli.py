"""
End-to-end tests: ApiDiffRunner and the command-line entry point.
"""

import json

import pytest

from apidiff.config.models import ComparisonConfiguration, FilterConfig, MappingConfig
from apidiff.pipeline import ApiDiffRunner
from builders import make_type
from main import main

WIDGET_V1 = {
    "component": "Contoso.Widgets",
    "version": "1.0",
    "elements": [
        {"fullName": "Contoso.Widget", "kind": "class", "signature": "class Widget"},
        {"fullName": "Contoso.Widget.Render", "name": "Render", "kind": "method",
         "signature": "void Render(int width)", "declaringContainer": "Contoso.Widget"},
        {"fullName": "Contoso.Internal.Cache", "kind": "class", "signature": "class Cache"},
    ],
}

WIDGET_V2 = {
    "component": "Contoso.Widgets",
    "version": "2.0",
    "elements": [
        {"fullName": "Contoso.Widget", "kind": "class", "signature": "class Widget"},
        {"fullName": "Contoso.Widget.Render", "name": "Render", "kind": "method",
         "signature": "void Render(int width)", "declaringContainer": "Contoso.Widget"},
    ],
}


@pytest.fixture
def snapshots(write_json):
    return write_json("v1.json", WIDGET_V1), write_json("v2.json", WIDGET_V2)


class TestRunner:

    def test_run_produces_report_and_result(self, snapshots):
        runner = ApiDiffRunner()
        report = runner.run(*map(str, snapshots))

        assert runner.result.removals[0].element_name == "Contoso.Internal.Cache"
        assert report["metadata"]["baseline"] == "Contoso.Widgets 1.0"
        assert report["metadata"]["target"] == "Contoso.Widgets 2.0"
        assert report["summary"]["build_blocked"] is True
        assert set(report["performance"]) == {"loading_time", "filtering_time", "comparison_time", "total_time"}

    def test_filters_apply_before_comparison(self, snapshots):
        config = ComparisonConfiguration(filters=FilterConfig(exclude_namespaces=("Contoso.Internal",)))
        runner = ApiDiffRunner(config)
        report = runner.run(*map(str, snapshots))

        assert report["summary"]["total_changes"] == 0
        assert not runner.result.has_breaking_changes

    def test_compare_elements_collects_diagnostics(self):
        config = ComparisonConfiguration(mappings=MappingConfig(auto_map_same_name_types=True))
        runner = ApiDiffRunner(config)

        result = runner.compare_elements(
            [make_type("Old.Foo")],
            [make_type("New.Foo"), make_type("Other.Foo")],
        )

        assert [d.element_name for d in result.additions] == ["Other.Foo"]
        assert any("Other.Foo" in m for m in runner.diagnostics)
        assert runner.stats["comparison_time"] >= 0


class TestMain:

    def test_no_changes_exit_zero(self, snapshots, capsys):
        v1, _ = snapshots
        assert main([str(v1), str(v1)]) == 0
        assert "РАЗЛИЧИЙ НЕ ОБНАРУЖЕНО" in capsys.readouterr().out

    def test_breaking_changes_exit_one(self, snapshots, capsys):
        assert main([str(p) for p in snapshots]) == 1
        assert "Contoso.Internal.Cache" in capsys.readouterr().out

    def test_no_fail_on_breaking(self, snapshots):
        assert main([str(p) for p in snapshots] + ["--no-fail-on-breaking"]) == 0

    def test_exclude_pattern_from_command_line(self, snapshots):
        assert main([str(p) for p in snapshots] + ["-e", "*.Internal.*"]) == 0

    def test_filter_from_command_line_limits_scope(self, snapshots):
        assert main([str(p) for p in snapshots] + ["-f", "Fabrikam"]) == 0

    def test_json_output_file(self, snapshots, tmp_path):
        out = tmp_path / "report.json"
        code = main([str(p) for p in snapshots] + ["-o", "json", "--out", str(out)])

        assert code == 1
        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["summary"]["removed"] == 1

    def test_config_file(self, snapshots, write_json):
        config = write_json("apidiff.json", {"exclusions": {"excludedTypes": ["Contoso.Internal.Cache"]}})
        assert main([str(p) for p in snapshots] + ["-c", str(config)]) == 0

    def test_invalid_config_exit_four(self, snapshots, write_json, capsys):
        config = write_json("apidiff.json", {"mappings": {"typeMappings": {"A": "B", "B": "A"}}})

        assert main([str(p) for p in snapshots] + ["-c", str(config)]) == 4
        assert "цикл A -> B -> A" in capsys.readouterr().err

    def test_missing_snapshot_exit_six(self, snapshots, tmp_path):
        v1, _ = snapshots
        assert main([str(v1), str(tmp_path / "missing.json")]) == 6

    def test_missing_config_exit_six(self, snapshots, tmp_path):
        assert main([str(p) for p in snapshots] + ["-c", str(tmp_path / "missing.json")]) == 6

    def test_malformed_snapshot_exit_two(self, snapshots, write_json):
        v1, _ = snapshots
        broken = write_json("broken.json", {"elements": [{"kind": "class"}]})
        assert main([str(v1), str(broken)]) == 2

    def test_bad_arguments_exit_five(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["only-one.json"])
        assert exc_info.value.code == 5

"""
Unit tests for snapshot loading and pre-comparison filtering.
"""

import pytest

from apidiff.config.models import FilterConfig
from apidiff.core.exceptions import SnapshotError
from apidiff.core.models import Accessibility, ElementKind
from apidiff.snapshot import ElementFilter, load_snapshot, snapshot_from_data
from builders import make_method, make_type


def type_entry(full_name, **extra):
    data = {"fullName": full_name, "kind": "class", "accessibility": "public",
            "signature": f"class {full_name.rsplit('.', 1)[-1]}"}
    data.update(extra)
    return data


def member_entry(container, name, signature, kind="method", **extra):
    data = {"fullName": f"{container}.{name}", "name": name, "kind": kind,
            "accessibility": "public", "signature": signature,
            "declaringContainer": container}
    data.update(extra)
    return data


# =========================================================================
# Loading
# =========================================================================

class TestSnapshotLoading:

    def test_object_document(self, write_json):
        path = write_json("widget-1.0.json", {
            "component": "Contoso.Widgets",
            "version": "1.0",
            "elements": [
                type_entry("Contoso.Widget", interfaces=["System.IDisposable"]),
                member_entry("Contoso.Widget", "Render", "void Render(int width)"),
            ],
        })

        snapshot = load_snapshot(path)

        assert snapshot.label == "Contoso.Widgets 1.0"
        assert len(snapshot) == 2
        widget, render = snapshot.elements
        assert widget.kind == ElementKind.CLASS
        assert widget.name == "Widget"
        assert widget.namespace == "Contoso"
        assert widget.interfaces == ("System.IDisposable",)
        assert render.declaring_container == "Contoso.Widget"
        assert render.namespace == "Contoso"
        assert render.parameter_types() == ("int",)

    def test_list_document_uses_file_name_as_label(self, write_json):
        path = write_json("baseline.json", [type_entry("Foo")])
        snapshot = load_snapshot(path)
        assert snapshot.label == "baseline"
        assert snapshot.elements[0].namespace == ""

    def test_explicit_parameters(self):
        snapshot = snapshot_from_data([
            type_entry("Foo"),
            member_entry("Foo", "Run", "void Run(int a, bool b = false)", parameters=[
                {"name": "a", "type": "int"},
                {"name": "b", "type": "bool", "isOptional": True, "defaultValue": False},
            ]),
        ])
        params = snapshot.elements[1].parameter_list()
        assert [p.type for p in params] == ["int", "bool"]
        assert params[1].is_optional is True
        assert params[1].default == "False"

    def test_accessibility_spellings(self):
        snapshot = snapshot_from_data([
            type_entry("A", accessibility="protected internal"),
            type_entry("B", accessibility="ProtectedInternal"),
            type_entry("C", accessibility="private protected"),
        ])
        assert [el.accessibility for el in snapshot.elements] == [
            Accessibility.PROTECTED_INTERNAL,
            Accessibility.PROTECTED_INTERNAL,
            Accessibility.PROTECTED_PRIVATE,
        ]

    def test_all_element_errors_are_collected(self):
        with pytest.raises(SnapshotError) as exc_info:
            snapshot_from_data([
                {"kind": "class"},
                type_entry("Foo", kind="module"),
                member_entry("Foo", "Run", "void Run()", declaringContainer=None),
                "not an object",
            ])
        assert len(exc_info.value.errors) == 4
        assert exc_info.value.errors[0].startswith("elements[0]")

    def test_elements_must_be_a_list(self):
        with pytest.raises(SnapshotError):
            snapshot_from_data({"component": "X", "elements": {}})

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SnapshotError) as exc_info:
            load_snapshot(path)
        assert exc_info.value.details["file_path"] == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "nope.json")


# =========================================================================
# Filters
# =========================================================================

class TestElementFilter:

    @pytest.mark.parametrize("namespace,filters,expected", [
        ("Contoso", ["Contoso"], True),
        ("Contoso.Core", ["Contoso"], True),
        ("ContosoExtra", ["Contoso"], False),
        ("contoso.core", ["Contoso.Core"], True),
        ("Contoso.Internal", ["*.Internal"], True),
        ("Contoso.Internal.Deep", ["*.Internal"], False),
        ("", ["Contoso"], False),
    ])
    def test_namespace_matches(self, namespace, filters, expected):
        assert ElementFilter.namespace_matches(namespace, filters) is expected

    def test_include_namespaces_keeps_members_with_their_type(self):
        elements = [
            make_type("Contoso.Core.Widget"),
            make_method("Contoso.Core.Widget", "Render", "void Render()"),
            make_type("Fabrikam.Gadget"),
            make_method("Fabrikam.Gadget", "Run", "void Run()"),
        ]
        element_filter = ElementFilter(FilterConfig(include_namespaces=("Contoso",)))

        kept = element_filter.apply(elements)

        assert [el.full_name for el in kept] == ["Contoso.Core.Widget", "Contoso.Core.Widget.Render"]

    def test_exclude_namespaces_and_types(self):
        elements = [
            make_type("Contoso.Widget"),
            make_type("Contoso.Internal.Helper"),
            make_type("Contoso.WidgetTests"),
        ]
        element_filter = ElementFilter(FilterConfig(
            exclude_namespaces=("Contoso.Internal",),
            exclude_types=("*tests",),
        ))

        assert [el.full_name for el in element_filter.apply(elements)] == ["Contoso.Widget"]

    def test_include_types(self):
        elements = [make_type("Contoso.Widget"), make_type("Contoso.Gadget")]
        element_filter = ElementFilter(FilterConfig(include_types=("*.W*",)))
        assert [el.full_name for el in element_filter.apply(elements)] == ["Contoso.Widget"]

    def test_internal_types(self):
        elements = [make_type("Foo"), make_type("Bar", accessibility="internal")]

        assert [el.full_name for el in ElementFilter().apply(elements)] == ["Foo"]
        with_internals = ElementFilter(FilterConfig(include_internals=True))
        assert len(with_internals.apply(elements)) == 2

    def test_compiler_generated_types(self):
        elements = [
            make_type("Foo"),
            make_type("Foo+<>c"),
            make_type("Bar", attributes=["System.Runtime.CompilerServices.CompilerGeneratedAttribute"]),
        ]

        assert [el.full_name for el in ElementFilter().apply(elements)] == ["Foo"]
        keep_all = ElementFilter(FilterConfig(include_compiler_generated=True))
        assert len(keep_all.apply(elements)) == 3

    def test_empty_config_keeps_public_surface(self, widget_api):
        assert ElementFilter().apply(widget_api) == widget_api

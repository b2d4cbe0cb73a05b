import pytest

from apidiff.comparison import DifferenceCalculator
from apidiff.core.exceptions import ResultInvariantError
from apidiff.core.models import (
    Accessibility,
    ApiElementType,
    ChangeKind,
    ChangeShape,
    ComparisonResult,
    Difference,
    ElementKind,
    Parameter,
)
from apidiff.rules import classify
from builders import make_method, make_property, make_type, param

calc = DifferenceCalculator()


class TestEnums:

    def test_element_kind_parse(self):
        assert ElementKind.parse("Method") == ElementKind.METHOD
        assert ElementKind.CONSTRUCTOR.has_parameters
        assert not ElementKind.PROPERTY.has_parameters
        with pytest.raises(ValueError):
            ElementKind.parse("module")

    def test_every_type_kind_reports_as_type(self):
        for kind in ElementKind:
            expected = ApiElementType.TYPE if kind.is_type else ApiElementType(kind.value)
            assert ApiElementType.from_element_kind(kind) == expected

    @pytest.mark.parametrize("shape", list(ChangeShape))
    def test_every_shape_has_a_detected_kind(self, shape):
        assert shape.detected_kind in (ChangeKind.ADDED, ChangeKind.REMOVED, ChangeKind.MODIFIED)

    @pytest.mark.parametrize("kind", [k for k in ChangeKind if k != ChangeKind.MOVED])
    def test_every_reported_kind_has_a_category(self, kind):
        diff = Difference(
            change_kind=kind,
            element_kind=ApiElementType.TYPE,
            element_name="Foo",
            description="x",
            shape=ChangeShape.TYPE_ADDED,
        )
        assert ComparisonResult.from_differences([diff]).all_differences == (diff,)

    def test_accessibility_rank(self):
        assert Accessibility.PUBLIC.rank > Accessibility.PROTECTED_INTERNAL.rank > Accessibility.INTERNAL.rank
        assert Accessibility.PROTECTED_INTERNAL.display_name == "ProtectedInternal"


class TestElement:

    def test_parameters_from_signature(self):
        el = make_method("Foo", "Run", "void Run(int a, string b = null)")
        assert el.parameter_types() == ("int", "string")
        assert el.parameter_list()[1].render() == "string b = null"

    def test_explicit_parameters_win(self):
        el = make_method("Foo", "Run", "void Run(int a)", parameters=[param("a", "long")])
        assert el.parameter_types() == ("long",)

    def test_properties_have_no_parameters(self):
        el = make_property("Foo", "Name", "string Name { get; }")
        assert el.parameter_types() == ()

    def test_optional_without_default_renders_default(self):
        assert Parameter("x", "int", is_optional=True).render() == "int x = default"

    def test_obsolete_and_compiler_generated(self):
        assert make_type("Foo", attributes=["System.ObsoleteAttribute"]).is_obsolete
        assert make_type("Foo+<Bar>d__1").is_compiler_generated
        assert not make_type("Foo").is_compiler_generated

    def test_element_type(self):
        assert make_type("Foo", kind="interface").element_type == ApiElementType.TYPE
        assert make_method("Foo", "Run", "void Run()").element_type == ApiElementType.METHOD


class TestComparisonResult:

    def test_categories_accept_only_their_kind(self):
        removed = classify(calc.removed_type(make_type("Foo")))
        with pytest.raises(ResultInvariantError):
            ComparisonResult(additions=(removed,))

    def test_moved_is_rejected(self):
        moved = Difference(
            change_kind=ChangeKind.MOVED,
            element_kind=ApiElementType.TYPE,
            element_name="Foo",
            description="Moved",
            shape=calc.removed_type(make_type("Foo")).shape,
        )
        with pytest.raises(ResultInvariantError):
            ComparisonResult.from_differences([moved])

    def test_summary_counts(self):
        diffs = [
            classify(calc.removed_type(make_type("A"))),
            classify(calc.added_type(make_type("B"))),
            classify(calc.added_type(make_type("C+<>c"))),
        ]
        result = ComparisonResult.from_differences(diffs)

        assert result.summary() == {
            "added": 1,
            "removed": 1,
            "modified": 0,
            "excluded": 1,
            "total_changes": 2,
            "breaking_changes": 1,
        }
        assert result.has_breaking_changes
        assert [d.element_name for d in result.breaking_changes] == ["A"]

    def test_empty_result(self):
        result = ComparisonResult()
        assert result.total_changes == 0
        assert not result.has_breaking_changes
        assert result.to_dict()["additions"] == []

    def test_difference_to_dict(self):
        diff = classify(calc.member_changed(
            make_method("Foo", "Count", "int Count()"),
            make_method("Foo", "Count", "long Count()"),
        ))
        data = diff.to_dict()
        assert data["change_kind"] == "Modified"
        assert data["element_kind"] == "method"
        assert data["severity"] == "Error"
        assert data["old_signature"] == "int Count()"
        assert data["new_signature"] == "long Count()"
        assert data["container"] == "Foo"
        assert "signature_equivalent" not in data

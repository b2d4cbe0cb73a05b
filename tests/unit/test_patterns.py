import pytest

from apidiff.utils.patterns import any_match, compile_wildcard, pattern_problem, wildcard_match


class TestWildcardMatch:

    @pytest.mark.parametrize("pattern,value,expected", [
        ("*.Internal.*", "Company.Internal.Helper", True),
        ("*.Internal.*", "Company.InternalHelper", False),
        ("Contoso.*", "Contoso.Widget", True),
        ("Contoso.*", "Contoso", False),
        ("Widget?", "Widget1", True),
        ("Widget?", "Widget", False),
        ("Widget?", "Widget12", False),
        ("Contoso.Widget", "Contoso.Widget", True),
        ("Contoso.Widget", "Contoso.WidgetFactory", False),
    ])
    def test_whole_string_matching(self, pattern, value, expected):
        assert wildcard_match(pattern, value) is expected

    def test_regex_characters_are_literal(self):
        assert wildcard_match("List<T>", "List<T>")
        assert not wildcard_match("A.B", "AxB")

    def test_case_sensitivity(self):
        assert not wildcard_match("contoso.*", "Contoso.Widget")
        assert wildcard_match("contoso.*", "Contoso.Widget", ignore_case=True)

    def test_any_match_returns_first_hit(self):
        patterns = [compile_wildcard("A.*"), compile_wildcard("*.B")]
        assert any_match(patterns, "A.B") is patterns[0]
        assert any_match(patterns, "C.D") is None


class TestPatternProblem:

    @pytest.mark.parametrize("pattern", [
        "*.Internal.*",
        "Contoso.Widget",
        "List<T>",
        "Foo?",
        "*",
    ])
    def test_valid(self, pattern):
        assert pattern_problem(pattern) is None

    @pytest.mark.parametrize("pattern", [
        "",
        "   ",
        None,
        "Contoso Widget",
        "Contoso.**",
        "Contoso..Widget",
        ".Widget",
        "Contoso.",
        "List<T",
        "List>T<",
        "Array[",
        "Run(int]",
    ])
    def test_invalid(self, pattern):
        assert pattern_problem(pattern) is not None

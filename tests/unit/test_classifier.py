"""
Unit tests for ChangeClassifier: exclusions, breaking policy and severity.
"""

import pytest

from apidiff.comparison import DifferenceCalculator
from apidiff.config.models import BreakingChangeRules, ExclusionConfig
from apidiff.core.models import ChangeKind, ChangeShape, Severity
from apidiff.rules import ChangeClassifier, classify
from builders import make_method, make_type

calc = DifferenceCalculator()


@pytest.fixture
def removed_type():
    return calc.removed_type(make_type("Contoso.Widget"))


@pytest.fixture
def removed_member():
    return calc.removed_member(make_method("Contoso.Widget", "Render", "void Render(int width)"))


class TestExclusion:

    def test_exact_type_name(self, config_factory, removed_type):
        config = config_factory(exclusions=ExclusionConfig(excluded_types=("Contoso.Widget",)))

        diff = classify(removed_type, config)

        assert diff.change_kind == ChangeKind.EXCLUDED
        assert diff.is_breaking is False
        assert diff.severity == Severity.INFO
        assert diff.description == "Excluded type: Contoso.Widget"
        assert diff.classified is True

    def test_type_pattern(self, config_factory):
        config = config_factory(exclusions=ExclusionConfig(excluded_type_patterns=("*.Internal.*",)))
        classifier = ChangeClassifier(config)

        assert classifier.is_type_excluded("Company.Internal.Helper")
        assert not classifier.is_type_excluded("Company.InternalHelper")

    def test_exclusion_is_case_sensitive(self, config_factory):
        classifier = ChangeClassifier(config_factory(exclusions=ExclusionConfig(excluded_types=("Foo",))))
        assert classifier.is_type_excluded("Foo")
        assert not classifier.is_type_excluded("foo")

    def test_member_by_name_and_pattern(self, config_factory, removed_member):
        by_name = config_factory(exclusions=ExclusionConfig(excluded_members=("Contoso.Widget.Render",)))
        by_pattern = config_factory(exclusions=ExclusionConfig(excluded_member_patterns=("*.Render",)))

        assert classify(removed_member, by_name).change_kind == ChangeKind.EXCLUDED
        assert classify(removed_member, by_pattern).change_kind == ChangeKind.EXCLUDED
        assert classify(removed_member, by_name).description == "Excluded method: Contoso.Widget.Render"

    def test_member_of_excluded_type(self, config_factory):
        classifier = ChangeClassifier(config_factory(exclusions=ExclusionConfig(excluded_types=("Contoso.Widget",))))
        assert classifier.is_member_excluded("Contoso.Widget.Render", "Contoso.Widget")
        assert not classifier.is_member_excluded("Contoso.Gadget.Render", "Contoso.Gadget")

    def test_member_pattern_does_not_exclude_types(self, config_factory, removed_type):
        config = config_factory(exclusions=ExclusionConfig(excluded_member_patterns=("Contoso.*",)))
        assert classify(removed_type, config).change_kind == ChangeKind.REMOVED

    def test_compiler_generated_switch(self, config_factory):
        diff = calc.removed_type(make_type("Contoso.<>c"))

        assert classify(diff).change_kind == ChangeKind.EXCLUDED
        keep = config_factory(exclusions=ExclusionConfig(exclude_compiler_generated=False))
        assert classify(diff, keep).change_kind == ChangeKind.REMOVED

    def test_obsolete_switch(self, config_factory):
        diff = calc.removed_member(make_method(
            "Contoso.Widget", "Draw", "void Draw()", attributes=["ObsoleteAttribute"],
        ))

        assert classify(diff).change_kind == ChangeKind.REMOVED
        skip = config_factory(exclusions=ExclusionConfig(exclude_obsolete=True))
        assert classify(diff, skip).change_kind == ChangeKind.EXCLUDED


class TestBreakingAndSeverity:

    def test_removed_type_is_critical(self, removed_type):
        diff = classify(removed_type)
        assert diff.change_kind == ChangeKind.REMOVED
        assert diff.is_breaking is True
        assert diff.severity == Severity.CRITICAL

    def test_removed_member_is_error(self, removed_member):
        diff = classify(removed_member)
        assert diff.is_breaking is True
        assert diff.severity == Severity.ERROR

    def test_non_breaking_removal_is_warning(self, config_factory, removed_member):
        config = config_factory(rules=BreakingChangeRules(treat_member_removal_as_breaking=False))
        diff = classify(removed_member, config)
        assert diff.is_breaking is False
        assert diff.severity == Severity.WARNING

    def test_addition_is_info(self):
        diff = classify(calc.added_type(make_type("Contoso.Gadget")))
        assert diff.change_kind == ChangeKind.ADDED
        assert diff.is_breaking is False
        assert diff.severity == Severity.INFO

    def test_addition_policy(self, config_factory):
        config = config_factory(rules=BreakingChangeRules(treat_added_type_as_breaking=True))
        diff = classify(calc.added_type(make_type("Contoso.Gadget")), config)
        assert diff.is_breaking is True
        assert diff.severity == Severity.ERROR

    def test_equivalent_signature_never_breaks(self):
        old = make_method("Old.W", "Clone", "Old.W Clone()")
        new = make_method("New.W", "Clone", "New.W Clone()")
        open_diff = calc.member_changed(old, new, signature_equivalent=True)

        diff = classify(open_diff)

        assert diff.shape == ChangeShape.SIGNATURE_CHANGED
        assert diff.is_breaking is False
        assert diff.severity == Severity.INFO

    def test_exclusion_beats_breaking_policy(self, config_factory, removed_type):
        config = config_factory(
            exclusions=ExclusionConfig(excluded_types=("Contoso.Widget",)),
            rules=BreakingChangeRules(treat_type_removal_as_breaking=True),
        )
        assert classify(removed_type, config).is_breaking is False

    @pytest.mark.parametrize("flag", [True, False])
    def test_policy_flag_controls_outcome(self, config_factory, removed_member, flag):
        config = config_factory(rules=BreakingChangeRules(treat_member_removal_as_breaking=flag))
        assert classify(removed_member, config).is_breaking is flag


class TestDeterminism:

    def test_reclassification_is_stable(self, removed_member):
        once = classify(removed_member)
        assert classify(once) == once

    def test_reclassification_of_excluded_is_stable(self, config_factory, removed_type):
        config = config_factory(exclusions=ExclusionConfig(excluded_types=("Contoso.Widget",)))
        once = classify(removed_type, config)
        assert classify(once, config) == once

    def test_classify_all_keeps_order(self, removed_type, removed_member):
        result = ChangeClassifier().classify_all([removed_member, removed_type])
        assert [d.element_name for d in result] == ["Contoso.Widget.Render", "Contoso.Widget"]

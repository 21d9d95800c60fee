"""
Tests for the analytics variable index.
"""

from launch_extraction.models import RuleCollection, RuleFields
from launch_extraction.variables import VARIABLE_PATTERNS, build_variable_index, variable_family


def _rules(*specs):
    rules = RuleCollection()
    for name, tracker_properties, custom_code in specs:
        rules.append(RuleFields(name=name, tracker_properties=tracker_properties, custom_code=custom_code))
    return rules


class TestVariableIndex:
    """Test variable discovery across rules."""

    def test_collects_all_referencing_rules(self):
        rules = _rules(
            ("A", '{eVar1:"x",prop3:"y"}', ""),
            ("B", "", "s.eVar1='z';"),
            ("C", "", "s.events='event5';"),
        )

        variables = build_variable_index(rules)

        assert variables == {"eVar1": ["A", "B"], "prop3": ["A"], "event5": ["C"]}

    def test_word_boundaries(self):
        """Test that eVar1 does not match inside eVar10."""
        variables = build_variable_index(_rules(("A", '{eVar10:"x"}', "")))
        assert list(variables) == ["eVar10"]

    def test_family_ranges(self):
        rules = _rules(("A", "", "s.eVar250=1;s.eVar251=1;s.prop75=1;s.prop76=1;s.events='event1000,event1001';"))
        variables = build_variable_index(rules)

        assert set(variables) == {"eVar250", "prop75", "event1000"}

    def test_duplicate_rule_names_listed_once(self):
        rules = _rules(("Dup", '{eVar2:"a"}', ""), ("Dup", '{eVar2:"b"}', ""))
        assert build_variable_index(rules) == {"eVar2": ["Dup"]}

    def test_order_follows_rules_then_table(self):
        rules = _rules(("A", '{prop1:"x",eVar9:"y"}', ""), ("B", '{eVar3:"z"}', ""))
        assert list(build_variable_index(rules)) == ["eVar9", "prop1", "eVar3"]

    def test_scans_tracker_properties_and_custom_code_together(self):
        rules = _rules(("A", '{eVar1:"x"}', "s.prop1='y';"))
        assert set(build_variable_index(rules)) == {"eVar1", "prop1"}

    def test_empty_rules(self):
        assert build_variable_index(RuleCollection()) == {}
        assert build_variable_index(_rules(("A", "", ""))) == {}

    def test_pattern_table_size(self):
        assert len(VARIABLE_PATTERNS) == 251 + 76 + 1001


class TestVariableFamily:
    """Test variable family classification."""

    def test_families(self):
        assert variable_family("eVar12") == "eVar"
        assert variable_family("prop7") == "prop"
        assert variable_family("event100") == "event"
        assert variable_family("list1") == "other"
        assert variable_family("events") == "other"

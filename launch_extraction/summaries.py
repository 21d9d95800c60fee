"""
Templated, deterministic reports for rules, data elements and variables.

Condition and action summaries are keyword tests over the raw region text.
"""

from typing import List, Tuple

from launch_extraction.models import ParsedModel, RuleRecord

PREVIEW_CHARS = 200

CONDITION_KEYWORDS: List[Tuple[str, str]] = [
    ("pathname", "Page path condition"),
    ("hostname", "Hostname condition"),
    ("cookie", "Cookie value condition"),
    ("querystring", "Query string parameter condition"),
    ("dataElement", "Data element value condition"),
    ("logicalCondition", "Logical operator condition"),
]

ACTION_KEYWORDS: List[Tuple[str, str]] = [
    ("s.t(", "Fires Adobe Analytics page view tracking call (s.t())"),
    ("s.tl(", "Fires Adobe Analytics link tracking call (s.tl())"),
    ("customCode", "Executes custom JavaScript code"),
    ("dataLayerPush", "Pushes data to data layer"),
    ("ruleCondition", "Has conditional logic"),
]

NO_CONDITIONS = "No conditions (rule always fires)"
NO_ACTIONS = "No action data"


def _preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def summarize_condition(condition_text: str) -> str:
    if not condition_text:
        return NO_CONDITIONS

    found = [label for keyword, label in CONDITION_KEYWORDS if keyword in condition_text]
    return ", ".join(found) if found else "Has conditions"


def summarize_action(action_text: str) -> str:
    if not action_text:
        return NO_ACTIONS

    found = [label for keyword, label in ACTION_KEYWORDS if keyword in action_text]
    return ", ".join(found) if found else "Other action type"


def render_rule_report(rule: RuleRecord) -> str:
    lines = [
        f"Rule: {rule.name}",
        f"Event Trigger: {rule.event or 'Unknown'}",
        f"Condition: {summarize_condition(rule.condition)}",
        f"Action Summary: {summarize_action(rule.action)}",
        f"Uses Tracker Properties: {'Yes' if rule.tracker_property else 'No'}",
        f"Has Custom Code: {'Yes' if rule.custom_code else 'No'}",
    ]
    if rule.custom_code:
        lines.extend(["", "Custom Code Preview:", _preview(rule.custom_code)])
    return "\n".join(lines)


def render_data_element_report(name: str, element_type: str, record_text: str) -> str:
    return "\n".join(
        [
            f"Data Element: {name}",
            f"Type: {element_type}",
            f"Raw Definition: {_preview(record_text)}",
        ]
    )


def variable_usage_details(model: ParsedModel, variable_name: str) -> List[str]:
    """One block per referencing rule: where the variable appears and the trigger."""
    details = []
    for rule_name in model.variables.get(variable_name, []):
        index = model.rules.index_of(rule_name)
        if index == -1:
            details.append(f"Rule: {rule_name} (details not available)")
            continue

        record = model.rules.record(index)
        locations = []
        if variable_name in record.tracker_property:
            locations.append("Tracker Properties")
        if variable_name in record.custom_code:
            locations.append("Custom Code")

        details.append(
            "\n".join(
                [
                    f"Rule: {rule_name}",
                    f"Usage Location: {', '.join(locations) or 'Unknown'}",
                    f"Event Trigger: {record.event or 'Unknown'}",
                ]
            )
        )
    return details


def render_variable_report(variable_name: str, rule_names: List[str], details: List[str]) -> str:
    return f"Variable: {variable_name}\nUsed in {len(rule_names)} rules:\n" + "\n\n".join(details)

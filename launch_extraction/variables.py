"""
Analytics variable usage index.

Maps eVar, prop and event names referenced in rules' tracker properties and
custom code to the rules that reference them.
"""

import re
from typing import Dict, List, Tuple

from launch_extraction.models import RuleCollection
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

# (family, highest index)
VARIABLE_FAMILIES: Tuple[Tuple[str, int], ...] = (
    ("eVar", 250),
    ("prop", 75),
    ("event", 1000),
)


def _compile_patterns() -> List[Tuple[str, re.Pattern]]:
    patterns = []
    for family, highest in VARIABLE_FAMILIES:
        for index in range(highest + 1):
            name = f"{family}{index}"
            patterns.append((name, re.compile(rf"\b{name}\b")))
    return patterns


VARIABLE_PATTERNS = _compile_patterns()


def variable_family(variable_name: str) -> str:
    """Family of a variable name: eVar, prop, event or other."""
    for family, _ in VARIABLE_FAMILIES:
        if re.fullmatch(rf"{family}\d+", variable_name):
            return family
    return "other"


def build_variable_index(rules: RuleCollection) -> Dict[str, List[str]]:
    """
    Build the variable name to rule names index.

    Rules are visited in order; within a rule, families and indices are tested
    in table order. The first time a variable is seen, every rule is scanned
    to collect all rules referencing it, each name at most once.

    Args:
        rules: Extracted rules

    Returns:
        Ordered mapping of variable name to referencing rule names
    """
    texts = [rules.variable_text(index) for index in range(len(rules))]
    variables: Dict[str, List[str]] = {}

    for text in texts:
        if not text:
            continue

        for name, pattern in VARIABLE_PATTERNS:
            if name in variables or not pattern.search(text):
                continue

            users: List[str] = []
            for rule_name, other_text in zip(rules.names, texts):
                if rule_name not in users and pattern.search(other_text):
                    users.append(rule_name)
            variables[name] = users

    logger.debug(f"Indexed {len(variables)} analytics variables")
    return variables

"""
Delimiter-bracketed rule extraction.

Cuts the rules block out of the container and splits it on the rule id
prefix. If the block end marker differs in a given library build the split
yields nothing; the anchor strategy does not have this weakness.
"""

from typing import List

from launch_extraction.models import RuleWindow
from launch_extraction.strategies.base_strategy import RecordExtractionStrategy
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

RULES_START = "rules:["
RULES_END_MARKERS = ("var _satellite=function()", "var _satellite=")
RULE_PREFIX = '{id:"RL'


class DelimiterStrategy(RecordExtractionStrategy):
    """Split the rules block on the rule id prefix."""

    name = "delimiter"

    def extract_rules(self, bundle_text: str, container: str) -> List[RuleWindow]:
        _, found, section = container.partition(RULES_START)
        if not found:
            logger.warning("Could not find rules section")
            return []

        for marker in RULES_END_MARKERS:
            end = section.find(marker)
            if end != -1:
                section = section[:end]
                break
        else:
            logger.warning("Could not find end marker for rules section")

        windows = []
        offset = container.find(RULES_START) + len(RULES_START)
        parts = section.split(RULE_PREFIX)
        # Text before the first prefix is not a rule
        offset += len(parts[0])
        for part in parts[1:]:
            if part:
                windows.append(RuleWindow(text=RULE_PREFIX + part, offset=offset))
            offset += len(RULE_PREFIX) + len(part)

        logger.debug(f"Delimiter split found {len(windows)} rules")
        return windows

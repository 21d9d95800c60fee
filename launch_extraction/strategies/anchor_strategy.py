"""
Anchor and window rule extraction.

Scans the whole bundle for the ``{id:"RL...",name:"..."`` shape that opens
every rule record and cuts a fixed-size window around each hit. Windows do
not stop at the record's real end, so a window may run into the next rule.
"""

import re
from typing import List

from launch_extraction.models import RuleWindow
from launch_extraction.strategies.base_strategy import RecordExtractionStrategy
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

RULE_ANCHOR_RE = re.compile(r'\{(?:id|"id"):"(RL[^"]+)",(?:name|"name"):"([^"]+)"')

DEFAULT_WINDOW_CHARS = 2000
DEFAULT_WINDOW_LEAD = 20


class AnchorStrategy(RecordExtractionStrategy):
    """Find rules by their id/name anchor anywhere in the bundle."""

    name = "anchor"

    def __init__(self, window_chars: int = DEFAULT_WINDOW_CHARS, window_lead: int = DEFAULT_WINDOW_LEAD):
        """
        Initialize the strategy.

        Args:
            window_chars: Characters kept after the end of each anchor match
            window_lead: Characters kept before the start of each anchor match
        """
        self.window_chars = window_chars
        self.window_lead = window_lead

    def extract_rules(self, bundle_text: str, container: str) -> List[RuleWindow]:
        windows = []

        for match in RULE_ANCHOR_RE.finditer(bundle_text):
            start = max(0, match.start() - self.window_lead)
            end = min(len(bundle_text), match.end() + self.window_chars)
            windows.append(
                RuleWindow(
                    rule_id=match.group(1),
                    name=match.group(2),
                    text=bundle_text[start:end],
                    offset=start,
                )
            )

        logger.debug(f"Anchor scan found {len(windows)} rules")
        return windows

"""
Base record extraction strategy.

A strategy turns bundle text into rule windows and data element records.
Downstream code only relies on the output contract, so strategies can be
swapped without touching the field extractor or the variable indexer.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List

from launch_extraction.models import RuleWindow
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

DATA_ELEMENTS_START = "dataElements:{"
DATA_ELEMENTS_END = "},extensions:{"
DATA_ELEMENT_DELIMITER = "}},"

_QUOTED_KEY_RE = re.compile(r'^"([^"]+)"')


class RecordExtractionStrategy(ABC):
    """Abstract base class for record extraction strategies."""

    name = "base"

    @abstractmethod
    def extract_rules(self, bundle_text: str, container: str) -> List[RuleWindow]:
        """
        Locate rule records.

        Args:
            bundle_text: The entire raw bundle
            container: Text following the container assignment

        Returns:
            Rule windows in order of appearance
        """
        pass

    def extract_data_elements(self, container: str) -> Dict[str, str]:
        """
        Split the data elements block into records keyed by element name.

        The block runs from ``dataElements:{`` to ``},extensions:{`` and is
        split on ``}},``; slices that do not start with a quoted name are
        dropped.

        Args:
            container: Text following the container assignment

        Returns:
            Mapping of element name to record text, in source order
        """
        data_elements: Dict[str, str] = {}

        _, found, section = container.partition(DATA_ELEMENTS_START)
        if not found:
            logger.debug("No data elements block in container")
            return data_elements

        section = section.split(DATA_ELEMENTS_END, 1)[0]
        for element in section.split(DATA_ELEMENT_DELIMITER):
            if not element:
                continue
            match = _QUOTED_KEY_RE.match(element)
            if match:
                data_elements[match.group(1)] = element

        logger.debug(f"Found {len(data_elements)} data elements")
        return data_elements

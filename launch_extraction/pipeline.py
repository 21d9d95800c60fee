"""
Parsing pipeline - owns the extraction control flow.

Locate container -> extract records -> extract fields -> index variables.
The result is one ParsedModel built in a single pass; nothing here fetches
over the network.
"""

from typing import Optional

from launch_extraction.fields import extract_rule_fields
from launch_extraction.locator import locate_container
from launch_extraction.models import ParsedModel, RawBundle, RuleCollection
from launch_extraction.strategies import RecordExtractionStrategy, get_strategy
from launch_extraction.variables import build_variable_index
from nightjar.utils.logging import get_logger, log_performance

logger = get_logger(__name__)


class LaunchParser:
    """
    Turns Launch library text into a ParsedModel.

    Structural failures (not a Launch library, no container) raise; problems
    with individual data elements or rules only cost those records.
    """

    def __init__(self, strategy: Optional[RecordExtractionStrategy] = None):
        self.strategy = strategy or get_strategy("anchor")

    @log_performance
    def parse(self, bundle: RawBundle) -> ParsedModel:
        """
        Parse one bundle.

        Args:
            bundle: Raw library text and its source URL

        Returns:
            Freshly built ParsedModel

        Raises:
            InvalidBundleFormatError: If the text is not a Launch library
            ContainerNotFoundError: If the container assignment is missing
        """
        container = locate_container(bundle.text, bundle.source_url)

        # Data elements
        try:
            data_elements = self.strategy.extract_data_elements(container)
        except Exception as e:
            logger.warning(f"Error parsing data elements: {e}")
            data_elements = {}

        # Rules
        rules = RuleCollection()
        try:
            windows = self.strategy.extract_rules(bundle.text, container)
        except Exception as e:
            logger.warning(f"Error parsing rules: {e}")
            windows = []

        for index, window in enumerate(windows):
            rules.append(extract_rule_fields(window, index))

        variables = build_variable_index(rules)

        logger.info(
            f"Parsed {len(rules)} rules, {len(data_elements)} data elements, "
            f"{len(variables)} variables",
            extra={"strategy": self.strategy.name, "source_url": bundle.source_url},
        )

        return ParsedModel(
            source_url=bundle.source_url,
            data_elements=data_elements,
            rules=rules,
            variables=variables,
            strategy=self.strategy.name,
        )


def parse_bundle_text(text: str, source_url: Optional[str] = None, strategy: str = "anchor") -> ParsedModel:
    """Parse library text with a strategy chosen by name."""
    return LaunchParser(get_strategy(strategy)).parse(RawBundle(text=text, source_url=source_url))

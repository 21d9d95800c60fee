"""
Factory for record extraction strategies.
"""

from typing import Dict, Type

from launch_extraction.strategies.anchor_strategy import AnchorStrategy
from launch_extraction.strategies.base_strategy import RecordExtractionStrategy
from launch_extraction.strategies.delimiter_strategy import DelimiterStrategy
from nightjar.utils.errors import ConfigurationError

STRATEGY_MAP: Dict[str, Type[RecordExtractionStrategy]] = {
    "anchor": AnchorStrategy,
    "delimiter": DelimiterStrategy,
}


def get_strategy(name: str = "anchor", **kwargs) -> RecordExtractionStrategy:
    """
    Create a strategy by name.

    Args:
        name: Strategy name ("anchor" or "delimiter")
        **kwargs: Passed to the strategy constructor (anchor window sizes)

    Returns:
        Strategy instance

    Raises:
        ConfigurationError: If the name is unknown
    """
    strategy_class = STRATEGY_MAP.get(name)
    if strategy_class is None:
        raise ConfigurationError(f"Unknown extraction strategy '{name}'", {"available": list(STRATEGY_MAP)})

    if strategy_class is AnchorStrategy:
        return AnchorStrategy(**kwargs)
    return strategy_class()


def available_strategies() -> Dict[str, str]:
    """Strategy names with short descriptions."""
    return {
        "anchor": "Scan the whole library for rule id/name anchors and cut a fixed window (default)",
        "delimiter": "Split the container rules block on the rule id prefix",
    }

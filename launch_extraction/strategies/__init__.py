"""
Record extraction strategies.

Both strategies share one output contract: ordered rule windows and a
mapping of data element name to record text.
"""

from .base_strategy import RecordExtractionStrategy
from .anchor_strategy import AnchorStrategy
from .delimiter_strategy import DelimiterStrategy
from .strategy_factory import available_strategies, get_strategy

__all__ = [
    "RecordExtractionStrategy",
    "AnchorStrategy",
    "DelimiterStrategy",
    "available_strategies",
    "get_strategy",
]

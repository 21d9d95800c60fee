"""
Adobe Launch container extraction engine.

Best-effort, regular-expression based extraction of rules, data elements and
analytics variable usage from a minified Launch library.
"""

__version__ = "0.1.0"

from .models import (
    ParsedModel,
    RawBundle,
    RuleCollection,
    RuleFields,
    RuleRecord,
    RuleWindow,
)
from .pipeline import LaunchParser, parse_bundle_text

__all__ = [
    "ParsedModel",
    "RawBundle",
    "RuleCollection",
    "RuleFields",
    "RuleRecord",
    "RuleWindow",
    "LaunchParser",
    "parse_bundle_text",
]

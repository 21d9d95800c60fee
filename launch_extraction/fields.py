"""
Field extraction for rule windows and data element records.

Every field is pulled out with its own pattern and fails on its own: a miss
or an unexpected error yields the field's sentinel value instead of aborting
the rule. The array-like regions stop at the first ``]`` and the tracker
property block at the first ``}``; nested structures are cut short, which is
an accepted approximation.
"""

import re
from typing import Callable, List, Optional, Tuple

from launch_extraction.models import UNKNOWN_EVENT, RuleFields, RuleWindow, remote_code_marker
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

NAME_RE = re.compile(r'name:"([^"]+)"')
EVENTS_RE = re.compile(r"events:\[([^\]]+)\]")
# Case-insensitive so that the usual ``modulePath`` key qualifies too
EVENT_PATH_RE = re.compile(r'path:"([^"]+)"', re.IGNORECASE)
CONDITIONS_RE = re.compile(r"conditions:\[([^\]]+)\]")
ACTIONS_RE = re.compile(r"actions:\[([^\]]+)\]")
TRACKER_PROPERTIES_RE = re.compile(r"trackerProperties:(\{[^}]+\})")
CUSTOM_CODE_SOURCE_RE = re.compile(r'customCode\.js"[^}]*?source:"((?:[^"\\]|\\.)*)"')
MODULE_PATH_RE = re.compile(r'modulePath:"([^"]+)"')

REMOTE_SCHEME_PREFIX = "http"

UNKNOWN_ELEMENT_TYPE = "Unknown"

# Order matters: a later signature overrides an earlier one
DATA_ELEMENT_TYPE_SIGNATURES: List[Tuple[str, re.Pattern]] = [
    ("constant", re.compile(r"defaultValue")),
    ("localStorage", re.compile(r"storageDuration")),
    ("customCode", re.compile(r"customCode")),
    ("jsVariable", re.compile(r"path:")),
    ("domElement", re.compile(r"elementSelector")),
    ("cookieValue", re.compile(r"cookieName")),
]


def placeholder_rule_name(index: int) -> str:
    return f"Unknown Rule {index}"


def _attempt(field: str, extractor: Callable[[str], str], text: str, default: str) -> str:
    """Run one field extractor, degrading to the default on any failure."""
    try:
        value = extractor(text)
    except Exception as e:
        logger.debug(f"Field '{field}' extraction failed: {e}")
        return default
    return default if value is None else value


def extract_name(text: str) -> Optional[str]:
    match = NAME_RE.search(text)
    return match.group(1) if match else None


def extract_event_type(text: str) -> str:
    """File name stem of the first event module path, e.g. ``click``."""
    events = EVENTS_RE.search(text)
    if not events:
        return UNKNOWN_EVENT

    path = EVENT_PATH_RE.search(events.group(1))
    if not path:
        return UNKNOWN_EVENT

    file_name = path.group(1).split("/")[-1]
    return file_name.split(".")[0] or UNKNOWN_EVENT


def extract_conditions(text: str) -> str:
    match = CONDITIONS_RE.search(text)
    return match.group(1) if match else ""


def extract_actions(text: str) -> str:
    match = ACTIONS_RE.search(text)
    return match.group(1) if match else ""


def extract_tracker_properties(action_text: str) -> str:
    match = TRACKER_PROPERTIES_RE.search(action_text)
    return match.group(1) if match else ""


def extract_custom_code(action_text: str) -> str:
    """
    Custom code source referenced by the actions.

    Sources that look like URLs are not fetched here; they are replaced by a
    remote code marker and resolved when the rule is first analyzed.
    """
    match = CUSTOM_CODE_SOURCE_RE.search(action_text)
    if not match:
        return ""

    source = match.group(1)
    if source.startswith(REMOTE_SCHEME_PREFIX):
        return remote_code_marker(source)
    return source


def extract_rule_fields(window: RuleWindow, index: int) -> RuleFields:
    """
    Extract every rule field from one window.

    Args:
        window: Rule window from a record extraction strategy
        index: Position of the rule, used for the placeholder name

    Returns:
        RuleFields with sentinels for whatever could not be extracted
    """
    text = window.text

    name = window.name or _attempt("name", extract_name, text, "") or placeholder_rule_name(index)
    event_type = _attempt("event", extract_event_type, text, UNKNOWN_EVENT)
    condition = _attempt("conditions", extract_conditions, text, "")
    action = _attempt("actions", extract_actions, text, "")
    tracker_properties = _attempt("trackerProperties", extract_tracker_properties, action, "")
    custom_code = _attempt("customCode", extract_custom_code, action, "")

    return RuleFields(
        name=name,
        event_type=event_type,
        condition=condition,
        action=action,
        tracker_properties=tracker_properties,
        custom_code=custom_code,
    )


def classify_data_element(record_text: str) -> str:
    """
    Classify a data element record.

    Starts from the module file name when a module path is present, then
    applies the signature table; the last matching signature wins.

    Args:
        record_text: Raw data element record

    Returns:
        Element type name
    """
    element_type = UNKNOWN_ELEMENT_TYPE

    module = MODULE_PATH_RE.search(record_text)
    if module:
        element_type = module.group(1).split("/")[-1] or UNKNOWN_ELEMENT_TYPE

    for type_name, signature in DATA_ELEMENT_TYPE_SIGNATURES:
        if signature.search(record_text):
            element_type = type_name

    return element_type

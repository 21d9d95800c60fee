"""
Data models for the Launch container extraction engine.

A ParsedModel is produced wholesale by one extraction pass. Rules are stored
as six parallel lists indexed by the same position; placeholders fill any
field that could not be extracted so the lists never drift apart.
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

UNKNOWN_EVENT = "Unknown"

_REMOTE_MARKER_RE = re.compile(r"URL: (\S+) \(fetched on first analysis\)")


def remote_code_marker(url: str) -> str:
    """Build the custom code placeholder for a remote source URL."""
    return f"URL: {url} (fetched on first analysis)"


def remote_code_url(value: str) -> Optional[str]:
    """Return the URL if value is an unresolved remote code marker."""
    match = _REMOTE_MARKER_RE.fullmatch(value or "")
    return match.group(1) if match else None


class RawBundle(BaseModel):
    """Fetched Launch library text. Never persisted."""
    text: str
    source_url: Optional[str] = None


class RuleWindow(BaseModel):
    """Text slice believed to hold one rule definition."""
    rule_id: Optional[str] = None
    name: Optional[str] = None
    text: str
    offset: int = Field(default=0, ge=0, description="Start of the window in the scanned text")


class RuleFields(BaseModel):
    """Fields pulled out of one rule window."""
    name: str
    event_type: str = UNKNOWN_EVENT
    condition: str = ""
    action: str = ""
    tracker_properties: str = ""
    custom_code: str = ""


class RuleRecord(BaseModel):
    """Read-only view of one rule position."""
    name: str
    event: str
    condition: str
    action: str
    tracker_property: str
    custom_code: str

    @property
    def remote_code_url(self) -> Optional[str]:
        return remote_code_url(self.custom_code)


class RuleCollection(BaseModel):
    """Parallel rule field lists, one entry per discovered rule."""
    names: List[str] = Field(default_factory=list)
    events: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)
    tracker_properties: List[str] = Field(default_factory=list)
    custom_code: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_parallel_lengths(self) -> "RuleCollection":
        """All six lists must have the same length."""
        lengths = {
            len(self.names),
            len(self.events),
            len(self.conditions),
            len(self.actions),
            len(self.tracker_properties),
            len(self.custom_code),
        }
        if len(lengths) > 1:
            raise ValueError(f"Rule field lists have unequal lengths: {sorted(lengths)}")
        return self

    def __len__(self) -> int:
        return len(self.names)

    def append(self, fields: RuleFields) -> None:
        """Add one rule; every list grows by exactly one entry."""
        self.names.append(fields.name)
        self.events.append(fields.event_type)
        self.conditions.append(fields.condition)
        self.actions.append(fields.action)
        self.tracker_properties.append(fields.tracker_properties)
        self.custom_code.append(fields.custom_code)

    def index_of(self, name: str) -> int:
        """Position of the first rule with this exact name, or -1."""
        try:
            return self.names.index(name)
        except ValueError:
            return -1

    def record(self, index: int) -> RuleRecord:
        return RuleRecord(
            name=self.names[index],
            event=self.events[index],
            condition=self.conditions[index],
            action=self.actions[index],
            tracker_property=self.tracker_properties[index],
            custom_code=self.custom_code[index],
        )

    def variable_text(self, index: int) -> str:
        """Tracker properties followed by custom code, as scanned for variables."""
        return (self.tracker_properties[index] or "") + (self.custom_code[index] or "")

    def replace_custom_code(self, index: int, text: str) -> None:
        """Overwrite one custom code slot (remote code resolution)."""
        self.custom_code[index] = text


class ParsedModel(BaseModel):
    """Everything extracted from one Launch library."""
    source_url: Optional[str] = None
    data_elements: Dict[str, str] = Field(default_factory=dict)
    rules: RuleCollection = Field(default_factory=RuleCollection)
    variables: Dict[str, List[str]] = Field(default_factory=dict)
    strategy: str = "anchor"
    parsed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def summary_counts(self) -> Dict[str, int]:
        return {
            "data_elements": len(self.data_elements),
            "rules": len(self.rules),
            "variables": len(self.variables),
        }

"""Web request/response models for Flask application."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

PARAMETER_FIELDS = ("problemStatement", "monthlySessions", "queriesPerSession", "modelTier")


@dataclass
class ParametersRequest:
    """Incoming form edits (only the fields present in the body)."""

    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "ParametersRequest":
        """Create from JSON request, ignoring keys that are not form fields."""
        if not isinstance(data, dict):
            return cls()
        return cls(fields={key: data[key] for key in PARAMETER_FIELDS if key in data})


@dataclass
class SummaryResponse:
    """Clipboard summary returned to the page."""

    summary: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {"summary": self.summary}

"""Diagnostic event models.

Diagnostics are immutable records of something that happened inside the
translation core (a language change, a failed load, a missing key). They are
surfaced to subscribers and never acted upon internally.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict
from uuid import UUID, uuid4


class EventType(str, Enum):
    """Diagnostic event types surfaced by the core."""

    INITIALIZED = "initialized"
    LANGUAGE_CHANGED = "languageChanged"
    LOADED = "loaded"
    FAILED_LOADING = "failedLoading"
    MISSING_KEY = "missingKey"
    INTERPOLATION_OVERFLOW = "interpolationOverflow"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiagnosticEvent:
    """A single diagnostic emitted by a core component."""

    event_type: str
    """The type of event (an ``EventType`` value)."""

    payload: Dict[str, Any] = field(default_factory=dict)
    """Event-specific data (language, namespace, key, error...)."""

    timestamp: datetime = field(default_factory=datetime.now)
    """When the event occurred."""

    correlation_id: UUID = field(default_factory=uuid4)
    """Unique ID of this event."""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to dictionary.

        Returns:
            Dictionary representation with ISO timestamp and string UUID.
        """
        data = asdict(self)
        data["event_type"] = str(
            self.event_type.value
            if isinstance(self.event_type, EventType)
            else self.event_type
        )
        data["timestamp"] = self.timestamp.isoformat()
        data["correlation_id"] = str(self.correlation_id)
        return data

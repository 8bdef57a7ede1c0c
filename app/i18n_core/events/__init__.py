"""Diagnostics event system.

Provides the diagnostic event model and the per-instance channel used by the
store, connector and translator to surface what happened.
"""

from i18n_core.events.dispatcher import WILDCARD, DiagnosticsChannel
from i18n_core.events.models import DiagnosticEvent, EventType

__all__ = ["DiagnosticEvent", "DiagnosticsChannel", "EventType", "WILDCARD"]

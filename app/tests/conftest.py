import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing
# `i18n_core` works during collection regardless of the invocation directory.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from i18n_core.events import DiagnosticsChannel  # noqa: E402


@pytest.fixture
def diagnostics():
    """Fresh diagnostics channel."""
    return DiagnosticsChannel()


@pytest.fixture
def recorded_events(diagnostics):
    """List collecting every event dispatched on the ``diagnostics`` channel."""
    events = []
    diagnostics.on("*", events.append)
    return events

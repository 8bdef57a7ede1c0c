"""Per-instance diagnostics channel.

Handlers are registered per event type (or ``"*"`` for every event) and are
called synchronously, in registration order, when an event is dispatched.
"""

from threading import Lock
from typing import Any, Callable, Dict, List, Union

from i18n_core.events.models import DiagnosticEvent, EventType
from i18n_core.logging import get_module_logger

logger = get_module_logger()

WILDCARD = "*"

Handler = Callable[[DiagnosticEvent], Any]


def _type_name(event_type: Union[EventType, str]) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type


class DiagnosticsChannel:
    """Structured diagnostics channel shared by the core components.

    A handler that raises is logged and skipped; remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}
        self._lock = Lock()

    def on(self, event_type: Union[EventType, str], handler: Handler) -> Handler:
        """Subscribe ``handler`` to ``event_type`` (``"*"`` for all events)."""
        name = _type_name(event_type)
        with self._lock:
            self._handlers.setdefault(name, []).append(handler)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler, "__name__", "unknown"),
            event_type=name,
        )
        return handler

    def off(self, event_type: Union[EventType, str], handler: Handler) -> None:
        """Unsubscribe ``handler``; unknown handlers are ignored."""
        name = _type_name(event_type)
        with self._lock:
            handlers = self._handlers.get(name, [])
            if handler in handlers:
                handlers.remove(handler)

    def register_handler(self, event_type: Union[EventType, str]):
        """Decorator form of :meth:`on`."""

        def decorator(handler_func: Handler) -> Handler:
            return self.on(event_type, handler_func)

        return decorator

    def emit(self, event_type: Union[EventType, str], **payload: Any) -> DiagnosticEvent:
        """Build and dispatch an event in one call."""
        event = DiagnosticEvent(event_type=_type_name(event_type), payload=payload)
        self.dispatch(event)
        return event

    def dispatch(self, event: DiagnosticEvent) -> List[Any]:
        """Dispatch event synchronously to all matching handlers.

        Args:
            event: The event to dispatch.

        Returns:
            List of return values from the handlers that succeeded.
        """
        name = _type_name(event.event_type)
        with self._lock:
            handlers = list(self._handlers.get(name, [])) + list(
                self._handlers.get(WILDCARD, [])
            )

        results = []
        for handler in handlers:
            try:
                results.append(handler(event))
            except Exception as e:  # pylint: disable=broad-except
                logger.error(
                    "event_handler_failed",
                    handler=getattr(handler, "__name__", "unknown"),
                    event_type=name,
                    error=str(e),
                )
        return results

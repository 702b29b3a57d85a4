"""
DI Diagnostics - Observability and event tracking for test containers.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("modulefor.di.diagnostics")


class DIEventType(Enum):
    """Types of DI events."""
    REGISTRATION = "registration"
    LOOKUP_HIT = "lookup_hit"
    LOOKUP_MISS = "lookup_miss"
    INSTANTIATION = "instantiation"
    DESTROY = "destroy"


@dataclasses.dataclass
class DIEvent:
    """A diagnostic event in the DI system."""
    type: DIEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    full_name: Optional[str] = None
    duration: Optional[float] = None
    error: Optional[BaseException] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for DI diagnostic listeners."""
    def on_event(self, event: DIEvent) -> None:
        """Called when a DI event occurs."""
        ...


class ConsoleDiagnosticListener:
    """Diagnostic listener that writes events to the logging system."""
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: DIEvent) -> None:
        if event.type == DIEventType.REGISTRATION:
            logger.log(self.log_level, f"Registered override for {event.full_name}")
        elif event.type == DIEventType.LOOKUP_HIT:
            logger.log(self.log_level, f"Lookup {event.full_name} (cached)")
        elif event.type == DIEventType.LOOKUP_MISS:
            reason = event.metadata.get("reason", "unresolved")
            logger.log(self.log_level, f"Lookup {event.full_name} missed ({reason})")
        elif event.type == DIEventType.INSTANTIATION:
            logger.log(self.log_level, f"Instantiated {event.full_name} in {event.duration:.4f}s")
        elif event.type == DIEventType.DESTROY:
            if event.error is not None:
                logger.log(logging.WARNING, f"Destroy of {event.full_name} failed: {event.error!r}")
            else:
                logger.log(self.log_level, f"Destroyed {event.full_name}")


class RecordingDiagnosticListener:
    """Keeps every event it sees; handy for assertions."""
    def __init__(self):
        self.events: List[DIEvent] = []

    def on_event(self, event: DIEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: DIEventType) -> List[DIEvent]:
        return [e for e in self.events if e.type == event_type]


class DIDiagnostics:
    """Coordinator for DI diagnostic listeners."""
    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def emit(self, event_type: DIEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = DIEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # Listener failures are logged, not raised
                logger.error(f"Diagnostic listener error: {e}")

    def measure(self, event_type: DIEventType, **kwargs):
        """Context manager to measure duration of an event."""
        return _DiagnosticMeasure(self, event_type, **kwargs)


class _DiagnosticMeasure:
    def __init__(self, diagnostics: DIDiagnostics, event_type: DIEventType, **kwargs):
        self.diagnostics = diagnostics
        self.event_type = event_type
        self.kwargs = kwargs
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        self.diagnostics.emit(
            self.event_type,
            duration=duration,
            error=exc_val,
            **self.kwargs
        )

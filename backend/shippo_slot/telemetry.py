"""Server-side telemetry."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class RoundStartedEvent:
    """round_started telemetry event."""

    session_id: str
    round_id: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "session_id": self.session_id,
            "round_id": self.round_id,
        }


@dataclass
class RoundCompletedEvent:
    """round_completed telemetry event."""

    session_id: str
    round_id: str
    outcome: str  # "JACKPOT" | "NO_WIN"
    grade: str | None
    reach_triggered: bool
    landed: list[str]  # spoken forms in reel order
    catalog_hash: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "session_id": self.session_id,
            "round_id": self.round_id,
            "outcome": self.outcome,
            "grade": self.grade,
            "reach_triggered": self.reach_triggered,
            "landed": list(self.landed),
            "catalog_hash": self.catalog_hash,
        }


@dataclass
class CommandRejectedEvent:
    """command_rejected telemetry event."""

    session_id: str
    command: str  # "start" | "stop" | "stop_next" | "input"
    reason: str  # "SESSION_BUSY"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "session_id": self.session_id,
            "command": self.command,
            "reason": self.reason,
        }


class TelemetryService:
    """Service for emitting server telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break HTTP requests.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_round_started(self, event: RoundStartedEvent) -> None:
        self._safe_emit("round_started", event.to_dict())

    def emit_round_completed(self, event: RoundCompletedEvent) -> None:
        self._safe_emit("round_completed", event.to_dict())

    def emit_command_rejected(self, event: CommandRejectedEvent) -> None:
        self._safe_emit("command_rejected", event.to_dict())


# Global instance
telemetry_service = TelemetryService()

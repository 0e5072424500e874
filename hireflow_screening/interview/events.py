"""
Event-driven notifications for the screening core.
"""
import logging
from abc import ABC
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of screening events."""
    TURN_GENERATED = "turn_generated"
    TURN_FALLBACK = "turn_fallback"
    TURN_CEILING_REACHED = "turn_ceiling_reached"
    INTERVIEW_COMPLETED = "interview_completed"
    EVALUATION_COMPLETED = "evaluation_completed"
    EVALUATION_DEGRADED = "evaluation_degraded"


@dataclass
class ScreeningEvent(ABC):
    """Base class for all screening events."""
    event_type: EventType
    conversation_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class TurnGeneratedEvent(ScreeningEvent):
    """Event fired when the engine produced a bot turn from model output."""
    def __init__(self, conversation_id: str, timestamp: float, candidate_turns: int,
                 bubble_count: int, is_complete: bool):
        super().__init__(
            event_type=EventType.TURN_GENERATED,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "candidate_turns": candidate_turns,
                "bubble_count": bubble_count,
                "is_complete": is_complete
            }
        )


@dataclass
class TurnFallbackEvent(ScreeningEvent):
    """Event fired when a turn degraded to a fixed fallback message."""
    def __init__(self, conversation_id: str, timestamp: float, reason: str, error_message: str):
        super().__init__(
            event_type=EventType.TURN_FALLBACK,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "reason": reason,
                "error_message": error_message
            }
        )


@dataclass
class TurnCeilingReachedEvent(ScreeningEvent):
    """Event fired when the turn ceiling forced the interview to finish."""
    def __init__(self, conversation_id: str, timestamp: float, candidate_turns: int, ceiling: int):
        super().__init__(
            event_type=EventType.TURN_CEILING_REACHED,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "candidate_turns": candidate_turns,
                "ceiling": ceiling
            }
        )


@dataclass
class InterviewCompletedEvent(ScreeningEvent):
    """Event fired when a turn signals the interview is complete."""
    def __init__(self, conversation_id: str, timestamp: float, candidate_turns: int, forced: bool):
        super().__init__(
            event_type=EventType.INTERVIEW_COMPLETED,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "candidate_turns": candidate_turns,
                "forced": forced
            }
        )


@dataclass
class EvaluationCompletedEvent(ScreeningEvent):
    """Event fired when an evaluation parsed successfully."""
    def __init__(self, conversation_id: str, timestamp: float, match_score: int, resume_kind: str):
        super().__init__(
            event_type=EventType.EVALUATION_COMPLETED,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "match_score": match_score,
                "resume_kind": resume_kind
            }
        )


@dataclass
class EvaluationDegradedEvent(ScreeningEvent):
    """Event fired when an evaluation fell back to the zero-score record."""
    def __init__(self, conversation_id: str, timestamp: float, reason: str, error_message: str):
        super().__init__(
            event_type=EventType.EVALUATION_DEGRADED,
            conversation_id=conversation_id,
            timestamp=timestamp,
            data={
                "reason": reason,
                "error_message": error_message
            }
        )


EventHandler = Callable[[ScreeningEvent], None]


class ScreeningEventBus:
    """
    Fans screening events out to subscribers.

    A subscription either names the event types it wants or receives every
    event. Handler failures are logged and never reach the emitter, so a
    broken metrics sink cannot fail a candidate's turn.
    """

    def __init__(self):
        self._subscriptions: List[Tuple[Optional[FrozenSet[EventType]], EventHandler]] = []

    def subscribe(self, handler: EventHandler, *event_types: EventType) -> None:
        """
        Subscribe a handler.

        Args:
            handler: Called with each matching event
            event_types: Types to deliver; every event when omitted
        """
        self._subscriptions.append((frozenset(event_types) or None, handler))
        logger.debug("Subscribed %r to %s", handler,
                     sorted(t.value for t in event_types) if event_types else "all events")

    def subscribe_all(self, handler: EventHandler) -> None:
        self.subscribe(handler)

    def unsubscribe(self, handler: EventHandler) -> bool:
        """Drop every subscription of ``handler``; returns whether any existed."""
        remaining = [(types, h) for types, h in self._subscriptions if h != handler]
        removed = len(remaining) != len(self._subscriptions)
        self._subscriptions = remaining
        if not removed:
            logger.warning("Handler %r was not subscribed", handler)
        return removed

    def emit(self, event: ScreeningEvent) -> int:
        """Deliver an event; returns the number of handlers that accepted it."""
        delivered = 0
        for types, handler in list(self._subscriptions):
            if types is not None and event.event_type not in types:
                continue
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error("Event handler %r failed on %s (%s): %s",
                             handler, event.event_type.value, event.conversation_id, e)
        return delivered

    def clear_handlers(self) -> None:
        self._subscriptions.clear()


class EventLogger:
    """Writes each event to the log; degraded outcomes are logged as warnings."""

    _WARNING_EVENTS = frozenset({
        EventType.TURN_FALLBACK,
        EventType.TURN_CEILING_REACHED,
        EventType.EVALUATION_DEGRADED,
    })

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.log_level = log_level

    def handle_event(self, event: ScreeningEvent) -> None:
        level = logging.WARNING if event.event_type in self._WARNING_EVENTS else self.log_level
        self.logger.log(level, "%s [%s] %s", event.event_type.value, event.conversation_id, event.data)


class ScreeningMetrics:
    """Counts screening outcomes for a session or process."""

    _COUNTERS = {
        EventType.TURN_GENERATED: "turns_generated",
        EventType.TURN_FALLBACK: "turn_fallbacks",
        EventType.TURN_CEILING_REACHED: "turn_ceilings_reached",
        EventType.INTERVIEW_COMPLETED: "interviews_completed",
        EventType.EVALUATION_COMPLETED: "evaluations_completed",
        EventType.EVALUATION_DEGRADED: "evaluations_degraded",
    }

    def __init__(self):
        self.reset()

    def handle_event(self, event: ScreeningEvent) -> None:
        name = self._COUNTERS.get(event.event_type)
        if name:
            self._counts[name] += 1

    def get_metrics(self) -> Dict[str, int]:
        """Snapshot of all counters."""
        return dict(self._counts)

    def reset(self) -> None:
        self._counts = {name: 0 for name in self._COUNTERS.values()}

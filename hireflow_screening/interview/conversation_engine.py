"""
Screening conversation engine: produces the next recruiter turn.

The engine is stateless. Every call receives the whole conversation so far,
with the candidate's latest reply as the last entry, and rebuilds everything
it needs from that input.
"""
import logging
import time
from typing import Any, List, Optional, Sequence, Tuple

from ..config import MAX_CANDIDATE_TURNS
from ..infrastructure.data.conversations import ConversationTurn, TurnRole, turns_from_wire
from ..infrastructure.llm import GenerationClient
from .events import (
    ScreeningEventBus, TurnGeneratedEvent, TurnFallbackEvent,
    TurnCeilingReachedEvent, InterviewCompletedEvent,
)
from .models import ScreeningContext
from .prompts import ScreeningPrompts
from .schemas import TurnResult, parse_turn_result

logger = logging.getLogger("conversation_engine")


def split_history(history: Sequence[ConversationTurn]) -> Tuple[List[ConversationTurn], str]:
    """
    Split a conversation into (prior turns, active input).

    The caller's sequence is never modified. The last entry is the
    candidate's reply and becomes the active input; everything before it is
    context. An empty history yields the begin-interview instruction, a
    history ending on a recruiter turn yields the continue instruction, and
    context that does not open with a recruiter turn gets a placeholder
    opening prepended.
    """
    prior = list(history)
    if not prior:
        return [], ScreeningPrompts.BEGIN_INTERVIEW

    last = prior.pop()
    if last.role == TurnRole.USER and last.text.strip():
        active_input = last.text
    else:
        logger.warning("Last history item was not a candidate reply (role=%s); continuing instead",
                       last.role.value)
        active_input = ScreeningPrompts.CONTINUE_INTERVIEW

    if prior and prior[0].role != TurnRole.AGENT:
        logger.info("Prepending placeholder opening turn to history")
        prior.insert(0, ConversationTurn.agent(ScreeningPrompts.OPENING_PLACEHOLDER))

    return prior, active_input


def count_candidate_turns(history: Sequence[ConversationTurn]) -> int:
    return sum(1 for turn in history if turn.role == TurnRole.USER)


class ScreeningConversationEngine:
    """Handles all screening conversation turn logic."""

    def __init__(self,
                 llm_client: GenerationClient,
                 max_candidate_turns: int = MAX_CANDIDATE_TURNS,
                 event_bus: Optional[ScreeningEventBus] = None):
        self.llm_client = llm_client
        self.max_candidate_turns = max_candidate_turns
        self.event_bus = event_bus

    def next_turn(self,
                  context: Optional[ScreeningContext],
                  history: Optional[Sequence[Any]],
                  conversation_id: str = "unknown") -> TurnResult:
        """
        Produce the next recruiter turn.

        Never raises: any failure becomes a single-bubble fallback turn with
        ``is_complete=False`` so the candidate can resend their answer.

        Args:
            context: Job and company context
            history: Full conversation so far, ConversationTurns or wire dicts
            conversation_id: Label used for logs and events only

        Returns:
            TurnResult with at least one message
        """
        try:
            return self._next_turn(context, history, conversation_id)
        except Exception as e:
            logger.exception("Unexpected chat error: %s", e)
            self._emit(TurnFallbackEvent(conversation_id, time.time(), "internal_error", str(e)))
            return self._fallback_turn("system_hiccup")

    def _next_turn(self,
                   context: Optional[ScreeningContext],
                   history: Optional[Sequence[Any]],
                   conversation_id: str) -> TurnResult:
        if context is None:
            logger.warning("No screening context supplied; using an empty job description")
            context = ScreeningContext(job_description="")

        turns = turns_from_wire(history)
        candidate_turns = count_candidate_turns(turns)
        at_ceiling = candidate_turns >= self.max_candidate_turns
        logger.info("AI chat input history length: %d (candidate turns: %d)", len(turns), candidate_turns)

        prior_turns, active_input = split_history(turns)
        system_instruction = ScreeningPrompts.screening_system_instruction(context, wrap_up=at_ceiling)

        try:
            raw_response = self.llm_client.complete(
                system_instruction, prior_turns, active_input, response_format="json"
            )
            logger.debug("AI raw response: %r", raw_response)
        except Exception as e:
            logger.error("AI chat error: %s", e)
            self._emit(TurnFallbackEvent(conversation_id, time.time(), "generation_failed", str(e)))
            if at_ceiling:
                return self._finish(self._closing_turn(), conversation_id, candidate_turns, forced=True)
            return self._fallback_turn("system_hiccup")

        try:
            result = parse_turn_result(raw_response)
        except ValueError as e:
            logger.error("JSON parse error: %s", e)
            self._emit(TurnFallbackEvent(conversation_id, time.time(), "malformed_output", str(e)))
            if at_ceiling:
                return self._finish(self._closing_turn(), conversation_id, candidate_turns, forced=True)
            return self._fallback_turn("unparseable_turn")

        self._emit(TurnGeneratedEvent(
            conversation_id, time.time(), candidate_turns, len(result.messages), result.is_complete
        ))

        if at_ceiling and not result.is_complete:
            logger.warning("Turn ceiling of %d reached, forcing completion", self.max_candidate_turns)
            result = TurnResult(messages=result.messages, is_complete=True)
            return self._finish(result, conversation_id, candidate_turns, forced=True)

        if result.is_complete:
            return self._finish(result, conversation_id, candidate_turns, forced=False)
        return result

    def _finish(self, result: TurnResult, conversation_id: str, candidate_turns: int, forced: bool) -> TurnResult:
        if forced:
            self._emit(TurnCeilingReachedEvent(
                conversation_id, time.time(), candidate_turns, self.max_candidate_turns
            ))
        self._emit(InterviewCompletedEvent(conversation_id, time.time(), candidate_turns, forced))
        return result

    def _fallback_turn(self, kind: str) -> TurnResult:
        """Create a fallback turn when generation or parsing fails."""
        return TurnResult(messages=list(ScreeningPrompts.fallback_messages()[kind]), is_complete=False)

    def _closing_turn(self) -> TurnResult:
        return TurnResult(messages=list(ScreeningPrompts.fallback_messages()["closing"]), is_complete=True)

    def _emit(self, event) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(event)

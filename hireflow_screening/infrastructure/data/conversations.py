"""
Conversation data structures.
Handles turn-by-turn conversation records and their wire representation.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger("conversations")


class TurnRole(str, Enum):
    """Who produced a conversation turn."""
    AGENT = "agent"
    USER = "user"


# Role spellings seen on the wire (chat UI, legacy Gemini-shaped history)
_ROLE_ALIASES = {
    "agent": TurnRole.AGENT,
    "model": TurnRole.AGENT,
    "assistant": TurnRole.AGENT,
    "bot": TurnRole.AGENT,
    "user": TurnRole.USER,
    "candidate": TurnRole.USER,
}

_TRANSCRIPT_LABELS = {
    TurnRole.AGENT: "Recruiter",
    TurnRole.USER: "Candidate",
}


@dataclass(frozen=True)
class ConversationTurn:
    """Represents a single turn in a conversation."""
    role: TurnRole
    text: str

    @classmethod
    def agent(cls, text: str) -> 'ConversationTurn':
        return cls(TurnRole.AGENT, text)

    @classmethod
    def user(cls, text: str) -> 'ConversationTurn':
        return cls(TurnRole.USER, text)


def _wire_text(item: Dict[str, Any]) -> Optional[str]:
    text = item.get("text")
    if isinstance(text, str):
        return text
    parts = item.get("parts")
    if isinstance(parts, list):
        texts = [p.get("text") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
        if texts:
            return "\n".join(texts)
    return None


def turns_from_wire(items: Optional[Iterable[Any]]) -> List[ConversationTurn]:
    """
    Convert a client-supplied history into ConversationTurns.

    Accepts ``{"role", "text"}`` items as well as the legacy
    ``{"role", "parts": [{"text"}]}`` shape. Items that cannot be understood
    are skipped with a warning so a single bad entry never fails the turn.
    """
    turns: List[ConversationTurn] = []
    for idx, item in enumerate(items or []):
        if isinstance(item, ConversationTurn):
            turns.append(item)
            continue
        if not isinstance(item, dict):
            logger.warning("Skipping history item %d: not an object", idx)
            continue

        role = _ROLE_ALIASES.get(str(item.get("role", "")).strip().lower())
        text = _wire_text(item)
        if role is None or text is None:
            logger.warning("Skipping history item %d: unknown role or missing text", idx)
            continue
        turns.append(ConversationTurn(role, text))
    return turns


def turns_to_wire(turns: Sequence[ConversationTurn]) -> List[Dict[str, str]]:
    """Serialize turns into the ``{"role", "text"}`` wire shape."""
    return [{"role": turn.role.value, "text": turn.text} for turn in turns]


def render_transcript(turns: Sequence[ConversationTurn]) -> str:
    """Render turns as a plain-text transcript for evaluation."""
    return "\n".join(f"{_TRANSCRIPT_LABELS[turn.role]}: {turn.text}" for turn in turns)

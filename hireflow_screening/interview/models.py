"""
Data models for the screening core.
"""
from dataclasses import dataclass
from typing import Optional

from ..infrastructure.data.conversations import ConversationTurn, TurnRole
from ..infrastructure.documents.resumes import BinaryResume, TextResume, ResumeDocument


@dataclass(frozen=True)
class ScreeningContext:
    """Read-only job and company context for one screening call."""
    job_description: str
    instructions: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    recruiter_name: Optional[str] = None


__all__ = [
    "ScreeningContext", "ConversationTurn", "TurnRole",
    "BinaryResume", "TextResume", "ResumeDocument",
]

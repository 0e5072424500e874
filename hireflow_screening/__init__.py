"""
HireFlow Screening: AI-driven candidate screening core.

A stateless conversation engine that interviews a candidate over chat, and
an evaluation pipeline that scores the candidate by reconciling their resume
against the interview transcript.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.conversation_engine import ScreeningConversationEngine
from .interview.evaluation import CandidateEvaluator
from .interview.models import ScreeningContext, ConversationTurn
from .interview.schemas import TurnResult, EvaluationResult

__all__ = [
    "ScreeningConversationEngine", "CandidateEvaluator",
    "ScreeningContext", "ConversationTurn", "TurnResult", "EvaluationResult",
]

"""Screening core components.

This module contains the business logic for AI-driven candidate screening:
the stateless conversation engine, the post-interview evaluation pipeline,
and the services that expose them to the chat transport and the
application pipeline.
"""

# Data models
from .models import ScreeningContext, ConversationTurn, TurnRole, BinaryResume, TextResume, ResumeDocument

# Structured schemas and parsing
from .schemas import (
    TurnResult, EvaluationResult, extract_json_object,
    parse_turn_result, parse_evaluation_result
)

# Conversation engine
from .conversation_engine import ScreeningConversationEngine, split_history

# Evaluation pipeline
from .evaluation import CandidateEvaluator, degraded_evaluation

# Service classes
from .services import (
    ChatService, ApplicationService, ApplicationAssessment,
    JobProfile, ChatRequest, UnknownJobError
)

# Terminal session
from .orchestrator import ScreeningSession, SessionResult

# Event system
from .events import (
    ScreeningEventBus, EventLogger, ScreeningMetrics,
    EventType, ScreeningEvent, TurnGeneratedEvent, TurnFallbackEvent,
    TurnCeilingReachedEvent, InterviewCompletedEvent,
    EvaluationCompletedEvent, EvaluationDegradedEvent
)

__all__ = [
    # Data models
    "ScreeningContext", "ConversationTurn", "TurnRole",
    "BinaryResume", "TextResume", "ResumeDocument",

    # Schemas
    "TurnResult", "EvaluationResult", "extract_json_object",
    "parse_turn_result", "parse_evaluation_result",

    # Engine and evaluator
    "ScreeningConversationEngine", "split_history",
    "CandidateEvaluator", "degraded_evaluation",

    # Services
    "ChatService", "ApplicationService", "ApplicationAssessment",
    "JobProfile", "ChatRequest", "UnknownJobError",

    # Session
    "ScreeningSession", "SessionResult",

    # Events
    "ScreeningEventBus", "EventLogger", "ScreeningMetrics",
    "EventType", "ScreeningEvent", "TurnGeneratedEvent", "TurnFallbackEvent",
    "TurnCeilingReachedEvent", "InterviewCompletedEvent",
    "EvaluationCompletedEvent", "EvaluationDegradedEvent",
]

"""
Service classes exposing the screening core to its collaborators: the chat
transport (one request per turn) and the application pipeline (one
evaluation per submitted application).
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..infrastructure.data.conversations import ConversationTurn, turns_from_wire
from ..infrastructure.documents.resumes import (
    ResumeDocument, ResumeExtractionError, load_resume, resume_from_bytes, describe_resume,
)
from .conversation_engine import ScreeningConversationEngine
from .evaluation import CandidateEvaluator, Transcript
from .models import ScreeningContext
from .schemas import EvaluationResult

logger = logging.getLogger("services")


class UnknownJobError(LookupError):
    """The chat transport referenced a job that does not exist."""


@dataclass(frozen=True)
class JobProfile:
    """Job and company fields as the application store keeps them."""
    job_id: str
    description: str
    chatbot_instructions: Optional[str] = None
    company_name: Optional[str] = None
    company_description: Optional[str] = None
    recruiter_full_name: Optional[str] = None

    def to_context(self) -> ScreeningContext:
        """Build the screening context; the recruiter is shown by first name only."""
        recruiter = None
        if self.recruiter_full_name and self.recruiter_full_name.strip():
            recruiter = self.recruiter_full_name.split()[0]
        return ScreeningContext(
            job_description=self.description,
            instructions=self.chatbot_instructions,
            company_name=self.company_name,
            company_description=self.company_description,
            recruiter_name=recruiter,
        )


class ChatRequest(BaseModel):
    """One chat turn request from the client."""
    job_id: Union[str, int]
    history: List[Any] = Field(default_factory=list)
    message: Optional[str] = None

    @field_validator("history", mode="before")
    @classmethod
    def _null_history(cls, value: Any) -> Any:
        return [] if value is None else value


JobResolver = Callable[[str], Optional[JobProfile]]


class ChatService:
    """Handles one chat turn per request; the client keeps the history."""

    def __init__(self, engine: ScreeningConversationEngine, resolve_job: JobResolver):
        self.engine = engine
        self.resolve_job = resolve_job

    def handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Answer one chat request.

        Raises:
            pydantic.ValidationError: If the payload has no job_id
            UnknownJobError: If the job cannot be found
        """
        request = ChatRequest.model_validate(payload)
        job_id = str(request.job_id)

        profile = self.resolve_job(job_id)
        if profile is None:
            raise UnknownJobError(f"Job context not found: {job_id}")

        history: List[ConversationTurn] = turns_from_wire(request.history)
        logger.debug("History from client: %d", len(history))
        if request.message:
            # Older clients send the latest answer separately from the history
            history.append(ConversationTurn.user(request.message))

        result = self.engine.next_turn(profile.to_context(), history, conversation_id=f"job_{job_id}")
        return result.model_dump()


@dataclass
class ApplicationAssessment:
    """What the application pipeline stores for a candidate."""
    evaluation: EvaluationResult
    resume_text: str = ""

    def to_record(self) -> Dict[str, Any]:
        record = self.evaluation.model_dump()
        record["resume_text"] = self.resume_text
        return record


class ApplicationService:
    """Runs the evaluation pipeline once for a submitted application."""

    def __init__(self, evaluator: CandidateEvaluator):
        self.evaluator = evaluator

    def assess(self,
               job_description: str,
               transcript: Optional[Transcript],
               instructions: Optional[str] = None,
               resume_path: Optional[str] = None,
               resume_bytes: Optional[bytes] = None,
               filename: Optional[str] = None,
               conversation_id: str = "unknown") -> ApplicationAssessment:
        """
        Evaluate an application. An unreadable resume is logged and the
        candidate is evaluated on the transcript alone.
        """
        resume = self._load_resume(resume_path, resume_bytes, filename)
        evaluation = self.evaluator.evaluate(
            resume, job_description, transcript, instructions, conversation_id=conversation_id
        )
        if resume is None and (resume_path or resume_bytes is not None):
            resume_text = "Extraction Failed"
        else:
            resume_text = describe_resume(resume)
        return ApplicationAssessment(evaluation=evaluation, resume_text=resume_text)

    def _load_resume(self,
                     resume_path: Optional[str],
                     resume_bytes: Optional[bytes],
                     filename: Optional[str]) -> Optional[ResumeDocument]:
        try:
            if resume_path:
                return load_resume(resume_path)
            if resume_bytes is not None:
                return resume_from_bytes(resume_bytes, filename or "resume.txt")
        except ResumeExtractionError as e:
            logger.error("Resume extraction failed, evaluating without resume: %s", e)
        return None

"""
Post-interview evaluation: scores a candidate by reconciling the resume
against the screening transcript.
"""
import logging
import re
import time
from typing import Any, List, Optional, Sequence, Union

import phonenumbers

from ..config import PHONE_REGION
from ..infrastructure.data.conversations import ConversationTurn, render_transcript, turns_from_wire
from ..infrastructure.documents.resumes import BinaryResume, TextResume, ResumeDocument
from ..infrastructure.llm import Attachment, GenerationClient
from .events import ScreeningEventBus, EvaluationCompletedEvent, EvaluationDegradedEvent
from .prompts import EvaluationPrompts
from .schemas import EvaluationResult, parse_evaluation_result

logger = logging.getLogger("evaluation")

_LINKEDIN_URL = re.compile(r"https?://(?:[a-z]{2,3}\.)?linkedin\.com/in/[a-zA-Z0-9_\-%]+/?", re.IGNORECASE)

Transcript = Union[str, Sequence[ConversationTurn], Sequence[dict]]


def degraded_evaluation(reason: Optional[str] = None) -> EvaluationResult:
    """Zero-score record returned when automated evaluation fails."""
    summary = EvaluationPrompts.degraded_summary()
    if reason:
        summary = f"{summary} ({reason})"
    return EvaluationResult(match_score=0, summary=summary, key_skills=[], missing_skills=[])


def transcript_to_text(transcript: Optional[Transcript]) -> str:
    """Accept a raw transcript string or a turn sequence and return plain text."""
    if transcript is None:
        return ""
    if isinstance(transcript, str):
        return transcript.strip()
    return render_transcript(turns_from_wire(transcript))


def find_contact_link(*texts: Optional[str]) -> Optional[str]:
    """First LinkedIn profile URL found in the given texts."""
    for text in texts:
        if text:
            match = _LINKEDIN_URL.search(text)
            if match:
                return match.group(0)
    return None


def find_phone_number(*texts: Optional[str], region: str = PHONE_REGION) -> Optional[str]:
    """First phone number found in the given texts, formatted internationally."""
    for text in texts:
        if not text:
            continue
        for match in phonenumbers.PhoneNumberMatcher(text, region):
            return phonenumbers.format_number(match.number, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
    return None


class CandidateEvaluator:
    """Scores one application against a job description."""

    def __init__(self,
                 llm_client: GenerationClient,
                 phone_region: str = PHONE_REGION,
                 event_bus: Optional[ScreeningEventBus] = None):
        self.llm_client = llm_client
        self.phone_region = phone_region
        self.event_bus = event_bus

    def evaluate(self,
                 resume: Optional[ResumeDocument],
                 job_description: str,
                 transcript: Optional[Transcript],
                 instructions: Optional[str] = None,
                 conversation_id: str = "unknown") -> EvaluationResult:
        """
        Evaluate a candidate.

        Never raises: on any failure the result has ``match_score=0`` and a
        summary saying automated evaluation failed.

        Args:
            resume: PDF bytes, extracted text, or None
            job_description: The job's description
            transcript: Finished screening transcript, as text or turns
            instructions: Job-specific screening priorities
            conversation_id: Label used for logs and events only

        Returns:
            EvaluationResult with every field present
        """
        transcript_text = ""
        resume_text: Optional[str] = None
        try:
            transcript_text = transcript_to_text(transcript)
            if isinstance(resume, TextResume):
                resume_text = resume.content
            result = self._evaluate(resume, job_description or "", transcript_text, instructions)
            self._emit(EvaluationCompletedEvent(
                conversation_id, time.time(), result.match_score, self._resume_kind(resume)
            ))
        except ValueError as e:
            logger.error("Evaluation output was malformed: %s", e)
            self._emit(EvaluationDegradedEvent(conversation_id, time.time(), "malformed_output", str(e)))
            result = degraded_evaluation("the model response could not be parsed")
        except Exception as e:
            logger.exception("Evaluation failed: %s", e)
            self._emit(EvaluationDegradedEvent(conversation_id, time.time(), "generation_failed", str(e)))
            result = degraded_evaluation("the evaluation request failed")

        return self._fill_contacts(result, transcript_text, resume_text)

    def _evaluate(self,
                  resume: Optional[ResumeDocument],
                  job_description: str,
                  transcript_text: str,
                  instructions: Optional[str]) -> EvaluationResult:
        attachments: List[Attachment] = []

        if isinstance(resume, BinaryResume):
            attachments.append(Attachment(data=resume.content, mime_type=resume.mime_type))
            material = EvaluationPrompts.evaluation_material(
                job_description, transcript_text, instructions, resume_attached=True
            )
        elif isinstance(resume, TextResume):
            material = EvaluationPrompts.evaluation_material(
                job_description, transcript_text, instructions, resume_text=resume.content
            )
        elif resume is None:
            material = EvaluationPrompts.evaluation_material(job_description, transcript_text, instructions)
        else:
            raise TypeError(f"Unsupported resume document: {type(resume).__name__}")

        raw_response = self.llm_client.complete(
            EvaluationPrompts.evaluation_instruction(), [], material,
            response_format="json", attachments=attachments,
        )
        logger.debug("Evaluation raw response: %r", raw_response)
        return parse_evaluation_result(raw_response)

    def _fill_contacts(self, result: EvaluationResult, transcript_text: str,
                       resume_text: Optional[str]) -> EvaluationResult:
        """Best-effort contact fallback for fields the model left empty."""
        updates = {}
        try:
            if result.extracted_contact_link is None:
                link = find_contact_link(transcript_text, resume_text)
                if link:
                    updates["extracted_contact_link"] = link
            if result.extracted_phone is None:
                phone = find_phone_number(transcript_text, resume_text, region=self.phone_region)
                if phone:
                    updates["extracted_phone"] = phone
        except Exception as e:
            logger.warning("Contact extraction fallback failed: %s", e)
            return result
        return result.model_copy(update=updates) if updates else result

    @staticmethod
    def _resume_kind(resume: Any) -> str:
        if isinstance(resume, BinaryResume):
            return "binary"
        if isinstance(resume, TextResume):
            return "text"
        return "none"

    def _emit(self, event) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(event)

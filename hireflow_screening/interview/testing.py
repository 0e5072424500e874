"""
Testing infrastructure with fake generation backends for the screening core.
"""
import json
from typing import Any, Dict, List, Optional, Sequence

from ..infrastructure.data.conversations import ConversationTurn
from ..infrastructure.llm import Attachment, GenerationError
from .models import ScreeningContext
from .schemas import EvaluationResult, TurnResult


class MockGenerationClient:
    """Generation client that replays scripted responses and records requests."""

    def __init__(self, mock_responses: Optional[List[str]] = None, default_response: Optional[str] = None):
        self.mock_responses = list(mock_responses or [])
        self.current_response_idx = 0
        self.default_response = default_response or json.dumps(
            {"messages": ["Thanks, that's helpful.", "What is your notice period?"], "is_complete": False}
        )
        self.request_history: List[Dict[str, Any]] = []

    def complete(self,
                 system_instruction: str,
                 prior_turns: Sequence[ConversationTurn],
                 active_input: str,
                 response_format: str = "json",
                 attachments: Sequence[Attachment] = ()) -> str:
        """Return the next scripted response."""
        self.request_history.append({
            "system_instruction": system_instruction,
            "prior_turns": list(prior_turns),
            "active_input": active_input,
            "response_format": response_format,
            "attachments": list(attachments),
        })

        if self.current_response_idx < len(self.mock_responses):
            response = self.mock_responses[self.current_response_idx]
            self.current_response_idx += 1
            return response
        return self.default_response

    @property
    def last_request(self) -> Dict[str, Any]:
        return self.request_history[-1]


class FailingGenerationClient:
    """Generation client whose every call fails."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or GenerationError("Gemini REST error 429: quota exceeded")
        self.calls = 0

    def complete(self, *args, **kwargs) -> str:
        self.calls += 1
        raise self.error


def turn_response(*messages: Any, is_complete: bool = False) -> str:
    """JSON text the model would return for a turn."""
    return json.dumps({"messages": list(messages), "is_complete": is_complete})


def evaluation_response(match_score: Any = 62,
                        summary: str = "Solid communicator. Recommendation: Technical Interview.",
                        key_skills: Optional[List[str]] = None,
                        missing_skills: Optional[List[str]] = None,
                        **extra: Any) -> str:
    """JSON text the model would return for an evaluation."""
    payload = {
        "match_score": match_score,
        "summary": summary,
        "key_skills": key_skills if key_skills is not None else ["SQL"],
        "missing_skills": missing_skills if missing_skills is not None else [],
        "extracted_phone": None,
        "extracted_contact_link": None,
    }
    payload.update(extra)
    return json.dumps(payload)


def create_test_context(instructions: Optional[str] = None) -> ScreeningContext:
    """Create a screening context for a backend role."""
    return ScreeningContext(
        job_description="Senior Backend Engineer, 5+ years, Node.js/SQL",
        instructions=instructions,
        company_name="Acme",
        company_description="B2B payments platform",
        recruiter_name="Dana",
    )


def create_test_history() -> List[ConversationTurn]:
    """Create a short, well-formed screening history ending on a candidate reply."""
    return [
        ConversationTurn.agent("Hi! I'm Dana from Acme.\nHow many years have you worked with Node.js?"),
        ConversationTurn.user("3 years Node.js, mostly APIs."),
        ConversationTurn.agent("Thanks for sharing your background.\nHave you led a team?"),
        ConversationTurn.user("No, I have led no teams so far."),
    ]


class TestEvaluationResult:
    """Helper for validating the shape of screening outputs."""

    __test__ = False

    @staticmethod
    def validate_evaluation(result: EvaluationResult) -> List[str]:
        """
        Validate an evaluation and return a list of issues found.

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []
        if not isinstance(result.match_score, int) or isinstance(result.match_score, bool):
            issues.append("match_score is not an integer")
        elif not (0 <= result.match_score <= 100):
            issues.append(f"match_score out of range: {result.match_score}")
        if not isinstance(result.summary, str) or not result.summary.strip():
            issues.append("summary is empty")
        for name in ("key_skills", "missing_skills"):
            value = getattr(result, name)
            if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
                issues.append(f"{name} is not a list of strings")
        for name in ("extracted_phone", "extracted_contact_link"):
            value = getattr(result, name)
            if value is not None and not isinstance(value, str):
                issues.append(f"{name} is neither a string nor null")
        return issues

    @staticmethod
    def validate_turn(result: TurnResult) -> List[str]:
        """Validate a turn and return a list of issues found."""
        issues = []
        if not result.messages:
            issues.append("messages is empty")
        if any(not isinstance(m, str) or not m.strip() for m in result.messages):
            issues.append("messages contains a blank or non-string bubble")
        if not isinstance(result.is_complete, bool):
            issues.append("is_complete is not a boolean")
        return issues

    @staticmethod
    def assert_valid_evaluation(result: EvaluationResult) -> None:
        """Assert that an evaluation is well formed, raising AssertionError if not."""
        issues = TestEvaluationResult.validate_evaluation(result)
        if issues:
            raise AssertionError(f"Invalid evaluation result: {'; '.join(issues)}")

    @staticmethod
    def assert_valid_turn(result: TurnResult) -> None:
        """Assert that a turn is well formed, raising AssertionError if not."""
        issues = TestEvaluationResult.validate_turn(result)
        if issues:
            raise AssertionError(f"Invalid turn result: {'; '.join(issues)}")

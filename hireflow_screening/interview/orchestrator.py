"""
Terminal screening session: drives the conversation engine turn by turn the
way the chat UI does, then hands the finished transcript to the evaluator.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..config import Config, EVAL_TEMPERATURE, EVAL_TIMEOUT
from ..infrastructure.data.conversations import ConversationTurn, render_transcript
from ..infrastructure.documents.resumes import ResumeDocument, describe_resume
from ..infrastructure.llm import GeminiRestClient, GenerationClient
from ..utils import setup_logging
from .conversation_engine import ScreeningConversationEngine
from .evaluation import CandidateEvaluator
from .events import ScreeningEventBus, EventLogger, ScreeningMetrics
from .models import ScreeningContext
from .schemas import EvaluationResult

logger = logging.getLogger("orchestrator")

_QUIT_WORDS = {"/quit", "/exit"}


@dataclass
class SessionResult:
    """Everything a terminal session produced."""
    history: List[ConversationTurn] = field(default_factory=list)
    completed: bool = False
    evaluation: Optional[EvaluationResult] = None
    resume_text: str = ""


class ScreeningSession:
    """
    Screening session runner for operators.

    Keeps the history on the client side, exactly as the chat transport
    does, and resends all of it on every turn.
    """

    def __init__(self,
                 chat_client: GenerationClient,
                 eval_client: GenerationClient,
                 max_candidate_turns: int,
                 phone_region: str,
                 input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print):
        self.event_bus = ScreeningEventBus()
        self.event_logger = EventLogger()
        self.metrics = ScreeningMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        self.engine = ScreeningConversationEngine(chat_client, max_candidate_turns, self.event_bus)
        self.evaluator = CandidateEvaluator(eval_client, phone_region, self.event_bus)
        self.input_fn = input_fn
        self.output_fn = output_fn

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> 'ScreeningSession':
        """Build a session with Gemini clients from configuration."""
        setup_logging(config.log_file, config.log_level)
        common = dict(
            project=config.google_cloud_project,
            location=config.vertex_location,
            credentials_json=config.google_application_credentials,
            api_key=config.gemini_api_key,
        )
        chat_client = GeminiRestClient(model=config.chat_model, **common)
        eval_client = GeminiRestClient(model=config.eval_model, timeout=EVAL_TIMEOUT,
                                       temperature=EVAL_TEMPERATURE, **common)
        return cls(chat_client, eval_client, config.max_candidate_turns, config.phone_region, **kwargs)

    def run(self,
            context: ScreeningContext,
            resume: Optional[ResumeDocument] = None,
            evaluate: bool = True) -> SessionResult:
        """
        Run a complete screening conversation over the terminal.

        Args:
            context: Job and company context
            resume: Optional resume to evaluate against the transcript
            evaluate: Whether to score the candidate at the end

        Returns:
            SessionResult with the history and optional evaluation
        """
        result = SessionResult()
        self.output_fn("\n💬 Starting screening interview (type /quit to stop)")
        self.output_fn("=" * 50)

        while True:
            turn = self.engine.next_turn(context, result.history, conversation_id="terminal")
            for bubble in turn.messages:
                self.output_fn(f"🤖 {bubble}")
            result.history.append(ConversationTurn.agent("\n".join(turn.messages)))

            if turn.is_complete:
                result.completed = True
                break

            try:
                answer = self.input_fn("👤 ").strip()
            except EOFError:
                logger.info("Input closed, ending session")
                break
            if answer.lower() in _QUIT_WORDS:
                logger.info("Session stopped by operator")
                break
            result.history.append(ConversationTurn.user(answer))

        if evaluate:
            transcript = render_transcript(result.history)
            result.evaluation = self.evaluator.evaluate(
                resume, context.job_description, transcript, context.instructions,
                conversation_id="terminal",
            )
            result.resume_text = describe_resume(resume)
            self._display_results(result)

        return result

    def _display_results(self, result: SessionResult):
        """Display final evaluation results."""
        self.output_fn("\n" + "=" * 50)
        self.output_fn("🎯 SCREENING COMPLETE" if result.completed else "🛑 SCREENING STOPPED")
        self.output_fn("=" * 50)
        if result.evaluation is not None:
            self.output_fn(json.dumps(result.evaluation.model_dump(), indent=2, ensure_ascii=False))
        self.output_fn(f"📈 Session metrics: {self.metrics.get_metrics()}")

    def get_metrics(self) -> Dict[str, int]:
        """Get current session metrics."""
        return self.metrics.get_metrics()

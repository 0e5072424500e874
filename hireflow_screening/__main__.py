#!/usr/bin/env python3
"""
Main entry point for the screening core.
Allows running the package with: python -m hireflow_screening

Commands:
    chat      --job=FILE [--instructions=FILE] [--company=NAME] [--recruiter=NAME] [--resume=FILE] [--no-eval]
    evaluate  --job=FILE --transcript=FILE [--instructions=FILE] [--resume=FILE]
"""
import json
import sys
from typing import Dict, List, Optional

from .config import get_config, EVAL_TEMPERATURE, EVAL_TIMEOUT
from .infrastructure.documents import ResumeExtractionError, load_resume
from .infrastructure.llm import GeminiRestClient
from .interview.evaluation import CandidateEvaluator
from .interview.models import ScreeningContext
from .interview.orchestrator import ScreeningSession
from .interview.services import ApplicationService
from .utils import setup_logging

USAGE = __doc__


def _parse_options(args: List[str]) -> Dict[str, str]:
    options = {}
    for arg in args:
        if arg.startswith("--") and "=" in arg:
            key, value = arg[2:].split("=", 1)
            options[key] = value
        elif arg.startswith("--"):
            options[arg[2:]] = "true"
        else:
            print(f"❌ Unexpected argument: {arg}")
            sys.exit(2)
    return options


def _read_file(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"❌ Could not read {path}: {e}")
        sys.exit(1)


def _run_chat(config, options: Dict[str, str]) -> int:
    job_description = _read_file(options.get("job"))
    if not job_description:
        print("❌ --job=FILE is required")
        return 2

    context = ScreeningContext(
        job_description=job_description,
        instructions=_read_file(options.get("instructions")),
        company_name=options.get("company"),
        company_description=options.get("company-description"),
        recruiter_name=options.get("recruiter"),
    )

    resume = None
    if options.get("resume"):
        try:
            resume = load_resume(options["resume"])
        except ResumeExtractionError as e:
            print(f"⚠️  Resume ignored: {e}")

    session = ScreeningSession.from_config(config)
    session.run(context, resume=resume, evaluate="no-eval" not in options)
    print(f"📁 Full details logged to: {config.log_file}")
    return 0


def _run_evaluate(config, options: Dict[str, str]) -> int:
    job_description = _read_file(options.get("job"))
    transcript = _read_file(options.get("transcript"))
    if not job_description or transcript is None:
        print("❌ --job=FILE and --transcript=FILE are required")
        return 2

    setup_logging(config.log_file, config.log_level)
    client = GeminiRestClient(
        project=config.google_cloud_project,
        location=config.vertex_location,
        model=config.eval_model,
        credentials_json=config.google_application_credentials,
        api_key=config.gemini_api_key,
        timeout=EVAL_TIMEOUT,
        temperature=EVAL_TEMPERATURE,
    )
    service = ApplicationService(CandidateEvaluator(client, config.phone_region))

    # A transcript file may hold the chat UI's JSON turn list or plain text
    try:
        parsed = json.loads(transcript)
        if isinstance(parsed, list):
            transcript = parsed
    except ValueError:
        pass

    assessment = service.assess(
        job_description,
        transcript,
        instructions=_read_file(options.get("instructions")),
        resume_path=options.get("resume"),
        conversation_id="cli",
    )
    print(json.dumps(assessment.to_record(), indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for the screening core."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help", "help"):
        print(USAGE)
        return 0

    command, options = argv[0], _parse_options(argv[1:])

    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        return 1

    if command == "chat":
        return _run_chat(config, options)
    if command == "evaluate":
        return _run_evaluate(config, options)

    print(f"❌ Unknown command: {command}")
    print(USAGE)
    return 2


if __name__ == "__main__":
    sys.exit(main())

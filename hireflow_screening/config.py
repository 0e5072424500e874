"""
HireFlow Screening Configuration
================================

This file contains ALL configuration for the screening core.
- User settings at the top (things operators might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# USER SETTINGS - Edit these to customize the screening behavior
# =============================================================================

# Generation backend: either a Google Cloud project (Vertex AI) or an API key
GOOGLE_CLOUD_PROJECT = None
GOOGLE_APPLICATION_CREDENTIALS = None  # Optional: path to credentials JSON
GEMINI_API_KEY = None

# Models
CHAT_MODEL_NAME = "gemini-2.0-flash"
EVAL_MODEL_NAME = "gemini-2.0-flash"

# Interview settings
MAX_CANDIDATE_TURNS = 12
DEFAULT_RECRUITER_TITLE = "a Senior Recruiter"

# Contact extraction
PHONE_REGION = "US"

# Logging
LOG_FILE = "./_screening/screening.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# LLM
VERTEX_LOCATION = "us-central1"
GENERATIVE_LANGUAGE_URL = "https://generativelanguage.googleapis.com/v1beta"
CHAT_TIMEOUT = 60
EVAL_TIMEOUT = 120
MAX_OUTPUT_TOKENS = 2048
CHAT_TEMPERATURE = 0.7
EVAL_TEMPERATURE = 0.2

# Documents
PDF_MIME_TYPE = "application/pdf"
TEXT_ENCODING = "utf-8"


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    google_cloud_project: Optional[str] = None
    google_application_credentials: Optional[str] = None
    gemini_api_key: Optional[str] = None
    chat_model: str = CHAT_MODEL_NAME
    eval_model: str = EVAL_MODEL_NAME
    vertex_location: str = VERTEX_LOCATION
    max_candidate_turns: int = MAX_CANDIDATE_TURNS
    phone_region: str = PHONE_REGION
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def get_config() -> Config:
    """Load configuration from the environment, falling back to the settings above."""
    project = os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT
    credentials = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS
    api_key = os.getenv("GEMINI_API_KEY") or GEMINI_API_KEY

    if not project and not api_key:
        raise ValueError("Please set GEMINI_API_KEY or GOOGLE_CLOUD_PROJECT in config.py or as environment variable")

    max_turns = _int_env("HIREFLOW_MAX_CANDIDATE_TURNS", MAX_CANDIDATE_TURNS)
    if max_turns < 1:
        raise ValueError("HIREFLOW_MAX_CANDIDATE_TURNS must be at least 1")

    return Config(
        google_cloud_project=project,
        google_application_credentials=credentials,
        gemini_api_key=api_key,
        chat_model=os.getenv("HIREFLOW_CHAT_MODEL") or CHAT_MODEL_NAME,
        eval_model=os.getenv("HIREFLOW_EVAL_MODEL") or EVAL_MODEL_NAME,
        vertex_location=os.getenv("HIREFLOW_VERTEX_LOCATION") or VERTEX_LOCATION,
        max_candidate_turns=max_turns,
        phone_region=os.getenv("HIREFLOW_PHONE_REGION") or PHONE_REGION,
        log_file=os.getenv("HIREFLOW_LOG_FILE") or LOG_FILE,
        log_level=os.getenv("HIREFLOW_LOG_LEVEL") or LOG_LEVEL,
    )

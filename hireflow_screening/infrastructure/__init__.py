"""Infrastructure components for the screening core.

This module contains low-level technical components that provide
foundational capabilities for the screening engine and evaluator.
"""

# LLM infrastructure
from .llm import Attachment, GeminiRestClient, GenerationClient, GenerationError

# Resume documents
from .documents import ResumeExtractionError, load_resume, resume_from_bytes, describe_resume

__all__ = [
    # LLM client
    "Attachment", "GeminiRestClient", "GenerationClient", "GenerationError",

    # Documents
    "ResumeExtractionError", "load_resume", "resume_from_bytes", "describe_resume",
]

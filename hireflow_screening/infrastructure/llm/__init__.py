"""LLM infrastructure: the text-generation backend used by the screening core."""

from .client import Attachment, GeminiRestClient, GenerationClient, GenerationError

__all__ = ["Attachment", "GeminiRestClient", "GenerationClient", "GenerationError"]

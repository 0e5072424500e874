"""
Resume document handling.
"""

from .resumes import (
    BinaryResume, TextResume, ResumeDocument, ResumeExtractionError,
    load_resume, resume_from_bytes, describe_resume,
)

__all__ = [
    'BinaryResume',
    'TextResume',
    'ResumeDocument',
    'ResumeExtractionError',
    'load_resume',
    'resume_from_bytes',
    'describe_resume',
]

"""
Structured output schemas and model-output parsing for the screening core.

The generation backend returns free text that is *supposed* to be a JSON
object. Everything here turns that text into a strict ``TurnResult`` or
``EvaluationResult`` or raises ``ValueError``; callers decide how to degrade.
"""
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool, ValidationError, field_validator

logger = logging.getLogger("schemas")

_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```")


class TurnResult(BaseModel):
    """One bot turn: ordered chat bubbles plus the completion flag."""
    messages: List[str] = Field(..., min_length=1, description="Chat bubbles, in display order")
    is_complete: StrictBool = Field(..., description="True once the interview has gathered enough information")

    @field_validator("messages")
    @classmethod
    def _no_blank_bubbles(cls, value: List[str]) -> List[str]:
        if any(not m.strip() for m in value):
            raise ValueError("messages must not contain blank bubbles")
        return value


class EvaluationResult(BaseModel):
    """Structured hiring assessment for one application."""
    match_score: int = Field(..., ge=0, le=100, description="Fit between candidate and job, 0-100")
    summary: str = Field(..., min_length=1, description="Narrative evaluation ending in a recommendation")
    key_skills: List[str] = Field(default_factory=list, description="Skills verified by resume or transcript")
    missing_skills: List[str] = Field(default_factory=list, description="Skills the candidate clearly lacked")
    extracted_phone: Optional[str] = Field(None, description="Phone number if found")
    extracted_contact_link: Optional[str] = Field(None, description="Profile link (e.g. LinkedIn) if found")

    @field_validator("match_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("match_score must be a number")
        if isinstance(value, str):
            try:
                value = float(value.strip().rstrip("%"))
            except ValueError:
                raise ValueError(f"match_score is not numeric: {value!r}")
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"match_score is not numeric: {value!r}")
        return max(0, min(100, int(round(value))))

    @field_validator("summary", mode="before")
    @classmethod
    def _clean_summary(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("key_skills", "missing_skills", mode="before")
    @classmethod
    def _clean_skills(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [s.strip() for s in value if isinstance(s, str) and s.strip()]

    @field_validator("extracted_phone", "extracted_contact_link", mode="before")
    @classmethod
    def _clean_contact(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        value = value.strip()
        if not value or value.lower() in ("null", "none", "n/a"):
            return None
        return value


def extract_json_object(raw_response: str) -> Dict[str, Any]:
    """
    Pull a JSON object out of raw model output.

    Tries a direct parse first, then the body of a code fence, then the
    substring between the first '{' and the last '}'.

    Raises:
        ValueError: If no JSON object can be recovered
    """
    if not isinstance(raw_response, str) or not raw_response.strip():
        raise ValueError("Empty LLM response")

    try:
        data = json.loads(raw_response)
    except json.JSONDecodeError:
        data = _recover_json(raw_response)

    # JSON mode occasionally wraps the object in a one-element array
    if isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
        data = data[0]

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _recover_json(text: str) -> Any:
    candidates = []
    fenced = _CODE_FENCE.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug("JSON recovery attempt failed: %s", e)

    raise ValueError(f"Could not extract valid JSON from LLM response: {text!r}")


def parse_turn_result(raw_response: str) -> TurnResult:
    """
    Parse model output into a TurnResult.

    Non-string and blank entries in ``messages`` are dropped before
    validation; the model sometimes echoes its own metadata into the array.

    Raises:
        ValueError: If the output does not describe a usable turn
    """
    data = extract_json_object(raw_response)

    missing = [key for key in ("messages", "is_complete") if key not in data]
    if missing:
        raise ValueError(f"Turn response missing keys: {missing}")
    if not isinstance(data["messages"], list):
        raise ValueError("Turn response 'messages' is not a list")

    bubbles = [m.strip() for m in data["messages"] if isinstance(m, str) and m.strip()]
    dropped = len(data["messages"]) - len(bubbles)
    if dropped:
        logger.warning("Dropped %d non-text entries from messages", dropped)

    try:
        return TurnResult(messages=bubbles, is_complete=data["is_complete"])
    except ValidationError as e:
        raise ValueError(f"Invalid turn structure: {e}")


def parse_evaluation_result(raw_response: str) -> EvaluationResult:
    """
    Parse model output into an EvaluationResult.

    Raises:
        ValueError: If match_score or summary is missing or invalid
    """
    data = extract_json_object(raw_response)

    if data.get("extracted_contact_link") is None and "extracted_linkedin" in data:
        data["extracted_contact_link"] = data["extracted_linkedin"]

    known = {k: v for k, v in data.items() if k in EvaluationResult.model_fields}
    try:
        return EvaluationResult(**known)
    except ValidationError as e:
        raise ValueError(f"Invalid evaluation structure: {e}")

"""Tests for output schemas and JSON recovery."""

import json

import pytest
from pydantic import ValidationError

from hireflow_screening.interview.schemas import (
    EvaluationResult, TurnResult, extract_json_object,
    parse_evaluation_result, parse_turn_result,
)
from hireflow_screening.interview.testing import evaluation_response


class TestExtractJsonObject:
    """Test cases for pulling a JSON object out of raw model text."""

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        raw = "Here is the result:\n```json\n{\"a\": 2}\n```\nAnything else?"
        assert extract_json_object(raw) == {"a": 2}

    def test_brace_slice(self):
        raw = 'The answer is {"a": {"b": 3}} as requested.'
        assert extract_json_object(raw) == {"a": {"b": 3}}

    def test_single_object_array_unwrapped(self):
        raw = '[{"messages": ["Hi"], "is_complete": false}]'

        assert extract_json_object(raw) == {"messages": ["Hi"], "is_complete": False}
        assert parse_turn_result(raw).messages == ["Hi"]

    @pytest.mark.parametrize("raw", ["[]", '[{"a": 1}, {"a": 2}]', '[["nested"]]'])
    def test_other_arrays_rejected(self, raw):
        with pytest.raises(ValueError):
            extract_json_object(raw)

    @pytest.mark.parametrize("raw", ["", "   ", "no json here", "[1, 2]", '"just a string"', "{broken"])
    def test_unrecoverable(self, raw):
        with pytest.raises(ValueError):
            extract_json_object(raw)


class TestTurnResult:
    """Test cases for TurnResult parsing."""

    def test_valid_turn(self):
        result = parse_turn_result('{"messages": ["Hello!", "  How are you?  "], "is_complete": false}')

        assert result == TurnResult(messages=["Hello!", "How are you?"], is_complete=False)

    def test_blank_bubbles_dropped(self):
        result = parse_turn_result('{"messages": ["", "Hi", "   "], "is_complete": true}')

        assert result.messages == ["Hi"]
        assert result.is_complete is True

    def test_empty_messages_rejected(self):
        with pytest.raises(ValueError):
            parse_turn_result('{"messages": [], "is_complete": false}')

    def test_non_boolean_completion_rejected(self):
        with pytest.raises(ValueError):
            parse_turn_result('{"messages": ["Hi"], "is_complete": 1}')

    def test_model_rejects_blank_bubble(self):
        with pytest.raises(ValidationError):
            TurnResult(messages=["ok", " "], is_complete=False)


class TestEvaluationResult:
    """Test cases for EvaluationResult parsing and normalization."""

    def test_valid_evaluation(self):
        result = parse_evaluation_result(evaluation_response(
            match_score=81, key_skills=["Node.js", " SQL "], missing_skills=["Kubernetes"],
            extracted_phone="+1 201-555-0123", extracted_contact_link="https://linkedin.com/in/jane",
        ))

        assert result.match_score == 81
        assert result.key_skills == ["Node.js", "SQL"]
        assert result.missing_skills == ["Kubernetes"]
        assert result.extracted_phone == "+1 201-555-0123"
        assert result.extracted_contact_link == "https://linkedin.com/in/jane"

    @pytest.mark.parametrize("score, expected", [
        (150, 100), (-5, 0), (72.6, 73), ("64", 64), ("88%", 88), (0, 0), (100, 100),
    ])
    def test_score_is_coerced_and_clamped(self, score, expected):
        result = parse_evaluation_result(evaluation_response(match_score=score))

        assert result.match_score == expected

    @pytest.mark.parametrize("score", [None, "high", True, [50]])
    def test_invalid_score_rejected(self, score):
        with pytest.raises(ValueError):
            parse_evaluation_result(evaluation_response(match_score=score))

    def test_missing_summary_rejected(self):
        with pytest.raises(ValueError):
            parse_evaluation_result(json.dumps({"match_score": 50}))

    def test_blank_summary_rejected(self):
        with pytest.raises(ValueError):
            parse_evaluation_result(evaluation_response(summary="   "))

    def test_missing_lists_default_empty(self):
        result = parse_evaluation_result(json.dumps({"match_score": 50, "summary": "Fine."}))

        assert result.key_skills == []
        assert result.missing_skills == []
        assert result.extracted_phone is None
        assert result.extracted_contact_link is None

    def test_non_list_skills_become_empty(self):
        result = parse_evaluation_result(evaluation_response(key_skills="Python, SQL", missing_skills=[1, "Go"]))

        assert result.key_skills == []
        assert result.missing_skills == ["Go"]

    @pytest.mark.parametrize("value", ["null", "None", "", "N/A", 12345])
    def test_placeholder_contacts_become_none(self, value):
        result = parse_evaluation_result(evaluation_response(extracted_phone=value))

        assert result.extracted_phone is None

    def test_legacy_linkedin_key_accepted(self):
        raw = json.dumps({
            "match_score": 70, "summary": "Good.",
            "extracted_linkedin": "https://www.linkedin.com/in/sam",
        })

        result = parse_evaluation_result(raw)

        assert result.extracted_contact_link == "https://www.linkedin.com/in/sam"

    def test_unknown_keys_ignored(self):
        result = parse_evaluation_result(evaluation_response(confidence="high"))

        assert "confidence" not in result.model_dump()

    def test_dump_has_every_field(self):
        result = EvaluationResult(match_score=10, summary="x")

        assert set(result.model_dump()) == {
            "match_score", "summary", "key_skills", "missing_skills",
            "extracted_phone", "extracted_contact_link",
        }

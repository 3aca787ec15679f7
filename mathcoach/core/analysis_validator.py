"""
mathcoach/core/analysis_validator.py — learning-analysis response validation.
Locates the JSON object in the model text, checks its shape against a schema,
and coerces the numeric fields. The strength/weakness split is trusted as sent.
"""
import json
import math
from typing import Any, Union

import pydantic
from jsonschema import validate as validate_schema, ValidationError as SchemaError

from mathcoach.core.errors import ValidationError
from mathcoach.knowledge.models import AnalysisResult

_TOPIC_PERFORMANCE = {
    "type": "object",
    "required": ["topic", "correctRate", "totalProblems"],
    "properties": {"topic": {"type": "string"}},
}

ANALYSIS_SCHEMA = {
    "type": "object",
    "required": ["strengths", "weaknesses", "recommendations", "overallStats"],
    "properties": {
        "strengths": {"type": "array", "items": _TOPIC_PERFORMANCE},
        "weaknesses": {"type": "array", "items": _TOPIC_PERFORMANCE},
        "recommendations": {"type": "array", "items": {"type": "string"}},
        "overallStats": {
            "type": "object",
            "required": ["totalProblems", "averageCorrectRate"],
            "properties": {
                "mostFrequentTopics": {"type": "array", "items": {"type": "string"}},
            },
        },
    },
}


def find_json_object(text: str) -> str:
    """
    Return the first balanced {...} span in text. Braces inside JSON strings
    are ignored.
    """
    start = text.find("{") if isinstance(text, str) else -1
    if start < 0:
        raise ValidationError("Invalid response format from AI: no JSON object found.")

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    raise ValidationError("Invalid response format from AI: unbalanced JSON object.")


def _to_number(value: Any, path: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{path} must be numeric, got a boolean.")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{path} must be numeric, got {value!r}.") from None
    else:
        raise ValidationError(f"{path} must be numeric, got {type(value).__name__}.")
    if not math.isfinite(number):
        raise ValidationError(f"{path} must be a finite number.")
    return number


def _to_count(value: Any, path: str) -> int:
    number = _to_number(value, path)
    if not number.is_integer():
        raise ValidationError(f"{path} must be a whole number, got {value!r}.")
    return int(number)


def _performance_list(entries: list, name: str) -> list:
    return [
        {
            **entry,
            "correctRate": _to_number(entry.get("correctRate"), f"{name}[{i}].correctRate"),
            "totalProblems": _to_count(entry.get("totalProblems"), f"{name}[{i}].totalProblems"),
        }
        for i, entry in enumerate(entries)
    ]


def validate(raw: Union[AnalysisResult, dict, Any]) -> AnalysisResult:
    """Validate a parsed analysis object. The input is never mutated."""
    if isinstance(raw, AnalysisResult):
        raw = raw.to_json_dict()
    if not isinstance(raw, dict):
        raise ValidationError("Analysis must be a JSON object.")

    try:
        validate_schema(instance=raw, schema=ANALYSIS_SCHEMA)
    except SchemaError as exc:
        raise ValidationError(f"Invalid analysis data structure: {exc.message}") from exc

    overall = raw["overallStats"]
    normalized = {
        "strengths": _performance_list(raw["strengths"], "strengths"),
        "weaknesses": _performance_list(raw["weaknesses"], "weaknesses"),
        "recommendations": list(raw["recommendations"]),
        "overallStats": {
            **overall,
            "totalProblems": _to_count(overall["totalProblems"], "overallStats.totalProblems"),
            "averageCorrectRate": _to_number(overall["averageCorrectRate"], "overallStats.averageCorrectRate"),
        },
    }

    try:
        return AnalysisResult.model_validate(normalized)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid analysis data structure: {exc}") from exc


def parse_analysis(text: str) -> AnalysisResult:
    """Locate, decode and validate the analysis JSON embedded in model text."""
    json_text = find_json_object(text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Failed to parse AI response: {exc.msg}") from exc
    return validate(data)

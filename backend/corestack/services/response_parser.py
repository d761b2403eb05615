"""
Sanitize-then-validate step for model output.

Model text is untrusted: it is fence-stripped, parsed as JSON and validated
against a pydantic model before any other code sees it as a typed value.
Nothing here substitutes defaults for output that fails to parse.
"""
import json
import logging
import re
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from corestack.exceptions import MalformedModelOutput, SchemaValidationError
from corestack.schemas import GeneratedCourse, ProjectSkeleton, StyleSystem
from corestack.services.settings_loader import get_output_excerpt_chars

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

OPENING_FENCE_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n?")
CLOSING_FENCE_RE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a ``` / ```json fence wrapped around the response and trim whitespace."""
    text = OPENING_FENCE_RE.sub("", (text or "").strip(), count=1)
    return CLOSING_FENCE_RE.sub("", text, count=1).strip()


def parse_model_json(text: str, excerpt_chars: Optional[int] = None) -> Any:
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        limit = excerpt_chars if excerpt_chars is not None else get_output_excerpt_chars()
        excerpt = (text or "")[:limit]
        logger.error(f"Failed to parse model response as JSON: {e}. Raw excerpt: {excerpt!r}")
        raise MalformedModelOutput(f"Model response is not valid JSON: {e.msg}", excerpt=excerpt) from e


def validate_model_output(model_cls: Type[ModelT], data: Any, label: Optional[str] = None) -> ModelT:
    label = label or model_cls.__name__
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        logger.error(f"{label} failed validation: {messages}")
        raise SchemaValidationError(
            f"{label} failed validation: {'; '.join(messages[:5])}",
            errors=messages,
        ) from e


def parse_style_system(text: str) -> StyleSystem:
    return validate_model_output(StyleSystem, parse_model_json(text), "Style system")


def parse_course(text: str) -> GeneratedCourse:
    return validate_model_output(GeneratedCourse, parse_model_json(text), "Course")


def parse_project_skeleton(text: str) -> ProjectSkeleton:
    return validate_model_output(ProjectSkeleton, parse_model_json(text), "Project skeleton")


def parse_component_envelope(text: str) -> str:
    """Extract the markup from a {"code": "..."} envelope."""
    data = parse_model_json(text)
    code = data.get("code") if isinstance(data, dict) else None
    if not isinstance(code, str) or not code.strip():
        raise SchemaValidationError(
            'Component response must be a JSON object with a non-empty "code" string',
            errors=["code: missing or not a string"],
        )
    return code.strip()

from __future__ import annotations

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from headhuntd.errors import ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)

_REQUIRED_TYPES = {"missing", "string_too_short", "too_short", "required"}
_TOO_LONG_TYPES = {"string_too_long", "too_long"}


def _reason(error_type: str) -> str:
    if error_type in _REQUIRED_TYPES:
        return "required"
    if error_type in _TOO_LONG_TYPES:
        return "fieldTooLong"
    return "invalid"


def parse_step_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a step payload, reporting the first offending field as a ValidationError."""
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("payload", "invalid", "Step payload must be a JSON object")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "payload"
        raise ValidationError(field, _reason(first["type"]), first.get("msg")) from exc

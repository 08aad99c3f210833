"""Payload validation for build writes.

Both entry points are all-or-nothing: either a fully validated model comes
back or ``BuildValidationError`` is raised listing every violation.
"""
from pydantic import BaseModel, ValidationError

from app.errors import BuildValidationError
from app.schemas.build import BuildCreate, BuildUpdate


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "body"


def field_errors(exc: ValidationError) -> list[dict]:
    """Flatten a pydantic error into ``{field, message}`` entries."""
    return [
        {"field": _field_path(err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def _validate(model: type[BaseModel], payload):
    if not isinstance(payload, dict):
        raise BuildValidationError(
            [{"field": "body", "message": "Expected a JSON object"}]
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise BuildValidationError(field_errors(exc)) from exc


def validate_build_input(payload) -> BuildCreate:
    return _validate(BuildCreate, payload)


def validate_build_update(payload) -> BuildUpdate:
    return _validate(BuildUpdate, payload)

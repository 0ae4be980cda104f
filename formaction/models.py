"""Pydantic models shared across application layers."""

from __future__ import annotations

import time
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from formaction.exceptions import INTERNAL_ERROR_MESSAGE


def now_ms() -> int:
    """Milliseconds since the epoch."""

    return time.time_ns() // 1_000_000


class FlattenedValidationErrors(BaseModel):
    """Validation errors split into form-level and field-level messages.

    Serializes as ``{"formErrors": [...], "fieldErrors": {...}}`` so clients
    can attach the messages to their form state unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    form_errors: list[str] = Field(default_factory=list, alias="formErrors")
    field_errors: dict[str, list[str] | None] = Field(
        default_factory=dict, alias="fieldErrors"
    )

    def is_empty(self) -> bool:
        return not self.form_errors and not any(self.field_errors.values())


def flatten_validation_error(error: ValidationError) -> FlattenedValidationErrors:
    """Flatten a pydantic error tree into form and field messages.

    Issues without a location belong to the form; every other issue is keyed
    by the first element of its location, so nested errors attach to the
    top-level field that holds them. Field order follows the order in which
    the schema reported its issues.
    """

    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for issue in error.errors(include_url=False):
        location = issue.get("loc") or ()
        message = str(issue.get("msg", "Invalid value"))
        if not location:
            form_errors.append(message)
            continue
        field_errors.setdefault(str(location[0]), []).append(message)

    return FlattenedValidationErrors(form_errors=form_errors, field_errors=field_errors)


class Success(BaseModel):
    """Envelope for a processed action."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    timestamp: int = Field(default_factory=now_ms)
    data: Any = None


class ErrorEnvelope(BaseModel):
    """Envelope for a failed action as seen on the wire."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    timestamp: int = Field(default_factory=now_ms)
    error: FlattenedValidationErrors

    @model_validator(mode="after")
    def error_not_empty(self) -> "ErrorEnvelope":
        if self.error.is_empty():
            raise ValueError("A failed envelope must carry at least one error")
        return self


class ValidationFailure(ErrorEnvelope):
    """The schema rejected the input."""


class InternalFailure(ErrorEnvelope):
    """Processing failed; carries only the generic message."""

    error: FlattenedValidationErrors = Field(
        default_factory=lambda: FlattenedValidationErrors(
            form_errors=[INTERNAL_ERROR_MESSAGE]
        )
    )


ActionResult = Success | ValidationFailure | InternalFailure


def dump_envelope(result: Success | ErrorEnvelope) -> dict[str, Any]:
    """Serialize an envelope into its ordered JSON mapping."""

    return result.model_dump(mode="json", by_alias=True)


def parse_envelope(payload: Mapping[str, Any]) -> Success | ErrorEnvelope:
    """Parse a JSON envelope received from an action endpoint."""

    if payload.get("success") is True:
        return Success.model_validate(payload)
    return ErrorEnvelope.model_validate(payload)


class FormActionResponse(BaseModel):
    """Response of a form action: data or flattened validation errors."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    validation_error: FlattenedValidationErrors | None = Field(
        default=None, alias="validationError"
    )
    data: Any = None


class ErrorResponse(BaseModel):
    """Error body returned when an action raises across the HTTP boundary."""

    error: str
    detail: str | None = None

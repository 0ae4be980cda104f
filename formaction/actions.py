"""Wrap processing functions with schema validation and a response envelope.

Three flavours share the same validate-then-process flow:

* ``action`` returns ``Success``, ``ValidationFailure`` or ``InternalFailure``
  and never raises for invalid input or failed processing.
* ``server_form_action`` returns a ``FormActionResponse`` carrying the
  flattened validation errors and raises ``InternalServerError`` when
  processing fails.
* ``server_action`` raises ``pydantic.ValidationError`` for invalid input and
  ``InternalServerError`` when processing fails.

Processing failures are logged with their traceback and masked; the caller
only ever sees the generic message.

Example::

    create_user = action(CreateUserDTO, user_service.create_user)
    result = await create_user({"name": "Ada", "email": "ada@example.com", "age": "36"})
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from formaction.exceptions import InternalServerError
from formaction.models import (
    ActionResult,
    FormActionResponse,
    InternalFailure,
    Success,
    ValidationFailure,
    flatten_validation_error,
    now_ms,
)

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT")

Process = Callable[[InputT], Awaitable[OutputT]]


class _ProcessingFailed(Exception):
    """Internal marker: processing raised and has already been logged."""


def _action_name(process: Callable[..., Any]) -> str:
    return getattr(process, "__qualname__", None) or repr(process)


async def _run_process(
    process: Process[InputT, OutputT],
    validated: InputT,
    timeout: float | None,
) -> OutputT:
    try:
        if timeout is None:
            return await process(validated)
        return await asyncio.wait_for(process(validated), timeout=timeout)
    except Exception as exc:
        logger.exception(
            "Action processing failed",
            extra={"action": _action_name(process), "error_type": type(exc).__name__},
        )
        raise _ProcessingFailed() from exc


def action(
    schema: type[InputT],
    process: Process[InputT, OutputT],
    *,
    timeout: float | None = None,
    clock: Callable[[], int] = now_ms,
) -> Callable[[Any], Awaitable[ActionResult]]:
    """Build an action returning an explicit result envelope."""

    async def run(raw_input: Any) -> ActionResult:
        timestamp = clock()
        try:
            validated = schema.model_validate(raw_input)
        except ValidationError as exc:
            return ValidationFailure(
                timestamp=timestamp, error=flatten_validation_error(exc)
            )

        try:
            data = await _run_process(process, validated, timeout)
        except _ProcessingFailed:
            return InternalFailure(timestamp=timestamp)

        return Success(timestamp=timestamp, data=data)

    run.__qualname__ = f"action({_action_name(process)})"
    return run


def server_action(
    schema: type[InputT],
    process: Process[InputT, OutputT],
    *,
    timeout: float | None = None,
    clock: Callable[[], int] = now_ms,
) -> Callable[[Any], Awaitable[Success]]:
    """Build an action that raises on invalid input and masks processing errors."""

    async def run(raw_input: Any) -> Success:
        timestamp = clock()
        validated = schema.model_validate(raw_input)

        try:
            data = await _run_process(process, validated, timeout)
        except _ProcessingFailed:
            raise InternalServerError() from None

        return Success(timestamp=timestamp, data=data)

    run.__qualname__ = f"server_action({_action_name(process)})"
    return run


def server_form_action(
    schema: type[InputT],
    process: Process[InputT, OutputT],
    *,
    timeout: float | None = None,
) -> Callable[[Any], Awaitable[FormActionResponse]]:
    """Build a form action: validation errors are returned, not raised.

    Processing failures still raise ``InternalServerError``.
    """

    async def run(raw_input: Any) -> FormActionResponse:
        try:
            validated = schema.model_validate(raw_input)
        except ValidationError as exc:
            return FormActionResponse(validation_error=flatten_validation_error(exc))

        try:
            data = await _run_process(process, validated, timeout)
        except _ProcessingFailed:
            raise InternalServerError() from None

        return FormActionResponse(data=data)

    run.__qualname__ = f"server_form_action({_action_name(process)})"
    return run

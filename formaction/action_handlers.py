"""HTTP handlers exposing form actions."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Awaitable, Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from formaction.dependencies import get_create_user_action, get_create_user_form_action
from formaction.exceptions import ServiceError
from formaction.models import (
    ActionResult,
    ErrorResponse,
    FlattenedValidationErrors,
    FormActionResponse,
    InternalFailure,
    Success,
    ValidationFailure,
    dump_envelope,
)

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid JSON payload."

router = APIRouter()


@router.post("/actions/create-user")
async def create_user(
    request: Request,
    create_user_action: Annotated[
        Callable[[Any], Awaitable[ActionResult]], Depends(get_create_user_action)
    ],
) -> JSONResponse:
    """Validate and process a create-user submission."""

    try:
        raw_input = await request.json()
    except ValueError:
        result: ActionResult = ValidationFailure(
            error=FlattenedValidationErrors(form_errors=[INVALID_PAYLOAD_MESSAGE])
        )
    else:
        result = await create_user_action(raw_input)

    return JSONResponse(status_code=_status_for(result), content=dump_envelope(result))


@router.post("/forms/create-user")
async def create_user_form(
    request: Request,
    create_user_form_action: Annotated[
        Callable[[Any], Awaitable[FormActionResponse]], Depends(get_create_user_form_action)
    ],
) -> JSONResponse:
    """Form variant: validation errors in the body, processing errors as HTTP 500."""

    try:
        raw_input = await request.json()
    except ValueError:
        response = FormActionResponse(
            validation_error=FlattenedValidationErrors(form_errors=[INVALID_PAYLOAD_MESSAGE])
        )
    else:
        response = await create_user_form_action(raw_input)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(mode="json", by_alias=True),
    )


async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    """Render service errors without any detail beyond their public message."""

    logger.info(
        "Service error returned to client",
        extra={"code": exc.code, "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=exc.code, detail=exc.message).model_dump(),
    )


def _status_for(result: ActionResult) -> int:
    if isinstance(result, Success):
        return status.HTTP_200_OK
    if isinstance(result, InternalFailure):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_422_UNPROCESSABLE_CONTENT

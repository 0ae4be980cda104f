"""Dependency providers for the FastAPI application."""

from typing import Any, Awaitable, Callable

from fastapi import Depends

from formaction.actions import action, server_form_action
from formaction.config import Settings, get_settings
from formaction.models import ActionResult, FormActionResponse
from formaction.schemas import CreateUserDTO
from formaction.services.user_service import UserService


async def get_user_service(settings: Settings = Depends(get_settings)) -> UserService:
    """Dependency provider for UserService."""

    return UserService(settings=settings)


async def get_create_user_action(
    user_service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> Callable[[Any], Awaitable[ActionResult]]:
    """Create-user action returning an explicit result envelope."""

    return action(CreateUserDTO, user_service.create_user, timeout=settings.action_timeout)


async def get_create_user_form_action(
    user_service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> Callable[[Any], Awaitable[FormActionResponse]]:
    """Create-user form action; processing failures raise."""

    return server_form_action(
        CreateUserDTO, user_service.create_user, timeout=settings.action_timeout
    )

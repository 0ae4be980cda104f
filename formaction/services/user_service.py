"""Stand-in persistence for created users."""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass

from formaction.config import Settings
from formaction.exceptions import UserServiceError
from formaction.schemas import CreateUserDTO, UserDTO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: uuid.UUID
    name: str
    email: str


class UserService:
    """Pretends to save users; the delay stands in for database latency."""

    def __init__(self, settings: Settings, rng: random.Random | None = None) -> None:
        self._settings = settings
        self._rng = rng or random.Random()

    async def save_user(self, name: str, email: str) -> User:
        """Persist a user after a random delay of up to ``save_delay_max``."""

        if not name or not email:
            raise UserServiceError("Cannot save a user without name and email")

        delay = self._rng.uniform(0, self._settings.save_delay_max)
        await asyncio.sleep(delay)

        user = User(id=uuid.uuid4(), name=name, email=email)
        logger.info("User saved", extra={"user_id": str(user.id), "delay": round(delay, 3)})
        return user

    async def create_user(self, payload: CreateUserDTO) -> UserDTO:
        """Processing function for the create-user action."""

        user = await self.save_user(payload.name, payload.email)
        return UserDTO(name=user.name, email=user.email)

"""Input and output schemas for form actions."""

from pydantic import BaseModel, EmailStr, Field


class CreateUserDTO(BaseModel):
    """Fields submitted by the create-user form."""

    name: str = Field(min_length=1)
    email: EmailStr
    age: int = Field(ge=18, description="Numeric strings are coerced.")


class UserDTO(BaseModel):
    """Public view of a created user."""

    name: str
    email: EmailStr

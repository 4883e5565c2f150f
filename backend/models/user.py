"""User payload definitions."""

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_ROLE = 'user'


def normalize_email(value: str | None) -> str:
    return (value or '').strip().lower()


class CreateUserRequest(BaseModel):
    """A new user; any extra profile fields are stored as sent."""
    model_config = ConfigDict(extra='allow')

    email: str
    name: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class UpdateRoleRequest(BaseModel):
    role: str

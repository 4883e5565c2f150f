"""Note payload definitions."""

from pydantic import BaseModel, ConfigDict, field_validator

from backend.models.user import normalize_email


class CreateNoteRequest(BaseModel):
    model_config = ConfigDict(extra='allow')

    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Email is required.')
        return normalized

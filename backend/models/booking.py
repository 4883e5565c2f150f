"""Booking payload definitions."""

from pydantic import BaseModel, ConfigDict, field_validator

from backend.models.user import normalize_email


class CreateBookingRequest(BaseModel):
    """One student's seat in one session."""
    model_config = ConfigDict(extra='allow')

    sessionId: str
    studentEmail: str

    @field_validator('sessionId')
    @classmethod
    def validate_session_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Session id is required.')
        return normalized

    @field_validator('studentEmail')
    @classmethod
    def validate_student_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Student email is required.')
        return normalized

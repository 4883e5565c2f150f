"""Study session payload definitions."""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from backend.models.user import normalize_email

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'


def parse_price(value) -> int | float:
    if value is None or value == '':
        return 0
    if isinstance(value, bool):
        raise ValueError('Price must be a number.')
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError('Price must be a number.') from exc
    if number < 0:
        raise ValueError('Price cannot be negative.')
    return int(number) if number.is_integer() else number


class CreateSessionRequest(BaseModel):
    """A tutor's session proposal; every new session starts out pending."""
    model_config = ConfigDict(extra='allow')

    tutorEmail: str
    tutorName: str | None = None

    @field_validator('tutorEmail')
    @classmethod
    def validate_tutor_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Tutor email is required.')
        return normalized


class ApproveSessionRequest(BaseModel):
    isPaid: bool = False
    price: int | float | str | None = None

    @model_validator(mode='after')
    def resolve_price(self):
        # Free sessions are always stored at 0, whatever price was sent.
        self.price = parse_price(self.price) if self.isPaid else 0
        return self

    def resolved_price(self) -> int | float:
        return self.price


class RejectSessionRequest(BaseModel):
    rejectionReason: str | None = None
    feedback: str | None = None

"""Review payload definitions."""

from pydantic import BaseModel, ConfigDict


class CreateReviewRequest(BaseModel):
    model_config = ConfigDict(extra='allow')

    sessionId: str

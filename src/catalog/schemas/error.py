from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body returned by every translated error response."""

    timestamp: datetime
    message: str
    details: str

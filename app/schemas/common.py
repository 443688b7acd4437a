from pydantic import BaseModel
from typing import Any

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str


def blank_to_none(value: Any) -> Any:
    """Form inputs send empty strings for untouched optional fields."""
    if isinstance(value, str) and not value.strip():
        return None
    return value

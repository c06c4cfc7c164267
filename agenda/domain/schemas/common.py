"""Shared request schemas and name normalization."""

from pydantic import BaseModel, Field


def format_name(text: str | None) -> str | None:
    """'mARIA' -> 'Maria'. Applied to nombre/apellido on every write."""
    if not text:
        return text
    text = text.strip()
    return text[:1].upper() + text[1:].lower()


class IdRequest(BaseModel):
    id: int = Field(gt=0)

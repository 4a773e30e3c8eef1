"""Notebook domain model."""

from pydantic import Field
from datetime import datetime
from uuid import uuid4

from whispernotes.models.domain.base import RecordModel, utcnow


class Notebook(RecordModel):
    """A named grouping of notes. Names need not be unique."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    created_at: datetime = Field(default_factory=utcnow)

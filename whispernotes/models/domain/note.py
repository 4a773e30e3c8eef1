"""Note domain model."""

from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Iterable, Optional
from datetime import datetime
from uuid import uuid4

from whispernotes.models.domain.base import RecordModel, utcnow


def _normalize_tags(value) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    return frozenset(tag.strip() for tag in value if tag and tag.strip())


class NoteUpdate(BaseModel):
    """Payload for updating a note. Only fields that were set are applied."""
    title: Optional[str] = None
    body: Optional[str] = None
    notebook_id: Optional[str] = None
    tags: Optional[frozenset[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, value):
        return None if value is None else _normalize_tags(value)

    def changes(self) -> dict:
        # notebook_id=None un-files the note; None elsewhere means "leave as is"
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "notebook_id"
        }


class Note(RecordModel):
    """A journal note, optionally filed in a notebook."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    body: str = ""
    notebook_id: Optional[str] = None
    tags: frozenset[str] = Field(default_factory=frozenset)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, value: Iterable[str] | None) -> frozenset[str]:
        return _normalize_tags(value)

    @field_serializer("tags")
    def serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match over title and body."""
        return needle in self.title.casefold() or needle in self.body.casefold()

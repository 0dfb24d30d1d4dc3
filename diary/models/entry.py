# entry models: the persisted diary record plus request/response schemas
# field names match the persisted json layout (camelCase aliases)

import datetime as dt
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

UNTITLED = "Untitled Entry"


def as_utc(value: dt.datetime) -> dt.datetime:
    """timestamps without an offset are taken to be utc"""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


class Mood(str, Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    LOVE = "love"

    @classmethod
    def parse(cls, value: Union["Mood", str, None]) -> Optional["Mood"]:
        """strict conversion used at write time. empty means no mood."""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown mood {value!r}, expected one of: {allowed}") from None


class Entry(BaseModel):
    """one diary record, natural-keyed by date"""
    id: str
    date: dt.date
    title: str = ""
    content: str = ""
    mood: Optional[Mood] = None
    created_at: dt.datetime = Field(..., alias="createdAt")
    updated_at: dt.datetime = Field(..., alias="updatedAt")

    model_config = {"populate_by_name": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_are_aware(cls, value: dt.datetime) -> dt.datetime:
        return as_utc(value)

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    @property
    def character_count(self) -> int:
        return len(self.content)

    def excerpt(self, length: int = 200) -> str:
        if len(self.content) <= length:
            return self.content
        return self.content[:length] + "..."

    def to_record(self) -> dict:
        """json-ready dict in the persisted layout"""
        return self.model_dump(mode="json", by_alias=True)


class EntryUpsert(BaseModel):
    """payload for writing the entry of a given date"""
    title: str = Field("", max_length=500)
    content: str = Field("", max_length=100000)
    mood: Optional[Mood] = None


class SearchResult(BaseModel):
    entry: Entry
    display_title: str = Field(..., alias="displayTitle")
    excerpt: str
    character_count: int = Field(..., alias="characterCount")

    model_config = {"populate_by_name": True}


class SearchResponse(BaseModel):
    query: str
    total: int
    summary: str
    results: list[SearchResult] = Field(default_factory=list)

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileRecord(BaseModel):
    """Canonical record produced by one extraction attempt.

    Field names on the wire are camelCase (``fullName``, ``jobTitle`` ...).
    The contact annotations at the bottom are filled by the host form, never
    by extraction.
    """

    full_name: str = Field(default="", alias="fullName")
    job_title: str = Field(default="", alias="jobTitle")
    company: str = Field(default="", alias="company")
    location: str = Field(default="", alias="location")
    profile_url: str = Field(default="", alias="profileUrl")
    profile_picture: str = Field(default="", alias="profilePicture")
    scraped_at: datetime | None = Field(default=None, alias="scrapedAt")

    email: str = Field(default="", alias="email")
    phone: str = Field(default="", alias="phone")
    tags: str = Field(default="", alias="tags")
    notes: str = Field(default="", alias="notes")
    contact_date: str = Field(default="", alias="contactDate")
    follow_up_date: str = Field(default="", alias="followUpDate")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator(
        "full_name", "job_title", "company", "location", "profile_url", "profile_picture",
        "email", "phone", "tags", "notes", "contact_date", "follow_up_date",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_complete(self) -> bool:
        return bool(self.full_name.strip())

    def canonical(self) -> Dict[str, Any]:
        """Canonical key -> value mapping consumed by the field mapper."""
        return self.model_dump(by_alias=True)

    def to_message(self) -> Dict[str, Any]:
        """JSON-safe shape used in message envelopes."""
        return self.model_dump(by_alias=True, mode="json")

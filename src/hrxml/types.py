"""Shared Pydantic models for hrxml."""

from __future__ import annotations

from pydantic import BaseModel, Field

# ── Upload models ──


class Document(BaseModel):
    filename: str
    content_type: str = "application/octet-stream"
    content: bytes


# ── Parse result models ──


class ContactInfo(BaseModel):
    formatted_name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    address_lines: list[str] = Field(default_factory=list)
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Position(BaseModel):
    employer: str | None = None
    title: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    description: str | None = None
    is_current: bool = False


class Education(BaseModel):
    school: str | None = None
    degree: str | None = None
    major: str | None = None
    graduation_date: str | None = None


class ParsedResume(BaseModel):
    contact: ContactInfo = Field(default_factory=ContactInfo)
    summary: str | None = None
    positions: list[Position] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    raw_xml: str = ""

    @property
    def name(self) -> str | None:
        return self.contact.formatted_name

    @property
    def email(self) -> str | None:
        return self.contact.emails[0] if self.contact.emails else None

    @property
    def current_position(self) -> Position | None:
        for position in self.positions:
            if position.is_current:
                return position
        return None

"""
Database Schemas for the Portfolio API

Each resource has a create model and, where it can be edited, an update model
whose fields are all optional. Documents are stored with camelCase keys.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Auth
class Admin(Document):
    email: str
    password_hash: str
    role: str = Field(default="admin")


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: str
    password: str


# Content
class Project(Document):
    title: str
    description: str
    tech_stack: List[str] = []
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None


class ProjectUpdate(Document):
    title: Optional[str] = None
    description: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None


class Blog(Document):
    title: str
    content: str
    cover_image: Optional[str] = None


class BlogUpdate(Document):
    title: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None


class Photo(Document):
    image_url: str
    category: Optional[str] = None  # free text, e.g. "Moon"
    caption: Optional[str] = None
    date: Optional[datetime] = None  # capture date, defaults to now


class Song(Document):
    title: Optional[str] = None
    url: str  # stored verbatim, embed conversion is the client's job
    type: Literal["song", "playlist"] = "song"


# Contact
class ContactMessage(Document):
    name: str
    email: str
    message: str

    @field_validator("name", "email", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Missing required fields")
        return v


class ContactUpdate(Document):
    status: Literal["unread", "read", "invalid"]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthorInfo(BaseModel):
    """Author details the writing UI sends along with a new book"""

    model_config = ConfigDict(populate_by_name=True)

    uid: str | None = None
    name: str | None = None
    username: str | None = None
    email: str | None = None
    photo_url: str | None = Field(None, alias="photoURL")


class BookPayload(BaseModel):
    """Schema for book create/update bodies.

    Every field is optional; required-ness is checked after sanitizing, and
    link fields stay loosely typed because the links service validates them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    genre: str | None = None
    genres: list[Any] | None = None
    status: str | None = None
    cover_image: str | None = Field(None, alias="coverImage")
    spotify_link: str | None = Field(None, alias="spotifyLink")
    youtube_links: Any = Field(None, alias="youtubeLinks")
    resource_links: Any = Field(None, alias="resourceLinks")
    author: AuthorInfo | None = None


class ChapterPayload(BaseModel):
    """Schema for chapter create/update bodies. A client `order` is ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    content: str | None = None
    is_draft: Any = Field(None, alias="isDraft")

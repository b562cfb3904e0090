"""
Pydantic models for blog posts.

``PostCreate`` and ``PostUpdate`` describe the request bodies accepted
by the API; unknown keys are rejected.  ``PostRead`` is the JSON view
returned to clients, where the structured author is flattened into a
single display string.  Author name fields keep their camelCase names
on the wire (``firstName``/``lastName``).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Author(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(..., alias="firstName", min_length=1, examples=["Ada"])
    last_name: str = Field(..., alias="lastName", min_length=1, examples=["Lovelace"])

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PostCreate(BaseModel):
    """Schema for creating a post.

    ``created`` is optional; the store stamps the insert time when it
    is omitted.
    """

    model_config = ConfigDict(extra="forbid")

    author: Author
    title: str = Field(..., min_length=1, examples=["Hello"])
    content: str = Field(..., examples=["First post on the new blog."])
    created: Optional[datetime] = None

    @field_validator("created")
    @classmethod
    def created_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Store timestamps in UTC; naive values are taken to be UTC already."""
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError as exc:
            raise ValueError("created is out of range once converted to UTC") from exc

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PostUpdate(BaseModel):
    """Schema for updating a post.

    All fields are optional; only provided values are written.  A
    ``null`` value counts as not provided.  ``id`` may be echoed back
    by clients but must then match the id in the URL.
    """

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    author: Optional[Author] = None
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, exclude={"id"})


class PostRead(BaseModel):
    """Schema for reading a post from the API."""

    id: str
    author: str = Field(..., examples=["Ada Lovelace"])
    title: str
    content: str
    created: datetime

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "PostRead":
        author = Author.model_validate(doc["author"])
        return cls(
            id=doc["id"],
            author=author.full_name,
            title=doc["title"],
            content=doc["content"],
            created=doc["created"],
        )


class PostList(BaseModel):
    posts: List[PostRead]

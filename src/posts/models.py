"""Pure data models for blog post metadata.

All Pydantic models and enums live here. No I/O, no validation of raw
front matter -- that happens in ``postmeta.posts.services``, which
builds these records only from values it has already checked.
"""

from __future__ import annotations

import re
from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class PostField(StrEnum):
    """Front matter keys recognised in a post's metadata block."""

    AUTHOR = "author"
    PUB_DATETIME = "pubDatetime"
    TITLE = "title"
    POST_SLUG = "postSlug"
    FEATURED = "featured"
    DRAFT = "draft"
    TAGS = "tags"
    OG_IMAGE = "ogImage"
    DESCRIPTION = "description"


class PostRecord(BaseModel):
    """Validated metadata and body of a single blog post.

    Instances are immutable. ``source`` identifies the document the
    record came from (usually a file path) and is only used for
    reporting.
    """

    model_config = ConfigDict(frozen=True)

    author: str
    publication_date: date
    title: str
    slug: str
    featured: bool = False
    draft: bool = False
    tags: frozenset[str] = Field(default_factory=frozenset)
    og_image: str = ""
    description: str
    body: str
    source: str | None = None

    @property
    def has_image(self) -> bool:
        """Whether the post declares an Open Graph image."""
        return self.og_image != ""

    @property
    def sorted_tags(self) -> list[str]:
        return sorted(self.tags)

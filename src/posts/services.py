"""Parsing and validation services for blog post metadata.

Turns raw Markdown documents into ``PostRecord`` objects:

- ``split_frontmatter`` separates the YAML metadata block from the body
- ``parse_post`` validates a decoded block plus body into a record
- ``validate_uniqueness`` checks slugs across a whole collection
- ``PostReader`` discovers documents on disk and parses each one

Everything except ``PostReader`` is pure and does no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from postmeta.posts.errors import (
    DuplicateSlugError,
    MalformedDateError,
    MalformedFrontmatterError,
    MissingFieldError,
    PostValidationError,
    TypeMismatchError,
)
from postmeta.posts.models import SLUG_PATTERN, PostField, PostRecord

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
DEFAULT_PATTERN = "**/*.md"

_KNOWN_KEYS = frozenset(f.value for f in PostField)
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves date literals as plain strings."""


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


# ---------------------------------------------------------------------------
# Document decoding
# ---------------------------------------------------------------------------


def split_frontmatter(text: str, *, source: str | None = None) -> tuple[dict[str, Any], str]:
    """Split a Markdown document into its metadata block and body.

    The block opens with a first line of ``---`` and closes at the next
    ``---`` line. The body is everything after the closing line, returned
    unmodified. A document without a block yields ``({}, text)``.

    Raises:
        MalformedFrontmatterError: If the block is unterminated, is not
            valid YAML, or does not decode to a mapping.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return {}, text

    for end in range(1, len(lines)):
        if lines[end].rstrip() == FRONTMATTER_DELIMITER:
            break
    else:
        raise MalformedFrontmatterError("no closing '---' delimiter", source=source)

    raw = "".join(lines[1:end])
    body = "".join(lines[end + 1 :])

    try:
        data = yaml.load(raw, Loader=_FrontmatterLoader)  # noqa: S506
    except (yaml.YAMLError, ValueError, TypeError, AttributeError) as exc:
        # explicit tags such as !!int or !!timestamp raise from their constructors
        raise MalformedFrontmatterError(str(exc), source=source) from exc

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise MalformedFrontmatterError(
            f"expected a key-value mapping, got {type(data).__name__}", source=source
        )
    return data, body


def parse_document(text: str, *, source: str | None = None) -> PostRecord:
    """Parse a full Markdown document (metadata block + body)."""
    metadata, body = split_frontmatter(text, source=source)
    return parse_post(metadata, body, source=source)


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required_text(value: Any, name: str, source: str | None) -> str:
    if _is_blank(value):
        raise MissingFieldError(name, source=source)
    if not isinstance(value, str):
        raise TypeMismatchError(name, "text", value, source=source)
    return value


def _optional_text(value: Any, name: str, source: str | None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeMismatchError(name, "text", value, source=source)
    return value


def _optional_bool(value: Any, name: str, source: str | None) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeMismatchError(name, "boolean", value, source=source)
    return value


def _publication_date(value: Any, source: str | None) -> date:
    name = PostField.PUB_DATETIME.value
    if _is_blank(value):
        raise MissingFieldError(name, source=source)
    # datetime is a date subclass, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise MalformedDateError(value, field=name, source=source)


def _tags(value: Any, source: str | None) -> frozenset[str]:
    name = PostField.TAGS.value
    if value is None:
        return frozenset()
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise TypeMismatchError(name, "a list of text", value, source=source)
    for tag in value:
        if not isinstance(tag, str) or not tag.strip():
            raise TypeMismatchError(name, "a list of non-empty text", value, source=source)
    return frozenset(value)


def parse_post(
    metadata: Mapping[str, Any],
    body: str | None,
    *,
    source: str | None = None,
) -> PostRecord:
    """Validate a decoded metadata block and body into a ``PostRecord``.

    Fields are checked in schema order and the first problem found is
    raised; a document either parses completely or not at all.

    Args:
        metadata: Front matter keys mapped to their decoded values.
        body: The document text following the metadata block.
        source: Optional document identifier used in error messages.

    Raises:
        MissingFieldError: A required field is absent or empty.
        MalformedDateError: ``pubDatetime`` is not a valid calendar date.
        TypeMismatchError: A present field has the wrong shape.
    """
    author = _required_text(metadata.get(PostField.AUTHOR), PostField.AUTHOR, source)
    publication_date = _publication_date(metadata.get(PostField.PUB_DATETIME), source)
    title = _required_text(metadata.get(PostField.TITLE), PostField.TITLE, source)

    slug = _required_text(metadata.get(PostField.POST_SLUG), PostField.POST_SLUG, source)
    if not SLUG_PATTERN.match(slug):
        raise TypeMismatchError(
            PostField.POST_SLUG,
            "a slug of lowercase words separated by hyphens",
            slug,
            source=source,
        )

    featured = _optional_bool(metadata.get(PostField.FEATURED), PostField.FEATURED, source)
    draft = _optional_bool(metadata.get(PostField.DRAFT), PostField.DRAFT, source)
    tags = _tags(metadata.get(PostField.TAGS), source)
    og_image = _optional_text(metadata.get(PostField.OG_IMAGE), PostField.OG_IMAGE, source)
    description = _required_text(
        metadata.get(PostField.DESCRIPTION), PostField.DESCRIPTION, source
    )
    body = _required_text(body, "body", source)

    unknown = sorted(str(k) for k in metadata if k not in _KNOWN_KEYS)
    if unknown:
        logger.debug("Ignoring unrecognised front matter keys in %s: %s", source, unknown)

    return PostRecord(
        author=author,
        publication_date=publication_date,
        title=title,
        slug=slug,
        featured=featured,
        draft=draft,
        tags=tags,
        og_image=og_image,
        description=description,
        body=body,
        source=source,
    )


# ---------------------------------------------------------------------------
# Collection checks
# ---------------------------------------------------------------------------


def find_duplicate_slugs(records: Iterable[PostRecord]) -> list[DuplicateSlugError]:
    """Return one error per record whose slug was already seen.

    Records without a ``source`` are identified by their position
    (``#0``, ``#1``, ...).
    """
    seen: dict[str, str] = {}
    duplicates: list[DuplicateSlugError] = []
    for index, record in enumerate(records):
        identifier = record.source or f"#{index}"
        if record.slug in seen:
            duplicates.append(DuplicateSlugError(record.slug, seen[record.slug], identifier))
        else:
            seen[record.slug] = identifier
    return duplicates


def validate_uniqueness(records: Iterable[PostRecord]) -> None:
    """Confirm no two records share a slug.

    Raises:
        DuplicateSlugError: For the first collision found.
    """
    duplicates = find_duplicate_slugs(records)
    if duplicates:
        raise duplicates[0]


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


@dataclass
class ReadFailure:
    """A document that could not be read or parsed."""

    path: Path
    error: PostValidationError | OSError


@dataclass
class ReadResult:
    """Outcome of reading a directory of posts."""

    records: list[PostRecord] = field(default_factory=list)
    failures: list[ReadFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class PostReader:
    """Discovers and parses post documents from a content directory."""

    def __init__(self, pattern: str = DEFAULT_PATTERN) -> None:
        self.pattern = pattern

    def read_file(self, path: Path) -> PostRecord:
        """Read and parse a single document.

        Raises:
            OSError: If the file cannot be read.
            PostValidationError: If the document is not a valid post,
                including files that are not UTF-8 encoded.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedFrontmatterError(
                f"not valid UTF-8 text ({exc.reason} at byte {exc.start})", source=str(path)
            ) from exc
        return parse_document(text, source=str(path))

    def read_all(self, directory: Path) -> ReadResult:
        """Parse every matching document under ``directory``.

        Failures are collected rather than raised so one broken post
        does not hide the others. Slug uniqueness is left to the caller.
        """
        result = ReadResult()
        if not directory.exists():
            logger.warning("Content directory does not exist: %s", directory)
            return result

        paths = sorted(p for p in directory.glob(self.pattern) if p.is_file())
        for path in paths:
            try:
                result.records.append(self.read_file(path))
            except OSError as exc:
                logger.warning("Could not read post file: %s", path)
                result.failures.append(ReadFailure(path=path, error=exc))
            except PostValidationError as exc:
                logger.debug("Invalid post %s: %s", path, exc)
                result.failures.append(ReadFailure(path=path, error=exc))

        logger.info(
            "Parsed %d posts from %s (%d failed)",
            len(result.records),
            directory,
            len(result.failures),
        )
        return result

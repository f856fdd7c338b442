"""Validation errors raised while parsing post metadata."""

from __future__ import annotations

from typing import Any


class PostValidationError(ValueError):
    """Base error for a document that does not form a valid post."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class MalformedFrontmatterError(PostValidationError):
    """The metadata block could not be decoded into a mapping."""

    def __init__(self, reason: str, *, source: str | None = None) -> None:
        self.reason = reason
        super().__init__(f"malformed front matter: {reason}", source=source)


class MissingFieldError(PostValidationError):
    """A required field is absent or empty."""

    def __init__(self, field: str, *, source: str | None = None) -> None:
        self.field = str(field)
        super().__init__(f"missing required field '{self.field}'", source=source)


class MalformedDateError(PostValidationError):
    """``pubDatetime`` is not a valid calendar date."""

    def __init__(self, value: Any, *, field: str = "pubDatetime", source: str | None = None) -> None:
        self.field = str(field)
        self.value = value
        super().__init__(f"'{self.field}' is not a valid date: {value!r}", source=source)


class TypeMismatchError(PostValidationError):
    """A present field has the wrong shape."""

    def __init__(
        self,
        field: str,
        expected: str,
        value: Any,
        *,
        source: str | None = None,
    ) -> None:
        self.field = str(field)
        self.expected = expected
        self.value = value
        super().__init__(
            f"'{self.field}' must be {expected}, got {type(value).__name__} {value!r}",
            source=source,
        )


class DuplicateSlugError(PostValidationError):
    """Two records in one collection share a slug."""

    def __init__(self, slug: str, first: str, second: str) -> None:
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(f"duplicate slug '{slug}' in {first} and {second}")

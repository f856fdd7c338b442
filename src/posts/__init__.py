"""Post domain -- front matter schema, validation, and listing views.

Parses the YAML metadata block at the top of each Markdown post into
an immutable ``PostRecord`` and checks slug uniqueness across a
collection.
"""

from postmeta.posts.collection import PostCollection
from postmeta.posts.errors import (
    DuplicateSlugError,
    MalformedDateError,
    MalformedFrontmatterError,
    MissingFieldError,
    PostValidationError,
    TypeMismatchError,
)
from postmeta.posts.models import SLUG_PATTERN, PostField, PostRecord
from postmeta.posts.services import (
    PostReader,
    ReadFailure,
    ReadResult,
    find_duplicate_slugs,
    parse_document,
    parse_post,
    split_frontmatter,
    validate_uniqueness,
)

__all__ = [
    "DuplicateSlugError",
    "MalformedDateError",
    "MalformedFrontmatterError",
    "MissingFieldError",
    "PostCollection",
    "PostField",
    "PostReader",
    "PostRecord",
    "PostValidationError",
    "ReadFailure",
    "ReadResult",
    "SLUG_PATTERN",
    "TypeMismatchError",
    "find_duplicate_slugs",
    "parse_document",
    "parse_post",
    "split_frontmatter",
    "validate_uniqueness",
]

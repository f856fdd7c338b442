"""In-memory collection of validated posts.

Holds a set of ``PostRecord`` objects with unique slugs and provides
the listing views a site needs: the published (non-draft) posts in
reverse chronological order, featured posts, and posts by tag.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from postmeta.posts.models import PostRecord
from postmeta.posts.services import validate_uniqueness


def _newest_first(records: Iterable[PostRecord]) -> list[PostRecord]:
    # Stable two-pass sort: slug ascending, then date descending
    ordered = sorted(records, key=lambda r: r.slug)
    return sorted(ordered, key=lambda r: r.publication_date, reverse=True)


def _has_tag(record: PostRecord, wanted: str) -> bool:
    return any(t.lower() == wanted for t in record.tags)


class PostCollection:
    """Read-only collection of posts keyed by slug.

    Raises DuplicateSlugError on construction if two records share a slug.
    """

    def __init__(self, records: Iterable[PostRecord]) -> None:
        records = list(records)
        validate_uniqueness(records)
        self._records: dict[str, PostRecord] = {r.slug: r for r in records}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PostRecord]:
        return iter(self._records.values())

    def __contains__(self, slug: object) -> bool:
        return slug in self._records

    def get(self, slug: str) -> PostRecord | None:
        """Return a record by slug, or None if not found."""
        return self._records.get(slug)

    def select(
        self,
        *,
        tag: str | None = None,
        featured: bool = False,
        include_drafts: bool = False,
    ) -> list[PostRecord]:
        """Return posts matching all given filters, newest first.

        Drafts are excluded unless ``include_drafts`` is set. Tag
        matching is case-insensitive.
        """
        results: Iterable[PostRecord] = self._records.values()
        if not include_drafts:
            results = (r for r in results if not r.draft)
        if featured:
            results = (r for r in results if r.featured)
        if tag is not None:
            wanted = tag.strip().lower()
            results = (r for r in results if _has_tag(r, wanted))
        return _newest_first(results)

    def published(self) -> list[PostRecord]:
        """Return non-draft posts, newest first."""
        return self.select()

    def drafts(self) -> list[PostRecord]:
        return _newest_first(r for r in self._records.values() if r.draft)

    def featured(self) -> list[PostRecord]:
        return self.select(featured=True)

    def by_tag(self, tag: str) -> list[PostRecord]:
        return self.select(tag=tag)

    def tag_counts(self) -> dict[str, int]:
        """Count published posts per tag, ordered by tag name."""
        counts = Counter(tag for r in self.published() for tag in r.tags)
        return dict(sorted(counts.items()))

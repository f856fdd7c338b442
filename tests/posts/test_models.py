"""Tests for post domain models."""

from datetime import date

import pytest
from postmeta.posts.models import SLUG_PATTERN, PostField, PostRecord
from pydantic import ValidationError


def _make_record(**kwargs: object) -> PostRecord:
    fields: dict[str, object] = {
        "author": "Davide Ceschia",
        "publication_date": date(2023, 3, 20),
        "title": "Zero-Cost Abstractions in Rust",
        "slug": "zero-cost-abstractions",
        "description": "How Rust compiles abstractions away",
        "body": "Body text",
    }
    fields.update(kwargs)
    return PostRecord(**fields)  # type: ignore[arg-type]


class TestPostField:
    def test_front_matter_keys(self):
        assert PostField.PUB_DATETIME == "pubDatetime"
        assert PostField.POST_SLUG == "postSlug"
        assert PostField.OG_IMAGE == "ogImage"

    def test_lookup_in_plain_dict(self):
        assert {"postSlug": "x"}.get(PostField.POST_SLUG) == "x"

    def test_only_front_matter_keys(self):
        assert {f.value for f in PostField} == {
            "author",
            "pubDatetime",
            "title",
            "postSlug",
            "featured",
            "draft",
            "tags",
            "ogImage",
            "description",
        }


class TestSlugPattern:
    @pytest.mark.parametrize("slug", ["zero-cost-abstractions", "js", "post-2023", "a1-b2"])
    def test_accepts(self, slug):
        assert SLUG_PATTERN.match(slug)

    @pytest.mark.parametrize(
        "slug", ["Zero-Cost", "trailing-", "-leading", "double--hyphen", "with space", "under_score"]
    )
    def test_rejects(self, slug):
        assert SLUG_PATTERN.match(slug) is None


class TestPostRecord:
    def test_defaults(self):
        record = _make_record()
        assert record.featured is False
        assert record.draft is False
        assert record.tags == frozenset()
        assert record.og_image == ""
        assert record.source is None

    def test_frozen(self):
        record = _make_record()
        with pytest.raises(ValidationError):
            record.title = "Changed"  # type: ignore[misc]

    def test_has_image(self):
        assert _make_record().has_image is False
        assert _make_record(og_image="/images/rust.png").has_image is True

    def test_sorted_tags(self):
        record = _make_record(tags=frozenset({"rust", "go", "c"}))
        assert record.sorted_tags == ["c", "go", "rust"]

    def test_equality_is_fieldwise(self):
        assert _make_record() == _make_record()
        assert _make_record() != _make_record(draft=True)

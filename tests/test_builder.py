"""Tests for catalog entry construction."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pullscout.catalog.builder import NO_DESCRIPTION, CatalogEntryBuilder, parse_timestamp
from pullscout.ingest.models import Recipe


@pytest.fixture
def builder(settings):
    return CatalogEntryBuilder(settings)


class TestResolveUrl:
    def test_scenario_gitlab(self, builder, make_submission):
        recipe = Recipe(package="y", fetcher="gitlab", properties={"repo": "x/y"})

        assert builder.resolve_url(recipe, make_submission()) == "https://www.gitlab.com/x/y"

    def test_explicit_url_wins(self, builder, make_submission):
        recipe = Recipe(package="y", fetcher="github", properties={"repo": "x/y", "url": "https://y.example"})

        assert builder.resolve_url(recipe, make_submission()) == "https://y.example"

    @pytest.mark.parametrize("fetcher", ["codeberg", "sourcehut", "git"])
    def test_other_forges_fall_back_to_submission(self, builder, make_submission, fetcher):
        recipe = Recipe(package="y", fetcher=fetcher, properties={"repo": "x/y"})

        assert builder.resolve_url(recipe, make_submission(42)) == "https://github.com/melpa/melpa/pull/42"


class TestBuild:
    def test_full_entry(self, builder, make_submission):
        recipe = Recipe(package="pkg", fetcher="github", properties={"repo": "a/b"})

        entry = builder.build(recipe, make_submission(8000))

        assert entry.package == "pkg"
        assert entry.date == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert entry.url == "https://www.github.com/a/b"
        assert entry.description.text == "#8000 Does things."
        thread = entry.description.links[0]
        assert (thread.label, thread.target) == ("#8000", "https://github.com/melpa/melpa/issues/8000")
        assert entry.source.text == "MELPA Pulls"
        assert entry.source.links[0].target == "https://github.com/melpa/melpa/pulls"
        assert entry.recipe is recipe
        assert entry.number == 8000

    def test_links_shift_behind_thread_label(self, builder, make_submission):
        submission = make_submission(7, body="Binds [foo](https://foo.example).")

        description = builder.describe(submission)

        assert description.text == "#7 Binds foo."
        foo = description.links[1]
        assert description.text[foo.start : foo.end] == "foo"

    def test_placeholder_description_without_thread(self, builder, make_submission):
        submission = make_submission(body=None, issue_url=None)

        assert builder.describe(submission).text == NO_DESCRIPTION
        assert builder.describe(submission).links == []

    def test_unparsable_date_is_absent(self, builder, make_submission):
        recipe = Recipe(package="pkg", fetcher="git", properties={"url": "https://x"})

        entry = builder.build(recipe, make_submission(created_at="yesterday"))

        assert entry.date is None


@pytest.mark.parametrize("value", [None, "", "not a date", "2024-13-40T00:00:00Z"])
def test_parse_timestamp_failures(value):
    assert parse_timestamp(value) is None

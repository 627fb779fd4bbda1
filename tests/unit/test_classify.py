"""Unit tests for event classification."""

from __future__ import annotations

import pytest

from ghdigest.errors import ResponseShapeError
from ghdigest.events.classify import classify_archive_row, classify_event
from ghdigest.events.models import ItemRecord
from tests.helpers.events import (
    FeedEventSpec,
    archive_item,
    archive_row,
    decode_feed_event,
    feed_event,
    push_event,
    release_event,
)

_CREATED = "2024-03-05T10:00:00Z"


def test_issues_event_yields_issue_record() -> None:
    """Issue events expose the embedded issue."""
    event = decode_feed_event(
        feed_event(FeedEventSpec("djc/foo", 3, "Crash on start", _CREATED))
    )

    assert classify_event(event) == ItemRecord(
        node_id="I_kwDO3",
        url="https://api.github.com/repos/djc/foo/issues/3",
        title="Crash on start",
    )


@pytest.mark.parametrize(
    "kind",
    [
        "PullRequestEvent",
        "PullRequestReviewEvent",
        "PullRequestReviewCommentEvent",
        "PullRequestReviewThreadEvent",
    ],
)
def test_pull_request_kinds_yield_pull_request_record(kind: str) -> None:
    """Every pull-request flavoured event exposes the pull request."""
    event = decode_feed_event(
        feed_event(
            FeedEventSpec("bar/baz", 8, "Add API", _CREATED, kind=kind, pull_request=True)
        )
    )

    record = classify_event(event)

    assert record is not None
    assert record.url == "https://api.github.com/repos/bar/baz/pulls/8"
    assert record.title == "Add API"


def test_issue_comment_on_pull_request_keeps_pull_request_node() -> None:
    """Issue comments on pull requests carry a pull request node id."""
    event = decode_feed_event(
        feed_event(
            FeedEventSpec(
                "bar/baz", 8, "Add API", _CREATED, kind="IssueCommentEvent", pull_request=True
            )
        )
    )

    record = classify_event(event)

    assert record is not None
    assert record.node_id.startswith("PR_")
    assert "/issues/8" in record.url


def test_release_event_maps_release_fields() -> None:
    """Releases use their web URL and name."""
    event = decode_feed_event(
        release_event("djc/foo", name="foo 1.0", tag="v1.0", created_at=_CREATED)
    )

    assert classify_event(event) == ItemRecord(
        node_id="RE_kwDOv1.0",
        url="https://github.com/djc/foo/releases/tag/v1.0",
        title="foo 1.0",
    )


def test_release_without_name_uses_tag() -> None:
    """Unnamed releases fall back to the tag name."""
    event = decode_feed_event(
        release_event("djc/foo", name=None, tag="v2.0", created_at=_CREATED)
    )

    record = classify_event(event)

    assert record is not None
    assert record.title == "v2.0"


def test_untracked_kinds_are_skipped() -> None:
    """Push, watch and unknown events contribute nothing."""
    push = decode_feed_event(push_event("djc/foo", created_at=_CREATED))
    watch = decode_feed_event({**push_event("djc/foo", created_at=_CREATED), "type": "WatchEvent"})
    unknown = decode_feed_event({**push_event("djc/foo", created_at=_CREATED), "type": "NewEvent"})

    assert classify_event(push) is None
    assert classify_event(watch) is None
    assert classify_event(unknown) is None


def test_tracked_kind_without_item_is_a_shape_error() -> None:
    """A tracked event missing its item object is malformed."""
    raw = {**push_event("djc/foo", created_at=_CREATED), "type": "IssuesEvent"}

    with pytest.raises(ResponseShapeError):
        classify_event(decode_feed_event(raw))


def test_archive_row_with_issue_yields_issue() -> None:
    """Rows holding only an issue keep the issue."""
    row = archive_row(issue=archive_item("djc/foo", 1, "Bug"))

    assert classify_archive_row(row) == ItemRecord(
        node_id="I_kwDO1", url="https://github.com/djc/foo/issues/1", title="Bug"
    )


def test_archive_row_with_pull_request_yields_pull_request() -> None:
    """Rows holding only a pull request keep the pull request."""
    row = archive_row(pull_request=archive_item("djc/foo", 2, "Fix", kind="pull"))

    record = classify_archive_row(row)

    assert record is not None
    assert record.url == "https://github.com/djc/foo/pull/2"


def test_archive_row_with_neither_is_skipped() -> None:
    """Rows with both fields null are skipped without error."""
    assert classify_archive_row(archive_row()) is None


def test_archive_row_with_both_is_skipped() -> None:
    """Rows carrying both an issue and a pull request are ambiguous."""
    row = archive_row(
        issue=archive_item("djc/foo", 1, "Bug"),
        pull_request=archive_item("djc/foo", 1, "Bug", kind="pull"),
    )

    assert classify_archive_row(row) is None


def test_archive_row_that_is_not_json_fails() -> None:
    """Corrupt rows abort the run."""
    with pytest.raises(ResponseShapeError):
        classify_archive_row("{not json")

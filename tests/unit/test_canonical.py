"""Unit tests for URL canonicalisation."""

from __future__ import annotations

import base64

import pytest

from ghdigest.events.canonical import canonicalize_url, is_pull_request_node

_ISSUE_URL = "https://api.github.com/repos/djc/foo/issues/42"


def test_issue_url_for_pull_request_node_is_rewritten() -> None:
    """Comments on pull requests arrive via the issues path."""
    assert canonicalize_url(_ISSUE_URL, "PR_kwDOAbc") == (
        "https://api.github.com/repos/djc/foo/pull/42"
    )


def test_issue_url_for_issue_node_is_unchanged() -> None:
    """Real issues keep their issues path."""
    assert canonicalize_url(_ISSUE_URL, "I_kwDOAbc") == _ISSUE_URL


def test_pulls_api_segment_is_rewritten() -> None:
    """The API pulls path maps to the public pull path."""
    url = "https://api.github.com/repos/djc/foo/pulls/9"

    assert canonicalize_url(url, "PR_kwDOAbc") == (
        "https://api.github.com/repos/djc/foo/pull/9"
    )


def test_repository_named_issues_is_left_alone() -> None:
    """Only the segment before the item number is rewritten."""
    url = "https://github.com/octo/issues/issues/3"

    assert canonicalize_url(url, "PR_kwDO") == "https://github.com/octo/issues/pull/3"


@pytest.mark.parametrize(
    ("url", "node_id"),
    [
        (_ISSUE_URL, "PR_kwDOAbc"),
        (_ISSUE_URL, "I_kwDOAbc"),
        ("https://api.github.com/repos/djc/foo/pulls/9", ""),
        ("https://github.com/djc/foo/releases/tag/v1", "RE_kwDO"),
        ("https://github.com/octo/issues/issues/3", "PR_kwDO"),
    ],
)
def test_canonicalisation_is_idempotent(url: str, node_id: str) -> None:
    """Applying the rewrite twice equals applying it once."""
    once = canonicalize_url(url, node_id)

    assert canonicalize_url(once, node_id) == once


def test_legacy_pull_request_node_ids_are_recognised() -> None:
    """Base64 legacy ids name their GraphQL type."""
    legacy_pr = base64.b64encode(b"011:PullRequest123456").decode("ascii")
    legacy_issue = base64.b64encode(b"05:Issue99").decode("ascii")

    assert is_pull_request_node(legacy_pr)
    assert not is_pull_request_node(legacy_issue)
    assert not is_pull_request_node("")
    assert not is_pull_request_node("not base64!")

"""Deterministic GitHub event builders for tests.

Feed builders return the JSON objects served by the public events API;
archive builders return the payload strings stored in BigQuery rows.
"""

from __future__ import annotations

import dataclasses
import json
import typing as typ

import msgspec

from ghdigest.events.models import FeedEvent

API_REPOS = "https://api.github.com/repos"
WEB = "https://github.com"


@dataclasses.dataclass(frozen=True, slots=True)
class FeedEventSpec:
    """Parameters for a feed event touching one issue or pull request."""

    repo: str
    number: int
    title: str
    created_at: str
    kind: str = "IssuesEvent"
    pull_request: bool = False
    event_id: str = "1"


def _item_object(spec: FeedEventSpec) -> dict[str, typ.Any]:
    node_prefix = "PR_" if spec.pull_request else "I_"
    as_pull = spec.pull_request and spec.kind != "IssueCommentEvent"
    segment = "pulls" if as_pull else "issues"
    return {
        "url": f"{API_REPOS}/{spec.repo}/{segment}/{spec.number}",
        "html_url": f"{WEB}/{spec.repo}/pull/{spec.number}",
        "node_id": f"{node_prefix}kwDO{spec.number}",
        "number": spec.number,
        "title": spec.title,
    }


def feed_event(spec: FeedEventSpec) -> dict[str, typ.Any]:
    """Return a feed event dict for an issue or pull request."""
    issue_kinds = {"IssuesEvent", "IssueCommentEvent"}
    key = "issue" if spec.kind in issue_kinds else "pull_request"
    return {
        "id": spec.event_id,
        "type": spec.kind,
        "actor": {"login": "djc"},
        "repo": {"name": spec.repo},
        "created_at": spec.created_at,
        "payload": {"action": "opened", key: _item_object(spec)},
    }


def release_event(
    repo: str,
    *,
    name: str | None,
    tag: str,
    created_at: str,
) -> dict[str, typ.Any]:
    """Return a ``ReleaseEvent`` feed dict."""
    return {
        "id": f"release-{tag}",
        "type": "ReleaseEvent",
        "repo": {"name": repo},
        "created_at": created_at,
        "payload": {
            "action": "published",
            "release": {
                "html_url": f"{WEB}/{repo}/releases/tag/{tag}",
                "node_id": f"RE_kwDO{tag}",
                "name": name,
                "tag_name": tag,
            },
        },
    }


def push_event(repo: str, *, created_at: str) -> dict[str, typ.Any]:
    """Return a ``PushEvent`` feed dict, which the digest ignores."""
    return {
        "id": "push",
        "type": "PushEvent",
        "repo": {"name": repo},
        "created_at": created_at,
        "payload": {"ref": "refs/heads/main", "commits": []},
    }


def decode_feed_event(raw: dict[str, typ.Any]) -> FeedEvent:
    """Decode a feed dict the way the feed client does."""
    return msgspec.json.decode(json.dumps(raw).encode("utf-8"), type=FeedEvent)


def archive_row(
    *,
    issue: dict[str, typ.Any] | None = None,
    pull_request: dict[str, typ.Any] | None = None,
) -> str:
    """Return an archived payload row with the given item objects."""
    payload: dict[str, typ.Any] = {"action": "opened"}
    payload["issue"] = issue
    payload["pull_request"] = pull_request
    return json.dumps(payload)


def archive_item(repo: str, number: int, title: str, *, kind: str = "issues") -> dict[str, typ.Any]:
    """Return an archived issue or pull request object."""
    return {
        "html_url": f"{WEB}/{repo}/{kind}/{number}",
        "title": title,
        "node_id": f"{'PR' if kind == 'pull' else 'I'}_kwDO{number}",
        "number": number,
    }

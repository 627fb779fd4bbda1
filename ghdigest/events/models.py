"""Typed shapes for GitHub events and the normalised item record."""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003 - msgspec resolves annotations at runtime

import msgspec


@dataclasses.dataclass(frozen=True, slots=True)
class ItemRecord:
    """An issue, pull request or release reduced to what the digest shows."""

    node_id: str
    url: str
    title: str


class FeedRepo(msgspec.Struct, frozen=True):
    """Repository reference attached to every feed event."""

    name: str


class FeedEvent(msgspec.Struct, frozen=True):
    """One entry of the public events feed.

    ``payload`` stays undecoded until the event kind is known to carry an
    item worth reporting.
    """

    type: str
    repo: FeedRepo
    created_at: dt.datetime
    payload: msgspec.Raw
    id: str = ""


class FeedItem(msgspec.Struct, frozen=True):
    """Issue or pull request object as embedded in feed payloads."""

    url: str
    node_id: str = ""
    title: str = ""

    def item(self) -> ItemRecord:
        """Return the normalised record for this issue or pull request."""
        return ItemRecord(node_id=self.node_id, url=self.url, title=self.title)


class FeedRelease(msgspec.Struct, frozen=True):
    """Release object as embedded in ``ReleaseEvent`` payloads."""

    html_url: str
    node_id: str = ""
    name: str | None = None
    tag_name: str = ""

    def item(self) -> ItemRecord:
        """Return the normalised record, titled by name or tag."""
        return ItemRecord(
            node_id=self.node_id,
            url=self.html_url,
            title=self.name or self.tag_name,
        )


class IssuePayload(msgspec.Struct, frozen=True):
    """Payload of issue and issue comment events."""

    issue: FeedItem

    def item(self) -> ItemRecord:
        """Return the issue record."""
        return self.issue.item()


class PullRequestPayload(msgspec.Struct, frozen=True):
    """Payload of pull request, review and review comment events."""

    pull_request: FeedItem

    def item(self) -> ItemRecord:
        """Return the pull request record."""
        return self.pull_request.item()


class ReleasePayload(msgspec.Struct, frozen=True):
    """Payload of release events."""

    release: FeedRelease

    def item(self) -> ItemRecord:
        """Return the release record."""
        return self.release.item()


ItemPayload = IssuePayload | PullRequestPayload | ReleasePayload


class ArchiveItem(msgspec.Struct, frozen=True):
    """Issue or pull request object stored in archived event payloads."""

    html_url: str
    title: str = ""
    node_id: str = ""

    def item(self) -> ItemRecord:
        """Return the normalised record using the public web URL."""
        return ItemRecord(node_id=self.node_id, url=self.html_url, title=self.title)


class ArchiveEnvelope(msgspec.Struct, frozen=True):
    """The two payload fields the archive digest cares about."""

    issue: ArchiveItem | None = None
    pull_request: ArchiveItem | None = None


__all__ = [
    "ArchiveEnvelope",
    "ArchiveItem",
    "FeedEvent",
    "FeedItem",
    "FeedRelease",
    "FeedRepo",
    "IssuePayload",
    "ItemPayload",
    "ItemRecord",
    "PullRequestPayload",
    "ReleasePayload",
]

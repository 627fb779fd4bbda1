"""Classify raw events into item records.

Feed events are dispatched on their ``type`` discriminant to one of a closed
set of payload shapes; archived rows are decoded as an issue/pull request
envelope. Events that carry nothing the digest reports on yield ``None``.
"""

from __future__ import annotations

import typing as typ

import msgspec

from ghdigest.errors import ResponseShapeError
from ghdigest.logging import get_logger, log_debug

from .models import (
    ArchiveEnvelope,
    IssuePayload,
    PullRequestPayload,
    ReleasePayload,
)

if typ.TYPE_CHECKING:
    from .models import FeedEvent, ItemPayload, ItemRecord

logger = get_logger(__name__)

PAYLOAD_TYPES: dict[str, type[ItemPayload]] = {
    "IssuesEvent": IssuePayload,
    "IssueCommentEvent": IssuePayload,
    "PullRequestEvent": PullRequestPayload,
    "PullRequestReviewEvent": PullRequestPayload,
    "PullRequestReviewCommentEvent": PullRequestPayload,
    "PullRequestReviewThreadEvent": PullRequestPayload,
    "ReleaseEvent": ReleasePayload,
}

_PAYLOAD_DECODERS = {
    kind: msgspec.json.Decoder(payload_type)
    for kind, payload_type in PAYLOAD_TYPES.items()
}
_ENVELOPE_DECODER = msgspec.json.Decoder(ArchiveEnvelope)


def classify_event(event: FeedEvent) -> ItemRecord | None:
    """Return the item an event refers to, or ``None`` for untracked kinds.

    Raises
    ------
    ResponseShapeError
        If a tracked event kind carries a payload missing its item object.

    """
    decoder = _PAYLOAD_DECODERS.get(event.type)
    if decoder is None:
        log_debug(logger, "skipping %s event %s", event.type, event.id)
        return None

    try:
        payload = decoder.decode(event.payload)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ResponseShapeError.undecodable(f"{event.type} payload", exc) from exc
    return payload.item()


def classify_archive_row(raw: str | bytes) -> ItemRecord | None:
    """Return the issue or pull request in an archived payload row.

    Rows with neither object, or with both, are skipped.
    """
    try:
        envelope = _ENVELOPE_DECODER.decode(raw)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ResponseShapeError.undecodable("archived event payload", exc) from exc

    match (envelope.issue, envelope.pull_request):
        case (issue, None) if issue is not None:
            return issue.item()
        case (None, pull_request) if pull_request is not None:
            return pull_request.item()
        case _:
            log_debug(logger, "skipping archived row without a single item")
            return None


__all__ = ["PAYLOAD_TYPES", "classify_archive_row", "classify_event"]

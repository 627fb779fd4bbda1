"""Event models, classification and URL canonicalisation."""

from __future__ import annotations

from .canonical import canonicalize_url, is_pull_request_node
from .classify import classify_archive_row, classify_event
from .models import ArchiveEnvelope, FeedEvent, ItemRecord

__all__ = [
    "ArchiveEnvelope",
    "FeedEvent",
    "ItemRecord",
    "canonicalize_url",
    "classify_archive_row",
    "classify_event",
    "is_pull_request_node",
]

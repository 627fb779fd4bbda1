"""Event sources: the archived monthly warehouse and the live public feed."""

from __future__ import annotations

from .archive import BigQueryClient, BigQueryConfig, EventCache, dump_events
from .credentials import BIGQUERY_SCOPE, GoogleTokenProvider, TokenProvider
from .feed import FeedClient, FeedConfig, MonthWindow, parse_next_link, read_token

__all__ = [
    "BIGQUERY_SCOPE",
    "BigQueryClient",
    "BigQueryConfig",
    "EventCache",
    "FeedClient",
    "FeedConfig",
    "GoogleTokenProvider",
    "MonthWindow",
    "TokenProvider",
    "dump_events",
    "parse_next_link",
    "read_token",
]

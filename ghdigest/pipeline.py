"""Digest pipelines for the archive and feed sources.

Both pipelines classify raw events into items, canonicalise their URLs,
route them to project keys and fold them into an aggregation that is
rendered as text. Items are always folded oldest first, so when the same
URL appears more than once the title from the most recent event wins.

Usage
-----
>>> client = BigQueryClient(BigQueryConfig(project="billing"), GoogleTokenProvider())
>>> report = await archive_digest(
...     "202403",
...     "djc",
...     client=client,
...     cache=EventCache("."),
...     exceptions=frozenset({"rust-lang"}),
... )

"""

from __future__ import annotations

import typing as typ

from ghdigest.events import canonicalize_url, classify_archive_row, classify_event
from ghdigest.events.models import ItemRecord
from ghdigest.logging import get_logger, log_info
from ghdigest.report import RoutedItem, fold, render_report, resolve_public_url
from ghdigest.routing import ProjectRouter
from ghdigest.sources.feed import MonthWindow

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ghdigest.events.models import FeedEvent
    from ghdigest.sources.archive import BigQueryClient, EventCache
    from ghdigest.sources.feed import FeedClient

logger = get_logger(__name__)


def _canonical(record: ItemRecord) -> ItemRecord:
    url = canonicalize_url(record.url, record.node_id)
    if url == record.url:
        return record
    return ItemRecord(node_id=record.node_id, url=url, title=record.title)


def route_archive_rows(
    rows: cabc.Iterable[str],
    router: ProjectRouter,
) -> list[RoutedItem]:
    """Classify archived payload rows, keeping their creation order.

    Raises
    ------
    ProjectResolutionError
        If a kept item's URL does not name a repository.

    """
    routed: list[RoutedItem] = []
    for row in rows:
        record = classify_archive_row(row)
        if record is None:
            continue
        record = _canonical(record)
        routed.append(RoutedItem(project=router.route_url(record.url), record=record))
    return routed


def route_feed_events(
    events: cabc.Iterable[FeedEvent],
    router: ProjectRouter,
) -> list[RoutedItem]:
    """Classify feed events and return them oldest first."""
    routed: list[RoutedItem] = []
    for event in events:
        record = classify_event(event)
        if record is None:
            continue
        routed.append(
            RoutedItem(
                project=router.route(event.repo.name),
                record=_canonical(record),
                occurred_at=event.created_at,
            )
        )
    # The feed is newest first; fold in chronological order.
    routed.reverse()
    return routed


async def archive_digest(
    month: str,
    user: str,
    *,
    client: BigQueryClient,
    cache: EventCache,
    exceptions: frozenset[str],
) -> str:
    """Build the digest for ``month`` from the archive, using the cache."""
    rows = await cache.get_or_fetch(month, lambda: client.query(month, user))
    routed = route_archive_rows(rows, ProjectRouter(exceptions, owner_only=True))
    aggregation = fold(routed)
    log_info(
        logger,
        "folded %d items from %d events into %d projects",
        len(routed),
        len(rows),
        len(aggregation),
    )
    return render_report(aggregation)


async def feed_digest(
    month: str,
    *,
    client: FeedClient,
    exceptions: frozenset[str],
) -> str:
    """Build the digest for ``month`` from the live public events feed."""
    window = MonthWindow.for_month(month)
    events = [event async for event in client.iter_events(window)]
    routed = route_feed_events(events, ProjectRouter(exceptions))
    aggregation = fold(routed)
    log_info(
        logger,
        "folded %d items from %d events into %d projects",
        len(routed),
        len(events),
        len(aggregation),
    )
    return render_report(aggregation, resolve=resolve_public_url)


__all__ = [
    "archive_digest",
    "feed_digest",
    "route_archive_rows",
    "route_feed_events",
]

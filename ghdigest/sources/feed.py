"""Live source: page through a user's recent public events.

The events feed is served newest first and only reaches back a few hundred
events, so it suits the current or previous month. Pagination follows the
``Link`` header and stops early once a page reaches past the start of the
requested month.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ
from pathlib import Path

import httpx
import msgspec

from ghdigest import __version__
from ghdigest.errors import ResponseShapeError, TransportError
from ghdigest.events.models import FeedEvent
from ghdigest.logging import get_logger, log_debug, log_info

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_PAGE_DECODER = msgspec.json.Decoder(list[FeedEvent])


@dataclasses.dataclass(frozen=True, slots=True)
class MonthWindow:
    """Half-open UTC interval ``[start, end)`` covering one calendar month."""

    start: dt.datetime
    end: dt.datetime

    @classmethod
    def for_month(cls, month: str) -> MonthWindow:
        """Return the window for a ``YYYYMM`` month string.

        >>> MonthWindow.for_month("202412").end.isoformat()
        '2025-01-01T00:00:00+00:00'

        """
        year, number = int(month[:4]), int(month[4:6])
        start = dt.datetime(year, number, 1, tzinfo=dt.UTC)
        if number == 12:  # noqa: PLR2004 - December rolls over the year
            end = dt.datetime(year + 1, 1, 1, tzinfo=dt.UTC)
        else:
            end = dt.datetime(year, number + 1, 1, tzinfo=dt.UTC)
        return cls(start=start, end=end)

    def contains(self, value: dt.datetime) -> bool:
        """Return True when ``value`` falls inside the window."""
        return self.start <= value < self.end

    def is_before(self, value: dt.datetime) -> bool:
        """Return True when ``value`` predates the window."""
        return value < self.start


def parse_next_link(header: str | None) -> str | None:
    """Return the ``rel="next"`` target of a ``Link`` header, if any.

    >>> parse_next_link('<https://x/?page=2>; rel="next", <https://x/?page=5>; rel="last"')
    'https://x/?page=2'

    """
    if not header:
        return None

    for segment in header.split(", "):
        target, sep, params = segment.partition(";")
        if not sep:
            continue
        target = target.strip()
        if not (target.startswith("<") and target.endswith(">")):
            continue
        for param in params.split(";"):
            name, _, value = param.strip().partition("=")
            if name == "rel" and value == '"next"':
                return target[1:-1]
    return None


def read_token(path: Path | str) -> str | None:
    """Return the bearer token stored in ``path``, or ``None`` if absent."""
    try:
        token = Path(path).read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return token or None


@dataclasses.dataclass(frozen=True, slots=True)
class FeedConfig:
    """Configuration for the public events feed client."""

    user: str
    token: str | None = None
    api_url: str = "https://api.github.com"
    per_page: int = 100
    timeout_s: float = 20.0
    user_agent: str = f"ghdigest/{__version__}"

    @property
    def feed_url(self) -> str:
        """Return the URL of the first feed page."""
        return f"{self.api_url}/users/{self.user}/events/public?per_page={self.per_page}"


class FeedClient:
    """Read a user's public events inside a month window."""

    def __init__(
        self,
        config: FeedConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with feed configuration."""
        headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"

        self._config = config
        self._headers = headers
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self.pages_fetched = 0

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def _get_page(self, url: str) -> tuple[list[FeedEvent], str | None]:
        try:
            response = await self._client.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            raise TransportError.request_failed(url, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise TransportError.http_error(url, response.status_code)

        try:
            events = _PAGE_DECODER.decode(response.content)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise ResponseShapeError.undecodable("events page", exc) from exc

        self.pages_fetched += 1
        return events, parse_next_link(response.headers.get("link"))

    async def iter_events(self, window: MonthWindow) -> typ.AsyncIterator[FeedEvent]:
        """Yield events inside ``window``, newest first.

        Events newer than the window are skipped. The page holding the first
        event older than the window is the last one fetched; this relies on
        the feed being ordered newest first. A missing ``next`` link ends the
        feed, which is also how the API signals its pagination limit.
        """
        url: str | None = self._config.feed_url
        while url is not None:
            log_info(logger, "fetching events page %s", url)
            events, url = await self._get_page(url)

            reached_start = False
            for event in events:
                if window.is_before(event.created_at):
                    reached_start = True
                elif window.contains(event.created_at):
                    yield event
                else:
                    log_debug(logger, "skipping event %s after window", event.id)

            if reached_start:
                log_info(logger, "reached events before %s", window.start.date())
                return


__all__ = [
    "FeedClient",
    "FeedConfig",
    "MonthWindow",
    "parse_next_link",
    "read_token",
]

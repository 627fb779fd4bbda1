"""GitHub Archive source: one BigQuery job per month, cached on disk.

The archive publishes one table per month (``githubarchive.month.YYYYMM``).
Querying it costs money, so the raw payload rows for a month are kept in
``{month}.json`` and reused on later runs. The cache is never invalidated;
delete the file to refetch.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ
from pathlib import Path

import httpx
import msgspec

from ghdigest import __version__
from ghdigest.errors import CacheIOError, ResponseShapeError, TransportError
from ghdigest.logging import get_logger, log_info

from .credentials import BIGQUERY_SCOPE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .credentials import TokenProvider

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400


@dataclasses.dataclass(frozen=True, slots=True)
class BigQueryConfig:
    """Configuration for the BigQuery REST client."""

    project: str
    endpoint: str = "https://bigquery.googleapis.com/bigquery/v2"
    timeout_s: float = 120.0
    user_agent: str = f"ghdigest/{__version__}"

    @property
    def queries_url(self) -> str:
        """Return the ``jobs.query`` URL for the billed project."""
        return f"{self.endpoint}/projects/{self.project}/queries"


class _Field(msgspec.Struct, frozen=True):
    v: str


class _Row(msgspec.Struct, frozen=True):
    f: list[_Field]


class _QueryResponse(msgspec.Struct, frozen=True, rename="camel"):
    rows: list[_Row] = msgspec.field(default_factory=list)
    job_complete: bool = True


_RESPONSE_DECODER = msgspec.json.Decoder(_QueryResponse)


def build_query(month: str, user: str) -> str:
    """Return the SQL selecting a user's event payloads for ``month``.

    >>> build_query("202403", "djc")
    "SELECT payload FROM githubarchive.month.202403 WHERE actor.login = 'djc' ORDER BY created_at"

    """
    return (
        f"SELECT payload FROM githubarchive.month.{month} "
        f"WHERE actor.login = '{user}' ORDER BY created_at"
    )


def _single_column(row: _Row) -> str:
    if len(row.f) != 1:
        raise ResponseShapeError.row_width(len(row.f))
    return row.f[0].v


def parse_query_response(body: bytes) -> list[str]:
    """Extract the single payload column from a ``jobs.query`` response."""
    try:
        response = _RESPONSE_DECODER.decode(body)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ResponseShapeError.undecodable("BigQuery response", exc) from exc

    if not response.job_complete:
        msg = "query did not complete within the request timeout"
        raise ResponseShapeError.undecodable("BigQuery response", TimeoutError(msg))
    return [_single_column(row) for row in response.rows]


class BigQueryClient:
    """Run archive queries through the BigQuery ``jobs.query`` endpoint."""

    def __init__(
        self,
        config: BigQueryConfig,
        tokens: TokenProvider,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise with a billed project, token source and optional client."""
        self._config = config
        self._tokens = tokens
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def query(self, month: str, user: str) -> list[str]:
        """Return the JSON payload of every archived event by ``user``.

        Rows are ordered by event creation time, oldest first.
        """
        token = await self._tokens.token([BIGQUERY_SCOPE])

        log_info(
            logger,
            "querying BigQuery (month=%s, user=%s, project=%s)",
            month,
            user,
            self._config.project,
        )
        url = self._config.queries_url
        try:
            response = await self._client.post(
                url,
                json={"query": build_query(month, user)},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise TransportError.request_failed(url, exc) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise TransportError.http_error(url, response.status_code)

        rows = parse_query_response(response.content)
        log_info(logger, "query returned %d events", len(rows))
        return rows


_CACHE_DECODER = msgspec.json.Decoder(list[str])


class EventCache:
    """Monthly raw-event cache files in a directory."""

    def __init__(self, directory: Path | str = ".") -> None:
        """Initialise the cache rooted at ``directory``."""
        self._directory = Path(directory)

    def path_for(self, month: str) -> Path:
        """Return the cache file path for ``month``."""
        return self._directory / f"{month}.json"

    def load(self, month: str) -> list[str] | None:
        """Return cached events for ``month``, or ``None`` when not cached."""
        path = self.path_for(month)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            log_info(logger, "failed to open cache %s: %s", path, exc)
            return None
        except OSError as exc:
            raise CacheIOError.read_failed(path, exc) from exc

        try:
            events = _CACHE_DECODER.decode(raw)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise CacheIOError.read_failed(path, exc) from exc
        log_info(logger, "loading events from cache %s", path)
        return events

    def store(self, month: str, events: list[str]) -> None:
        """Write ``events`` to the cache file for ``month``."""
        path = self.path_for(month)
        log_info(logger, "saving events to cache %s", path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(msgspec.json.encode(events))
        except OSError as exc:
            raise CacheIOError.write_failed(path, exc) from exc

    async def get_or_fetch(
        self,
        month: str,
        fetch: cabc.Callable[[], cabc.Awaitable[list[str]]],
    ) -> list[str]:
        """Return cached events, or fetch, store and return them on a miss."""
        cached = await asyncio.to_thread(self.load, month)
        if cached is not None:
            return cached

        events = await fetch()
        await asyncio.to_thread(self.store, month, events)
        return events


def dump_events(path: Path | str, events: cabc.Sequence[str]) -> None:
    """Write events as a JSON array with one raw event per line.

    The result stays valid JSON while being easy to read and diff; pipe it
    through a formatter for deeper inspection.
    """
    if events:
        body = "[\n    " + ",\n    ".join(events) + "\n]\n"
    else:
        body = "[]\n"
    Path(path).write_text(body, encoding="utf-8")


__all__ = [
    "BigQueryClient",
    "BigQueryConfig",
    "EventCache",
    "build_query",
    "dump_events",
    "parse_query_response",
]

"""Command-line entry point for monthly digests.

Usage:
    ghdigest archive 2024-03                 # GitHub Archive via BigQuery
    ghdigest feed 2024-03                    # live public events feed
    ghdigest dump 2024-03 202403-pretty.json # reformat a cached month

The report is written to standard output; diagnostics go to standard error.

Environment variables:
    GHDIGEST_LOG_LEVEL  - Log level (default: INFO)
    GHDIGEST_TOKEN_FILE - Token file for the feed command (default: github-token)
"""

from __future__ import annotations

import asyncio
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from ghdigest import __version__
from ghdigest.config import DEFAULT_CONFIG_PATH, load_config, normalize_month
from ghdigest.errors import CacheIOError, DigestError
from ghdigest.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_warning,
)
from ghdigest.pipeline import archive_digest, feed_digest
from ghdigest.sources import (
    BigQueryClient,
    BigQueryConfig,
    EventCache,
    FeedClient,
    FeedConfig,
    GoogleTokenProvider,
    dump_events,
    read_token,
)

if typ.TYPE_CHECKING:
    from ghdigest.config import DigestConfig

logger = get_logger(__name__)

DEFAULT_TOKEN_FILE = Path("github-token")

app = App(
    name="ghdigest",
    help="Monthly GitHub activity digests grouped by project",
    version=__version__,
)


def _setup_logging() -> None:
    level, invalid = configure_logging()
    if invalid:
        log_warning(logger, "Invalid log level, falling back to %s", level)


async def _run_archive(month: str, settings: DigestConfig) -> str:
    client = BigQueryClient(
        BigQueryConfig(project=settings.require_gcp_project()),
        GoogleTokenProvider(),
    )
    try:
        return await archive_digest(
            month,
            settings.user,
            client=client,
            cache=EventCache(settings.cache_dir),
            exceptions=settings.exceptions,
        )
    finally:
        await client.aclose()


async def _run_feed(month: str, settings: DigestConfig, token: str | None) -> str:
    client = FeedClient(FeedConfig(user=settings.user, token=token))
    try:
        return await feed_digest(month, client=client, exceptions=settings.exceptions)
    finally:
        await client.aclose()


@app.command
def archive(month: str, /, *, config: Path = DEFAULT_CONFIG_PATH) -> int:
    """Summarise a month of archived activity, caching the query result.

    Args:
        month: Month to summarise, as YYYY-MM or YYYYMM.
        config: TOML file providing ``user`` and ``gcp_project``.

    Returns:
        Exit code (0 for success, 1 when the run fails).

    """
    _setup_logging()
    try:
        digits = normalize_month(month)
        settings = load_config(config)
        report = asyncio.run(_run_archive(digits, settings))
    except DigestError as exc:
        log_error(logger, "%s", exc)
        return 1

    sys.stdout.write(report)
    return 0


@app.command
def feed(
    month: str,
    /,
    *,
    config: Path = DEFAULT_CONFIG_PATH,
    token_file: typ.Annotated[
        Path, Parameter(env_var="GHDIGEST_TOKEN_FILE")
    ] = DEFAULT_TOKEN_FILE,
) -> int:
    """Summarise a recent month from the live public events feed.

    Args:
        month: Month to summarise, as YYYY-MM or YYYYMM.
        config: TOML file providing ``user``.
        token_file: Optional file holding a GitHub token; without one the
            feed is read unauthenticated.

    Returns:
        Exit code (0 for success, 1 when the run fails).

    """
    _setup_logging()
    try:
        digits = normalize_month(month)
        settings = load_config(config)
        report = asyncio.run(_run_feed(digits, settings, read_token(token_file)))
    except DigestError as exc:
        log_error(logger, "%s", exc)
        return 1

    sys.stdout.write(report)
    return 0


@app.command
def dump(month: str, output: Path, /, *, config: Path = DEFAULT_CONFIG_PATH) -> int:
    """Rewrite a cached month with one event per line for inspection.

    Args:
        month: Cached month, as YYYY-MM or YYYYMM.
        output: Destination file.
        config: TOML file providing ``cache_dir``.

    Returns:
        Exit code (0 for success, 1 when the cache is missing or unreadable).

    """
    _setup_logging()
    try:
        digits = normalize_month(month)
        cache = EventCache(load_config(config).cache_dir)
        events = cache.load(digits)
        if events is None:
            path = cache.path_for(digits)
            raise CacheIOError.read_failed(path, FileNotFoundError(path))
        dump_events(output, events)
    except DigestError as exc:
        log_error(logger, "%s", exc)
        return 1
    except OSError as exc:
        log_exception(logger, "failed to write %s: %s", output, exc)
        return 1
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())

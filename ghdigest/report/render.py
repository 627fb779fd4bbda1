"""reStructuredText renderer for monthly digests.

Each project becomes a section heading followed by one bullet per item::

    instant-acme
    ============

    * `Add support for profiles <https://github.com/djc/instant-acme/pull/90>`_

Usage
-----
>>> from ghdigest.report.aggregate import Aggregation
>>> aggregation = Aggregation()
>>> aggregation.add("foo", "https://github.com/djc/foo/pull/1", "Fix it")
>>> print(render_report(aggregation), end="")
foo
===
<BLANKLINE>
* `Fix it <https://github.com/djc/foo/pull/1>`_
<BLANKLINE>

"""

from __future__ import annotations

import typing as typ

from ghdigest.logging import get_logger, log_warning
from ghdigest.routing import PUBLIC_WEB_PREFIX

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .aggregate import Aggregation

logger = get_logger(__name__)

API_REPOS_PREFIX = "https://api.github.com/repos/"

UrlResolver = typ.Callable[[str], str | None]


def resolve_public_url(url: str) -> str | None:
    """Translate an API item URL to its public web URL.

    Returns ``None`` for URLs on neither host; callers skip those items.

    >>> resolve_public_url("https://api.github.com/repos/o/r/pull/3")
    'https://github.com/o/r/pull/3'

    """
    if url.startswith(API_REPOS_PREFIX):
        return PUBLIC_WEB_PREFIX + url.removeprefix(API_REPOS_PREFIX)
    if url.startswith(PUBLIC_WEB_PREFIX):
        return url
    return None


def _render_heading(lines: list[str], project: str) -> None:
    lines.append(project)
    lines.append("=" * len(project))
    lines.append("")


def _render_items(
    lines: list[str],
    entries: dict[str, str],
    resolve: UrlResolver | None,
) -> None:
    for url, title in entries.items():
        target = url if resolve is None else resolve(url)
        if target is None:
            log_warning(logger, "skipping %r: cannot resolve public URL %s", title, url)
            continue
        lines.append(f"* `{title} <{target}>`_")
    lines.append("")


def render_lines(
    aggregation: Aggregation,
    *,
    resolve: UrlResolver | None = None,
) -> cabc.Iterator[str]:
    """Yield report lines without trailing newlines."""
    for project, entries in aggregation.items():
        lines: list[str] = []
        _render_heading(lines, project)
        _render_items(lines, entries, resolve)
        yield from lines


def render_report(
    aggregation: Aggregation,
    *,
    resolve: UrlResolver | None = None,
) -> str:
    """Render an aggregation as a reStructuredText digest.

    Parameters
    ----------
    aggregation
        Project entries to render, in project insertion order.
    resolve
        Optional URL translation applied to every item. Items for which it
        returns ``None`` are logged and left out.

    Returns
    -------
    str
        The complete report, every line newline-terminated.

    """
    return "".join(f"{line}\n" for line in render_lines(aggregation, resolve=resolve))


__all__ = ["API_REPOS_PREFIX", "render_lines", "render_report", "resolve_public_url"]

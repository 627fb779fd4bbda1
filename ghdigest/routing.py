"""Map repositories to the project keys used as report headings.

Repository full names are GitHub identifiers in ``owner/repo`` format. They
are not filesystem paths, even though they use ``/`` as a separator, so they
are parsed here rather than with ``pathlib``.
"""

from __future__ import annotations

import dataclasses

from .errors import ProjectResolutionError

PUBLIC_WEB_PREFIX = "https://github.com/"


def parse_full_name(full_name: str) -> tuple[str, str]:
    """Split a repository full name into owner and repository.

    Raises
    ------
    ProjectResolutionError
        If the name is not exactly ``owner/repo`` with both parts non-empty.

    Examples
    --------
    >>> parse_full_name("djc/instant-acme")
    ('djc', 'instant-acme')

    """
    if full_name.count("/") != 1:
        raise ProjectResolutionError.full_name(full_name)

    owner, repo = full_name.split("/")
    if not owner or not repo:
        raise ProjectResolutionError.full_name(full_name)
    return owner, repo


@dataclasses.dataclass(frozen=True, slots=True)
class ProjectRouter:
    """Derive project keys from repository names or item URLs.

    Attributes
    ----------
    exceptions
        Owners whose repositories are each reported as their own project,
        keyed by the bare repository name.
    owner_only
        Key other repositories by owner alone instead of ``owner/repo``.

    """

    exceptions: frozenset[str]
    owner_only: bool = False

    def route(self, full_name: str) -> str:
        """Return the project key for an ``owner/repo`` full name.

        >>> ProjectRouter(frozenset({"djc"})).route("djc/foo")
        'foo'
        >>> ProjectRouter(frozenset({"djc"})).route("bar/foo")
        'bar/foo'

        """
        owner, repo = parse_full_name(full_name)
        if owner in self.exceptions:
            return repo
        if self.owner_only:
            return owner
        return full_name

    def route_url(self, url: str) -> str:
        """Return the project key for a ``https://github.com/`` item URL."""
        if not url.startswith(PUBLIC_WEB_PREFIX):
            raise ProjectResolutionError.url(url)

        parts = url.removeprefix(PUBLIC_WEB_PREFIX).split("/", 2)
        if len(parts) < 2:  # noqa: PLR2004 - owner and repository segments
            raise ProjectResolutionError.url(url)
        try:
            return self.route(f"{parts[0]}/{parts[1]}")
        except ProjectResolutionError as exc:
            raise ProjectResolutionError.url(url) from exc


__all__ = ["PUBLIC_WEB_PREFIX", "ProjectRouter", "parse_full_name"]

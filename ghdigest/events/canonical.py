"""Canonical URL rewriting for issue and pull request links.

The events API reports comments on pull requests through the issues
endpoint and pull requests themselves under ``/pulls/``; the public web path
for both is ``/pull/``. Rewriting before aggregation lets activity on the
same pull request collapse into one entry.
"""

from __future__ import annotations

import base64
import binascii
import re

PULL_REQUEST_NODE_PREFIX = "PR_"
_LEGACY_PULL_REQUEST_TYPE = "PullRequest"

# Only the segment directly before an item number is rewritten.
_ISSUES_SEGMENT = re.compile(r"/issues/(?=\d+(?:[/?#]|$))")
_PULLS_SEGMENT = re.compile(r"/pulls/(?=\d+(?:[/?#]|$))")
_PULL_SEGMENT = "/pull/"


def _legacy_node_type(node_id: str) -> str | None:
    """Decode the type name from a legacy ``base64("NNN:Type123")`` node id."""
    padded = node_id + "=" * (-len(node_id) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError):
        return None
    _, sep, rest = decoded.partition(":")
    if not sep:
        return None
    return rest.rstrip("0123456789")


def is_pull_request_node(node_id: str) -> bool:
    """Return True when a GraphQL node id identifies a pull request."""
    if node_id.startswith(PULL_REQUEST_NODE_PREFIX):
        return True
    if not node_id or "_" in node_id:
        return False
    return _legacy_node_type(node_id) == _LEGACY_PULL_REQUEST_TYPE


def canonicalize_url(url: str, node_id: str) -> str:
    """Rewrite an item URL to its public ``/pull/`` path where applicable.

    At most one rewrite is applied, so the result is a fixed point.

    >>> canonicalize_url("https://github.com/o/r/issues/42", "PR_kwDO")
    'https://github.com/o/r/pull/42'
    >>> canonicalize_url("https://api.github.com/repos/o/r/pulls/7", "")
    'https://api.github.com/repos/o/r/pull/7'

    """
    if is_pull_request_node(node_id) and _ISSUES_SEGMENT.search(url):
        return _ISSUES_SEGMENT.sub(_PULL_SEGMENT, url, count=1)
    if _PULLS_SEGMENT.search(url):
        return _PULLS_SEGMENT.sub(_PULL_SEGMENT, url, count=1)
    return url


__all__ = ["canonicalize_url", "is_pull_request_node"]

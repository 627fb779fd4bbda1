"""Bearer tokens for the BigQuery REST API."""

from __future__ import annotations

import asyncio
import typing as typ

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request

from ghdigest.errors import CredentialError
from ghdigest.logging import get_logger, log_info

logger = get_logger(__name__)

BIGQUERY_SCOPE = "https://www.googleapis.com/auth/bigquery"


class TokenProvider(typ.Protocol):
    """Source of OAuth bearer tokens."""

    async def token(self, scopes: typ.Sequence[str]) -> str:
        """Return an access token valid for ``scopes``."""
        ...


def _fetch_default_token(scopes: typ.Sequence[str]) -> str:
    credentials, _ = google.auth.default(scopes=list(scopes))
    credentials.refresh(Request())
    token = credentials.token
    if not token:
        msg = "credential refresh returned no token"
        raise GoogleAuthError(msg)
    return token


class GoogleTokenProvider:
    """Application-default Google credentials.

    The lookup follows ``google.auth.default``: ``GOOGLE_APPLICATION_CREDENTIALS``,
    the gcloud user configuration, then the metadata server.
    """

    async def token(self, scopes: typ.Sequence[str]) -> str:
        """Refresh application-default credentials and return the token."""
        log_info(logger, "requesting token for %s", ", ".join(scopes))
        try:
            return await asyncio.to_thread(_fetch_default_token, scopes)
        except GoogleAuthError as exc:
            raise CredentialError.unavailable(exc) from exc


__all__ = ["BIGQUERY_SCOPE", "GoogleTokenProvider", "TokenProvider"]

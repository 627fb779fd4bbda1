"""Unit tests for the Google token provider."""

from __future__ import annotations

import typing as typ

import pytest
from google.auth.exceptions import DefaultCredentialsError

from ghdigest.errors import CredentialError
from ghdigest.sources.credentials import BIGQUERY_SCOPE, GoogleTokenProvider


class _FakeCredentials:
    """Credentials whose refresh sets a token."""

    def __init__(self, token: str | None) -> None:
        self._next_token = token
        self.token: str | None = None
        self.refreshed = 0

    def refresh(self, request: object) -> None:
        del request
        self.refreshed += 1
        self.token = self._next_token


@pytest.mark.asyncio
async def test_token_refreshes_default_credentials(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Application-default credentials are requested with the BigQuery scope."""
    credentials = _FakeCredentials("ya29.token")
    seen: dict[str, typ.Any] = {}

    def fake_default(*, scopes: list[str]) -> tuple[_FakeCredentials, str]:
        seen["scopes"] = scopes
        return credentials, "project"

    monkeypatch.setattr("ghdigest.sources.credentials.google.auth.default", fake_default)

    token = await GoogleTokenProvider().token([BIGQUERY_SCOPE])

    assert token == "ya29.token"
    assert seen["scopes"] == [BIGQUERY_SCOPE]
    assert credentials.refreshed == 1


@pytest.mark.asyncio
async def test_missing_credentials_raise_credential_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Lookup failures surface as CredentialError."""

    def fake_default(*, scopes: list[str]) -> tuple[_FakeCredentials, str]:
        del scopes
        msg = "no credentials"
        raise DefaultCredentialsError(msg)

    monkeypatch.setattr("ghdigest.sources.credentials.google.auth.default", fake_default)

    with pytest.raises(CredentialError):
        await GoogleTokenProvider().token([BIGQUERY_SCOPE])


@pytest.mark.asyncio
async def test_empty_token_raises_credential_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A refresh that yields no token is a failure."""
    monkeypatch.setattr(
        "ghdigest.sources.credentials.google.auth.default",
        lambda *, scopes: (_FakeCredentials(None), "project"),
    )

    with pytest.raises(CredentialError):
        await GoogleTokenProvider().token([BIGQUERY_SCOPE])

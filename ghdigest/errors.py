"""Error hierarchy for digest runs.

Every error defined here is fatal: the CLI logs it and exits without writing
a partial report to standard output.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class DigestError(RuntimeError):
    """Base class for errors that abort a digest run."""


class ConfigError(DigestError):
    """Raised when command-line or file configuration is invalid."""

    @classmethod
    def invalid_month(cls, month: str) -> ConfigError:
        """Return an error for a month argument that is not ``YYYYMM``."""
        return cls(f"month must look like YYYY-MM or YYYYMM, got {month!r}")

    @classmethod
    def missing_field(cls, field: str) -> ConfigError:
        """Return an error for a setting the selected command requires."""
        return cls(f"config is missing required setting: {field}")


class ConfigReadError(ConfigError):
    """Raised when the configuration file cannot be read."""

    @classmethod
    def for_path(cls, path: Path, exc: OSError) -> ConfigReadError:
        """Return an error for an unreadable configuration file."""
        return cls(f"failed to read config file {path}: {exc}")


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML for the schema."""

    @classmethod
    def for_path(cls, path: Path, exc: Exception) -> ConfigParseError:
        """Return an error for a configuration file that fails to decode."""
        return cls(f"failed to parse config file {path}: {exc}")


class CredentialError(DigestError):
    """Raised when no bearer token can be obtained for the warehouse API."""

    @classmethod
    def unavailable(cls, exc: Exception) -> CredentialError:
        """Return an error wrapping a credential provider failure."""
        return cls(f"failed to obtain Google Cloud access token: {exc}")


class TransportError(DigestError):
    """Raised when an HTTP request fails or returns an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, url: str, status_code: int) -> TransportError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"HTTP {status_code} from {url}", status_code=status_code)

    @classmethod
    def request_failed(cls, url: str, exc: Exception) -> TransportError:
        """Return an error for a request that never produced a response."""
        return cls(f"request to {url} failed: {exc}")


class ResponseShapeError(DigestError):
    """Raised when a response or stored payload has an unexpected shape."""

    @classmethod
    def row_width(cls, width: int) -> ResponseShapeError:
        """Return an error for a query row that is not exactly one column."""
        return cls(f"expected query rows with exactly one column, got {width}")

    @classmethod
    def undecodable(cls, what: str, exc: Exception) -> ResponseShapeError:
        """Return an error for a body that does not match its schema."""
        return cls(f"malformed {what}: {exc}")


class ProjectResolutionError(DigestError):
    """Raised when a record cannot be mapped to a project key."""

    @classmethod
    def full_name(cls, full_name: str) -> ProjectResolutionError:
        """Return an error for a repository name not shaped ``owner/repo``."""
        return cls(f"invalid repository name: expected 'owner/repo', got {full_name!r}")

    @classmethod
    def url(cls, url: str) -> ProjectResolutionError:
        """Return an error for a URL that does not name a repository."""
        return cls(f"no project for item URL {url!r}")


class CacheIOError(DigestError):
    """Raised when the monthly cache file cannot be read or written."""

    @classmethod
    def read_failed(cls, path: Path, exc: Exception) -> CacheIOError:
        """Return an error for an unreadable or undecodable cache file."""
        return cls(f"failed to load cache {path}: {exc}")

    @classmethod
    def write_failed(cls, path: Path, exc: Exception) -> CacheIOError:
        """Return an error for a cache file that could not be saved."""
        return cls(f"failed to save cache {path}: {exc}")


__all__ = [
    "CacheIOError",
    "ConfigError",
    "ConfigParseError",
    "ConfigReadError",
    "CredentialError",
    "DigestError",
    "ProjectResolutionError",
    "ResponseShapeError",
    "TransportError",
]

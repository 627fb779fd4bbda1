"""Configuration file loading for digest runs.

The configuration file is TOML, for example::

    user = "djc"
    gcp_project = "my-billing-project"
    # Optional: owners whose repositories are grouped by repository name.
    repo_projects = ["djc", "rust-lang"]
    # Optional: where monthly cache files live (default: working directory).
    cache_dir = "cache"

"""

from __future__ import annotations

import re
from pathlib import Path

import msgspec

from .errors import ConfigError, ConfigParseError, ConfigReadError

DEFAULT_CONFIG_PATH = Path("config.toml")

# Owners whose repositories are separate projects rather than one project per
# owner.
DEFAULT_REPO_PROJECTS: frozenset[str] = frozenset(
    {"djc", "nicoburns", "seanmonstar", "rust-lang", "hyperium"}
)

_MONTH_RE = re.compile(r"^(\d{4})(0[1-9]|1[0-2])$")


class DigestConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Settings shared by the archive and feed commands.

    Attributes
    ----------
    user
        GitHub login whose activity is summarised.
    gcp_project
        Google Cloud project billed for BigQuery jobs. Only the archive
        command needs it.
    repo_projects
        Override for the owners grouped by repository name.
    cache_dir
        Directory holding ``{month}.json`` cache files.

    """

    user: str
    gcp_project: str = ""
    repo_projects: list[str] | None = None
    cache_dir: str = "."

    @property
    def exceptions(self) -> frozenset[str]:
        """Return the owners whose repositories form their own projects."""
        if self.repo_projects is None:
            return DEFAULT_REPO_PROJECTS
        return frozenset(self.repo_projects)

    def require_gcp_project(self) -> str:
        """Return ``gcp_project`` or fail when it is not configured."""
        if not self.gcp_project.strip():
            raise ConfigError.missing_field("gcp_project")
        return self.gcp_project


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> DigestConfig:
    """Read and decode a TOML configuration file."""
    path_obj = Path(path)
    try:
        raw = path_obj.read_bytes()
    except OSError as exc:
        raise ConfigReadError.for_path(path_obj, exc) from exc

    try:
        config = msgspec.toml.decode(raw, type=DigestConfig)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ConfigParseError.for_path(path_obj, exc) from exc

    if not config.user.strip():
        raise ConfigParseError.for_path(path_obj, ValueError("user must be non-empty"))
    return config


def normalize_month(month: str) -> str:
    """Strip hyphens from a month argument and validate ``YYYYMM``.

    >>> normalize_month("2024-03")
    '202403'

    """
    digits = month.strip().replace("-", "")
    if _MONTH_RE.match(digits) is None:
        raise ConfigError.invalid_month(month)
    return digits

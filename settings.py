"""
Onboarding API Settings

Configuration via environment variables, read once at startup:
- PORT            listen port (default 8787)
- API_KEY         optional shared secret; clients must send x-api-key
- GITHUB_TOKEN    content store credential (repo scope)       REQUIRED
- GITHUB_OWNER    repository owner (user or org)              REQUIRED
- GITHUB_REPO     repository name                             REQUIRED
- GITHUB_BRANCH   branch to read/write (default main)
- GITHUB_DIR      folder in the repo where saves live (default saves)
- GITHUB_API_URL  API root, for GitHub Enterprise (default api.github.com)
- MAX_BODY_BYTES  request body limit (default 2 MB)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PORT = 8787
DEFAULT_BRANCH = 'main'
DEFAULT_DIR = 'saves'
DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_MAX_BODY_BYTES = 2 * 1024 * 1024

REQUIRED_VARS = ('GITHUB_TOKEN', 'GITHUB_OWNER', 'GITHUB_REPO')


class SettingsError(Exception):
    """Raised when the environment cannot produce a usable configuration."""


@dataclass(frozen=True)
class Settings:
    token: str
    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH
    directory: str = DEFAULT_DIR
    api_key: str = ''
    port: int = DEFAULT_PORT
    api_url: str = DEFAULT_API_URL
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def repo_url(self) -> str:
        """Base URL of the repository on the content API."""
        return f"{self.api_url.rstrip('/')}/repos/{self.owner}/{self.repo}"

    def storage_path(self, key: str) -> str:
        """Path of the JSON file for a storage key, e.g. saves/ann-bee.json."""
        directory = self.directory.strip('/')
        if not directory:
            return f"{key}.json"
        return f"{directory}/{key}.json"


def _get(environ: Mapping[str, str], name: str, default: str = '') -> str:
    value = environ.get(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _get(environ, name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise SettingsError(f'{name} must be an integer, got {raw!r}')


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings

    Raises:
        SettingsError: a required variable is missing or a number is malformed
    """
    if environ is None:
        environ = os.environ

    missing = [name for name in REQUIRED_VARS if not _get(environ, name)]
    if missing:
        raise SettingsError(f"Missing required env vars: {', '.join(missing)}")

    return Settings(
        token=_get(environ, 'GITHUB_TOKEN'),
        owner=_get(environ, 'GITHUB_OWNER'),
        repo=_get(environ, 'GITHUB_REPO'),
        branch=_get(environ, 'GITHUB_BRANCH', DEFAULT_BRANCH),
        directory=_get(environ, 'GITHUB_DIR', DEFAULT_DIR),
        # Not stripped: the shared secret must match byte for byte
        api_key=environ.get('API_KEY') or '',
        port=_get_int(environ, 'PORT', DEFAULT_PORT),
        api_url=_get(environ, 'GITHUB_API_URL', DEFAULT_API_URL),
        max_body_bytes=_get_int(environ, 'MAX_BODY_BYTES', DEFAULT_MAX_BODY_BYTES),
    )

"""
GitHub Contents API client.

Two primitives against repos/<owner>/<repo>/contents/<path>:
- fetch: GET the object at a path on the configured branch (404 -> None)
- put:   PUT new base64 content, with the current sha when overwriting

upsert() chains them. The contents API rejects an overwrite without the
current sha and a create with one, so the read is required before every
write. Nothing is retried: if another writer moves the sha between the two
calls, GitHub's rejection comes back as a BackendError.
"""

import base64
import json
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from content_store.errors import BackendError, ValidationError
from settings import Settings

USER_AGENT = 'mwz-onboarding-api'


@dataclass(frozen=True)
class StoredObject:
    """An object as returned by the contents API."""
    path: str
    sha: Optional[str]
    content: str  # base64, possibly wrapped with newlines

    def decoded(self) -> str:
        # b64decode drops the line breaks GitHub inserts every 60 chars
        return base64.b64decode(self.content).decode('utf-8')


@dataclass(frozen=True)
class CommitResult:
    path: str
    sha: Optional[str]


def encode_json(value: Any) -> str:
    """
    Pretty-print a JSON value and base64 it for the contents API.

    Raises:
        ValidationError: value holds NaN or Infinity, which strict JSON
            parsers (JSON.parse in the frontend) reject
    """
    try:
        text = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise ValidationError(f'Record is not valid JSON: {e}')
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class ContentStoreClient:
    """Reads and writes JSON files in one branch of one GitHub repository."""

    def __init__(self, settings: Settings, session=None):
        self.settings = settings
        self.session = session if session is not None else requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.settings.repo_url}/contents/{quote(path, safe='/')}"

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {
            'Authorization': f'Bearer {self.settings.token}',
            'User-Agent': USER_AGENT,
            'Accept': 'application/vnd.github+json',
        }
        if json_body:
            headers['Content-Type'] = 'application/json'
        return headers

    def fetch(self, path: str) -> Optional[StoredObject]:
        """
        Get the object stored at path.

        Returns:
            StoredObject, or None when the store reports 404

        Raises:
            BackendError: any other non-2xx status or a network failure
        """
        try:
            resp = self.session.get(
                self._url(path),
                params={'ref': self.settings.branch},
                headers=self._headers()
            )
        except requests.RequestException as e:
            print(f"[GITHUB] GET {path} unreachable: {e}", file=sys.stderr, flush=True)
            raise BackendError('GET', None, str(e))

        if resp.status_code == 404:
            return None
        if not _is_success(resp.status_code):
            raise BackendError('GET', resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError:
            raise BackendError('GET', resp.status_code, resp.text)
        # A directory listing comes back as a list
        if not isinstance(data, dict):
            raise BackendError('GET', resp.status_code, f'{path} is not a file')
        # Files over 1 MB come back without inline content
        if data.get('encoding') == 'none':
            raise BackendError('GET', resp.status_code, f'{path} is too large for the contents API')

        return StoredObject(
            path=data.get('path') or path,
            sha=data.get('sha'),
            content=data.get('content') or ''
        )

    def put(self, path: str, value: Any, message: str, sha: Optional[str] = None) -> CommitResult:
        """
        Write value as the JSON file at path.

        Args:
            path: Repository path, e.g. saves/ann-bee.json
            value: Any JSON-serializable value
            message: Commit message
            sha: Version token of the object being replaced; None to create

        Returns:
            CommitResult (sha is None if GitHub's response omits it)

        Raises:
            ValidationError: value is not strict JSON
            BackendError: non-2xx status (including sha mismatch) or network failure
        """
        return self._write(path, encode_json(value), message, sha)

    def _write(self, path: str, content: str, message: str, sha: Optional[str]) -> CommitResult:
        body = {
            'message': message,
            'content': content,
            'branch': self.settings.branch,
        }
        if sha:
            body['sha'] = sha

        try:
            resp = self.session.put(
                self._url(path),
                json=body,
                headers=self._headers(json_body=True)
            )
        except requests.RequestException as e:
            print(f"[GITHUB] PUT {path} unreachable: {e}", file=sys.stderr, flush=True)
            raise BackendError('PUT', None, str(e))

        if not _is_success(resp.status_code):
            raise BackendError('PUT', resp.status_code, resp.text)

        return CommitResult(path=path, sha=_commit_sha(resp))

    def upsert(self, path: str, value: Any, message: Optional[str] = None) -> CommitResult:
        """
        Create or overwrite the JSON file at path.

        The value is encoded before anything is sent, so a ValidationError
        leaves the store untouched.
        """
        content = encode_json(value)
        existing = self.fetch(path)
        sha = existing.sha if existing else None
        return self._write(path, content, message or f'Update {path}', sha)


def _commit_sha(resp) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    commit = data.get('commit')
    if not isinstance(commit, dict):
        return None
    return commit.get('sha')

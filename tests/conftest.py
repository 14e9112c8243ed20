"""Shared fixtures: an in-memory stand-in for the GitHub contents API."""

from __future__ import annotations

import base64
import hashlib
import json
from typing import Any
from urllib.parse import unquote

import pytest

from app import create_app
from settings import Settings


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def _wrap_base64(raw: bytes) -> str:
    # GitHub wraps the base64 content at 60 columns
    encoded = base64.b64encode(raw).decode("ascii")
    return "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60)) + "\n"


class FakeGitHub:
    """Duck-typed requests.Session that behaves like the contents API.

    Records every call in ``calls`` as (method, path, kwargs) so tests can
    assert on what reached the backend.
    """

    def __init__(self) -> None:
        self.files: dict[str, dict[str, str]] = {}
        self.calls: list[tuple[str, str, dict]] = []
        self.commits = 0
        self.get_status: int | None = None
        self.put_status: int | None = None
        self.omit_commit = False
        self.oversized = False
        self.raise_on: Exception | None = None

    @staticmethod
    def _path(url: str) -> str:
        return unquote(url.split("/contents/", 1)[1])

    def get(self, url: str, **kwargs) -> FakeResponse:
        path = self._path(url)
        self.calls.append(("GET", path, kwargs))
        if self.raise_on is not None:
            raise self.raise_on
        if self.get_status is not None:
            return FakeResponse(self.get_status, text='{"message": "Server Error"}')
        stored = self.files.get(path)
        if stored is None:
            return FakeResponse(404, {"message": "Not Found"})
        if self.oversized:
            # Contents API shape for files over 1 MB
            return FakeResponse(200, {
                "type": "file", "path": path, "sha": stored["sha"],
                "encoding": "none", "content": "",
            })
        return FakeResponse(200, {
            "type": "file",
            "path": path,
            "sha": stored["sha"],
            "encoding": "base64",
            "content": _wrap_base64(stored["raw"].encode("utf-8")),
        })

    def put(self, url: str, **kwargs) -> FakeResponse:
        path = self._path(url)
        self.calls.append(("PUT", path, kwargs))
        if self.raise_on is not None:
            raise self.raise_on
        if self.put_status is not None:
            return FakeResponse(self.put_status, text='{"message": "Rejected"}')

        body = kwargs["json"]
        existing = self.files.get(path)
        if existing is not None and body.get("sha") != existing["sha"]:
            return FakeResponse(409, {"message": f"{path} does not match {body.get('sha')}"})
        if existing is None and "sha" in body:
            return FakeResponse(422, {"message": "sha supplied for a new file"})

        raw = base64.b64decode(body["content"]).decode("utf-8")
        sha = hashlib.sha1(raw.encode("utf-8")).hexdigest()
        self.files[path] = {"sha": sha, "raw": raw, "message": body["message"]}
        self.commits += 1
        commit_sha = hashlib.sha1(f"commit-{self.commits}".encode()).hexdigest()

        payload: dict[str, Any] = {"content": {"path": path, "sha": sha}}
        if not self.omit_commit:
            payload["commit"] = {"sha": commit_sha, "message": body["message"]}
        return FakeResponse(201 if existing is None else 200, payload)

    def stored_json(self, path: str) -> Any:
        return json.loads(self.files[path]["raw"])

    def methods(self) -> list[str]:
        return [method for method, _, _ in self.calls]


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def settings() -> Settings:
    return Settings(token="ghp_test", owner="mwz", repo="onboarding-saves")


@pytest.fixture
def client(settings, github):
    app = create_app(settings, session=github)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def make_client(github):
    """Build a test client for custom settings on the shared fake backend."""
    def _make(settings: Settings):
        app = create_app(settings, session=github)
        app.config["TESTING"] = True
        return app.test_client()
    return _make

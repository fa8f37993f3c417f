"""Shared fixtures: an isolated home directory and a fake Wiki.js server."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest

from wikit.api import Page
from wikit.core import reset_instance_context


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep tests away from the real home directory and environment."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in list(os.environ):
        if name.endswith(("_API_URL", "_API_KEY")) or name.startswith("WIKIT_"):
            monkeypatch.delenv(name, raising=False)
    reset_instance_context()
    yield work
    reset_instance_context()


SAMPLE_PAGES = [
    {"id": 1, "path": "home", "title": "Home", "locale": "en", "isPublished": True},
    {"id": 2, "path": "docs", "title": "Docs", "locale": "en", "isPublished": True},
    {"id": 3, "path": "docs/setup", "title": "Setup Guide", "locale": "en", "isPublished": True},
    {"id": 4, "path": "docs/setup/linux", "title": "Linux", "locale": "en", "isPublished": False},
    {"id": 5, "path": "docs/faq", "title": "FAQ", "locale": "de", "isPublished": True},
]


class FakeWiki:
    """In-memory GraphQL endpoint for httpx.MockTransport."""

    def __init__(self, pages: list[dict[str, Any]] | None = None) -> None:
        self.pages = [dict(page) for page in (pages if pages is not None else SAMPLE_PAGES)]
        self.requests: list[dict[str, Any]] = []
        self.failing_deletes: set[int] = set()
        self.status_code = 200
        self.unreachable = False
        self.raw_body: str | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        body = json.loads(request.content)
        self.requests.append({"body": body, "headers": dict(request.headers)})
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream failure")
        if self.raw_body is not None:
            return httpx.Response(200, text=self.raw_body)
        query = body["query"]
        variables = body.get("variables") or {}
        return httpx.Response(200, json=self._answer(query, variables))

    def _answer(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        if "singleByPath" in query:
            for page in self.pages:
                if page["path"] == variables["path"] and page["locale"] == variables["locale"]:
                    full = dict(page, content=f"# {page['title']}", editor="markdown", tags=[])
                    return {"data": {"pages": {"singleByPath": full}}}
            return {"data": {"pages": {"singleByPath": None}}}
        if "delete(id:" in query:
            page_id = variables["id"]
            if page_id in self.failing_deletes:
                return {"data": {"pages": {"delete": {"responseResult": {
                    "succeeded": False, "errorCode": 6003, "message": "Page is locked"}}}}}
            self.pages = [page for page in self.pages if page["id"] != page_id]
            return {"data": {"pages": {"delete": {"responseResult": {
                "succeeded": True, "errorCode": 0, "message": "Page deleted"}}}}}
        if "move(id:" in query:
            return {"data": {"pages": {"move": {"responseResult": {
                "succeeded": True, "errorCode": 0, "message": "Page moved"}}}}}
        if "render(id:" in query:
            return {"data": {"pages": {"render": {"responseResult": {
                "succeeded": True, "errorCode": 0}}}}}
        if "list(" in query:
            return {"data": {"pages": {"list": self.pages}}}
        if "system" in query:
            return {"data": {"system": {"info": {
                "currentVersion": "2.5.300", "platform": "linux", "hostname": "wiki"}}}}
        if "site" in query:
            return {"data": {"site": {"config": {"title": "Team Wiki", "host": "https://wiki.test"}}}}
        return {"errors": [{"message": "Unknown query"}]}

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_wiki() -> FakeWiki:
    return FakeWiki()


@pytest.fixture
def write_config(isolated_env: Path) -> Callable[[str], Path]:
    """Write a wikit.toml in the working directory."""

    def _write(content: str) -> Path:
        path = isolated_env / "wikit.toml"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def sample_pages() -> list[Page]:
    return [Page.model_validate(item) for item in SAMPLE_PAGES]

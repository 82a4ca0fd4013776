from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from readmegen.schemas.readme import RepositoryMetadata
from readmegen.services.github.client import GitHubClient

REPO_INFO = {
    "name": "widget",
    "description": "A widget.",
    "default_branch": "trunk",
    "homepage": "",
    "topics": ["widgets", "tools"],
    "license": {"spdx_id": "MIT", "name": "MIT License"},
}

LANGUAGES = {"Python": 12000, "Shell": 300}

TREE = {
    "sha": "abc",
    "truncated": False,
    "tree": [
        {"path": "README.md", "type": "blob"},
        {"path": "src", "type": "tree"},
        {"path": "src/widget.py", "type": "blob"},
        {"path": "vendor/lib", "type": "commit"},
    ],
}


class FakeGitHub:
    """Routes GitHub API paths to canned JSON and records every request."""

    def __init__(
        self,
        repo: Optional[Dict[str, Any]] = None,
        languages: Optional[Dict[str, int]] = None,
        tree: Optional[Dict[str, Any]] = None,
        failures: Optional[Dict[str, int]] = None,
        failure_body: str = json.dumps({"message": "Not Found"}),
    ) -> None:
        self.repo = REPO_INFO if repo is None else repo
        self.languages = LANGUAGES if languages is None else languages
        self.tree = TREE if tree is None else tree
        self.failures = failures or {}
        self.failure_body = failure_body
        self.requests: List[httpx.Request] = []

    def _route(self, path: str) -> str:
        if "/git/trees/" in path:
            return "tree"
        if path.endswith("/languages"):
            return "languages"
        return "repo"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        kind = self._route(request.url.path)
        if kind in self.failures:
            return httpx.Response(self.failures[kind], text=self.failure_body)
        body = {"repo": self.repo, "languages": self.languages, "tree": self.tree}[kind]
        return httpx.Response(200, json=body)

    def client(self, token: str = "gh-token") -> GitHubClient:
        return GitHubClient(
            token=token,
            base_url="https://api.github.test",
            transport=httpx.MockTransport(self.handler),
        )


class FakeLLM:
    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def generate_json(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def make_metadata() -> Callable[..., RepositoryMetadata]:
    def _make(**overrides: Any) -> RepositoryMetadata:
        data: Dict[str, Any] = {
            "owner": "acme",
            "name": "widget",
            "display_name": "widget",
            "description": "A widget.",
            "languages": ["Python", "Shell"],
            "license": "MIT",
            "default_branch": "main",
            "homepage": None,
            "topics": [],
            "path_tree": ["README.md", "src", "src/widget.py"],
        }
        data.update(overrides)
        return RepositoryMetadata(**data)

    return _make

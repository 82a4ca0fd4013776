from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from readmegen.core.config import settings


class GitHubAPIError(Exception):
    def __init__(self, status: Optional[int], body: str, message: Optional[str] = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message or f"HTTP {status}: {body}")


@dataclass
class GitHubRateLimit:
    remaining: Optional[int]
    reset_epoch: Optional[int]


class GitHubClient:
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base = (base_url or settings.GITHUB_API_BASE).rstrip("/")
        self.token = token or settings.GITHUB_TOKEN
        self.timeout = timeout or settings.GITHUB_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "readme-generator-bot/0.1",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _rate_limit(self, resp: httpx.Response) -> GitHubRateLimit:
        def _to_int(v: Optional[str]) -> Optional[int]:
            try:
                return int(v) if v is not None else None
            except ValueError:
                return None

        remaining = _to_int(resp.headers.get("x-ratelimit-remaining"))
        reset = _to_int(resp.headers.get("x-ratelimit-reset"))
        return GitHubRateLimit(remaining=remaining, reset_epoch=reset)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url, headers=self._headers(), params=params)
        except httpx.HTTPError as e:
            # timeouts, connection failures; no status to report
            raise GitHubAPIError(None, "", f"request to {path} failed: {e!r}") from e

        if resp.status_code in (403, 429):
            rl = self._rate_limit(resp)
            raise GitHubAPIError(
                resp.status_code,
                resp.text,
                f"HTTP {resp.status_code} {resp.reason_phrase}: "
                f"remaining={rl.remaining} reset={rl.reset_epoch} {resp.text}",
            )

        if not resp.is_success:
            raise GitHubAPIError(
                resp.status_code,
                resp.text,
                f"HTTP {resp.status_code} {resp.reason_phrase}: {resp.text}",
            )

        try:
            return resp.json()
        except ValueError as e:
            raise GitHubAPIError(
                resp.status_code,
                resp.text,
                f"HTTP {resp.status_code}: response is not JSON: {resp.text}",
            ) from e

    def _repo_path(self, owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    async def get_repo(self, owner: str, repo: str) -> Dict[str, Any]:
        return await self._get(self._repo_path(owner, repo))

    async def get_languages(self, owner: str, repo: str) -> Dict[str, int]:
        # byte counts keyed by language, largest first
        return await self._get(f"{self._repo_path(owner, repo)}/languages")

    async def get_tree(self, owner: str, repo: str, tree_ish: str, recursive: bool = True) -> Dict[str, Any]:
        # a branch name is accepted where a tree sha is expected
        params = {"recursive": "1"} if recursive else None
        return await self._get(
            f"{self._repo_path(owner, repo)}/git/trees/{quote(tree_ish, safe='')}",
            params=params,
        )

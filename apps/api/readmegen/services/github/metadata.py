from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from loguru import logger

from readmegen.schemas.readme import RepositoryMetadata, RepositoryReference
from readmegen.services.github.client import GitHubAPIError, GitHubClient

# Paths kept for the rendered Project Structure section.
MAX_TREE_ENTRIES = 500

TREE_ENTRY_TYPES = ("blob", "tree")


def normalize_license(repo_info: Dict[str, Any]) -> Optional[str]:
    lic = repo_info.get("license") or {}
    return lic.get("spdx_id") or lic.get("name") or None


def collect_tree_paths(tree: Dict[str, Any], limit: int = MAX_TREE_ENTRIES) -> List[str]:
    """
    Keep file and directory paths in provider order, stop at `limit`.
    Submodule entries (type "commit") are skipped.
    """
    paths: List[str] = []
    for it in tree.get("tree") or []:
        if len(paths) >= limit:
            break
        if it.get("type") not in TREE_ENTRY_TYPES:
            continue
        path = it.get("path")
        if path:
            paths.append(path)
    return paths


async def fetch_repo_metadata(
    ref: RepositoryReference,
    token: str,
    client: Optional[GitHubClient] = None,
) -> RepositoryMetadata:
    """
    Fetch repo info, language breakdown and the recursive tree of the
    default branch. Any failing call raises GitHubAPIError; there is no
    partial result.
    """
    gh = client or GitHubClient(token=token)

    repo_info, langs = await asyncio.gather(
        gh.get_repo(ref.owner, ref.name),
        gh.get_languages(ref.owner, ref.name),
    )

    for label, payload in (("repo", repo_info), ("languages", langs)):
        if not isinstance(payload, dict):
            raise GitHubAPIError(None, str(payload), f"unexpected {label} payload for {ref.full_name}")

    default_branch = repo_info.get("default_branch") or "main"
    tree = await gh.get_tree(ref.owner, ref.name, default_branch)
    if not isinstance(tree, dict):
        raise GitHubAPIError(None, str(tree), f"unexpected tree payload for {ref.full_name}")

    path_tree = collect_tree_paths(tree)
    if tree.get("truncated"):
        logger.warning("GitHub truncated the tree for {}; rendering partial structure", ref.full_name)

    return RepositoryMetadata(
        owner=ref.owner,
        name=ref.name,
        display_name=repo_info.get("name") or ref.name,
        description=repo_info.get("description") or None,
        languages=list((langs or {}).keys()),
        license=normalize_license(repo_info),
        default_branch=default_branch,
        homepage=repo_info.get("homepage") or None,
        topics=list(repo_info.get("topics") or []),
        path_tree=path_tree,
    )

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from loguru import logger

from readmegen.core.errors import ConfigurationError, InputError, UpstreamError, truncate_message
from readmegen.schemas.readme import (
    GenerateReadmeResponse,
    NarrativeSections,
    NonFatalError,
    RepositoryMetadata,
)
from readmegen.services.github.client import GitHubAPIError, GitHubClient
from readmegen.services.github.metadata import fetch_repo_metadata
from readmegen.services.narrative.generator import JSONLLM, generate_sections
from readmegen.services.readme.builder import assemble
from readmegen.utils.repo_url import parse_repo_url

MISSING_GEMINI_API_KEY = "MISSING_GEMINI_API_KEY"


class Stage(str, Enum):
    START = "start"
    PARSED = "parsed"
    METADATA_FETCHED = "metadata_fetched"
    NARRATIVE_ATTEMPTED = "narrative_attempted"
    ASSEMBLED = "assembled"
    RESPONDED = "responded"
    REJECTED_INPUT = "rejected_input"
    UPSTREAM_FAILED = "upstream_failed"


def _configured(secret: Optional[str]) -> bool:
    return bool(secret and secret.strip())


async def generate_readme(
    repo_url: Optional[str],
    *,
    github_token: Optional[str],
    gemini_api_key: Optional[str],
    github: Optional[GitHubClient] = None,
    llm: Optional[JSONLLM] = None,
) -> GenerateReadmeResponse:
    """
    Run one README request end to end.

    Raises InputError, ConfigurationError or UpstreamError for fatal
    failures. Narrative problems never raise; they are reported in
    `errors` next to a complete document.
    """
    stage = Stage.START
    errors: List[NonFatalError] = []

    url = (repo_url or "").strip()
    if not url:
        logger.info("readme stage={} -> {}: empty repo url", stage.value, Stage.REJECTED_INPUT.value)
        raise InputError("Repository URL is required.", code="MISSING_REPO_URL")
    try:
        ref = parse_repo_url(url)
    except InputError:
        logger.info("readme stage={} -> {}: {!r}", stage.value, Stage.REJECTED_INPUT.value, url[:200])
        raise

    if not _configured(github_token):
        raise ConfigurationError()
    if not _configured(gemini_api_key):
        errors.append(
            NonFatalError(
                code=MISSING_GEMINI_API_KEY,
                message="Server missing GEMINI_API_KEY; generated content may be limited.",
            )
        )

    stage = Stage.PARSED
    logger.info("readme stage={} repo={}", stage.value, ref.full_name)

    try:
        meta: RepositoryMetadata = await fetch_repo_metadata(ref, github_token, client=github)
    except GitHubAPIError as e:
        logger.warning("readme stage={} repo={} status={}", Stage.UPSTREAM_FAILED.value, ref.full_name, e.status)
        raise UpstreamError(truncate_message(f"GitHub API error: {e}")) from e

    stage = Stage.METADATA_FETCHED
    logger.info(
        "readme stage={} repo={} languages={} paths={}",
        stage.value, ref.full_name, len(meta.languages), len(meta.path_tree),
    )

    sections = NarrativeSections()
    if _configured(gemini_api_key):
        result = await generate_sections(meta, gemini_api_key, llm=llm)
        sections = result.sections
        if result.error:
            errors.append(result.error)
        stage = Stage.NARRATIVE_ATTEMPTED
        logger.info("readme stage={} repo={} ok={}", stage.value, ref.full_name, result.error is None)

    document, file_name = assemble(meta, sections)
    stage = Stage.ASSEMBLED
    logger.info("readme stage={} repo={} bytes={}", stage.value, ref.full_name, len(document))

    response = GenerateReadmeResponse(
        document=document,
        file_name=file_name,
        metadata=meta,
        filled_flags=sections.filled_flags(),
        errors=errors or None,
    )
    logger.info("readme stage={} repo={} warnings={}", Stage.RESPONDED.value, ref.full_name, len(errors))
    return response

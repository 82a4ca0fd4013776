from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Protocol

from loguru import logger

from readmegen.core.errors import GenerationError, truncate_message
from readmegen.schemas.readme import (
    NarrativeResult,
    NarrativeSections,
    NonFatalError,
    RepositoryMetadata,
)
from readmegen.services.llm.gemini_chat import GeminiChatLLM
from readmegen.services.narrative.prompt import SECTION_KEYS, build_prompt

GEMINI_API_ERROR = "GEMINI_API_ERROR"

_FENCED_JSON_RE = re.compile(r"^```(?:json)?\s*\n(.*)\n```$", re.DOTALL | re.IGNORECASE)


class JSONLLM(Protocol):
    async def generate_json(self, prompt: str) -> str: ...


def _strip_fence(text: str) -> str:
    m = _FENCED_JSON_RE.match(text.strip())
    return m.group(1) if m else text


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_text_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str)]


def parse_sections(text: str) -> Optional[NarrativeSections]:
    """
    Parse the model reply into NarrativeSections.

    Returns None when the reply is not a JSON object at all. Otherwise each
    key is checked on its own and a badly typed value only drops that key.
    """
    try:
        parsed = json.loads(_strip_fence(text or ""))
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    fields: Dict[str, Any] = {}
    for key in SECTION_KEYS:
        value = parsed.get(key)
        coerced = _as_text_list(value) if key == "features" else _as_text(value)
        if coerced is not None:
            fields[key] = coerced
    return NarrativeSections(**fields)


async def _request_sections(meta: RepositoryMetadata, llm: JSONLLM) -> NarrativeSections:
    text = await llm.generate_json(build_prompt(meta))
    sections = parse_sections(text)
    if sections is None:
        raise GenerationError("Gemini returned an unparseable response.")
    return sections


async def generate_sections(
    meta: RepositoryMetadata,
    api_key: Optional[str],
    llm: Optional[JSONLLM] = None,
) -> NarrativeResult:
    """
    Ask Gemini for the narrative sections. Never raises: every failure
    comes back as empty sections plus a GEMINI_API_ERROR entry.
    """
    try:
        model = llm or GeminiChatLLM(api_key=api_key)
        sections = await _request_sections(meta, model)
    except GenerationError as e:
        logger.warning("Narrative generation for {}/{} unusable: {}", meta.owner, meta.name, e)
        return NarrativeResult(error=NonFatalError(code=GEMINI_API_ERROR, message=str(e)))
    except Exception as e:
        logger.warning("Gemini call for {}/{} failed: {!r}", meta.owner, meta.name, e)
        return NarrativeResult(
            error=NonFatalError(
                code=GEMINI_API_ERROR,
                message=truncate_message(f"Gemini API error: {e}"),
            )
        )

    return NarrativeResult(sections=sections)

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from readmegen.schemas.readme import NarrativeSections, RepositoryMetadata

NOT_SPECIFIED = "Not specified."
FENCE = "```"


def _text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _bullets(items: List[str]) -> str:
    items = [s.strip() for s in items if s and s.strip()]
    return "\n".join(f"- {s}" for s in (items or [NOT_SPECIFIED]))


def _fenced(body: str, lang: str = "") -> str:
    return f"{FENCE}{lang}\n{body}\n{FENCE}"


def _code(value: Optional[str], lang: str = "") -> str:
    # model output may already carry its own fences; the placeholder is never fenced
    text = _text(value) or NOT_SPECIFIED
    if FENCE in text or text == NOT_SPECIFIED:
        return text
    return _fenced(text, lang)


def _description(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _text(gen.description) or _text(meta.description) or NOT_SPECIFIED


def _features(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _bullets(gen.features or [])


def _installation(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _code(gen.installation, "bash")


def _usage(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _code(gen.usage)


def _tech_stack(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _bullets(meta.languages)


def _project_structure(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    if not meta.path_tree:
        return NOT_SPECIFIED
    return _fenced("\n".join(meta.path_tree))


def _license(meta: RepositoryMetadata, gen: NarrativeSections) -> str:
    return _text(meta.license) or NOT_SPECIFIED


Resolver = Callable[[RepositoryMetadata, NarrativeSections], str]

# Every heading is always rendered, in this order.
SECTIONS: Tuple[Tuple[str, Resolver], ...] = (
    ("Description", _description),
    ("Features", _features),
    ("Installation Guide", _installation),
    ("Usage", _usage),
    ("Tech Stack", _tech_stack),
    ("Project Structure", _project_structure),
    ("License Information", _license),
)


def readme_title(meta: RepositoryMetadata) -> str:
    return _text(meta.display_name) or f"{meta.owner}/{meta.name}"


def readme_file_name(meta: RepositoryMetadata) -> str:
    return f"{meta.name}-README.md"


def build_readme(meta: RepositoryMetadata, generated: Optional[NarrativeSections] = None) -> str:
    gen = generated or NarrativeSections()
    parts: List[str] = [f"# {readme_title(meta)}"]
    for heading, resolve in SECTIONS:
        parts.append("")
        parts.append(f"## {heading}")
        parts.append(resolve(meta, gen))
    parts.append("")
    return "\n".join(parts)


def assemble(meta: RepositoryMetadata, generated: Optional[NarrativeSections] = None) -> Tuple[str, str]:
    return build_readme(meta, generated), readme_file_name(meta)

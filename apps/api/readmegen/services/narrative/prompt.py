from __future__ import annotations

import json

from readmegen.schemas.readme import RepositoryMetadata

# Tree entries shown to the model; smaller than the rendered tree cap
# because it is spent from the prompt budget.
MAX_PROMPT_TREE_ENTRIES = 120

SECTION_KEYS = ("description", "features", "installation", "usage")


def metadata_excerpt(meta: RepositoryMetadata) -> dict:
    return {
        "name": meta.display_name,
        "description": meta.description,
        "languages": list(meta.languages),
        "license": meta.license,
        "defaultBranch": meta.default_branch,
        "homepage": meta.homepage,
        "topics": list(meta.topics),
        "treePreview": list(meta.path_tree[:MAX_PROMPT_TREE_ENTRIES]),
    }


def build_prompt(meta: RepositoryMetadata) -> str:
    excerpt = json.dumps(metadata_excerpt(meta), indent=2, ensure_ascii=False)
    return f"""You are helping to create a high-quality README.md for a GitHub repository using the template sections:
Description, Features, Installation Guide, Usage.
Given the repository context below, output a concise JSON object with keys:
{{"description": string, "features": string[], "installation": string, "usage": string}}.
Rules:
- Keep content factual based on provided metadata; avoid hallucinating specific commands that are unlikely.
- Installation should be actionable; if unknown, provide generic steps based on common stacks.
- Keep features as 4-8 bullet points, short and value-focused.
- Usage can include minimal examples in code fences.
- Do not include markdown headings in values.
Repository metadata:
{excerpt}"""

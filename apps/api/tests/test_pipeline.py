import json

import httpx
import pytest

from conftest import FakeGitHub, FakeLLM
from readmegen.core.errors import ConfigurationError, InputError, UpstreamError
from readmegen.services.github.client import GitHubClient
from readmegen.services.readme.pipeline import generate_readme

URL = "https://github.com/acme/widget"

NARRATIVE = json.dumps(
    {
        "description": "Generated description.",
        "features": ["Fast", "Small"],
        "installation": "pip install widget",
        "usage": "widget run",
    }
)


def _section(doc: str, heading: str) -> str:
    body = doc.split(f"## {heading}\n", 1)[1]
    return body.split("\n## ", 1)[0].strip()


@pytest.mark.asyncio
async def test_full_success(fake_github):
    llm = FakeLLM(NARRATIVE)
    result = await generate_readme(
        URL, github_token="gh", gemini_api_key="gk", github=fake_github.client(), llm=llm
    )

    assert result.errors is None
    assert result.file_name == "widget-README.md"
    assert result.metadata.default_branch == "trunk"
    assert result.filled_flags == {"description": True, "features": True, "installation": True, "usage": True}
    assert _section(result.document, "Description") == "Generated description."
    assert result.document.count("\n## ") == 7

    payload = result.to_payload()
    assert "errors" not in payload
    assert payload["fileName"] == "widget-README.md"
    assert payload["filledFlags"]["usage"] is True
    assert payload["metadata"]["displayName"] == "widget"
    assert payload["metadata"]["pathTree"] == ["README.md", "src", "src/widget.py"]


@pytest.mark.asyncio
async def test_metadata_description_used_when_narrative_has_none(fake_github):
    llm = FakeLLM(json.dumps({"features": ["Fast"]}))
    result = await generate_readme(URL, github_token="gh", gemini_api_key="gk", github=fake_github.client(), llm=llm)

    assert _section(result.document, "Description") == "A widget."
    assert result.filled_flags["description"] is False
    assert result.filled_flags["features"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [None, "", "   "])
async def test_missing_url(raw, fake_github):
    with pytest.raises(InputError) as exc:
        await generate_readme(raw, github_token="gh", gemini_api_key="gk", github=fake_github.client())
    assert exc.value.code == "MISSING_REPO_URL"
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_invalid_url_makes_no_network_calls(fake_github):
    llm = FakeLLM(NARRATIVE)
    with pytest.raises(InputError) as exc:
        await generate_readme("not-a-url", github_token="gh", gemini_api_key="gk", github=fake_github.client(), llm=llm)
    assert exc.value.code == "INVALID_REPO_URL"
    assert fake_github.requests == []
    assert llm.prompts == []


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "  "])
async def test_missing_github_token_is_fatal(token, fake_github):
    with pytest.raises(ConfigurationError) as exc:
        await generate_readme(URL, github_token=token, gemini_api_key="gk", github=fake_github.client())
    assert exc.value.code == "MISSING_GITHUB_TOKEN"
    assert exc.value.status_code == 500
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_github_404_is_upstream_error():
    gh = FakeGitHub(failures={"repo": 404})
    with pytest.raises(UpstreamError) as exc:
        await generate_readme(URL, github_token="gh", gemini_api_key="gk", github=gh.client(), llm=FakeLLM(NARRATIVE))
    assert exc.value.code == "GITHUB_API_ERROR"
    assert exc.value.status_code == 502
    assert exc.value.message.startswith("GitHub API error: HTTP 404")


@pytest.mark.asyncio
async def test_upstream_message_is_truncated():
    gh = FakeGitHub(failures={"tree": 500}, failure_body="x" * 5000)
    with pytest.raises(UpstreamError) as exc:
        await generate_readme(URL, github_token="gh", gemini_api_key=None, github=gh.client())
    assert len(exc.value.message) == 500


@pytest.mark.asyncio
async def test_missing_gemini_key_degrades(fake_github):
    llm = FakeLLM(NARRATIVE)
    result = await generate_readme(URL, github_token="gh", gemini_api_key=None, github=fake_github.client(), llm=llm)

    assert llm.prompts == []
    assert [e.code for e in result.errors] == ["MISSING_GEMINI_API_KEY"]
    assert result.filled_flags == {"description": False, "features": False, "installation": False, "usage": False}
    assert _section(result.document, "Description") == "A widget."
    for heading in ("Installation Guide", "Usage"):
        assert _section(result.document, heading) == "Not specified."
    assert _section(result.document, "Features") == "- Not specified."
    assert result.to_payload()["errors"] == [
        {"code": "MISSING_GEMINI_API_KEY", "message": "Server missing GEMINI_API_KEY; generated content may be limited."}
    ]


@pytest.mark.asyncio
async def test_gemini_failure_still_produces_document(fake_github):
    llm = FakeLLM(error=RuntimeError("503 unavailable"))
    result = await generate_readme(URL, github_token="gh", gemini_api_key="gk", github=fake_github.client(), llm=llm)

    assert [e.code for e in result.errors] == ["GEMINI_API_ERROR"]
    assert result.document.startswith("# widget\n")
    assert result.document.count("\n## ") == 7


@pytest.mark.asyncio
async def test_gemini_invalid_json_still_produces_document(fake_github):
    result = await generate_readme(
        URL, github_token="gh", gemini_api_key="gk", github=fake_github.client(), llm=FakeLLM("<html>")
    )
    assert [e.code for e in result.errors] == ["GEMINI_API_ERROR"]
    assert _section(result.document, "Usage") == "Not specified."


@pytest.mark.asyncio
async def test_empty_languages_and_tree():
    gh = FakeGitHub(languages={}, tree={"tree": []})
    result = await generate_readme(URL, github_token="gh", gemini_api_key=None, github=gh.client())

    assert _section(result.document, "Tech Stack") == "- Not specified."
    assert _section(result.document, "Project Structure") == "Not specified."


@pytest.mark.asyncio
async def test_github_timeout_is_upstream_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = GitHubClient(token="gh", base_url="https://api.github.test", transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError) as exc:
        await generate_readme(URL, github_token="gh", gemini_api_key=None, github=client)
    assert exc.value.status_code == 502
    assert exc.value.message.startswith("GitHub API error: ")

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateReadmeRequest(CamelModel):
    repo_url: Optional[str] = Field(None, description="Public GitHub repository URL")


class RepositoryReference(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryMetadata(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    owner: str
    name: str
    display_name: str
    description: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    license: Optional[str] = None
    default_branch: str
    homepage: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    path_tree: List[str] = Field(default_factory=list)


class NarrativeSections(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    description: Optional[str] = None
    features: Optional[List[str]] = None
    installation: Optional[str] = None
    usage: Optional[str] = None

    def filled_flags(self) -> Dict[str, bool]:
        return {
            "description": bool(self.description and self.description.strip()),
            "features": any(f.strip() for f in (self.features or [])),
            "installation": bool(self.installation and self.installation.strip()),
            "usage": bool(self.usage and self.usage.strip()),
        }


class NonFatalError(CamelModel):
    code: str
    message: str


class NarrativeResult(CamelModel):
    sections: NarrativeSections = Field(default_factory=NarrativeSections)
    error: Optional[NonFatalError] = None


class GenerateReadmeResponse(CamelModel):
    document: str
    file_name: str
    metadata: RepositoryMetadata
    filled_flags: Dict[str, bool]
    errors: Optional[List[NonFatalError]] = None

    def to_payload(self) -> Dict[str, Any]:
        # `errors` is left out entirely when nothing went wrong
        data = self.model_dump(by_alias=True)
        if not self.errors:
            data.pop("errors", None)
        return data


class ErrorResponse(BaseModel):
    error: str
    code: str


class EnvCheckResponse(CamelModel):
    has_github: bool = Field(..., alias="hasGitHub")
    has_gemini: bool


class PingResponse(BaseModel):
    message: str

from fastapi import APIRouter

from readmegen.core.config import settings
from readmegen.schemas.readme import EnvCheckResponse, PingResponse


def _is_set(value: str | None) -> bool:
    return bool(value and value.strip())


router = APIRouter(tags=["health"])

@router.get("/health")
async def health():
    return {"status": "ok", "env": settings.ENV}

@router.get("/ping", response_model=PingResponse)
async def ping():
    return PingResponse(message=settings.PING_MESSAGE)

@router.get("/env-check", response_model=EnvCheckResponse)
async def env_check():
    return EnvCheckResponse(
        has_github=_is_set(settings.GITHUB_TOKEN),
        has_gemini=_is_set(settings.GEMINI_API_KEY),
    )

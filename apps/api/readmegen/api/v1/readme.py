from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from readmegen.core.config import settings
from readmegen.core.errors import InternalError, ReadmeGenError
from readmegen.schemas.readme import ErrorResponse, GenerateReadmeRequest
from readmegen.services.readme.pipeline import generate_readme

router = APIRouter(tags=["readme"])


@router.post(
    "/generate-readme",
    responses={
        200: {"description": "README document, file name, metadata, filled flags; `errors` only when warnings occurred"},
        400: {"model": ErrorResponse, "description": "Missing or invalid repository URL"},
        500: {"model": ErrorResponse, "description": "Server misconfiguration or unexpected error"},
        502: {"model": ErrorResponse, "description": "GitHub API error"},
    },
)
async def generate_readme_route(payload: GenerateReadmeRequest):
    try:
        result = await generate_readme(
            payload.repo_url,
            github_token=settings.GITHUB_TOKEN,
            gemini_api_key=settings.GEMINI_API_KEY,
        )
    except ReadmeGenError:
        raise
    except Exception:
        logger.exception("Unexpected failure while generating README")
        raise InternalError()

    return JSONResponse(content=result.to_payload())

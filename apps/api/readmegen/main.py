from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from readmegen.core.config import settings
from readmegen.core.errors import InputError, ReadmeGenError
from readmegen.core.logging import setup_logging
from readmegen.schemas.readme import ErrorResponse

from readmegen.api.v1.health import router as health_router
from readmegen.api.v1.readme import router as readme_router

logger = setup_logging()


def _input_error(exc: RequestValidationError) -> InputError:
    for e in exc.errors():
        loc = tuple(e.get("loc") or ())
        if e.get("type") == "missing" and loc in (("body",), ("body", "repoUrl")):
            return InputError("Repository URL is required.", code="MISSING_REPO_URL")
    return InputError()


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME)

    @app.exception_handler(ReadmeGenError)
    async def _readme_error(_: Request, exc: ReadmeGenError):
        logger.info("Request failed code={} status={}", exc.code, exc.status_code)
        body = ErrorResponse(error=exc.message, code=exc.code)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        # keep malformed bodies in the same {error, code} envelope
        err = _input_error(exc)
        return await _readme_error(request, err)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(readme_router, prefix="/api/v1")

    return app

app = create_app()

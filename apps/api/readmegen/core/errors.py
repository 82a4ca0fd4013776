from __future__ import annotations

from typing import Optional


# Upstream messages are folded into user-facing errors; keep them bounded.
MAX_ERROR_MESSAGE_CHARS = 500


def truncate_message(message: str, limit: int = MAX_ERROR_MESSAGE_CHARS) -> str:
    return message[:limit]


class ReadmeGenError(Exception):
    """
    Fatal pipeline error. Carries the wire-level code and HTTP status
    the API layer answers with.
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "Unexpected server error."

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None) -> None:
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class InputError(ReadmeGenError):
    code = "INVALID_REPO_URL"
    status_code = 400
    default_message = "Invalid GitHub repository URL. Expected https://github.com/<owner>/<repo>"


class ConfigurationError(ReadmeGenError):
    code = "MISSING_GITHUB_TOKEN"
    status_code = 500
    default_message = "Server missing GITHUB_TOKEN environment variable."


class UpstreamError(ReadmeGenError):
    code = "GITHUB_API_ERROR"
    status_code = 502
    default_message = "GitHub API error"


class InternalError(ReadmeGenError):
    pass


class GenerationError(Exception):
    """Narrative stage failure; never leaves the narrative generator."""

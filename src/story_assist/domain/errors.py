"""Typed failures raised while requesting a continuation."""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for classified generation failures."""

    code = "generation_error"


class UserInputError(GenerationError):
    """Raised when the submitted text is empty or whitespace only."""

    code = "user_input"


class NetworkError(GenerationError):
    """Raised when the provider is unreachable or the request is aborted."""

    code = "network_error"


class HTTPError(GenerationError):
    """Raised when the provider answers with a non-success status."""

    code = "http_error"

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"HTTP error! status: {status}")


class MalformedResponseError(GenerationError):
    """Raised when a success response carries no extractable reply text."""

    code = "malformed_response"


class UnknownError(GenerationError):
    """Raised for failures that fit no other category."""

    code = "unknown_error"

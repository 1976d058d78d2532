"""Errors surfaced to callers of the ask endpoint.

Each error carries the HTTP status and the public message returned in the
``{"error": ...}`` body. Upstream details stay in the logs.
"""
from __future__ import annotations

from typing import Optional


class AskError(Exception):
    """Base class for errors reported to the client."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MethodNotAllowed(AskError):
    status_code = 405
    message = "Method not allowed"


class InvalidInput(AskError):
    status_code = 400
    message = "Missing question (string expected)"


class ConfigurationError(AskError):
    status_code = 500
    message = "OpenAI API key not configured (OPENAI_API_KEY)"


class UpstreamError(AskError):
    status_code = 502
    message = "OpenAI API returned an error"


class InternalError(AskError):
    status_code = 500
    message = "Internal server error"

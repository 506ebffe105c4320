from __future__ import annotations

from typing import Any

from .llm.transport import Failure, FailureKind

GENERIC_STATUS_MESSAGE = "Request failed"
UNKNOWN_ERROR = "Unknown Error"


class TextActionError(Exception):
    """Terminal failure of one invocation; ``message`` is what the user sees."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(ValueError):
    pass


class MalformedResponse(ValueError):
    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


def api_error_message(body: Any) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        return GENERIC_STATUS_MESSAGE
    if isinstance(body, str):
        return body
    return GENERIC_STATUS_MESSAGE


def classify(failure: Any) -> str:
    """Turn any failure of the pipeline into the single user-facing message."""
    if isinstance(failure, Failure):
        if failure.kind is FailureKind.STATUS:
            return f"API Error {failure.status}: {api_error_message(failure.body)}"
        if failure.message:
            return f"Network/Error: {failure.message}"
        return UNKNOWN_ERROR
    if isinstance(failure, ConfigError):
        return str(failure)
    if isinstance(failure, BaseException) and str(failure):
        return f"Network/Error: {failure}"
    return UNKNOWN_ERROR


def report_failure(message: str, events=None, console=None) -> None:
    """
    Record the classified message on the diagnostic channel. Errors raised
    while reporting are dropped so the caller can still raise the original.
    """
    try:
        if events is not None:
            events.emit("action.error", {"message": message}, level="error")
        if console is not None:
            console.print(message, style="red", markup=False, highlight=False)
    except Exception:
        pass


def fail(failure: Any, events=None, console=None) -> TextActionError:
    """Classify and report ``failure``; the caller raises the returned error."""
    message = classify(failure)
    report_failure(message, events=events, console=console)
    return TextActionError(message)

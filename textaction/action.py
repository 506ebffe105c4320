from __future__ import annotations

from typing import Callable, Optional

from .errors import ConfigError, MalformedResponse, TextActionError, fail
from .events import EventBus
from .llm.reply import extract_reply
from .llm.transport import TransportResult, build_headers, post_json
from .options import APP_REFERER, APP_TITLE, OPENROUTER_API_URL, REQUEST_TIMEOUT_MS, RequestOptions
from .prompts import build_request
from .router import route
from .sinks.base import OutputSink
from .utils import preview_body

MISSING_KEY_MESSAGE = "Settings error: API Key is required"


def run_action(
    input_text: str,
    options: RequestOptions,
    sink: OutputSink,
    *,
    events: Optional[EventBus] = None,
    console=None,
    post: Optional[Callable[..., TransportResult]] = None,
    api_url: str = OPENROUTER_API_URL,
    timeout_ms: int = REQUEST_TIMEOUT_MS,
    referer: str = APP_REFERER,
    title: str = APP_TITLE,
) -> str:
    """
    One invocation: build the request, make the single HTTP call, extract the
    reply and hand it to the sink selected by ``options.response_handling``.

    Returns the reply. Any failure is classified, reported to ``events`` and
    ``console``, and raised as TextActionError.
    """
    events = events if events is not None else EventBus()
    post = post or post_json

    api_key = (options.api_key or "").strip()
    if not api_key:
        exc = ConfigError(MISSING_KEY_MESSAGE)
        raise fail(exc, events=events, console=console) from exc

    request = build_request(input_text, options)
    events.emit(
        "request.start",
        {
            "url": api_url,
            "model": request.model,
            "messages": len(request.messages),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "timeout_ms": timeout_ms,
        },
    )

    # everything from the request to the sink call ends in one classified message
    try:
        result = post(api_url, request.to_payload(), build_headers(api_key, referer, title), timeout_ms)
        if not result.ok:
            events.emit(
                "request.end",
                {
                    "ok": False,
                    "kind": result.kind.value,
                    "status": result.status,
                    "latency_ms": result.latency_ms,
                    "detail": result.detail,
                    "body": preview_body(result.body),
                },
                level="warn",
            )
            raise fail(result, events=events, console=console)
        events.emit("request.end", {"ok": True, "status": result.status, "latency_ms": result.latency_ms})

        try:
            reply = extract_reply(result.body)
        except MalformedResponse as exc:
            events.emit("reply.invalid", {"field": exc.field, "body": preview_body(result.body)}, level="warn")
            raise fail(exc, events=events, console=console) from exc
        events.emit("reply.extracted", {"chars": len(reply)})

        route(options.response_handling, reply, input_text, sink)
    except TextActionError:
        raise
    except Exception as exc:
        events.emit("action.exception", {"type": type(exc).__name__, "detail": str(exc)}, level="warn")
        raise fail(exc, events=events, console=console) from exc
    events.emit("reply.routed", {"mode": options.response_handling, "sink": getattr(sink, "name", type(sink).__name__)})
    return reply

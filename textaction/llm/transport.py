from __future__ import annotations

import json
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import requests
from urllib3.exceptions import ReadTimeoutError


class FailureKind(Enum):
    STATUS = "status"
    NETWORK = "network"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Success:
    status: int
    body: Any
    latency_ms: Optional[float] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    status: Optional[int] = None
    body: Any = None
    latency_ms: Optional[float] = None
    detail: str = ""  # underlying exception text, for the event log only

    @property
    def ok(self) -> bool:
        return False


TransportResult = Union[Success, Failure]


def build_headers(api_key: str, referer: str, title: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "HTTP-Referer": referer,
        "X-Title": title,
    }


def parse_body(text: str) -> Any:
    """JSON-decode a response body, keeping the raw text when it is not JSON."""
    if not text or not text.strip():
        return text or ""
    try:
        return json.loads(text)
    except ValueError:
        return text


def _is_timeout(exc: BaseException) -> bool:
    # a read timeout while the body streams in arrives wrapped in ConnectionError
    if isinstance(exc, requests.Timeout):
        return True
    return isinstance(exc, requests.ConnectionError) and any(isinstance(arg, ReadTimeoutError) for arg in exc.args)


def _send(outcome: queue.Queue, url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout_s: float) -> None:
    try:
        resp = requests.post(url, json=payload, headers=headers, timeout=timeout_s)
        outcome.put((resp.status_code, resp.text, None))
    except Exception as exc:
        outcome.put((None, None, exc))


def post_json(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout_ms: int) -> TransportResult:
    """
    Single POST, no retries. Network problems and non-2xx statuses come back
    as Failure values; this function does not raise for them.

    ``timeout_ms`` bounds the whole exchange, body included: the request runs
    on a daemon thread and is abandoned once the deadline passes.
    """
    timeout_s = timeout_ms / 1000.0
    outcome: queue.Queue = queue.Queue(maxsize=1)
    worker = threading.Thread(
        target=_send,
        args=(outcome, url, payload, headers, timeout_s),
        name="textaction-post",
        daemon=True,
    )
    start = time.time()
    worker.start()
    try:
        status, text, error = outcome.get(timeout=timeout_s)
    except queue.Empty:
        return Failure(
            FailureKind.TIMEOUT,
            "Request timeout",
            latency_ms=(time.time() - start) * 1000,
            detail=f"no complete response within {timeout_ms} ms",
        )
    latency_ms = (time.time() - start) * 1000

    if error is not None:
        if _is_timeout(error):
            return Failure(FailureKind.TIMEOUT, "Request timeout", latency_ms=latency_ms, detail=str(error))
        if isinstance(error, requests.RequestException):
            return Failure(FailureKind.NETWORK, "Network request failed", latency_ms=latency_ms, detail=str(error))
        raise error

    body = parse_body(text)
    if 200 <= status < 300:
        return Success(status=status, body=body, latency_ms=latency_ms)
    return Failure(
        FailureKind.STATUS,
        f"HTTP {status}",
        status=status,
        body=body,
        latency_ms=latency_ms,
    )

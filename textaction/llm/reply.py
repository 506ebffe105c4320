from __future__ import annotations

from typing import Any

from ..errors import MalformedResponse


def normalize_content(content: Any) -> str:
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
            else:
                parts.append("")
        return "".join(parts).strip()
    return ""


def extract_reply(body: Any) -> str:
    """
    Validate a chat-completion body and return the trimmed text of
    choices[0].message.content. Raises MalformedResponse on any other shape.
    """
    if not isinstance(body, dict):
        raise MalformedResponse("API Error: invalid response payload", field="body")
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponse("API Error: no completion choices returned", field="choices")
    first = choices[0]
    if not isinstance(first, dict):
        raise MalformedResponse("API Error: invalid completion choice", field="choices[0]")
    message = first.get("message")
    if not isinstance(message, dict):
        raise MalformedResponse("API Error: invalid completion message", field="choices[0].message")
    reply = normalize_content(message.get("content"))
    if not reply:
        raise MalformedResponse("API Error: empty completion message", field="choices[0].message.content")
    return reply

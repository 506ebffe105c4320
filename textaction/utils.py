import json
from pathlib import Path
from typing import Any, Dict

MAX_LOG_CHARS = 2000


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def truncate(text: str, limit: int = MAX_LOG_CHARS) -> str:
    if text is None:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit // 2] + "\n...[truncated]...\n" + text[-limit // 2 :]


def preview_body(body: Any, limit: int = MAX_LOG_CHARS) -> str:
    """Render an untyped response body as a short string for the event log."""
    if isinstance(body, str):
        return truncate(body, limit)
    try:
        text = json.dumps(body, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(body)
    return truncate(text, limit)


def write_json(path: Path, data: Dict[str, Any]) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

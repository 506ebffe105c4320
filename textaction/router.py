from __future__ import annotations

from .sinks.base import OutputSink


def route(mode: str, reply: str, original_input: str, sink: OutputSink) -> None:
    """Send the reply to exactly one sink; unknown modes behave like append."""
    if mode == "copy":
        sink.copy_text(reply)
    elif mode == "show":
        sink.show_text(reply, preview=True)
    elif mode == "replace":
        sink.paste_text(reply)
    else:
        sink.paste_text(f"{original_input}\n\n{reply}")

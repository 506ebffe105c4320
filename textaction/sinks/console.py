from __future__ import annotations

import platform
import shutil
import subprocess
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .base import OutputSink

CLIPBOARD_TIMEOUT = 5


def detect_clipboard() -> Optional[List[str]]:
    candidates: List[Tuple[str, List[str]]] = [
        ("pbcopy", ["pbcopy"]),
        ("wl-copy", ["wl-copy"]),
        ("xclip", ["xclip", "-selection", "clipboard"]),
        ("xsel", ["xsel", "--clipboard", "--input"]),
        ("clip", ["clip"]),
    ]
    if platform.system().lower() == "windows":
        candidates = [("clip", ["clip"])] + candidates[:-1]
    for name, cmd in candidates:
        if shutil.which(name):
            return cmd
    return None


class ConsoleSink(OutputSink):
    """
    Terminal stand-in for the host's output primitives:
    - paste writes the text to stdout
    - show renders it in a panel
    - copy pipes it to a clipboard tool, or prints it when none is usable
    """

    name = "console"

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None, clipboard_cmd: Optional[List[str]] = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.clipboard_cmd = clipboard_cmd if clipboard_cmd is not None else detect_clipboard()

    def copy_text(self, text: str) -> None:
        if self.clipboard_cmd:
            try:
                proc = subprocess.run(
                    self.clipboard_cmd,
                    input=text,
                    text=True,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=CLIPBOARD_TIMEOUT,
                )
                if proc.returncode == 0:
                    self.err_console.print("[green]Copied to clipboard.[/green]")
                    return
                reason = proc.stderr.strip() or f"exit code {proc.returncode}"
            except (OSError, subprocess.TimeoutExpired) as exc:
                reason = str(exc)
            self.err_console.print(f"[yellow]Clipboard command failed ({escape(reason)}); printing instead.[/yellow]")
        else:
            self.err_console.print("[yellow]No clipboard tool found; printing instead.[/yellow]")
        self.paste_text(text)

    def show_text(self, text: str, preview: bool = False) -> None:
        if preview:
            self.console.print(Panel(Text(text), title="Preview", expand=False))
        else:
            self.paste_text(text)

    def paste_text(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

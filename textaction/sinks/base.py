from __future__ import annotations

from abc import ABC, abstractmethod


class OutputSink(ABC):
    """Where a finished reply goes. Implementations belong to the host."""

    name: str = "base"

    @abstractmethod
    def copy_text(self, text: str) -> None:
        ...

    @abstractmethod
    def show_text(self, text: str, preview: bool = False) -> None:
        ...

    @abstractmethod
    def paste_text(self, text: str) -> None:
        ...

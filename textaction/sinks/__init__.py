from .base import OutputSink
from .console import ConsoleSink

__all__ = ["OutputSink", "ConsoleSink"]

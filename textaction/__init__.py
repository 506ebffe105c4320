from .action import run_action
from .errors import ConfigError, MalformedResponse, TextActionError, classify
from .options import RequestOptions, load_options, normalize_max_tokens, normalize_temperature

__all__ = [
    "run_action",
    "ConfigError",
    "MalformedResponse",
    "TextActionError",
    "classify",
    "RequestOptions",
    "load_options",
    "normalize_max_tokens",
    "normalize_temperature",
]

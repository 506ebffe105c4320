from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional

DEFAULT_MODEL = "google/gemini-3-flash-preview"
DEFAULT_TEMPERATURE = 1.0
DEFAULT_MAX_TOKENS = 1024
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0

REQUEST_TIMEOUT_MS = 45000
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"
APP_REFERER = "https://popclip.app/"
APP_TITLE = "PopClip Extension"

RESPONSE_MODES = ("append", "replace", "copy", "show")

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^[+-]?\d+")
# default int() string limit on current interpreters
MAX_TOKEN_DIGITS = 4300

# option field -> (primary variable, host variable)
ENV_VARS: Dict[str, tuple] = {
    "api_key": ("TEXTACTION_API_KEY", "POPCLIP_OPTION_APIKEY"),
    "model": ("TEXTACTION_MODEL", "POPCLIP_OPTION_MODEL"),
    "system_prompt": ("TEXTACTION_SYSTEM_PROMPT", "POPCLIP_OPTION_SYSTEMPROMPT"),
    "user_prompt": ("TEXTACTION_USER_PROMPT", "POPCLIP_OPTION_USERPROMPT"),
    "temperature": ("TEXTACTION_TEMPERATURE", "POPCLIP_OPTION_TEMPERATURE"),
    "max_tokens": ("TEXTACTION_MAX_TOKENS", "POPCLIP_OPTION_MAXTOKENS"),
    "response_handling": ("TEXTACTION_RESPONSE_HANDLING", "POPCLIP_OPTION_RESPONSEHANDLING"),
}


@dataclass(frozen=True)
class RequestOptions:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None
    temperature: Optional[str] = None
    max_tokens: Optional[str] = None
    response_handling: str = "append"


@dataclass(frozen=True)
class EndpointSettings:
    api_url: str = OPENROUTER_API_URL
    timeout_ms: int = REQUEST_TIMEOUT_MS
    referer: str = APP_REFERER
    title: str = APP_TITLE


def normalize_temperature(raw: Optional[str]) -> float:
    """Parse a temperature string, defaulting to 1.0 and clamping into [0, 2]."""
    if raw is None:
        return DEFAULT_TEMPERATURE
    match = _FLOAT_PREFIX.match(str(raw).strip())
    if not match:
        return DEFAULT_TEMPERATURE
    value = float(match.group(0))
    if math.isnan(value):
        return DEFAULT_TEMPERATURE
    return max(MIN_TEMPERATURE, min(MAX_TEMPERATURE, value))


def normalize_max_tokens(raw: Optional[str]) -> int:
    """Parse a token limit string; anything unusable or below 1 becomes 1024."""
    if raw is None:
        return DEFAULT_MAX_TOKENS
    match = _INT_PREFIX.match(str(raw).strip())
    if not match:
        return DEFAULT_MAX_TOKENS
    if len(match.group(0).lstrip("+-")) > MAX_TOKEN_DIGITS:
        return DEFAULT_MAX_TOKENS
    value = int(match.group(0))
    if value < 1:
        return DEFAULT_MAX_TOKENS
    return value


def _lookup(env: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value is not None:
            return value
    return None


def load_options(env: Optional[Mapping[str, str]] = None, overrides: Optional[Dict[str, Optional[str]]] = None) -> RequestOptions:
    """
    Build RequestOptions from environment variables, then apply CLI overrides.
    Values stay raw strings; validation happens when the request is built.
    """
    env = os.environ if env is None else env
    values: Dict[str, Optional[str]] = {}
    for f in fields(RequestOptions):
        value = _lookup(env, ENV_VARS[f.name])
        if value is not None:
            values[f.name] = value
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    return RequestOptions(**values)


def load_endpoint(env: Optional[Mapping[str, str]] = None, overrides: Optional[Dict[str, Optional[str]]] = None) -> EndpointSettings:
    env = os.environ if env is None else env
    overrides = overrides or {}
    api_url = overrides.get("api_url") or env.get("TEXTACTION_API_URL", "").strip() or OPENROUTER_API_URL
    raw_timeout = overrides.get("timeout_ms") or env.get("TEXTACTION_TIMEOUT_MS", "").strip()
    try:
        timeout_ms = int(raw_timeout) if raw_timeout else REQUEST_TIMEOUT_MS
    except ValueError:
        timeout_ms = REQUEST_TIMEOUT_MS
    if timeout_ms <= 0:
        timeout_ms = REQUEST_TIMEOUT_MS
    return EndpointSettings(
        api_url=api_url,
        timeout_ms=timeout_ms,
        referer=env.get("TEXTACTION_REFERER", "").strip() or APP_REFERER,
        title=env.get("TEXTACTION_TITLE", "").strip() or APP_TITLE,
    )

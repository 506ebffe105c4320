from __future__ import annotations

from typing import List, Optional

from .llm.types import ChatMessage, ChatRequest
from .options import DEFAULT_MODEL, RequestOptions, normalize_max_tokens, normalize_temperature

TEXT_PLACEHOLDER = "{{text}}"


def build_user_content(input_text: str, user_prompt: Optional[str] = None) -> str:
    prompt = (user_prompt or "").strip()
    if not prompt:
        return input_text
    if TEXT_PLACEHOLDER in prompt:
        return prompt.replace(TEXT_PLACEHOLDER, input_text)
    return f"{prompt}\n\n{input_text}"


def build_messages(
    input_text: str,
    system_prompt: Optional[str] = None,
    user_prompt: Optional[str] = None,
) -> List[ChatMessage]:
    """
    Assemble the message list for one completion:
    - optional system message first
    - exactly one user message last, from the template or the raw selection
    """
    messages: List[ChatMessage] = []
    system = (system_prompt or "").strip()
    if system:
        messages.append(ChatMessage(role="system", content=system))
    messages.append(ChatMessage(role="user", content=build_user_content(input_text, user_prompt)))
    return messages


def build_request(input_text: str, options: RequestOptions) -> ChatRequest:
    model = (options.model or "").strip() or DEFAULT_MODEL
    messages = build_messages(input_text.strip(), options.system_prompt, options.user_prompt)
    return ChatRequest(
        model=model,
        messages=tuple(messages),
        temperature=normalize_temperature(options.temperature),
        max_tokens=normalize_max_tokens(options.max_tokens),
    )

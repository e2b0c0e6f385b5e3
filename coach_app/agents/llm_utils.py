from __future__ import annotations

from typing import List, Dict, Any, Tuple
import asyncio
import logging

from openai import OpenAI, OpenAIError
from langsmith.run_helpers import traceable

from coach_app.agents.errors import ConfigurationError, TextGenerationError


def _extract_choice_fields(choice: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    out["finish_reason"] = getattr(choice, "finish_reason", None)
    msg = getattr(choice, "message", None)
    out["role"] = getattr(msg, "role", None)
    out["refusal"] = getattr(msg, "refusal", None)
    return out


def _stringify_usage(usage: Any) -> Dict[str, Any]:
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", None),
        "completion_tokens": getattr(usage, "completion_tokens", None),
        "total_tokens": getattr(usage, "total_tokens", None),
    }


def _extract_text_from_choice(choice: Any) -> str:
    msg = getattr(choice, "message", None)
    content = getattr(msg, "content", None)
    if isinstance(content, str):
        return content
    # Some models return an array of content parts
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, dict):
                for key in ("text", "value", "content"):
                    if isinstance(part.get(key), str):
                        parts.append(part[key])
                        break
        return "\n".join(p for p in parts if p).strip()
    return ""


def complete_text_with_guards(
    client: Any,
    model: str,
    messages: List[Dict[str, str]],
    max_tokens: int | None = None,
    temperature: float | None = None,
    log: logging.Logger | None = None,
) -> Tuple[str, Dict[str, Any]]:
    """Call Chat Completions once and return (text, diagnostics).

    - If content is empty but a refusal is present, the refusal is returned
    - Otherwise an empty completion raises TextGenerationError; there is no retry
    """
    logger = log or logging.getLogger("coach_app")
    params: Dict[str, Any] = {"model": model, "messages": messages}
    if max_tokens is not None:
        params["max_tokens"] = max_tokens
    if temperature is not None:
        params["temperature"] = temperature

    try:
        resp = client.chat.completions.create(**params)
    except OpenAIError as e:
        logger.error(f"OpenAI API error: {e}")
        raise TextGenerationError(f"OpenAI API error: {e}") from e

    choices = getattr(resp, "choices", None) or [None]
    choice = choices[0]
    content = (_extract_text_from_choice(choice) or "").strip()
    meta = _extract_choice_fields(choice)
    diagnostics: Dict[str, Any] = {
        **meta,
        "api_model": getattr(resp, "model", None),
        "usage": _stringify_usage(getattr(resp, "usage", None)),
    }
    if content:
        return content, diagnostics

    refusal = meta.get("refusal")
    if isinstance(refusal, str) and refusal.strip():
        logger.warning("LLM returned empty content but provided refusal; using refusal text")
        return refusal.strip(), diagnostics

    logger.error(f"LLM returned empty content | diag={diagnostics}")
    raise TextGenerationError("Language model returned an empty response")


class OpenAITextGenerator:
    """Chat-style text generation over the OpenAI API.

    The synchronous client runs in a worker thread so the request task can
    await it.
    """

    def __init__(self, api_key: str | None, model: str, max_tokens: int = 500, temperature: float = 0.7, timeout: float = 30) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, timeout=timeout) if api_key else None

    def ensure_configured(self) -> None:
        if not self.client:
            raise ConfigurationError("OpenAI API key not configured")

    @traceable(name="llm.generate", run_type="llm")
    async def generate(self, system_prompt: str, user_message: str) -> str:
        self.ensure_configured()
        text, diag = await asyncio.to_thread(
            complete_text_with_guards,
            self.client,
            self.model,
            [{"role": "system", "content": system_prompt}, {"role": "user", "content": user_message}],
            self.max_tokens,
            self.temperature,
        )
        logging.getLogger("coach_app").debug(f"llm.diag.generate: {diag}")
        return text

from typing import Dict, List
import requests
from research_assistant import config
from research_assistant.logger import get_logger

logger = get_logger("LLM")


class CompletionError(RuntimeError):
    """The completion provider could not produce a response."""


def complete_chat(
    messages: List[Dict[str, str]],
    system_prompt: str,
    max_tokens: int = 1024,
    temperature: float = 0.7,
) -> str:
    if not config.LLM_API_KEY:
        raise CompletionError("LLM_API_KEY is not set.")

    base = config.LLM_BASE_URL.rstrip("/")
    url = f"{base}/chat/completions"
    headers = {
        "Authorization": f"Bearer {config.LLM_API_KEY}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": config.LLM_MODEL,
        "messages": [{"role": "system", "content": system_prompt}, *messages],
        "temperature": float(temperature),
        "max_tokens": int(max_tokens),
    }

    logger.debug("Requesting completion from %s with %d messages", url, len(payload["messages"]))
    try:
        resp = requests.post(url, json=payload, headers=headers, timeout=config.LLM_TIMEOUT)
    except requests.RequestException as exc:
        raise CompletionError(f"LLM request failed: {exc}") from exc

    if resp.status_code != 200:
        raise CompletionError(f"LLM returned {resp.status_code}: {resp.text}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise CompletionError(f"Failed to parse LLM response JSON: {exc}") from exc

    # Expecting OpenAI-like response shape
    try:
        choices = data.get("choices") or []
        if not choices:
            return ""
        choice = choices[0]
        message = choice.get("message") if isinstance(choice, dict) else None
        content = None
        if message:
            content = message.get("content")
        if not content:
            content = choice.get("text") if isinstance(choice, dict) else None
        return (content or "").strip()
    except (AttributeError, TypeError) as exc:
        raise CompletionError(f"Unexpected LLM response shape: {exc}") from exc

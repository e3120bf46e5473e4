"""Prompt construction and response extraction shared by the UI and the relay."""
from typing import Any, Dict, List

PROMPT_TEMPLATE = (
    "Recommend 6 books for a {level} {genre} reader feeling {mood}. "
    "Explain why each book fits."
)
NO_TEXT_PLACEHOLDER = "No text returned."


def build_prompt(genre: str, mood: str, level: str, custom: str | None = None) -> str:
    """Return ``custom`` verbatim when given, otherwise fill the template."""
    if custom:
        return custom
    return PROMPT_TEMPLATE.format(level=level, genre=genre, mood=mood)


def build_request_body(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def extract_text(envelope: Any) -> str:
    """
    Flatten ``candidates[0].content.parts[].text`` into one string.
    Missing or malformed levels count as "nothing extractable".
    """
    if not isinstance(envelope, dict):
        return NO_TEXT_PLACEHOLDER
    candidates = envelope.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return NO_TEXT_PLACEHOLDER
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return NO_TEXT_PLACEHOLDER

    texts: List[str] = []
    for part in parts:
        text = part.get("text") if isinstance(part, dict) else None
        if text:
            texts.append(str(text))
    return "\n".join(texts).strip() or NO_TEXT_PLACEHOLDER


def provider_error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback

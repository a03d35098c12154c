"""Shared message dict utilities."""

from __future__ import annotations

from typing import Any

# Keys the model provider schema accepts on a chat message.
API_MESSAGE_KEYS = frozenset(
    {"role", "content", "name", "tool_calls", "tool_call_id", "reasoning"}
)


def strip_message_metadata(messages: list[dict]) -> list[dict]:
    """Drop internal keys (``id``, ``metadata``, ``_``-prefixed) before sending to the LLM."""
    result = []
    for msg in messages:
        if any(key not in API_MESSAGE_KEYS for key in msg):
            msg = {k: v for k, v in msg.items() if k in API_MESSAGE_KEYS}
        result.append(msg)
    return result


def message_text(message: dict) -> str:
    """Concatenate the text parts of a message's content."""
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return ""


def append_text_to_content(content: Any, text: str) -> Any:
    """Return a new content value with ``text`` appended; the input is never mutated."""
    if isinstance(content, list):
        parts = list(content)
        for i in range(len(parts) - 1, -1, -1):
            part = parts[i]
            if isinstance(part, dict) and part.get("type") == "text":
                parts[i] = {**part, "text": f"{part.get('text', '')}\n\n{text}"}
                return parts
        parts.append({"type": "text", "text": text})
        return parts
    if not content:
        return text
    return f"{content}\n\n{text}"


def _insert_before_last(text: str, marker: str, block: str) -> str | None:
    index = text.rfind(marker)
    if index == -1:
        return None
    head = text[:index]
    if head and not head.endswith("\n"):
        head += "\n"
    return f"{head}{block}\n{text[index:]}"


def insert_text_before_marker(content: Any, marker: str, block: str) -> Any | None:
    """Return a new content value with ``block`` placed just before the last ``marker``.

    Returns None when the marker is not present; the input is never mutated.
    """
    if isinstance(content, str):
        return _insert_before_last(content, marker, block)
    if isinstance(content, list):
        for i in range(len(content) - 1, -1, -1):
            part = content[i]
            if not (isinstance(part, dict) and part.get("type") == "text"):
                continue
            text = _insert_before_last(part.get("text", ""), marker, block)
            if text is not None:
                parts = list(content)
                parts[i] = {**part, "text": text}
                return parts
    return None

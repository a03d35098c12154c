"""Shared "find last user message, possibly wrap, append" helpers.

Several providers append context to the same last user message. The first
one to run opens a system-context envelope; later ones see it through
``has_existing_system_context`` and place their own labeled block inside it,
just before the closing marker.
"""

from __future__ import annotations

from context_engine.config.defaults import (
    SYSTEM_CONTEXT_END,
    SYSTEM_CONTEXT_INSTRUCTION,
    SYSTEM_CONTEXT_START,
)
from context_engine.processors.base import BaseProcessor, PipelineContext
from context_engine.utils.messages import (
    append_text_to_content,
    insert_text_before_marker,
    message_text,
)


def find_last_user_message_index(messages: list[dict]) -> int:
    for i in range(len(messages) - 1, -1, -1):
        if messages[i].get("role") == "user":
            return i
    return -1


def has_existing_system_context(context: PipelineContext) -> bool:
    index = find_last_user_message_index(context.messages)
    if index == -1:
        return False
    return SYSTEM_CONTEXT_START in message_text(context.messages[index])


def create_context_block(content: str, tag: str) -> str:
    return f"<{tag}>\n{content}\n</{tag}>"


def wrap_with_system_context(content: str, tag: str) -> str:
    return "\n".join(
        [
            SYSTEM_CONTEXT_START,
            SYSTEM_CONTEXT_INSTRUCTION,
            create_context_block(content, tag),
            SYSTEM_CONTEXT_END,
        ]
    )


def append_to_last_user_message(context: PipelineContext, text: str) -> bool:
    """Replace the last user message in ``context`` with a copy that ends with ``text``.

    ``context`` must already be a clone owned by the caller. Returns False when
    there is no user message to attach to.
    """
    index = find_last_user_message_index(context.messages)
    if index == -1:
        return False
    message = context.messages[index]
    context.messages[index] = {
        **message,
        "content": append_text_to_content(message.get("content"), text),
    }
    return True


def insert_into_system_context(context: PipelineContext, block: str) -> bool:
    """Place ``block`` inside the last user message's envelope, before its end marker.

    ``context`` must already be a clone owned by the caller. Returns False when
    the last user message has no closed envelope.
    """
    index = find_last_user_message_index(context.messages)
    if index == -1:
        return False
    message = context.messages[index]
    content = insert_text_before_marker(message.get("content"), SYSTEM_CONTEXT_END, block)
    if content is None:
        return False
    context.messages[index] = {**message, "content": content}
    return True


class BaseLastUserContentProvider(BaseProcessor):
    """Processor that injects a labeled block at the end of the last user message."""

    def inject_content(self, context: PipelineContext, content: str, tag: str) -> bool:
        if has_existing_system_context(context):
            block = create_context_block(content, tag)
            if insert_into_system_context(context, block):
                return True
            # Envelope opened but never closed.
            return append_to_last_user_message(context, f"{block}\n{SYSTEM_CONTEXT_END}")
        return append_to_last_user_message(context, wrap_with_system_context(content, tag))

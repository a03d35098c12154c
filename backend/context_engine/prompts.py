"""Formatters that render side-channel context into prompt text.

Every formatter returns an empty string when there is nothing worth
injecting, so callers can drop the section instead of emitting an empty tag.
"""

from __future__ import annotations

from collections.abc import Iterable
from html import escape

from context_engine.config.defaults import DEFAULT_TODO_CONTENT_MAX_CHARS
from context_engine.schemas.context import (
    PageContentContext,
    PageSelection,
    TodoItem,
    UserMemoryItem,
)


def _attrs(**values: object) -> str:
    parts = [
        f'{key}="{escape(str(value), quote=True)}"'
        for key, value in values.items()
        if value is not None and value != ""
    ]
    return (" " + " ".join(parts)) if parts else ""


def _line_range(selection: PageSelection) -> str | None:
    if selection.start_line is None:
        return None
    end = selection.end_line if selection.end_line is not None else selection.start_line
    if end == selection.start_line:
        return str(selection.start_line)
    return f"{selection.start_line}-{end}"


def format_page_selections(selections: Iterable[PageSelection]) -> str:
    blocks = []
    for selection in selections:
        text = selection.content.strip()
        if not text:
            continue
        attrs = _attrs(lines=_line_range(selection), page_id=selection.page_id)
        blocks.append(f"<selection{attrs}>\n{text}\n</selection>")
    if not blocks:
        return ""
    return (
        "<user_selections>\n"
        "<instruction>The user selected the following text in the page and is asking about it.</instruction>\n"
        + "\n".join(blocks)
        + "\n</user_selections>"
    )


def format_page_content_context(page: PageContentContext) -> str:
    """Render the live document, preferring the structured xml serialization."""
    if page.xml and page.xml.strip():
        body = f"<page_xml>\n{page.xml.strip()}\n</page_xml>"
    elif page.markdown and page.markdown.strip():
        body = f"<page_markdown>\n{page.markdown.strip()}\n</page_markdown>"
    else:
        return ""
    meta = page.metadata
    attrs = _attrs(
        title=meta.title,
        document_id=meta.document_id,
        chars=meta.char_count,
        lines=meta.line_count,
    )
    return f"<current_page{attrs}>\n{body}\n</current_page>"


def format_user_memories(memories: Iterable[UserMemoryItem]) -> str:
    lines = []
    for memory in memories:
        text = memory.content.strip()
        if not text:
            continue
        attrs = _attrs(category=memory.category, title=memory.title)
        lines.append(f"<memory{attrs}>{text}</memory>")
    if not lines:
        return ""
    return (
        "The following facts about the user were remembered from earlier conversations. "
        "Use them only when relevant.\n" + "\n".join(lines)
    )


def format_todo_list(
    todos: Iterable[TodoItem],
    max_chars: int = DEFAULT_TODO_CONTENT_MAX_CHARS,
) -> str:
    todos = list(todos)
    if not todos:
        return ""
    lines = [
        "Below is the current list of tasks for this conversation. Keep them updated as you progress.",
        "",
        "| # | Content | Status |",
        "|---|---------|--------|",
    ]
    for i, todo in enumerate(todos, 1):
        status = todo.status.replace("_", " ").title()
        content_escaped = todo.content.replace("|", "\\|")[:max_chars]
        if len(todo.content) > max_chars:
            content_escaped += "..."
        lines.append(f"| {i} | {content_escaped} | {status} |")
    return "\n".join(lines)


def format_history_summary(summary: str) -> str:
    summary = summary.strip()
    if not summary:
        return ""
    return (
        "<chat_history_summary>\n"
        "<docstring>Users may have lots of chat messages, here is the summary of the history:</docstring>\n"
        f"<summary>{summary}</summary>\n"
        "</chat_history_summary>"
    )

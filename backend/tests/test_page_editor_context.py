from __future__ import annotations

import asyncio
import copy

import pytest

from context_engine.config.defaults import (
    SYSTEM_CONTEXT_END,
    SYSTEM_CONTEXT_INSTRUCTION,
    SYSTEM_CONTEXT_START,
)
from context_engine.errors import FormatterError, MalformedInputError
from context_engine.processors.base import EXECUTED_PROCESSORS_KEY, PipelineContext
from context_engine.providers import page_editor_context
from context_engine.providers.base import has_existing_system_context, wrap_with_system_context
from context_engine.providers.page_editor_context import (
    PageEditorContextConfig,
    PageEditorContextInjector,
)
from context_engine.schemas.context import PageContentContext, PageMetadata, PageSelection

PAGE = PageContentContext(markdown="# Trip plan\n\nDay 1: Louvre", metadata=PageMetadata(title="Trip"))
FORMATTED_PAGE = (
    '<current_page title="Trip">\n<page_markdown>\n# Trip plan\n\nDay 1: Louvre\n'
    "</page_markdown>\n</current_page>"
)


def _run(messages: list[dict], **config) -> PipelineContext:
    injector = PageEditorContextInjector(PageEditorContextConfig(**config))
    return asyncio.run(injector.process(PipelineContext(messages=messages)))


def test_page_content_is_wrapped_when_no_envelope_exists() -> None:
    messages = [{"role": "user", "content": "Summarize this doc"}]
    result = _run(messages, enabled=True, page_content_context=PAGE)

    assert result.messages[0]["content"] == (
        "Summarize this doc\n\n"
        f"{SYSTEM_CONTEXT_START}\n{SYSTEM_CONTEXT_INSTRUCTION}\n"
        f"<current_page_context>\n{FORMATTED_PAGE}\n</current_page_context>\n"
        f"{SYSTEM_CONTEXT_END}"
    )
    assert result.metadata["pageEditorContextInjected"] is True
    assert "pageSelectionsInjected" not in result.metadata
    assert messages[0]["content"] == "Summarize this doc"


def test_existing_envelope_gets_only_inner_block() -> None:
    original = "Summarize this doc\n\n" + wrap_with_system_context("likes short answers", "user_memory")
    result = _run([{"role": "user", "content": original}], enabled=True, page_content_context=PAGE)

    content = result.messages[0]["content"]
    assert content == (
        original[: -len(SYSTEM_CONTEXT_END)]
        + f"<current_page_context>\n{FORMATTED_PAGE}\n</current_page_context>\n"
        + SYSTEM_CONTEXT_END
    )
    assert content.count(SYSTEM_CONTEXT_START) == 1
    assert content.index("<current_page_context>") < content.index(SYSTEM_CONTEXT_END)
    assert content.endswith(SYSTEM_CONTEXT_END)


def test_no_user_message_is_a_passthrough() -> None:
    messages = [{"role": "system", "content": "You are helpful."}, {"role": "assistant", "content": "Hi"}]
    result = _run(messages, enabled=True, page_content_context=PAGE)

    assert result.messages == messages
    assert "pageEditorContextInjected" not in result.metadata
    assert result.metadata[EXECUTED_PROCESSORS_KEY] == ["PageEditorContextInjector"]


def test_disabled_without_selections_is_a_passthrough() -> None:
    messages = [{"role": "user", "content": "Summarize this doc"}]
    result = _run(messages, enabled=False, page_content_context=PAGE)
    assert result.messages == messages
    assert "pageEditorContextInjected" not in result.metadata


def test_selections_inject_even_when_page_content_is_disabled() -> None:
    selections = [PageSelection(id="s1", content="Day 1: Louvre", start_line=3, end_line=3)]
    result = _run(
        [{"role": "user", "content": "Explain this"}],
        enabled=False,
        page_content_context=PAGE,
        page_selections=selections,
    )

    content = result.messages[0]["content"]
    assert '<selection lines="3">\nDay 1: Louvre\n</selection>' in content
    assert "<current_page " not in content
    assert result.metadata["pageSelectionsInjected"] is True
    assert result.metadata["pageEditorContextInjected"] is True


def test_selections_come_before_page_content() -> None:
    selections = [PageSelection(content="Louvre", start_line=2, end_line=4)]
    result = _run(
        [{"role": "user", "content": "Explain this"}],
        enabled=True,
        page_content_context=PAGE,
        page_selections=selections,
    )

    content = result.messages[0]["content"]
    assert content.index("<user_selections>") < content.index("<current_page ")
    assert '<selection lines="2-4">' in content
    assert "</user_selections>\n\n<current_page " in content


def test_selections_fall_back_to_last_user_message_metadata() -> None:
    messages = [
        {"role": "user", "content": "Earlier", "metadata": {"pageSelections": [{"content": "old"}]}},
        {"role": "assistant", "content": "Sure"},
        {
            "role": "user",
            "content": "What does this mean?",
            "metadata": {"pageSelections": [{"id": "s1", "content": "Day 1", "startLine": 3, "endLine": 5}]},
        },
    ]
    result = _run(messages)

    assert '<selection lines="3-5">\nDay 1\n</selection>' in result.messages[2]["content"]
    assert "old" not in result.messages[2]["content"]
    assert result.messages[0] is messages[0]


def test_malformed_metadata_selections_raise() -> None:
    messages = [{"role": "user", "content": "Q", "metadata": {"pageSelections": ["oops"]}}]
    with pytest.raises(MalformedInputError):
        _run(messages)


def test_blank_formatted_sections_are_a_passthrough() -> None:
    messages = [{"role": "user", "content": "Q"}]
    result = _run(
        messages,
        enabled=True,
        page_content_context=PageContentContext(markdown="   "),
        page_selections=[PageSelection(content="  ")],
    )
    assert result.messages == messages
    assert "pageEditorContextInjected" not in result.metadata


def test_running_twice_keeps_a_single_envelope() -> None:
    injector = PageEditorContextInjector(PageEditorContextConfig(enabled=True, page_content_context=PAGE))
    ctx = PipelineContext(messages=[{"role": "user", "content": "Summarize this doc"}])

    once = asyncio.run(injector.process(ctx))
    twice = asyncio.run(injector.process(once))

    content = twice.messages[0]["content"]
    assert content.count(SYSTEM_CONTEXT_START) == 1
    assert content.count(SYSTEM_CONTEXT_END) == 1
    assert content.count("<current_page_context>") == 2
    assert content.rindex("</current_page_context>") < content.index(SYSTEM_CONTEXT_END)
    assert has_existing_system_context(once)


def test_structured_user_content_appends_to_last_text_part() -> None:
    image = {"type": "image_url", "image_url": {"url": "https://example.com/a.png"}}
    messages = [{"role": "user", "content": [{"type": "text", "text": "Describe"}, image]}]
    snapshot = copy.deepcopy(messages)

    result = _run(messages, enabled=True, page_content_context=PAGE)

    parts = result.messages[0]["content"]
    assert parts[0]["text"].startswith(f"Describe\n\n{SYSTEM_CONTEXT_START}")
    assert parts[1] == image
    assert messages == snapshot


def test_output_is_deterministic() -> None:
    messages = [{"role": "user", "content": "Summarize this doc"}]
    first = _run(messages, enabled=True, page_content_context=PAGE)
    second = _run(messages, enabled=True, page_content_context=PAGE)
    assert first.messages[0]["content"] == second.messages[0]["content"]


def test_formatter_failure_is_fatal(monkeypatch) -> None:
    def broken_formatter(_page):
        raise RuntimeError("serializer crashed")

    monkeypatch.setattr(page_editor_context, "format_page_content_context", broken_formatter)
    messages = [{"role": "user", "content": "Summarize this doc"}]

    with pytest.raises(FormatterError, match="serializer crashed"):
        _run(messages, enabled=True, page_content_context=PAGE)
    assert messages == [{"role": "user", "content": "Summarize this doc"}]


def test_existing_envelope_in_text_part_receives_the_block() -> None:
    wrapped = "Describe\n\n" + wrap_with_system_context("likes short answers", "user_memory")
    image = {"type": "image_url", "image_url": {"url": "https://example.com/a.png"}}
    messages = [{"role": "user", "content": [{"type": "text", "text": wrapped}, image]}]
    snapshot = copy.deepcopy(messages)

    result = _run(messages, enabled=True, page_content_context=PAGE)

    text = result.messages[0]["content"][0]["text"]
    assert text.count(SYSTEM_CONTEXT_START) == 1
    assert text.index("</user_memory>") < text.index("<current_page_context>") < text.index(SYSTEM_CONTEXT_END)
    assert result.messages[0]["content"][1] == image
    assert messages == snapshot


def test_unclosed_envelope_is_closed_without_a_second_start() -> None:
    original = f"Summarize this doc\n\n{SYSTEM_CONTEXT_START}\n<user_memory>\nx\n</user_memory>"
    result = _run([{"role": "user", "content": original}], enabled=True, page_content_context=PAGE)

    content = result.messages[0]["content"]
    assert content.count(SYSTEM_CONTEXT_START) == 1
    assert content.endswith(f"</current_page_context>\n{SYSTEM_CONTEXT_END}")

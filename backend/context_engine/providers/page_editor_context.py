"""PageEditorContextInjector: appends live page state to the last user message."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from context_engine.errors import FormatterError, MalformedInputError
from context_engine.processors.base import PipelineContext, ProcessorOptions
from context_engine.prompts import format_page_content_context, format_page_selections
from context_engine.providers.base import (
    BaseLastUserContentProvider,
    find_last_user_message_index,
)
from context_engine.schemas.context import PageContentContext, PageSelection

PAGE_CONTEXT_TAG = "current_page_context"

_SELECTIONS = TypeAdapter(list[PageSelection])


class PageEditorContextConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Gates whole-document injection only; selections are injected regardless.
    enabled: bool = False
    page_content_context: PageContentContext | None = None
    # When None, selections are read from the last user message's metadata.
    page_selections: list[PageSelection] | None = None


class PageEditorContextInjector(BaseLastUserContentProvider):
    """Inject the current page and any selected text at the end of the last user message.

    Selections come first, the document second; each section is only kept when
    its formatter produces text.
    """

    name = "PageEditorContextInjector"

    def __init__(
        self,
        config: PageEditorContextConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or PageEditorContextConfig()

    def _selections_from_messages(self, messages: list[dict]) -> list[PageSelection] | None:
        index = find_last_user_message_index(messages)
        if index == -1:
            return None
        metadata = messages[index].get("metadata") or {}
        raw = metadata.get("pageSelections") if isinstance(metadata, dict) else None
        if not raw:
            return None
        try:
            return _SELECTIONS.validate_python(raw)
        except ValidationError as exc:
            raise MalformedInputError(
                f"malformed pageSelections on last user message: {exc}", processor=self.name
            ) from exc

    def _format(self, formatter, value) -> str:
        try:
            return formatter(value)
        except Exception as exc:
            raise FormatterError(
                f"{formatter.__name__} failed: {exc}", processor=self.name
            ) from exc

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        selections = self.config.page_selections
        if selections is None:
            selections = self._selections_from_messages(context.messages)

        has_page_content = self.config.enabled and self.config.page_content_context is not None
        has_page_selections = bool(selections)

        if not has_page_content and not has_page_selections:
            self.logger.debug("No page content and no page selections, skipping injection")
            return context

        if find_last_user_message_index(context.messages) == -1:
            self.logger.debug("No user messages found, skipping page context injection")
            return context

        sections: list[str] = []
        selections_included = False
        if has_page_selections:
            formatted = self._format(format_page_selections, selections)
            if formatted:
                sections.append(formatted)
                selections_included = True
        if has_page_content:
            formatted = self._format(format_page_content_context, self.config.page_content_context)
            if formatted:
                sections.append(formatted)

        if not sections:
            self.logger.debug("No page context left after formatting")
            return context

        cloned = self.clone_context(context)
        self.inject_content(cloned, "\n\n".join(sections), PAGE_CONTEXT_TAG)

        cloned.metadata["pageEditorContextInjected"] = True
        if selections_included:
            cloned.metadata["pageSelectionsInjected"] = True
        self.logger.debug("Page editor context appended to last user message")
        return cloned

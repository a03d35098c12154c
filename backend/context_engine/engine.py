"""Default processor chain assembled from per-request data and settings."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from context_engine.config.settings import ContextEngineSettings, get_settings
from context_engine.pipeline import ContextEngine
from context_engine.processors import (
    GroupMessageFlattenProcessor,
    HistoryTruncateConfig,
    HistoryTruncateProcessor,
    MessageCleanupProcessor,
    ProcessorOptions,
    ReactionFeedbackConfig,
    ReactionFeedbackProcessor,
    TokenEstimatorProcessor,
    ToolResultPrunerConfig,
    ToolResultPrunerProcessor,
)
from context_engine.processors.base import BaseProcessor
from context_engine.providers import (
    HistorySummaryConfig,
    HistorySummaryProvider,
    PageEditorContextConfig,
    PageEditorContextInjector,
    SystemRoleConfig,
    SystemRoleInjector,
    TodoContextConfig,
    TodoContextInjector,
    UserMemoryConfig,
    UserMemoryInjector,
)
from context_engine.schemas.context import (
    PageContentContext,
    PageSelection,
    TodoItem,
    UserMemoryItem,
)

# Structural stages first (system role, flatten, truncate, summary), then
# per-message rewrites, then last-user-message injectors, then bookkeeping.
# Page editor state goes last among injectors so it sits closest to the end
# of the user's message.
DEFAULT_PROCESSOR_ORDER = (
    "SystemRoleInjector",
    "GroupMessageFlattenProcessor",
    "HistoryTruncateProcessor",
    "HistorySummaryProvider",
    "ReactionFeedbackProcessor",
    "ToolResultPrunerProcessor",
    "UserMemoryInjector",
    "TodoContextInjector",
    "PageEditorContextInjector",
    "TokenEstimatorProcessor",
    "MessageCleanupProcessor",
)


class ContextRequest(BaseModel):
    """Side-channel data for one model invocation."""

    model: str | None = None
    system_role: str | None = None
    history_summary: str | None = None
    memories: list[UserMemoryItem] = Field(default_factory=list)
    todos: list[TodoItem] = Field(default_factory=list)
    page_content_context: PageContentContext | None = None
    page_selections: list[PageSelection] | None = None


def build_processors(
    request: ContextRequest,
    settings: ContextEngineSettings,
    options: ProcessorOptions | None = None,
) -> list[BaseProcessor]:
    return [
        SystemRoleInjector(SystemRoleConfig(system_role=request.system_role), options),
        GroupMessageFlattenProcessor(options),
        HistoryTruncateProcessor(
            HistoryTruncateConfig(
                enable_history_count=settings.enable_history_count,
                history_count=settings.history_count,
            ),
            options,
        ),
        HistorySummaryProvider(HistorySummaryConfig(history_summary=request.history_summary), options),
        ReactionFeedbackProcessor(
            ReactionFeedbackConfig(enabled=settings.reaction_feedback_enabled), options
        ),
        ToolResultPrunerProcessor(ToolResultPrunerConfig(max_chars=settings.tool_output_max_chars), options),
        UserMemoryInjector(
            UserMemoryConfig(enabled=settings.user_memory_enabled, memories=request.memories),
            options,
        ),
        TodoContextInjector(
            TodoContextConfig(enabled=settings.todo_context_enabled, todos=request.todos),
            options,
        ),
        PageEditorContextInjector(
            PageEditorContextConfig(
                enabled=settings.page_editor_enabled,
                page_content_context=request.page_content_context,
                page_selections=request.page_selections,
            ),
            options,
        ),
        TokenEstimatorProcessor(options),
        MessageCleanupProcessor(options),
    ]


def build_context_engine(
    request: ContextRequest,
    settings: ContextEngineSettings | None = None,
    *,
    log: logging.Logger | None = None,
) -> ContextEngine:
    settings = settings or get_settings()
    options = ProcessorOptions(logger=log) if log is not None else None
    return ContextEngine(build_processors(request, settings, options), log=log)

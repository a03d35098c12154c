"""TodoContextInjector: injects the current todo list into the last user message."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from context_engine.config.defaults import DEFAULT_TODO_CONTENT_MAX_CHARS
from context_engine.errors import FormatterError
from context_engine.processors.base import PipelineContext, ProcessorOptions
from context_engine.prompts import format_todo_list
from context_engine.providers.base import (
    BaseLastUserContentProvider,
    find_last_user_message_index,
)
from context_engine.schemas.context import TodoItem

TODO_LIST_TAG = "current_todo_list"


class TodoContextConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    todos: list[TodoItem] = []
    max_content_chars: int = DEFAULT_TODO_CONTENT_MAX_CHARS


class TodoContextInjector(BaseLastUserContentProvider):
    """Surface the todo tool's state to the model next to the latest question."""

    name = "TodoContextInjector"

    def __init__(
        self,
        config: TodoContextConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or TodoContextConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not self.config.enabled or not self.config.todos:
            return context
        if find_last_user_message_index(context.messages) == -1:
            return context

        try:
            formatted = format_todo_list(self.config.todos, self.config.max_content_chars)
        except Exception as exc:
            raise FormatterError(f"format_todo_list failed: {exc}", processor=self.name) from exc

        cloned = self.clone_context(context)
        self.inject_content(cloned, formatted, TODO_LIST_TAG)
        cloned.metadata["todoListInjected"] = True
        return cloned

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from context_engine.errors import FormatterError
from context_engine.processors.base import PipelineContext, ProcessorOptions
from context_engine.prompts import format_user_memories
from context_engine.providers.base import (
    BaseLastUserContentProvider,
    find_last_user_message_index,
)
from context_engine.schemas.context import UserMemoryItem

USER_MEMORY_TAG = "user_memory"


class UserMemoryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    memories: list[UserMemoryItem] = []


class UserMemoryInjector(BaseLastUserContentProvider):
    """Append remembered user facts to the last user message."""

    name = "UserMemoryInjector"

    def __init__(
        self,
        config: UserMemoryConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or UserMemoryConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not self.config.enabled or not self.config.memories:
            return context
        if find_last_user_message_index(context.messages) == -1:
            return context

        try:
            formatted = format_user_memories(self.config.memories)
        except Exception as exc:
            raise FormatterError(f"format_user_memories failed: {exc}", processor=self.name) from exc
        if not formatted:
            return context

        cloned = self.clone_context(context)
        self.inject_content(cloned, formatted, USER_MEMORY_TAG)
        cloned.metadata["userMemoryInjected"] = True
        cloned.metadata["userMemoryCount"] = len(self.config.memories)
        return cloned

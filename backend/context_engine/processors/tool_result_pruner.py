from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from context_engine.config.defaults import DEFAULT_TOOL_OUTPUT_MAX_CHARS
from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions

TRUNCATION_MARKER = "\n... [truncated]"


class ToolResultPrunerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_chars: int = Field(default=DEFAULT_TOOL_OUTPUT_MAX_CHARS, gt=0)


class ToolResultPrunerProcessor(BaseProcessor):
    """Truncate excessively long tool outputs in the message history."""

    name = "ToolResultPrunerProcessor"

    def __init__(
        self,
        config: ToolResultPrunerConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or ToolResultPrunerConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        max_chars = self.config.max_chars
        cloned = self.clone_context(context)
        pruned = 0
        for i, msg in enumerate(cloned.messages):
            if msg.get("role") != "tool":
                continue
            content = msg.get("content", "")
            if not isinstance(content, str) or len(content) <= max_chars:
                continue
            cloned.messages[i] = {**msg, "content": content[:max_chars] + TRUNCATION_MARKER}
            pruned += 1

        if not pruned:
            return context
        cloned.metadata["toolResultsPruned"] = pruned
        return cloned

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from context_engine.config.defaults import DEFAULT_HISTORY_COUNT
from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions


class HistoryTruncateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enable_history_count: bool = False
    history_count: int = Field(default=DEFAULT_HISTORY_COUNT, ge=0)


def _call_ids(message: dict) -> set:
    return {call.get("id") for call in message.get("tool_calls") or [] if isinstance(call, dict)}


class HistoryTruncateProcessor(BaseProcessor):
    """Keep only the most recent ``history_count`` conversation messages.

    System messages are never dropped and keep their positions relative to
    the retained messages. Tool results whose calling assistant message fell
    outside the window are dropped too, so every retained ``tool`` message
    still answers a retained ``tool_calls`` entry.
    """

    name = "HistoryTruncateProcessor"

    def __init__(
        self,
        config: HistoryTruncateConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or HistoryTruncateConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not self.config.enable_history_count:
            return context

        conversational = [i for i, m in enumerate(context.messages) if m.get("role") != "system"]
        overflow = len(conversational) - self.config.history_count
        if overflow <= 0:
            return context

        dropped = set(conversational[:overflow])
        dropped_call_ids: set = set()
        for i in dropped:
            dropped_call_ids |= _call_ids(context.messages[i])
        for i in conversational[overflow:]:
            message = context.messages[i]
            if message.get("role") == "tool" and message.get("tool_call_id") in dropped_call_ids:
                dropped.add(i)

        cloned = self.clone_context(context)
        cloned.messages = [m for i, m in enumerate(context.messages) if i not in dropped]
        cloned.metadata["historyTruncated"] = len(dropped)
        self.logger.debug("Dropped %d messages outside the history window", len(dropped))
        return cloned

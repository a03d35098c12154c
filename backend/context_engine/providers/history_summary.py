"""HistorySummaryProvider: carries the compressed summary of truncated history."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions
from context_engine.prompts import format_history_summary


class HistorySummaryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    history_summary: str | None = None


class HistorySummaryProvider(BaseProcessor):
    """Append the history summary to the leading system message, or add one.

    Runs after history truncation so the model still sees what was dropped.
    """

    name = "HistorySummaryProvider"

    def __init__(
        self,
        config: HistorySummaryConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or HistorySummaryConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        summary = format_history_summary(self.config.history_summary or "")
        if not summary:
            return context

        cloned = self.clone_context(context)
        first = cloned.messages[0] if cloned.messages else None
        if first is not None and first.get("role") == "system" and isinstance(first.get("content"), str):
            content = first["content"]
            cloned.messages[0] = {
                **first,
                "content": f"{content}\n\n{summary}" if content else summary,
            }
        else:
            cloned.messages.insert(0, {"role": "system", "content": summary})

        cloned.metadata["historySummaryInjected"] = True
        self.logger.debug("History summary injected, length %d", len(summary))
        return cloned

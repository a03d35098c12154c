from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from context_engine.errors import ProcessingError
from context_engine.processors.base import BaseProcessor, PipelineContext

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    processed_count: int = 0
    total_duration_ms: float = 0.0
    processor_durations_ms: dict[str, float] = field(default_factory=dict)


@dataclass
class ContextEngineResult:
    messages: list[dict]
    metadata: dict
    is_aborted: bool = False
    abort_reason: str | None = None
    stats: PipelineStats = field(default_factory=PipelineStats)


class ContextEngine:
    """Runs processors strictly in the order given, each on the previous stage's output.

    Errors are logged and re-raised; a run either yields the final payload or
    fails, never a partially processed message list.
    """

    def __init__(
        self,
        processors: list[BaseProcessor] | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        self._processors: list[BaseProcessor] = list(processors or [])
        self._logger = log or logger

    @property
    def processors(self) -> list[BaseProcessor]:
        return list(self._processors)

    @property
    def processor_names(self) -> list[str]:
        return [p.name for p in self._processors]

    def add_processor(self, processor: BaseProcessor) -> ContextEngine:
        self._processors.append(processor)
        return self

    async def process(
        self,
        source: PipelineContext | list[dict],
        *,
        model: str | None = None,
    ) -> ContextEngineResult:
        if isinstance(source, PipelineContext):
            ctx = source
        else:
            ctx = PipelineContext(messages=list(source), model=model)

        stats = PipelineStats()
        started = time.perf_counter()
        for processor in self._processors:
            if ctx.is_aborted:
                self._logger.debug(
                    "Pipeline aborted before %s: %s", processor.name, ctx.abort_reason
                )
                break

            stage_started = time.perf_counter()
            try:
                ctx = await processor.process(ctx)
            except ProcessingError:
                self._logger.warning("Processor %s failed", processor.name, exc_info=True)
                raise
            elapsed_ms = (time.perf_counter() - stage_started) * 1000
            stats.processor_durations_ms[processor.name] = elapsed_ms
            stats.processed_count += 1
            self._logger.debug(
                "Processor %s done in %.2fms, %d messages",
                processor.name,
                elapsed_ms,
                len(ctx.messages),
            )

        stats.total_duration_ms = (time.perf_counter() - started) * 1000
        return ContextEngineResult(
            messages=list(ctx.messages),
            metadata=dict(ctx.metadata),
            is_aborted=ctx.is_aborted,
            abort_reason=ctx.abort_reason,
            stats=stats,
        )

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from context_engine.errors import ProcessingError

EXECUTED_PROCESSORS_KEY = "executedProcessors"


@dataclass
class PipelineContext:
    """State threaded through the processor chain.

    Stages treat the instance they receive as read-only and hand a new one
    to the next stage; see ``BaseProcessor.clone_context``.
    """

    messages: list[dict]
    metadata: dict = field(default_factory=dict)
    model: str | None = None
    is_aborted: bool = False
    abort_reason: str | None = None


@dataclass(frozen=True)
class ProcessorOptions:
    enabled: bool = True
    logger: logging.Logger | None = None


class BaseProcessor(ABC):
    """Single pipeline stage: ``process(context)`` returns the next context."""

    name: str = "BaseProcessor"

    def __init__(self, options: ProcessorOptions | None = None) -> None:
        self.options = options or ProcessorOptions()
        self.logger = self.options.logger or logging.getLogger(self.__class__.__module__)

    async def process(self, context: PipelineContext) -> PipelineContext:
        if not self.options.enabled:
            self.logger.debug("%s disabled, passing context through", self.name)
            return self.mark_as_executed(self.clone_context(context))

        try:
            result = await self.do_process(context)
        except ProcessingError:
            raise
        except Exception as exc:
            raise ProcessingError(
                str(exc) or exc.__class__.__name__, processor=self.name
            ) from exc

        if result is context:
            result = self.clone_context(context)
        return self.mark_as_executed(result)

    @abstractmethod
    async def do_process(self, context: PipelineContext) -> PipelineContext:
        """Stage logic. Return the input unchanged for "nothing to do", or a clone."""

    def clone_context(self, context: PipelineContext) -> PipelineContext:
        # Message dicts stay shared until a stage replaces them; stages never
        # mutate a message dict in place.
        return replace(
            context,
            messages=list(context.messages),
            metadata=dict(context.metadata),
        )

    def mark_as_executed(self, context: PipelineContext) -> PipelineContext:
        executed = list(context.metadata.get(EXECUTED_PROCESSORS_KEY, []))
        executed.append(self.name)
        return replace(
            context,
            metadata={**context.metadata, EXECUTED_PROCESSORS_KEY: executed},
        )

    def abort(self, context: PipelineContext, reason: str) -> PipelineContext:
        self.logger.info("%s aborted the pipeline: %s", self.name, reason)
        return replace(self.clone_context(context), is_aborted=True, abort_reason=reason)

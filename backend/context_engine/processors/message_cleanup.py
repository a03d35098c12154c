from __future__ import annotations

from context_engine.processors.base import BaseProcessor, PipelineContext
from context_engine.utils.messages import strip_message_metadata


class MessageCleanupProcessor(BaseProcessor):
    """Strip ids, metadata and other internal keys so the payload fits the provider schema.

    Runs last: earlier stages still need ``metadata`` (reactions, selections).
    An empty payload aborts the run, since there is nothing to send.
    """

    name = "MessageCleanupProcessor"

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not context.messages:
            return self.abort(context, "no messages to send")

        cloned = self.clone_context(context)
        cloned.messages = strip_message_metadata(context.messages)
        cloned.metadata["messagesCleaned"] = sum(
            1 for before, after in zip(context.messages, cloned.messages) if before is not after
        )
        return cloned

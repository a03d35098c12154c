from __future__ import annotations

import json

from context_engine.processors.base import BaseProcessor, PipelineContext


def estimate_tokens(messages: list[dict]) -> int:
    """Rough count at four characters per token."""
    total = 0
    for msg in messages:
        content = msg.get("content", "")
        if isinstance(content, str):
            total += len(content) // 4
        elif isinstance(content, list):
            total += len(json.dumps(content)) // 4
        if msg.get("tool_calls"):
            total += len(json.dumps(msg["tool_calls"])) // 4
    return total


class TokenEstimatorProcessor(BaseProcessor):
    """Record the estimated token count of the outgoing message list."""

    name = "TokenEstimatorProcessor"

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        cloned = self.clone_context(context)
        cloned.metadata["estimatedTokens"] = estimate_tokens(cloned.messages)
        return cloned

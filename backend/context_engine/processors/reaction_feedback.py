"""ReactionFeedbackProcessor: turns emoji reactions into inline feedback text."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from context_engine.errors import MalformedInputError
from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions
from context_engine.schemas.context import EmojiReaction

_REACTIONS = TypeAdapter(list[EmojiReaction])

EMOJI_SENTIMENTS: dict[str, str] = {
    "\u2764\ufe0f": "loved this response",
    "\U0001f389": "user found this excellent",
    "\U0001f440": "user wants to look into this more",
    "\U0001f44d": "positive - user found this helpful",
    "\U0001f44e": "negative - user found this unhelpful",
    "\U0001f604": "user found this amusing",
    "\U0001f622": "user found this sad or disappointing",
    "\U0001f680": "user found this impressive",
    "\U0001f914": "user wants more clarification",
}


class ReactionFeedbackConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False


def emoji_sentiment(emoji: str) -> str:
    return EMOJI_SENTIMENTS.get(emoji) or f"reacted with {emoji}"


def reactions_to_feedback(reactions: list[EmojiReaction]) -> str:
    return ", ".join(emoji_sentiment(reaction.emoji) for reaction in reactions)


class ReactionFeedbackProcessor(BaseProcessor):
    """Append ``[User Feedback: ...]`` to assistant messages that received reactions.

    Only plain string content is rewritten; structured content is left alone.
    """

    name = "ReactionFeedbackProcessor"

    def __init__(
        self,
        config: ReactionFeedbackConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or ReactionFeedbackConfig()

    def _reactions_of(self, message: dict) -> list[EmojiReaction]:
        metadata = message.get("metadata")
        if metadata is None:
            return []
        if not isinstance(metadata, dict):
            raise MalformedInputError(
                f"message {message.get('id')} has non-mapping metadata", processor=self.name
            )
        raw = metadata.get("reactions")
        if not raw:
            return []
        try:
            return _REACTIONS.validate_python(raw)
        except ValidationError as exc:
            raise MalformedInputError(
                f"message {message.get('id')} has malformed reactions: {exc}",
                processor=self.name,
            ) from exc

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        if not self.config.enabled:
            return context

        cloned = self.clone_context(context)
        processed_count = 0

        for i, message in enumerate(cloned.messages):
            if message.get("role") != "assistant":
                continue
            reactions = self._reactions_of(message)
            if not reactions:
                continue
            content = message.get("content")
            if not isinstance(content, str):
                continue

            feedback = reactions_to_feedback(reactions)
            if not feedback:
                continue
            cloned.messages[i] = {
                **message,
                "content": f"{content}\n\n[User Feedback: {feedback}]",
            }
            processed_count += 1
            self.logger.debug("Injected feedback for message %s: %s", message.get("id"), feedback)

        cloned.metadata["reactionFeedbackProcessed"] = processed_count
        self.logger.debug("Reaction feedback processed %d messages", processed_count)
        return cloned

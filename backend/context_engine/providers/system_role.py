from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions


class SystemRoleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_role: str | None = None


class SystemRoleInjector(BaseProcessor):
    """Inject the agent's system role at the start, unless a system message already leads."""

    name = "SystemRoleInjector"

    def __init__(
        self,
        config: SystemRoleConfig | None = None,
        options: ProcessorOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.config = config or SystemRoleConfig()

    async def do_process(self, context: PipelineContext) -> PipelineContext:
        prompt = (self.config.system_role or "").strip()
        if not prompt:
            return context

        first = context.messages[0] if context.messages else None
        if first is not None and first.get("role") == "system":
            if first.get("content") != prompt:
                self.logger.debug("Conversation already starts with a system message, keeping it")
            return context

        cloned = self.clone_context(context)
        cloned.messages.insert(0, {"role": "system", "content": prompt})
        cloned.metadata["systemRoleInjected"] = True
        return cloned

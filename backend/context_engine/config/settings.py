from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from context_engine.config.defaults import (
    DEFAULT_HISTORY_COUNT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TOOL_OUTPUT_MAX_CHARS,
)


class ContextEngineSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CONTEXT_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    reaction_feedback_enabled: bool = True
    page_editor_enabled: bool = True
    user_memory_enabled: bool = True
    todo_context_enabled: bool = True
    enable_history_count: bool = False
    history_count: int = DEFAULT_HISTORY_COUNT
    tool_output_max_chars: int = DEFAULT_TOOL_OUTPUT_MAX_CHARS
    log_level: str = DEFAULT_LOG_LEVEL


@lru_cache(maxsize=1)
def get_settings() -> ContextEngineSettings:
    return ContextEngineSettings()

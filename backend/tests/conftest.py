import pytest

from context_engine.config.settings import ContextEngineSettings, get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ContextEngineSettings:
    return ContextEngineSettings(
        _env_file=None,
        reaction_feedback_enabled=True,
        page_editor_enabled=True,
        user_memory_enabled=True,
        todo_context_enabled=True,
        enable_history_count=False,
    )


@pytest.fixture
def conversation() -> list[dict]:
    return [
        {"id": "msg-1", "role": "user", "content": "What is the capital of France?"},
        {
            "id": "msg-2",
            "role": "assistant",
            "content": "Paris is the capital.",
            "metadata": {"reactions": [{"emoji": "\U0001f44d", "count": 2}]},
        },
        {"id": "msg-3", "role": "user", "content": "Summarize this doc"},
    ]

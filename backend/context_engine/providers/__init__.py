from context_engine.providers.base import (
    BaseLastUserContentProvider,
    append_to_last_user_message,
    create_context_block,
    find_last_user_message_index,
    has_existing_system_context,
    insert_into_system_context,
    wrap_with_system_context,
)
from context_engine.providers.history_summary import HistorySummaryConfig, HistorySummaryProvider
from context_engine.providers.page_editor_context import (
    PageEditorContextConfig,
    PageEditorContextInjector,
)
from context_engine.providers.system_role import SystemRoleConfig, SystemRoleInjector
from context_engine.providers.todo_context import TodoContextConfig, TodoContextInjector
from context_engine.providers.user_memory import UserMemoryConfig, UserMemoryInjector

__all__ = [
    "BaseLastUserContentProvider",
    "HistorySummaryConfig",
    "HistorySummaryProvider",
    "PageEditorContextConfig",
    "PageEditorContextInjector",
    "SystemRoleConfig",
    "SystemRoleInjector",
    "TodoContextConfig",
    "TodoContextInjector",
    "UserMemoryConfig",
    "UserMemoryInjector",
    "append_to_last_user_message",
    "create_context_block",
    "find_last_user_message_index",
    "has_existing_system_context",
    "insert_into_system_context",
    "wrap_with_system_context",
]

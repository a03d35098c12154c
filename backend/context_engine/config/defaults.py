"""Static defaults for the context engine."""

DEFAULT_TOOL_OUTPUT_MAX_CHARS = 4000
DEFAULT_HISTORY_COUNT = 20
DEFAULT_TODO_CONTENT_MAX_CHARS = 80
DEFAULT_LOG_LEVEL = "INFO"

SYSTEM_CONTEXT_START = "<!-- SYSTEM CONTEXT (NOT PART OF USER QUERY) -->"
SYSTEM_CONTEXT_END = "<!-- END SYSTEM CONTEXT -->"
SYSTEM_CONTEXT_INSTRUCTION = (
    "<context.instruction>following part contains context information injected by the system. "
    "Please follow these instructions:\n\n"
    "1. Always prioritize handling user-visible content.\n"
    "2. the context is only required when user's queries rely on it.\n"
    "</context.instruction>"
)

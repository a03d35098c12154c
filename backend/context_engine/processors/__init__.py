from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions
from context_engine.processors.group_flatten import GroupMessageFlattenProcessor
from context_engine.processors.history_truncate import (
    HistoryTruncateConfig,
    HistoryTruncateProcessor,
)
from context_engine.processors.message_cleanup import MessageCleanupProcessor
from context_engine.processors.reaction_feedback import (
    ReactionFeedbackConfig,
    ReactionFeedbackProcessor,
)
from context_engine.processors.token_estimator import TokenEstimatorProcessor
from context_engine.processors.tool_result_pruner import (
    ToolResultPrunerConfig,
    ToolResultPrunerProcessor,
)

__all__ = [
    "BaseProcessor",
    "GroupMessageFlattenProcessor",
    "HistoryTruncateConfig",
    "HistoryTruncateProcessor",
    "MessageCleanupProcessor",
    "PipelineContext",
    "ProcessorOptions",
    "ReactionFeedbackConfig",
    "ReactionFeedbackProcessor",
    "TokenEstimatorProcessor",
    "ToolResultPrunerConfig",
    "ToolResultPrunerProcessor",
]

from context_engine.engine import (
    DEFAULT_PROCESSOR_ORDER,
    ContextRequest,
    build_context_engine,
)
from context_engine.errors import FormatterError, MalformedInputError, ProcessingError
from context_engine.pipeline import ContextEngine, ContextEngineResult, PipelineStats
from context_engine.processors.base import BaseProcessor, PipelineContext, ProcessorOptions
from context_engine.providers.base import BaseLastUserContentProvider

__all__ = [
    "DEFAULT_PROCESSOR_ORDER",
    "BaseLastUserContentProvider",
    "BaseProcessor",
    "ContextEngine",
    "ContextEngineResult",
    "ContextRequest",
    "FormatterError",
    "MalformedInputError",
    "PipelineContext",
    "PipelineStats",
    "ProcessingError",
    "ProcessorOptions",
    "build_context_engine",
]

"""
funcpipe - functional pipelines over in-memory collections

Map, filter, sort and deduplicate ordered data with caller-supplied
functions, then collect, reduce or take the first element.
"""

__version__ = "0.1.0"

from .dsl import (
    Pipeline,
    Maybe, Just, Nothing,
    Result, Ok, Err,
    PipelineError,
)
from .exceptions import (
    FuncPipeError,
    StageExecutionError,
    TransformError,
    EmptySequenceError,
    InvalidComparatorError,
)
from .config import PipelineSettings, get_settings, load_config

__all__ = [
    "Pipeline",
    "Maybe",
    "Just",
    "Nothing",
    "Result",
    "Ok",
    "Err",
    "PipelineError",
    "FuncPipeError",
    "StageExecutionError",
    "TransformError",
    "EmptySequenceError",
    "InvalidComparatorError",
    "PipelineSettings",
    "get_settings",
    "load_config",
]

"""
funcpipe DSL - fluent functional pipelines over in-memory collections.

Pipelines:
- Pipeline.of / from_iterable / range / from_arrow build a pipeline
- map, filter, sort, distinct, peek, limit append stages
- to_list, reduce, first, count, sum, average, for_each, to_arrow evaluate

Foundations:
- Steps return Result (Ok/Err) so evaluation stops at the first failure
- first() and average() return Maybe (Just/Nothing)

Example:
    squares = (
        Pipeline.of(1, 2, 3, 4)
        .map(lambda x: x * x)
        .filter(lambda x: x > 4)
        .to_list()
    )  # [9, 16]
"""

# Category theory foundations
from .catpy import (
    Functor, Monad,
    Result, Ok, Err,
    Maybe, Just, Nothing,
    PipelineError, PipelineResult,
    pipeline_ok, pipeline_err,
)

# Core pipeline types
from .core import (
    Pipeline, Context,
    Source, SequenceSource, ArrowSource,
    Step, MapStep, FilterStep, SortStep, DistinctStep, PeekStep, LimitStep,
)

# Functional interfaces and combinators
from .functions import (
    Predicate, Consumer, Supplier,
    UnaryOperator, BinaryOperator, BiFunction, Comparator,
    compose, and_then, identity, const, flip,
    negate, all_of, any_of,
    natural_order, reverse_order, comparing, then_comparing,
)

__all__ = [
    # Category Theory
    "Functor", "Monad",
    "Result", "Ok", "Err",
    "Maybe", "Just", "Nothing",
    "PipelineError", "PipelineResult",
    "pipeline_ok", "pipeline_err",
    # Core
    "Pipeline", "Context",
    "Source", "SequenceSource", "ArrowSource",
    "Step", "MapStep", "FilterStep", "SortStep", "DistinctStep", "PeekStep", "LimitStep",
    # Functional interfaces
    "Predicate", "Consumer", "Supplier",
    "UnaryOperator", "BinaryOperator", "BiFunction", "Comparator",
    "compose", "and_then", "identity", "const", "flip",
    "negate", "all_of", "any_of",
    "natural_order", "reverse_order", "comparing", "then_comparing",
]

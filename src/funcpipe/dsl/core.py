"""
funcpipe Core - Pipeline Evaluator

This module provides the pipeline abstractions:

- Source: produces the ordered input sequence (a snapshot of the caller's data)
- Step: one stage, a function wrapper from a list to Result[list, PipelineError]
- Pipeline: an immutable, builder-style chain of steps bound to a source,
  evaluated by a terminal operation (to_list, reduce, first, ...)

Steps never raise for failures of caller-supplied functions; they return
Err(PipelineError) and the evaluator stops at the first failing stage.
Terminal operations turn that error into a StageExecutionError (or
TransformError for map stages), so a failed evaluation yields no output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import (
    Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar
)

import pyarrow as pa

from ..config import PipelineSettings, get_settings
from ..exceptions import EmptySequenceError
from ..logging_config import get_trace_logger
from .catpy import (
    Err, Just, Maybe, Nothing, PipelineError, PipelineResult,
    pipeline_err, pipeline_ok,
)
from .functions import Comparator, comparing, natural_order

logger = get_trace_logger()

T = TypeVar("T")
U = TypeVar("U")

_MISSING = object()

__all__ = [
    "Context", "Source", "SequenceSource", "ArrowSource",
    "Step", "MapStep", "FilterStep", "SortStep", "DistinctStep",
    "PeekStep", "LimitStep",
    "Pipeline",
]


# =============================================================================
# Evaluation Context
# =============================================================================

@dataclass
class Context:
    """Execution context handed to sources and steps."""
    settings: PipelineSettings = field(default_factory=PipelineSettings)


# =============================================================================
# Sources
# =============================================================================

class Source(ABC, Generic[T]):
    """
    Abstract base for pipeline data sources.

    A source yields a fresh list on every execution, so no step can reach
    back into the caller's collection.
    """

    @abstractmethod
    def execute(self, ctx: Context) -> PipelineResult[List[T]]:
        """Produce the input sequence wrapped in Result."""
        pass


@dataclass(frozen=True)
class SequenceSource(Source[T], Generic[T]):
    """In-memory sequence, snapshotted as a tuple at construction."""
    items: Tuple[T, ...]

    def execute(self, ctx: Context) -> PipelineResult[List[T]]:
        return pipeline_ok(list(self.items))


@dataclass(frozen=True)
class ArrowSource(Source[dict]):
    """Rows of a PyArrow table, one dict per row."""
    table: pa.Table

    def execute(self, ctx: Context) -> PipelineResult[List[dict]]:
        return pipeline_ok(self.table.to_pylist())


# =============================================================================
# Steps
# =============================================================================

class Step(ABC, Generic[T, U]):
    """
    A stage in a pipeline: List[T] -> Result[List[U], PipelineError]

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a step.
    ::: This is stateless.
    """
    name: str = "step"

    @abstractmethod
    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[U]]:
        """Transform input data and return result."""
        pass


@dataclass
class MapStep(Step[T, U], Generic[T, U]):
    """Apply a function to every element, preserving order and count."""
    transform: Callable[[T], U]
    name = "map"

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[U]]:
        result = []
        for index, item in enumerate(data):
            try:
                result.append(self.transform(item))
            except Exception as e:
                return pipeline_err(self.name, "Map failed", e, element_index=index, element=item)
        return pipeline_ok(result)


@dataclass
class FilterStep(Step[T, T], Generic[T]):
    """Keep elements matching the predicate, in their original order."""
    predicate: Callable[[T], bool]
    name = "filter"

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[T]]:
        result = []
        for index, item in enumerate(data):
            try:
                keep = self.predicate(item)
            except Exception as e:
                return pipeline_err(self.name, "Filter failed", e, element_index=index, element=item)
            if keep:
                result.append(item)
        return pipeline_ok(result)


@dataclass
class SortStep(Step[T, T], Generic[T]):
    """Stable sort by comparator, key, or natural order.

    Comparators must describe a consistent total order. Behavior for
    inconsistent comparators is undefined unless strict checking is on
    (strict=True here, or strict_comparators in the settings), in which
    case the sorted output is verified pairwise.
    """
    comparator: Optional[Comparator] = None
    key: Optional[Callable[[T], Any]] = None
    reverse: bool = False
    strict: Optional[bool] = None
    name = "sort"

    def _effective_comparator(self) -> Comparator:
        cmp = self.comparator or natural_order
        if self.key is not None:
            cmp = comparing(self.key, cmp)
        if self.reverse:
            base = cmp
            cmp = lambda a, b: base(b, a)
        return cmp

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[T]]:
        values = data
        if self.key is not None:
            values = []
            for index, item in enumerate(data):
                try:
                    values.append(self.key(item))
                except Exception as e:
                    return pipeline_err(self.name, "Sort key failed", e, element_index=index, element=item)

        # Sort input positions so a failing comparison can name its operands.
        cmp = self.comparator or natural_order
        compared: List[int] = []

        def compare_positions(i: int, j: int) -> int:
            compared[:] = [i, j]
            return cmp(values[i], values[j])

        try:
            positions = sorted(range(len(data)), key=cmp_to_key(compare_positions), reverse=self.reverse)
        except Exception as e:
            i, j = compared or (None, None)
            pair = (data[i], data[j]) if compared else None
            return pipeline_err(self.name, "Sort failed", e, element_index=i, element=pair)
        ordered = [data[i] for i in positions]

        strict = self.strict
        if strict is None:
            strict = ctx.settings.strict_comparators if ctx is not None else False
        if strict:
            return self._verify(ordered)
        return pipeline_ok(ordered)

    def _verify(self, ordered: List[T]) -> PipelineResult[List[T]]:
        """Check adjacent pairs for order, reflexivity and antisymmetry."""
        cmp = self._effective_comparator()
        for index in range(len(ordered) - 1):
            a, b = ordered[index], ordered[index + 1]
            try:
                ab, ba, aa = cmp(a, b), cmp(b, a), cmp(a, a)
            except Exception as e:
                return pipeline_err(self.name, "Comparator failed", e, element_index=index, element=a)
            if ab > 0 or aa != 0 or _sign(ab) != -_sign(ba):
                return pipeline_err(
                    self.name,
                    "Comparator is not a consistent total order",
                    element_index=index,
                    element=(a, b),
                    kind="comparator",
                )
        return pipeline_ok(ordered)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass
class DistinctStep(Step[T, T], Generic[T]):
    """Drop later duplicates by value equality, keeping first occurrences.

    Hashable values are tracked in a set; unhashable ones (lists, dicts)
    fall back to an equality scan.
    """
    key: Optional[Callable[[T], Any]] = None
    name = "distinct"

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[T]]:
        seen = set()
        seen_unhashable: List[Any] = []
        result = []
        for index, item in enumerate(data):
            try:
                k = self.key(item) if self.key else item
            except Exception as e:
                return pipeline_err(self.name, "Distinct key failed", e, element_index=index, element=item)
            try:
                if k in seen:
                    continue
                seen.add(k)
            except TypeError:
                if k in seen_unhashable:
                    continue
                seen_unhashable.append(k)
            result.append(item)
        return pipeline_ok(result)


@dataclass
class PeekStep(Step[T, T], Generic[T]):
    """Call a consumer on each element and pass the data through unchanged."""
    consumer: Callable[[T], Any]
    name = "peek"

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[T]]:
        for index, item in enumerate(data):
            try:
                self.consumer(item)
            except Exception as e:
                return pipeline_err(self.name, "Peek failed", e, element_index=index, element=item)
        return pipeline_ok(list(data))


@dataclass
class LimitStep(Step[T, T], Generic[T]):
    """Keep the first `count` elements."""
    count: int
    name = "limit"

    def execute(self, data: List[T], ctx: Optional[Context] = None) -> PipelineResult[List[T]]:
        return pipeline_ok(data[:self.count])


# =============================================================================
# Pipeline
# =============================================================================

@dataclass
class Pipeline(Generic[T]):
    """
    An immutable, composable data transformation pipeline.

    Every stage method returns a new Pipeline and leaves the receiver
    untouched, so a pipeline can be shared and extended in several
    directions. Nothing runs until a terminal operation is called.

    Example:
        names = (
            Pipeline.of("red", "green", "blue")
            .filter(lambda s: len(s) > 3)
            .map(str.upper)
            .sort()
            .to_list()
        )  # ["BLUE", "GREEN"]

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is stateless.
    """
    _source: Source[Any]
    _steps: List[Step] = field(default_factory=list)
    _settings: Optional[PipelineSettings] = None

    def _add_step(self, step: Step) -> "Pipeline":
        """Add a step to the pipeline and return a new pipeline."""
        return Pipeline(
            _source=self._source,
            _steps=self._steps + [step],
            _settings=self._settings,
        )

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_source(cls, source: Source[T]) -> "Pipeline[T]":
        """Create pipeline from a custom Source."""
        return cls(_source=source)

    @classmethod
    def from_iterable(cls, items: Iterable[T]) -> "Pipeline[T]":
        """Create pipeline over a snapshot of items."""
        return cls(_source=SequenceSource(tuple(items)))

    @classmethod
    def of(cls, *items: T) -> "Pipeline[T]":
        return cls.from_iterable(items)

    @classmethod
    def range(cls, *args: int) -> "Pipeline[int]":
        """Pipeline over range(*args), e.g. Pipeline.range(1, 4) -> 1, 2, 3."""
        return cls.from_iterable(range(*args))

    @classmethod
    def from_arrow(cls, table: pa.Table) -> "Pipeline[dict]":
        """Create pipeline over the rows of a PyArrow table."""
        if not isinstance(table, pa.Table):
            raise TypeError(f"from_arrow() expects a pyarrow.Table, got {type(table).__name__}")
        return cls(_source=ArrowSource(table))

    def with_settings(self, settings: PipelineSettings) -> "Pipeline[T]":
        """Use explicit settings instead of the loaded configuration."""
        return Pipeline(_source=self._source, _steps=list(self._steps), _settings=settings)

    # -------------------------------------------------------------------------
    # Stages (fluent API)
    # -------------------------------------------------------------------------

    def map(self, transform: Callable[[T], U]) -> "Pipeline[U]":
        """Transform each element."""
        return self._add_step(MapStep(transform))

    def filter(self, predicate: Callable[[T], bool]) -> "Pipeline[T]":
        """Keep elements matching predicate."""
        return self._add_step(FilterStep(predicate))

    def sort(self, comparator: Optional[Comparator] = None, *,
             key: Optional[Callable[[T], Any]] = None,
             reverse: bool = False,
             strict: Optional[bool] = None) -> "Pipeline[T]":
        """Stable sort by comparator, key, or natural order."""
        return self._add_step(SortStep(comparator, key, reverse, strict))

    def distinct(self, key: Optional[Callable[[T], Any]] = None) -> "Pipeline[T]":
        """Remove later duplicates."""
        return self._add_step(DistinctStep(key))

    def peek(self, consumer: Callable[[T], Any]) -> "Pipeline[T]":
        """Observe each element without changing it."""
        return self._add_step(PeekStep(consumer))

    def limit(self, count: int) -> "Pipeline[T]":
        """Keep at most count elements."""
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError(f"limit() count must be an int, got {type(count).__name__}")
        if count < 0:
            raise ValueError(f"limit() count must be >= 0, got {count}")
        return self._add_step(LimitStep(count))

    def __rshift__(self, step: Step) -> "Pipeline":
        """Syntactic sugar: pipeline >> step"""
        return self._add_step(step)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _context(self) -> Context:
        return Context(settings=self._settings or get_settings())

    def run(self) -> PipelineResult[List[T]]:
        """
        Evaluate all stages and return Result.

        Errors short-circuit: the first failing stage ends evaluation and
        its PipelineError, stamped with the stage index, is returned.
        A step that raises instead of returning Err is reported the same way.
        """
        ctx = self._context()
        source_result = self._source.execute(ctx)
        if source_result.is_err():
            return source_result

        current = source_result.unwrap()
        total = len(self._steps)
        for index, step in enumerate(self._steps):
            logger.debug("Stage %d/%d %s over %d elements", index + 1, total, step.name, len(current))
            try:
                result = step.execute(current, ctx)
            except Exception as e:
                result = pipeline_err(step.name, f"{step.name.capitalize()} failed", e)
            if result.is_err():
                error = result.error.at_stage(index)
                logger.debug("Stage %d/%d %s failed: %s", index + 1, total, step.name, error)
                return Err(error)
            current = result.unwrap()

        return pipeline_ok(current)

    def _evaluate(self) -> List[T]:
        result = self.run()
        if result.is_err():
            logger.warning("Pipeline evaluation failed: %s", result.error)
        return result.unwrap()

    def _terminal_failure(self, stage: str, cause: Exception, index: int, element: Any) -> Exception:
        error = PipelineError(
            stage=stage,
            message=f"{stage.capitalize()} failed",
            element_index=index,
            element=element,
            cause=cause,
        ).at_stage(len(self._steps))
        logger.warning("Pipeline evaluation failed: %s", error)
        return error.to_exception()

    # -------------------------------------------------------------------------
    # Terminal operations
    # -------------------------------------------------------------------------

    def to_list(self) -> List[T]:
        """Evaluate and collect the elements into a list."""
        return self._evaluate()

    collect = to_list

    def first(self) -> Maybe[T]:
        """First element as Just, or Nothing for an empty result."""
        items = self._evaluate()
        return Just(items[0]) if items else Nothing()

    def count(self) -> int:
        return len(self._evaluate())

    def reduce(self, initial: Any = _MISSING,
               combiner: Optional[Callable[[Any, T], Any]] = None) -> Any:
        """
        Fold elements left-to-right.

        reduce(0, operator.add) starts from 0. Without an initial value,
        reduce(combiner=fn) starts from the first element and raises
        EmptySequenceError when there are no elements.
        """
        if combiner is None:
            raise TypeError("reduce() requires a combiner; pass it as combiner= when no initial value is given")

        items = self._evaluate()
        if initial is _MISSING:
            if not items:
                raise EmptySequenceError("reduce() of empty sequence with no initial value")
            accumulator, start = items[0], 1
        else:
            accumulator, start = initial, 0

        for index in range(start, len(items)):
            try:
                accumulator = combiner(accumulator, items[index])
            except Exception as e:
                raise self._terminal_failure("reduce", e, index, items[index]) from e
        return accumulator

    def _keyed(self, stage: str, key: Optional[Callable[[T], Any]]) -> Sequence[Any]:
        items = self._evaluate()
        if key is None:
            return items
        values = []
        for index, item in enumerate(items):
            try:
                values.append(key(item))
            except Exception as e:
                raise self._terminal_failure(stage, e, index, item) from e
        return values

    def sum(self, key: Optional[Callable[[T], Any]] = None, start: Any = 0) -> Any:
        """Sum of the elements, or of key(element), e.g. sum(key=book.pages)."""
        total = start
        for index, value in enumerate(self._keyed("sum", key)):
            try:
                total = total + value
            except Exception as e:
                raise self._terminal_failure("sum", e, index, value) from e
        return total

    def average(self, key: Optional[Callable[[T], Any]] = None) -> Maybe[float]:
        """Arithmetic mean as Just, or Nothing for an empty result."""
        values = self._keyed("average", key)
        if not values:
            return Nothing()
        total = 0
        for index, value in enumerate(values):
            try:
                total = total + value
            except Exception as e:
                raise self._terminal_failure("average", e, index, value) from e
        return Just(total / len(values))

    def for_each(self, consumer: Callable[[T], Any]) -> None:
        """Call consumer on every element, in order."""
        for index, item in enumerate(self._evaluate()):
            try:
                consumer(item)
            except Exception as e:
                raise self._terminal_failure("for_each", e, index, item) from e

    def to_arrow(self) -> pa.Table:
        """Collect into a PyArrow table. Non-dict elements become a 'value' column."""
        items = self._evaluate()
        if not items:
            return pa.table({})
        rows = [item if isinstance(item, dict) else {"value": item} for item in items]
        return pa.Table.from_pylist(rows)

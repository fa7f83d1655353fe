"""
catpy.py — Category-theory-inspired foundations for funcpipe.

This module provides the value types the pipeline evaluator is built on:
- Core typeclasses: Functor, Monad
- Maybe (Just/Nothing): the optional-style container returned by first()
  and average()
- Result (Ok/Err): how steps report success or a PipelineError without
  raising, so the evaluator can stop at the first failing stage
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Optional, TypeVar

from ..exceptions import (
    EmptySequenceError,
    InvalidComparatorError,
    StageExecutionError,
    TransformError,
)

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")

# ---------------------------------------------------------------------------
# Core typeclasses
# ---------------------------------------------------------------------------

class Functor(ABC, Generic[T]):
    """
    A structure that supports mapping a function over the values it contains.

    Laws (for all f: a->b, g: b->c):
      1) Identity:     fmap(id)      == id
      2) Composition:  fmap(g)∘fmap(f) == fmap(g∘f)
    """

    @abstractmethod
    def fmap(self, f: Callable[[T], U]) -> "Functor[U]":
        """Map a pure function over the structure."""
        raise NotImplementedError

    def map(self, f: Callable[[T], U]) -> "Functor[U]":
        return self.fmap(f)


class Monad(Functor[T], ABC):
    """
    A Functor that can also sequence computations returning wrapped values.

    Laws (for all x and functions f: a -> m b, g: b -> m c):
      1) Left identity:  pure(x).bind(f) == f(x)
      2) Right identity: m.bind(pure)    == m
      3) Associativity:  m.bind(f).bind(g) == m.bind(lambda x: f(x).bind(g))
    """

    @classmethod
    @abstractmethod
    def pure(cls, x: U) -> "Monad[U]":
        """Lift a value into the context."""
        raise NotImplementedError

    @abstractmethod
    def bind(self, f: Callable[[T], "Monad[U]"]) -> "Monad[U]":
        """Chain a function that returns a wrapped value (aka flatMap)."""
        raise NotImplementedError

    def flat_map(self, f: Callable[[T], "Monad[U]"]) -> "Monad[U]":
        return self.bind(f)

    def __rshift__(self, f: Callable[[T], "Monad[U]"]) -> "Monad[U]":
        """Syntactic sugar: m >> f == m.bind(f)"""
        return self.bind(f)


# ---------------------------------------------------------------------------
# Maybe
# ---------------------------------------------------------------------------

class Maybe(Monad[T], ABC):
    """
    Optional value: either Just(value) or Nothing().

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a monad.
    ::: This is stateless.
    """

    @classmethod
    def pure(cls, x: U) -> "Maybe[U]":  # type: ignore[override]
        return Just(x)

    @classmethod
    def of_nullable(cls, x: Optional[U]) -> "Maybe[U]":
        """Just(x) unless x is None."""
        return Nothing() if x is None else Just(x)

    def is_present(self) -> bool:
        return isinstance(self, Just)

    def is_empty(self) -> bool:
        return isinstance(self, Nothing)

    def get(self) -> T:
        """Get the value or raise EmptySequenceError if Nothing."""
        if isinstance(self, Just):
            return self.value
        raise EmptySequenceError("No value present")

    def get_or_else(self, default: T) -> T:
        """Get the value or return default if Nothing."""
        if isinstance(self, Just):
            return self.value
        return default

    def or_else(self, alternative: "Maybe[T]") -> "Maybe[T]":
        """Return self if Just, otherwise return alternative."""
        if isinstance(self, Just):
            return self
        return alternative

    def if_present(self, consumer: Callable[[T], Any]) -> None:
        """Call consumer with the value when there is one."""
        if isinstance(self, Just):
            consumer(self.value)

    def filter(self, predicate: Callable[[T], bool]) -> "Maybe[T]":
        if isinstance(self, Just) and predicate(self.value):
            return self
        return Nothing()


@dataclass(frozen=True)
class Just(Maybe[T]):
    """A present value."""
    value: T

    def bind(self, f: Callable[[T], Maybe[U]]) -> Maybe[U]:
        return f(self.value)

    def fmap(self, f: Callable[[T], U]) -> Maybe[U]:  # type: ignore[override]
        return Just(f(self.value))

    def __repr__(self) -> str:
        return f"Just({self.value!r})"


@dataclass(frozen=True)
class Nothing(Maybe[Any]):
    """An absent value."""

    def bind(self, f: Callable[[Any], Maybe[U]]) -> Maybe[U]:
        return self  # type: ignore[return-value]

    def fmap(self, f: Callable[[Any], U]) -> Maybe[U]:  # type: ignore[override]
        return self  # type: ignore[return-value]

    def __repr__(self) -> str:
        return "Nothing()"


# ---------------------------------------------------------------------------
# Pipeline Error Type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineError:
    """Failure of one stage during pipeline evaluation.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.

    stage_index is -1 while the error travels inside a step; the evaluator
    stamps the real position with at_stage() before returning it.
    """
    stage: str
    message: str
    stage_index: int = -1
    element_index: Optional[int] = None
    element: Any = None
    cause: Optional[BaseException] = None
    kind: str = "stage"  # "stage" | "comparator"

    def at_stage(self, index: int) -> "PipelineError":
        return replace(self, stage_index=index)

    def __str__(self) -> str:
        where = f"{self.stage}#{self.stage_index}"
        if self.element_index is not None:
            where += f" @ element {self.element_index}"
        if self.cause is not None:
            return f"[{where}] {self.message}: {self.cause}"
        return f"[{where}] {self.message}"

    def to_exception(self) -> Exception:
        """Build the exception a terminal operation raises for this error."""
        if self.kind == "comparator":
            left, right = self.element if isinstance(self.element, tuple) else (None, None)
            return InvalidComparatorError(
                str(self), stage_index=self.stage_index, left=left, right=right
            )
        error_cls = TransformError if self.stage == "map" else StageExecutionError
        return error_cls(
            str(self),
            stage=self.stage,
            stage_index=self.stage_index,
            element_index=self.element_index,
            element=self.element,
            cause=self.cause,
        )


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class Result(Monad[T], ABC, Generic[T, E]):
    """
    Tagged union for success or failure with an error value.
    - Ok(value)
    - Err(error)

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a monad.
    ::: This is stateless.
    """

    @classmethod
    def pure(cls, x: U) -> "Result[U, E]":  # type: ignore[override]
        return Ok(x)

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """Get the value, or raise the error.

        A PipelineError is raised as its matching funcpipe exception;
        any other error value raises ValueError.
        """
        if isinstance(self, Ok):
            return self.value
        error = self.error  # type: ignore[attr-defined]
        if isinstance(error, PipelineError):
            raise error.to_exception() from error.cause
        raise ValueError(f"Cannot unwrap Err: {self}")

    def unwrap_or(self, default: T) -> T:
        """Get the value or return default if Err."""
        if isinstance(self, Ok):
            return self.value
        return default

    def map_err(self, f: Callable[[E], E]) -> "Result[T, E]":
        """Map a function over the error value."""
        if isinstance(self, Err):
            return Err(f(self.error))
        return self


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """A successful result."""
    value: T

    def bind(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return f(self.value)

    def fmap(self, f: Callable[[T], U]) -> Result[U, E]:  # type: ignore[override]
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Result[Any, E]):
    """A failed result carrying error information."""
    error: E

    def bind(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]:
        return self  # type: ignore[return-value]

    def fmap(self, f: Callable[[Any], U]) -> Result[U, E]:  # type: ignore[override]
        return self  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for pipeline results
PipelineResult = Result[T, PipelineError]


def pipeline_ok(value: T) -> PipelineResult[T]:
    """Create a successful pipeline result."""
    return Ok(value)


def pipeline_err(
    stage: str,
    message: str,
    cause: Optional[BaseException] = None,
    *,
    element_index: Optional[int] = None,
    element: Any = None,
    kind: str = "stage",
) -> PipelineResult[Any]:
    """Create a failed pipeline result."""
    return Err(PipelineError(
        stage=stage,
        message=message,
        element_index=element_index,
        element=element,
        cause=cause,
        kind=kind,
    ))

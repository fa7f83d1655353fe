"""
funcpipe Exception Hierarchy

Contains all exception classes raised by pipeline terminal operations.
"""

from typing import Any, Optional


class FuncPipeError(Exception):
    """
    Base exception for all funcpipe operations.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class StageExecutionError(FuncPipeError):
    """
    Raised when a caller-supplied stage function raises during evaluation.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.

    Attributes:
        stage: Name of the failing stage ("map", "filter", "sort", ...)
        stage_index: 0-based position of the stage in the pipeline. Terminal
            operations (reduce, for_each, ...) use the index one past the
            last intermediate stage.
        element_index: 0-based position of the offending element in the
            stage's input, or None when the failure is not tied to one
            element (e.g. a comparator failing mid-sort)
        element: The offending element, if known
        cause: The original exception
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        stage_index: int,
        element_index: Optional[int] = None,
        element: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.stage_index = stage_index
        self.element_index = element_index
        self.element = element
        self.cause = cause


class TransformError(StageExecutionError):
    """
    Raised when the function of a map stage fails for an element.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class EmptySequenceError(FuncPipeError):
    """
    Raised when a value is requested from an empty sequence.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.

    Covers reduce() without an initial value over no elements, and get()
    on an empty Maybe.
    """
    pass


class InvalidComparatorError(FuncPipeError):
    """
    Raised when strict comparator checking detects a comparator that is
    not a consistent total order.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """

    def __init__(self, message: str, *, stage_index: int, left: Any = None, right: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage_index = stage_index
        self.left = left
        self.right = right


__all__ = [
    "FuncPipeError",
    "StageExecutionError",
    "TransformError",
    "EmptySequenceError",
    "InvalidComparatorError",
]

"""
Functional interfaces and combinators.

Type aliases name the shapes of the callables stages accept, and the
helpers build new callables out of existing ones:

- Predicate / Consumer / Supplier / UnaryOperator / BinaryOperator /
  BiFunction / Comparator
- compose, and_then, identity, const, flip
- negate, all_of, any_of for predicates
- natural_order, reverse_order, comparing, then_comparing for comparators

Comparators follow the cmp convention: negative, zero or positive int.
"""

from typing import Any, Callable, TypeVar

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")

Predicate = Callable[[T], bool]
Consumer = Callable[[T], None]
Supplier = Callable[[], T]
UnaryOperator = Callable[[T], T]
BinaryOperator = Callable[[T, T], T]
BiFunction = Callable[[T, U], V]
Comparator = Callable[[T, T], int]

__all__ = [
    "Predicate", "Consumer", "Supplier",
    "UnaryOperator", "BinaryOperator", "BiFunction", "Comparator",
    "compose", "and_then", "identity", "const", "flip",
    "negate", "all_of", "any_of",
    "natural_order", "reverse_order", "comparing", "then_comparing",
]


# ---------------------------------------------------------------------------
# Function composition
# ---------------------------------------------------------------------------

def compose(f: Callable[[U], V], g: Callable[[T], U]) -> Callable[[T], V]:
    """Function composition: compose(f, g)(x) == f(g(x))"""
    return lambda x: f(g(x))


def and_then(f: Callable[[T], U], g: Callable[[U], V]) -> Callable[[T], V]:
    """Left-to-right composition: and_then(f, g)(x) == g(f(x))"""
    return lambda x: g(f(x))


def identity(x: T) -> T:
    """Identity function."""
    return x


def const(x: T) -> Callable[..., T]:
    """Constant function, usable as a Supplier: const(x)() == x."""
    return lambda *_: x


def flip(f: Callable[[T, U], V]) -> Callable[[U, T], V]:
    """Flip argument order: flip(f)(x, y) == f(y, x)."""
    return lambda x, y: f(y, x)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def negate(predicate: Predicate) -> Predicate:
    return lambda x: not predicate(x)


def all_of(*predicates: Predicate) -> Predicate:
    """True when every predicate holds (true for no predicates)."""
    return lambda x: all(p(x) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    """True when at least one predicate holds (false for no predicates)."""
    return lambda x: any(p(x) for p in predicates)


# ---------------------------------------------------------------------------
# Comparators
# ---------------------------------------------------------------------------

def natural_order(a: Any, b: Any) -> int:
    """Compare with < and >, like sorted() does."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def reverse_order(comparator: Comparator = natural_order) -> Comparator:
    return lambda a, b: comparator(b, a)


def comparing(key: Callable[[T], Any], comparator: Comparator = natural_order) -> Comparator:
    """Comparator over key(element), e.g. comparing(lambda b: b.pages)."""
    return lambda a, b: comparator(key(a), key(b))


def then_comparing(first: Comparator, second: Comparator) -> Comparator:
    """Use second only to break ties left by first."""
    def combined(a: Any, b: Any) -> int:
        result = first(a, b)
        return result if result != 0 else second(a, b)
    return combined

"""
Tests for functional interfaces and combinators.
"""

import operator

from funcpipe import Pipeline
from funcpipe.dsl.functions import (
    compose, and_then, identity, const, flip,
    negate, all_of, any_of,
    natural_order, reverse_order, comparing, then_comparing,
)


class TestComposition:

    def test_compose_applies_right_first(self):
        f = compose(lambda s: len(s), str)
        assert f(26) == 2

    def test_and_then_applies_left_first(self):
        f = and_then(lambda x: x + 1, lambda x: x * 10)
        assert f(1) == 20

    def test_identity(self):
        marker = object()
        assert identity(marker) is marker

    def test_const_as_supplier(self):
        supplier = const("fun")
        assert supplier() == "fun"
        assert supplier(1, 2) == "fun"

    def test_flip(self):
        assert flip(operator.sub)(2, 10) == 8

    def test_method_reference_style(self):
        greeting = "Hello, ".__add__
        assert Pipeline.of("World", "Peggy").map(greeting).to_list() == ["Hello, World", "Hello, Peggy"]


class TestPredicates:

    def test_negate(self):
        short = lambda s: len(s) < 10
        assert negate(short)("a long sentence")
        assert not negate(short)("Apples")

    def test_all_of(self):
        p = all_of(lambda x: x > 0, lambda x: x % 2 == 0)
        assert Pipeline.of(-2, 1, 2, 4).filter(p).to_list() == [2, 4]
        assert all_of()(None)

    def test_any_of(self):
        p = any_of(lambda s: s.startswith("a"), lambda s: s.endswith("y"))
        assert Pipeline.of("apple", "pear", "cherry").filter(p).to_list() == ["apple", "cherry"]
        assert not any_of()(None)


class TestComparators:

    def test_natural_order(self):
        assert natural_order(1, 2) == -1
        assert natural_order(2, 1) == 1
        assert natural_order("a", "a") == 0

    def test_reverse_order(self):
        names = ["Paul", "Jane", "Michaela", "Sam"]
        assert Pipeline.from_iterable(names).sort(reverse_order()).to_list() == ["Sam", "Paul", "Michaela", "Jane"]

    def test_comparing(self):
        cmp = comparing(len)
        assert cmp("aa", "b") == 1
        assert cmp("b", "cc") == -1

    def test_then_comparing(self):
        cmp = then_comparing(comparing(len), natural_order)
        words = ["pear", "fig", "kiwi", "apple", "date"]
        assert Pipeline.from_iterable(words).sort(cmp).to_list() == ["fig", "date", "kiwi", "pear", "apple"]

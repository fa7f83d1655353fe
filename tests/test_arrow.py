"""
Tests for the PyArrow source and collector.
"""

import pyarrow as pa
import pytest

from funcpipe import Pipeline, Just


@pytest.fixture
def book_table():
    return pa.table({
        "title": ["Miss Peregrine's Home", "Harry Potter", "The Cat in the Hat"],
        "author": ["Riggs", "Rowling", "Seuss"],
        "pages": [382, 411, 45],
    })


class TestArrowBridge:

    def test_from_arrow_rows_are_dicts(self, book_table):
        rows = Pipeline.from_arrow(book_table).to_list()
        assert rows[0] == {"title": "Miss Peregrine's Home", "author": "Riggs", "pages": 382}

    def test_from_arrow_pipeline(self, book_table):
        authors = (
            Pipeline.from_arrow(book_table)
            .filter(lambda r: r["pages"] > 100)
            .sort(key=lambda r: r["pages"], reverse=True)
            .map(lambda r: r["author"])
            .to_list()
        )
        assert authors == ["Rowling", "Riggs"]

    def test_sum_over_table(self, book_table):
        assert Pipeline.from_arrow(book_table).sum(key=lambda r: r["pages"]) == 838

    def test_from_arrow_rejects_non_table(self):
        with pytest.raises(TypeError, match="expects a pyarrow.Table"):
            Pipeline.from_arrow([{"a": 1}])

    def test_to_arrow_from_dicts(self, sample_data):
        table = Pipeline.from_iterable(sample_data).filter(lambda r: r["count"] >= 10).to_arrow()
        assert table.num_rows == 3
        assert table.column("name").to_pylist() == ["Foo", "Bar", "Qux"]

    def test_to_arrow_wraps_scalars(self):
        table = Pipeline.range(3).to_arrow()
        assert table.column_names == ["value"]
        assert table.column("value").to_pylist() == [0, 1, 2]

    def test_to_arrow_empty(self):
        assert Pipeline.of().to_arrow().num_rows == 0

    def test_round_trip_first(self, book_table):
        table = Pipeline.from_arrow(book_table).sort(key=lambda r: r["title"]).to_arrow()
        assert Pipeline.from_arrow(table).map(lambda r: r["title"]).first() == Just("Harry Potter")

import pytest

from rmqtimeline.analysis.timeline import TimelineIndexer
from rmqtimeline.core.models import Entry


def make_entry(source_id, timestamp, message="msg"):
    return Entry(
        source_id=source_id,
        timestamp=timestamp,
        severity_tag="info",
        process_id="0.1.0",
        body_lines=[message],
    )


def test_rows_are_sorted_and_deduplicated():
    entries = [
        make_entry(0, "2023-01-02 00:00:00.000"),
        make_entry(0, "2023-01-01 23:59:59.999"),
        make_entry(1, "2023-01-01 23:59:59.999"),
        make_entry(1, "2023-01-01 09:00:00.000"),
    ]

    table = TimelineIndexer().build(entries, node_count=2)

    assert table.timestamps == [
        "2023-01-01 09:00:00.000",
        "2023-01-01 23:59:59.999",
        "2023-01-02 00:00:00.000",
    ]
    assert len(table) == 3


def test_table_is_dense_in_node_width():
    entries = [make_entry(0, "2023-01-01 10:00:00.000"), make_entry(2, "2023-01-01 10:00:01.000")]

    table = TimelineIndexer().build(entries, node_count=4)

    for _, cells in table:
        assert len(cells) == 4
    assert table.cell("2023-01-01 10:00:00.000", 1) == []
    assert table.cell("2023-01-01 10:00:00.000", 3) == []


def test_shared_timestamp_occupies_one_row():
    a = make_entry(0, "2023-01-01 10:00:00.000", "a")
    b = make_entry(1, "2023-01-01 10:00:00.000", "b")

    table = TimelineIndexer().build([a, b], node_count=2)

    assert len(table) == 1
    assert table.row("2023-01-01 10:00:00.000") == [[a], [b]]


def test_cell_keeps_encounter_order():
    first = make_entry(0, "2023-01-01 10:00:00.000", "first")
    second = make_entry(0, "2023-01-01 10:00:00.000", "second")
    third = make_entry(0, "2023-01-01 10:00:00.000", "third")

    table = TimelineIndexer().build([first, second, third], node_count=1)

    assert table.cell("2023-01-01 10:00:00.000", 0) == [first, second, third]


def test_every_entry_is_indexed_exactly_once():
    entries = [
        make_entry(i % 3, f"2023-01-01 10:00:{i % 7:02d}.000", str(i)) for i in range(30)
    ]

    table = TimelineIndexer().build(entries, node_count=3)

    indexed = [id(e) for _, cells in table for cell in cells for e in cell]
    assert table.entry_count() == len(entries)
    assert sorted(indexed) == sorted(id(e) for e in entries)


def test_empty_input_gives_empty_table():
    table = TimelineIndexer().build([], node_count=2)

    assert len(table) == 0
    assert table.node_count == 2
    assert table.entry_count() == 0


def test_entry_from_unregistered_source_is_rejected():
    with pytest.raises(ValueError):
        TimelineIndexer().build([make_entry(2, "2023-01-01 10:00:00.000")], node_count=2)

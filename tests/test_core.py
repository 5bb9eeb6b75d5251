from rmqtimeline import TimelineAnalyzer
from rmqtimeline.core.exceptions import MalformedContinuationError, ParseError, RmqTimelineError
from rmqtimeline.core.models import Entry, EntryStore, Severity


def test_timeline_analyzer_initialization():
    """Test the initialization of TimelineAnalyzer."""
    analyzer = TimelineAnalyzer()
    assert isinstance(analyzer, TimelineAnalyzer), (
        "TimelineAnalyzer should be initialized correctly."
    )
    assert analyzer.log_format is None


def test_entry_body_is_never_empty():
    entry = Entry(source_id=0, timestamp="t", severity_tag="info", process_id="p", body_lines=[])

    assert entry.body_lines == [""]
    assert entry.text == ""


def test_entry_store_keeps_load_order():
    store = EntryStore()
    a = Entry(0, "2023-01-01 10:00:01.000", "info", "p", ["a"])
    b = Entry(1, "2023-01-01 10:00:00.000", "info", "p", ["b"])
    c = Entry(0, "2023-01-01 10:00:00.000", "info", "p", ["c"])

    store.extend([a, c])
    store.extend([b])

    assert list(store) == [a, c, b]
    assert len(store) == 3


def test_severity_values():
    assert [s.value for s in Severity] == ["info", "warning", "error"]


def test_exception_hierarchy():
    error = MalformedContinuationError(2, 9, "orphan")

    assert isinstance(error, ParseError)
    assert isinstance(error, RmqTimelineError)
    assert "source 2" in str(error)

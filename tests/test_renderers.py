import json

import pytest

from rmqtimeline import TimelineAnalyzer
from rmqtimeline.render.factory import get_renderer, get_supported_renderers
from rmqtimeline.render.html_renderer import HtmlRenderer
from rmqtimeline.render.json_renderer import JsonRenderer
from rmqtimeline.render.text_renderer import TextRenderer

NODE_A = [
    "2023-01-01 10:00:00.000 [info] <0.33.0> ",
    " Starting RabbitMQ 3.8.9 on Erlang 22.3",
    "2023-01-01 10:00:00.000 [info] <0.33.0> ",
    " node           : rabbit@a",
    " cookie hash    : abc==",
    "2023-01-01 10:00:05.000 [warning] <0.500.0> closing AMQP connection <0.500.0> (10.0.0.2:5000 -> 10.0.0.1:5672)",
]
NODE_B = [
    "2023-01-01 10:00:05.000 [error] <0.90.0> node rabbit@a down: net_tick_timeout",
]


@pytest.fixture
def report():
    return TimelineAnalyzer().analyze_streams([("rabbit-a.log", NODE_A), ("rabbit-b.log", NODE_B)])


def test_html_renderer(report):
    html = HtmlRenderer().render(report)

    assert html.startswith("<!DOCTYPE html>")
    assert html.count("<h3>rabbit-a.log</h3>") == 2
    assert "2023-01-01 10:00:00.000 rabbit@a" in html
    assert "2023-01-01 10:00:00.000 3.8.9" in html
    assert '<div class="prewrap s_warning"><strong>[warning]</strong>' in html
    assert "closing AMQP connection &lt;0.500.0&gt;" in html
    assert '<div class="prewrap s_report f_error"><strong>=REPORT=</strong> node rabbit@a down: net_tick_timeout</div>' in html
    assert "=REPORT=</strong> RabbitMQ is starting" in html


def test_html_rows_are_dense(report):
    html = HtmlRenderer().render(report)
    timeline = html.split("<tbody>")[1]

    # One timestamp cell plus one cell per node in every row
    rows = [row for row in timeline.split("<tr>")[1:]]
    assert len(rows) == 2
    for row in rows:
        assert row.count("<td>") == 2


def test_json_renderer(report):
    document = json.loads(JsonRenderer().render(report))

    assert [n["file_label"] for n in document["nodes"]] == ["rabbit-a.log", "rabbit-b.log"]
    assert document["nodes"][0]["cluster_name"] == "2023-01-01 10:00:00.000 rabbit@a"
    assert [r["timestamp"] for r in document["rows"]] == [
        "2023-01-01 10:00:00.000",
        "2023-01-01 10:00:05.000",
    ]
    for row in document["rows"]:
        assert len(row["cells"]) == 2

    shared = document["rows"][1]["cells"]
    assert shared[1][0]["findings"] == [
        {"message": "node rabbit@a down: net_tick_timeout", "severity": "error"}
    ]
    assert document["summary"]["total_entries"] == 4
    assert document["summary"]["shared_rows"] == 1


def test_text_renderer(report):
    text = TextRenderer().render(report)

    assert "RABBITMQ CLUSTER TIMELINE" in text
    assert "Name: 2023-01-01 10:00:00.000 rabbit@a" in text
    assert "2023-01-01 10:00:05.000 rabbit-b.log [error] node rabbit@a down: net_tick_timeout" in text
    assert "=REPORT= (info) RabbitMQ is starting" in text


def test_renderers_accept_empty_report():
    empty = TimelineAnalyzer().analyze_streams([])

    for name in get_supported_renderers():
        assert get_renderer(name).render(empty)


def test_get_renderer():
    assert isinstance(get_renderer("html"), HtmlRenderer)
    assert isinstance(get_renderer("json"), JsonRenderer)
    assert isinstance(get_renderer("text"), TextRenderer)
    with pytest.raises(ValueError):
        get_renderer("xml")

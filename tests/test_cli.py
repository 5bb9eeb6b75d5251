import json

from rmqtimeline import __version__
from rmqtimeline.cli.main import main

LOG_A = "2023-01-01 10:00:00.000 [info] <0.1.0> Starting RabbitMQ 3.11.0 on Erlang 25.0\n"
LOG_B = "2023-01-01 10:00:00.000 [info] <0.2.0> SIGTERM received - shutting down\n"


def write_logs(tmp_path):
    a = tmp_path / "rabbit-a.log"
    b = tmp_path / "rabbit-b.log"
    a.write_text(LOG_A)
    b.write_text(LOG_B)
    return str(a), str(b)


def test_no_files_prints_version_and_usage(capsys):
    assert main([]) == 0

    out = capsys.readouterr().out
    assert f"rmqtimeline version {__version__}" in out
    assert "usage:" in out


def test_version_flag(capsys):
    assert main(["--version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_missing_file_is_reported(tmp_path, capsys):
    missing = str(tmp_path / "missing.log")

    assert main([missing]) == 1
    assert f'Cannot access "{missing}"' in capsys.readouterr().err


def test_label_count_must_match(tmp_path, capsys):
    a, b = write_logs(tmp_path)

    assert main([a, b, "--labels", "only-one"]) == 1
    assert "labels" in capsys.readouterr().err


def test_html_to_stdout(tmp_path, capsys):
    a, b = write_logs(tmp_path)

    assert main([a, b]) == 0

    out = capsys.readouterr().out
    assert "<table" in out
    assert "<h3>rabbit-a.log</h3>" in out
    assert "Stopped via termination signal" in out


def test_json_to_file(tmp_path):
    a, b = write_logs(tmp_path)
    output = tmp_path / "timeline.json"

    assert main([a, b, "--output-format", "json", "-o", str(output), "--labels", "a", "b"]) == 0

    document = json.loads(output.read_text())
    assert [n["file_label"] for n in document["nodes"]] == ["a", "b"]
    assert len(document["rows"]) == 1
    assert document["nodes"][0]["broker_versions"] == ["2023-01-01 10:00:00.000 3.11.0"]


def test_output_format_from_environment(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("RMQ_TIMELINE_OUTPUT_FORMAT", "text")
    a, b = write_logs(tmp_path)

    assert main([a, b, "--format", "strict"]) == 0
    assert "RABBITMQ CLUSTER TIMELINE" in capsys.readouterr().out

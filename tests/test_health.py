from __future__ import annotations

import health


def test_report_for_existing_dir(tmp_path, capsys):
    incoming = tmp_path / "incoming"
    incoming.mkdir()
    (incoming / "a.csv").write_text("x", encoding="utf-8")
    (incoming / "b.csv").write_text("y", encoding="utf-8")
    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / "callmonitor.log").write_text("line one\nline two\n", encoding="utf-8")
    cfg = tmp_path / "config.yaml"
    cfg.write_text("callmonitor:\n  input_dir: incoming\nlogging:\n  path: logs/callmonitor.log\n", encoding="utf-8")

    assert health.main(cfg) == 0

    out = capsys.readouterr().out
    assert "Files present (*): 2" in out
    assert "line two" in out


def test_report_for_missing_dir(tmp_path, capsys):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("callmonitor:\n  input_dir: nowhere\n", encoding="utf-8")

    assert health.main(cfg) == 1
    assert "MISSING" in capsys.readouterr().out


def test_tail_missing_file(tmp_path):
    assert health.tail(tmp_path / "none.log") == ["<log file not found>"]


def test_recent_files_per_minute(tmp_path):
    for i in range(5):
        (tmp_path / f"{i}.csv").write_text("x", encoding="utf-8")

    assert health.recent_files_per_minute(tmp_path, minutes=5) == 1.0


def test_tail_returns_last_lines(tmp_path):
    log = tmp_path / "callmonitor.log"
    log.write_text("".join(f"line {i}\n" for i in range(50)), encoding="utf-8")

    assert health.tail(log, lines=3) == ["line 47", "line 48", "line 49"]


def test_tail_empty_file(tmp_path):
    log = tmp_path / "callmonitor.log"
    log.write_text("", encoding="utf-8")

    assert health.tail(log) == ["<empty>"]

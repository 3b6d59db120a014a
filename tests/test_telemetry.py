from __future__ import annotations

import json
from pathlib import Path

import pytest

from subcall.settings import RuntimeSettings
from subcall.utils.telemetry import record_event, record_structured_event


def _records(settings: RuntimeSettings) -> list[dict]:
    return [json.loads(line) for line in settings.telemetry_file.read_text(encoding="utf-8").splitlines()]


def test_records_are_appended_as_json_lines(settings) -> None:
    record_event(settings, "discovery.completed", {"commands": ["build-docs"]})
    record_structured_event(
        settings,
        "dispatch.completed",
        payload={"command": "build-docs", "exit_code": 0},
        status="ok",
        component="dispatcher",
        duration_ms=1.5,
    )

    first, second = _records(settings)
    assert first["event"] == "discovery.completed"
    assert first["payload"] == {"commands": ["build-docs"]}
    assert first["level"] == "info"
    assert second["event"] == "dispatch.completed"
    assert second["status"] == "ok"
    assert second["component"] == "dispatcher"
    assert second["durationMs"] == 1.5


def test_warn_level_is_recorded(settings) -> None:
    record_event(settings, "discovery.rejected", {"module": "x"}, level="warn", component="loader")
    (record,) = _records(settings)
    assert record["level"] == "warn"
    assert record["component"] == "loader"


def test_disabled_telemetry_writes_nothing(settings, monkeypatch) -> None:
    monkeypatch.setenv("SUBCALL_TELEMETRY", "off")
    record_event(settings, "dispatch.completed", {"command": "a"})
    assert not settings.telemetry_file.exists()


def test_unwritable_log_directory_is_ignored(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    settings = RuntimeSettings(home_dir=tmp_path, log_dir=blocker / "logs")

    record_event(settings, "dispatch.completed", {"command": "a"})

    assert not (blocker / "logs").exists()


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"level": "debug"}, "level"),
        ({"duration_ms": -1.0}, "durationMs"),
    ],
)
def test_invalid_records_are_rejected(settings, kwargs, message) -> None:
    with pytest.raises(ValueError, match=message):
        record_structured_event(settings, "dispatch.completed", payload={}, **kwargs)


def test_empty_event_name_is_rejected(settings) -> None:
    with pytest.raises(ValueError, match="event"):
        record_event(settings, "  ")

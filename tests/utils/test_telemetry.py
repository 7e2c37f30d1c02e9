from __future__ import annotations

from pathlib import Path

import jsonschema
import pytest

from appbundler.settings import RuntimeSettings
from appbundler.utils import telemetry


def make_settings(base: Path) -> RuntimeSettings:
    return RuntimeSettings(log_dir=base / "logs")


def test_record_and_summarize(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APPBUNDLER_TELEMETRY", "1")
    settings = make_settings(tmp_path)

    telemetry.record_structured_event(settings, "bundle.assemble", payload={"mode": "classpath"}, status="ok")
    telemetry.record_structured_event(settings, "diskimage.generate", level="error", status="error", duration_ms=12.5)

    events = list(telemetry.iter_events(settings))
    assert [evt["event"] for evt in events] == ["bundle.assemble", "diskimage.generate"]
    assert events[1]["durationMs"] == 12.5
    assert telemetry.summarize(events) == {
        "total": 2,
        "by_event": {"bundle.assemble": 1, "diskimage.generate": 1},
        "by_status": {"ok": 1, "error": 1},
    }

    telemetry.clear(settings)
    assert list(telemetry.iter_events(settings)) == []


def test_disabled_telemetry_writes_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APPBUNDLER_TELEMETRY", "off")
    settings = make_settings(tmp_path)

    telemetry.record_structured_event(settings, "bundle.assemble")

    assert not settings.telemetry_file.exists()


def test_invalid_records_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APPBUNDLER_TELEMETRY", "1")
    settings = make_settings(tmp_path)

    with pytest.raises(ValueError):
        telemetry.record_structured_event(settings, "bundle.assemble", level="debug")
    with pytest.raises(jsonschema.ValidationError):
        telemetry.record_structured_event(settings, "bundle.assemble", duration_ms=-1)


def test_corrupt_lines_are_skipped(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    settings.telemetry_file.parent.mkdir(parents=True)
    settings.telemetry_file.write_text('{"event": "a"}\nnot-json\n\n{"event": "b"}\n', encoding="utf-8")

    assert [evt["event"] for evt in telemetry.iter_events(settings)] == ["a", "b"]

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import pytest

from appbundler.cli import main as cli_main
from appbundler.ports.command_runner import CommandResult, CommandRunner
from appbundler.settings import RuntimeSettings


class FailingRunner(CommandRunner):
    def run(self, command: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        return CommandResult(command=tuple(command), returncode=1, stderr="hdiutil: makehybrid failed")


@pytest.fixture()
def runtime_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    """Isolated runtime settings with telemetry enabled."""
    home = tmp_path / "home"
    settings = RuntimeSettings(log_dir=home / "logs")
    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    monkeypatch.setenv("APPBUNDLER_TELEMETRY", "1")
    return settings


def _events(settings: RuntimeSettings) -> list[dict[str, object]]:
    return [json.loads(line) for line in settings.telemetry_file.read_text(encoding="utf-8").splitlines()]


def test_bundle_command(java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    java_project.write_config(java_project.config_data())

    exit_code = cli_main.main(["bundle", str(java_project.root)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "App bundle created at" in out
    assert "classpath mode" in out
    assert (java_project.root / "target" / "Demo.app" / "Contents" / "Info.plist").exists()
    events = _events(runtime_settings)
    assert events[-1]["event"] == "bundle.assemble"
    assert events[-1]["status"] == "ok"


def test_bundle_command_json(java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    java_project.write_config(java_project.config_data(dmg={"generate": True}))

    exit_code = cli_main.main(["bundle", str(java_project.root), "--no-dmg", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["bundle"]["mode"] == "classpath"
    assert payload["bundle"]["variables"]["CFBundleIdentifier"] == "com.example.demo"
    assert payload["disk_image"] is None


def test_bundle_command_reports_configuration_error(
    java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    java_project.write_config(java_project.config_data(plist={}))

    exit_code = cli_main.main(["bundle", str(java_project.root)])

    assert exit_code == 1
    assert "Neither 'JVMMainClassName' nor 'JVMMainModuleName'" in capsys.readouterr().err
    assert not (java_project.root / "target" / "Demo.app").exists()
    event = _events(runtime_settings)[-1]
    assert event["status"] == "error"
    assert event["level"] == "error"


def test_bundle_command_reports_completed_steps(
    java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    java_project.write_config(java_project.config_data(native_libraries=["natives/missing.dylib"]))

    exit_code = cli_main.main(["bundle", str(java_project.root)])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "copy-native-libraries" in err
    assert "completed steps: create-app-directory, copy-classpath-dependencies, copy-launcher" in err


def test_bundle_command_with_explicit_config(java_project, runtime_settings: RuntimeSettings, tmp_path: Path) -> None:
    config = java_project.write_config(java_project.config_data())
    moved = tmp_path / "custom.yaml"
    config.rename(moved)

    exit_code = cli_main.main(["bundle", str(java_project.root), "--config", str(moved)])

    assert exit_code == 0
    assert (java_project.root / "target" / "Demo.app").exists()


def test_diskimage_command_failure(
    java_project,
    runtime_settings: RuntimeSettings,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    java_project.write_config(java_project.config_data())
    assert cli_main.main(["bundle", str(java_project.root)]) == 0
    monkeypatch.setattr(cli_main, "_build_runner", FailingRunner)

    exit_code = cli_main.main(["diskimage", str(java_project.root)])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "makehybrid failed" in err
    assert _events(runtime_settings)[-1]["event"] == "diskimage.generate"


def test_diskimage_command_missing_app(java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    java_project.write_config(java_project.config_data())

    exit_code = cli_main.main(["diskimage", str(java_project.root), "--bundle-name", "Missing"])

    assert exit_code == 1
    assert "Application bundle not found" in capsys.readouterr().err


def test_plist_command(java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    java_project.write_config(java_project.config_data(plist={"JVMMainModuleName": "demo/com.example.Main"}))

    exit_code = cli_main.main(["plist", str(java_project.root)])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "<key>JVMMainModuleName</key><string>demo/com.example.Main</string>" in captured.out
    assert "warning: no value for ${JVMMainClassName}" in captured.err
    assert "${CFBundleName}" not in captured.err
    assert not (java_project.root / "target" / "Demo.app").exists()


def test_missing_config(tmp_path: Path, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["plist", str(tmp_path)])

    assert exit_code == 1
    assert "No appbundler.yaml found" in capsys.readouterr().err


def test_telemetry_commands(java_project, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    java_project.write_config(java_project.config_data())
    cli_main.main(["bundle", str(java_project.root)])
    cli_main.main(["bundle", str(java_project.root)])
    capsys.readouterr()

    assert cli_main.main(["telemetry", "report"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["total"] == 2
    assert summary["by_event"] == {"bundle.assemble": 2}

    assert cli_main.main(["telemetry", "tail", "--limit", "1"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 1

    assert cli_main.main(["telemetry", "clear"]) == 0
    assert not runtime_settings.telemetry_file.exists()


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("appbundler ")

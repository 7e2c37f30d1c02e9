#!/usr/bin/env python3
"""Entry point for the appbundler CLI."""

from __future__ import annotations

import argparse
import json
import sys
import time
from collections import deque
from pathlib import Path
from textwrap import dedent

from appbundler import __version__
from appbundler.adapters.subprocess_runner import SubprocessCommandRunner
from appbundler.app.bundle import BundleService
from appbundler.app.config import BundlerConfig, find_config, load_config
from appbundler.app.packaging_service import PackagingService
from appbundler.domain.errors import BundlerError, BundleStepError
from appbundler.ports.command_runner import CommandRunner
from appbundler.settings import SETTINGS
from appbundler.utils.telemetry import clear as telemetry_clear
from appbundler.utils.telemetry import iter_events as telemetry_iter
from appbundler.utils.telemetry import record_structured_event, summarize as telemetry_summarize


HELP_OVERVIEW = dedent(
    """
    Package a Java application as a macOS .app bundle and .dmg disk image.

    Project layout:
      appbundler.yaml          - project descriptor, Info.plist values, dmg options
      packaging/Info.plist     - template with ${token} placeholders
      packaging/<icon>.icns    - optional icon referenced by CFBundleIconFile

    Commands:
      appbundler bundle       - assemble <build_dir>/<name>.app (and the .dmg if enabled)
      appbundler diskimage    - package an existing .app into a .dmg
      appbundler plist        - print the rendered Info.plist
    """
)


def _default_project_path(path_arg: str | None) -> Path:
    if path_arg:
        return Path(path_arg).expanduser().resolve()
    return Path.cwd()


def _load_config(args: argparse.Namespace) -> BundlerConfig:
    project_path = _default_project_path(getattr(args, "path", None))
    config_arg = getattr(args, "config", None)
    config_path = Path(config_arg).expanduser() if config_arg else find_config(project_path)
    return load_config(config_path, base_dir=project_path)


def _build_runner() -> CommandRunner:
    return SubprocessCommandRunner()


def _report_failure(command: str, exc: BundlerError) -> None:
    print(f"{command} failed: {exc}", file=sys.stderr)
    if isinstance(exc, BundleStepError) and exc.completed:
        print(f"  completed steps: {', '.join(exc.completed)}", file=sys.stderr)


def _bundle_cmd(args: argparse.Namespace) -> int:
    started = time.monotonic()
    try:
        config = _load_config(args)
        service = PackagingService(_build_runner())
        result = service.bundle(config, generate_dmg=False if args.no_dmg else None)
    except BundlerError as exc:
        _report_failure("bundle", exc)
        record_structured_event(
            SETTINGS,
            "bundle.assemble",
            payload={"error": str(exc), "step": getattr(exc, "step", None)},
            level="error",
            status="error",
            component="bundle",
            duration_ms=(time.monotonic() - started) * 1000,
        )
        return 1

    payload = result.to_dict()
    record_structured_event(
        SETTINGS,
        "bundle.assemble",
        payload={
            "app_dir": payload["bundle"]["app_dir"],
            "mode": payload["bundle"]["mode"],
            "copied_files": payload["bundle"]["copied_files"],
            "dmg": payload["disk_image"]["dmg_file"] if payload["disk_image"] else None,
        },
        status="ok",
        component="bundle",
        duration_ms=(time.monotonic() - started) * 1000,
    )
    if args.json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0
    bundle = result.bundle
    print(f"App bundle created at {bundle.app_dir} ({bundle.mode.value} mode)")
    for step in bundle.steps:
        print(f"  - {step}")
    if result.disk_image is not None:
        print(f"Disk image created at {result.disk_image.dmg_file}")
    return 0


def _diskimage_cmd(args: argparse.Namespace) -> int:
    started = time.monotonic()
    try:
        config = _load_config(args)
        service = PackagingService(_build_runner())
        report = service.disk_image(config, bundle_name=args.bundle_name)
    except BundlerError as exc:
        _report_failure("diskimage", exc)
        record_structured_event(
            SETTINGS,
            "diskimage.generate",
            payload={"error": str(exc)},
            level="error",
            status="error",
            component="diskimage",
            duration_ms=(time.monotonic() - started) * 1000,
        )
        return 1

    record_structured_event(
        SETTINGS,
        "diskimage.generate",
        payload={"dmg_file": report.dmg_file.as_posix(), "tool": report.tool.value},
        status="ok",
        component="diskimage",
        duration_ms=(time.monotonic() - started) * 1000,
    )
    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Disk image created at {report.dmg_file}")
    return 0


def _plist_cmd(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
        service = BundleService(config.project, config.bundle)
        rendered = service.render_plist()
        unresolved = service.unresolved_tokens()
    except BundlerError as exc:
        _report_failure("plist", exc)
        return 1
    for token in unresolved:
        print(f"warning: no value for ${{{token}}}", file=sys.stderr)
    sys.stdout.write(rendered)
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    if args.telemetry_command == "report":
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            events = list(deque(telemetry_iter(SETTINGS), maxlen=recent))
        else:
            events = list(telemetry_iter(SETTINGS))
        print(json.dumps(telemetry_summarize(events), indent=2, ensure_ascii=False))
        return 0
    if args.telemetry_command == "clear":
        telemetry_clear(SETTINGS)
        print("Telemetry log cleared")
        return 0
    if args.telemetry_command == "tail":
        for evt in deque(telemetry_iter(SETTINGS), maxlen=args.limit):
            print(json.dumps(evt, ensure_ascii=False))
        return 0
    print("Unsupported telemetry command", file=sys.stderr)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appbundler",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"appbundler {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    bundle_cmd = sub.add_parser("bundle", help="Assemble the .app bundle (and .dmg when enabled)")
    bundle_cmd.add_argument("path", nargs="?", help="Project base directory (default: current directory)")
    bundle_cmd.add_argument("--config", help="Configuration file (default: <path>/appbundler.yaml)")
    bundle_cmd.add_argument("--no-dmg", action="store_true", help="Skip disk image generation")
    bundle_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    bundle_cmd.set_defaults(func=_bundle_cmd)

    diskimage_cmd = sub.add_parser("diskimage", help="Package an existing .app bundle into a .dmg")
    diskimage_cmd.add_argument("path", nargs="?", help="Project base directory (default: current directory)")
    diskimage_cmd.add_argument("--config", help="Configuration file (default: <path>/appbundler.yaml)")
    diskimage_cmd.add_argument("--bundle-name", help="Name of the .app to package (default: CFBundleName)")
    diskimage_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    diskimage_cmd.set_defaults(func=_diskimage_cmd)

    plist_cmd = sub.add_parser("plist", help="Print the rendered Info.plist")
    plist_cmd.add_argument("path", nargs="?", help="Project base directory (default: current directory)")
    plist_cmd.add_argument("--config", help="Configuration file (default: <path>/appbundler.yaml)")
    plist_cmd.set_defaults(func=_plist_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect local telemetry events")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)

    telemetry_report = telemetry_sub.add_parser("report", help="Summarise telemetry events")
    telemetry_report.add_argument("--recent", type=int, default=0, help="Only consider the last N events")
    telemetry_report.set_defaults(func=_telemetry_cmd)

    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Remove telemetry log file")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)

    telemetry_tail = telemetry_sub.add_parser("tail", help="Print last N telemetry events")
    telemetry_tail.add_argument("--limit", type=int, default=20)
    telemetry_tail.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

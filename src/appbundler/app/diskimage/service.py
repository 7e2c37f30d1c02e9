"""Application service packaging a finished .app bundle into a disk image."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Sequence, Tuple

from appbundler.domain.bundle import DiskImageReport, DiskImageTool, DmgOptions
from appbundler.domain.errors import BundleIOError, DiskImageError, MissingResourceError
from appbundler.ports.command_runner import CommandRunner

APPLICATIONS_LINK = "Applications"
APPLICATIONS_TARGET = "/Applications"
STAGING_DIR = "bundle"


class DiskImageService:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    @staticmethod
    def target_file(output_dir: Path, app_name: str, version: str, options: DmgOptions) -> Path:
        return output_dir / options.file_name(app_name, version)

    def package(
        self,
        app_dir: Path,
        staging_dir: Path,
        dmg_file: Path,
        options: DmgOptions,
        *,
        volume_name: str,
    ) -> DiskImageReport:
        if not app_dir.is_dir():
            raise MissingResourceError("Application bundle not found", app_dir)
        self.stage(app_dir, staging_dir, options)
        commands = self._build_commands(staging_dir, dmg_file, options.tool, volume_name)
        try:
            dmg_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise BundleIOError(None, dmg_file, exc) from exc
        try:
            for command in commands:
                self._invoke(command, cwd=staging_dir.parent)
        finally:
            if options.tool is DiskImageTool.HDIUTIL:
                _intermediate_file(dmg_file).unlink(missing_ok=True)
        return DiskImageReport(
            dmg_file=dmg_file,
            staging_dir=staging_dir,
            tool=options.tool,
            commands=tuple(tuple(command) for command in commands),
        )

    def stage(self, app_dir: Path, staging_dir: Path, options: DmgOptions) -> None:
        """Recreate ``staging_dir`` holding the app, extra files and the Applications link."""

        try:
            if staging_dir.exists():
                shutil.rmtree(staging_dir)
            staging_dir.mkdir(parents=True)
            shutil.copytree(app_dir, staging_dir / app_dir.name, symlinks=True)
        except OSError as exc:
            raise BundleIOError(app_dir, staging_dir, exc) from exc

        for source in options.additional_resources:
            if not source.exists():
                raise MissingResourceError("Disk image resource not found", source)
            target = staging_dir / source.name
            try:
                if source.is_dir():
                    shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
                else:
                    shutil.copy2(source, target)
            except OSError as exc:
                raise BundleIOError(source, target, exc) from exc

        if options.create_applications_symlink:
            link = staging_dir / APPLICATIONS_LINK
            try:
                link.symlink_to(APPLICATIONS_TARGET, target_is_directory=True)
            except OSError as exc:
                raise BundleIOError(None, link, exc) from exc

    def _build_commands(
        self, staging_dir: Path, dmg_file: Path, tool: DiskImageTool, volume_name: str
    ) -> List[Tuple[str, ...]]:
        if tool is DiskImageTool.GENISOIMAGE:
            return [
                (
                    "genisoimage",
                    "-V", volume_name,
                    "-D", "-R", "-apple", "-no-pad",
                    "-o", str(dmg_file),
                    str(staging_dir),
                )
            ]
        intermediate = _intermediate_file(dmg_file)
        return [
            (
                "hdiutil", "makehybrid",
                "-hfs",
                "-hfs-volume-name", volume_name,
                "-hfs-openfolder", str(staging_dir),
                str(staging_dir),
                "-o", str(intermediate),
            ),
            (
                "hdiutil", "convert",
                str(intermediate),
                "-format", "UDZO",
                "-o", str(dmg_file),
            ),
        ]

    def _invoke(self, command: Sequence[str], *, cwd: Path) -> None:
        try:
            result = self._runner.run(command, cwd=cwd)
        except FileNotFoundError as exc:
            raise DiskImageError(f"Disk image tool not found: {command[0]}") from exc
        if not result.ok:
            raise DiskImageError(
                f"'{' '.join(command[:2])}' exited with status {result.returncode}",
                stdout=result.stdout,
                stderr=result.stderr,
            )


def _intermediate_file(dmg_file: Path) -> Path:
    return dmg_file.with_name(f"{dmg_file.stem}.tmp.dmg")


__all__ = ["APPLICATIONS_LINK", "DiskImageService", "STAGING_DIR"]

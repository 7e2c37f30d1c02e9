"""Fixed directory layout of a macOS application bundle."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from appbundler.domain.plist import constants

APP_EXTENSION = ".app"
PLIST_FILE = "Info.plist"


@dataclass(frozen=True)
class BundleLayout:
    app_dir: Path

    @classmethod
    def for_app(cls, output_dir: Path, app_name: str) -> "BundleLayout":
        return cls(app_dir=output_dir / f"{app_name}{APP_EXTENSION}")

    @property
    def contents_dir(self) -> Path:
        return self.app_dir / "Contents"

    @property
    def macos_dir(self) -> Path:
        return self.contents_dir / "MacOS"

    @property
    def java_dir(self) -> Path:
        return self.contents_dir / "Java"

    @property
    def classpath_dir(self) -> Path:
        return self.java_dir / "classpath"

    @property
    def modules_dir(self) -> Path:
        return self.java_dir / "modules"

    @property
    def native_library_dir(self) -> Path:
        return self.app_dir / constants.NATIVE_LIBRARY_BUNDLE_PATH

    @property
    def runtime_dir(self) -> Path:
        return self.app_dir / constants.RUNTIME_BUNDLE_PATH / "Contents"

    @property
    def resources_dir(self) -> Path:
        return self.contents_dir / "Resources"

    @property
    def plist_file(self) -> Path:
        return self.contents_dir / PLIST_FILE

    def executable(self, name: str) -> Path:
        return self.macos_dir / name


__all__ = ["APP_EXTENSION", "BundleLayout", "PLIST_FILE"]

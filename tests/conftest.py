from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Iterable, Tuple

import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "appbundler-home"
os.environ.setdefault("APPBUNDLER_HOME", str(SANDBOX_HOME))
os.environ.setdefault("APPBUNDLER_TELEMETRY", "0")
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from appbundler.domain.project import Artifact, ProjectModel  # noqa: E402

PLIST_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>CFBundleName</key><string>${CFBundleName}</string>
  <key>CFBundleDisplayName</key><string>${CFBundleDisplayName}</string>
  <key>CFBundleIdentifier</key><string>${CFBundleIdentifier}</string>
  <key>CFBundleShortVersionString</key><string>${CFBundleShortVersionString}</string>
  <key>CFBundleExecutable</key><string>${CFBundleExecutable}</string>
  <key>CFBundleIconFile</key><string>${CFBundleIconFile}</string>
  <key>JVMMainClassName</key><string>${JVMMainClassName}</string>
  <key>JVMMainModuleName</key><string>${JVMMainModuleName}</string>
  <key>JVMRuntimePath</key><string>${JVMRuntimePath}</string>
  <key>NativeLibraryPath</key><string>${NativeLibraryPath}</string>
</dict>
</plist>
"""

Coordinates = Tuple[str, str, str]

DEFAULT_DEPENDENCIES: Tuple[Coordinates, ...] = (
    ("org.slf4j", "slf4j-api", "2.0.9"),
    ("com.google.guava", "guava", "32.1.2-jre"),
)


class JavaProjectFactory:
    """Builds a throwaway Java project on disk."""

    group_id = "com.example"
    artifact_id = "demo"
    version = "1.2.0"

    def __init__(self, root: Path) -> None:
        self.root = root
        self.packaging_dir = root / "packaging"
        self.packaging_dir.mkdir(parents=True, exist_ok=True)

    @property
    def build_dir(self) -> Path:
        return self.root / "target"

    def write_template(self, text: str = PLIST_TEMPLATE) -> Path:
        path = self.packaging_dir / "Info.plist"
        path.write_text(text, encoding="utf-8")
        return path

    def write_file(self, relative: str, content: bytes = b"") -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    def write_jar(self, relative: str) -> Path:
        return self.write_file(relative, b"PK\x03\x04" + relative.encode("utf-8"))

    def project(
        self,
        dependencies: Iterable[Coordinates] = DEFAULT_DEPENDENCIES,
        *,
        name: str = "Demo",
    ) -> ProjectModel:
        own = self.write_jar(f"target/{self.artifact_id}-{self.version}.jar")
        artifacts = []
        for group_id, artifact_id, version in dependencies:
            jar = self.write_jar(f"repo/{artifact_id}-{version}.jar")
            artifacts.append(Artifact.for_file(jar, group_id, artifact_id, version))
        return ProjectModel(
            name=name,
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.version,
            base_dir=self.root,
            artifact=Artifact.for_file(own, self.group_id, self.artifact_id, self.version),
            dependencies=tuple(artifacts),
        )

    def config_data(self, plist: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
        own = self.write_jar(f"target/{self.artifact_id}-{self.version}.jar")
        dependencies = []
        for group_id, artifact_id, version in DEFAULT_DEPENDENCIES:
            jar = self.write_jar(f"repo/{artifact_id}-{version}.jar")
            dependencies.append(
                {
                    "file": str(jar.relative_to(self.root)),
                    "group_id": group_id,
                    "artifact_id": artifact_id,
                    "version": version,
                }
            )
        data: dict[str, Any] = {
            "project": {
                "name": "Demo",
                "group_id": self.group_id,
                "artifact_id": self.artifact_id,
                "version": self.version,
                "artifact": {"file": str(own.relative_to(self.root))},
                "dependencies": dependencies,
            },
            "plist": plist if plist is not None else {"JVMMainClassName": "com.example.Main"},
        }
        data.update(extra)
        return data

    def write_config(self, data: dict[str, Any]) -> Path:
        path = self.root / "appbundler.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path


@pytest.fixture()
def java_project(tmp_path: Path) -> JavaProjectFactory:
    """On-disk Java project with a packaging/Info.plist template."""
    factory = JavaProjectFactory(tmp_path / "project")
    factory.write_template()
    return factory

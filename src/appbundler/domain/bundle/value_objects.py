"""Value objects describing a bundling run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from appbundler.domain.errors import ConfigurationError
from appbundler.domain.plist import constants


class DeploymentMode(str, Enum):
    CLASSPATH = "classpath"
    MODULE = "module"

    @classmethod
    def from_variables(cls, variables: Mapping[str, str]) -> "DeploymentMode":
        """Exactly one of the main-entry markers must be non-empty."""

        main_class = variables.get(constants.JVM_MAIN_CLASS_NAME) or ""
        main_module = variables.get(constants.JVM_MAIN_MODULE_NAME) or ""
        if not main_class and not main_module:
            raise ConfigurationError(
                f"Neither '{constants.JVM_MAIN_CLASS_NAME}' nor '{constants.JVM_MAIN_MODULE_NAME}' have been defined!"
            )
        if main_class and main_module:
            raise ConfigurationError(
                f"Both '{constants.JVM_MAIN_CLASS_NAME}' and '{constants.JVM_MAIN_MODULE_NAME}' have been defined! "
                "Define only one to choose between a classpath and a module application."
            )
        return cls.CLASSPATH if main_class else cls.MODULE


@dataclass(frozen=True)
class BundleOptions:
    """Everything the assembler needs besides the project model."""

    plist: Mapping[str, str] = field(default_factory=dict)
    bundle_jre: Path | None = None
    launcher: Path | None = None
    resources: Tuple[Path, ...] = ()
    native_libraries: Tuple[Path, ...] = ()


class DiskImageTool(str, Enum):
    HDIUTIL = "hdiutil"
    GENISOIMAGE = "genisoimage"


@dataclass(frozen=True)
class DmgOptions:
    generate: bool = False
    dmg_file_name: str | None = None
    append_version: bool = False
    create_applications_symlink: bool = True
    additional_resources: Tuple[Path, ...] = ()
    volume_name: str | None = None
    tool: DiskImageTool = DiskImageTool.HDIUTIL

    def file_name(self, app_name: str, version: str) -> str:
        name = self.dmg_file_name or app_name
        if name.endswith(".dmg"):
            name = name[: -len(".dmg")]
        if self.append_version:
            name = f"{name}_{version}"
        return f"{name}.dmg"


@dataclass(frozen=True)
class BundleReport:
    app_dir: Path
    mode: DeploymentMode
    variables: Dict[str, str]
    steps: Tuple[str, ...]
    copied_files: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "app_dir": self.app_dir.as_posix(),
            "mode": self.mode.value,
            "steps": list(self.steps),
            "copied_files": self.copied_files,
            "variables": dict(sorted(self.variables.items())),
        }


@dataclass(frozen=True)
class DiskImageReport:
    dmg_file: Path
    staging_dir: Path
    tool: DiskImageTool
    commands: Tuple[Tuple[str, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dmg_file": self.dmg_file.as_posix(),
            "staging_dir": self.staging_dir.as_posix(),
            "tool": self.tool.value,
            "commands": [list(command) for command in self.commands],
        }


__all__ = [
    "BundleOptions",
    "BundleReport",
    "DeploymentMode",
    "DiskImageReport",
    "DiskImageTool",
    "DmgOptions",
]

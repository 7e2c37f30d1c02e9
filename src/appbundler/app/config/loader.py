"""Loading of appbundler.yaml into immutable configuration objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping, Tuple

import yaml

from appbundler.domain.bundle import BundleOptions, DiskImageTool, DmgOptions
from appbundler.domain.errors import ConfigurationError
from appbundler.domain.project import Artifact, ProjectModel

from .schema import iter_config_errors, iter_project_errors

CONFIG_FILENAME = "appbundler.yaml"


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader that keeps numeric scalars as their source text."""


def _scalar_text(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)


# 1.10 must not collapse to 1.1 in versions and plist values
_ConfigLoader.add_constructor("tag:yaml.org,2002:float", _scalar_text)
_ConfigLoader.add_constructor("tag:yaml.org,2002:int", _scalar_text)


@dataclass(frozen=True)
class BundlerConfig:
    project: ProjectModel
    bundle: BundleOptions
    dmg: DmgOptions
    source: Path | None = None


def load_config(path: Path, *, base_dir: Path | None = None) -> BundlerConfig:
    """Read and validate ``path``; relative paths resolve against ``base_dir``.

    ``base_dir`` defaults to the directory holding the configuration file.
    """

    path = path.expanduser().resolve()
    data = _read_yaml(path)
    return parse_config(data, base_dir or path.parent, source=path)


def parse_config(data: Any, base_dir: Path, *, source: Path | None = None) -> BundlerConfig:
    _raise_on_errors(iter_config_errors(data), source or base_dir)
    base_dir = base_dir.expanduser().resolve()

    project_data = data["project"]
    if isinstance(project_data, str):
        project = load_project_descriptor(_resolve(base_dir, project_data), base_dir=base_dir)
    else:
        project = parse_project(project_data, base_dir)

    bundle = BundleOptions(
        plist={str(key): _stringify(value) for key, value in data["plist"].items()},
        bundle_jre=_optional_path(base_dir, data.get("bundle_jre")),
        launcher=_optional_path(base_dir, data.get("launcher")),
        resources=_paths(base_dir, data.get("resources", [])),
        native_libraries=_paths(base_dir, data.get("native_libraries", [])),
    )

    dmg_data = data.get("dmg", {})
    dmg = DmgOptions(
        generate=dmg_data.get("generate", False),
        dmg_file_name=dmg_data.get("dmg_file_name"),
        append_version=dmg_data.get("append_version", False),
        create_applications_symlink=dmg_data.get("create_applications_symlink", True),
        additional_resources=_paths(base_dir, dmg_data.get("additional_resources", [])),
        volume_name=dmg_data.get("volume_name"),
        tool=DiskImageTool(dmg_data.get("tool", DiskImageTool.HDIUTIL.value)),
    )
    return BundlerConfig(project=project, bundle=bundle, dmg=dmg, source=source)


def load_project_descriptor(path: Path, *, base_dir: Path) -> ProjectModel:
    """Read a project descriptor written by the build tool (YAML or JSON)."""

    data = _read_yaml(path)
    _raise_on_errors(iter_project_errors(data), path)
    return parse_project(data, base_dir)


def parse_project(data: Mapping[str, Any], base_dir: Path) -> ProjectModel:
    group_id = data["group_id"]
    artifact_id = data["artifact_id"]
    version = _stringify(data["version"])
    own = data["artifact"]
    artifact = _artifact(base_dir, {"group_id": group_id, "artifact_id": artifact_id, "version": version, **own})
    dependencies = tuple(_artifact(base_dir, item) for item in data.get("dependencies", []))
    build_dir = data.get("build_dir")
    return ProjectModel(
        name=data.get("name", ""),
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        base_dir=base_dir,
        build_dir=_resolve(base_dir, build_dir) if build_dir else None,
        final_name=data.get("final_name", ""),
        artifact=artifact,
        dependencies=dependencies,
    )


def find_config(project_path: Path) -> Path:
    candidate = project_path / CONFIG_FILENAME
    if not candidate.is_file():
        raise ConfigurationError(f"No {CONFIG_FILENAME} found in {project_path}")
    return candidate


def _artifact(base_dir: Path, data: Mapping[str, Any]) -> Artifact:
    return Artifact.for_file(
        _resolve(base_dir, data["file"]),
        data["group_id"],
        data["artifact_id"],
        _stringify(data["version"]),
        extension=data.get("extension"),
        classifier=data.get("classifier"),
    )


def _read_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigurationError(f"Configuration file missing: {path}")
    try:
        return yaml.load(path.read_text("utf-8"), Loader=_ConfigLoader) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc


def _raise_on_errors(errors: Iterator[Tuple[str, str]], source: Path) -> None:
    issues = [f"{path or '<root>'}: {message}" for path, message in errors]
    if issues:
        raise ConfigurationError(f"Invalid configuration {source}:\n  " + "\n  ".join(issues))


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _optional_path(base_dir: Path, value: str | None) -> Path | None:
    return _resolve(base_dir, value) if value else None


def _paths(base_dir: Path, values: list[str]) -> Tuple[Path, ...]:
    return tuple(_resolve(base_dir, item) for item in values)


__all__ = [
    "BundlerConfig",
    "CONFIG_FILENAME",
    "find_config",
    "load_config",
    "load_project_descriptor",
    "parse_config",
    "parse_project",
]

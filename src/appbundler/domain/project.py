"""Domain model for the Java project being bundled."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


DEFAULT_EXTENSION = "jar"


@dataclass(frozen=True)
class Artifact:
    """A resolved build artifact: a file plus its repository coordinates."""

    file: Path
    group_id: str
    artifact_id: str
    version: str
    extension: str = DEFAULT_EXTENSION
    classifier: str | None = None

    @classmethod
    def for_file(
        cls,
        file: Path,
        group_id: str,
        artifact_id: str,
        version: str,
        *,
        extension: str | None = None,
        classifier: str | None = None,
    ) -> "Artifact":
        if not extension:
            extension = file.suffix.lstrip(".") or DEFAULT_EXTENSION
        return cls(
            file=file,
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            extension=extension,
            classifier=classifier or None,
        )

    def repository_path(self) -> Path:
        """Path of the artifact inside a Maven-style repository."""

        name = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            name += f"-{self.classifier}"
        name += f".{self.extension}"
        return Path(*self.group_id.split("."), self.artifact_id, self.version, name)

    def module_file_name(self) -> str:
        # Extension comes from the actual file, so a classified jar still ends in .jar
        extension = self.file.suffix.lstrip(".") or self.extension
        return f"{self.artifact_id}-{self.version}.{extension}"


@dataclass(frozen=True)
class ProjectModel:
    """Identity and resolved artifacts of the project, as supplied by the build tool."""

    group_id: str
    artifact_id: str
    version: str
    base_dir: Path
    artifact: Artifact
    name: str = ""
    build_dir: Path | None = None
    final_name: str = ""
    dependencies: Tuple[Artifact, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return self.name or self.artifact_id

    @property
    def output_dir(self) -> Path:
        return self.build_dir if self.build_dir is not None else self.base_dir / "target"

    @property
    def effective_final_name(self) -> str:
        return self.final_name or f"{self.artifact_id}-{self.version}"

    @property
    def packaging_dir(self) -> Path:
        return self.base_dir / "packaging"

    def all_artifacts(self) -> Tuple[Artifact, ...]:
        """The project's own artifact followed by every dependency."""

        return (self.artifact, *self.dependencies)


__all__ = ["Artifact", "DEFAULT_EXTENSION", "ProjectModel"]

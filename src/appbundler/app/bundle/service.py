"""Application service assembling a macOS .app bundle for a Java project."""

from __future__ import annotations

import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from appbundler.domain.bundle import BundleLayout, BundleOptions, BundleReport, DeploymentMode
from appbundler.domain.errors import BundleIOError, BundlerError, BundleStepError, MissingResourceError
from appbundler.domain.plist import PlistTemplate, constants, project_defaults, resolve_variables
from appbundler.domain.project import Artifact, ProjectModel
from appbundler.resources import launcher_resource

TEMPLATE_FILE = "Info.plist"


@dataclass(frozen=True)
class PreparedBundle:
    """Outcome of the pre-flight checks; nothing has touched the disk yet."""

    layout: BundleLayout
    app_name: str
    mode: DeploymentMode
    variables: Dict[str, str]
    template: PlistTemplate


@dataclass
class _AssemblyState:
    prepared: PreparedBundle
    variables: Dict[str, str]
    # single-file copies only; the runtime tree is not counted
    copied_files: int = 0
    completed: List[str] = field(default_factory=list)


Step = Tuple[str, Callable[[_AssemblyState], None]]


class BundleService:
    """Builds the bundle as a linear pipeline; the first failing step aborts."""

    def __init__(self, project: ProjectModel, options: BundleOptions) -> None:
        self._project = project
        self._options = options

    @property
    def template_path(self) -> Path:
        return self._project.packaging_dir / TEMPLATE_FILE

    def resolve_variables(self) -> Dict[str, str]:
        return resolve_variables(self._options.plist, project_defaults(self._project))

    def app_name(self) -> str:
        return self.resolve_variables().get(constants.CF_BUNDLE_NAME) or self._project.effective_final_name

    def prepare(self) -> PreparedBundle:
        variables = self.resolve_variables()
        mode = DeploymentMode.from_variables(variables)
        template = PlistTemplate.load(self.template_path)
        app_name = variables.get(constants.CF_BUNDLE_NAME) or self._project.effective_final_name
        return PreparedBundle(
            layout=BundleLayout.for_app(self._project.output_dir, app_name),
            app_name=app_name,
            mode=mode,
            variables=variables,
            template=template,
        )

    def render_plist(self) -> str:
        """Render Info.plist exactly as ``assemble`` would, without writing anything."""

        prepared = self.prepare()
        variables = dict(prepared.variables)
        icon = variables.get(constants.CF_BUNDLE_ICON_FILE)
        if icon:
            variables[constants.CF_BUNDLE_ICON_FILE] = Path(icon).name
        return prepared.template.render(variables)

    def unresolved_tokens(self) -> Tuple[str, ...]:
        """Template tokens with no value; they render as empty strings."""

        prepared = self.prepare()
        return tuple(token for token in prepared.template.tokens() if token not in prepared.variables)

    def assemble(self) -> BundleReport:
        prepared = self.prepare()
        state = _AssemblyState(prepared=prepared, variables=dict(prepared.variables))
        for name, step in self._steps(prepared):
            try:
                step(state)
            except BundlerError as exc:
                raise BundleStepError(name, exc, state.completed) from exc
            state.completed.append(name)
        return BundleReport(
            app_dir=prepared.layout.app_dir,
            mode=prepared.mode,
            variables=state.variables,
            steps=tuple(state.completed),
            copied_files=state.copied_files,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _steps(self, prepared: PreparedBundle) -> List[Step]:
        steps: List[Step] = [("create-app-directory", self._create_app_directory)]
        if prepared.mode is DeploymentMode.CLASSPATH:
            steps.append(("copy-classpath-dependencies", self._copy_classpath_dependencies))
        else:
            steps.append(("copy-module-dependencies", self._copy_module_dependencies))
        steps.append(("copy-launcher", self._copy_launcher))
        if self._options.bundle_jre is not None:
            steps.append(("copy-runtime", self._copy_runtime))
        if self._options.resources:
            steps.append(("copy-resources", self._copy_resources))
        if self._options.native_libraries:
            steps.append(("copy-native-libraries", self._copy_native_libraries))
        if prepared.variables.get(constants.CF_BUNDLE_ICON_FILE):
            steps.append(("copy-icon", self._copy_icon))
        steps.append(("write-plist", self._write_plist))
        return steps

    def _create_app_directory(self, state: _AssemblyState) -> None:
        layout = state.prepared.layout
        for directory in (layout.macos_dir, layout.java_dir, layout.resources_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise BundleIOError(None, directory, exc) from exc

    def _copy_classpath_dependencies(self, state: _AssemblyState) -> None:
        target_root = state.prepared.layout.classpath_dir
        for artifact in self._project.all_artifacts():
            self._copy_artifact(state, artifact, target_root / artifact.repository_path())

    def _copy_module_dependencies(self, state: _AssemblyState) -> None:
        target_root = state.prepared.layout.modules_dir
        for artifact in self._project.all_artifacts():
            # same artifactId-version.ext from two groups: the later one wins
            self._copy_artifact(state, artifact, target_root / artifact.module_file_name())

    def _copy_artifact(self, state: _AssemblyState, artifact: Artifact, target: Path) -> None:
        if not artifact.file.is_file():
            raise MissingResourceError(
                f"Artifact {artifact.group_id}:{artifact.artifact_id}:{artifact.version} has no file",
                artifact.file,
            )
        _copy_file(artifact.file, target)
        state.copied_files += 1

    def _copy_launcher(self, state: _AssemblyState) -> None:
        executable = state.variables.get(constants.CF_BUNDLE_EXECUTABLE) or constants.DEFAULT_EXECUTABLE
        target = state.prepared.layout.executable(executable)
        if self._options.launcher is not None:
            source = self._options.launcher
            if not source.is_file():
                raise MissingResourceError("Configured launcher not found", source)
            payload = source.read_bytes()
        else:
            resource = launcher_resource()
            if not resource.is_file():
                raise MissingResourceError("No launcher packaged with appbundler", Path(str(resource)))
            payload = resource.read_bytes()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
            mode = target.stat().st_mode
            target.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as exc:
            raise BundleIOError(self._options.launcher, target, exc) from exc
        state.copied_files += 1

    def _copy_runtime(self, state: _AssemblyState) -> None:
        source = self._options.bundle_jre
        assert source is not None
        if not source.is_dir():
            raise MissingResourceError("Failed to bundle JRE because the JRE could not be found", source)
        target = state.prepared.layout.runtime_dir
        try:
            shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        except OSError as exc:
            raise BundleIOError(source, target, exc) from exc

    def _copy_resources(self, state: _AssemblyState) -> None:
        self._copy_by_name(state, self._options.resources, state.prepared.layout.resources_dir, "Resource file")

    def _copy_native_libraries(self, state: _AssemblyState) -> None:
        self._copy_by_name(
            state, self._options.native_libraries, state.prepared.layout.native_library_dir, "Native library"
        )

    def _copy_by_name(self, state: _AssemblyState, sources: Tuple[Path, ...], target_dir: Path, label: str) -> None:
        for source in sources:
            if not source.is_file():
                raise MissingResourceError(f"{label} not found", source)
            _copy_file(source, target_dir / source.name)
            state.copied_files += 1

    def _copy_icon(self, state: _AssemblyState) -> None:
        icon_value = state.variables[constants.CF_BUNDLE_ICON_FILE]
        source = self._project.packaging_dir / icon_value
        if not source.is_file():
            raise MissingResourceError(f"Cannot find declared icon file {source.name}", source)
        _copy_file(source, state.prepared.layout.resources_dir / source.name)
        state.variables[constants.CF_BUNDLE_ICON_FILE] = source.name
        state.copied_files += 1

    def _write_plist(self, state: _AssemblyState) -> None:
        target = state.prepared.layout.plist_file
        rendered = state.prepared.template.render(state.variables)
        try:
            with target.open("w", encoding="utf-8", newline="") as handle:
                handle.write(rendered)
        except OSError as exc:
            raise BundleIOError(state.prepared.template.source, target, exc) from exc


def _copy_file(source: Path, target: Path) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
    except OSError as exc:
        raise BundleIOError(source, target, exc) from exc


__all__ = ["BundleService", "PreparedBundle", "TEMPLATE_FILE"]

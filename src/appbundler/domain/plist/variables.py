"""Resolution of the Info.plist variable mapping."""

from __future__ import annotations

from typing import Dict, Mapping

from appbundler.domain.project import ProjectModel

from . import constants


def project_defaults(project: ProjectModel) -> Dict[str, str]:
    """Values derived from the project identity for the required bundle keys."""

    return {
        constants.CF_BUNDLE_DISPLAY_NAME: project.display_name,
        constants.CF_BUNDLE_NAME: project.display_name,
        constants.CF_BUNDLE_IDENTIFIER: f"{project.group_id}.{project.artifact_id}",
        constants.CF_BUNDLE_SHORT_VERSION_STRING: project.version,
        constants.CF_BUNDLE_EXECUTABLE: constants.DEFAULT_EXECUTABLE,
    }


def resolve_variables(values: Mapping[str, str], defaults: Mapping[str, str]) -> Dict[str, str]:
    """Fill missing keys from ``defaults`` and force the reserved structural keys.

    A key present in ``values`` is never replaced by its default, even when its
    value is empty. Reserved keys are overwritten unconditionally.
    """

    resolved = dict(values)
    for key, value in defaults.items():
        resolved.setdefault(key, value)
    resolved.update(constants.RESERVED_VALUES)
    return resolved


__all__ = ["project_defaults", "resolve_variables"]

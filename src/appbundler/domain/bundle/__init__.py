"""Bundle domain objects."""

from .layout import APP_EXTENSION, PLIST_FILE, BundleLayout
from .value_objects import (
    BundleOptions,
    BundleReport,
    DeploymentMode,
    DiskImageReport,
    DiskImageTool,
    DmgOptions,
)

__all__ = [
    "APP_EXTENSION",
    "BundleLayout",
    "BundleOptions",
    "BundleReport",
    "DeploymentMode",
    "DiskImageReport",
    "DiskImageTool",
    "DmgOptions",
    "PLIST_FILE",
]

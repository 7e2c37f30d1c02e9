"""Configuration loading for appbundler."""

from .loader import (
    CONFIG_FILENAME,
    BundlerConfig,
    find_config,
    load_config,
    load_project_descriptor,
    parse_config,
    parse_project,
)

__all__ = [
    "BundlerConfig",
    "CONFIG_FILENAME",
    "find_config",
    "load_config",
    "load_project_descriptor",
    "parse_config",
    "parse_project",
]

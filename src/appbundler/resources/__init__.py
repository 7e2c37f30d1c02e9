"""Packaged resources for appbundler."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any

__all__ = ["LAUNCHER_NAME", "launcher_resource", "load_schema"]

LAUNCHER_NAME = "JavaLauncher"


def launcher_resource() -> resources.abc.Traversable:
    """The launcher stub shipped with the package."""

    return resources.files(__name__) / "launcher" / LAUNCHER_NAME


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    resource = resources.files(__name__) / name
    with resource.open("r", encoding="utf-8") as handle:
        return json.load(handle)

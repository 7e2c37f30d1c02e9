"""Schema helpers for appbundler.yaml and project descriptors."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterator, Tuple

from jsonschema import Draft202012Validator

from appbundler.resources import load_schema

_SCHEMA_RESOURCE = "appbundler.schema.json"


@lru_cache(maxsize=1)
def _config_validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema(_SCHEMA_RESOURCE))


@lru_cache(maxsize=1)
def _project_validator() -> Draft202012Validator:
    schema = load_schema(_SCHEMA_RESOURCE)
    return Draft202012Validator({"$defs": schema["$defs"], "$ref": "#/$defs/project"})


def _iter_errors(validator: Draft202012Validator, payload: Any) -> Iterator[Tuple[str, str]]:
    for error in sorted(validator.iter_errors(payload), key=lambda item: list(map(str, item.absolute_path))):
        path = ".".join(str(item) for item in error.absolute_path)
        yield path, error.message


def iter_config_errors(config: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues in appbundler.yaml."""
    return _iter_errors(_config_validator(), config)


def iter_project_errors(descriptor: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues in a project descriptor."""
    return _iter_errors(_project_validator(), descriptor)


__all__ = ["iter_config_errors", "iter_project_errors"]

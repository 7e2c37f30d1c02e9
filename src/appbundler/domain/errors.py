"""Error taxonomy shared by the bundle and disk-image services."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class BundlerError(RuntimeError):
    """Base class for every fatal bundling error."""


class ConfigurationError(BundlerError):
    """Raised when configuration is invalid; detected before any side effect."""


class MissingResourceError(BundlerError):
    """Raised when a declared file or directory does not exist where expected."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class BundleIOError(BundlerError):
    """Wraps an OSError raised while copying or writing a bundle file."""

    def __init__(self, source: Path | None, target: Path, cause: OSError) -> None:
        origin = f"{source} -> " if source is not None else ""
        super().__init__(f"Cannot write {origin}{target}: {cause}")
        self.source = source
        self.target = target


class DiskImageError(BundlerError):
    """Raised when the disk-image tool fails; carries its captured output."""

    def __init__(self, message: str, *, stdout: str = "", stderr: str = "") -> None:
        details = "\n".join(part for part in (stderr.strip(), stdout.strip()) if part)
        super().__init__(f"{message}\n{details}" if details else message)
        self.stdout = stdout
        self.stderr = stderr


class BundleStepError(BundlerError):
    """Raised by the assembly pipeline; records the steps that had completed."""

    def __init__(self, step: str, cause: BundlerError, completed: Sequence[str]) -> None:
        super().__init__(f"Bundle step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause
        self.completed = tuple(completed)


__all__ = [
    "BundleIOError",
    "BundleStepError",
    "BundlerError",
    "ConfigurationError",
    "DiskImageError",
    "MissingResourceError",
]

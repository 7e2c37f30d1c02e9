"""Port definition for invoking external tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


@dataclass(frozen=True)
class CommandResult:
    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(ABC):
    @abstractmethod
    def run(self, command: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        """Run ``command`` to completion and capture its output.

        Raises FileNotFoundError when the executable cannot be found.
        """

"""CommandRunner backed by subprocess."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from appbundler.ports.command_runner import CommandResult, CommandRunner


class SubprocessCommandRunner(CommandRunner):
    def run(self, command: Sequence[str], *, cwd: Path | None = None) -> CommandResult:
        args = [str(part) for part in command]
        result = subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
        return CommandResult(
            command=tuple(args),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

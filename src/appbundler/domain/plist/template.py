"""Placeholder substitution for Info.plist templates."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Tuple

from appbundler.domain.errors import ConfigurationError

OPEN_MARKER = "${"
CLOSE_MARKER = "}"


def render_line(line: str, variables: Mapping[str, str]) -> str:
    """Substitute every complete ``${token}`` in ``line``, left to right.

    Resolved values are not scanned again. A ``${`` without a later ``}`` is
    left untouched.
    """

    parts: list[str] = []
    remainder = line
    while True:
        start = remainder.find(OPEN_MARKER)
        if start < 0:
            break
        end = remainder.find(CLOSE_MARKER, start + len(OPEN_MARKER))
        if end < 0:
            break
        parts.append(remainder[:start])
        token = remainder[start + len(OPEN_MARKER):end]
        parts.append(variables.get(token, ""))
        remainder = remainder[end + len(CLOSE_MARKER):]
    parts.append(remainder)
    return "".join(parts)


@dataclass(frozen=True)
class PlistTemplate:
    """A template document: the raw lines, line terminators included."""

    lines: Tuple[str, ...]
    source: Path | None = None

    @classmethod
    def from_text(cls, text: str, source: Path | None = None) -> "PlistTemplate":
        return cls(lines=tuple(text.splitlines(keepends=True)), source=source)

    @classmethod
    def load(cls, path: Path) -> "PlistTemplate":
        if not path.is_file():
            raise ConfigurationError(f"Info.plist template not found: {path}")
        # newline="" keeps CRLF templates byte-identical outside placeholders
        with path.open("r", encoding="utf-8", newline="") as handle:
            return cls.from_text(handle.read(), source=path)

    def render(self, variables: Mapping[str, str]) -> str:
        return "".join(render_line(line, variables) for line in self.lines)

    def tokens(self) -> Tuple[str, ...]:
        """Tokens referenced by the template, in order of first appearance."""

        seen: dict[str, None] = {}
        for line in self.lines:
            remainder = line
            while True:
                start = remainder.find(OPEN_MARKER)
                end = remainder.find(CLOSE_MARKER, start + len(OPEN_MARKER)) if start >= 0 else -1
                if end < 0:
                    break
                seen.setdefault(remainder[start + len(OPEN_MARKER):end], None)
                remainder = remainder[end + len(CLOSE_MARKER):]
        return tuple(seen)


__all__ = ["CLOSE_MARKER", "OPEN_MARKER", "PlistTemplate", "render_line"]

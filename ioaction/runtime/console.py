"""Console capabilities that actions run against."""
from __future__ import annotations

import sys
from typing import Any, Iterable, TextIO


class Console:
    """Narrow console capability used by the engine.

    ``read_line`` returns ``None`` once input is exhausted; the engine turns
    that into :class:`~ioaction.runtime.core.EndOfInput`.
    """

    def write_line(self, text: str) -> None:
        raise NotImplementedError()

    def read_line(self) -> str | None:
        raise NotImplementedError()


class StreamConsole(Console):
    """Console backed by text streams, ``sys.stdin``/``sys.stdout`` by default."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def write_line(self, text: str) -> None:
        self.stdout.write(text + "\n")
        self.stdout.flush()

    def read_line(self) -> str | None:
        line = self.stdin.readline()
        if not line:
            return None
        if line.endswith("\r\n"):
            return line[:-2]
        if line.endswith("\n"):
            return line[:-1]
        return line


class ScriptedConsole(Console):
    """In-memory console with a fixed list of input lines."""

    def __init__(self, lines: Iterable[str] = ()):
        self.contents = list(lines)
        self.index = 0
        self.output: list[str] = []
        self.history: list[dict[str, Any]] = []

    @property
    def remaining(self) -> list[str]:
        return self.contents[self.index:]

    @property
    def text(self) -> str:
        return "".join(line + "\n" for line in self.output)

    def write_line(self, text: str) -> None:
        self.output.append(text)
        self.history.append({"action": "write", "detail": text})

    def read_line(self) -> str | None:
        if self.index < len(self.contents):
            data = self.contents[self.index]
            self.index += 1
        else:
            data = None
        self.history.append({"action": "read", "detail": data})
        return data

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ScriptedConsole read={self.index}/{len(self.contents)} wrote={len(self.output)}>"


__all__ = [
    "Console",
    "ScriptedConsole",
    "StreamConsole",
]

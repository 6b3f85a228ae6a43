"""Evaluation of action trees against a console."""

from __future__ import annotations

from collections import deque
from typing import Any, Optional

from ..constants import EFFECT_LOG_LIMIT

from .cancel import CancellationToken
from .console import Console, StreamConsole
from .core import (
    Action,
    ActionCancelled,
    ActionError,
    Bind,
    EndOfInput,
    Forever,
    Print,
    Pure,
    ReadLine,
    Sequence,
)


class EffectLog:
    """Effect log that keeps the first entry, a bounded tail and a total count."""

    def __init__(self, limit: int = EFFECT_LOG_LIMIT):
        self.first: str | None = None
        self.recent: deque[str] = deque(maxlen=limit)
        self.count = 0

    def append(self, entry: str) -> None:
        if self.first is None:
            self.first = entry
        self.recent.append(entry)
        self.count += 1


class Outcome:
    """Result of one engine run: a yielded value or an error, plus the effect log.

    ``log`` holds only the most recent entries; ``effect_count`` and
    ``first_log`` describe the whole run.
    """

    def __init__(
        self,
        grade: str,
        value: Any = None,
        log: Optional[list[str]] = None,
        *,
        error: ActionError | None = None,
        cancelled: bool = False,
        effect_count: int | None = None,
        first_log: str | None = None,
    ):
        self.grade = grade
        self.value = value
        self.log = log or []
        self.error = error
        self.cancelled = cancelled
        self.effect_count = len(self.log) if effect_count is None else effect_count
        if first_log is None and self.log:
            first_log = self.log[0]
        self.first_log = first_log

    @property
    def ok(self) -> bool:
        return self.error is None and not self.cancelled

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        if self.cancelled:
            raise ActionCancelled()
        return self.value

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        if self.error is not None:
            return f"<Outcome [{self.grade}] error={self.error!r}>"
        if self.cancelled:
            return f"<Outcome [{self.grade}] cancelled>"
        return f"<Outcome [{self.grade}] value={self.value!r}>"


class _BindFrame:
    __slots__ = ("continuation", "discard")

    def __init__(self, continuation, discard):
        self.continuation = continuation
        self.discard = discard


class _SequenceFrame:
    __slots__ = ("actions", "index", "results", "discard")

    def __init__(self, actions, discard):
        self.actions = actions
        self.index = 0
        self.results: list[Any] = []
        self.discard = discard


class _ForeverFrame:
    __slots__ = ("body",)

    def __init__(self, body):
        self.body = body


class _ConstFrame:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


class ActionEngine:
    """Runs actions depth-first, in construction order, on one console.

    At most ``log_limit`` effect entries are retained per run.
    """

    def __init__(self, log_limit: int = EFFECT_LOG_LIMIT):
        self.log_limit = log_limit

    def run(
        self,
        action: Action,
        console: Console,
        token: CancellationToken | None = None,
    ) -> Outcome:
        if not isinstance(action, Action):
            raise TypeError(f"Cannot run {type(action).__name__}; expected an Action")
        log = EffectLog(self.log_limit)
        try:
            value = self._evaluate(action, console, token, log)
        except ActionCancelled:
            return self._outcome(log, None, cancelled=True)
        except ActionError as exc:
            return self._outcome(log, None, error=exc)
        return self._outcome(log, value)

    @staticmethod
    def _outcome(log: EffectLog, value: Any, **kwargs) -> Outcome:
        return Outcome(
            "io" if log.count else "pure",
            value,
            list(log.recent),
            effect_count=log.count,
            first_log=log.first,
            **kwargs,
        )

    def _evaluate(self, action, console, token, log):
        # Continuations live on an explicit stack so recursive programs
        # (a loop that re-binds itself per input line) run in constant
        # Python stack depth.
        stack: list[Any] = []
        current = action

        while True:
            if isinstance(current, Print):
                console.write_line(current.text)
                log.append(f"print:{current.text}")
                value = None
            elif isinstance(current, ReadLine):
                line = console.read_line()
                if line is None:
                    log.append("eof")
                    raise EndOfInput()
                log.append(f"read:{line}")
                value = line
            elif isinstance(current, Pure):
                value = current.value
            elif isinstance(current, Bind):
                stack.append(_BindFrame(current.continuation, current.discard))
                current = current.first
                continue
            elif isinstance(current, Sequence):
                if current.actions:
                    stack.append(_SequenceFrame(current.actions, current.discard))
                    current = current.actions[0]
                    continue
                value = None if current.discard else []
            elif isinstance(current, Forever):
                if token is not None:
                    token.raise_if_cancelled()
                stack.append(_ForeverFrame(current.body))
                current = current.body
                continue
            else:
                raise TypeError(f"Unknown action variant: {type(current).__name__}")

            current = None
            while stack:
                frame = stack[-1]
                if isinstance(frame, _BindFrame):
                    stack.pop()
                    nxt = frame.continuation(value)
                    if not isinstance(nxt, Action):
                        raise TypeError(
                            "Bind continuation must return an Action, "
                            f"got {type(nxt).__name__}"
                        )
                    if frame.discard:
                        stack.append(_ConstFrame(None))
                    current = nxt
                    break
                if isinstance(frame, _SequenceFrame):
                    if not frame.discard:
                        frame.results.append(value)
                    frame.index += 1
                    if frame.index < len(frame.actions):
                        current = frame.actions[frame.index]
                        break
                    stack.pop()
                    value = None if frame.discard else frame.results
                    continue
                if isinstance(frame, _ForeverFrame):
                    if token is not None:
                        token.raise_if_cancelled()
                    current = frame.body
                    break
                stack.pop()
                value = frame.value

            if current is None:
                return value


def run_action(
    action: Action,
    console: Console | None = None,
    token: CancellationToken | None = None,
) -> Any:
    """Run ``action`` and return its value, raising any :class:`ActionError`."""

    console = console if console is not None else StreamConsole()
    return ActionEngine().run(action, console, token).unwrap()


__all__ = [
    "ActionEngine",
    "EffectLog",
    "Outcome",
    "run_action",
]

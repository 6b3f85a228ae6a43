"""Core action values for the ioaction runtime.

An action describes an effect; building one never performs it. Only
:class:`~ioaction.runtime.engine.ActionEngine` runs actions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable


class ActionError(RuntimeError):
    """Base class for failures reported by a run."""


class EndOfInput(ActionError):
    """Raised when ``ReadLine`` finds the console input exhausted."""

    def __init__(self, message: str = "end of input"):
        super().__init__(message)


class ActionCancelled(ActionError):
    """Raised when a cancellation token fires between ``Forever`` iterations."""

    def __init__(self, message: str = "action cancelled"):
        super().__init__(message)


class Action:
    """Marker base for every action variant."""

    kind = "Action"

    def children(self) -> tuple["Action", ...]:
        return ()

    def __rshift__(self, other: "Action") -> "Bind":
        return then(self, other)

    def bind(self, continuation: Callable[[Any], "Action"]) -> "Bind":
        return Bind(self, continuation)


@dataclass(frozen=True)
class Print(Action):
    text: str
    kind = "Print"

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f"Print expects text, got {type(self.text).__name__}")


@dataclass(frozen=True)
class ReadLine(Action):
    kind = "ReadLine"


@dataclass(frozen=True)
class Pure(Action):
    value: Any = None
    kind = "Pure"


@dataclass(frozen=True)
class Bind(Action):
    first: Action
    continuation: Callable[[Any], Action]
    discard: bool = False
    kind = "Bind"

    def __post_init__(self):
        _require_action(self.first, "Bind")
        if not callable(self.continuation):
            raise TypeError("Bind continuation must be callable")

    @property
    def opaque(self) -> bool:
        """True when the next action is only known once ``first`` has run."""
        return not isinstance(self.continuation, Then)

    def children(self) -> tuple[Action, ...]:
        if isinstance(self.continuation, Then):
            return (self.first, self.continuation.second)
        return (self.first,)


@dataclass(frozen=True)
class Then:
    """Continuation that ignores the bound value and yields ``second``."""

    second: Action

    def __post_init__(self):
        _require_action(self.second, "then")

    def __call__(self, _value: Any) -> Action:
        return self.second


@dataclass(frozen=True)
class Sequence(Action):
    actions: tuple[Action, ...] = ()
    discard: bool = False
    kind = "Sequence"

    def __post_init__(self):
        actions = tuple(self.actions)
        for item in actions:
            _require_action(item, "Sequence")
        object.__setattr__(self, "actions", actions)

    def children(self) -> tuple[Action, ...]:
        return self.actions


@dataclass(frozen=True)
class Forever(Action):
    body: Action
    kind = "Forever"

    def __post_init__(self):
        _require_action(self.body, "Forever")

    def children(self) -> tuple[Action, ...]:
        return (self.body,)


def _require_action(value: Any, owner: str) -> None:
    if not isinstance(value, Action):
        raise TypeError(f"{owner} expects an Action, got {type(value).__name__}")


unit = Pure(None)


def then(first: Action, second: Action) -> Bind:
    """Run ``first``, drop its value, then run ``second`` (``>>``)."""

    return Bind(first, Then(second))


def fmap(fn: Callable[[Any], Any], action: Action) -> Bind:
    return Bind(action, lambda value: Pure(fn(value)))


def when(condition: bool, action: Action) -> Action:
    """Return ``action`` if ``condition`` holds, otherwise ``unit``."""

    return action if condition else unit


def unless(condition: bool, action: Action) -> Action:
    return when(not condition, action)


def sequence_(actions: Iterable[Action]) -> Sequence:
    return Sequence(tuple(actions), discard=True)


def for_each(items: Iterable[Any], fn: Callable[[Any], Action]) -> Sequence:
    """Map ``fn`` over ``items`` and collect every yield (``mapM``)."""

    return Sequence(tuple(fn(item) for item in items))


def for_each_(items: Iterable[Any], fn: Callable[[Any], Action]) -> Sequence:
    """Like :func:`for_each` but yields unit (``mapM_``)."""

    return Sequence(tuple(fn(item) for item in items), discard=True)


__all__ = [
    "Action",
    "ActionCancelled",
    "ActionError",
    "Bind",
    "EndOfInput",
    "Forever",
    "Print",
    "Pure",
    "ReadLine",
    "Sequence",
    "Then",
    "fmap",
    "for_each",
    "for_each_",
    "sequence_",
    "then",
    "unit",
    "unless",
    "when",
]

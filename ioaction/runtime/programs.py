"""Example programs from the IO-action walkthrough, built as action trees."""
from __future__ import annotations

from typing import Callable

from .core import (
    Action,
    Bind,
    Forever,
    Print,
    ReadLine,
    Sequence,
    for_each_,
    then,
    unit,
)


def reverse_words(line: str) -> str:
    """Reverse every word of ``line``, keeping word order."""

    return " ".join(word[::-1] for word in line.split())


def hello_world() -> Action:
    return Print("hello, world")


def greet() -> Action:
    """Ask for a name and greet whoever answers."""

    return then(
        Print("Hello, what's your name?"),
        Bind(ReadLine(), lambda name: Print(f"Hey {name}, you rock!")),
    )


def full_name() -> Action:
    ask_first = then(Print("What's your first name?"), ReadLine())
    ask_last = then(Print("What's your last name?"), ReadLine())
    return Bind(
        ask_first,
        lambda first: Bind(
            ask_last,
            lambda last: Print(f"hey {first.upper()} {last.upper()}, how are you?"),
        ),
    )


def reverse_loop() -> Action:
    """Print each line with its words reversed until an empty line."""

    def step(line: str) -> Action:
        if not line:
            return unit
        return then(Print(reverse_words(line)), reverse_loop())

    return Bind(ReadLine(), step)


def shout_forever() -> Action:
    return Forever(Bind(ReadLine(), lambda line: Print(line.upper())))


def read_three() -> Action:
    """Read three lines and print them back as a list."""

    return Bind(
        Sequence((ReadLine(), ReadLine(), ReadLine())),
        lambda lines: Print(repr(lines)),
    )


def print_each() -> Action:
    return for_each_([1, 2, 3], lambda n: Print(str(n)))


def colours() -> Action:
    """Ask which colour goes with each number, then list the answers."""

    def ask(n: int) -> Action:
        return then(
            Print(f"Which color do you associate with the number {n}?"),
            ReadLine(),
        )

    answers = Sequence(tuple(ask(n) for n in (1, 2, 3, 4)))
    return Bind(
        answers,
        lambda colors: then(
            Print("The colors that you associate with 1, 2, 3 and 4 are: "),
            for_each_(colors, Print),
        ),
    )


PROGRAMS: dict[str, Callable[[], Action]] = {
    "hello": hello_world,
    "greet": greet,
    "full-name": full_name,
    "reverse": reverse_loop,
    "shout": shout_forever,
    "read-three": read_three,
    "print-each": print_each,
    "colours": colours,
}


def build_program(name: str) -> Action:
    try:
        factory = PROGRAMS[name]
    except KeyError:
        known = ", ".join(sorted(PROGRAMS))
        raise ValueError(f"Unknown program {name!r}; choose one of: {known}") from None
    return factory()


__all__ = [
    "PROGRAMS",
    "build_program",
    "colours",
    "full_name",
    "greet",
    "hello_world",
    "print_each",
    "read_three",
    "reverse_loop",
    "reverse_words",
    "shout_forever",
]

"""Evaluation order, yields and failure behaviour of ``ActionEngine``."""

from __future__ import annotations

import pytest

from ioaction.constants import EFFECT_LOG_LIMIT
from ioaction.runtime import (
    ActionCancelled,
    ActionEngine,
    Bind,
    CancellationToken,
    EndOfInput,
    Forever,
    Print,
    Pure,
    ReadLine,
    ScriptedConsole,
    Sequence,
    reverse_loop,
    run_action,
    then,
    unit,
)


@pytest.fixture
def engine():
    return ActionEngine()


class CancellingConsole(ScriptedConsole):
    """Fires ``token`` once ``limit`` lines have been written."""

    def __init__(self, token, limit, lines=()):
        super().__init__(lines)
        self.token = token
        self.limit = limit

    def write_line(self, text):
        super().write_line(text)
        if len(self.output) >= self.limit:
            self.token.cancel()


@pytest.mark.parametrize("text", ["", "hello", "two words", "ünïcode ✓"])
def test_print_writes_text_once_and_yields_unit(engine, text):
    console = ScriptedConsole()

    outcome = engine.run(Print(text), console)

    assert console.output == [text]
    assert console.text == text + "\n"
    assert outcome.value is None
    assert outcome.ok
    assert outcome.grade == "io"
    assert outcome.log == [f"print:{text}"]


@pytest.mark.parametrize("value", [0, "x", None, [1, 2], {"k": "v"}])
def test_pure_yields_value_without_effects(engine, value):
    console = ScriptedConsole(["unused"])

    outcome = engine.run(Pure(value), console)

    assert outcome.value == value
    assert console.output == []
    assert console.history == []
    assert outcome.grade == "pure"


def test_bind_flushes_first_effects_before_building_continuation(engine):
    console = ScriptedConsole(["line"])
    seen_at_call = []

    def continuation(value):
        seen_at_call.append((value, list(console.output)))
        return Print("second")

    action = Bind(then(Print("first"), ReadLine()), continuation)
    outcome = engine.run(action, console)

    assert seen_at_call == [("line", ["first"])]
    assert console.output == ["first", "second"]
    assert outcome.value is None


def test_bind_yields_continuation_result_unless_discarded(engine):
    kept = engine.run(Bind(Pure(2), lambda n: Pure(n * 10)), ScriptedConsole())
    dropped = engine.run(
        Bind(Pure(2), lambda n: Pure(n * 10), discard=True), ScriptedConsole()
    )

    assert kept.value == 20
    assert dropped.value is None


def test_sequence_yields_values_in_order(engine):
    console = ScriptedConsole(["b"])

    outcome = engine.run(Sequence((Pure("a"), ReadLine(), Print("c"))), console)

    assert outcome.value == ["a", "b", None]
    assert console.output == ["c"]


def test_discarded_sequence_keeps_effect_order_and_yields_unit(engine):
    console = ScriptedConsole()

    outcome = engine.run(
        Sequence((Print("1"), Print("2"), Print("3")), discard=True), console
    )

    assert console.output == ["1", "2", "3"]
    assert outcome.value is None


def test_empty_sequence_has_no_effect(engine):
    console = ScriptedConsole()

    assert engine.run(Sequence(()), console).value == []
    assert engine.run(Sequence((), discard=True), console).value is None
    assert console.history == []


def test_nested_sequences_preserve_structure(engine):
    action = Sequence((Sequence((Pure(1), Pure(2))), Sequence(()), Pure(3)))

    assert engine.run(action, ScriptedConsole()).value == [[1, 2], [], 3]


def test_read_line_on_exhausted_input_fails_without_output(engine):
    console = ScriptedConsole()

    outcome = engine.run(ReadLine(), console)

    assert isinstance(outcome.error, EndOfInput)
    assert not outcome.ok
    assert outcome.value is None
    assert console.output == []
    assert outcome.log == ["eof"]
    with pytest.raises(EndOfInput):
        outcome.unwrap()


def test_end_of_input_short_circuits_later_actions(engine):
    console = ScriptedConsole(["only"])
    calls = []

    action = Sequence(
        (
            Print("before"),
            ReadLine(),
            Bind(ReadLine(), lambda line: calls.append(line) or Print(line)),
            Print("after"),
        )
    )
    outcome = engine.run(action, console)

    assert isinstance(outcome.error, EndOfInput)
    assert console.output == ["before"]
    assert calls == []


def test_reverse_loop_stops_on_empty_line_without_further_reads(engine):
    console = ScriptedConsole(["Hello mate", "", "never read"])

    outcome = engine.run(reverse_loop(), console)

    assert outcome.ok
    assert outcome.value is None
    assert console.output == ["olleH etam"]
    assert console.remaining == ["never read"]


def test_recursive_loop_runs_in_constant_stack_depth(engine):
    lines = [f"line {n}" for n in range(5000)] + [""]
    console = ScriptedConsole(lines)

    outcome = engine.run(reverse_loop(), console)

    assert outcome.ok
    assert len(console.output) == 5000
    assert console.output[-1] == "enil 9994"


def test_deep_left_nested_binds_do_not_recurse(engine):
    action = Pure(0)
    for _ in range(5000):
        action = Bind(action, lambda n: Pure(n + 1))

    assert engine.run(action, ScriptedConsole()).value == 5000


def test_forever_stops_cleanly_when_token_fires(engine):
    token = CancellationToken()
    console = CancellingConsole(token, limit=3)

    outcome = engine.run(Forever(Print("x")), console, token)

    assert outcome.cancelled
    assert outcome.error is None
    assert outcome.value is None
    assert console.output == ["x", "x", "x"]
    with pytest.raises(ActionCancelled):
        outcome.unwrap()


def test_forever_does_not_start_when_already_cancelled(engine):
    token = CancellationToken()
    token.cancel()
    console = ScriptedConsole()

    outcome = engine.run(then(Print("setup"), Forever(Print("x"))), console, token)

    assert outcome.cancelled
    assert console.output == ["setup"]


def test_forever_surfaces_end_of_input(engine):
    console = ScriptedConsole(["a", "b"])

    outcome = engine.run(Forever(Bind(ReadLine(), Print)), console, CancellationToken())

    assert isinstance(outcome.error, EndOfInput)
    assert not outcome.cancelled
    assert console.output == ["a", "b"]


def test_forever_inside_bind_never_reaches_continuation(engine):
    token = CancellationToken()
    console = CancellingConsole(token, limit=2)
    calls = []

    action = Bind(Forever(Print("tick")), lambda value: calls.append(value) or unit)
    outcome = engine.run(action, console, token)

    assert outcome.cancelled
    assert calls == []


def test_continuation_must_return_an_action(engine):
    with pytest.raises(TypeError):
        engine.run(Bind(Pure(1), lambda n: n + 1), ScriptedConsole())


def test_run_rejects_non_actions(engine):
    with pytest.raises(TypeError):
        engine.run("Print", ScriptedConsole())


def test_run_action_returns_value_or_raises():
    assert run_action(Pure(5), ScriptedConsole()) == 5
    with pytest.raises(EndOfInput):
        run_action(ReadLine(), ScriptedConsole())


def test_run_action_defaults_to_standard_streams(capsys):
    run_action(Print("to stdout"))

    assert capsys.readouterr().out == "to stdout\n"


def test_same_action_value_can_describe_repeated_effects(engine):
    greeting = Print("hi")
    console = ScriptedConsole()

    engine.run(Sequence((greeting, greeting)), console)

    assert console.output == ["hi", "hi"]


def test_long_cancelled_forever_keeps_log_bounded():
    token = CancellationToken()
    console = CancellingConsole(token, limit=50000)

    outcome = ActionEngine(log_limit=100).run(Forever(Print("x")), console, token)

    assert outcome.cancelled
    assert outcome.effect_count == 50000
    assert len(outcome.log) == 100
    assert outcome.first_log == "print:x"


def test_default_log_limit_applies_to_long_runs():
    token = CancellationToken()
    console = CancellingConsole(token, limit=EFFECT_LOG_LIMIT + 500)

    outcome = ActionEngine().run(Forever(Print("x")), console, token)

    assert len(outcome.log) == EFFECT_LOG_LIMIT
    assert outcome.effect_count == EFFECT_LOG_LIMIT + 500


def test_bounded_log_keeps_most_recent_entries():
    lines = [str(n) for n in range(20)]
    console = ScriptedConsole(lines)

    outcome = ActionEngine(log_limit=3).run(
        Forever(Bind(ReadLine(), Print)), console, CancellationToken()
    )

    assert isinstance(outcome.error, EndOfInput)
    assert outcome.log == ["read:19", "print:19", "eof"]
    assert outcome.first_log == "read:0"
    assert outcome.effect_count == 41
    assert outcome.grade == "io"

from __future__ import annotations

import pytest

from parsimony import programs
from parsimony.machine import Machine
from parsimony.tape import TapeBuilder
from parsimony.transition import TransitionKey, Transitions


def unary_machine() -> Machine[int, str]:
    return Machine(
        0,
        TapeBuilder("_").with_current("I").with_right(["I", "I"]).build(),
        Transitions.from_rules([
            ((0, "I"), (0, "I", "R")),
            ((0, "_"), (1, "I", "L")),
            ((1, "I"), (1, "I", "L")),
            ((1, "_"), (2, "_", "R")),
        ]),
    )


def strokes(machine: Machine) -> int:
    return sum(symbol != machine.tape.blank() for symbol in machine.tape.symbols())


def test_step_produces_a_successor() -> None:
    machine = unary_machine()

    successor = machine.step()

    assert successor is not None
    assert successor.state == 0
    assert successor.tape.read() == "I"
    assert successor.transitions is machine.transitions


def test_step_does_not_change_the_machine() -> None:
    machine = unary_machine()

    first = machine.step()
    second = machine.step()

    assert first == second
    assert machine.state == 0
    assert machine.tape.symbols() == ["I", "I", "I"]


def test_trace_visits_every_state_until_halt() -> None:
    machines = list(unary_machine().trace())

    assert [m.state for m in machines] == [0, 0, 0, 0, 1, 1, 1, 1, 2]
    assert machines[-1].step() is None
    assert str(machines[-1]) == "...[2]IIII..."
    assert strokes(machines[-1]) == 4


def test_write_happens_before_the_move() -> None:
    machine = Machine(
        0,
        TapeBuilder("_").build(),
        Transitions.from_rules([((0, "_"), (1, "x", "R")), ((1, "_"), (2, "y", "L"))]),
    )

    halted, steps = machine.run()

    assert steps == 2
    assert halted.state == 2
    assert halted.tape.read() == "x"
    assert halted.tape.symbols() == ["x", "y"]


def test_halting_is_deterministic() -> None:
    halted, _ = unary_machine().run()

    assert [halted.step() for _ in range(3)] == [None, None, None]
    assert halted.is_halted()
    assert halted.transitions.lookup(TransitionKey(halted.state, halted.tape.read())) is None


def test_none_is_an_ordinary_symbol() -> None:
    machine = Machine(
        0,
        TapeBuilder("_").with_current(None).build(),
        Transitions.from_rules([((0, None), (1, "x", "R"))]),
    )

    halted, steps = machine.run()

    assert steps == 1
    assert halted.state == 1
    assert halted.tape.symbols() == ["x", "_"]


def test_halting_state_is_not_special() -> None:
    machine = Machine(-1, TapeBuilder("_").build(), Transitions.from_rules([((-1, "_"), (7, "I", "R"))]))

    halted, steps = machine.run()

    assert steps == 1
    assert halted.state == 7


def test_machine_without_transitions_halts_immediately() -> None:
    machine = Machine(0, TapeBuilder("_").build(), Transitions())

    assert machine.step() is None
    assert list(machine.trace()) == [machine]
    assert machine.run() == (machine, 0)


def test_trace_respects_max_steps() -> None:
    machines = list(unary_machine().trace(3))

    assert len(machines) == 4
    assert [m.state for m in machines] == [0, 0, 0, 0]


def test_run_raises_timeout_with_last_machine() -> None:
    with pytest.raises(TimeoutError) as info:
        unary_machine().run(max_steps=5)

    (last,) = info.value.args
    assert isinstance(last, Machine)
    assert last.state == 1


def test_run_accepts_halting_on_the_last_allowed_step() -> None:
    halted, steps = unary_machine().run(max_steps=8)

    assert steps == 8
    assert halted.state == 2


def test_successor_program() -> None:
    halted, steps = programs.successor().run()

    assert steps == 8
    assert halted.state == programs.HALT
    assert strokes(halted) == 4


def test_two_state_busy_beaver() -> None:
    machine = Machine(
        0,
        TapeBuilder("0").build(),
        Transitions.from_rules([
            ((0, "0"), (1, "1", "R")),
            ((0, "1"), (1, "1", "L")),
            ((1, "0"), (0, "1", "L")),
            ((1, "1"), (-1, "1", "R")),
        ]),
    )

    halted, steps = machine.run()

    assert (steps, strokes(halted)) == (6, 4)


def test_four_state_busy_beaver() -> None:
    machine = Machine(
        "A",
        TapeBuilder(0).build(),
        Transitions.from_rules([
            (("A", 0), ("B", 1, "R")),
            (("A", 1), ("B", 1, "L")),
            (("B", 0), ("A", 1, "L")),
            (("B", 1), ("C", 0, "L")),
            (("C", 0), ("H", 1, "R")),
            (("C", 1), ("D", 1, "L")),
            (("D", 0), ("D", 1, "R")),
            (("D", 1), ("A", 0, "R")),
        ]),
    )

    halted, steps = machine.run(max_steps=1000)

    assert halted.state == "H"
    assert (steps, strokes(halted)) == (107, 13)


def test_five_state_busy_beaver_first_steps() -> None:
    machines = list(programs.busy_beaver().trace(10))

    assert [m.state for m in machines] == [0, 1, 2, 3, 0, 2, 4, 0, 1, 2, 3]
    assert str(machines[-1]) == "...I[3]IIII..."
    assert strokes(machines[-1]) == 5


def test_five_state_busy_beaver_strokes_midway() -> None:
    machine = list(programs.busy_beaver().trace(60))[-1]

    assert machine.state == 0
    assert strokes(machine) == 12
    assert str(machine) == "...II__IIIIIIIIII[0]..."


@pytest.mark.slow
def test_five_state_busy_beaver_halts() -> None:
    halted, steps = programs.busy_beaver().run()

    assert halted.state == programs.HALT
    assert steps == 47_176_870
    assert strokes(halted) == 4_098

from collections.abc import Callable

from parsimony.machine import Machine
from parsimony.tape import TapeBuilder
from parsimony.transition import Transitions

BLANK = "_"
STROKE = "I"
HALT = -1


def successor() -> Machine[int, str]:
    """Adds one stroke to the unary number 3."""
    return Machine(
        0,
        TapeBuilder(BLANK).with_current(STROKE).with_right([STROKE, STROKE]).build(),
        Transitions.from_rules([
            ((0, STROKE), (0, STROKE, "R")),
            ((0, BLANK), (1, STROKE, "L")),
            ((1, STROKE), (1, STROKE, "L")),
            ((1, BLANK), (HALT, BLANK, "R")),
        ]),
    )


def busy_beaver() -> Machine[int, str]:
    """The five state busy beaver champion, mirrored so that it first moves left.

    Halts after 47,176,870 steps with 4,098 strokes on the tape.
    """
    return Machine(
        0,
        TapeBuilder(BLANK).build(),
        Transitions.from_rules([
            ((0, BLANK), (1, STROKE, "L")),
            ((0, STROKE), (2, STROKE, "R")),
            ((1, BLANK), (2, STROKE, "L")),
            ((1, STROKE), (1, STROKE, "L")),
            ((2, BLANK), (3, STROKE, "L")),
            ((2, STROKE), (4, BLANK, "R")),
            ((3, BLANK), (0, STROKE, "R")),
            ((3, STROKE), (3, STROKE, "R")),
            ((4, BLANK), (HALT, STROKE, "L")),
            ((4, STROKE), (0, BLANK, "R")),
        ]),
    )


PROGRAMS: dict[str, Callable[[], Machine[int, str]]] = {
    "successor": successor,
    "busy-beaver": busy_beaver,
}


def get(name: str) -> Machine[int, str]:
    return PROGRAMS[name]()

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import dropwhile
from typing import Any, Self

from rich.markup import escape


class Direction(IntEnum):
    L = -1
    R = 1

    @classmethod
    def parse(cls, val: str) -> Self:
        match val:
            case "L" | "R":
                return getattr(cls, val)
            case _:
                raise ValueError(f"Unknown head movement {val!r}, expected 'L' or 'R'")


@dataclass(frozen=True, eq=False, repr=False)
class HalfTape[S]:
    """One side of the tape as a persistent stack, the cell next to the head on top.

    Pushing shares the whole previous stack, so every tape derived from another one costs a single cell.
    """

    symbol: S
    rest: HalfTape[S] | None = None

    def __iter__(self) -> Iterator[S]:
        cell: HalfTape[S] | None = self
        while cell is not None:
            yield cell.symbol
            cell = cell.rest

    def __repr__(self) -> str:
        return f"HalfTape({list(self)!r})"

    @classmethod
    def of(cls, symbols: Iterable[S]) -> HalfTape[S] | None:
        """Builds a half from symbols listed nearest to the head first."""
        half = None
        for symbol in reversed(list(symbols)):
            half = cls(symbol, half)
        return half


def walk[S](half: HalfTape[S] | None) -> Iterator[S]:
    if half is not None:
        yield from half


def pop[S](half: HalfTape[S] | None, blank: S) -> tuple[S, HalfTape[S] | None]:
    if half is None:
        return blank, None
    return half.symbol, half.rest


def strip_blanks[S](symbols: Iterable[S], blank: S) -> list[S]:
    """Drops the blanks at the far end of a nearest-first sequence."""
    return list(reversed(list(dropwhile(lambda s: s == blank, reversed(list(symbols))))))


@dataclass
class Configuration[Q, S]:
    state: Q
    left: list[S]
    right: list[S]
    blank: S

    def __post_init__(self) -> None:
        self.left = list(dropwhile(lambda s: s == self.blank, self.left))
        self.right = strip_blanks(self.right, self.blank)

    def __str__(self) -> str:
        left = "".join(map(str, self.left))
        right = "".join(map(str, self.right))
        return f"...{left}[{self.state}]{right}..."

    def __format__(self, format: str) -> str:
        if not format:
            return str(self)
        elif format == ">":
            return self.pretty()
        else:
            raise ValueError(f"Unknown configuration format {format!r}")

    def _markup(self, symbol: S) -> str:
        return f"[grey58]{escape(str(symbol))}[/]" if symbol == self.blank else escape(str(symbol))

    def pretty(self) -> str:
        left = [self._markup(symbol) for symbol in self.left]
        state = f"[cyan]\\[{escape(str(self.state))}][/]"
        right = [self._markup(symbol) for symbol in self.right]
        blank = self._markup(self.blank)
        return f"...{blank}{"".join(left)}{state}{"".join(right)}{blank}..."


@dataclass(frozen=True, eq=False, repr=False)
class Tape[S]:
    """An unbounded tape with a read/write head.

    Tapes never change. Writing and moving the head return new tapes that share the untouched cells with
    this one, so every earlier tape stays valid. Cells that were never stored read as the blank symbol.
    """

    _blank: S
    _current: S
    _left: HalfTape[S] | None = None
    _right: HalfTape[S] | None = None

    @classmethod
    def empty(cls, blank: S) -> Tape[S]:
        return cls(blank, blank)

    def read(self) -> S:
        return self._current

    def write(self, symbol: S) -> Tape[S]:
        return Tape(self._blank, symbol, self._left, self._right)

    def blank(self) -> S:
        return self._blank

    def left(self) -> Tape[S]:
        symbol, rest = pop(self._left, self._blank)
        return Tape(self._blank, symbol, rest, HalfTape(self._current, self._right))

    def right(self) -> Tape[S]:
        symbol, rest = pop(self._right, self._blank)
        return Tape(self._blank, symbol, HalfTape(self._current, self._left), rest)

    def move(self, direction: Direction) -> Tape[S]:
        match direction:
            case Direction.L:
                return self.left()
            case Direction.R:
                return self.right()

    @property
    def position(self) -> int:
        """Index of the head inside `symbols()`."""
        return sum(1 for _ in walk(self._left))

    def symbols(self) -> list[S]:
        """Every stored cell from left to right, the head included."""
        return [*reversed(list(walk(self._left))), self._current, *walk(self._right)]

    def configuration[Q](self, state: Q) -> Configuration[Q, S]:
        return Configuration(
            state=state,
            left=list(reversed(list(walk(self._left)))),
            right=[self._current, *walk(self._right)],
            blank=self._blank,
        )

    def _key(self) -> tuple[S, S, tuple[S, ...], tuple[S, ...]]:
        return (
            self._blank,
            self._current,
            tuple(strip_blanks(walk(self._left), self._blank)),
            tuple(strip_blanks(walk(self._right), self._blank)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tape):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        left = list(reversed(list(walk(self._left))))
        right = list(walk(self._right))
        return f"Tape(blank={self._blank!r}, left={left!r}, current={self._current!r}, right={right!r})"

    def __str__(self) -> str:
        left = "".join(map(str, reversed(list(walk(self._left)))))
        right = "".join(map(str, walk(self._right)))
        return f"...{left}[{self._current}]{right}..."


_UNSET: Any = object()


@dataclass
class TapeBuilder[S]:
    """Assembles the initial tape of a machine.

    `left` and `right` hold symbols in the order they appear on the tape, so the last symbol of `left` and
    the first one of `right` are the neighbours of the head. Without a current symbol the head starts on a
    blank cell. The builder can be changed and built again, the tapes it produced are unaffected.
    """

    blank: S
    current: S = _UNSET
    left: list[S] = field(default_factory=list)
    right: list[S] = field(default_factory=list)

    def with_current(self, symbol: S) -> Self:
        self.current = symbol
        return self

    def with_left(self, symbols: Iterable[S]) -> Self:
        self.left = list(symbols)
        return self

    def with_right(self, symbols: Iterable[S]) -> Self:
        self.right = list(symbols)
        return self

    def build(self) -> Tape[S]:
        return Tape(
            self.blank,
            self.blank if self.current is _UNSET else self.current,
            HalfTape.of(reversed(self.left)),
            HalfTape.of(self.right),
        )

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass

from parsimony.tape import Direction


@dataclass(frozen=True)
class TransitionKey[Q: Hashable, S: Hashable]:
    """The state the machine is in and the symbol under the head."""

    state: Q
    symbol: S


@dataclass(frozen=True)
class TransitionValue[Q: Hashable, S: Hashable]:
    """The state to enter, the symbol to write and where to move the head afterwards."""

    state: Q
    symbol: S
    movement: Direction


class DuplicateTransitionError(ValueError):
    def __init__(self, key: TransitionKey) -> None:
        super().__init__(f"Transition table already has an entry for state {key.state!r} reading {key.symbol!r}")
        self.key = key


type Rule[Q, S] = tuple[tuple[Q, S], tuple[Q, S, Direction | str]]


class Transitions[Q: Hashable, S: Hashable](Mapping[TransitionKey[Q, S], TransitionValue[Q, S]]):
    """An immutable transition table.

    Tables are built by inserting one entry at a time into the empty table, each insert returning a new
    table. Every key may only be inserted once, see `DuplicateTransitionError`.
    """

    __slots__ = ("_entries",)

    _entries: dict[TransitionKey[Q, S], TransitionValue[Q, S]]

    def __init__(self) -> None:
        self._entries = {}

    @classmethod
    def from_rules(cls, rules: Iterable[Rule[Q, S]]) -> Transitions[Q, S]:
        table = cls()
        for (state, symbol), (out_state, out_symbol, movement) in rules:
            if isinstance(movement, str):
                movement = Direction.parse(movement)
            table = table.add(state, symbol, out_state, out_symbol, movement)
        return table

    def insert(self, key: TransitionKey[Q, S], value: TransitionValue[Q, S]) -> Transitions[Q, S]:
        if key in self._entries:
            raise DuplicateTransitionError(key)
        table = type(self)()
        table._entries = self._entries | {key: value}
        return table

    def add(self, state: Q, symbol: S, out_state: Q, out_symbol: S, movement: Direction) -> Transitions[Q, S]:
        return self.insert(TransitionKey(state, symbol), TransitionValue(out_state, out_symbol, movement))

    def lookup(self, key: TransitionKey[Q, S]) -> TransitionValue[Q, S] | None:
        return self._entries.get(key)

    def states(self) -> set[Q]:
        """States with at least one outgoing transition."""
        return {key.state for key in self._entries}

    def symbols(self) -> set[S]:
        return {key.symbol for key in self._entries} | {value.symbol for value in self._entries.values()}

    def __getitem__(self, key: TransitionKey[Q, S]) -> TransitionValue[Q, S]:
        return self._entries[key]

    def __iter__(self) -> Iterator[TransitionKey[Q, S]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __hash__(self) -> int:
        return hash(frozenset(self._entries.items()))

    def __repr__(self) -> str:
        entries = ", ".join(
            f"({key.state!r}, {key.symbol!r}) -> ({value.state!r}, {value.symbol!r}, {value.movement.name})"
            for key, value in self._entries.items()
        )
        return f"Transitions({entries})"

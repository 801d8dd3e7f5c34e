from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass

from parsimony.tape import Configuration, Tape
from parsimony.transition import TransitionKey, Transitions


@dataclass(frozen=True)
class Machine[Q: Hashable, S: Hashable]:
    """A Turing machine at one point of its run.

    Stepping never changes a machine, it returns the next one. A machine halts when its transition table has
    no entry for the current state and the symbol under the head. No state is special otherwise, a halting
    state is just a state without outgoing transitions.
    """

    state: Q
    tape: Tape[S]
    transitions: Transitions[Q, S]

    def step(self) -> Machine[Q, S] | None:
        """Performs a single transition, returns `None` if the machine halts instead."""
        trans = self.transitions.lookup(TransitionKey(self.state, self.tape.read()))
        if trans is None:
            return None
        # the written symbol has to be in the cell before the head leaves it
        tape = self.tape.write(trans.symbol).move(trans.movement)
        return Machine(trans.state, tape, self.transitions)

    def is_halted(self) -> bool:
        return self.transitions.lookup(TransitionKey(self.state, self.tape.read())) is None

    def trace(self, max_steps: int | None = None) -> Iterator[Machine[Q, S]]:
        """Yields this machine and every one it steps into.

        Ends after the halting machine, or after `max_steps` transitions if given.
        """
        machine: Machine[Q, S] | None = self
        step = 0
        while machine is not None:
            yield machine
            if max_steps is not None and step >= max_steps:
                return
            machine = machine.step()
            step += 1

    def run(self, max_steps: int | None = None) -> tuple[Machine[Q, S], int]:
        """Steps until the machine halts and returns the halting machine and the number of transitions taken.

        Raises a `TimeoutError` holding the last machine if it is still running after `max_steps` transitions.
        """
        machine, step = self, 0
        for step, machine in enumerate(self.trace(max_steps)):
            pass
        if not machine.is_halted():
            raise TimeoutError(machine)
        return machine, step

    def configuration(self) -> Configuration[Q, S]:
        return self.tape.configuration(self.state)

    def __str__(self) -> str:
        return str(self.configuration())

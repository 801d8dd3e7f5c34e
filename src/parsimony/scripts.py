from collections import deque
from typing import Annotated

from rich.console import Console
from rich.theme import Theme
from typer import Argument, Exit, Option, Typer

from parsimony import programs
from parsimony.machine import Machine
from parsimony.tape import Configuration

MAX_STEPS = 1_000_000
TRUNCATE = 20

app = Typer(pretty_exceptions_show_locals=False, no_args_is_help=True)
theme = Theme({
    "success": "green",
    "warning": "orange3",
    "error": "red",
    "heading": "blue",
    "info": "dim cyan",
})
console = Console(theme=theme)


def format_configs(configs: list[Configuration], offset: int = 0) -> str:
    out = [
        "[heading]step    configuration[/]\n",
        "  ⋮\n" if offset else "",
        *(f"{i: >3}    {c:>}\n" for i, c in enumerate(configs, offset)),
    ]
    return "".join(out)


def count_strokes(machine: Machine) -> int:
    blank = machine.tape.blank()
    return sum(symbol != blank for symbol in machine.tape.symbols())


@app.command(name="list")
def list_programs():
    """Lists the bundled programs."""
    for name, factory in programs.PROGRAMS.items():
        console.print(f"[heading]{name}[/]  {factory.__doc__.splitlines()[0] if factory.__doc__ else ''}")


@app.command()
def run(
    name: Annotated[str, Argument(help="Name of the bundled program to simulate.")],
    *,
    max_steps: Annotated[
        int,
        Option(
            "--max-steps",
            "-m",
            envvar="PARSIMONY_MAX_STEPS",
            min=0,
            help="Stop the simulation after this many transitions if the machine has not halted by then.",
        ),
    ] = MAX_STEPS,
    quiet: Annotated[bool, Option("--quiet", "-q", help="Only print the summary, not the configurations.")] = False,
    truncate: Annotated[
        int,
        Option("--truncate", "-t", min=0, help="Only print the last configurations of the run, 0 prints all of them."),
    ] = TRUNCATE,
):
    """Simulates a bundled program and prints every configuration it passes through."""
    try:
        machine = programs.get(name)
    except KeyError as e:
        console.print(f"[error]Unknown program '{name}'. Available programs: {', '.join(programs.PROGRAMS)}.")
        raise Exit(1) from e

    configs = deque[Configuration](maxlen=truncate or None)
    steps = 0
    with console.status(f"[info]Simulating '{name}'."):
        for steps, machine in enumerate(machine.trace(max_steps)):
            if not quiet:
                configs.append(machine.configuration())
    if configs:
        console.print(format_configs(list(configs), steps + 1 - len(configs)), highlight=False, end="")

    if not machine.is_halted():
        console.print(f"[warning]The machine did not halt within {max_steps} steps.")
        raise Exit(1)
    console.print(
        f"[success]Halted in state {machine.state} after {steps} steps with {count_strokes(machine)} non-blank cells."
    )


if __name__ == "__main__":
    app()

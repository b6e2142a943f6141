from dataclasses import dataclass
import sys
from typing import TextIO

from .debug import dump_table
from .shared import printf, printf_err
from .table import NotFound, Table, TableError, new_table


@dataclass(frozen=True)
class CommandOk:
    pass


@dataclass(frozen=True)
class CommandError:
    message: str


CommandResult = CommandOk | CommandError


def execute(table: Table, line: str) -> CommandResult:
    words = line.strip().split(maxsplit=2)
    if not words or words[0].startswith("#"):
        return CommandOk()

    match words:
        case ["set", key, value]:
            table.set(key, value)
        case ["get", key]:
            value = table.get(key)
            if isinstance(value, NotFound):
                printf("(not found)\n")
            else:
                printf("{0:s}\n", str(value))
        case ["len"]:
            printf("{0:d}\n", table.length())
        case ["cap"]:
            printf("{0:d}\n", table.capacity)
        case ["items"]:
            for key, value in table.items():
                printf("{0:s} = {1:s}\n", key, str(value))
        case ["dump"]:
            dump_table(table, "table")
        case _:
            return CommandError(f"Unknown command '{line.strip()}'")

    return CommandOk()


def run(table: Table, lines: TextIO) -> bool:
    ok = True
    for lineno, line in enumerate(lines, start=1):
        try:
            result = execute(table, line)
        except TableError as e:
            result = CommandError(str(e))

        if isinstance(result, CommandError):
            printf_err("[line {0:d}] Error: {1:s}\n", lineno, result.message)
            ok = False
    return ok


def repl(table: Table):
    while True:
        try:
            line = input("> ")
        except EOFError:
            printf("\n")
            return

        try:
            result = execute(table, line)
        except TableError as e:
            result = CommandError(str(e))

        if isinstance(result, CommandError):
            printf_err("Error: {0:s}\n", result.message)


def run_file(table: Table, filepath: str):
    with open(filepath) as fp:
        ok = run(table, fp)

    if not ok:
        sys.exit(65)


def main():
    table = new_table()

    if len(sys.argv) == 1:
        repl(table)
    elif len(sys.argv) == 2:
        run_file(table, sys.argv[1])
    else:
        printf("Usage: pyhtable [path]\n")
        sys.exit(64)

"""Menu loop: read a choice, run the command, repeat."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

from dbconsole.builder import StatementBuilder
from dbconsole.database import Database
from dbconsole.errors import Abort, DatabaseError, TemplateError
from dbconsole.prompter import INVALID_INPUT, FieldPrompter, LineReader
from dbconsole.renderer import ResultRenderer
from dbconsole.types import Catalog, CommandKind, CommandSpec

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Drive the numbered menu over one open database.

    Args:
        catalog: Commands offered in the menu.
        database: Open handle statements are executed on.
        reader: Source of operator lines, shared with the field prompter.
        out: Operator-facing output stream.
        renderer: Result printer; defaults to tab-separated output on out.
        echo: Print each statement before executing it.
    """

    def __init__(
        self,
        catalog: Catalog,
        database: Database,
        reader: LineReader,
        out: TextIO | None = None,
        renderer: ResultRenderer | None = None,
        echo: bool = False,
    ) -> None:
        self.catalog = catalog
        self.database = database
        self.reader = reader
        self.out = out if out is not None else sys.stdout
        self.prompter = FieldPrompter(reader, self.out)
        self.builder = StatementBuilder()
        self.renderer = renderer if renderer is not None else ResultRenderer(self.out)
        self.echo = echo
        self.running = False

    def print_menu(self) -> None:
        """Print the numbered menu."""
        print("MAIN MENU", file=self.out)
        print("---------", file=self.out)
        for command_id, label in self.catalog.menu():
            print(f"{command_id}. {label}", file=self.out)

    def read_choice(self) -> int | None:
        """Read a menu number, re-prompting until the line is an integer.

        Returns None when input has ended.
        """
        while True:
            line = self.reader.read("Please make your choice: ")
            if line is None:
                return None
            try:
                return int(line.strip())
            except ValueError:
                print(INVALID_INPUT, file=self.out)

    def dispatch(self, choice: int) -> bool:
        """Run the command registered under choice.

        Returns False when choice is the EXIT entry, True otherwise. Command
        failures are reported on the output stream and never propagate.
        """
        if choice == self.catalog.exit_id:
            return False

        command = self.catalog.get(choice)
        if command is None:
            print("Unrecognized choice!", file=self.out)
            return True

        try:
            self.run_command(command)
        except Abort:
            print("Command cancelled.", file=self.out)
        except (TemplateError, DatabaseError) as e:
            logger.info("command %d failed: %s", command.id, e)
            print(f"Error: {e}", file=self.out)
        return True

    def run_command(self, command: CommandSpec) -> int:
        """Collect fields, build and execute one command.

        Returns the number of rows printed (queries) or affected (mutations).
        """
        values = self.prompter.acquire_all(command.fields)
        statement = self.builder.build_command(command, values)
        if self.echo:
            print(f">>> {statement.text}", file=self.out)

        if command.kind == CommandKind.QUERY:
            result = self.database.query(statement)
            count = self.renderer.render(result)
        else:
            count = self.database.mutate(statement)

        print(self._summary(command, values, count), file=self.out)
        return count

    def _summary(self, command: CommandSpec, values: dict[str, Any], count: int) -> str:
        shown = {k: "" if v is None else v for k, v in values.items()}
        shown["count"] = count
        try:
            return command.summary_pattern.format(**shown)
        except (KeyError, IndexError, AttributeError, ValueError):
            if command.kind == CommandKind.QUERY:
                return f"Total rows: {count}"
            return "Done."

    def run(self) -> int:
        """Loop until EXIT or end of input. Returns the process exit code."""
        self.running = True
        while self.running:
            self.print_menu()
            choice = self.read_choice()
            if choice is None or not self.dispatch(choice):
                self.running = False
        return 0

"""Operator input: line readers and typed field acquisition."""

from __future__ import annotations

import datetime
import re
import sys
from decimal import Decimal
from typing import Any, Protocol, TextIO

from dbconsole.errors import Abort, InputFormatError
from dbconsole.types import FieldDescriptor, FieldType

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_RE = re.compile(r"^-?[0-9]+$")
DECIMAL_RE = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")

INVALID_INPUT = "Your input is invalid!"


class LineReader(Protocol):
    """Source of operator lines."""

    def read(self, prompt: str) -> str | None:
        """Show prompt and return one line without its newline, or None at end of input."""
        ...


class ConsoleReader:
    """Read from the terminal through input(), with readline editing."""

    def read(self, prompt: str) -> str | None:
        try:
            return input(prompt)
        except EOFError:
            print()
            return None


class StreamReader:
    """Read lines from a text stream such as a script file.

    Args:
        stream: Stream to read from.
        out: Where prompts are written.
        echo: Also write each consumed line, so the transcript shows what
            was answered.
    """

    def __init__(self, stream: TextIO, out: TextIO | None = None, echo: bool = False) -> None:
        self.stream = stream
        self.out = out if out is not None else sys.stdout
        self.echo = echo

    def read(self, prompt: str) -> str | None:
        self.out.write(prompt)
        line = self.stream.readline()
        if not line:
            if self.echo:
                self.out.write("\n")
            self.out.flush()
            return None
        line = line.rstrip("\r\n")
        if self.echo:
            self.out.write(line + "\n")
        self.out.flush()
        return line


def parse_value(descriptor: FieldDescriptor, raw: str) -> Any:
    """Parse operator text into the runtime type of the descriptor.

    Returns None for an empty answer to an optional field.

    Raises:
        InputFormatError: If the text is not a valid value.
    """
    ftype = descriptor.type
    text = raw if ftype == FieldType.TEXT else raw.strip()

    if not descriptor.required and text == "":
        return None

    if ftype == FieldType.TEXT:
        return text

    if ftype == FieldType.INTEGER:
        if not INTEGER_RE.match(text):
            raise InputFormatError(f"{text!r} is not an integer")
        return int(text)

    if ftype == FieldType.DECIMAL:
        # no exponent form
        if not DECIMAL_RE.match(text):
            raise InputFormatError(f"{text!r} is not a plain decimal number")
        return Decimal(text)

    if ftype == FieldType.DATE:
        if not DATE_RE.match(text):
            raise InputFormatError(f"{text!r} is not a date in YYYY-MM-DD form")
        try:
            return datetime.date.fromisoformat(text)
        except ValueError as e:
            raise InputFormatError(str(e)) from None

    match = descriptor.match_choice(text)
    if match is None:
        raise InputFormatError(
            f"{text!r} is not one of: {', '.join(descriptor.choices)}"
        )
    return match


class FieldPrompter:
    """Ask for field values until each one parses."""

    def __init__(self, reader: LineReader, out: TextIO | None = None) -> None:
        self.reader = reader
        self.out = out if out is not None else sys.stdout

    def acquire(self, descriptor: FieldDescriptor) -> Any:
        """Prompt for one value, re-prompting on malformed input.

        Raises:
            Abort: If input ends before a valid value arrives.
        """
        while True:
            raw = self.reader.read(f"\t{descriptor.prompt}: ")
            if raw is None:
                raise Abort(f"Input ended while reading '{descriptor.name}'")
            try:
                return parse_value(descriptor, raw)
            except InputFormatError as e:
                print(f"{INVALID_INPUT} {e}", file=self.out)

    def acquire_all(self, fields: tuple[FieldDescriptor, ...]) -> dict[str, Any]:
        """Prompt for every field in order and return the bound values."""
        return {f.name: self.acquire(f) for f in fields}

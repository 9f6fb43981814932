"""Data model for the command console."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class FieldType(Enum):
    """Value types a command field can collect."""

    INTEGER = "integer"
    TEXT = "text"
    DECIMAL = "decimal"
    DATE = "date"
    ENUM = "enum"

    @property
    def is_numeric(self) -> bool:
        """Return whether values of this type are written as bare numerals."""
        return self in (FieldType.INTEGER, FieldType.DECIMAL)

    @property
    def is_quoted(self) -> bool:
        """Return whether values of this type are written as string literals."""
        return self in (FieldType.TEXT, FieldType.ENUM, FieldType.DATE)


# Mapping from catalog type keywords to FieldType values
FIELD_TYPE_NAMES: dict[str, FieldType] = {ft.value: ft for ft in FieldType}


class CommandKind(Enum):
    """Whether a command changes state or returns rows."""

    MUTATION = "mutation"
    QUERY = "query"


@dataclass(frozen=True)
class FieldDescriptor:
    """One operator-supplied value a command needs."""

    name: str
    type: FieldType
    prompt: str
    required: bool = True
    choices: tuple[str, ...] = ()

    def match_choice(self, text: str) -> str | None:
        """Return the canonical enum member matching text, ignoring case."""
        folded = text.casefold()
        for choice in self.choices:
            if choice.casefold() == folded:
                return choice
        return None


@dataclass(frozen=True)
class CommandSpec:
    """Declarative description of one menu action."""

    id: int
    label: str
    kind: CommandKind
    template: str
    fields: tuple[FieldDescriptor, ...] = ()
    summary: str | None = None

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Get a field descriptor by name, or None if not declared."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def summary_pattern(self) -> str:
        """Return the line printed after the command runs."""
        if self.summary is not None:
            return self.summary
        if self.kind == CommandKind.QUERY:
            return "Total rows: {count}"
        return "Done."


@dataclass(frozen=True)
class Statement:
    """SQL text with every literal already substituted."""

    text: str
    kind: CommandKind


@dataclass(frozen=True)
class TabularResult:
    """Column names and string-or-null cells returned by a query."""

    columns: tuple[str, ...]
    rows: tuple[tuple[str | None, ...], ...] = ()

    def __post_init__(self) -> None:
        width = len(self.columns)
        for i, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {i} has {len(row)} cells, expected {width}"
                )

    @classmethod
    def from_rows(cls, columns: list[str], rows: list[list[str | None]]) -> TabularResult:
        """Build a result from plain lists."""
        return cls(tuple(columns), tuple(tuple(row) for row in rows))

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class Catalog:
    """The menu: command specs keyed by id plus the EXIT entry."""

    exit_id: int
    exit_label: str = "< EXIT"
    commands: dict[int, CommandSpec] = field(default_factory=dict)

    def get(self, command_id: int) -> CommandSpec | None:
        """Get a command by menu id, or None if not registered."""
        return self.commands.get(command_id)

    @property
    def ids(self) -> list[int]:
        """Return every menu id, EXIT included, in ascending order."""
        return sorted([*self.commands, self.exit_id])

    def menu(self) -> list[tuple[int, str]]:
        """Return (id, label) pairs in menu order."""
        entries = []
        for command_id in self.ids:
            if command_id == self.exit_id:
                entries.append((command_id, self.exit_label))
            else:
                entries.append((command_id, self.commands[command_id].label))
        return entries

    def __iter__(self) -> Iterator[CommandSpec]:
        for command_id in sorted(self.commands):
            yield self.commands[command_id]

    def __len__(self) -> int:
        return len(self.commands)

"""Parser for the command catalog DSL."""

from __future__ import annotations

import string
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import ply.yacc as yacc

from dbconsole.errors import CatalogError
from dbconsole.parsing.catalog_lexer import CatalogLexer
from dbconsole.parsing.template_lexer import TemplateLexer
from dbconsole.types import (
    FIELD_TYPE_NAMES,
    Catalog,
    CommandKind,
    CommandSpec,
    FieldDescriptor,
    FieldType,
)


@dataclass
class TypeRef:
    """Field type as written, before validation."""

    name: str
    choices: list[str] | None = None


@dataclass
class FieldSpec:
    """Specification for a field before validation."""

    name: str
    type_ref: TypeRef
    optional: bool
    prompt: str


@dataclass
class CommandDef:
    """Specification for a command before validation."""

    id: int
    label: str
    kind: str
    fields: list[FieldSpec]
    template: str
    summary: str | None
    lineno: int


@dataclass
class ExitDef:
    """Specification for the EXIT entry."""

    id: int
    label: str
    lineno: int


class CatalogParser:
    """Parser for the command catalog DSL."""

    tokens = CatalogLexer.tokens

    def __init__(self) -> None:
        self.lexer = CatalogLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.template_lexer = TemplateLexer()
        self.template_lexer.build()

    def p_catalog(self, p: yacc.YaccProduction) -> None:
        """catalog : entry_list"""
        p[0] = p[1]

    def p_entry_list_single(self, p: yacc.YaccProduction) -> None:
        """entry_list : entry"""
        p[0] = [p[1]]

    def p_entry_list_multiple(self, p: yacc.YaccProduction) -> None:
        """entry_list : entry_list entry"""
        p[0] = p[1] + [p[2]]

    def p_entry(self, p: yacc.YaccProduction) -> None:
        """entry : command_def
                 | exit_def"""
        p[0] = p[1]

    def p_command_def(self, p: yacc.YaccProduction) -> None:
        """command_def : COMMAND NUMBER string kind LBRACE field_list RBRACE AS string summary_opt
                       | COMMAND NUMBER string kind LBRACE field_list COMMA RBRACE AS string summary_opt"""
        if len(p) == 11:
            template, summary = p[9], p[10]
        else:
            template, summary = p[10], p[11]
        p[0] = CommandDef(
            id=p[2], label=p[3], kind=p[4], fields=p[6],
            template=template, summary=summary, lineno=p.lineno(1),
        )

    def p_command_def_no_fields(self, p: yacc.YaccProduction) -> None:
        """command_def : COMMAND NUMBER string kind LBRACE RBRACE AS string summary_opt"""
        p[0] = CommandDef(
            id=p[2], label=p[3], kind=p[4], fields=[],
            template=p[8], summary=p[9], lineno=p.lineno(1),
        )

    def p_exit_def(self, p: yacc.YaccProduction) -> None:
        """exit_def : EXIT NUMBER string"""
        p[0] = ExitDef(id=p[2], label=p[3], lineno=p.lineno(1))

    def p_kind(self, p: yacc.YaccProduction) -> None:
        """kind : MUTATION
                | QUERY"""
        p[0] = p[1]

    def p_summary_opt(self, p: yacc.YaccProduction) -> None:
        """summary_opt : SUMMARY string"""
        p[0] = p[2]

    def p_summary_opt_empty(self, p: yacc.YaccProduction) -> None:
        """summary_opt : """
        p[0] = None

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field"""
        p[0] = p[1] + [p[3]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : name COLON type_ref string
                 | name COLON type_ref QUESTION string"""
        if len(p) == 5:
            p[0] = FieldSpec(name=p[1], type_ref=p[3], optional=False, prompt=p[4])
        else:
            p[0] = FieldSpec(name=p[1], type_ref=p[3], optional=True, prompt=p[5])

    def p_name(self, p: yacc.YaccProduction) -> None:
        """name : IDENTIFIER
                | keyword"""
        p[0] = p[1]

    def p_keyword(self, p: yacc.YaccProduction) -> None:
        """keyword : COMMAND
                   | EXIT
                   | MUTATION
                   | QUERY
                   | AS
                   | SUMMARY
                   | INTEGER_TYPE
                   | TEXT_TYPE
                   | DECIMAL_TYPE
                   | DATE_TYPE
                   | ENUM_TYPE"""
        p[0] = p[1]

    def p_type_ref_scalar(self, p: yacc.YaccProduction) -> None:
        """type_ref : INTEGER_TYPE
                    | TEXT_TYPE
                    | DECIMAL_TYPE
                    | DATE_TYPE"""
        p[0] = TypeRef(name=p[1])

    def p_type_ref_enum(self, p: yacc.YaccProduction) -> None:
        """type_ref : ENUM_TYPE LPAREN member_list RPAREN
                    | ENUM_TYPE LPAREN member_list COMMA RPAREN"""
        p[0] = TypeRef(name=p[1], choices=p[3])

    def p_member_list_single(self, p: yacc.YaccProduction) -> None:
        """member_list : member"""
        p[0] = [p[1]]

    def p_member_list_multiple(self, p: yacc.YaccProduction) -> None:
        """member_list : member_list COMMA member"""
        p[0] = p[1] + [p[3]]

    def p_member(self, p: yacc.YaccProduction) -> None:
        """member : name
                  | STRING
                  | NUMBER"""
        p[0] = str(p[1])

    def p_string_single(self, p: yacc.YaccProduction) -> None:
        """string : STRING"""
        p[0] = p[1]

    def p_string_concat(self, p: yacc.YaccProduction) -> None:
        """string : string STRING"""
        p[0] = p[1] + p[2]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="catalog", **kwargs)

    def parse(self, data: str) -> Catalog:
        """Parse catalog text and return a validated Catalog.

        Raises:
            SyntaxError: If the text does not follow the catalog grammar.
            CatalogError: If the entries are inconsistent.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.lexer.lineno = 1
        entries = self.parser.parse(data, lexer=self.lexer.lexer)
        if not entries:
            raise CatalogError("Catalog defines no commands")
        return self._resolve(entries)

    def _resolve(self, entries: list[CommandDef | ExitDef]) -> Catalog:
        """Validate parsed entries and assemble the catalog."""
        exits = [e for e in entries if isinstance(e, ExitDef)]
        if len(exits) != 1:
            raise CatalogError(f"Catalog must have exactly one exit entry, found {len(exits)}")
        exit_def = exits[0]

        catalog = Catalog(exit_id=exit_def.id, exit_label=exit_def.label)
        seen: set[int] = set()
        for entry in entries:
            if entry.id in seen:
                raise CatalogError(f"Duplicate menu id {entry.id} (line {entry.lineno})")
            seen.add(entry.id)
            if isinstance(entry, CommandDef):
                catalog.commands[entry.id] = self._resolve_command(entry)

        expected = set(range(1, len(seen) + 1))
        if seen != expected:
            missing = sorted(expected - seen)
            raise CatalogError(
                f"Menu ids must run from 1 to {len(seen)}; missing {missing}"
            )
        return catalog

    def _resolve_command(self, cdef: CommandDef) -> CommandSpec:
        """Turn a command definition into a CommandSpec."""
        where = f"command {cdef.id} (line {cdef.lineno})"
        fields: list[FieldDescriptor] = []
        names: set[str] = set()
        for fspec in cdef.fields:
            if fspec.name in names:
                raise CatalogError(f"Duplicate field '{fspec.name}' in {where}")
            names.add(fspec.name)

            ftype = FIELD_TYPE_NAMES[fspec.type_ref.name]
            choices: tuple[str, ...] = ()
            if ftype == FieldType.ENUM:
                choices = tuple(fspec.type_ref.choices or ())
                folded = {c.casefold() for c in choices}
                if len(folded) != len(choices):
                    raise CatalogError(f"Enum field '{fspec.name}' repeats a member in {where}")
            fields.append(FieldDescriptor(
                name=fspec.name,
                type=ftype,
                prompt=fspec.prompt,
                required=not fspec.optional,
                choices=choices,
            ))

        try:
            placeholders = self.template_lexer.placeholders(cdef.template)
        except ValueError as e:
            raise CatalogError(f"Bad template in {where}: {e}") from e
        undeclared = [name for name in placeholders if name not in names]
        if undeclared:
            raise CatalogError(f"Undeclared placeholders {undeclared} in {where}")

        if cdef.summary is not None:
            self._check_summary(cdef.summary, names, where)

        return CommandSpec(
            id=cdef.id,
            label=cdef.label,
            kind=CommandKind(cdef.kind),
            template=cdef.template,
            fields=tuple(fields),
            summary=cdef.summary,
        )

    def _check_summary(self, summary: str, names: set[str], where: str) -> None:
        """Check that a summary pattern only names fields and count."""
        try:
            parsed = list(string.Formatter().parse(summary))
        except ValueError as e:
            raise CatalogError(f"Bad summary in {where}: {e}") from e
        for _, field_name, _, _ in parsed:
            if field_name is None:
                continue
            root = field_name.split(".")[0].split("[")[0]
            if root != "count" and root not in names:
                raise CatalogError(f"Summary names unknown field '{field_name}' in {where}")


def parse_catalog(text: str) -> Catalog:
    """Parse catalog text."""
    return CatalogParser().parse(text)


def load_catalog(path: Path | str) -> Catalog:
    """Read and parse a catalog file."""
    return parse_catalog(Path(path).read_text(encoding="utf-8"))

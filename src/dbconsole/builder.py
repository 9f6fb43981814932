"""Render statement templates into executable SQL."""

from __future__ import annotations

import datetime
import logging
import re
from decimal import Decimal
from typing import Any, Mapping, Sequence

from dbconsole.errors import TemplateError
from dbconsole.parsing.template_lexer import TemplateLexer
from dbconsole.types import CommandKind, CommandSpec, FieldDescriptor, FieldType, Statement

logger = logging.getLogger(__name__)

NUMERAL_RE = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")


def quote_text(value: str) -> str:
    """Return value as a SQL string literal with embedded quotes doubled."""
    return "'" + value.replace("'", "''") + "'"


def format_literal(descriptor: FieldDescriptor, value: Any) -> str:
    """Format one bound value as a SQL literal for its field type.

    Raises:
        TemplateError: If the value's runtime type does not match the field
            type, a required field is None, or a numeral does not have plain
            decimal form.
    """
    if value is None:
        if descriptor.required:
            raise TemplateError(f"Required field '{descriptor.name}' is bound to None")
        return "NULL"

    ftype = descriptor.type
    if ftype.is_numeric:
        if isinstance(value, bool):
            raise TemplateError(f"Field '{descriptor.name}' expects {ftype.value}, got bool")
        if ftype == FieldType.INTEGER and not isinstance(value, int):
            raise TemplateError(
                f"Field '{descriptor.name}' expects integer, got {type(value).__name__}"
            )
        if ftype == FieldType.DECIMAL and not isinstance(value, (int, Decimal)):
            raise TemplateError(
                f"Field '{descriptor.name}' expects decimal, got {type(value).__name__}"
            )
        text = format(value, "f") if isinstance(value, Decimal) else str(value)
        if not NUMERAL_RE.match(text):
            raise TemplateError(f"Field '{descriptor.name}' has malformed numeral {text!r}")
        return text

    if ftype == FieldType.DATE:
        # datetime is a date subclass but carries a time part
        if not isinstance(value, datetime.date) or isinstance(value, datetime.datetime):
            raise TemplateError(
                f"Field '{descriptor.name}' expects date, got {type(value).__name__}"
            )
        return quote_text(value.isoformat())

    if not isinstance(value, str):
        raise TemplateError(
            f"Field '{descriptor.name}' expects {ftype.value}, got {type(value).__name__}"
        )
    if ftype == FieldType.ENUM and descriptor.choices and value not in descriptor.choices:
        raise TemplateError(f"Field '{descriptor.name}' has no member {value!r}")
    return quote_text(value)


class StatementBuilder:
    """Fill ``:name`` placeholders with escaped literals."""

    def __init__(self) -> None:
        self.lexer = TemplateLexer()
        self.lexer.build()

    def placeholders(self, template: str) -> list[str]:
        """Return placeholder names in order of first appearance."""
        return self.lexer.placeholders(template)

    def build(
        self,
        template: str,
        fields: Sequence[FieldDescriptor],
        values: Mapping[str, Any],
        kind: CommandKind,
    ) -> Statement:
        """Substitute every placeholder in template.

        Args:
            template: SQL text with ``:name`` placeholders.
            fields: Descriptors giving each placeholder its type.
            values: Bound values keyed by field name.
            kind: Whether the statement mutates or queries.

        Returns:
            The finished statement.

        Raises:
            TemplateError: If a placeholder is undeclared, a required one is
                unbound, or a value does not fit its descriptor. Unbound
                optional fields become NULL.
        """
        by_name = {f.name: f for f in fields}
        parts: list[str] = []
        for tok in self.lexer.tokenize(template):
            if tok.type != "PLACEHOLDER":
                parts.append(tok.value)
                continue
            name = tok.value[1:]
            descriptor = by_name.get(name)
            if descriptor is None:
                raise TemplateError(f"Placeholder ':{name}' has no field descriptor")
            if name not in values and descriptor.required:
                raise TemplateError(f"Placeholder ':{name}' has no bound value")
            parts.append(format_literal(descriptor, values.get(name)))

        text = "".join(parts)
        logger.debug("built %s statement: %s", kind.value, text)
        return Statement(text=text, kind=kind)

    def build_command(self, command: CommandSpec, values: Mapping[str, Any]) -> Statement:
        """Build the statement for a catalog command."""
        return self.build(command.template, command.fields, values, command.kind)

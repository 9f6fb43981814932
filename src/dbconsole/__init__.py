"""dbconsole - A menu-driven console that runs parameterized SQL."""

from dbconsole.builder import StatementBuilder
from dbconsole.database import Database, PostgresDatabase, SQLiteDatabase
from dbconsole.dispatcher import CommandDispatcher
from dbconsole.errors import Abort, CatalogError, DatabaseError, InputFormatError, TemplateError
from dbconsole.parsing import CatalogParser, load_catalog, parse_catalog
from dbconsole.prompter import ConsoleReader, FieldPrompter, StreamReader
from dbconsole.renderer import ResultRenderer
from dbconsole.types import (
    Catalog,
    CommandKind,
    CommandSpec,
    FieldDescriptor,
    FieldType,
    Statement,
    TabularResult,
)

__all__ = [
    # Core
    "CommandDispatcher",
    "FieldPrompter",
    "ResultRenderer",
    "StatementBuilder",
    # Input
    "ConsoleReader",
    "StreamReader",
    # Catalog
    "CatalogParser",
    "load_catalog",
    "parse_catalog",
    # Database
    "Database",
    "PostgresDatabase",
    "SQLiteDatabase",
    # Data model
    "Catalog",
    "CommandKind",
    "CommandSpec",
    "FieldDescriptor",
    "FieldType",
    "Statement",
    "TabularResult",
    # Errors
    "Abort",
    "CatalogError",
    "DatabaseError",
    "InputFormatError",
    "TemplateError",
]

__version__ = "0.1.0"

"""Parsing module for statement templates and the command catalog DSL."""

from dbconsole.parsing.catalog_parser import CatalogParser, load_catalog, parse_catalog
from dbconsole.parsing.template_lexer import TemplateLexer

__all__ = [
    "CatalogParser",
    "TemplateLexer",
    "load_catalog",
    "parse_catalog",
]

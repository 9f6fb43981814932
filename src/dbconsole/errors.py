"""Exceptions raised by the console core."""


class InputFormatError(ValueError):
    """Operator text that does not parse as the requested field type."""


class TemplateError(ValueError):
    """A statement template cannot be filled from the bound values."""


class CatalogError(ValueError):
    """A command catalog is structurally invalid."""


class DatabaseError(RuntimeError):
    """A statement failed inside the database driver."""


class Abort(Exception):
    """Input ended while a command was collecting its fields."""

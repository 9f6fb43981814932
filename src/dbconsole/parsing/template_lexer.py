"""Lexer for SQL statement templates with named placeholders."""

import ply.lex as lex

from dbconsole.errors import TemplateError


class TemplateLexer:
    """Split SQL text into placeholders and the text around them.

    Placeholders are written ``:name``. String literals (including
    PostgreSQL ``E'...'`` escape strings and ``$tag$...$tag$`` dollar-quoted
    bodies), quoted identifiers, comments and ``::`` casts are passed through
    untouched, so a colon inside any of them never starts a placeholder.
    """

    tokens = [
        "COMMENT",
        "BLOCK_COMMENT",
        "ESCAPE_STRING",
        "DOLLAR_STRING",
        "STRING",
        "QUOTED_IDENT",
        "CAST",
        "PLACEHOLDER",
        "TEXT",
    ]

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    # Rules are tried in definition order.

    def t_COMMENT(self, t: lex.LexToken) -> lex.LexToken:
        r"--[^\n]*"
        return t

    def t_BLOCK_COMMENT(self, t: lex.LexToken) -> lex.LexToken:
        r"/\*(.|\n)*?\*/"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_ESCAPE_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"(?<![A-Za-z0-9_])[Ee]'(?:\\(?:.|\n)|''|[^'\\])*'"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_DOLLAR_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"(?<![A-Za-z0-9_$])\$(?P<dollar_tag>(?:[A-Za-z_][A-Za-z0-9_]*)?)\$(?:.|\n)*?\$(?P=dollar_tag)\$"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'([^']|'')*'"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_QUOTED_IDENT(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"]|"")*"'
        return t

    def t_CAST(self, t: lex.LexToken) -> lex.LexToken:
        r"::"
        return t

    def t_PLACEHOLDER(self, t: lex.LexToken) -> lex.LexToken:
        r":[A-Za-z_][A-Za-z0-9_]*"
        return t

    def t_TEXT(self, t: lex.LexToken) -> lex.LexToken:
        r"(?:[^'\":/\-$Ee]|[Ee](?!')|\$(?![A-Za-z_$]))+|[:/\-$Ee]"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise TemplateError(
            f"Unterminated quoted text starting with {t.value[0]} at line {t.lineno}"
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the template text to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the template and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens

    def placeholders(self, data: str) -> list[str]:
        """Return placeholder names in order of first appearance."""
        names: list[str] = []
        for tok in self.tokenize(data):
            if tok.type == "PLACEHOLDER" and tok.value[1:] not in names:
                names.append(tok.value[1:])
        return names

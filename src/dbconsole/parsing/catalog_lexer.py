"""Lexer for the command catalog DSL."""

import re

import ply.lex as lex

_ESCAPES = {"n": "\n", "t": "\t"}


def unescape(body: str) -> str:
    """Resolve backslash escapes inside a catalog string body."""
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


class CatalogLexer:
    """Lexer for tokenizing command catalog definitions."""

    # Reserved keywords
    reserved = {
        "command": "COMMAND",
        "exit": "EXIT",
        "mutation": "MUTATION",
        "query": "QUERY",
        "as": "AS",
        "summary": "SUMMARY",
        "integer": "INTEGER_TYPE",
        "text": "TEXT_TYPE",
        "decimal": "DECIMAL_TYPE",
        "date": "DATE_TYPE",
        "enum": "ENUM_TYPE",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "NUMBER",
        "STRING",
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "COLON",
        "COMMA",
        "QUESTION",
    ] + list(reserved.values())

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COLON = r":"
    t_COMMA = r","
    t_QUESTION = r"\?"

    # Ignored characters (spaces and tabs)
    t_ignore = " \t\r"

    # Comments
    t_ignore_COMMENT = r"\#[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\\n]|\\.)*"'
        t.value = unescape(t.value[1:-1])
        return t

    def t_NUMBER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+"
        t.value = int(t.value)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at line {t.lineno}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens

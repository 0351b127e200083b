"""
Token Definitions
=================

Token kinds, the Token value type, and the word tables that separate
keywords and type names from ordinary identifiers.

Token Kinds
-----------
| Kind    | Examples                         |
|---------|----------------------------------|
| KEYWORD | if, while, return, struct        |
| TYPE    | int, char, float, unsigned       |
| IDENT   | main, total, calc_result         |
| STRING  | "Sum: %d\\n"                      |
| CHAR    | 'a', '\\n', 'xy'                   |
| NUMBER  | 42, 0x7F, 017, 0b101, 5.5e3f     |
| OP      | + ++ += == -> . ? :              |
| PUNCT   | ( ) { } [ ] ; ,                  |
| PREPROC | #include <stdio.h>, #define      |
| ERROR   | any character no rule accepts    |
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from cscan.errors import SourceLocation


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Classification assigned to every lexeme."""

    KEYWORD = auto()
    TYPE = auto()
    IDENT = auto()
    STRING = auto()
    CHAR = auto()
    NUMBER = auto()
    OP = auto()
    PUNCT = auto()
    PREPROC = auto()
    ERROR = auto()


# Kinds that are logged in the constant table
LITERAL_KINDS = frozenset({TokenKind.NUMBER, TokenKind.STRING, TokenKind.CHAR})


# =============================================================================
# Word Tables
# =============================================================================

# Type specifiers. These open a declaration context.
TYPE_NAMES = (
    "void",
    "char",
    "short",
    "int",
    "long",
    "float",
    "double",
    "signed",
    "unsigned",
    "_Bool",
    "_Complex",
)

# Every other reserved word.
KEYWORDS = (
    "auto",
    "break",
    "case",
    "const",
    "continue",
    "default",
    "do",
    "else",
    "enum",
    "extern",
    "for",
    "goto",
    "if",
    "inline",
    "register",
    "restrict",
    "return",
    "sizeof",
    "static",
    "struct",
    "switch",
    "typedef",
    "union",
    "volatile",
    "while",
)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single classified lexeme.

    Attributes:
        kind: The TokenKind classification
        text: Raw source text of the lexeme
        line: Line number where the lexeme starts (1-indexed)
        column: Column number where the lexeme starts (1-indexed)
        literal_tag: Constant-table type tag for literals
            ("int", "float", "hex", "oct", "bin", "string", "char"),
            None for every other kind
        filename: Name of the source the token came from
        offset: Source offset of the first character
    """
    kind: TokenKind
    text: str
    line: int
    column: int = 1
    literal_tag: Optional[str] = None
    filename: str = "<stdin>"
    offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for diagnostics."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_literal(self) -> bool:
        return self.kind in LITERAL_KINDS

    def is_punct(self, text: str) -> bool:
        """Return True if this is the punctuator ``text``."""
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_op(self, text: str) -> bool:
        """Return True if this is the operator ``text``."""
        return self.kind is TokenKind.OP and self.text == text

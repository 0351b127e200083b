"""
Reporters
=========

Output side of a scan: the per-token stream, the diagnostic lines, and
the two tables printed once the input is exhausted.

Output Formats
--------------
Token stream (standard output, one line per token as it is classified):

    [line 4] TYPE         : int
    [line 4] IDENT        : a

Diagnostics (error stream, scanning continues):

    [line 9] ERROR: Invalid token '$'
    [line 12] ERROR: Unterminated string literal

Tables (standard output, after the last token), unset fields shown as '-':

    SYMBOL TABLE
    Name  Type  Dimensions  Frequency  Return Type  Parameters Lists in Function call

    CONSTANT TABLE
    Variable Name  Line No.  Value  Type
"""

from typing import IO, List, Optional, Sequence, Tuple

import click

from cscan.errors import LexicalError
from cscan.scanner.tokens import Token, TokenKind
from cscan.tables.constants import ConstantTable
from cscan.tables.symbols import DEFAULT_PARAM_DELIMITER, SymbolTable


# (header, width); the last column is left unpadded
SYMBOL_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("Name", 20),
    ("Type", 16),
    ("Dimensions", 12),
    ("Frequency", 10),
    ("Return Type", 12),
    ("Parameters Lists in Function call", 0),
)

CONSTANT_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("Variable Name", 20),
    ("Line No.", 10),
    ("Value", 28),
    ("Type", 0),
)

UNSET = "-"


def format_token(token: Token) -> str:
    """Render one token line."""
    return f"[line {token.line}] {token.kind.name:<12} : {token.text}"


def format_invalid_token(token: Token) -> str:
    """Render the diagnostic for an ERROR token."""
    return f"[line {token.line}] ERROR: Invalid token '{token.text}'"


def _row(values: Sequence[str], columns: Sequence[Tuple[str, int]]) -> str:
    cells = [value.ljust(width) for value, (_, width) in zip(values, columns)]
    return " ".join(cells).rstrip()


def _table(title: str, columns, rows: List[Sequence[str]]) -> List[str]:
    header = _row([name for name, _ in columns], columns)
    rule = "-" * max(len(header), len(title))
    lines = [title, rule, header, rule]
    lines.extend(_row(row, columns) for row in rows)
    lines.append(rule)
    return lines


def format_symbol_table(
    table: SymbolTable,
    delimiter: str = DEFAULT_PARAM_DELIMITER,
) -> List[str]:
    """Render the symbol table as lines of fixed-width columns."""
    rows = [
        (
            symbol.name,
            symbol.type or UNSET,
            symbol.dimensions or UNSET,
            str(symbol.frequency),
            symbol.return_type or UNSET,
            symbol.parameters(delimiter) or UNSET,
        )
        for symbol in table
    ]
    return _table("SYMBOL TABLE", SYMBOL_COLUMNS, rows)


def format_constant_table(table: ConstantTable) -> List[str]:
    """Render the constant table as lines of fixed-width columns."""
    rows = [
        (constant.variable or UNSET, str(constant.line), constant.value, constant.type)
        for constant in table
    ]
    return _table("CONSTANT TABLE", CONSTANT_COLUMNS, rows)


class Reporter:
    """
    Writes scan output as it happens.

    Attributes:
        out: Stream for tokens and tables (None means standard output)
        err: Stream for diagnostics (None means standard error)
        echo_tokens: Write the token stream; diagnostics are always written
        param_delimiter: Separator between call argument lists
    """

    def __init__(
        self,
        out: Optional[IO[str]] = None,
        err: Optional[IO[str]] = None,
        echo_tokens: bool = True,
        param_delimiter: str = DEFAULT_PARAM_DELIMITER,
    ):
        self.out = out
        self.err = err
        self.echo_tokens = echo_tokens
        self.param_delimiter = param_delimiter

    def emit_token(self, token: Token) -> None:
        """Write one token line, or its diagnostic for ERROR tokens."""
        if token.kind is TokenKind.ERROR:
            click.echo(format_invalid_token(token), file=self.err, err=True)
        elif self.echo_tokens:
            click.echo(format_token(token), file=self.out)

    def emit_error(self, error: LexicalError) -> None:
        click.echo(error.diagnostic(), file=self.err, err=True)

    def dump_symbol_table(self, table: SymbolTable) -> None:
        click.echo(file=self.out)
        for line in format_symbol_table(table, self.param_delimiter):
            click.echo(line, file=self.out)

    def dump_constant_table(self, table: ConstantTable) -> None:
        click.echo(file=self.out)
        for line in format_constant_table(table):
            click.echo(line, file=self.out)

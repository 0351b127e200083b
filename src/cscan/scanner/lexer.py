"""
C Scanner
=========

The driving loop of the lexical engine. It asks the mode controller which
rule table applies, lets the classifier pick the longest lexeme, turns
the winner into a token or a mode change, and feeds every token to the
context tracker so the symbol and constant tables fill in as the scan
goes.

Example Usage
-------------
>>> from cscan.scanner.lexer import CScanner
>>> scanner = CScanner('int a = 10;', "test.c")
>>> for token in scanner.tokenize():
...     print(token)
Token(TYPE, 'int', 1:1)
Token(IDENT, 'a', 1:5)
Token(OP, '=', 1:7)
Token(NUMBER, '10', 1:9)
Token(PUNCT, ';', 1:11)
>>> scanner.symbols["a"].type
'int'
>>> scanner.constants[0]
Constant(variable='a', line=1, value='10', type='int')

Error Recovery
--------------
Nothing in the source stops a scan. A character no rule accepts becomes
a one-character ERROR token and scanning continues with the next
character. A string or character literal cut off by a newline is
reported once and scanning resumes in code mode at that newline; a block
comment still open at end of input is reported the same way.
"""

import logging
from typing import Callable, Iterator, Optional

from cscan.errors import (
    DiagnosticCollector,
    InvalidTokenError,
    LexicalError,
    SourceLocation,
    UnterminatedLiteralError,
)
from cscan.scanner.context import ContextTracker
from cscan.scanner.modes import LexMode
from cscan.scanner.rules import (
    DEFINE_RE,
    DIRECTIVE_NAME_RE,
    TRAILING_COMMENT_RE,
    Action,
    Match,
    classify,
    match_literal,
)
from cscan.scanner.state import Position, ScannerState
from cscan.scanner.tokens import Token, TokenKind
from cscan.tables.constants import ConstantTable
from cscan.tables.symbols import SymbolTable


logger = logging.getLogger(__name__)

# Modes in which a '#' at the start of a line opens a directive.
_CODE_MODES = (LexMode.CODE, LexMode.ARGUMENT_CAPTURE)

_LITERAL_NAMES = {
    LexMode.STRING_LITERAL: "string literal",
    LexMode.CHAR_LITERAL: "character literal",
}


class CScanner:
    """
    Tokenizes C source text and builds the symbol and constant tables.

    Usage:
        scanner = CScanner(source_text, filename)
        tokens = list(scanner.tokenize())
        scanner.symbols, scanner.constants, scanner.diagnostics

    Attributes:
        state: The ScannerState owned by this scan
    """

    def __init__(
        self,
        source: str,
        filename: str = "<stdin>",
        error_sink: Optional[Callable[[LexicalError], None]] = None,
    ):
        """
        Args:
            source: The C source code to scan
            filename: Name of the source (for token locations)
            error_sink: Called at once with every unterminated-literal
                error; invalid characters arrive as ERROR tokens instead
        """
        self.state = ScannerState(source, filename)
        self.tracker = ContextTracker()
        self._error_sink = error_sink

    @property
    def symbols(self) -> SymbolTable:
        return self.state.symbols

    @property
    def constants(self) -> ConstantTable:
        return self.state.constants

    @property
    def diagnostics(self) -> DiagnosticCollector:
        return self.state.diagnostics

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens in source order.

        The tables are complete once the generator is exhausted.
        """
        state = self.state
        while not state.at_end():
            if (
                state.at_line_start
                and state.modes.mode in _CODE_MODES
                and state.source[state.pos] == "#"
            ):
                yield from self._scan_directive()
                continue

            match = classify(state.modes.mode, state.source, state.pos)
            token = self._apply(match)
            if token is not None:
                yield token

        self._finish()

    # =========================================================================
    # Rule Actions
    # =========================================================================

    def _apply(self, match: Match) -> Optional[Token]:
        """Carry out the action of the winning rule."""
        state = self.state
        rule = match.rule
        start = Position(state.pos, state.line, state.column)
        mode = state.modes.mode
        state.advance(match.text)

        if rule.action is Action.SKIP:
            return None

        if rule.action is Action.NEWLINE:
            state.at_line_start = True
            return None

        if rule.action is Action.BEGIN:
            state.modes.enter(rule.target)
            if rule.target is LexMode.BLOCK_COMMENT:
                state.comment_start = SourceLocation(state.filename, start.line, start.column)
            else:
                state.literal = start
            return None

        if rule.action is Action.APPEND:
            return None

        if rule.action is Action.END:
            state.modes.leave()
            if mode is LexMode.BLOCK_COMMENT:
                state.comment_start = None
                return None
            opened = state.literal
            state.literal = None
            return self._make_token(
                rule.kind,
                state.source[opened.offset:state.pos],
                opened,
                rule.literal_tag,
            )

        if rule.action is Action.UNTERMINATED:
            opened = state.literal
            state.literal = None
            state.modes.leave()
            state.at_line_start = True
            self._report(
                UnterminatedLiteralError(
                    _LITERAL_NAMES[mode],
                    SourceLocation(state.filename, opened.line, opened.column),
                )
            )
            return None

        return self._make_token(rule.kind, match.text, start, rule.literal_tag)

    def _make_token(
        self,
        kind: TokenKind,
        text: str,
        start: Position,
        literal_tag: Optional[str] = None,
        observe: bool = True,
    ) -> Token:
        """Build a token, record invalid ones, and pass it to the tracker."""
        state = self.state
        token = Token(
            kind=kind,
            text=text,
            line=start.line,
            column=start.column,
            literal_tag=literal_tag,
            filename=state.filename,
            offset=start.offset,
        )
        state.at_line_start = False

        if kind is TokenKind.ERROR:
            state.diagnostics.add(InvalidTokenError(text, token.location))
        if observe:
            self.tracker.observe(state, token)
        return token

    def _report(self, error: LexicalError) -> None:
        self.state.diagnostics.add(error)
        logger.debug("%s", error.diagnostic())
        if self._error_sink is not None:
            self._error_sink(error)

    # =========================================================================
    # Preprocessor Lines
    # =========================================================================

    def _scan_directive(self) -> Iterator[Token]:
        """
        Consume one directive line, continuation lines included.

        '#define NAME VALUE' is split into the directive word, the macro
        name and the value; a value that is a single literal is logged as
        a macro constant. Any other directive is one PREPROC token.
        """
        state = self.state
        state.modes.enter(LexMode.PREPROCESSOR_LINE)
        begin = Position(state.pos, state.line, state.column)
        end = self._directive_end(state.pos)
        text = state.source[begin.offset:end].rstrip()
        state.advance(state.source[begin.offset:end])

        name = DIRECTIVE_NAME_RE.match(text).group(1)
        define = DEFINE_RE.match(text) if name == "define" else None

        if define is None:
            yield self._make_token(TokenKind.PREPROC, text, begin)
        else:
            macro = define.group(1)
            yield self._make_token(
                TokenKind.PREPROC, text[:define.start(1)].rstrip(), begin
            )
            yield self._make_token(
                TokenKind.PREPROC, macro, self._position_in(text, begin, define.start(1))
            )
            body = define.group(2).rstrip()
            if body:
                yield from self._scan_macro_body(
                    macro, body, self._position_in(text, begin, define.start(2))
                )

        state.modes.leave()

    def _scan_macro_body(self, macro: str, body: str, start: Position) -> Iterator[Token]:
        literal = match_literal(body)
        if literal is not None:
            kind, tag, value = literal
            if TRAILING_COMMENT_RE.fullmatch(body[len(value):]):
                token = self._make_token(kind, value, start, tag, observe=False)
                self.tracker.observe_macro(self.state, macro.split("(")[0], token)
                yield token
                return
        yield self._make_token(TokenKind.PREPROC, body, start)

    def _directive_end(self, pos: int) -> int:
        """Offset of the newline ending the directive at ``pos``."""
        source = self.state.source
        while True:
            newline = source.find("\n", pos)
            if newline == -1:
                return len(source)
            if source[pos:newline].rstrip("\r").endswith("\\"):
                pos = newline + 1
                continue
            return newline

    @staticmethod
    def _position_in(text: str, begin: Position, index: int) -> Position:
        """Source position of ``text[index]`` for text starting at ``begin``."""
        newlines = text.count("\n", 0, index)
        if newlines == 0:
            return Position(begin.offset + index, begin.line, begin.column + index)
        column = index - text.rfind("\n", 0, index)
        return Position(begin.offset + index, begin.line + newlines, column)

    # =========================================================================
    # End of Input
    # =========================================================================

    def _finish(self) -> None:
        """Report anything left open when the input ran out."""
        state = self.state
        mode = state.modes.mode

        if mode is LexMode.BLOCK_COMMENT:
            self._report(UnterminatedLiteralError("comment", state.comment_start))
            state.comment_start = None
            state.modes.leave()
        elif mode in _LITERAL_NAMES:
            opened = state.literal
            self._report(
                UnterminatedLiteralError(
                    _LITERAL_NAMES[mode],
                    SourceLocation(state.filename, opened.line, opened.column),
                )
            )
            state.literal = None
            state.modes.leave()

        for frame in state.modes.drain_captures():
            logger.debug("call to '%s' on line %d never closed", frame.name, frame.line)
            state.symbols.append_parameters(frame.name, frame.argument_text(state.source))

"""
Context Tracker
===============

Approximates parser context from the bare token sequence and turns it
into symbol-table and constant-table updates. There is no grammar here:
a handful of rules keyed on the current token and the one before it is
enough to tell declarations, assignments, array subscripts, function
definitions and calls apart in ordinary C code.

Context States
--------------
    Idle                         between statements
    Declaring(type_text)         after one or more type keywords
    Assigning(target, resume)    after `name =`, until a literal arrives

`resume` is the declaration an assignment interrupted, so that in
`int a = 1, b = 2;` both a and b are typed `int`.

Rules
-----
- TYPE: start a declaration; consecutive type words concatenate
  (`unsigned long`). Inside an assignment a type word is a cast and is
  ignored.
- `;` `{` `}`: back to Idle. A `{` right after `=` opens an initializer
  list instead, and every literal up to the matching `}` belongs to the
  assigned name.
- IDENT: touch the symbol; while declaring, give it the declared type if
  it has none.
- `=` right after an identifier: start assigning to it.
- literal: log a constant for the assignment target (and finish the
  assignment), or for no variable.
- `,` at the depth the assignment started: finish the assignment.
- `name[N]`: append `[N]` to the symbol's dimensions (`[]` only in a
  declaration).
- `name(`: mark a function. In a declaration this is a definition and
  records the return type; otherwise it opens an argument capture whose
  text is appended to the symbol when the matching `)` arrives.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, List, Optional, Union

from cscan.scanner.rules import INTEGER_TAGS
from cscan.scanner.tokens import Token, TokenKind

if TYPE_CHECKING:
    from cscan.scanner.state import ScannerState


logger = logging.getLogger(__name__)


# =============================================================================
# Context States
# =============================================================================

@dataclass(frozen=True)
class Idle:
    """No declaration or assignment in progress."""


@dataclass(frozen=True)
class Declaring:
    """Inside a declaration introduced by ``type_text``."""
    type_text: str


@dataclass(frozen=True)
class Assigning:
    """
    Waiting for the value assigned to ``target``.

    Attributes:
        target: Name on the left of '='
        resume: Declaration to return to once the assignment ends
        paren_depth: Parenthesis depth where the assignment started
        brace_depth: Nesting inside an initializer list, 0 outside one
    """
    target: str
    resume: Optional[Declaring] = None
    paren_depth: int = 0
    brace_depth: int = 0


ContextState = Union[Idle, Declaring, Assigning]

IDLE = Idle()


@dataclass
class BracketFrame:
    """An open '[' and what has been seen inside it."""
    owner: Optional[str]
    text: Optional[str] = None
    numeric: bool = True


@dataclass
class ContextFlags:
    """Short-lived context derived from the tokens seen so far."""
    state: ContextState = IDLE
    last_was_identifier: bool = False
    last_identifier_name: Optional[str] = None
    previous: Optional[Token] = None
    brackets: List[BracketFrame] = field(default_factory=list)

    @property
    def in_declaration(self) -> bool:
        return isinstance(self.state, Declaring)

    @property
    def in_assignment(self) -> bool:
        return isinstance(self.state, Assigning)


# =============================================================================
# Tracker
# =============================================================================

class ContextTracker:
    """
    Applies the context rules to each token in turn.

    The tracker itself holds no scan data; everything it reads and writes
    lives in the ScannerState passed to observe().
    """

    def observe(self, state: "ScannerState", token: Token) -> None:
        """Update context and tables for one token."""
        flags = state.context
        if flags.brackets and not token.is_punct("[") and not token.is_punct("]"):
            self._note_subscript_content(flags.brackets[-1], token)

        if token.kind is TokenKind.IDENT:
            self._on_identifier(state, token)
        elif token.kind is TokenKind.TYPE:
            self._on_type(flags, token)
        elif token.is_literal:
            self._on_literal(state, token)
        elif token.is_op("="):
            self._on_assign(state)
        elif token.kind is TokenKind.PUNCT:
            self._on_punct(state, token)
        else:
            flags.last_was_identifier = False

        flags.previous = token

    def observe_macro(self, state: "ScannerState", name: str, token: Token) -> None:
        """Log the literal value of '#define name value'."""
        state.constants.record(name, token.line, token.text, "macro")
        state.context.previous = token

    # =========================================================================
    # Token Handlers
    # =========================================================================

    def _on_identifier(self, state: "ScannerState", token: Token) -> None:
        flags = state.context
        state.symbols.touch(token.text)
        if self._declaring(state):
            if state.symbols.set_type_if_unset(token.text, flags.state.type_text):
                logger.debug("'%s' declared as %s", token.text, flags.state.type_text)
        flags.last_identifier_name = token.text
        flags.last_was_identifier = True

    def _on_type(self, flags: ContextFlags, token: Token) -> None:
        flags.last_was_identifier = False
        if flags.in_assignment:
            return
        previous = flags.previous
        if flags.in_declaration and previous is not None and previous.kind is TokenKind.TYPE:
            flags.state = Declaring(f"{flags.state.type_text} {token.text}")
        else:
            flags.state = Declaring(token.text)

    def _on_literal(self, state: "ScannerState", token: Token) -> None:
        flags = state.context
        flags.last_was_identifier = False

        earlier = state.constants.find(token.text, token.literal_tag)
        if earlier is not None:
            logger.debug("literal %s already seen on line %d", token.text, earlier.line)

        current = flags.state
        if isinstance(current, Assigning):
            state.constants.record(current.target, token.line, token.text, token.literal_tag)
            if current.brace_depth == 0:
                flags.state = current.resume or IDLE
        else:
            state.constants.record(None, token.line, token.text, token.literal_tag)

    def _on_assign(self, state: "ScannerState") -> None:
        flags = state.context
        if flags.last_was_identifier and flags.last_identifier_name:
            current = flags.state
            if isinstance(current, Declaring):
                resume = current
            elif isinstance(current, Assigning):
                resume = current.resume
            else:
                resume = None
            flags.state = Assigning(
                flags.last_identifier_name, resume, state.modes.paren_depth
            )
        flags.last_was_identifier = False

    def _on_punct(self, state: "ScannerState", token: Token) -> None:
        flags = state.context
        text = token.text

        if text == "[":
            self._open_bracket(flags)
            return
        if text == "]":
            self._close_bracket(state)
            return

        if text == "(":
            self._open_paren(state, token)
        elif text == ")":
            frame = state.modes.close_paren(token.offset)
            if frame is not None:
                state.symbols.append_parameters(frame.name, frame.argument_text(state.source))
        elif text == ";":
            flags.state = IDLE
            flags.brackets.clear()
        elif text == "{":
            self._open_brace(flags)
        elif text == "}":
            self._close_brace(flags)
        elif text == ",":
            current = flags.state
            if (
                isinstance(current, Assigning)
                and current.brace_depth == 0
                and current.paren_depth == state.modes.paren_depth
            ):
                flags.state = current.resume or IDLE

        flags.last_was_identifier = False

    # =========================================================================
    # Structure Helpers
    # =========================================================================

    def _open_paren(self, state: "ScannerState", token: Token) -> None:
        flags = state.context
        state.modes.open_paren()

        previous = flags.previous
        if previous is None or previous.kind is not TokenKind.IDENT:
            return

        name = previous.text
        state.symbols.mark_function(name)
        if self._declaring(state):
            state.symbols.set_return_type(name, flags.state.type_text)
        else:
            state.modes.open_capture(name, token.line, token.offset + 1)

    def _open_brace(self, flags: ContextFlags) -> None:
        current = flags.state
        if isinstance(current, Assigning):
            previous = flags.previous
            if current.brace_depth > 0 or (previous is not None and previous.is_op("=")):
                flags.state = replace(current, brace_depth=current.brace_depth + 1)
                return
        flags.state = IDLE
        flags.brackets.clear()

    def _close_brace(self, flags: ContextFlags) -> None:
        current = flags.state
        if isinstance(current, Assigning) and current.brace_depth > 0:
            if current.brace_depth == 1:
                flags.state = current.resume or IDLE
            else:
                flags.state = replace(current, brace_depth=current.brace_depth - 1)
            return
        flags.state = IDLE
        flags.brackets.clear()

    def _open_bracket(self, flags: ContextFlags) -> None:
        if flags.brackets:
            flags.brackets[-1].numeric = False
        owner = flags.last_identifier_name if flags.last_was_identifier else None
        flags.brackets.append(BracketFrame(owner))
        flags.last_was_identifier = False

    def _close_bracket(self, state: "ScannerState") -> None:
        flags = state.context
        if not flags.brackets:
            flags.last_was_identifier = False
            return

        frame = flags.brackets.pop()
        if frame.owner is None:
            flags.last_was_identifier = False
            return

        if frame.numeric and (frame.text is not None or self._declaring(state)):
            state.symbols.append_dimensions(frame.owner, f"[{frame.text or ''}]")

        # The subscripted name is still the last identifier, so that
        # `a[2] = 5` assigns to a and `m[2][3]` chains.
        flags.last_identifier_name = frame.owner
        flags.last_was_identifier = True

    @staticmethod
    def _note_subscript_content(frame: BracketFrame, token: Token) -> None:
        if token.kind is TokenKind.NUMBER and token.literal_tag in INTEGER_TAGS and frame.text is None:
            frame.text = token.text
        else:
            frame.numeric = False

    @staticmethod
    def _declaring(state: "ScannerState") -> bool:
        """True when an identifier here would be a declarator."""
        flags = state.context
        return flags.in_declaration and not flags.brackets and not state.modes.capturing

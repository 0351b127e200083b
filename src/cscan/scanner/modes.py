"""
Lexical Mode Controller
=======================

A small explicit state machine selecting which rule table is active.

    CODE ──/*──▶ BLOCK_COMMENT ──first */──▶ CODE
    CODE ──"───▶ STRING_LITERAL ──"/EOL───▶ CODE
    CODE ──'───▶ CHAR_LITERAL ────'/EOL───▶ CODE
    CODE ──#───▶ PREPROCESSOR_LINE ──EOL──▶ CODE   (# first on its line)
    CODE ──f(──▶ ARGUMENT_CAPTURE ──matching )──▶ CODE

Block comments do not nest: the first `*/` always closes the comment.

Argument capture is layered on top of code mode rather than replacing it:
the characters between the parentheses of a call are still classified by
the code rules, while one capture frame per open call remembers where
the argument text starts. Frames stack, so `f(g(x))` closes the frame
for `g` at the inner `)` and the frame for `f` at the outer one.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


logger = logging.getLogger(__name__)


class LexMode(Enum):
    """Lexical modes of the scanner."""

    CODE = auto()
    BLOCK_COMMENT = auto()
    STRING_LITERAL = auto()
    CHAR_LITERAL = auto()
    PREPROCESSOR_LINE = auto()
    ARGUMENT_CAPTURE = auto()


@dataclass
class CaptureFrame:
    """
    An open function-call argument capture.

    Attributes:
        name: Identifier being called
        line: Line of the opening parenthesis
        start: Source offset just after the opening parenthesis
        depth: Parenthesis depth inside this call
        end: Source offset of the closing parenthesis, once found
    """
    name: str
    line: int
    start: int
    depth: int
    end: Optional[int] = None

    def argument_text(self, source: str) -> str:
        """Raw text between the parentheses, surrounding blanks removed."""
        if self.end is None:
            return source[self.start:].strip()
        return source[self.start:self.end].strip()


class ModeController:
    """
    Tracks the active lexical mode, parenthesis depth and open captures.

    Only code mode may enter another mode, and every other mode returns
    to code mode when it ends.
    """

    def __init__(self):
        self._mode = LexMode.CODE
        self._captures: List[CaptureFrame] = []
        self.paren_depth = 0

    @property
    def mode(self) -> LexMode:
        """The active mode; code mode reads as ARGUMENT_CAPTURE inside a call."""
        if self._mode is LexMode.CODE and self._captures:
            return LexMode.ARGUMENT_CAPTURE
        return self._mode

    @property
    def capturing(self) -> bool:
        return bool(self._captures)

    def enter(self, mode: LexMode) -> None:
        """Switch from code mode into ``mode``."""
        if self._mode is not LexMode.CODE:
            raise RuntimeError(f"cannot enter {mode.name} from {self._mode.name}")
        logger.debug("mode %s -> %s", self.mode.name, mode.name)
        self._mode = mode

    def leave(self) -> None:
        """Return to code mode."""
        if self._mode is not LexMode.CODE:
            logger.debug("mode %s -> CODE", self._mode.name)
        self._mode = LexMode.CODE

    # =========================================================================
    # Parentheses and Argument Capture
    # =========================================================================

    def open_paren(self) -> None:
        self.paren_depth += 1

    def open_capture(self, name: str, line: int, start: int) -> CaptureFrame:
        """
        Begin capturing the arguments of a call to ``name``.

        Must be called after open_paren() for the call's '('.
        """
        frame = CaptureFrame(name, line, start, self.paren_depth)
        self._captures.append(frame)
        logger.debug("capture open: %s at line %d (depth %d)", name, line, frame.depth)
        return frame

    def close_paren(self, offset: int) -> Optional[CaptureFrame]:
        """
        Account for a ')' at source ``offset``.

        Returns the capture frame it completes, if any. Unbalanced ')'
        never drives the depth below zero.
        """
        frame = None
        if self._captures and self._captures[-1].depth == self.paren_depth:
            frame = self._captures.pop()
            frame.end = offset
            logger.debug("capture close: %s", frame.name)
        if self.paren_depth > 0:
            self.paren_depth -= 1
        return frame

    def drain_captures(self) -> List[CaptureFrame]:
        """Remove and return captures still open at end of input, innermost first."""
        frames = list(reversed(self._captures))
        self._captures.clear()
        return frames

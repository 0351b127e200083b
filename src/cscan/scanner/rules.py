"""
Token Classifier
================

Ordered rule tables and the maximal-munch matcher that picks the next
lexeme.

Matching Discipline
-------------------
At a given position every rule of the active table is tried, anchored at
that position. The longest match wins; when two rules match the same
length the one listed first wins. This is the discipline of lex/flex, and
it is what makes

    int      -> TYPE   (keyword rule and identifier rule tie, keyword first)
    integer  -> IDENT  (identifier rule is longer)
    ==       -> OP     (longer than '=')

come out right without any special cases.

Numeric rules end in a negative lookahead so that a numeral glued to a
letter or underscore is not a number at all. Such input falls through to
the catch-all error rule one character at a time. A '.' followed by
digits with no integer part in front is a stray fraction and is an
ERROR token of its own, so `20.5.3` scans as NUMBER `20.5`, ERROR `.3`.

Rule Tables
-----------
There is one table per lexical mode that reads characters through rules:
code (also used while capturing call arguments), block comment, string
literal and character literal. Preprocessor lines are consumed whole by
the scanner and use the directive patterns at the bottom of this module.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from cscan.scanner.modes import LexMode
from cscan.scanner.tokens import KEYWORDS, TYPE_NAMES, TokenKind


# =============================================================================
# Rule Actions
# =============================================================================

class Action(Enum):
    """What the scanner does with a matched lexeme."""

    EMIT = auto()           # produce a token of the rule's kind
    SKIP = auto()           # whitespace, line comments, comment bodies
    NEWLINE = auto()        # a line break outside any literal
    BEGIN = auto()          # switch into the rule's target mode
    END = auto()            # closing delimiter, back to code
    APPEND = auto()         # part of a string/char literal being built
    UNTERMINATED = auto()   # literal interrupted by end of line


@dataclass(frozen=True)
class Rule:
    """
    One classification rule.

    Attributes:
        name: Short name, used in debug logging
        pattern: Compiled regular expression, matched at a position
        action: What to do with a match
        kind: Token kind for EMIT rules
        literal_tag: Constant-table tag for literal-producing rules
        target: Mode entered by BEGIN rules
    """
    name: str
    pattern: re.Pattern
    action: Action
    kind: Optional[TokenKind] = None
    literal_tag: Optional[str] = None
    target: Optional[LexMode] = None


@dataclass(frozen=True)
class Match:
    """A winning rule and the text it matched."""
    rule: Rule
    text: str

    def __len__(self) -> int:
        return len(self.text)


def _rule(name, pattern, action, kind=None, literal_tag=None, target=None, flags=0):
    return Rule(name, re.compile(pattern, flags), action, kind, literal_tag, target)


def _words(words) -> str:
    """Alternation of literal words, longest first."""
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


# =============================================================================
# Shared Patterns
# =============================================================================

# Rejects a number that runs straight into a letter, digit or underscore.
NUMBER_END = r"(?![A-Za-z0-9_])"

INT_SUFFIX = r"(?:[uU](?:ll|LL|[lL])?|(?:ll|LL|[lL])[uU]?)?"

FLOAT_PATTERN = (
    r"(?:[0-9]+\.[0-9]*(?:[eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+)[fFlL]?"
)

OPERATORS = (
    ">>=", "<<=", "...",
    "->", "++", "--", "<<", ">>", "<=", ">=", "==", "!=", "&&", "||",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
    "+", "-", "*", "/", "%", "<", ">", "=", "!", "~", "&", "|", "^",
    "?", ":", ".",
)

PUNCTUATORS = "(){}[];,"

# Integer tags accepted as an array dimension.
INTEGER_TAGS = frozenset({"int", "hex", "oct", "bin"})


# =============================================================================
# Rule Tables
# =============================================================================

CODE_RULES = (
    _rule("whitespace", r"[ \t\r\f\v]+", Action.SKIP),
    _rule("newline", r"\n", Action.NEWLINE),
    _rule("line-comment", r"//[^\n]*", Action.SKIP),
    _rule("comment-open", r"/\*", Action.BEGIN, target=LexMode.BLOCK_COMMENT),
    _rule("string-open", r'"', Action.BEGIN, target=LexMode.STRING_LITERAL),
    _rule("char-open", r"'", Action.BEGIN, target=LexMode.CHAR_LITERAL),
    _rule("type", _words(TYPE_NAMES), Action.EMIT, TokenKind.TYPE),
    _rule("keyword", _words(KEYWORDS), Action.EMIT, TokenKind.KEYWORD),
    _rule("identifier", r"[A-Za-z_][A-Za-z0-9_]*", Action.EMIT, TokenKind.IDENT),
    _rule("hex", r"0[xX][0-9a-fA-F]+" + INT_SUFFIX + NUMBER_END,
          Action.EMIT, TokenKind.NUMBER, "hex"),
    _rule("binary", r"0[bB][01]+" + INT_SUFFIX + NUMBER_END,
          Action.EMIT, TokenKind.NUMBER, "bin"),
    _rule("octal", r"0[0-7]+" + INT_SUFFIX + NUMBER_END,
          Action.EMIT, TokenKind.NUMBER, "oct"),
    _rule("float", FLOAT_PATTERN + NUMBER_END,
          Action.EMIT, TokenKind.NUMBER, "float"),
    _rule("decimal", r"(?:[1-9][0-9]*|0)" + INT_SUFFIX + NUMBER_END,
          Action.EMIT, TokenKind.NUMBER, "int"),
    _rule("stray-fraction", r"\.[0-9]+", Action.EMIT, TokenKind.ERROR),
    _rule("operator", _words(OPERATORS), Action.EMIT, TokenKind.OP),
    _rule("punctuator", "[" + re.escape(PUNCTUATORS) + "]", Action.EMIT, TokenKind.PUNCT),
    _rule("invalid", r".", Action.EMIT, TokenKind.ERROR, flags=re.DOTALL),
)

BLOCK_COMMENT_RULES = (
    _rule("comment-close", r"\*/", Action.END),
    _rule("comment-text", r"[^*\n]+", Action.SKIP),
    _rule("comment-star", r"\*", Action.SKIP),
    _rule("newline", r"\n", Action.NEWLINE),
)

STRING_RULES = (
    _rule("string-close", r'"', Action.END, TokenKind.STRING, "string"),
    _rule("escape", r"\\.", Action.APPEND, flags=re.DOTALL),
    _rule("string-text", r'[^"\\\n]+', Action.APPEND),
    _rule("string-break", r"\n", Action.UNTERMINATED),
    _rule("lone-backslash", r"\\", Action.APPEND),
)

CHAR_RULES = (
    _rule("char-close", r"'", Action.END, TokenKind.CHAR, "char"),
    _rule("escape", r"\\.", Action.APPEND, flags=re.DOTALL),
    _rule("char-text", r"[^'\\\n]+", Action.APPEND),
    _rule("char-break", r"\n", Action.UNTERMINATED),
    _rule("lone-backslash", r"\\", Action.APPEND),
)

RULE_TABLES = {
    LexMode.CODE: CODE_RULES,
    LexMode.ARGUMENT_CAPTURE: CODE_RULES,
    LexMode.BLOCK_COMMENT: BLOCK_COMMENT_RULES,
    LexMode.STRING_LITERAL: STRING_RULES,
    LexMode.CHAR_LITERAL: CHAR_RULES,
}


# =============================================================================
# Matcher
# =============================================================================

def classify(mode: LexMode, text: str, pos: int) -> Optional[Match]:
    """
    Select the longest lexeme at ``pos`` using the rule table for ``mode``.

    Ties are broken by rule order. Returns None only at end of input or
    when the mode has no rule table (preprocessor lines).
    """
    rules = RULE_TABLES.get(mode)
    if rules is None or pos >= len(text):
        return None

    best: Optional[Match] = None
    for rule in rules:
        m = rule.pattern.match(text, pos)
        if m is None or m.end() == pos:
            continue
        if best is None or m.end() - pos > len(best):
            best = Match(rule, m.group())
    return best


# =============================================================================
# Whole-literal Recognition
# =============================================================================

STRING_LITERAL_RE = re.compile(r'"(?:[^"\\\n]|\\.)*"')
CHAR_LITERAL_RE = re.compile(r"'(?:[^'\\\n]|\\.)*'")

_NUMBER_RULES = tuple(r for r in CODE_RULES if r.kind is TokenKind.NUMBER)


def match_literal(text: str, pos: int = 0) -> Optional[tuple]:
    """
    Match one complete literal at ``pos``.

    Used where a literal has to be recognized outside the character-level
    modes, such as the value of a #define.

    Returns:
        (kind, literal_tag, matched_text) or None
    """
    m = STRING_LITERAL_RE.match(text, pos)
    if m:
        return TokenKind.STRING, "string", m.group()
    m = CHAR_LITERAL_RE.match(text, pos)
    if m:
        return TokenKind.CHAR, "char", m.group()

    best = None
    for rule in _NUMBER_RULES:
        m = rule.pattern.match(text, pos)
        if m and (best is None or m.end() > best[2].end()):
            best = (rule.kind, rule.literal_tag, m)
    if best is None:
        return None
    return best[0], best[1], best[2].group()


# =============================================================================
# Preprocessor Patterns
# =============================================================================

# Directive name after the '#'.
DIRECTIVE_NAME_RE = re.compile(r"#[ \t]*([A-Za-z_][A-Za-z0-9_]*)?")

# '#define NAME' or '#define NAME(params)', then the optional body.
DEFINE_RE = re.compile(
    r"#[ \t]*define[ \t]+([A-Za-z_][A-Za-z0-9_]*(?:\([^)\n]*\))?)[ \t]*(.*)",
    re.DOTALL,
)

# Comment trailing a directive body.
TRAILING_COMMENT_RE = re.compile(r"[ \t]*(?://.*|/\*.*?\*/[ \t]*)?$", re.DOTALL)

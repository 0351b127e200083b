# =============================================================================
# test_lexer.py - Scanner Unit Tests
# =============================================================================
# Tests for the C scanner: rule priorities, numeric literal forms, string
# and character literals, comments, preprocessor lines and error recovery.
#
# Test coverage includes:
#   - Keyword / type / identifier priority (longest match, first rule on ties)
#   - Number formats: decimal, hex (0x), octal (0), binary (0b), float
#   - Malformed numbers degrading into smaller tokens
#   - String and character literals, escapes, unterminated literals
#   - Block comments ending at the first close
#   - Directives: #include, #define, other directives
#   - One diagnostic per invalid character, with line numbers
# =============================================================================

import pytest

from cscan.errors import InvalidTokenError, UnterminatedLiteralError
from cscan.scanner.lexer import CScanner
from cscan.scanner.modes import LexMode
from cscan.scanner.rules import classify, match_literal
from cscan.scanner.tokens import TokenKind


# =============================================================================
# Helper Functions
# =============================================================================

def scan(source: str) -> CScanner:
    """Run a scanner to completion and return it for inspection."""
    scanner = CScanner(source, "test.c")
    scanner.tokens = list(scanner.tokenize())
    return scanner


def tokenize(source: str) -> list:
    """Tokenize and return (kind, text) pairs."""
    return [(t.kind, t.text) for t in scan(source).tokens]


# =============================================================================
# Basic Token Recognition
# =============================================================================

class TestBasicTokens:
    """Keywords, types, identifiers and punctuation."""

    def test_empty_source(self):
        assert tokenize("") == []

    def test_whitespace_only(self):
        assert tokenize("   \n\t  \n  ") == []

    def test_identifier(self):
        assert tokenize("calc_result") == [(TokenKind.IDENT, "calc_result")]

    def test_type_keyword(self):
        assert tokenize("int") == [(TokenKind.TYPE, "int")]

    def test_control_keyword(self):
        assert tokenize("return") == [(TokenKind.KEYWORD, "return")]

    @pytest.mark.parametrize("word", ["integer", "doing", "returned", "int_", "_int"])
    def test_longer_identifier_beats_keyword(self, word):
        """A keyword prefix does not split an identifier."""
        assert tokenize(word) == [(TokenKind.IDENT, word)]

    def test_double_is_type_not_do(self):
        """'double' is a type even though 'do' is a keyword prefix."""
        assert tokenize("double do") == [
            (TokenKind.TYPE, "double"),
            (TokenKind.KEYWORD, "do"),
        ]

    def test_identifiers_are_case_sensitive(self):
        assert tokenize("Int INT") == [
            (TokenKind.IDENT, "Int"),
            (TokenKind.IDENT, "INT"),
        ]

    def test_punctuators(self):
        assert tokenize("(){}[];,") == [(TokenKind.PUNCT, c) for c in "(){}[];,"]

    def test_declaration_line(self):
        assert tokenize("int a = 10;") == [
            (TokenKind.TYPE, "int"),
            (TokenKind.IDENT, "a"),
            (TokenKind.OP, "="),
            (TokenKind.NUMBER, "10"),
            (TokenKind.PUNCT, ";"),
        ]

    def test_line_and_column(self):
        tokens = scan("int a;\n  float b;").tokens
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 5)
        assert (tokens[3].line, tokens[3].column) == (2, 3)
        assert (tokens[4].line, tokens[4].column) == (2, 9)


# =============================================================================
# Operators
# =============================================================================

class TestOperators:
    """Operators are matched longest first."""

    @pytest.mark.parametrize("op", [
        ">>=", "<<=", "...", "->", "++", "--", "<<", ">>", "<=", ">=",
        "==", "!=", "&&", "||", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
        "+", "-", "*", "/", "%", "<", ">", "=", "!", "~", "&", "|", "^", "?", ":", ".",
    ])
    def test_single_operator(self, op):
        assert tokenize(op) == [(TokenKind.OP, op)]

    def test_equality_is_not_two_assignments(self):
        assert tokenize("x==y") == [
            (TokenKind.IDENT, "x"),
            (TokenKind.OP, "=="),
            (TokenKind.IDENT, "y"),
        ]

    def test_member_access(self):
        assert tokenize("p->next.value") == [
            (TokenKind.IDENT, "p"),
            (TokenKind.OP, "->"),
            (TokenKind.IDENT, "next"),
            (TokenKind.OP, "."),
            (TokenKind.IDENT, "value"),
        ]

    def test_increment_then_plus(self):
        assert tokenize("i+++j") == [
            (TokenKind.IDENT, "i"),
            (TokenKind.OP, "++"),
            (TokenKind.OP, "+"),
            (TokenKind.IDENT, "j"),
        ]


# =============================================================================
# Number Formats
# =============================================================================

class TestNumberFormats:
    """Numeric literal forms and their constant-table tags."""

    @pytest.mark.parametrize("text, tag", [
        ("42", "int"),
        ("0", "int"),
        ("10UL", "int"),
        ("7u", "int"),
        ("0x7F", "hex"),
        ("0XffL", "hex"),
        ("0177", "oct"),
        ("0b1010", "bin"),
        ("0B11", "bin"),
        ("5.5", "float"),
        ("0.0", "float"),
        ("3.", "float"),
        ("1e10", "float"),
        ("2.5e-3", "float"),
        ("2.5f", "float"),
    ])
    def test_number_tag(self, text, tag):
        tokens = scan(text).tokens
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.NUMBER
        assert tokens[0].text == text
        assert tokens[0].literal_tag == tag

    def test_numbers_are_kept_as_raw_text(self):
        tokens = scan("0x1F").tokens
        assert tokens[0].text == "0x1F"


class TestMalformedNumbers:
    """Malformed numerals degrade into smaller valid and invalid tokens."""

    def test_second_fraction_is_an_error(self):
        """20.5.3 is the number 20.5 followed by a stray '.3'."""
        scanner = scan("20.5.3")
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.NUMBER, "20.5"),
            (TokenKind.ERROR, ".3"),
        ]
        assert scanner.diagnostics.error_count() == 1

    def test_digits_glued_to_letters(self):
        """Each digit of '123abc' is rejected on its own."""
        assert tokenize("123abc") == [
            (TokenKind.ERROR, "1"),
            (TokenKind.ERROR, "2"),
            (TokenKind.ERROR, "3"),
            (TokenKind.IDENT, "abc"),
        ]

    def test_hex_prefix_without_digits(self):
        assert tokenize("0x") == [
            (TokenKind.ERROR, "0"),
            (TokenKind.IDENT, "x"),
        ]

    def test_number_followed_by_operator_is_fine(self):
        assert tokenize("10+2") == [
            (TokenKind.NUMBER, "10"),
            (TokenKind.OP, "+"),
            (TokenKind.NUMBER, "2"),
        ]


# =============================================================================
# String and Character Literals
# =============================================================================

class TestStringLiterals:
    """String literal mode."""

    def test_simple_string(self):
        assert tokenize('"hello"') == [(TokenKind.STRING, '"hello"')]

    def test_empty_string(self):
        assert tokenize('""') == [(TokenKind.STRING, '""')]

    def test_escaped_quote(self):
        assert tokenize(r'"a\"b"') == [(TokenKind.STRING, r'"a\"b"')]

    def test_escape_sequences_kept_raw(self):
        assert tokenize(r'"Sum: %d\n"') == [(TokenKind.STRING, r'"Sum: %d\n"')]

    def test_comment_markers_inside_string(self):
        assert tokenize('"/* not a comment */"') == [
            (TokenKind.STRING, '"/* not a comment */"'),
        ]

    def test_string_tag(self):
        assert scan('"x"').tokens[0].literal_tag == "string"

    def test_unterminated_at_end_of_line(self):
        """The literal is dropped, reported once, and scanning resumes."""
        scanner = scan('"abc\nint x;')
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.TYPE, "int"),
            (TokenKind.IDENT, "x"),
            (TokenKind.PUNCT, ";"),
        ]
        assert scanner.tokens[0].line == 2
        errors = scanner.diagnostics.errors
        assert len(errors) == 1
        assert isinstance(errors[0], UnterminatedLiteralError)
        assert errors[0].diagnostic() == "[line 1] ERROR: Unterminated string literal"

    def test_unterminated_at_end_of_input(self):
        scanner = scan('x = "abc')
        assert len(scanner.diagnostics.errors) == 1
        assert scanner.diagnostics.errors[0].what == "string literal"

    def test_backslash_at_end_of_input(self):
        scanner = scan('char *s = "abc\\')
        assert [t.text for t in scanner.tokens] == ["char", "*", "s", "="]
        errors = scanner.diagnostics.errors
        assert len(errors) == 1
        assert errors[0].diagnostic() == "[line 1] ERROR: Unterminated string literal"

    def test_backslash_newline_continues_string(self):
        scanner = scan('"ab\\\ncd" x')
        assert scanner.tokens[0].kind is TokenKind.STRING
        assert scanner.tokens[0].text == '"ab\\\ncd"'
        assert scanner.tokens[1].line == 2
        assert not scanner.diagnostics.has_errors()

    def test_error_sink_receives_unterminated_literal(self):
        seen = []
        scanner = CScanner('"open\n', "test.c", error_sink=seen.append)
        list(scanner.tokenize())
        assert len(seen) == 1
        assert seen[0].line == 1


class TestCharLiterals:
    """Character literal mode."""

    def test_simple_char(self):
        assert tokenize("'a'") == [(TokenKind.CHAR, "'a'")]

    def test_escaped_char(self):
        assert tokenize(r"'\n'") == [(TokenKind.CHAR, r"'\n'")]

    def test_escaped_quote(self):
        assert tokenize(r"'\''") == [(TokenKind.CHAR, r"'\''")]

    def test_multi_character_literal_accepted(self):
        scanner = scan("'xy'")
        assert [(t.kind, t.text) for t in scanner.tokens] == [(TokenKind.CHAR, "'xy'")]
        assert not scanner.diagnostics.has_errors()

    def test_char_tag(self):
        assert scan("'+'").tokens[0].literal_tag == "char"

    def test_unterminated_char(self):
        scanner = scan("c = 'x\n;")
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.IDENT, "c"),
            (TokenKind.OP, "="),
            (TokenKind.PUNCT, ";"),
        ]
        assert scanner.diagnostics.errors[0].diagnostic() == (
            "[line 1] ERROR: Unterminated character literal"
        )

    def test_backslash_at_end_of_input(self):
        scanner = scan("char c = '\\")
        assert [t.text for t in scanner.tokens] == ["char", "c", "="]
        assert [e.what for e in scanner.diagnostics.errors] == ["character literal"]


# =============================================================================
# Comments
# =============================================================================

class TestComments:
    """Line and block comments."""

    def test_line_comment(self):
        assert tokenize("// comment\n42") == [(TokenKind.NUMBER, "42")]

    def test_line_comment_after_code(self):
        assert tokenize("x; // trailing") == [
            (TokenKind.IDENT, "x"),
            (TokenKind.PUNCT, ";"),
        ]

    def test_block_comment_counts_lines(self):
        tokens = scan("/* one\ntwo\nthree */ x").tokens
        assert [(t.kind, t.text) for t in tokens] == [(TokenKind.IDENT, "x")]
        assert tokens[0].line == 3

    def test_block_comment_with_stars(self):
        assert tokenize("/** doc **/ y") == [(TokenKind.IDENT, "y")]

    def test_first_close_ends_comment(self):
        """Comments do not nest: the first */ closes the comment."""
        assert tokenize("/* outer /* inner */ tail */") == [
            (TokenKind.IDENT, "tail"),
            (TokenKind.OP, "*"),
            (TokenKind.OP, "/"),
        ]

    def test_unterminated_block_comment(self):
        scanner = scan("x\n/* never closed\nint y;")
        assert [(t.kind, t.text) for t in scanner.tokens] == [(TokenKind.IDENT, "x")]
        errors = scanner.diagnostics.errors
        assert len(errors) == 1
        assert errors[0].diagnostic() == "[line 2] ERROR: Unterminated comment"


# =============================================================================
# Preprocessor Lines
# =============================================================================

class TestPreprocessor:
    """Directives starting a line are consumed whole."""

    def test_include_is_one_token(self):
        assert tokenize("#include <stdio.h>\nint x;") == [
            (TokenKind.PREPROC, "#include <stdio.h>"),
            (TokenKind.TYPE, "int"),
            (TokenKind.IDENT, "x"),
            (TokenKind.PUNCT, ";"),
        ]

    def test_indented_directive(self):
        assert tokenize("   #ifdef DEBUG") == [(TokenKind.PREPROC, "#ifdef DEBUG")]

    def test_other_directives(self):
        assert tokenize("#pragma once\n#endif") == [
            (TokenKind.PREPROC, "#pragma once"),
            (TokenKind.PREPROC, "#endif"),
        ]

    def test_define_with_literal_value(self):
        scanner = scan("#define PI 3.14")
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.PREPROC, "#define"),
            (TokenKind.PREPROC, "PI"),
            (TokenKind.NUMBER, "3.14"),
        ]
        constant = scanner.constants[0]
        assert (constant.variable, constant.line, constant.value, constant.type) == (
            "PI", 1, "3.14", "macro",
        )

    def test_define_name_is_not_an_identifier_occurrence(self):
        scanner = scan("#define SIZE 10\nint a[SIZE];")
        assert scanner.symbols["SIZE"].frequency == 1

    def test_define_string_value(self):
        scanner = scan('#define GREETING "hi" // note')
        assert scanner.tokens[-1].kind is TokenKind.STRING
        assert scanner.constants[0].value == '"hi"'
        assert scanner.constants[0].type == "macro"

    def test_define_expression_body(self):
        scanner = scan("#define SQ(x) ((x)*(x))")
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.PREPROC, "#define"),
            (TokenKind.PREPROC, "SQ(x)"),
            (TokenKind.PREPROC, "((x)*(x))"),
        ]
        assert len(scanner.constants) == 0

    def test_define_without_value(self):
        assert tokenize("#define DEBUG") == [
            (TokenKind.PREPROC, "#define"),
            (TokenKind.PREPROC, "DEBUG"),
        ]

    def test_continuation_line(self):
        scanner = scan("#define LONG \\\n  (1 + 2)\nint y;")
        assert scanner.tokens[2].kind is TokenKind.PREPROC
        assert scanner.tokens[3].text == "int"
        assert scanner.tokens[3].line == 3

    def test_hash_inside_a_line_is_invalid(self):
        scanner = scan("a # b")
        assert [(t.kind, t.text) for t in scanner.tokens] == [
            (TokenKind.IDENT, "a"),
            (TokenKind.ERROR, "#"),
            (TokenKind.IDENT, "b"),
        ]


# =============================================================================
# Invalid Characters
# =============================================================================

class TestInvalidCharacters:
    """Unrecognized characters are reported and skipped."""

    def test_single_invalid_character(self):
        scanner = scan("$")
        assert tokenize("$") == [(TokenKind.ERROR, "$")]
        assert scanner.diagnostics.error_count() == 1
        error = scanner.diagnostics.errors[0]
        assert isinstance(error, InvalidTokenError)
        assert error.diagnostic() == "[line 1] ERROR: Invalid token '$'"

    def test_one_diagnostic_per_occurrence(self):
        scanner = scan("a $ b $$")
        assert scanner.diagnostics.error_count() == 3
        assert [t.text for t in scanner.tokens if t.kind is TokenKind.IDENT] == ["a", "b"]

    def test_diagnostic_line_numbers(self):
        scanner = scan("int a;\n$\nx = 1; @\n")
        assert [e.line for e in scanner.diagnostics.errors] == [2, 3]

    def test_scan_completes_after_errors(self):
        tokens = scan("` int y = 2;").tokens
        assert tokens[-1].text == ";"


# =============================================================================
# Classifier and Literal Matcher
# =============================================================================

class TestClassifier:
    """Direct checks on the rule tables."""

    def test_no_match_at_end(self):
        assert classify(LexMode.CODE, "abc", 3) is None

    def test_preprocessor_mode_has_no_rules(self):
        assert classify(LexMode.PREPROCESSOR_LINE, "#x", 0) is None

    def test_tie_goes_to_type_rule(self):
        match = classify(LexMode.CODE, "int x", 0)
        assert match.rule.name == "type"
        assert match.text == "int"

    def test_comment_mode_close(self):
        match = classify(LexMode.BLOCK_COMMENT, "*/", 0)
        assert match.rule.name == "comment-close"

    def test_match_literal_number(self):
        assert match_literal("0x10 rest") == (TokenKind.NUMBER, "hex", "0x10")

    def test_match_literal_rejects_identifier(self):
        assert match_literal("abc") is None

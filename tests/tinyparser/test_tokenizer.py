"""
Tests for expression tokenizer.
"""

import pytest

from tinyparser import (
    ExpressionLimits,
    LexError,
    LimitExceededError,
    format_tokens,
    tokenize,
)
from tinyparser.tokenizer import TokenType


def kinds(source: str) -> list[TokenType]:
    """Helper returning token types without the trailing EOF."""
    return [t.type for t in tokenize(source)[:-1]]


class TestLiterals:
    """Tests for literal tokenization."""

    def test_tokenizes_symbols(self):
        tokens = tokenize("foo")
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.SYMBOL
        assert tokens[0].value == "foo"
        assert tokens[0].position == 0
        assert tokens[1].type == TokenType.EOF

    def test_tokenizes_symbols_with_underscores_and_digits(self):
        tokens = tokenize("_var_12")
        assert tokens[0].type == TokenType.SYMBOL
        assert tokens[0].value == "_var_12"

    def test_tokenizes_integer_literals(self):
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "42"
        assert tokens[0].position == 0

    def test_number_run_accepts_hex_letters_without_prefix(self):
        tokens = tokenize("1F")
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "1F"

    def test_letter_outside_hex_alphabet_ends_number(self):
        tokens = tokenize("1g")
        assert [t.type for t in tokens[:-1]] == [TokenType.NUMBER, TokenType.SYMBOL]
        assert tokens[0].value == "1"
        assert tokens[1].value == "g"
        assert tokens[1].position == 1

    def test_string_keeps_quotes(self):
        tokens = tokenize('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == '"hello world"'
        assert tokens[0].position == 0

    def test_string_is_consumed_verbatim(self):
        tokens = tokenize('"a + (b) || c"')
        assert len(tokens) == 2
        assert tokens[0].value == '"a + (b) || c"'

    def test_empty_string(self):
        tokens = tokenize('""')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == '""'

    def test_string_directly_after_symbol(self):
        tokens = tokenize('a"b"')
        assert [t.type for t in tokens[:-1]] == [TokenType.SYMBOL, TokenType.STRING]
        assert tokens[1].position == 1

    def test_throws_on_unterminated_string(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('"unterminated')
        assert exc_info.value.position == 0


class TestRestrictedLiterals:
    """Tests for 0x / 0b prefixed literals."""

    def test_hex_literal_is_single_token(self):
        tokens = tokenize("0x1F")
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.HEX
        assert tokens[0].value == "1F"
        assert tokens[0].restriction == "hex"
        assert tokens[0].position == 0

    def test_empty_hex_literal(self):
        tokens = tokenize("0x")
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.HEX
        assert tokens[0].value == ""

    def test_binary_literal(self):
        tokens = tokenize("0b1010")
        assert tokens[0].type == TokenType.BIN
        assert tokens[0].value == "1010"
        assert tokens[0].restriction == "bin"

    def test_empty_binary_literal_is_error(self):
        with pytest.raises(LexError):
            tokenize("0b")

    def test_empty_binary_literal_before_operator_is_error(self):
        with pytest.raises(LexError):
            tokenize("0b + 1")

    def test_invalid_binary_digit_is_error(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("0b102")
        assert exc_info.value.character == "2"
        assert exc_info.value.position == 4

    def test_invalid_hex_digit_is_error(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("0xfg")
        assert exc_info.value.character == "g"

    def test_operator_ends_restricted_literal(self):
        tokens = tokenize("0xff+1")
        assert [t.type for t in tokens[:-1]] == [
            TokenType.HEX,
            TokenType.PLUS,
            TokenType.NUMBER,
        ]
        assert tokens[0].value == "ff"

    def test_restriction_does_not_outlive_its_literal(self):
        tokens = tokenize("0b1+fa")
        assert [t.type for t in tokens[:-1]] == [
            TokenType.BIN,
            TokenType.PLUS,
            TokenType.SYMBOL,
        ]

    def test_prefix_requires_bare_zero(self):
        tokens = tokenize("10x")
        assert [t.type for t in tokens[:-1]] == [TokenType.NUMBER, TokenType.SYMBOL]
        assert tokens[0].value == "10"

    def test_zero_followed_by_other_hex_letter_stays_number(self):
        tokens = tokenize("0a")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "0a"

    def test_unrestricted_number_is_not_restricted(self):
        assert tokenize("12")[0].restriction is None


class TestOperators:
    """Tests for operator tokenization."""

    def test_tokenizes_arithmetic_operators(self):
        assert kinds("+ - * /") == [
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.MUL,
            TokenType.DIV,
        ]

    def test_tokenizes_assignment(self):
        assert kinds("a = 1 + 2") == [
            TokenType.SYMBOL,
            TokenType.EQUAL,
            TokenType.NUMBER,
            TokenType.PLUS,
            TokenType.NUMBER,
        ]
        tokens = tokenize("a = 1 + 2")
        assert [t.value for t in tokens[:-1]] == ["a", "=", "1", "+", "2"]

    def test_tokenizes_concat(self):
        tokens = tokenize("a||b")
        assert [t.type for t in tokens[:-1]] == [
            TokenType.SYMBOL,
            TokenType.CONCAT,
            TokenType.SYMBOL,
        ]
        assert tokens[1].value == "||"
        assert tokens[1].position == 1
        assert tokens[2].position == 3

    def test_single_pipe_is_error(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a|b")
        assert exc_info.value.character == "|"
        assert exc_info.value.position == 1

    def test_trailing_pipe_is_error(self):
        with pytest.raises(LexError):
            tokenize("a |")

    def test_unresolved_pipe_after_concat_is_error(self):
        with pytest.raises(LexError):
            tokenize("a|||b")


class TestDelimiters:
    """Tests for delimiter tokenization."""

    def test_tokenizes_parentheses(self):
        assert kinds("()") == [TokenType.LPAREN, TokenType.RPAREN]

    def test_tokenizes_function_call(self):
        assert kinds('f(a, "x")') == [
            TokenType.SYMBOL,
            TokenType.LPAREN,
            TokenType.SYMBOL,
            TokenType.COMMA,
            TokenType.STRING,
            TokenType.RPAREN,
        ]


class TestWhitespaceHandling:
    """Tests for whitespace handling."""

    def test_ignores_spaces(self):
        assert kinds("  a  +  b  ") == [
            TokenType.SYMBOL,
            TokenType.PLUS,
            TokenType.SYMBOL,
        ]

    def test_ignores_tabs_and_newlines(self):
        assert kinds("\ta\n+\r\nb") == [
            TokenType.SYMBOL,
            TokenType.PLUS,
            TokenType.SYMBOL,
        ]

    def test_whitespace_separates_runs(self):
        tokens = tokenize("ab cd")
        assert [t.value for t in tokens[:-1]] == ["ab", "cd"]

    def test_empty_input_yields_only_eof(self):
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF


class TestErrorCases:
    """Tests for error handling."""

    def test_throws_on_invalid_character(self):
        with pytest.raises(LexError):
            tokenize("a @ b")

    def test_error_includes_context(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("abc $ def")
        error = exc_info.value
        assert "$" in str(error)
        assert error.character == "$"
        assert error.position == 4
        assert error.format_with_context().endswith("    ^")

    def test_expression_length_limit(self):
        limits = ExpressionLimits(max_expression_length=5)
        with pytest.raises(LimitExceededError):
            tokenize("abcdef", limits)

    def test_string_length_limit(self):
        limits = ExpressionLimits(max_string_length=3)
        tokenize('"abc"', limits)
        with pytest.raises(LimitExceededError):
            tokenize('"abcd"', limits)


class TestFormatting:
    """Tests for the token dump."""

    def test_formats_tokens_one_per_line(self):
        assert format_tokens(tokenize("f(0x1F)")) == (
            "[symbol f]\n[lparen (]\n[hex 1F]\n[rparen )]"
        )

    def test_token_str(self):
        assert str(tokenize("a")[0]) == "[symbol a]"

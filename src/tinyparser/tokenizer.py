"""
Tokenizer (lexer) for the expression language.

Converts expression strings into a list of tokens for the parser.

The scan is run based: symbols and numbers accumulate one character at a
time for as long as consecutive characters classify to the same kind, and
a change of kind closes the run. A bare ``0`` followed by ``x`` or ``b``
turns the open number run into a base-restricted run that accepts only
hexadecimal or binary digits.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .errors import LexError
from .limits import ExpressionLimits, check_expression_length, check_string_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Literals
    SYMBOL = "symbol"
    NUMBER = "number"
    STRING = "string"
    HEX = "hex"
    BIN = "bin"

    # Operators
    EQUAL = "equal"
    PLUS = "plus"
    MINUS = "minus"
    MUL = "mul"
    DIV = "div"
    CONCAT = "concat"

    # Delimiters
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"

    # Special
    EOF = "eof"


@dataclass
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int

    @property
    def restriction(self) -> Optional[str]:
        """The base restriction carried by hex/bin literals, if any."""
        if self.type in (TokenType.HEX, TokenType.BIN):
            return self.type.value
        return None

    def __str__(self) -> str:
        return f"[{self.type.value} {self.value}]"


# Single-character tokens
SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    ",": TokenType.COMMA,
    "=": TokenType.EQUAL,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

# Prefix letters that turn a bare "0" into a restricted literal
RESTRICTION_PREFIXES: Dict[str, TokenType] = {
    "x": TokenType.HEX,
    "b": TokenType.BIN,
}

# Digit alphabet accepted by each restricted literal
RESTRICTED_DIGITS: Dict[TokenType, str] = {
    TokenType.HEX: "0123456789abcdefABCDEF",
    TokenType.BIN: "01",
}


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


def _is_hex_digit(ch: str) -> bool:
    """Checks if a character is a hexadecimal digit."""
    return _is_digit(ch) or ("a" <= ch <= "f") or ("A" <= ch <= "F")


def _is_identifier_start(ch: str) -> bool:
    """Checks if a character can start a symbol."""
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_identifier_part(ch: str) -> bool:
    """Checks if a character can continue a symbol."""
    return _is_identifier_start(ch) or _is_digit(ch)


def _is_whitespace(ch: str) -> bool:
    """Checks if a character is whitespace."""
    return ch in (" ", "\t", "\n", "\r")


class Tokenizer:
    """Tokenizer for expression strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits
        self._position = 0
        self._tokens: List[Token] = []

        # The open run: its kind, the position of its token and where its
        # text begins (after the prefix for restricted literals).
        self._run_type: Optional[TokenType] = None
        self._run_position = 0
        self._text_start = 0

    def tokenize(self) -> List[Token]:
        """Tokenizes the source expression and returns all tokens."""
        check_expression_length(self._source, self._limits)

        while not self._is_at_end():
            self._scan_character()

        self._close_run(self._position)
        self._tokens.append(Token(TokenType.EOF, "", self._position))
        return self._tokens

    def _is_at_end(self) -> bool:
        return self._position >= len(self._source)

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._source[self._position]

    def _previous(self) -> str:
        """Returns the character before the one most recently advanced over."""
        if self._position < 2:
            return "\0"
        return self._source[self._position - 2]

    def _advance(self) -> str:
        ch = self._source[self._position]
        self._position += 1
        return ch

    def _add_token(self, token_type: TokenType, value: str, position: int) -> None:
        self._tokens.append(Token(token_type, value, position))

    def _open_run(self, token_type: TokenType, position: int) -> None:
        self._run_type = token_type
        self._run_position = position
        self._text_start = position

    def _close_run(self, end: int) -> None:
        """Finalizes the open run, if any, from the scanned span."""
        run_type = self._run_type
        if run_type is None:
            return
        self._run_type = None

        text = self._source[self._text_start : end]
        if run_type == TokenType.BIN and not text:
            raise LexError(
                "Empty binary literal", self._run_position, self._source, "b"
            )
        self._add_token(run_type, text, self._run_position)

    def _scan_character(self) -> None:
        start_position = self._position
        ch = self._advance()

        # Restricted literals only accept their own digit alphabet
        if self._run_type in RESTRICTED_DIGITS:
            if ch in RESTRICTED_DIGITS[self._run_type]:
                return
            if _is_identifier_part(ch):
                raise LexError(
                    f"Invalid digit '{ch}' in {self._run_type.value} literal",
                    start_position,
                    self._source,
                    ch,
                )
            self._close_run(start_position)

        if ch == "|":
            self._close_run(start_position)
            if self._peek() != "|":
                raise LexError(
                    "Unexpected '|'. Did you mean '||'?",
                    start_position,
                    self._source,
                    ch,
                )
            self._advance()
            self._add_token(TokenType.CONCAT, "||", start_position)
            return

        if ch in SINGLE_CHAR_TOKENS:
            self._close_run(start_position)
            self._add_token(SINGLE_CHAR_TOKENS[ch], ch, start_position)
            return

        if ch == '"':
            self._close_run(start_position)
            self._scan_string(start_position)
            return

        # Whitespace only closes the open run
        if _is_whitespace(ch):
            self._close_run(start_position)
            return

        if self._run_type == TokenType.NUMBER:
            if (
                ch in RESTRICTION_PREFIXES
                and self._previous() == "0"
                and self._run_position == start_position - 1
            ):
                self._run_type = RESTRICTION_PREFIXES[ch]
                self._text_start = self._position
                return
            if _is_hex_digit(ch):
                return

        if _is_digit(ch):
            token_type = (
                TokenType.SYMBOL
                if self._run_type == TokenType.SYMBOL
                else TokenType.NUMBER
            )
        elif _is_identifier_start(ch):
            token_type = TokenType.SYMBOL
        else:
            raise LexError(
                f"Unexpected character: '{ch}'", start_position, self._source, ch
            )

        if token_type == self._run_type:
            return

        self._close_run(start_position)
        self._open_run(token_type, start_position)

    def _scan_string(self, start_position: int) -> None:
        """Consumes a string verbatim; the token keeps both quotes."""
        while not self._is_at_end() and self._peek() != '"':
            self._advance()

        if self._is_at_end():
            raise LexError("Unterminated string", start_position, self._source, '"')

        # Consume closing quote
        self._advance()

        check_string_length(self._position - start_position - 2, self._limits)
        self._add_token(
            TokenType.STRING, self._source[start_position : self._position], start_position
        )


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Tokenizes an expression string into tokens.

    Args:
        source: The expression string to tokenize
        limits: Optional expression limits

    Returns:
        List of tokens, terminated by a single EOF token

    Raises:
        LexError: If the expression contains invalid tokens
        LimitExceededError: If the expression or a string literal is too long
    """
    tokenizer = Tokenizer(source, limits)
    return tokenizer.tokenize()


def format_tokens(tokens: Sequence[Token]) -> str:
    """Returns one ``[kind text]`` line per token, for debugging."""
    return "\n".join(str(token) for token in tokens if token.type != TokenType.EOF)

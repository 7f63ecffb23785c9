"""
Error types for the expression lexer and parser.

All expression errors extend ExpressionError for consistent handling.
Errors raised by an evaluation contract are never wrapped; they reach
the caller unchanged.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .tokenizer import Token


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class LexError(ExpressionError):
    """
    Error thrown during tokenization (lexical analysis).
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        character: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.character = character


class SyntaxError(ExpressionError):
    """
    Error thrown when the token stream does not form an expression.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        token: Optional["Token"] = None,
    ):
        super().__init__(message, position, expression)
        self.token = token


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual

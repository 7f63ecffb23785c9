"""
Resource limits for tokenizing and parsing expressions.

These limits keep pathological input from exhausting the recursion
stack or building unreasonably large trees.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum string literal length (quotes excluded)
    max_string_length: int = 1024

    # Maximum AST depth (nesting level)
    max_ast_depth: int = 32

    # Maximum number of AST nodes
    max_ast_nodes: int = 256

    # Maximum function call arguments
    max_function_args: int = 16

    # Maximum grammar nesting while parsing (one unit per parenthesis,
    # operand or argument level)
    max_parse_depth: int = 64


DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "max_expression_length", limits.max_expression_length, len(expression)
        )


def check_string_length(length: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates a string literal's length during tokenization."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if length > limits.max_string_length:
        raise LimitExceededError("max_string_length", limits.max_string_length, length)


def check_ast_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates AST depth after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_ast_depth:
        raise LimitExceededError("max_ast_depth", limits.max_ast_depth, depth)


def check_ast_node_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates AST node count after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_ast_nodes:
        raise LimitExceededError("max_ast_nodes", limits.max_ast_nodes, count)


def check_function_arg_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates function argument count."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_function_args:
        raise LimitExceededError("max_function_args", limits.max_function_args, count)


def check_parse_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates grammar rule nesting while parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_parse_depth:
        raise LimitExceededError("max_parse_depth", limits.max_parse_depth, depth)

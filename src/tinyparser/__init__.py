"""
Tiny expression language.

This package provides a lexer, a backtracking parser and an AST whose
evaluation is delegated entirely to a host-supplied contract.
"""

# Core types and utilities
from .ast import (
    AssignmentNode,
    AstNode,
    AstNodeBase,
    BaseRestriction,
    BinaryOperator,
    BinaryOpNode,
    CallNode,
    ListNode,
    LiteralKind,
    LiteralNode,
    UnaryOperator,
    VariableNode,
    calculate_ast_depth,
    count_ast_nodes,
    render,
)

# Engine
from .engine import (
    CompiledExpression,
    ExpressionEngine,
    ExpressionEngineConfig,
    resolve_expression_limits,
)
from .errors import (
    ExpressionError,
    LexError,
    LimitExceededError,
    SyntaxError,
)

# Evaluator
from .evaluator import (
    NO_VALUE,
    EvaluationContract,
    Evaluator,
    Ref,
    evaluate,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_expression_length,
    check_function_arg_count,
    check_parse_depth,
    check_string_length,
)

# Parser
from .parser import (
    Parser,
    parse,
    treeify,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    format_tokens,
    tokenize,
)

__all__ = [
    # AST types
    "AstNode",
    "AstNodeBase",
    "VariableNode",
    "LiteralNode",
    "AssignmentNode",
    "ListNode",
    "CallNode",
    "BinaryOpNode",
    "BinaryOperator",
    "UnaryOperator",
    "LiteralKind",
    "BaseRestriction",
    "count_ast_nodes",
    "calculate_ast_depth",
    "render",
    # Errors
    "ExpressionError",
    "LexError",
    "SyntaxError",
    "LimitExceededError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_expression_length",
    "check_string_length",
    "check_ast_depth",
    "check_ast_node_count",
    "check_function_arg_count",
    "check_parse_depth",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    "format_tokens",
    # Parser
    "Parser",
    "parse",
    "treeify",
    # Evaluator
    "EvaluationContract",
    "Evaluator",
    "NO_VALUE",
    "Ref",
    "evaluate",
    # Engine
    "CompiledExpression",
    "ExpressionEngine",
    "ExpressionEngineConfig",
    "resolve_expression_limits",
]

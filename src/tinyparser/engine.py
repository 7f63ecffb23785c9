"""
Compile-once, evaluate-many facade over the tokenizer and parser.

Hosts typically hold one engine configured with their limits, compile
each expression once and evaluate the compiled tree against a fresh
contract whenever it is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ast import AstNode, count_ast_nodes, render
from .errors import ExpressionError
from .evaluator import EvaluationContract, Ref, evaluate
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .parser import treeify
from .tokenizer import format_tokens, tokenize

logger = logging.getLogger("tinyparser.engine")


class ExpressionEngineConfig(BaseModel):
    """Configuration for an ExpressionEngine."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    # Expression limits - a limits object, a dict (snake_case or camelCase
    # keys) or None for the defaults
    expression_limits: ExpressionLimits | dict[str, Any] | None = Field(
        default=None, alias="expressionLimits"
    )

    # Whether to log the token dump of every compiled expression
    log_tokens: bool = Field(default=False, alias="logTokens")


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def resolve_expression_limits(
    value: ExpressionLimits | dict[str, Any] | None,
) -> ExpressionLimits:
    """
    Normalizes configured limits into an ExpressionLimits instance.

    Dict keys may use either snake_case or camelCase; missing keys keep
    their default values.
    """
    if value is None:
        return DEFAULT_EXPRESSION_LIMITS

    if isinstance(value, ExpressionLimits):
        return value

    known = {f.name for f in fields(ExpressionLimits)}
    aliases = {_to_camel(name): name for name in known}

    resolved: dict[str, int] = {}
    for key, item in value.items():
        name = aliases.get(key, key)
        if name not in known:
            raise ValueError(f"Unknown expression limit: {key}")
        if not isinstance(item, int) or isinstance(item, bool):
            raise ValueError(f"Expression limit {key} must be an integer")
        resolved[name] = item

    return ExpressionLimits(**resolved)


@dataclass(frozen=True)
class CompiledExpression:
    """A parsed expression ready for repeated evaluation."""

    # Original expression source
    source: str
    # Root of the parsed AST
    ast: AstNode

    def evaluate(self, contract: EvaluationContract) -> Ref:
        """Evaluates the compiled tree against a contract."""
        return evaluate(self.ast, contract)

    def render(self) -> str:
        """Returns the debug rendering of the compiled tree."""
        return render(self.ast)


class ExpressionEngine:
    """Compiles expressions with configured limits and evaluates them."""

    def __init__(
        self, config: Optional[ExpressionEngineConfig | dict[str, Any]] = None
    ):
        if config is None:
            config = ExpressionEngineConfig()
        elif isinstance(config, dict):
            config = ExpressionEngineConfig.model_validate(config)

        self._config = config
        self._limits = resolve_expression_limits(config.expression_limits)

    @property
    def limits(self) -> ExpressionLimits:
        return self._limits

    def compile(self, source: str) -> CompiledExpression:
        """
        Tokenizes and parses an expression.

        Args:
            source: The expression string to compile

        Returns:
            The compiled expression

        Raises:
            LexError: If tokenization fails
            SyntaxError: If parsing fails
            LimitExceededError: If a configured limit is exceeded
        """
        try:
            tokens = tokenize(source, self._limits)
            if self._config.log_tokens:
                logger.debug(
                    "expression_tokens",
                    extra={"expression": source, "tokens": format_tokens(tokens)},
                )
            ast = treeify(tokens, source, self._limits)
        except ExpressionError as e:
            logger.warning(
                "expression_compile_failed",
                extra={
                    "expression": source,
                    "error": str(e),
                    "error_position": e.position,
                },
            )
            raise

        logger.debug(
            "expression_compiled",
            extra={
                "expression": source,
                "node_count": count_ast_nodes(ast),
                "rendered": render(ast),
            },
        )
        return CompiledExpression(source=source, ast=ast)

    def run(self, source: str, contract: EvaluationContract) -> Ref:
        """Compiles an expression and evaluates it once."""
        return self.compile(source).evaluate(contract)

"""
Parser for the expression language.

Parses a list of tokens into an Abstract Syntax Tree (AST) using
backtracking recursive descent. Every rule takes a token position and
returns either a Match (the node plus the position after it) or None,
in which case nothing was consumed.

Alternatives, tried in order (first success wins):
1. Binary expression (only where the caller allows it)
2. Assignment (only at the top level)
3. Function call: symbol ( arg, ... )
4. Parenthesized expression
5. Variable
6. Restricted (hex/bin) literal
7. Plain literal

The left operand of a binary expression may not itself be a binary
expression, while the right operand may. Chains therefore group to the
right: ``a - b - c`` parses as ``a - (b - c)``. There is no operator
precedence; parentheses are the only way to group differently.
"""

from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple, cast

from .ast import (
    AssignmentNode,
    AstNode,
    BaseRestriction,
    BinaryOperator,
    BinaryOpNode,
    CallNode,
    ListNode,
    LiteralKind,
    LiteralNode,
    VariableNode,
    calculate_ast_depth,
    count_ast_nodes,
)
from .errors import SyntaxError as ExprSyntaxError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_function_arg_count,
    check_parse_depth,
)
from .tokenizer import Token, TokenType, tokenize


class Match(NamedTuple):
    """A successfully parsed node and the token position following it."""

    node: AstNode
    position: int


BINARY_OPERATORS: Dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.MUL: "*",
    TokenType.DIV: "/",
    TokenType.CONCAT: "||",
}

LITERAL_KINDS: Dict[TokenType, LiteralKind] = {
    TokenType.SYMBOL: "symbol",
    TokenType.NUMBER: "number",
    TokenType.STRING: "string",
}


class Parser:
    """Parser for token lists."""

    def __init__(
        self,
        tokens: Sequence[Token],
        source: Optional[str] = None,
        limits: Optional[ExpressionLimits] = None,
    ):
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            end = len(source) if source is not None else 0
            self._tokens.append(Token(TokenType.EOF, "", end))
        self._source = source
        self._limits = limits or DEFAULT_EXPRESSION_LIMITS

        # Furthest token position any rule has examined
        self._furthest = 0

        # Results per (position, allow_binary, allow_assignment) for this run
        self._memo: Dict[Tuple[int, bool, bool], Optional[Match]] = {}

    def parse(self) -> AstNode:
        """Parses the whole token list into an AST."""
        match = self._parse_expr(0, 1, allow_binary=True, allow_assignment=True)

        if match is None or not self._check(match.position, TokenType.EOF):
            raise self._error_at(self._tokens[self._furthest])

        ast = match.node

        # Validate AST limits
        node_count = count_ast_nodes(ast)
        check_ast_node_count(node_count, self._limits)

        depth = calculate_ast_depth(ast)
        check_ast_depth(depth, self._limits)

        return ast

    # ============================================================
    # Token Helpers
    # ============================================================

    def _token(self, position: int) -> Token:
        if position > self._furthest:
            self._furthest = position
        return self._tokens[position]

    def _check(self, position: int, token_type: TokenType) -> bool:
        return self._token(position).type == token_type

    def _error_at(self, token: Token) -> ExprSyntaxError:
        if token.type == TokenType.EOF:
            message = "Unexpected end of input"
        else:
            message = f"Unexpected token: {token.value or token.type.value}"
        return ExprSyntaxError(message, token.position, self._source, token)

    # ============================================================
    # Grammar Rules
    # ============================================================

    def _parse_expr(
        self,
        position: int,
        depth: int,
        allow_binary: bool = True,
        allow_assignment: bool = False,
    ) -> Optional[Match]:
        """Tries each alternative in order and returns the first match."""
        key = (position, allow_binary, allow_assignment)
        if key in self._memo:
            return self._memo[key]

        check_parse_depth(depth, self._limits)

        rules: List[Callable[[int, int], Optional[Match]]] = []
        if allow_binary:
            rules.append(self._parse_binary)
        if allow_assignment:
            rules.append(self._parse_assignment)
        rules.extend(
            (
                self._parse_call,
                self._parse_parenthesized,
                self._parse_variable,
                self._parse_restricted,
                self._parse_literal,
            )
        )

        match: Optional[Match] = None
        for rule in rules:
            match = rule(position, depth)
            if match is not None:
                break

        self._memo[key] = match
        return match

    def _parse_binary(self, position: int, depth: int) -> Optional[Match]:
        """Parses: expr(no binary) op expr"""
        # Same position, so no extra nesting
        lhs = self._parse_expr(position, depth, allow_binary=False)
        if lhs is None:
            return None

        op_token = self._token(lhs.position)
        operator = BINARY_OPERATORS.get(op_token.type)
        if operator is None:
            return None

        rhs = self._parse_expr(lhs.position + 1, depth + 1)
        if rhs is None:
            return None

        node = BinaryOpNode(
            position=op_token.position,
            operator=operator,
            left=lhs.node,
            right=rhs.node,
        )
        return Match(node, rhs.position)

    def _parse_assignment(self, position: int, depth: int) -> Optional[Match]:
        """Parses: symbol = expr"""
        name = self._token(position)
        if name.type != TokenType.SYMBOL or not self._check(
            position + 1, TokenType.EQUAL
        ):
            return None

        value = self._parse_expr(position + 2, depth + 1)
        if value is None:
            return None

        node = AssignmentNode(position=name.position, name=name.value, value=value.node)
        return Match(node, value.position)

    def _parse_call(self, position: int, depth: int) -> Optional[Match]:
        """Parses: symbol ( [expr [, expr ...]] )"""
        name = self._token(position)
        if name.type != TokenType.SYMBOL or not self._check(
            position + 1, TokenType.LPAREN
        ):
            return None

        args_position = position + 2
        args = self._parse_argument_list(args_position, depth)
        if args is None:
            elements: List[AstNode] = []
            end = args_position
        else:
            elements, end = args

        if not self._check(end, TokenType.RPAREN):
            return None

        check_function_arg_count(len(elements), self._limits)
        node = CallNode(
            position=name.position,
            name=name.value,
            args=ListNode(
                position=self._token(args_position).position,
                elements=tuple(elements),
            ),
        )
        return Match(node, end + 1)

    def _parse_argument_list(
        self, position: int, depth: int
    ) -> Optional[Tuple[List[AstNode], int]]:
        """Parses: expr [, expr ...] and returns the nodes and end position."""
        first = self._parse_expr(position, depth + 1)
        if first is None:
            return None

        elements = [first.node]
        position = first.position
        while self._check(position, TokenType.COMMA):
            following = self._parse_expr(position + 1, depth + 1)
            if following is None:
                break
            elements.append(following.node)
            position = following.position

        return elements, position

    def _parse_parenthesized(self, position: int, depth: int) -> Optional[Match]:
        """Parses: ( expr )"""
        if not self._check(position, TokenType.LPAREN):
            return None

        inner = self._parse_expr(position + 1, depth + 1)
        if inner is None or not self._check(inner.position, TokenType.RPAREN):
            return None

        return Match(inner.node, inner.position + 1)

    def _parse_variable(self, position: int, depth: int) -> Optional[Match]:
        """Parses: symbol"""
        token = self._token(position)
        if token.type != TokenType.SYMBOL:
            return None
        return Match(VariableNode(position=token.position, name=token.value), position + 1)

    def _parse_restricted(self, position: int, depth: int) -> Optional[Match]:
        """Parses: (0x | 0b) [number]"""
        token = self._token(position)
        if token.restriction is None:
            return None

        value = token.value
        end = position + 1

        # A bare prefix takes the digits of a separate number token
        if not value and self._check(end, TokenType.NUMBER):
            value = self._token(end).value
            end += 1

        node = LiteralNode(
            position=token.position,
            value=value,
            kind="number",
            restriction=cast(BaseRestriction, token.restriction),
        )
        return Match(node, end)

    def _parse_literal(self, position: int, depth: int) -> Optional[Match]:
        """Parses: symbol | number | string"""
        token = self._token(position)
        kind = LITERAL_KINDS.get(token.type)
        if kind is None:
            return None
        node = LiteralNode.from_token_text(token.position, token.value, kind)
        return Match(node, position + 1)


def treeify(
    tokens: Sequence[Token],
    source: Optional[str] = None,
    limits: Optional[ExpressionLimits] = None,
) -> AstNode:
    """
    Parses a token list into an AST, requiring every token to be consumed.

    Args:
        tokens: Tokens produced by ``tokenize``
        source: Optional source expression, for error context
        limits: Optional expression limits

    Returns:
        The root of the parsed AST

    Raises:
        SyntaxError: If no expression matches or tokens remain
        LimitExceededError: If the expression is too large or too deep
    """
    parser = Parser(tokens, source, limits)
    return parser.parse()


def parse(source: str, limits: Optional[ExpressionLimits] = None) -> AstNode:
    """
    Parses an expression string into an AST.

    Args:
        source: The expression string to parse
        limits: Optional expression limits

    Returns:
        The parsed AST

    Raises:
        LexError: If tokenization fails
        SyntaxError: If parsing fails
    """
    tokens = tokenize(source, limits)
    return treeify(tokens, source, limits)

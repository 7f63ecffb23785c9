"""
Abstract Syntax Tree (AST) node types for the expression language.

The AST is produced by the parser and consumed by the evaluator. Nodes
are immutable and own their children; the set of node kinds is closed
and every consumer dispatches on ``node.type``.
"""

from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Optional, Sequence, Union, cast

if TYPE_CHECKING:
    from .evaluator import EvaluationContract

# ============================================================
# Operator and Literal Types
# ============================================================

BinaryOperator = Literal["+", "-", "*", "/", "||"]

UnaryOperator = Literal["-"]

LiteralKind = Literal["symbol", "number", "string"]

BaseRestriction = Optional[Literal["hex", "bin"]]


# ============================================================
# AST Node Types
# ============================================================


@dataclass(frozen=True)
class AstNodeBase(ABC):
    """Base class for all AST nodes."""

    position: int
    """Position in source expression (for error reporting)."""

    def render(self) -> str:
        """Returns the debug rendering of this node."""
        return render(cast("AstNode", self))

    def evaluate(self, contract: "EvaluationContract") -> Any:
        """Evaluates this node against a host contract."""
        # Lazy import to avoid circular dependencies
        from .evaluator import evaluate

        return evaluate(cast("AstNode", self), contract)


@dataclass(frozen=True)
class VariableNode(AstNodeBase):
    """Variable reference node."""

    name: str

    @property
    def type(self) -> Literal["Variable"]:
        return "Variable"


@dataclass(frozen=True)
class LiteralNode(AstNodeBase):
    """Literal node (symbol, number or string, optionally base-restricted)."""

    value: str
    kind: LiteralKind
    restriction: BaseRestriction = None

    @property
    def type(self) -> Literal["Literal"]:
        return "Literal"

    @classmethod
    def from_token_text(
        cls,
        position: int,
        text: str,
        kind: LiteralKind,
        restriction: BaseRestriction = None,
    ) -> "LiteralNode":
        """Builds a literal from raw token text, stripping string quotes."""
        if kind == "string":
            text = text[1:-1]
        return cls(position=position, value=text, kind=kind, restriction=restriction)


@dataclass(frozen=True)
class AssignmentNode(AstNodeBase):
    """Assignment node (name = value)."""

    name: str
    value: "AstNode"

    @property
    def type(self) -> Literal["Assignment"]:
        return "Assignment"


@dataclass(frozen=True)
class ListNode(AstNodeBase):
    """Ordered argument list."""

    elements: Sequence["AstNode"]

    @property
    def type(self) -> Literal["List"]:
        return "List"


@dataclass(frozen=True)
class CallNode(AstNodeBase):
    """Function call node."""

    name: str
    args: ListNode

    @property
    def type(self) -> Literal["Call"]:
        return "Call"


@dataclass(frozen=True)
class BinaryOpNode(AstNodeBase):
    """Binary operator node."""

    operator: BinaryOperator
    left: "AstNode"
    right: "AstNode"

    @property
    def type(self) -> Literal["BinaryOp"]:
        return "BinaryOp"


# Union type for all AST nodes
AstNode = Union[
    VariableNode,
    LiteralNode,
    AssignmentNode,
    ListNode,
    CallNode,
    BinaryOpNode,
]


# ============================================================
# AST Utilities
# ============================================================


def count_ast_nodes(node: AstNode) -> int:
    """Counts the total number of nodes in an AST."""
    count = 1

    if node.type in ("Variable", "Literal"):
        return count

    if node.type == "Assignment":
        return count + count_ast_nodes(cast(AssignmentNode, node).value)

    if node.type == "List":
        for element in cast(ListNode, node).elements:
            count += count_ast_nodes(element)
        return count

    if node.type == "Call":
        return count + count_ast_nodes(cast(CallNode, node).args)

    if node.type == "BinaryOp":
        n = cast(BinaryOpNode, node)
        return count + count_ast_nodes(n.left) + count_ast_nodes(n.right)

    return count


def calculate_ast_depth(node: AstNode) -> int:
    """Calculates the maximum depth of an AST."""
    if node.type in ("Variable", "Literal"):
        return 1

    if node.type == "Assignment":
        return 1 + calculate_ast_depth(cast(AssignmentNode, node).value)

    if node.type == "List":
        max_child_depth = 0
        for element in cast(ListNode, node).elements:
            max_child_depth = max(max_child_depth, calculate_ast_depth(element))
        return 1 + max_child_depth

    if node.type == "Call":
        return 1 + calculate_ast_depth(cast(CallNode, node).args)

    if node.type == "BinaryOp":
        n = cast(BinaryOpNode, node)
        return 1 + max(calculate_ast_depth(n.left), calculate_ast_depth(n.right))

    return 1


def render(node: AstNode) -> str:
    """
    Returns a compact textual form of an AST for debugging.

    Binary operations are fully parenthesized in prefix form, so the
    grouping chosen by the parser is visible: ``a - b - c`` renders as
    ``(- a (- b c))``. The output is not meant to be parsed again.
    """
    if node.type == "Variable":
        return cast(VariableNode, node).name

    if node.type == "Literal":
        literal = cast(LiteralNode, node)
        return f"{literal.restriction or literal.kind}:{literal.value}"

    if node.type == "Assignment":
        assignment = cast(AssignmentNode, node)
        return f"{assignment.name} = {render(assignment.value)}"

    if node.type == "List":
        elements = cast(ListNode, node).elements
        return "[" + ", ".join(render(e) for e in elements) + "]"

    if node.type == "Call":
        call = cast(CallNode, node)
        return f"{call.name}({render(call.args)})"

    if node.type == "BinaryOp":
        binary = cast(BinaryOpNode, node)
        return f"({binary.operator} {render(binary.left)} {render(binary.right)})"

    return f"Unknown: {node}"

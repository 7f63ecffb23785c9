"""
Expression evaluator.

Evaluates an AST by delegating every meaningful operation to a
host-supplied evaluation contract. The language itself gives no meaning
to variables, operators, literals or functions; the contract does.

Evaluation semantics:
- Each node maps to exactly one contract call (lists map to none).
- Operands and arguments are evaluated strictly left to right.
- Values returned by the contract are opaque references and are passed
  back to the contract untouched.
- Errors raised by the contract propagate unchanged.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence, cast

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
    UnaryOperator,
    VariableNode,
)

# Opaque reference handle produced by an evaluation contract.
Ref = Any


class _NoValue:
    """Sentinel type for statements without a useful result."""

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


# Result of evaluating an assignment.
NO_VALUE = _NoValue()


class EvaluationContract(ABC):
    """
    Host-implemented semantics for expression evaluation.

    Every method returns an opaque reference that the evaluator never
    inspects; references only flow back into other contract calls.
    """

    @abstractmethod
    def load(self, name: str) -> Ref:
        """Returns the value of variable ``name``."""

    @abstractmethod
    def save(self, name: str, value: Ref) -> None:
        """Stores ``value`` in variable ``name``."""

    @abstractmethod
    def bin(self, operator: BinaryOperator, lhs: Ref, rhs: Ref) -> Ref:
        """Applies a binary operator."""

    @abstractmethod
    def unary(self, operator: UnaryOperator, value: Ref) -> Ref:
        """
        Applies a unary operator.

        No node produced by the parser calls this; it is part of the
        contract so hosts share one interface with callers that build
        their own trees.
        """

    @abstractmethod
    def fcall(self, name: str, args: Sequence[Ref]) -> Ref:
        """Calls function ``name`` with already evaluated arguments."""

    @abstractmethod
    def convert(
        self, value: str, kind: LiteralKind, restriction: BaseRestriction
    ) -> Ref:
        """Turns literal text into a reference."""


class Evaluator:
    """Evaluates an AST node against a contract and returns the result."""

    def __init__(self, contract: EvaluationContract):
        self._contract = contract

    def evaluate(self, node: AstNode) -> Ref:
        """Evaluates an AST node and returns the reference it produces."""
        node_type = node.type

        if node_type == "Variable":
            return self._contract.load(cast(VariableNode, node).name)

        if node_type == "Literal":
            n = cast(LiteralNode, node)
            return self._contract.convert(n.value, n.kind, n.restriction)

        if node_type == "Assignment":
            n = cast(AssignmentNode, node)
            self._contract.save(n.name, self.evaluate(n.value))
            return NO_VALUE

        if node_type == "List":
            return self.evaluate_list(cast(ListNode, node))

        if node_type == "Call":
            n = cast(CallNode, node)
            args = self.evaluate_list(n.args)
            return self._contract.fcall(n.name, args)

        if node_type == "BinaryOp":
            n = cast(BinaryOpNode, node)
            lhs = self.evaluate(n.left)
            rhs = self.evaluate(n.right)
            return self._contract.bin(n.operator, lhs, rhs)

        raise ValueError(f"Unknown AST node type: {node_type}")

    def evaluate_list(self, node: ListNode) -> List[Ref]:
        """Evaluates list elements in order."""
        return [self.evaluate(element) for element in node.elements]


def evaluate(ast: AstNode, contract: EvaluationContract) -> Ref:
    """
    Evaluates an AST against a contract.

    Args:
        ast: The AST to evaluate
        contract: The host semantics

    Returns:
        The reference produced by the root node, or NO_VALUE for an
        assignment
    """
    return Evaluator(contract).evaluate(ast)

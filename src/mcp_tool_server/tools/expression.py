"""Integer arithmetic expression evaluator.

Parses expressions with the Python parser and walks the tree, accepting
only decimal integer literals, parentheses, unary ``+``/``-`` and the binary
operators ``+ - * /``. Nothing is ever passed to ``eval``.
"""

from __future__ import annotations

import ast
import operator
from collections.abc import Callable


class ExpressionError(Exception):
    """Raised when an expression cannot be parsed or evaluated."""

    pass


def _divide(left: int, right: int) -> int:
    """Integer division truncating toward zero."""
    if right == 0:
        raise ExpressionError("division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


_BINARY_OPERATORS: dict[type[ast.operator], Callable[[int, int], int]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: _divide,
}

_UNARY_OPERATORS: dict[type[ast.unaryop], Callable[[int], int]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def evaluate(expression: str) -> int:
    """Evaluate an arithmetic expression.

    Args:
        expression: Expression such as ``"(10 - 2) / (1 + 3)"``.

    Returns:
        The integer result.

    Raises:
        ExpressionError: If the expression is malformed, uses unsupported
            syntax, or divides by zero.
    """
    source = expression.strip()
    if "#" in source:
        raise ExpressionError("parsing expression: unexpected character '#'")

    try:
        tree = ast.parse(source, mode="eval")
    except (SyntaxError, ValueError) as e:
        reason = e.msg if isinstance(e, SyntaxError) else str(e)
        raise ExpressionError(f"parsing expression: {reason}") from e
    except RecursionError as e:
        raise ExpressionError("parsing expression: expression is nested too deeply") from e

    try:
        return _eval_node(tree.body, source)
    except RecursionError as e:
        raise ExpressionError("expression is nested too deeply") from e


def _eval_node(node: ast.expr, source: str) -> int:
    if isinstance(node, ast.BinOp):
        binary = _BINARY_OPERATORS.get(type(node.op))
        if binary is None:
            raise ExpressionError(f"unsupported operator: {type(node.op).__name__}")
        return binary(_eval_node(node.left, source), _eval_node(node.right, source))

    if isinstance(node, ast.UnaryOp):
        unary = _UNARY_OPERATORS.get(type(node.op))
        if unary is None:
            raise ExpressionError(f"unsupported operator: {type(node.op).__name__}")
        return unary(_eval_node(node.operand, source))

    if isinstance(node, ast.Constant):
        # bool is a subclass of int
        if type(node.value) is int:
            # Only plain decimal digits; no 0x, 0b, 0o or underscores
            literal = ast.get_source_segment(source, node)
            if literal is None or not (literal.isascii() and literal.isdigit()):
                raise ExpressionError(f"unsupported literal: {literal}")
            return node.value
        raise ExpressionError(f"unsupported literal: {node.value!r}")

    raise ExpressionError(f"unsupported expression type: {type(node).__name__}")

"""
ExpressionEvaluator - inline arithmetic for the launcher.

A query qualifies only if it is made of digits, `+ - * / ( ) .` and spaces
and contains at least one operator. Anything else is "not applicable",
which is not an error.

Division follows integer semantics when both operands are integers
(truncating toward zero, so "10/4" is 2 and "-7/2" is -3) and IEEE float
semantics otherwise ("10.0/4" is 2.5, "1.0/0" is inf). Integer division by
zero is an error.
"""
import ast
import logging
import math
import operator
from typing import Callable, Dict, Optional, Union

from lumina.exceptions import ExpressionError
from lumina.models import CopyText, QueryResult
from lumina.search.outcome import ProviderOutcome

logger = logging.getLogger(__name__)

PROVIDER_NAME = "calculator"
CALCULATOR_SCORE = 0.9

_ALLOWED_CHARS = frozenset("0123456789+-*/(). ")
_OPERATORS = frozenset("+-*/")

Number = Union[int, float]


def divide(left: Number, right: Number) -> Number:
    if isinstance(left, int) and isinstance(right, int):
        if right == 0:
            raise ExpressionError("Division by zero")
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient

    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


_BINARY_OPS: Dict[type, Callable[[Number, Number], Number]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: divide,
}
_UNARY_OPS: Dict[type, Callable[[Number], Number]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def is_math_expression(query: str) -> bool:
    return (
        all(c in _ALLOWED_CHARS for c in query)
        and any(c in _OPERATORS for c in query)
    )


def _eval_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left, right = _eval_node(node.left), _eval_node(node.right)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ExpressionError(f"Unsupported syntax: {type(node).__name__}")


def format_number(value: Number) -> str:
    """Integral floats print without a fractional part ("2.5*2" -> "5")."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def evaluate_expression(expression: str) -> str:
    """
    Evaluate a qualifying expression and return the result as text.

    Raises:
        ExpressionError: on syntax the calculator does not accept
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise ExpressionError("Invalid math expression") from e
    try:
        return format_number(_eval_node(tree))
    except OverflowError as e:
        raise ExpressionError("Result out of range") from e


class ExpressionEvaluator:
    """Runs inline on the event loop; see `blocking`."""

    blocking = False

    def evaluate(self, query: str) -> Optional[QueryResult]:
        """
        Returns None when the query is not arithmetic.

        Raises:
            ExpressionError: the query is arithmetic but does not evaluate
        """
        if not is_math_expression(query):
            return None

        result = evaluate_expression(query)
        return QueryResult(
            id="calculator",
            title=f"{query} = {result}",
            description="Press Enter to copy result to clipboard",
            icon="🧮",
            action=CopyText(text=result),
            score=CALCULATOR_SCORE,
        )

    def search(self, query: str, deadline: Optional[float] = None) -> ProviderOutcome:
        try:
            result = self.evaluate(query)
        except ExpressionError as e:
            logger.debug(f"[Calculator] '{query}': {e}")
            return ProviderOutcome.failed(PROVIDER_NAME, e)

        if result is None:
            return ProviderOutcome.not_applicable(PROVIDER_NAME)
        return ProviderOutcome.matched(PROVIDER_NAME, [result])

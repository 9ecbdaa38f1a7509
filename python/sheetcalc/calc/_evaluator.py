"""Evaluator: walks an expression tree against the other cells of a sheet.

Every call re-derives its result from the context; nothing is cached
between calls, so edits never need invalidation.  References are followed
recursively, with the set of cells currently being evaluated threaded
through so that cycles end in an error instead of unbounded recursion.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sheetcalc._types import (
    BinaryExpression,
    EvaluationError,
    Expression,
    FunctionCall,
    IntResult,
    ListResult,
    Number,
    Reference,
    Result,
)
from sheetcalc.calc._functions import INTEGER_OPERATORS, FunctionRegistry, in_range, lift

logger = logging.getLogger(__name__)

Context = Sequence[Expression | None]


class Evaluator:
    """Evaluates parsed cells of a single-column sheet.

    Usage::

        evaluator = Evaluator()
        results = evaluator.evaluate_expressions([parse_expression("1"), parse_expression("A0+1")])

    ``column`` is the only column references may address; ``first_row`` is
    the row number of the first context entry.
    """

    def __init__(
        self,
        functions: FunctionRegistry | None = None,
        column: str = "A",
        first_row: int = 0,
    ) -> None:
        self.functions = functions if functions is not None else FunctionRegistry()
        self.column = column
        self.first_row = first_row

    def evaluate(self, expression: Expression | None, context: Context) -> Result:
        """Evaluate one expression; never raises for malformed input."""
        try:
            return self._evaluate(expression, context, frozenset())
        except RecursionError:
            logger.debug("Reference chain too deep to evaluate (%d cells)", len(context))
            return EvaluationError("reference chain too deep")

    def evaluate_expressions(self, expressions: Context) -> list[Result]:
        """Evaluate every cell against the same context, in order."""
        return [self.evaluate(e, expressions) for e in expressions]

    # ------------------------------------------------------------------
    # Recursive evaluation
    # ------------------------------------------------------------------

    def _evaluate(
        self,
        expression: Expression | None,
        context: Context,
        visiting: frozenset[int],
    ) -> Result:
        if expression is None:
            return EvaluationError("couldn't parse expression")
        if isinstance(expression, Number):
            if not in_range(expression.value):
                return EvaluationError("integer overflow")
            return IntResult(expression.value)
        if isinstance(expression, Reference):
            return self._evaluate_reference(expression, context, visiting)
        if isinstance(expression, BinaryExpression):
            return self._evaluate_binary(expression, context, visiting)
        if isinstance(expression, FunctionCall):
            argument = self._evaluate(expression.argument, context, visiting)
            return self._evaluate_function(expression.name, argument)
        return EvaluationError("couldn't evaluate expression")

    def _evaluate_reference(
        self,
        ref: Reference,
        context: Context,
        visiting: frozenset[int],
    ) -> Result:
        if ref.column != self.column:
            return EvaluationError("couldn't evaluate expression")
        index = ref.row - self.first_row
        if not 0 <= index < len(context):
            return EvaluationError(f"reference {ref} is out of range")
        if index in visiting:
            logger.debug("Circular reference to %s", ref)
            return EvaluationError(f"circular reference to {ref}")
        return self._evaluate(context[index], context, visiting | {index})

    def _evaluate_binary(
        self,
        expression: BinaryExpression,
        context: Context,
        visiting: frozenset[int],
    ) -> Result:
        op = expression.operator
        int_op = INTEGER_OPERATORS.get(op)
        if int_op is not None:
            left = self._evaluate(expression.left, context, visiting)
            right = self._evaluate(expression.right, context, visiting)
            return lift(int_op, op)(left, right)

        start, end = expression.left, expression.right
        if (
            op == ":"
            and isinstance(start, Reference)
            and isinstance(end, Reference)
            and start.column == self.column
            and end.column == self.column
            and start.row <= end.row
        ):
            # Rows past the last cell are all out of range; stop at the first.
            last = max(start.row, min(end.row, self.first_row + len(context)))
            return ListResult(tuple(
                self._evaluate_reference(Reference(self.column, row), context, visiting)
                for row in range(start.row, last + 1)
            ))

        return EvaluationError(f"couldn't find operator {op}")

    def _evaluate_function(self, name: str, argument: Result) -> Result:
        if not self.functions.has(name):
            logger.debug(
                "Unsupported function: %s (known: %s)",
                name, ", ".join(sorted(self.functions.supported_functions)),
            )
            return EvaluationError("couldn't evaluate function")
        func = self.functions.get(name)
        if not isinstance(argument, ListResult):
            return EvaluationError("couldn't evaluate function")
        return func(argument.items)


_default_evaluator = Evaluator()


def evaluate(expression: Expression | None, context: Context) -> Result:
    """Evaluate *expression* against *context* with the default evaluator."""
    return _default_evaluator.evaluate(expression, context)


def evaluate_expressions(expressions: Context) -> list[Result]:
    """Evaluate every cell of *expressions* against the whole list."""
    return _default_evaluator.evaluate_expressions(expressions)

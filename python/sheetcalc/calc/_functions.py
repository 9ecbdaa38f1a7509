"""Integer operators and builtin spreadsheet functions."""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from functools import reduce
from types import MappingProxyType

from sheetcalc._types import EvaluationError, IntResult, Result, first_error

# Cells hold signed 64-bit integers.
INT_MAX = 2**63 - 1
INT_MIN = -(2**63)

IntOperator = Callable[[int, int], int]
ResultCombiner = Callable[[Result, Result], Result]
Function = Callable[[tuple[Result, ...]], Result]


def in_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def checked(value: int) -> Result:
    """Wrap *value* as an IntResult, or an overflow error outside 64 bits."""
    if not in_range(value):
        return EvaluationError("integer overflow")
    return IntResult(value)


def truncating_div(x: int, y: int) -> int:
    """Integer division rounding toward zero (``-7 / 2 == -3``)."""
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


INTEGER_OPERATORS: Mapping[str, IntOperator] = MappingProxyType({
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": truncating_div,
})


def lift(f: IntOperator, symbol: str) -> ResultCombiner:
    """Turn an integer operation into one over results.

    Both operands must be IntResults.  An error operand is passed through
    unchanged; any other operand produces a new EvaluationError.
    """

    def combine(left: Result, right: Result) -> Result:
        if isinstance(left, IntResult) and isinstance(right, IntResult):
            try:
                return checked(f(left.value, right.value))
            except ZeroDivisionError:
                return EvaluationError("division by zero")
        err = first_error(left, right)
        if err is not None:
            return err
        return EvaluationError(f"couldn't evaluate {left} {symbol} {right}")

    return combine


# ---------------------------------------------------------------------------
# Builtins.  Each takes the evaluated items of a range.
# ---------------------------------------------------------------------------


def _builtin_sum(items: tuple[Result, ...]) -> Result:
    return reduce(lift(operator.add, "+"), items, IntResult(0))


def _builtin_min(items: tuple[Result, ...]) -> Result:
    return reduce(lift(min, "MIN"), items, IntResult(INT_MAX))


_BUILTINS: dict[str, Function] = {
    "SUM": _builtin_sum,
    "MIN": _builtin_min,
}


class FunctionRegistry:
    """Registry of callable function implementations.

    Starts with builtins and can be extended with custom functions.
    """

    def __init__(self) -> None:
        self._functions: dict[str, Function] = dict(_BUILTINS)

    def register(self, name: str, func: Function) -> None:
        self._functions[name.upper()] = func

    def get(self, name: str) -> Function | None:
        return self._functions.get(name.upper())

    def has(self, name: str) -> bool:
        return name.upper() in self._functions

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())

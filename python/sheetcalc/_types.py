"""Tokens, expression trees and evaluation results."""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Tokens: produced by the tokenizer, consumed by the grammar
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NumberToken:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OperatorToken:
    symbol: str

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class ReferenceToken:
    column: str
    row: int

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


@dataclass(frozen=True)
class PunctuationToken:
    symbol: str

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class FunctionNameToken:
    name: str

    def __str__(self) -> str:
        return self.name


Token = NumberToken | OperatorToken | ReferenceToken | PunctuationToken | FunctionNameToken


# ---------------------------------------------------------------------------
# Expressions: the syntax tree of one cell
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Number:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Reference:
    """A single cell address such as ``A3``."""

    column: str
    row: int

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


@dataclass(frozen=True)
class BinaryExpression:
    """``left <operator> right``.

    Ranges (``A1:A5``) are binary expressions with operator ``":"``.
    """

    operator: str
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"({self.left}) {self.operator} ({self.right})"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    argument: Expression

    def __str__(self) -> str:
        return f"{self.name}({self.argument})"


Expression = Number | Reference | BinaryExpression | FunctionCall


# ---------------------------------------------------------------------------
# Results: what a cell evaluates to
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IntResult:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringResult:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ListResult:
    """Values of a cell range, in row order.

    Only produced by range expressions and consumed by function calls.
    """

    items: tuple[Result, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


@dataclass(frozen=True)
class EvaluationError:
    """Error value that propagates through formula chains like any other result."""

    message: str

    def __str__(self) -> str:
        return f"Error: {self.message}"


Result = IntResult | StringResult | ListResult | EvaluationError


def first_error(*values: object) -> EvaluationError | None:
    """Return the first EvaluationError found in *values*, or None."""
    for v in values:
        if isinstance(v, EvaluationError):
            return v
    return None

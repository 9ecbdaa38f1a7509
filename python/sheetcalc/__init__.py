"""sheetcalc - Spreadsheet formulas parsed with backtracking parser combinators.

Usage::

    from sheetcalc import parse_expression, evaluate_expressions, Sheet

    cells = [parse_expression(text) for text in ["1", "2", "SUM(A0:A1)*3"]]
    [str(r) for r in evaluate_expressions(cells)]   # ['1', '2', '9']

    sheet = Sheet.sample()
    sheet.set_cell(0, "A1+A2")
    sheet.display(0)                                # '5'
"""

from sheetcalc._sheet import Sheet
from sheetcalc._types import (
    BinaryExpression,
    EvaluationError,
    Expression,
    FunctionCall,
    FunctionNameToken,
    IntResult,
    ListResult,
    Number,
    NumberToken,
    OperatorToken,
    PunctuationToken,
    Reference,
    ReferenceToken,
    Result,
    StringResult,
    Token,
)
from sheetcalc.calc import Evaluator, FunctionRegistry, evaluate, evaluate_expressions
from sheetcalc.parsing import parse_expression, tokenize_text

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BinaryExpression",
    "EvaluationError",
    "Evaluator",
    "Expression",
    "FunctionCall",
    "FunctionNameToken",
    "FunctionRegistry",
    "IntResult",
    "ListResult",
    "Number",
    "NumberToken",
    "OperatorToken",
    "PunctuationToken",
    "Reference",
    "ReferenceToken",
    "Result",
    "Sheet",
    "StringResult",
    "Token",
    "evaluate",
    "evaluate_expressions",
    "parse_expression",
    "tokenize_text",
]

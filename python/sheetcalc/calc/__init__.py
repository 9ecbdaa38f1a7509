"""sheetcalc.calc - Expression evaluation for single-column sheets."""

from sheetcalc.calc._evaluator import Evaluator, evaluate, evaluate_expressions
from sheetcalc.calc._functions import INTEGER_OPERATORS, FunctionRegistry
from sheetcalc.calc._graph import DependencyGraph, cell_references
from sheetcalc.calc._protocol import CellDelta, RecalcResult

__all__ = [
    "CellDelta",
    "DependencyGraph",
    "Evaluator",
    "FunctionRegistry",
    "INTEGER_OPERATORS",
    "RecalcResult",
    "cell_references",
    "evaluate",
    "evaluate_expressions",
]

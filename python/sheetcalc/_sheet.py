"""Sheet: a single column of formula cells kept up to date on every edit."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sheetcalc._types import Expression, IntResult, Result
from sheetcalc._utils import column_index
from sheetcalc.calc._evaluator import Evaluator
from sheetcalc.calc._graph import DependencyGraph
from sheetcalc.calc._protocol import CellDelta, RecalcResult
from sheetcalc.parsing._grammar import parse_expression

logger = logging.getLogger(__name__)


class Sheet:
    """Cell texts, their parsed expressions and current results.

    Rows are addressed by the numbers formulas use: with ``first_row=0`` the
    first cell is ``A0``, with ``first_row=1`` it is ``A1``.

    Usage::

        sheet = Sheet(["1", "2", "SUM(A0:A1)"])
        sheet.display(2)           # "3"
        sheet.set_cell(0, "10")    # RecalcResult with deltas for rows 0 and 2
    """

    __slots__ = ("_texts", "_expressions", "_results", "_evaluator", "_graph", "first_row")

    def __init__(
        self,
        texts: Iterable[str] = (),
        first_row: int = 0,
        evaluator: Evaluator | None = None,
    ) -> None:
        self.first_row = first_row
        self._evaluator = evaluator if evaluator is not None else Evaluator(first_row=first_row)
        if self._evaluator.first_row != first_row:
            raise ValueError(
                f"Evaluator first_row {self._evaluator.first_row} does not match sheet first_row {first_row}"
            )
        self._texts: list[str] = list(texts)
        self._expressions: list[Expression | None] = [parse_expression(t) for t in self._texts]
        self._graph = DependencyGraph.from_expressions(
            self._expressions, first_row, self._evaluator.column,
        )
        self._results: list[Result] = []
        self.calculate()

    @classmethod
    def sample(cls) -> Sheet:
        """Nine cells holding the numbers 1 to 9."""
        return cls([str(n) for n in range(1, 10)])

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._texts)

    def __getitem__(self, row: int) -> str:
        """Text of the cell at *row*."""
        return self._texts[self._index(row)]

    @property
    def texts(self) -> list[str]:
        return list(self._texts)

    @property
    def expressions(self) -> list[Expression | None]:
        return list(self._expressions)

    @property
    def results(self) -> list[Result]:
        return list(self._results)

    def result(self, row: int) -> Result:
        return self._results[self._index(row)]

    def display(self, row: int, editing: bool = False) -> str:
        """Cell text while it is being edited, its rendered result otherwise."""
        index = self._index(row)
        return self._texts[index] if editing else str(self._results[index])

    def _index(self, row: int) -> int:
        index = row - self.first_row
        if not 0 <= index < len(self._texts):
            raise IndexError(f"Row {row} is outside the sheet")
        return index

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self) -> list[Result]:
        """Re-evaluate every cell from scratch."""
        self._results = self._evaluator.evaluate_expressions(self._expressions)
        return list(self._results)

    def set_cell(self, row: int, text: str) -> RecalcResult:
        """Replace the text at *row* and recompute the cells that read from it."""
        index = self._index(row)
        expression = parse_expression(text)
        self._texts[index] = text
        self._expressions[index] = expression
        self._graph.set_cell(row, expression)
        logger.debug("Cell %s%d set to %r", self._evaluator.column, row, text)

        rows = sorted({row, *self._graph.affected_cells({row})})
        deltas: list[CellDelta] = []
        for r in rows:
            i = r - self.first_row
            old_value = self._results[i]
            new_value = self._evaluator.evaluate(self._expressions[i], self._expressions)
            self._results[i] = new_value
            if new_value != old_value:
                deltas.append(CellDelta(
                    row=r,
                    old_value=old_value,
                    new_value=new_value,
                    text=self._texts[i],
                ))

        return RecalcResult(
            edited_row=row,
            deltas=tuple(deltas),
            total_cells=len(self._texts),
            recalculated_cells=len(rows),
            max_chain_depth=self._graph.max_depth({row}),
        )

    # ------------------------------------------------------------------
    # openpyxl-compatible worksheets
    # ------------------------------------------------------------------

    @classmethod
    def from_worksheet(cls, worksheet: Any, column: str = "A") -> Sheet:
        """Build a sheet from one column of an openpyxl-style worksheet.

        Formula cells may start with ``=``; empty cells become empty text.
        Rows keep their worksheet numbers, so ``A1`` is the first cell.
        """
        if len(column) != 1:
            raise ValueError(f"Formulas can only address a single-letter column, got {column!r}")
        col = column_index(column)
        texts: list[str] = []
        for (value,) in worksheet.iter_rows(min_col=col, max_col=col, values_only=True):
            if value is None:
                texts.append("")
            elif isinstance(value, str):
                texts.append(value[1:] if value.startswith("=") else value)
            else:
                texts.append(str(value))
        return cls(texts, first_row=1, evaluator=Evaluator(column=column.upper(), first_row=1))

    def to_worksheet(self, worksheet: Any, column: str = "B") -> None:
        """Write every result into *column*, starting at worksheet row 1."""
        col = column_index(column)
        for offset, result in enumerate(self._results):
            value: int | str = result.value if isinstance(result, IntResult) else str(result)
            worksheet.cell(row=offset + 1, column=col, value=value)

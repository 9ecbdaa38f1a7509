"""Recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

from sheetcalc._types import Result


@dataclass(frozen=True)
class CellDelta:
    """A single cell's result change from recalculation."""

    row: int
    old_value: Result
    new_value: Result
    text: str  # the cell text that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Result of editing one cell and recomputing its dependents."""

    edited_row: int
    deltas: tuple[CellDelta, ...]  # cells whose result changed
    total_cells: int = 0
    recalculated_cells: int = 0  # edited cell plus everything that reads from it
    max_chain_depth: int = 0  # longest dependency chain from the edited cell

    @property
    def changed_rows(self) -> list[int]:
        return [d.row for d in self.deltas]

    @property
    def propagation_ratio(self) -> float:
        if self.total_cells == 0:
            return 0.0
        return len(self.deltas) / self.total_cells

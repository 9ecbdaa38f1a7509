"""Reference graph between the cells of a sheet."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

from sheetcalc._types import BinaryExpression, Expression, FunctionCall, Reference


def _walk_references(
    expression: Expression | None,
    column: str,
    last_row: int | None,
) -> Iterator[int]:
    if isinstance(expression, Reference):
        if expression.column == column:
            yield expression.row
    elif isinstance(expression, BinaryExpression):
        start, end = expression.left, expression.right
        if (
            expression.operator == ":"
            and isinstance(start, Reference)
            and isinstance(end, Reference)
            and start.column == column
            and end.column == column
        ):
            end_row = end.row if last_row is None else min(end.row, last_row)
            yield from range(start.row, end_row + 1)
        else:
            yield from _walk_references(start, column, last_row)
            yield from _walk_references(end, column, last_row)
    elif isinstance(expression, FunctionCall):
        yield from _walk_references(expression.argument, column, last_row)


def cell_references(
    expression: Expression | None,
    column: str = "A",
    last_row: int | None = None,
) -> list[int]:
    """Rows read by *expression* (ranges expanded), in order of first use.

    Ranges stop at *last_row* when it is given.
    """
    rows: list[int] = []
    seen: set[int] = set()
    for row in _walk_references(expression, column, last_row):
        if row not in seen:
            rows.append(row)
            seen.add(row)
    return rows


class DependencyGraph:
    """Tracks which cells read which, keyed by row number."""

    __slots__ = ("column", "last_row", "dependencies", "dependents")

    def __init__(self, column: str = "A", last_row: int | None = None) -> None:
        self.column = column
        # ranges are cut off here; None leaves them unbounded
        self.last_row = last_row
        # row -> rows it reads from
        self.dependencies: dict[int, set[int]] = {}
        # row -> rows that read from it (reverse edges)
        self.dependents: dict[int, set[int]] = {}

    def set_cell(self, row: int, expression: Expression | None) -> None:
        """Register (or replace) the references of the cell at *row*."""
        for ref in self.dependencies.pop(row, set()):
            self.dependents[ref].discard(row)

        refs = set(cell_references(expression, self.column, self.last_row))
        self.dependencies[row] = refs
        for ref in refs:
            self.dependents.setdefault(ref, set()).add(row)

    def affected_cells(self, changed_cells: Iterable[int]) -> list[int]:
        """All cells that transitively read from *changed_cells*, sorted by row.

        The changed cells themselves are included only if a cycle leads back
        to them.
        """
        affected: set[int] = set()
        queue: deque[int] = deque(changed_cells)

        while queue:
            cell = queue.popleft()
            for dep in self.dependents.get(cell, set()):
                if dep not in affected:
                    affected.add(dep)
                    queue.append(dep)

        return sorted(affected)

    def max_depth(self, roots: set[int]) -> int:
        """Longest dependency chain from *roots* through dependent cells.

        Cycles are cut off once a chain is as long as the number of cells.
        """
        if not roots:
            return 0

        limit = len(self.dependencies | self.dependents)
        depth: dict[int, int] = {r: 0 for r in roots}
        queue: deque[int] = deque(roots)
        max_d = 0

        while queue:
            cell = queue.popleft()
            new_depth = depth[cell] + 1
            if new_depth > limit:
                continue
            for dep in self.dependents.get(cell, set()):
                if dep not in depth or new_depth > depth[dep]:
                    depth[dep] = new_depth
                    max_d = max(max_d, new_depth)
                    queue.append(dep)

        return max_d

    @classmethod
    def from_expressions(
        cls,
        expressions: Iterable[Expression | None],
        first_row: int = 0,
        column: str = "A",
    ) -> DependencyGraph:
        expressions = list(expressions)
        graph = cls(column, last_row=first_row + len(expressions) - 1)
        for offset, expression in enumerate(expressions):
            graph.set_cell(first_row + offset, expression)
        return graph

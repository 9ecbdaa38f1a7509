"""Tests for the cell reference graph."""

from __future__ import annotations

from sheetcalc.calc._graph import DependencyGraph, cell_references
from sheetcalc.parsing._grammar import parse_expression


class TestCellReferences:
    def test_single(self) -> None:
        assert cell_references(parse_expression("A3+1")) == [3]

    def test_range_expanded(self) -> None:
        assert cell_references(parse_expression("SUM(A1:A3)*A0")) == [1, 2, 3, 0]

    def test_no_duplicates(self) -> None:
        assert cell_references(parse_expression("A1+A1+SUM(A0:A2)")) == [1, 0, 2]

    def test_other_columns_ignored(self) -> None:
        assert cell_references(parse_expression("B1+A2")) == [2]
        assert cell_references(parse_expression("B1+A2"), column="B") == [1]

    def test_none_and_literals(self) -> None:
        assert cell_references(None) == []
        assert cell_references(parse_expression("42")) == []


class TestDependencyGraph:
    def test_dependencies_and_dependents(self) -> None:
        g = DependencyGraph()
        g.set_cell(1, parse_expression("A0+1"))
        assert g.dependencies[1] == {0}
        assert g.dependents[0] == {1}

    def test_replacing_a_cell_drops_old_edges(self) -> None:
        g = DependencyGraph()
        g.set_cell(2, parse_expression("A0"))
        g.set_cell(2, parse_expression("A1"))
        assert g.dependencies[2] == {1}
        assert 2 not in g.dependents[0]
        assert g.dependents[1] == {2}

    def test_affected_cells_transitive(self) -> None:
        """A0 -> A1 -> A2, A3 independent."""
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["1", "A0*2", "A1+1", "7"]],
        )
        assert g.affected_cells({0}) == [1, 2]
        assert g.affected_cells({2}) == []

    def test_affected_cells_with_cycle(self) -> None:
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["A1", "A0"]],
        )
        assert g.affected_cells({0}) == [0, 1]

    def test_from_expressions_first_row(self) -> None:
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["5", "A1+1"]], first_row=1,
        )
        assert g.dependencies[2] == {1}

    def test_max_depth(self) -> None:
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["1", "A0", "A1", "A0+A2"]],
        )
        assert g.max_depth({0}) == 3
        assert g.max_depth({3}) == 0
        assert g.max_depth(set()) == 0

    def test_max_depth_terminates_on_cycle(self) -> None:
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["A1", "A0"]],
        )
        assert g.max_depth({0}) <= 2

    def test_ranges_clamped_to_sheet(self) -> None:
        g = DependencyGraph.from_expressions(
            [parse_expression(t) for t in ["1", "SUM(A0:A3000000)"]],
        )
        assert g.last_row == 1
        assert g.dependencies[1] == {0, 1}
        assert g.affected_cells({0}) == [1]


class TestClampedReferences:
    def test_range_clamped(self) -> None:
        expr = parse_expression("SUM(A1:A3000000)")
        assert cell_references(expr, last_row=3) == [1, 2, 3]

    def test_range_past_last_row_is_empty(self) -> None:
        assert cell_references(parse_expression("SUM(A5:A9)"), last_row=3) == []

    def test_single_references_are_kept(self) -> None:
        assert cell_references(parse_expression("A7+A1"), last_row=3) == [7, 1]

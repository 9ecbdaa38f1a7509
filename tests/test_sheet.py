"""Tests for the Sheet model: editing, recalculation and worksheet exchange."""

from __future__ import annotations

import pytest

import sheetcalc
from sheetcalc import EvaluationError, IntResult, Sheet
from sheetcalc.calc._evaluator import Evaluator
from sheetcalc.calc._protocol import RecalcResult


class TestConstruction:
    def test_sample(self) -> None:
        sheet = Sheet.sample()
        assert len(sheet) == 9
        assert sheet[0] == "1"
        assert [sheet.display(r) for r in range(9)] == [str(n) for n in range(1, 10)]

    def test_results_computed_on_creation(self) -> None:
        sheet = Sheet(["1", "2", "SUM(A0:A1)*3"])
        assert sheet.results == [IntResult(1), IntResult(2), IntResult(9)]

    def test_unparseable_cell_displays_error(self) -> None:
        sheet = Sheet(["1 +"])
        assert sheet.display(0) == "Error: couldn't parse expression"
        assert sheet.expressions == [None]

    def test_mismatched_evaluator(self) -> None:
        with pytest.raises(ValueError, match="first_row"):
            Sheet(["1"], first_row=1, evaluator=Evaluator())


class TestAccess:
    def test_display_while_editing_shows_text(self) -> None:
        sheet = Sheet(["2", "A0*21"])
        assert sheet.display(1) == "42"
        assert sheet.display(1, editing=True) == "A0*21"

    def test_row_outside_sheet(self) -> None:
        sheet = Sheet(["1"])
        with pytest.raises(IndexError, match="outside the sheet"):
            sheet.result(1)
        with pytest.raises(IndexError):
            sheet.set_cell(-1, "2")

    def test_first_row(self) -> None:
        sheet = Sheet(["5", "A1+1"], first_row=1)
        assert sheet.result(2) == IntResult(6)
        assert sheet[1] == "5"
        with pytest.raises(IndexError):
            sheet.result(0)

    def test_texts_is_a_copy(self) -> None:
        sheet = Sheet(["1"])
        sheet.texts.append("2")
        assert len(sheet) == 1


class TestSetCell:
    def test_dependents_recalculated(self) -> None:
        sheet = Sheet(["1", "A0*2", "A1+1", "7"])
        recalc = sheet.set_cell(0, "10")
        assert isinstance(recalc, RecalcResult)
        assert sheet.results == [IntResult(10), IntResult(20), IntResult(21), IntResult(7)]
        assert recalc.changed_rows == [0, 1, 2]
        assert recalc.recalculated_cells == 3
        assert recalc.total_cells == 4
        assert recalc.max_chain_depth == 2

    def test_delta_values(self) -> None:
        sheet = Sheet(["1", "A0+1"])
        recalc = sheet.set_cell(0, "5")
        delta = recalc.deltas[1]
        assert delta.row == 1
        assert delta.old_value == IntResult(2)
        assert delta.new_value == IntResult(6)
        assert delta.text == "A0+1"

    def test_unchanged_result_not_reported(self) -> None:
        sheet = Sheet(["4", "A0*0"])
        recalc = sheet.set_cell(0, "9")
        assert recalc.changed_rows == [0]
        assert recalc.propagation_ratio == 0.5

    def test_new_reference_tracked(self) -> None:
        sheet = Sheet(["1", "2", "3"])
        sheet.set_cell(2, "A0+A1")
        recalc = sheet.set_cell(1, "5")
        assert sheet.result(2) == IntResult(6)
        assert recalc.changed_rows == [1, 2]

    def test_cycle_then_repair(self) -> None:
        sheet = Sheet(["A1", "1"])
        sheet.set_cell(1, "A0")
        assert isinstance(sheet.result(0), EvaluationError)
        assert isinstance(sheet.result(1), EvaluationError)
        sheet.set_cell(1, "8")
        assert sheet.results == [IntResult(8), IntResult(8)]

    def test_matches_full_calculation(self) -> None:
        sheet = Sheet.sample()
        sheet.set_cell(8, "SUM(A0:A7)")
        sheet.set_cell(4, "MIN(A0:A3)*100")
        sheet.set_cell(0, "0-5")
        incremental = sheet.results
        assert incremental == sheet.calculate()
        assert sheet.display(8) == str(-5 + 2 + 3 + 4 + -500 + 6 + 7 + 8)

    def test_text_updated(self) -> None:
        sheet = Sheet(["1"])
        sheet.set_cell(0, "oops")
        assert sheet[0] == "oops"
        assert sheet.display(0) == "Error: couldn't parse expression"

    def test_long_chain(self) -> None:
        sheet = Sheet(["1"] + [f"A{row}+1" for row in range(1000)])
        assert sheet.display(50) == "51"
        assert sheet.display(1000) == "Error: reference chain too deep"
        recalc = sheet.set_cell(0, "2")
        assert sheet.display(50) == "52"
        assert recalc.recalculated_cells == 1001

    def test_huge_range(self) -> None:
        sheet = Sheet(["SUM(A1:A3000000)", "1"])
        assert sheet.display(0) == "Error: reference A2 is out of range"
        recalc = sheet.set_cell(1, "5")
        assert recalc.changed_rows == [1]
        assert recalc.recalculated_cells == 2


class TestPackageSurface:
    def test_top_level_round_trip(self) -> None:
        cells = [sheetcalc.parse_expression(t) for t in ["1", "2", "SUM(A0:A1)*3"]]
        assert [str(r) for r in sheetcalc.evaluate_expressions(cells)] == ["1", "2", "9"]

    def test_docstring_example(self) -> None:
        sheet = Sheet.sample()
        sheet.set_cell(0, "A1+A2")
        assert sheet.display(0) == "5"


class TestWorksheet:
    def test_from_worksheet(self) -> None:
        openpyxl = pytest.importorskip("openpyxl")
        wb = openpyxl.Workbook()
        ws = wb.active
        ws["A1"] = 10
        ws["A2"] = 20
        ws["A3"] = "=SUM(A1:A2)"
        ws["A4"] = "=A3*2"
        sheet = Sheet.from_worksheet(ws)
        assert sheet.first_row == 1
        assert sheet.texts == ["10", "20", "SUM(A1:A2)", "A3*2"]
        assert sheet.result(3) == IntResult(30)
        assert sheet.result(4) == IntResult(60)

    def test_empty_cells(self) -> None:
        openpyxl = pytest.importorskip("openpyxl")
        wb = openpyxl.Workbook()
        ws = wb.active
        ws["A1"] = 1
        ws["A3"] = "=A1+1"
        sheet = Sheet.from_worksheet(ws)
        assert sheet.texts == ["1", "", "A1+1"]
        assert sheet.result(3) == IntResult(2)
        assert sheet.display(2) == "Error: couldn't parse expression"

    def test_other_column(self) -> None:
        openpyxl = pytest.importorskip("openpyxl")
        wb = openpyxl.Workbook()
        ws = wb.active
        ws["C1"] = 4
        ws["C2"] = "=C1*C1"
        sheet = Sheet.from_worksheet(ws, column="C")
        assert sheet.result(2) == IntResult(16)

    def test_multi_letter_column_rejected(self) -> None:
        with pytest.raises(ValueError, match="single-letter column"):
            Sheet.from_worksheet(object(), column="AB")
        with pytest.raises(ValueError, match="single-letter column"):
            Sheet.from_worksheet(object(), column="")

    def test_to_worksheet(self) -> None:
        openpyxl = pytest.importorskip("openpyxl")
        wb = openpyxl.Workbook()
        ws = wb.active
        ws["A1"] = 6
        ws["A2"] = "=A1/0"
        ws["A3"] = "=A1*7"
        Sheet.from_worksheet(ws).to_worksheet(ws, column="B")
        assert ws["B1"].value == 6
        assert ws["B2"].value == "Error: division by zero"
        assert ws["B3"].value == 42

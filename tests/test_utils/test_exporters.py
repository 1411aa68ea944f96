"""Spreadsheet and print export tests"""

import os
from datetime import date

import pytest
from openpyxl import load_workbook

from student_housing_mcp.utils.exporters import (
    MAX_SHEET_TITLE,
    ExportError,
    build_workbook,
    export_filename,
    export_workbook,
    render_print_html,
    sheet_title,
)
from student_housing_mcp.utils.reports import ReportTable, lost_revenue_report
from tests.helpers.shared import TODAY


@pytest.fixture
def dues_table() -> ReportTable:
    return ReportTable(
        title="المستحقات النشطة",
        columns=["المبنى/الغرفة", "المبلغ المتبقي"],
        rows=[["1 / 2", 1700], ["1 / 4", 850]],
        totals=["الإجمالي", 2550],
    )


class TestSheetTitle:
    """sheet_title"""

    def test_reserved_characters_are_replaced(self):
        assert sheet_title("a/b:c*d?[e]") == "a-b-c-d--e-"

    def test_long_titles_are_cut(self):
        assert len(sheet_title("x" * 40)) == MAX_SHEET_TITLE

    def test_blank_title(self):
        assert sheet_title("  ") == "Sheet"


class TestBuildWorkbook:
    """build_workbook"""

    def test_layout(self, dues_table):
        ws = build_workbook([dues_table]).active
        assert ws.title == "المستحقات النشطة"
        assert ws.sheet_view.rightToLeft
        assert ws.freeze_panes == "A2"
        assert ws["A1"].value == "المبنى/الغرفة"
        assert ws["A1"].font.bold
        # header, two rows, footer
        assert ws.max_row == 4
        assert ws["B4"].value == 2550
        assert ws["B4"].font.bold
        assert not ws["B2"].font.bold

    def test_one_sheet_per_table(self, dues_table, mixed_state):
        wb = build_workbook([dues_table, lost_revenue_report(mixed_state)])
        assert len(wb.sheetnames) == 2

    def test_duplicate_titles_get_a_suffix(self, dues_table):
        wb = build_workbook([dues_table, dues_table])
        assert wb.sheetnames == ["المستحقات النشطة", "المستحقات النشطة 2"]

    def test_table_without_totals(self):
        table = ReportTable(title="t", columns=["a"], rows=[[1], [2]])
        assert build_workbook([table]).active.max_row == 3

    def test_nothing_to_export(self):
        with pytest.raises(ExportError):
            build_workbook([])


class TestExportWorkbook:
    """export_workbook"""

    def test_filename(self):
        assert export_filename("lost revenue/2", TODAY) == "lost_revenue_2_2025-03-01.xlsx"

    def test_writes_readable_file(self, dues_table, tmp_path):
        path = export_workbook([dues_table], str(tmp_path / "out"), "active_dues", TODAY)
        assert path == os.path.join(str(tmp_path / "out"), "active_dues_2025-03-01.xlsx")
        ws = load_workbook(path).active
        assert ws.sheet_view.rightToLeft
        assert [c.value for c in ws[2]] == ["1 / 2", 1700]

    def test_unwritable_directory(self, dues_table, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ExportError):
            export_workbook([dues_table], str(blocker), "active_dues", date(2025, 3, 1))


class TestPrintHtml:
    """render_print_html"""

    def test_page_prints_on_load(self, dues_table):
        page = render_print_html("مطالبة", table=dues_table)
        assert 'dir="rtl"' in page
        assert 'onload="window.print()"' in page
        assert "<th>المبلغ المتبقي</th>" in page
        assert "<tfoot><tr><td>الإجمالي</td><td>2550</td></tr></tfoot>" in page

    def test_text_is_escaped(self):
        page = render_print_html("<b>x</b>", text="a < b & c")
        assert "<b>x</b>" not in page
        assert "a &lt; b &amp; c" in page

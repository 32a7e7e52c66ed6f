"""Tests for the Excel workbook export."""

import openpyxl

from leaguehistory.excel_export import (
    ALL_PLAY_SHEET,
    CONSISTENCY_SHEET,
    HEAD_TO_HEAD_SHEET,
    RECORDS_SHEET,
    export_history_workbook,
)
from leaguehistory.records import RECORDS_COLUMNS


class TestExportWorkbook:
    """Tests for writing league history tables to .xlsx."""

    def test_records_only(self, tmp_path, history):
        path = export_history_workbook(tmp_path / 'exports' / 'history.xlsx', history.all_time_records())

        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == [RECORDS_SHEET]
        ws = wb[RECORDS_SHEET]
        assert [cell.value for cell in ws[1]] == [column.header for column in RECORDS_COLUMNS]
        assert ws['A2'].value == 'Alice'
        assert ws['C2'].value == 9
        assert ws.max_row == 5

    def test_all_sheets(self, tmp_path, history):
        path = export_history_workbook(
            tmp_path / 'history.xlsx',
            history.all_time_records(),
            head_to_head=history.head_to_head_matrix(),
            all_play=history.all_play_matrix('2006'),
            consistency=history.career_consistency_index(),
        )

        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == [RECORDS_SHEET, HEAD_TO_HEAD_SHEET, ALL_PLAY_SHEET, CONSISTENCY_SHEET]

        h2h = wb[HEAD_TO_HEAD_SHEET]
        assert h2h['A1'].value == 'Weeks: 2'
        assert h2h['B1'].value == 'Alice'
        # Carol's row, Alice's column
        assert h2h['B4'].value == '1-0'
        assert h2h['D4'].value is None
        assert h2h['F4'].value == '2-0'

        all_play = wb[ALL_PLAY_SHEET]
        assert all_play['A2'].value == 'Cleveland Steamers'

        consistency = wb[CONSISTENCY_SHEET]
        assert consistency['A2'].value == 'Alice'

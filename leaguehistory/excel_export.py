"""Export league history tables to an Excel workbook."""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .models import AllTimeRecordRow, OwnerConsistencyIndex, RecordMatrix
from .records import RECORDS_COLUMNS
from .utils import format_record

logger = logging.getLogger('leaguehistory.excel_export')

NUMBER_FORMATS = {
    'integer': '0',
    'percent2': '0.00',
    'decimal2': '0.00',
    'signedDecimal2': '+0.00;-0.00;0.00',
    'smartDecimal2': '0.##',
}

RECORDS_SHEET = 'All-Time Records'
HEAD_TO_HEAD_SHEET = 'Head-to-Head'
ALL_PLAY_SHEET = 'All-Play'
CONSISTENCY_SHEET = 'Consistency'


def write_records_sheet(ws, rows: list[AllTimeRecordRow]) -> None:
    """Write the all-time records table with column widths and number formats."""
    bold = Font(bold=True)
    for col_idx, column in enumerate(RECORDS_COLUMNS, start=1):
        header = ws.cell(row=1, column=col_idx, value=column.header)
        header.font = bold
        ws.column_dimensions[get_column_letter(col_idx)].width = column.width

    for row_idx, row in enumerate(rows, start=2):
        values = asdict(row)
        for col_idx, column in enumerate(RECORDS_COLUMNS, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=values[column.key])
            if column.format:
                cell.number_format = NUMBER_FORMATS[column.format]

    ws.freeze_panes = 'B2'


def write_matrix_sheet(ws, matrix: RecordMatrix) -> None:
    """
    Write a record matrix: rows and columns in display order, 'W-L-T' cells.

    The diagonal is left blank and a final column holds each team's total.
    """
    bold = Font(bold=True)
    ws.cell(row=1, column=1, value=f'Weeks: {matrix.weeks_count}').font = bold
    for col_idx, name in enumerate(matrix.team_names, start=2):
        ws.cell(row=1, column=col_idx, value=name).font = bold
    total_col = len(matrix.team_names) + 2
    ws.cell(row=1, column=total_col, value='Total').font = bold

    for row_idx, row_name in enumerate(matrix.team_names, start=2):
        ws.cell(row=row_idx, column=1, value=row_name).font = bold
        for col_idx, col_name in enumerate(matrix.team_names, start=2):
            if col_name == row_name:
                continue
            record = matrix.get_record(row_name, col_name)
            if record.games:
                ws.cell(
                    row=row_idx,
                    column=col_idx,
                    value=format_record(record.wins, record.losses, record.ties),
                )
        total = matrix.get_total_record(row_name)
        ws.cell(row=row_idx, column=total_col, value=format_record(total.wins, total.losses, total.ties))

    ws.column_dimensions['A'].width = max([len(name) for name in matrix.team_names] + [12]) + 2
    ws.freeze_panes = 'B2'


def write_consistency_sheet(ws, rows: list[OwnerConsistencyIndex]) -> None:
    headers = ('Owner Name', 'Seasons', 'Avg Season IQR', 'Avg PPG Std Dev')
    bold = Font(bold=True)
    for col_idx, header in enumerate(headers, start=1):
        ws.cell(row=1, column=col_idx, value=header).font = bold
    for row_idx, row in enumerate(rows, start=2):
        ws.cell(row=row_idx, column=1, value=row.owner_name)
        ws.cell(row=row_idx, column=2, value=row.seasons_included)
        ws.cell(row=row_idx, column=3, value=row.average_season_iqr).number_format = '0.00'
        ws.cell(row=row_idx, column=4, value=row.average_ppg_std_dev).number_format = '0.00'


def export_history_workbook(
    excel_path: Path | str,
    records: list[AllTimeRecordRow],
    head_to_head: Optional[RecordMatrix] = None,
    all_play: Optional[RecordMatrix] = None,
    consistency: Optional[list[OwnerConsistencyIndex]] = None,
) -> Path:
    """
    Write league history tables to a new workbook, replacing any existing file.

    Args:
        excel_path: Destination .xlsx path
        records: All-time records rows
        head_to_head: Optional head-to-head matrix
        all_play: Optional all-play matrix
        consistency: Optional consistency index rows

    Returns:
        Path written
    """
    excel_path = Path(excel_path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = RECORDS_SHEET
    write_records_sheet(ws, records)

    if head_to_head is not None:
        write_matrix_sheet(wb.create_sheet(HEAD_TO_HEAD_SHEET), head_to_head)
    if all_play is not None:
        write_matrix_sheet(wb.create_sheet(ALL_PLAY_SHEET), all_play)
    if consistency:
        write_consistency_sheet(wb.create_sheet(CONSISTENCY_SHEET), consistency)

    wb.save(str(excel_path))
    wb.close()

    logger.info(f'Wrote {len(records)} record rows to {excel_path}')
    return excel_path

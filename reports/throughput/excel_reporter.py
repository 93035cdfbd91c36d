"""Throughput Excel Reporter

CloudTrail 분석 결과(AnalysisResult)를 Excel 보고서로 저장합니다.

Sheet order:
1. Summary (분석 요약)
2. Event Counts (이벤트 빈도)
3. UpdateTable Events (용량 변경 이력)
4. Capacity by Table (테이블별 용량 요약)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from analyzers.dynamodb.throughput import summarize_capacity
from core.exceptions import CTAError

if TYPE_CHECKING:
    from openpyxl.worksheet.worksheet import Worksheet

    from analyzers.cloudtrail.pipeline import AnalysisResult

logger = logging.getLogger(__name__)


class ExcelReportError(CTAError):
    """Excel report generation error."""


@dataclass(frozen=True)
class SheetConfig:
    """시트 레벨 설정 상수.

    Attributes:
        EXCEL_MAX_ROWS: Excel 2007+ 최대 행 수.
        MAX_ROWS_PER_SHEET: 시트당 최대 데이터 행 수 (헤더 제외).
        HEADER_ROW_HEIGHT: 헤더 행 높이.
        DEFAULT_COLUMN_WIDTH: 기본 컬럼 너비.
        ZOOM_SCALE: 기본 확대/축소 비율.
        DATETIME_FORMAT: 날짜/시간 셀 표시 형식.
    """

    EXCEL_MAX_ROWS: int = 1_048_576
    MAX_ROWS_PER_SHEET: int = EXCEL_MAX_ROWS - 1
    HEADER_ROW_HEIGHT: int = 30
    DEFAULT_COLUMN_WIDTH: int = 15
    ZOOM_SCALE: int = 85
    DATETIME_FORMAT: str = "yyyy-mm-dd hh:mm:ss"


@dataclass(frozen=True)
class SheetNames:
    SUMMARY: str = "Summary"
    EVENT_COUNTS: str = "Event Counts"
    UPDATE_TABLE_EVENTS: str = "UpdateTable Events"
    CAPACITY_BY_TABLE: str = "Capacity by Table"


SHEET_CONFIG = SheetConfig()
SHEET_NAMES = SheetNames()

COLUMN_WIDTH_MAP: dict[str, int] = {
    "Rank": 8,
    "Event Name": 45,
    "Count": 12,
    "Percentage": 12,
    "Event Time": 22,
    "Table Name": 35,
    "First Event": 22,
    "Last Event": 22,
}

_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="305496", end_color="305496", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
_THIN = Side(style="thin", color="BFBFBF")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_TITLE_FONT = Font(bold=True, size=14)
_SECTION_FONT = Font(bold=True, size=11, color="305496")


def _cell_value(value: Any) -> Any:
    """Excel에 쓸 수 있는 값으로 변환 (NaN -> None, tz 제거)"""
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        if value.tzinfo is not None:
            value = value.tz_localize(None)
        return value.to_pydatetime()
    if isinstance(value, float) and math.isnan(value):
        return None
    if hasattr(value, "item"):
        # numpy scalar
        return value.item()
    return value


class ThroughputExcelReporter:
    """CloudTrail 용량 분석 Excel 보고서 생성기.

    Usage:
        reporter = ThroughputExcelReporter(result, output_dir="output")
        report_path = reporter.generate_report()
    """

    def __init__(self, result: AnalysisResult, output_dir: str | Path = "output") -> None:
        self.result = result
        self.output_dir = Path(output_dir)

    def generate_report(self, report_name: str | None = None) -> Path:
        """Excel 보고서 생성 후 경로 반환."""
        name = report_name or f"cloudtrail_throughput_{datetime.now():%Y%m%d_%H%M%S}"
        if not name.endswith(".xlsx"):
            name = f"{name}.xlsx"

        wb = Workbook()
        if wb.active is not None:
            wb.remove(wb.active)

        self._write_summary(wb)
        self._write_event_counts(wb)
        self._write_events(wb)
        self._write_capacity_summary(wb)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / name
        try:
            wb.save(output_path)
        except OSError as e:
            raise ExcelReportError(f"보고서 저장 실패: {output_path}", cause=e) from e

        logger.info(f"Excel 보고서 저장: {output_path}")
        return output_path

    # ------------------------------------------------------------------
    # Sheets
    # ------------------------------------------------------------------

    def _write_summary(self, wb: Workbook) -> None:
        ws = wb.create_sheet(SHEET_NAMES.SUMMARY)
        result = self.result
        table = result.table

        ws["A1"] = "CloudTrail DynamoDB 용량 분석 요약"
        ws["A1"].font = _TITLE_FONT

        rows: list[tuple[str, Any]] = [
            ("분석 대상", None),
            ("로그 루트", str(result.root)),
            ("폴더 수", len(result.folders)),
        ]
        if result.decompression is not None:
            rows.append(("압축 해제 파일", result.decompression.file_count))

        rows += [
            ("", None),
            ("이벤트 집계", None),
            ("총 이벤트", result.tally.total),
            ("고유 이벤트 종류", result.tally.unique),
            ("", None),
            (f"{result.target} 이벤트", None),
            ("매칭 이벤트", len(result.matched)),
            ("대상 테이블 수", int(table["tableName"].nunique()) if not table.empty else 0),
        ]
        if not table.empty:
            rows += [
                ("시작", _cell_value(table["eventTime"].min())),
                ("종료", _cell_value(table["eventTime"].max())),
            ]

        row_idx = 3
        for label, value in rows:
            if label and value is None:
                ws.cell(row=row_idx, column=1, value=label).font = _SECTION_FONT
            elif label:
                ws.cell(row=row_idx, column=1, value=label)
                cell = ws.cell(row=row_idx, column=2, value=value)
                if isinstance(value, datetime):
                    cell.number_format = SHEET_CONFIG.DATETIME_FORMAT
                elif isinstance(value, int):
                    cell.number_format = "#,##0"
            row_idx += 1

        ws.column_dimensions["A"].width = 22
        ws.column_dimensions["B"].width = 50

    def _write_event_counts(self, wb: Workbook) -> None:
        tally = self.result.tally
        rows = [
            [rank, name, count, round(count / tally.total * 100, 2) if tally.total else 0.0]
            for rank, (name, count) in enumerate(tally.counts, 1)
        ]
        self._write_table(
            wb,
            SHEET_NAMES.EVENT_COUNTS,
            ["Rank", "Event Name", "Count", "Percentage"],
            rows,
        )

    def _write_events(self, wb: Workbook) -> None:
        table = self.result.table
        rows = [
            [row.eventTime, row.tableName, row.readCapacityUnits, row.writeCapacityUnits]
            for row in table.itertuples(index=False)
        ]
        self._write_table(
            wb,
            SHEET_NAMES.UPDATE_TABLE_EVENTS,
            ["Event Time", "Table Name", "Read Capacity", "Write Capacity"],
            rows,
        )

    def _write_capacity_summary(self, wb: Workbook) -> None:
        summary = summarize_capacity(self.result.table)
        headers = [
            "Table Name",
            "Events",
            "First Event",
            "Last Event",
            "Min Read",
            "Max Read",
            "Last Read",
            "Min Write",
            "Max Write",
            "Last Write",
        ]
        self._write_table(wb, SHEET_NAMES.CAPACITY_BY_TABLE, headers, summary.values.tolist())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write_table(self, wb: Workbook, title: str, headers: list[str], rows: list[list[Any]]) -> Worksheet:
        ws = wb.create_sheet(title)
        ws.append(headers)
        ws.row_dimensions[1].height = SHEET_CONFIG.HEADER_ROW_HEIGHT

        for col_idx, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_idx)
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.alignment = _HEADER_ALIGN
            cell.border = _BORDER
            width = COLUMN_WIDTH_MAP.get(header, SHEET_CONFIG.DEFAULT_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        if len(rows) > SHEET_CONFIG.MAX_ROWS_PER_SHEET:
            logger.warning(f"{title}: {len(rows)}행 중 {SHEET_CONFIG.MAX_ROWS_PER_SHEET}행만 기록")
            rows = rows[: SHEET_CONFIG.MAX_ROWS_PER_SHEET]

        for row in rows:
            ws.append([_cell_value(v) for v in row])

        for row_cells in ws.iter_rows(min_row=2):
            for cell in row_cells:
                cell.border = _BORDER
                if isinstance(cell.value, datetime):
                    cell.number_format = SHEET_CONFIG.DATETIME_FORMAT

        ws.freeze_panes = "A2"
        if rows:
            ws.auto_filter.ref = ws.dimensions
        ws.sheet_view.zoomScale = SHEET_CONFIG.ZOOM_SCALE
        return ws

"""
reports/throughput - DynamoDB 용량 분석 보고서

모듈:
    charts.py           - 테이블별 용량 시계열 차트 (seaborn/matplotlib)
    excel_reporter.py   - Excel 보고서 생성 (openpyxl)
"""

from .charts import CHART_SPECS, ChartSpec, draw_chart, render_charts
from .excel_reporter import ExcelReportError, ThroughputExcelReporter

__all__: list[str] = [
    # 차트
    "CHART_SPECS",
    "ChartSpec",
    "draw_chart",
    "render_charts",
    # Excel
    "ExcelReportError",
    "ThroughputExcelReporter",
]

"""
reports/throughput/charts.py - DynamoDB 프로비저닝 용량 시계열 차트

테이블별 색상으로 용량 변경 이력을 그립니다. 차트는 3개입니다:

    1. writeCapacityUnits vs eventTime (범례 숨김)
    2. readCapacityUnits vs eventTime (범례 숨김)
    3. writeCapacityUnits vs eventTime (범례 표시)

쓰기 용량이 올라간 뒤 내려오지 않는 테이블을 육안으로 찾는 용도이며,
자동 판정은 하지 않습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from analyzers.dynamodb.throughput import COL_EVENT_TIME, COL_READ, COL_TABLE_NAME, COL_WRITE
from core.config import settings
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartSpec:
    """차트 1개 정의"""

    name: str
    y: str
    title: str
    legend: bool


CHART_SPECS: tuple[ChartSpec, ...] = (
    ChartSpec("write_capacity", COL_WRITE, "Write Capacity Units by Table", legend=False),
    ChartSpec("read_capacity", COL_READ, "Read Capacity Units by Table", legend=False),
    ChartSpec("write_capacity_legend", COL_WRITE, "Write Capacity Units by Table", legend=True),
)


def draw_chart(table: pd.DataFrame, spec: ChartSpec) -> plt.Figure:
    """ChartSpec 하나를 그린 Figure 반환"""
    plot_data = table
    if isinstance(table[COL_EVENT_TIME].dtype, pd.DatetimeTZDtype):
        # 축 표시는 현재 타임존의 벽시계 시간 기준
        plot_data = table.assign(**{COL_EVENT_TIME: table[COL_EVENT_TIME].dt.tz_localize(None)})

    fig, ax = plt.subplots(figsize=(settings.CHART_WIDTH, settings.CHART_HEIGHT))
    sns.lineplot(
        data=plot_data,
        x=COL_EVENT_TIME,
        y=spec.y,
        hue=COL_TABLE_NAME,
        estimator=None,
        legend="auto" if spec.legend else False,
        ax=ax,
    )
    ax.set_title(spec.title)
    ax.set_xlabel(COL_EVENT_TIME)
    ax.set_ylabel(spec.y)
    ax.grid(True, alpha=0.3)

    if spec.legend and ax.get_legend() is not None:
        sns.move_legend(ax, "upper left", bbox_to_anchor=(1.01, 1), title=COL_TABLE_NAME, fontsize="small")

    fig.autofmt_xdate()
    fig.tight_layout()
    return fig


def render_charts(
    table: pd.DataFrame,
    output_dir: str | Path | None = None,
    show: bool = False,
    specs: tuple[ChartSpec, ...] = CHART_SPECS,
) -> list[Path]:
    """용량 차트 렌더링

    Args:
        table: build_throughput_table() 결과
        output_dir: PNG 저장 디렉토리 (None이면 저장하지 않음)
        show: True이면 plt.show() 호출
        specs: 그릴 차트 목록

    Returns:
        저장된 PNG 경로 리스트

    Raises:
        ValidationError: 테이블이 비어 있는 경우
    """
    if table.empty:
        raise ValidationError("table", "empty", "1개 이상의 UpdateTable 이벤트")

    sns.set_style("whitegrid")
    saved: list[Path] = []
    figures: list[plt.Figure] = []

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    try:
        for spec in specs:
            fig = draw_chart(table, spec)
            figures.append(fig)
            if output_dir is not None:
                path = output_dir / f"{spec.name}.png"
                fig.savefig(path, dpi=settings.CHART_DPI, bbox_inches="tight")
                saved.append(path)
                logger.info(f"차트 저장: {path}")
        if show:
            plt.show()
    finally:
        for fig in figures:
            plt.close(fig)

    return saved

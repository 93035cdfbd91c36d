"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    cta --version                           # 버전 표시
    cta fetch s3://bucket/prefix DEST       # S3 아카이브 다운로드
    cta decompress ROOT                     # .gz 압축 해제
    cta tally ROOT                          # 이벤트 빈도표 (상위 25개 비율)
    cta throughput ROOT                     # UpdateTable 용량 요약
    cta plot ROOT -o output                 # 용량 차트 3종 저장
    cta report ROOT -o output               # Excel 보고서
    cta run ROOT                            # 전체 파이프라인

공통 옵션:
    -v / -vv        INFO / DEBUG 로그 출력
    -w, --workers   압축 해제/다운로드 워커 수 (기본: CTA_MAX_WORKERS 또는 4)

Usage:
    $ cta run ./cloudtrail -o output --workers 8
    $ python -m cli.app tally ./cloudtrail --top 10
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from core.config import LogConfig, get_output_dir, get_timezone, get_version, settings
from core.exceptions import CTAError

_log_config = LogConfig.from_env()

# WARNING 레벨로 설정하여 INFO 로그가 도구 출력에 섞이지 않도록 함
logging.basicConfig(
    level=logging.WARNING,
    format=_log_config.format,
    datefmt=_log_config.date_format,
)

logger = logging.getLogger(__name__)

VERSION = get_version()

F = TypeVar("F", bound=Callable[..., Any])

STAGE_LABELS = {
    "decompress": "압축 해제",
    "tally": "이벤트 집계",
    "filter": "UpdateTable 필터",
}


def _configure_logging(verbose: int) -> int:
    """루트 로그 레벨 설정 (-v/-vv > CTA_LOG_LEVEL > WARNING)"""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    elif os.getenv("CTA_LOG_LEVEL"):
        level = logging.getLevelName(LogConfig.from_env().level)
        if not isinstance(level, int):
            level = logging.WARNING
    else:
        level = logging.WARNING

    logging.getLogger().setLevel(level)
    return level


def handle_errors(func: F) -> F:
    """CTAError를 잡아 메시지 출력 후 종료 코드 1로 종료"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from cli.ui import print_error

        try:
            return func(*args, **kwargs)
        except CTAError as e:
            logger.debug("명령 실패", exc_info=True)
            print_error(str(e))
            raise SystemExit(1) from e

    return wrapper  # type: ignore[return-value]


def _parallel_config(workers: int | None):
    from core.parallel import ParallelConfig

    if workers is None:
        return ParallelConfig()
    return ParallelConfig(max_workers=workers)


def _load_table(root: str, event: str, timezone: str):
    """폴더 순회 -> 대상 이벤트 수집 -> 용량 테이블 (타임존 변환 포함)"""
    from analyzers.cloudtrail import collect_events, list_leaf_folders
    from analyzers.dynamodb import build_throughput_table, convert_timezone
    from cli.ui import folder_progress

    folders = list_leaf_folders(root)
    with folder_progress(f"'{event}' 수집", total=len(folders), unit="matched") as tracker:
        matched = collect_events(folders, event, on_folder=tracker.as_callback())

    table = build_throughput_table(matched)
    if timezone.upper() != "UTC" and not table.empty:
        table = convert_timezone(table, timezone)
    return table


def _print_tally(tally, top: int) -> None:
    from cli.ui import console, print_table

    rows = [
        [rank, name, f"{count:,}", f"{pct:.2f}%"]
        for rank, (name, count, pct) in enumerate(tally.percentages(top), 1)
    ]
    print_table(
        f"이벤트 빈도 (상위 {top})",
        ["#", "Event Name", "Count", "Percentage"],
        rows,
        justify={"#": "right", "Count": "right", "Percentage": "right"},
    )
    console.print(f"총 이벤트: [bold]{tally.total:,}[/bold]  고유 이벤트: [bold]{tally.unique:,}[/bold]")


def _print_capacity_summary(table) -> None:
    import pandas as pd

    from analyzers.dynamodb import summarize_capacity
    from cli.ui import print_table

    summary = summarize_capacity(table)

    def fmt(value: Any) -> str:
        if pd.isna(value):
            return "-"
        if isinstance(value, float) and value.is_integer():
            return f"{int(value):,}"
        return str(value)

    rows = [
        [
            row.tableName,
            row.events,
            fmt(row.minRead),
            fmt(row.maxRead),
            fmt(row.lastRead),
            fmt(row.minWrite),
            fmt(row.maxWrite),
            fmt(row.lastWrite),
        ]
        for row in summary.itertuples(index=False)
    ]
    print_table(
        "테이블별 용량 변경",
        ["Table", "Events", "Min R", "Max R", "Last R", "Min W", "Max W", "Last W"],
        rows,
    )


# =============================================================================
# CLI 그룹
# =============================================================================


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=VERSION, prog_name="cta")
@click.option("-v", "--verbose", count=True, help="로그 상세도 (-v: INFO, -vv: DEBUG)")
def cli(verbose: int) -> None:
    """CloudTrail DynamoDB 프로비저닝 용량 분석 도구"""
    _configure_logging(verbose)


workers_option = click.option(
    "-w",
    "--workers",
    type=click.IntRange(1, settings.MAX_WORKERS_LIMIT),
    default=None,
    help=f"워커 수 (기본: CTA_MAX_WORKERS 또는 {settings.DEFAULT_MAX_WORKERS})",
)
root_argument = click.argument("root", type=click.Path(file_okay=False, path_type=str))
output_option = click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help="출력 디렉토리 (기본: CTA_OUTPUT_DIR 또는 output)",
)
timezone_option = click.option(
    "--timezone",
    "timezone",
    default=None,
    help="차트/요약 시간축 타임존 (기본: CTA_TIMEZONE 또는 UTC)",
)


@cli.command()
@click.argument("s3_uri")
@click.argument("dest", type=click.Path(file_okay=False, path_type=str))
@click.option("-p", "--profile", default=None, help="AWS 프로파일")
@click.option("-r", "--region", default=None, help="AWS 리전")
@workers_option
@handle_errors
def fetch(s3_uri: str, dest: str, profile: str | None, region: str | None, workers: int | None) -> None:
    """S3의 CloudTrail 아카이브를 DEST/YYYY-MM/DD 구조로 다운로드"""
    import boto3

    from analyzers.cloudtrail.fetch import fetch_logs
    from cli.ui import parallel_progress, print_success

    session = boto3.Session(profile_name=profile, region_name=region)
    s3_client = session.client("s3")

    with parallel_progress("S3 다운로드") as tracker:
        count = fetch_logs(s3_client, s3_uri, dest, _parallel_config(workers), progress_tracker=tracker)

    print_success(f"{count}개 파일 다운로드: {dest}")


@cli.command()
@root_argument
@workers_option
@handle_errors
def decompress(root: str, workers: int | None) -> None:
    """ROOT 아래 월/일 폴더의 .gz 파일 압축 해제"""
    from analyzers.cloudtrail import decompress_folders, list_leaf_folders
    from cli.ui import folder_progress, print_success

    folders = list_leaf_folders(root)
    with folder_progress("압축 해제", total=len(folders), unit="files") as tracker:
        summary = decompress_folders(folders, _parallel_config(workers), on_folder=tracker.as_callback())

    print_success(
        f"{summary.file_count}개 파일 압축 해제 (폴더 {summary.folders_with_archives}/{summary.folders_scanned})"
    )


@cli.command()
@root_argument
@click.option("-n", "--top", type=click.IntRange(1), default=settings.TOP_EVENTS, show_default=True)
@handle_errors
def tally(root: str, top: int) -> None:
    """이벤트 이름 빈도표 출력"""
    from analyzers.cloudtrail import list_leaf_folders, tally_events
    from cli.ui import folder_progress

    folders = list_leaf_folders(root)
    with folder_progress("이벤트 집계", total=len(folders), unit="records") as tracker:
        result = tally_events(folders, on_folder=tracker.as_callback())

    _print_tally(result, top)


@cli.command()
@root_argument
@click.option("-e", "--event", default=settings.TARGET_EVENT, show_default=True, help="대상 이벤트 (부분 일치)")
@timezone_option
@handle_errors
def throughput(root: str, event: str, timezone: str | None) -> None:
    """UpdateTable 이벤트의 테이블별 용량 변경 요약"""
    from cli.ui import print_warning

    table = _load_table(root, event, timezone or get_timezone())
    if table.empty:
        print_warning(f"'{event}' 이벤트가 없습니다")
        return

    _print_capacity_summary(table)


@cli.command()
@root_argument
@output_option
@timezone_option
@click.option("--show", is_flag=True, help="차트 창 표시")
@handle_errors
def plot(root: str, output_dir: str | None, timezone: str | None, show: bool) -> None:
    """테이블별 읽기/쓰기 용량 시계열 차트 저장"""
    from cli.ui import print_success
    from reports.throughput import render_charts

    table = _load_table(root, settings.TARGET_EVENT, timezone or get_timezone())
    paths = render_charts(table, output_dir=Path(output_dir) if output_dir else get_output_dir(), show=show)
    for path in paths:
        print_success(f"차트 저장: {path}")


@cli.command()
@root_argument
@output_option
@handle_errors
def report(root: str, output_dir: str | None) -> None:
    """Excel 보고서 생성 (압축 해제는 하지 않음)"""
    from analyzers.cloudtrail import list_leaf_folders, run_analysis
    from cli.ui import print_success, stage_progress
    from reports.throughput import ThroughputExcelReporter

    folders = list_leaf_folders(root)
    with stage_progress(STAGE_LABELS, total=len(folders)) as tracker:
        result = run_analysis(root, decompress=False, on_folder=tracker.on_folder)

    path = ThroughputExcelReporter(result, output_dir or get_output_dir()).generate_report()
    print_success(f"Excel 보고서 저장: {path}")


@cli.command()
@root_argument
@workers_option
@output_option
@timezone_option
@click.option("--skip-decompress", is_flag=True, help="압축 해제 단계 건너뜀")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["png", "excel", "both", "none"]),
    default="png",
    show_default=True,
    help="출력 형식",
)
@click.option("-n", "--top", type=click.IntRange(1), default=settings.TOP_EVENTS, show_default=True)
@click.option("--show", is_flag=True, help="차트 창 표시")
@handle_errors
def run(
    root: str,
    workers: int | None,
    output_dir: str | None,
    timezone: str | None,
    skip_decompress: bool,
    output_format: str,
    top: int,
    show: bool,
) -> None:
    """전체 파이프라인: 압축 해제 -> 집계 -> 필터 -> 테이블 -> 차트"""
    from analyzers.cloudtrail import list_leaf_folders, run_analysis
    from analyzers.dynamodb import convert_timezone
    from cli.ui import (
        print_info,
        print_step_header,
        print_sub_task_done,
        print_success,
        print_warning,
        stage_progress,
    )
    from reports.throughput import ThroughputExcelReporter, render_charts

    out_dir = Path(output_dir) if output_dir else get_output_dir()
    tz_name = timezone or get_timezone()

    folders = list_leaf_folders(root)
    print_step_header(1, 3, "로그 분석")
    print_info(f"leaf 폴더 {len(folders)}개")

    with stage_progress(STAGE_LABELS, total=len(folders)) as tracker:
        result = run_analysis(
            root,
            config=_parallel_config(workers),
            decompress=not skip_decompress,
            on_folder=tracker.on_folder,
        )

    if result.decompression is not None:
        print_sub_task_done(f"압축 해제 {result.decompression.file_count}개 파일")

    print_step_header(2, 3, "요약")
    _print_tally(result.tally, top)

    table = result.table
    if table.empty:
        print_warning(f"'{result.target}' 이벤트가 없습니다")
        return

    print_success(f"'{result.target}' 이벤트 {len(table)}건, 테이블 {table['tableName'].nunique()}개")
    _print_capacity_summary(table)

    print_step_header(3, 3, "출력")
    if output_format in ("excel", "both"):
        path = ThroughputExcelReporter(result, out_dir).generate_report()
        print_sub_task_done(f"Excel 보고서 저장: {path}")

    if output_format in ("png", "both") or show:
        chart_table = convert_timezone(table, tz_name) if tz_name.upper() != "UTC" else table
        save_dir = out_dir if output_format in ("png", "both") else None
        for path in render_charts(chart_table, output_dir=save_dir, show=show):
            print_sub_task_done(f"차트 저장: {path}")


if __name__ == "__main__":
    cli()

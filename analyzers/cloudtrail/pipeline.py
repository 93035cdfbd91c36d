"""
analyzers/cloudtrail/pipeline.py - CloudTrail 용량 분석 파이프라인

walk -> decompress -> tally -> filter -> build table 순서의 선형 배치 처리입니다.
분기 상태 없이 성공 또는 중단(예외)만 존재합니다.

Example:
    from analyzers.cloudtrail.pipeline import run_analysis

    result = run_analysis("/data/cloudtrail")
    for name, count, pct in result.tally.percentages(25):
        print(f"{name}: {pct:.2f}%")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from analyzers.dynamodb.throughput import ThroughputEvent, build_throughput_table
from core.config import settings
from core.parallel import ParallelConfig

from .decompress import DecompressionSummary, decompress_folders
from .filters import collect_events
from .records import LogRecord
from .tally import EventTally, tally_events
from .walker import list_leaf_folders

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

# (단계 이름, 폴더, 값) 진행 콜백
StageCallback = Callable[[str, Path, int], None]

STAGE_DECOMPRESS = "decompress"
STAGE_TALLY = "tally"
STAGE_FILTER = "filter"


@dataclass(frozen=True)
class AnalysisResult:
    """파이프라인 1회 실행 결과

    Attributes:
        root: 로그 루트
        folders: leaf 폴더 목록
        decompression: 압축 해제 결과 (건너뛴 경우 None)
        tally: 이벤트 빈도표
        target: 필터 대상 이벤트 이름
        matched: 대상 이벤트 레코드
        events: 용량 이벤트
        table: 용량 테이블
    """

    root: Path
    folders: tuple[Path, ...]
    decompression: DecompressionSummary | None
    tally: EventTally
    target: str
    matched: tuple[LogRecord, ...]
    events: tuple[ThroughputEvent, ...]
    table: pd.DataFrame


def run_analysis(
    root: str | Path,
    config: ParallelConfig | None = None,
    decompress: bool = True,
    target: str = settings.TARGET_EVENT,
    on_folder: StageCallback | None = None,
) -> AnalysisResult:
    """전체 분석 파이프라인 실행

    Args:
        root: 로그 루트 디렉토리
        config: 압축 해제 병렬 설정
        decompress: False이면 압축 해제 단계를 건너뜀
        target: 필터 대상 이벤트 이름
        on_folder: 단계별 폴더 처리 완료 콜백 (stage, folder, value)

    Returns:
        AnalysisResult

    Raises:
        CTAError: 어느 단계든 실패 시 (재시도/부분 결과 없음)
    """
    root = Path(root)
    folders = list_leaf_folders(root)

    def stage_callback(stage: str) -> Callable[[Path, int], None] | None:
        if on_folder is None:
            return None
        return lambda folder, value: on_folder(stage, folder, value)

    decompression = None
    if decompress:
        decompression = decompress_folders(folders, config, on_folder=stage_callback(STAGE_DECOMPRESS))
        logger.info(f"압축 해제: {decompression.file_count}개 파일")

    tally = tally_events(folders, on_folder=stage_callback(STAGE_TALLY))
    matched = collect_events(folders, target, on_folder=stage_callback(STAGE_FILTER))
    events = tuple(ThroughputEvent.from_record(record) for record in matched)
    table = build_throughput_table(events)

    return AnalysisResult(
        root=root,
        folders=tuple(folders),
        decompression=decompression,
        tally=tally,
        target=target,
        matched=matched,
        events=events,
        table=table,
    )

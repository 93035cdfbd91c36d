"""
analyzers/cloudtrail/filters.py - eventName 기반 레코드 필터

대상 이벤트 이름을 부분 문자열로 포함하는 레코드만 선택합니다.
기본 대상은 DynamoDB ``UpdateTable`` 입니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from core.config import settings

from .records import LogRecord, get_event_name, list_json_files, read_records

logger = logging.getLogger(__name__)


def matches_event(record: LogRecord, target: str = settings.TARGET_EVENT) -> bool:
    """eventName에 target이 포함되어 있는지 확인"""
    return target in get_event_name(record)


def filter_events(records: Iterable[LogRecord], target: str = settings.TARGET_EVENT) -> list[LogRecord]:
    """target 이벤트만 남긴 레코드 리스트 (순서 유지)"""
    return [record for record in records if matches_event(record, target)]


def collect_events(
    folders: Sequence[str | Path],
    target: str = settings.TARGET_EVENT,
    on_folder: Callable[[Path, int], None] | None = None,
) -> tuple[LogRecord, ...]:
    """폴더 목록 전체에서 target 이벤트 레코드 수집

    폴더 단위로 누적하며, 폴더가 끝날 때마다 on_folder(folder, 누적 매칭 수)를
    호출해 진행 상황을 알립니다.

    Returns:
        매칭된 레코드 튜플 (파일 순회 순서)
    """
    matched: list[LogRecord] = []
    for folder in folders:
        folder = Path(folder)
        for path in list_json_files(folder):
            matched.extend(filter_events(read_records(path), target))

        logger.debug(f"{folder}: 누적 {len(matched)}건 매칭")
        if on_folder:
            on_folder(folder, len(matched))

    logger.info(f"'{target}' 이벤트 {len(matched)}건 수집")
    return tuple(matched)

"""
analyzers/cloudtrail/records.py - CloudTrail JSON 파일 로드 및 레코드 평탄화

JSON 파일 구조:
    파일 하나는 배치 배열이고, 각 배치는 이벤트 객체 배열입니다 (중첩 깊이 2).

        [[{"eventName": ...}, {...}], [{...}]]

    평탄한 레코드 배열(깊이 1)과 CloudTrail이 S3에 기록하는
    ``{"Records": [...]}`` 봉투 형식도 허용합니다.

평탄화는 고정된 최대 깊이(RECORD_NESTING_DEPTH)를 기준으로 입력 구조를 검증하며,
깊이를 초과하거나 배열 원소가 객체/배열이 아니면 RecordFormatError를 발생시킵니다.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from core.config import settings
from core.exceptions import RecordFormatError

logger = logging.getLogger(__name__)

RECORD_NESTING_DEPTH = settings.RECORD_NESTING_DEPTH

LogRecord = dict[str, Any]

_END = object()


def flatten_records(
    payload: Any,
    max_depth: int = RECORD_NESTING_DEPTH,
    source: str | Path = "<payload>",
) -> list[LogRecord]:
    """중첩 배열을 레코드 리스트로 평탄화

    Args:
        payload: json.load() 결과
        max_depth: 허용하는 최대 배열 중첩 깊이
        source: 에러 메시지에 표시할 출처 (파일 경로 등)

    Returns:
        레코드(dict) 리스트 (원래 순서 유지)

    Raises:
        RecordFormatError: 구조가 예상과 다른 경우
    """
    if isinstance(payload, dict):
        if "Records" not in payload:
            raise RecordFormatError(source, "최상위 객체에 'Records' 키가 없습니다")
        payload = payload["Records"]

    if not isinstance(payload, list):
        raise RecordFormatError(source, f"최상위 값이 배열이 아닙니다 ({type(payload).__name__})")

    records: list[LogRecord] = []
    # (남은 원소 iterator, 현재 깊이) 스택으로 순서를 유지하며 순회
    stack: list[tuple[Iterator[Any], int]] = [(iter(payload), 1)]

    while stack:
        items, depth = stack[-1]
        item = next(items, _END)
        if item is _END:
            stack.pop()
            continue

        if isinstance(item, dict):
            records.append(item)
        elif isinstance(item, list):
            if depth >= max_depth:
                raise RecordFormatError(source, f"배열 중첩 깊이가 {max_depth}를 초과합니다")
            stack.append((iter(item), depth + 1))
        else:
            raise RecordFormatError(source, f"레코드가 객체가 아닙니다 ({type(item).__name__})")

    return records


def list_json_files(folder: str | Path) -> list[Path]:
    """폴더 안의 .json 파일 목록 (이름순)"""
    return sorted(p for p in Path(folder).iterdir() if p.is_file() and p.suffix == settings.JSON_SUFFIX)


def load_json_file(path: str | Path) -> Any:
    """JSON 파일 로드

    Raises:
        RecordFormatError: JSON 파싱 실패
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise RecordFormatError(path, "JSON 파싱 실패", cause=e) from e


def read_records(path: str | Path) -> list[LogRecord]:
    """JSON 파일 하나를 읽어 평탄화된 레코드 리스트 반환"""
    return flatten_records(load_json_file(path), source=path)


def iter_folder_records(folder: str | Path) -> Iterator[LogRecord]:
    """폴더의 모든 JSON 파일 레코드를 파일 이름순으로 순회"""
    for path in list_json_files(folder):
        records = read_records(path)
        logger.debug(f"{path}: 레코드 {len(records)}개")
        yield from records


def get_event_name(record: LogRecord, source: str | Path = "<record>") -> str:
    """레코드의 eventName 반환

    Raises:
        RecordFormatError: eventName 누락 또는 문자열이 아님
    """
    try:
        name = record["eventName"]
    except KeyError as e:
        raise RecordFormatError(source, "eventName 필드가 없습니다", cause=e) from e
    if not isinstance(name, str):
        raise RecordFormatError(source, f"eventName이 문자열이 아닙니다 ({type(name).__name__})")
    return name

"""
analyzers/dynamodb/throughput.py - DynamoDB 프로비저닝 용량 변경 이력 테이블

CloudTrail ``UpdateTable`` 레코드를 (eventTime, tableName, readCapacityUnits,
writeCapacityUnits) 4개 컬럼의 DataFrame으로 변환합니다.

행 순서는 파일 순회 순서이며 시간순으로 재정렬하지 않습니다.

이상 징후(쓰기 용량 증가 후 미복구)는 차트로 육안 확인합니다.
summarize_capacity()는 테이블별 기술 통계만 제공하며 판정 기준은 두지 않습니다.

CloudTrail requestParameters 예시:
    {
        "tableName": "orders",
        "provisionedThroughput": {
            "readCapacityUnits": 5,
            "writeCapacityUnits": 50
        }
    }
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pandas as pd
import pytz  # type: ignore[import-untyped]

from core.exceptions import RecordFormatError

logger = logging.getLogger(__name__)

COL_EVENT_TIME = "eventTime"
COL_TABLE_NAME = "tableName"
COL_READ = "readCapacityUnits"
COL_WRITE = "writeCapacityUnits"

THROUGHPUT_COLUMNS = [COL_EVENT_TIME, COL_TABLE_NAME, COL_READ, COL_WRITE]


@dataclass(frozen=True)
class ThroughputEvent:
    """UpdateTable 이벤트의 용량 정보

    provisionedThroughput이 없는 UpdateTable(GSI/스트림 설정 변경 등)은
    용량 값이 None입니다.
    """

    event_time: str
    table_name: str
    read_capacity_units: Any = None
    write_capacity_units: Any = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ThroughputEvent:
        """CloudTrail 레코드에서 생성

        Raises:
            RecordFormatError: eventTime 또는 requestParameters.tableName 누락
        """
        event_name = record.get("eventName", "<unknown>")
        event_time = record.get("eventTime")
        params = record.get("requestParameters") or {}
        table_name = params.get("tableName")

        if not event_time:
            raise RecordFormatError(event_name, "eventTime 필드가 없습니다")
        if not table_name:
            raise RecordFormatError(event_name, "requestParameters.tableName 필드가 없습니다")

        throughput = params.get("provisionedThroughput") or {}
        return cls(
            event_time=event_time,
            table_name=table_name,
            read_capacity_units=throughput.get("readCapacityUnits"),
            write_capacity_units=throughput.get("writeCapacityUnits"),
        )

    def to_row(self) -> dict[str, Any]:
        """DataFrame 행(dict)으로 변환"""
        return {
            COL_EVENT_TIME: self.event_time,
            COL_TABLE_NAME: self.table_name,
            COL_READ: self.read_capacity_units,
            COL_WRITE: self.write_capacity_units,
        }


def empty_throughput_table() -> pd.DataFrame:
    """컬럼/타입만 있는 빈 테이블"""
    return pd.DataFrame(
        {
            COL_EVENT_TIME: pd.Series([], dtype="datetime64[ns, UTC]"),
            COL_TABLE_NAME: pd.Series([], dtype="object"),
            COL_READ: pd.Series([], dtype="float64"),
            COL_WRITE: pd.Series([], dtype="float64"),
        }
    )


def build_throughput_table(events: Iterable[ThroughputEvent | dict[str, Any]]) -> pd.DataFrame:
    """ThroughputEvent(또는 원본 레코드) 목록으로 용량 테이블 생성

    Args:
        events: ThroughputEvent 또는 UpdateTable 레코드

    Returns:
        eventTime(UTC datetime), tableName, readCapacityUnits, writeCapacityUnits

    Raises:
        RecordFormatError: 타임스탬프 또는 용량 값 변환 실패
    """
    rows = [(e if isinstance(e, ThroughputEvent) else ThroughputEvent.from_record(e)).to_row() for e in events]
    if not rows:
        return empty_throughput_table()

    table = pd.DataFrame(rows, columns=THROUGHPUT_COLUMNS)

    try:
        table[COL_EVENT_TIME] = pd.to_datetime(table[COL_EVENT_TIME], utc=True, format="ISO8601")
    except (ValueError, TypeError) as e:
        raise RecordFormatError(COL_EVENT_TIME, "타임스탬프 변환 실패", cause=e) from e

    for column in (COL_READ, COL_WRITE):
        try:
            table[column] = pd.to_numeric(table[column])
        except (ValueError, TypeError) as e:
            raise RecordFormatError(column, "용량 값이 숫자가 아닙니다", cause=e) from e

    missing = int(table[COL_WRITE].isna().sum())
    if missing:
        logger.info(f"provisionedThroughput 없는 이벤트 {missing}건 (용량 값 NaN)")

    logger.info(f"용량 테이블 생성: {len(table)}행, 테이블 {table[COL_TABLE_NAME].nunique()}개")
    return table


def convert_timezone(table: pd.DataFrame, tz_name: str) -> pd.DataFrame:
    """eventTime을 지정 타임존으로 변환한 사본 반환

    알 수 없는 타임존이면 경고 후 UTC를 유지합니다.
    """
    try:
        tz = pytz.timezone(tz_name)
    except pytz.exceptions.UnknownTimeZoneError:
        logger.warning(f"알 수 없는 타임존 '{tz_name}'입니다. UTC를 사용합니다.")
        tz = pytz.UTC

    converted = table.copy()
    converted[COL_EVENT_TIME] = converted[COL_EVENT_TIME].dt.tz_convert(tz)
    return converted


def summarize_capacity(table: pd.DataFrame) -> pd.DataFrame:
    """테이블별 용량 변경 요약

    Returns:
        tableName 기준 1행: events, firstEvent, lastEvent,
        minRead, maxRead, lastRead, minWrite, maxWrite, lastWrite
    """
    columns = [
        COL_TABLE_NAME,
        "events",
        "firstEvent",
        "lastEvent",
        "minRead",
        "maxRead",
        "lastRead",
        "minWrite",
        "maxWrite",
        "lastWrite",
    ]
    if table.empty:
        return pd.DataFrame(columns=columns)

    # 마지막 값은 시간 기준
    ordered = table.sort_values(COL_EVENT_TIME, kind="stable")
    grouped = ordered.groupby(COL_TABLE_NAME, sort=True)
    summary = grouped.agg(
        events=(COL_EVENT_TIME, "size"),
        firstEvent=(COL_EVENT_TIME, "min"),
        lastEvent=(COL_EVENT_TIME, "max"),
        minRead=(COL_READ, "min"),
        maxRead=(COL_READ, "max"),
        lastRead=(COL_READ, "last"),
        minWrite=(COL_WRITE, "min"),
        maxWrite=(COL_WRITE, "max"),
        lastWrite=(COL_WRITE, "last"),
    ).reset_index()
    return summary[columns]

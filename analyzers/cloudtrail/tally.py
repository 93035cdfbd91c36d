"""
analyzers/cloudtrail/tally.py - CloudTrail 이벤트 이름 빈도 집계

폴더별 Counter를 만든 뒤 하나로 합쳐(reduce) 실행당 하나의 불변 결과(EventTally)를
생성합니다. 전역 누적 상태는 사용하지 않습니다.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from pathlib import Path

from core.config import settings

from .records import LogRecord, get_event_name, list_json_files, read_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventTally:
    """이벤트 이름 빈도표

    Attributes:
        counts: (이벤트 이름, 건수) 튜플. 건수 내림차순, 동률은 이름순
        total: 전체 레코드 수
    """

    counts: tuple[tuple[str, int], ...] = ()
    total: int = 0

    @property
    def unique(self) -> int:
        """고유 이벤트 이름 수"""
        return len(self.counts)

    def as_dict(self) -> dict[str, int]:
        return dict(self.counts)

    def top(self, n: int = settings.TOP_EVENTS) -> tuple[tuple[str, int], ...]:
        """상위 n개 이벤트"""
        return self.counts[:n]

    def percentages(self, n: int = settings.TOP_EVENTS) -> list[tuple[str, int, float]]:
        """상위 n개 이벤트의 (이름, 건수, 비율%)"""
        if self.total == 0:
            return []
        return [(name, count, count / self.total * 100) for name, count in self.top(n)]

    @classmethod
    def from_counter(cls, counter: Counter[str]) -> EventTally:
        ordered = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
        return cls(counts=tuple(ordered), total=sum(counter.values()))


def count_event_names(records: Iterable[LogRecord], source: str | Path = "<records>") -> Counter[str]:
    """레코드 목록의 eventName 빈도"""
    return Counter(get_event_name(record, source) for record in records)


def tally_folder(folder: str | Path) -> Counter[str]:
    """폴더 하나의 모든 JSON 파일 eventName 빈도"""
    counter: Counter[str] = Counter()
    for path in list_json_files(folder):
        counter.update(count_event_names(read_records(path), source=path))
    return counter


def tally_events(
    folders: Sequence[str | Path],
    on_folder: Callable[[Path, int], None] | None = None,
) -> EventTally:
    """폴더 목록 전체의 이벤트 빈도표 생성

    Args:
        folders: leaf 폴더 목록
        on_folder: 폴더 집계 완료 시 (folder, 폴더 레코드 수) 콜백

    Returns:
        EventTally

    Raises:
        RecordFormatError: JSON 파싱 실패, 구조 오류, eventName 누락
    """

    def per_folder(folder: str | Path) -> Counter[str]:
        counter = tally_folder(folder)
        if on_folder:
            on_folder(Path(folder), sum(counter.values()))
        return counter

    merged = reduce(lambda acc, c: acc + c, (per_folder(f) for f in folders), Counter())
    tally = EventTally.from_counter(merged)
    logger.info(f"이벤트 집계 완료: 총 {tally.total}건, 고유 {tally.unique}종")
    return tally

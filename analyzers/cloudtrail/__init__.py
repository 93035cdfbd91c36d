"""
analyzers/cloudtrail - CloudTrail 로그 처리

모듈:
    walker.py       - 월/일 leaf 폴더 탐색
    decompress.py   - gzip 아카이브 병렬 압축 해제
    records.py      - JSON 로드 및 레코드 평탄화
    tally.py        - eventName 빈도 집계
    filters.py      - 대상 이벤트 필터
    fetch.py        - S3 아카이브 다운로드
    pipeline.py     - 전체 분석 파이프라인
"""

from .decompress import DecompressionSummary, decompress_file, decompress_folders, find_gz_files
from .filters import collect_events, filter_events, matches_event
from .pipeline import AnalysisResult, run_analysis
from .records import RECORD_NESTING_DEPTH, flatten_records, list_json_files, load_json_file, read_records
from .tally import EventTally, tally_events
from .walker import list_leaf_folders

__all__: list[str] = [
    # 탐색 / 압축 해제
    "list_leaf_folders",
    "find_gz_files",
    "decompress_file",
    "decompress_folders",
    "DecompressionSummary",
    # 레코드
    "RECORD_NESTING_DEPTH",
    "flatten_records",
    "list_json_files",
    "load_json_file",
    "read_records",
    # 집계 / 필터
    "EventTally",
    "tally_events",
    "matches_event",
    "filter_events",
    "collect_events",
    # 파이프라인
    "AnalysisResult",
    "run_analysis",
]

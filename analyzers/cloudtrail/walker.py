"""
analyzers/cloudtrail/walker.py - CloudTrail 로그 디렉토리 탐색

로컬 로그 루트 아래의 월/일 폴더를 나열합니다.

디렉토리 구조:
    root/
    ├── 2020-01/            # 월 디렉토리
    │   ├── 01/             # 일(배치) 디렉토리 - leaf
    │   │   ├── *.json.gz
    │   │   └── *.json      # 압축 해제 후
    │   └── 02/
    └── 2020-02/
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.exceptions import LogSourceError

logger = logging.getLogger(__name__)


def _subdirectories(path: Path) -> list[Path]:
    return sorted(p for p in path.iterdir() if p.is_dir())


def list_leaf_folders(root: str | Path) -> list[Path]:
    """월 디렉토리 > 일 디렉토리 2단계의 leaf 폴더 목록 반환

    각 단계에 있는 일반 파일은 무시하며, 결과는 이름순으로 정렬됩니다.

    Args:
        root: 로그 루트 디렉토리

    Returns:
        leaf 폴더 경로 리스트

    Raises:
        LogSourceError: 루트가 없거나 디렉토리가 아닌 경우
    """
    root_path = Path(root)
    if not root_path.exists():
        raise LogSourceError(root_path, "경로가 존재하지 않습니다")
    if not root_path.is_dir():
        raise LogSourceError(root_path, "디렉토리가 아닙니다")

    folders: list[Path] = []
    for month_dir in _subdirectories(root_path):
        folders.extend(_subdirectories(month_dir))

    logger.info(f"leaf 폴더 {len(folders)}개 발견: {root_path}")
    return folders

"""
analyzers/cloudtrail/decompress.py - CloudTrail gzip 아카이브 압축 해제

폴더별 ``*.gz`` 파일을 원본 옆에 압축 해제합니다 (``x.json.gz`` -> ``x.json``).
기존 압축 해제 파일은 덮어씁니다. 같은 폴더의 임시 파일에 먼저 쓰고 완료 후
교체하므로, 실패한 파일의 잘린 .json은 남지 않습니다.

병렬 처리:
    - 워커 풀은 압축 해제 단계 전체에서 1회 생성/종료
    - 폴더 하나가 하나의 배치이며, 배치 완료까지 블로킹 대기 후 다음 폴더로 진행
    - 한 파일이라도 실패하면 DecompressionError로 전체 실행 중단 (재시도 없음)
"""

from __future__ import annotations

import gzip
import logging
import shutil
import tempfile
import zlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from core.config import settings
from core.exceptions import DecompressionError
from core.parallel import ParallelConfig, ParallelExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecompressionSummary:
    """압축 해제 결과

    Attributes:
        folders_scanned: 검사한 폴더 수
        folders_with_archives: .gz 파일이 있던 폴더 수
        files: 생성된 압축 해제 파일 경로 (폴더 순서)
    """

    folders_scanned: int = 0
    folders_with_archives: int = 0
    files: tuple[Path, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.files)


def find_gz_files(folder: str | Path) -> list[Path]:
    """폴더 안의 .gz 파일 목록 (이름순)"""
    return sorted(p for p in Path(folder).iterdir() if p.is_file() and p.suffix == settings.GZIP_SUFFIX)


def decompressed_path(gz_path: Path) -> Path:
    """압축 해제 대상 경로 (.gz 접미사 제거)"""
    return gz_path.with_suffix("")


def decompress_file(gz_path: str | Path) -> Path:
    """단일 gzip 파일 압축 해제

    Args:
        gz_path: .gz 파일 경로

    Returns:
        압축 해제된 파일 경로

    Raises:
        DecompressionError: 읽기/쓰기/gzip 해제 실패
    """
    gz_path = Path(gz_path)
    target = decompressed_path(gz_path)

    try:
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix=".tmp", prefix=f".{target.name}.")
    except OSError as e:
        raise DecompressionError(gz_path, cause=e) from e

    try:
        with open(fd, "wb") as dst, gzip.open(gz_path, "rb") as src:
            shutil.copyfileobj(src, dst)
        Path(tmp_path).replace(target)
    except (OSError, EOFError, zlib.error) as e:
        Path(tmp_path).unlink(missing_ok=True)
        raise DecompressionError(gz_path, cause=e) from e
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise

    return target


def decompress_folders(
    folders: Sequence[str | Path],
    config: ParallelConfig | None = None,
    on_folder: Callable[[Path, int], None] | None = None,
) -> DecompressionSummary:
    """폴더 목록의 모든 .gz 파일 압축 해제

    Args:
        folders: leaf 폴더 목록
        config: 병렬 실행 설정 (None이면 기본값)
        on_folder: 폴더 처리 완료 시 (folder, 압축 해제 파일 수) 콜백

    Returns:
        DecompressionSummary

    Raises:
        DecompressionError: 압축 해제 실패 (첫 실패에서 중단)
    """
    config = config or ParallelConfig()
    # 실패 시 즉시 중단
    if not config.fail_fast:
        config = ParallelConfig(max_workers=config.max_workers, fail_fast=True)

    files: list[Path] = []
    folders_with_archives = 0

    with ParallelExecutor(config) as executor:
        for folder in folders:
            folder = Path(folder)
            archives = find_gz_files(folder)
            if not archives:
                logger.debug(f"압축 파일 없음, 건너뜀: {folder}")
                if on_folder:
                    on_folder(folder, 0)
                continue

            folders_with_archives += 1
            result = executor.run_batch(decompress_file, archives)
            # 완료 순서와 무관하게 폴더 내 이름순 유지
            folder_files = sorted(result.get_data())
            files.extend(folder_files)
            logger.info(f"{folder}: {len(folder_files)}개 파일 압축 해제")

            if on_folder:
                on_folder(folder, len(folder_files))

    return DecompressionSummary(
        folders_scanned=len(folders),
        folders_with_archives=folders_with_archives,
        files=tuple(files),
    )

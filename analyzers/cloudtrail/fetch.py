"""
analyzers/cloudtrail/fetch.py - S3의 CloudTrail 아카이브를 로컬 월/일 구조로 다운로드

CloudTrail S3 키 형식:
    AWSLogs/{account}/CloudTrail/{region}/{YYYY}/{MM}/{DD}/{file}.json.gz

로컬 저장 경로:
    {dest}/{YYYY}-{MM}/{DD}/{file}.json.gz

이미 같은 크기의 파일이 있으면 건너뜁니다.

필요 권한:
    - s3:ListBucket
    - s3:GetObject
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.exceptions import APICallError, ValidationError
from core.parallel import ParallelConfig, ParallelExecutor

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker

logger = logging.getLogger(__name__)

S3_URI_RE = re.compile(r"^s3://([^/]+)/?(.*)$")
CLOUDTRAIL_KEY_RE = re.compile(r"(?:^|/)(\d{4})/(\d{2})/(\d{2})/([^/]+\.json\.gz)$")


@dataclass(frozen=True)
class _Download:
    key: str
    size: int
    target: Path


def parse_s3_uri(uri: str) -> tuple[str, str]:
    """s3://bucket/prefix -> (bucket, prefix)

    Raises:
        ValidationError: s3:// 형식이 아닌 경우
    """
    match = S3_URI_RE.match(uri)
    if not match:
        raise ValidationError("s3_uri", uri, "s3://bucket/prefix")
    bucket, prefix = match.groups()
    return bucket, prefix.strip("/")


def local_path_for_key(dest: str | Path, key: str) -> Path | None:
    """S3 키에 대응하는 로컬 경로 (CloudTrail 형식이 아니면 None)"""
    match = CLOUDTRAIL_KEY_RE.search(key)
    if not match:
        return None
    year, month, day, filename = match.groups()
    return Path(dest) / f"{year}-{month}" / day / filename


def _list_downloads(s3_client: Any, bucket: str, prefix: str, dest: Path) -> list[_Download]:
    downloads: list[_Download] = []
    skipped = 0

    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                key = obj["Key"]
                target = local_path_for_key(dest, key)
                if target is None:
                    logger.debug(f"CloudTrail 형식이 아닌 키 건너뜀: {key}")
                    continue
                if target.exists() and target.stat().st_size == obj.get("Size", -1):
                    skipped += 1
                    continue
                downloads.append(_Download(key=key, size=obj.get("Size", 0), target=target))
    except ClientError as e:
        raise APICallError.from_client_error("s3", "list_objects_v2", e) from e

    if skipped:
        logger.info(f"이미 받은 파일 {skipped}개 건너뜀")
    return downloads


def fetch_logs(
    s3_client: Any,
    uri: str,
    dest: str | Path,
    config: ParallelConfig | None = None,
    progress_tracker: ParallelTracker | None = None,
) -> int:
    """S3 prefix 아래의 CloudTrail 아카이브 다운로드

    Args:
        s3_client: boto3 S3 클라이언트
        uri: s3://bucket/prefix
        dest: 로컬 로그 루트
        config: 병렬 실행 설정
        progress_tracker: 다운로드 완료마다 on_complete(success)를 호출받는 추적기

    Returns:
        다운로드한 파일 수

    Raises:
        ValidationError: 잘못된 S3 URI
        APICallError: S3 호출 실패
    """
    bucket, prefix = parse_s3_uri(uri)
    dest = Path(dest)
    downloads = _list_downloads(s3_client, bucket, prefix, dest)
    if not downloads:
        logger.info("다운로드할 파일이 없습니다")
        return 0

    def download(item: _Download) -> Path:
        item.target.parent.mkdir(parents=True, exist_ok=True)
        try:
            s3_client.download_file(bucket, item.key, str(item.target))
        except ClientError as e:
            raise APICallError.from_client_error("s3", "get_object", e) from e
        return item.target

    with ParallelExecutor(config or ParallelConfig()) as executor:
        if progress_tracker:
            progress_tracker.set_total(len(downloads))
        result = executor.run_batch(download, downloads, progress_tracker=progress_tracker)

    logger.info(f"s3://{bucket}/{prefix}: {result.success_count}개 파일 다운로드")
    return result.success_count

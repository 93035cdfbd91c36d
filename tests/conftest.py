"""
tests/conftest.py - pytest 공통 픽스처

CloudTrail 로그 디렉토리 트리 생성과 S3 모킹을 제공합니다.

Usage:
    def test_something(log_root):
        # log_root: 월/일 구조에 .json.gz 파일이 들어 있는 임시 로그 루트
        folders = list_leaf_folders(log_root)
"""

import gzip
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import matplotlib

# GUI 백엔드 없이 차트 렌더링
matplotlib.use("Agg")

import pytest  # noqa: E402

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (CTA_* 환경변수 초기화)"""
    for name in ("CTA_MAX_WORKERS", "CTA_OUTPUT_DIR", "CTA_TIMEZONE", "CTA_LOG_LEVEL", "CTA_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-2")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


# =============================================================================
# 레코드 / 파일 생성 헬퍼
# =============================================================================


def make_record(
    event_name: str,
    event_time: str = "2020-01-01T00:00:00Z",
    table_name: Optional[str] = None,
    read: Optional[int] = None,
    write: Optional[int] = None,
) -> Dict[str, Any]:
    """CloudTrail 레코드 생성 헬퍼"""
    record: Dict[str, Any] = {
        "eventVersion": "1.05",
        "eventTime": event_time,
        "eventSource": "dynamodb.amazonaws.com",
        "eventName": event_name,
        "awsRegion": "ap-northeast-2",
    }
    if table_name is not None:
        params: Dict[str, Any] = {"tableName": table_name}
        if read is not None or write is not None:
            params["provisionedThroughput"] = {
                "readCapacityUnits": read,
                "writeCapacityUnits": write,
            }
        record["requestParameters"] = params
    return record


def write_gz(path: Path, payload: Any) -> Path:
    """payload를 JSON으로 직렬화해 gzip 파일로 저장"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(path, "wt", encoding="utf-8") as f:
        json.dump(payload, f)
    return path


def write_json(path: Path, payload: Any) -> Path:
    """payload를 JSON 파일로 저장"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


# =============================================================================
# 로그 트리 픽스처
# =============================================================================


@pytest.fixture
def log_records() -> Dict[str, List[List[Dict[str, Any]]]]:
    """폴더(월/일)별 배치 배열 구조의 레코드

    총 6건: UpdateTable 3건 (orders 2, users 1), 나머지 3건
    """
    return {
        "2020-01/01": [
            [
                make_record("UpdateTable", "2020-01-01T00:00:00Z", "orders", read=5, write=10),
                make_record("DescribeTable", "2020-01-01T00:01:00Z", "orders"),
            ],
            [make_record("ListTables", "2020-01-01T00:02:00Z")],
        ],
        "2020-01/02": [
            [
                make_record("UpdateTable", "2020-01-02T00:00:00Z", "orders", read=5, write=50),
                make_record("DescribeTable", "2020-01-02T00:01:00Z", "users"),
            ],
        ],
        "2020-02/01": [
            [make_record("UpdateTable", "2020-02-01T09:00:00Z", "users", read=1, write=1)],
        ],
    }


@pytest.fixture
def log_root(tmp_path, log_records) -> Path:
    """월/일 구조에 .json.gz 파일이 있는 로그 루트 (압축 해제 전)"""
    root = tmp_path / "cloudtrail"
    for folder, payload in log_records.items():
        write_gz(root / folder / "part-0001.json.gz", payload)
    # leaf가 아닌 위치의 일반 파일은 무시되어야 함
    (root / "README.txt").parent.mkdir(parents=True, exist_ok=True)
    (root / "README.txt").write_text("ignore", encoding="utf-8")
    (root / "2020-01" / "manifest.txt").write_text("ignore", encoding="utf-8")
    return root


@pytest.fixture
def decompressed_root(log_root) -> Path:
    """압축 해제까지 완료된 로그 루트"""
    from analyzers.cloudtrail import decompress_folders, list_leaf_folders
    from core.parallel import ParallelConfig

    decompress_folders(list_leaf_folders(log_root), ParallelConfig(max_workers=2))
    return log_root


# =============================================================================
# moto
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")


@pytest.fixture
def moto_s3(aws_credentials):
    """moto를 사용한 S3 모킹"""
    from moto import mock_aws

    with mock_aws():
        import boto3

        s3 = boto3.client("s3", region_name="ap-northeast-2")
        yield s3


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        "TestOperation",
    )

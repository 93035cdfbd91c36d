"""
tests/core/test_exceptions.py - core/exceptions.py 테스트
"""

from pathlib import Path

import pytest

from core.exceptions import (
    APICallError,
    ConfigError,
    CTAError,
    DecompressionError,
    LogSourceError,
    RecordFormatError,
    ValidationError,
)


class TestCTAError:
    """베이스 예외 테스트"""

    def test_message_only(self):
        error = CTAError("실패")
        assert str(error) == "실패"
        assert error.cause is None
        assert error.details == {}

    def test_with_cause(self):
        cause = ValueError("원인")
        error = CTAError("실패", cause=cause)
        assert str(error) == "실패: 원인"

    def test_to_dict(self):
        error = CTAError("실패", cause=ValueError("원인"), details={"k": "v"})
        data = error.to_dict()

        assert data["error_type"] == "CTAError"
        assert data["message"] == "실패"
        assert data["cause"] == "원인"
        assert data["details"] == {"k": "v"}


class TestSubclasses:
    """도메인 예외 테스트"""

    @pytest.mark.parametrize(
        "error",
        [
            LogSourceError("/tmp/x", "없음"),
            DecompressionError("/tmp/x.gz"),
            RecordFormatError("/tmp/x.json", "형식"),
            APICallError("s3", "get_object"),
            ConfigError("KEY", "잘못됨"),
            ValidationError("field", "v", "expected"),
        ],
    )
    def test_all_inherit_base(self, error):
        assert isinstance(error, CTAError)

    def test_log_source_error(self):
        error = LogSourceError(Path("/data/logs"), "경로가 존재하지 않습니다")
        assert error.path == "/data/logs"
        assert "/data/logs" in str(error)
        assert error.details["path"] == "/data/logs"

    def test_decompression_error_keeps_cause(self):
        cause = OSError("Not a gzipped file")
        error = DecompressionError("/data/a.json.gz", cause=cause)
        assert error.cause is cause
        assert "a.json.gz" in str(error)
        assert "Not a gzipped file" in str(error)

    def test_record_format_error(self):
        error = RecordFormatError("a.json", "eventName 필드가 없습니다")
        assert error.source == "a.json"
        assert error.reason == "eventName 필드가 없습니다"
        assert error.details["reason"] == "eventName 필드가 없습니다"

    def test_validation_error(self):
        error = ValidationError("s3_uri", "http://x", "s3://bucket/prefix")
        assert error.field == "s3_uri"
        assert "s3://bucket/prefix" in str(error)


class TestAPICallError:
    """APICallError 테스트"""

    def test_message_format(self):
        error = APICallError("s3", "list_objects_v2", "AccessDenied", "Access Denied")
        assert str(error) == "s3.list_objects_v2 실패 (AccessDenied): Access Denied"

    def test_from_client_error(self):
        from conftest import create_mock_client_error

        client_error = create_mock_client_error("NoSuchBucket", "bucket missing")
        error = APICallError.from_client_error("s3", "list_objects_v2", client_error)

        assert error.error_code == "NoSuchBucket"
        assert error.error_message == "bucket missing"
        assert error.cause is client_error
        assert error.details["service"] == "s3"

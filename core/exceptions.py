"""
core/exceptions.py - CloudTrail 분석 예외

파이프라인은 재시도나 부분 결과 없이 첫 실패에서 중단됩니다.
CLI는 명령어 경계에서만 CTAError를 잡아 메시지를 출력하고 종료 코드 1을 반환합니다.

    CTAError
    ├── LogSourceError       로그 루트/폴더를 사용할 수 없음
    ├── DecompressionError   gzip 압축 해제 실패
    ├── RecordFormatError    JSON 파싱, 배열 중첩, 필수 필드, 값 변환 오류
    ├── APICallError         S3 호출 실패 (ClientError 래핑)
    ├── ConfigError          CTA_* 환경변수 값 오류
    └── ValidationError      CLI/함수 입력 값 오류

Example:
    try:
        payload = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordFormatError(path, "JSON 파싱 실패", cause=e) from e
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

PathLike = str | Path


class CTAError(Exception):
    """분석 도구 공통 예외

    Attributes:
        message: 사용자에게 보여줄 메시지
        cause: 래핑한 하위 예외 (없으면 None)
        details: 로그/보고용 부가 정보
    """

    def __init__(self, message: str, cause: BaseException | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details: dict[str, Any] = dict(details) if details else {}

    def __str__(self) -> str:
        return self.message if self.cause is None else f"{self.message}: {self.cause}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": None if self.cause is None else str(self.cause),
            "details": self.details,
        }


class LogSourceError(CTAError):
    """로그 루트가 없거나 디렉토리가 아님"""

    def __init__(self, path: PathLike, reason: str, cause: BaseException | None = None):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"로그 경로 오류 [{self.path}]: {reason}", cause, {"path": self.path})


class DecompressionError(CTAError):
    """.gz 파일 하나의 압축 해제 실패 (전체 실행 중단)"""

    def __init__(self, path: PathLike, cause: BaseException | None = None):
        self.path = str(path)
        super().__init__(f"압축 해제 실패 [{self.path}]", cause, {"path": self.path})


class RecordFormatError(CTAError):
    """CloudTrail 레코드 형식 오류

    source는 파일 경로, 이벤트 이름, 컬럼 이름 등 오류 위치를 가리킵니다.
    """

    def __init__(self, source: PathLike, reason: str, cause: BaseException | None = None):
        self.source = str(source)
        self.reason = reason
        super().__init__(
            f"레코드 형식 오류 [{self.source}]: {reason}",
            cause,
            {"source": self.source, "reason": reason},
        )


class APICallError(CTAError):
    """S3 API 호출 실패"""

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: BaseException | None = None,
    ):
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message

        parts = [f"{service}.{operation}"]
        if error_code:
            parts.append(f"실패 ({error_code})")
        message = " ".join(parts)
        if error_message:
            message += f": {error_message}"

        super().__init__(
            message,
            cause,
            {"service": service, "operation": operation, "error_code": error_code},
        )

    @classmethod
    def from_client_error(cls, service: str, operation: str, client_error: Exception) -> APICallError:
        """botocore ClientError의 Error.Code / Error.Message로 생성"""
        error = getattr(client_error, "response", {}).get("Error", {})
        return cls(
            service,
            operation,
            error_code=error.get("Code"),
            error_message=error.get("Message"),
            cause=client_error,
        )


class ConfigError(CTAError):
    """CTA_* 환경변수 등 설정 값 오류"""

    def __init__(self, key: str, message: str, cause: BaseException | None = None):
        self.config_key = key
        super().__init__(f"설정 오류 [{key}]: {message}", cause, {"config_key": key})


class ValidationError(CTAError):
    """입력 값 검증 실패"""

    def __init__(self, field: str, value: Any, expected: str, cause: BaseException | None = None):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(
            f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'",
            cause,
            {"field": field, "value": str(value), "expected": expected},
        )

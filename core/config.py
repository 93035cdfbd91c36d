"""
core/config.py - 중앙 설정 모듈

애플리케이션 전체에서 사용하는 상수와 환경변수 헬퍼를 정의합니다.

구성:
    - Settings: 불변 설정 데이터클래스 (전역 인스턴스: settings)
    - LogConfig: 로깅 설정
    - get_env_*: 환경변수 변환 헬퍼
    - get_max_workers / get_output_dir / get_timezone: 환경변수 우선 설정 조회

환경변수:
    CTA_MAX_WORKERS   압축 해제/다운로드 워커 수 (기본: 4)
    CTA_OUTPUT_DIR    차트/보고서 출력 디렉토리 (기본: output)
    CTA_TIMEZONE      차트 시간축 타임존 (기본: UTC)
    CTA_LOG_LEVEL     로그 레벨 (기본: INFO)
    CTA_LOG_FORMAT    로그 포맷
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from core.exceptions import ConfigError


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정 상수

    Attributes:
        TARGET_EVENT: 필터링 대상 이벤트 이름 (부분 일치)
        TOP_EVENTS: 빈도표 출력 시 상위 N개
        RECORD_NESTING_DEPTH: JSON 파일의 배열 중첩 깊이 (배치 배열 > 레코드 배열)
        DEFAULT_MAX_WORKERS: 기본 워커 수 (호스트 CPU 수와 무관한 고정값)
        MAX_WORKERS_LIMIT: 워커 수 상한
        DEFAULT_TIMEZONE: 차트 시간축 기본 타임존
        DEFAULT_OUTPUT_DIR: 차트/보고서 기본 출력 디렉토리
        CHART_WIDTH / CHART_HEIGHT: 차트 크기 (inch)
        CHART_DPI: PNG 저장 해상도
    """

    TARGET_EVENT: str = "UpdateTable"
    TOP_EVENTS: int = 25
    RECORD_NESTING_DEPTH: int = 2

    DEFAULT_MAX_WORKERS: int = 4
    MAX_WORKERS_LIMIT: int = 64

    DEFAULT_TIMEZONE: str = "UTC"
    DEFAULT_OUTPUT_DIR: str = "output"

    CHART_WIDTH: float = 14.0
    CHART_HEIGHT: float = 6.0
    CHART_DPI: int = 120

    GZIP_SUFFIX: str = ".gz"
    JSON_SUFFIX: str = ".json"


# 전역 설정 인스턴스
settings = Settings()


@dataclass(frozen=True)
class LogConfig:
    """로깅 설정

    Attributes:
        level: 로그 레벨 이름
        format: logging.Formatter 포맷 문자열
        date_format: 날짜 포맷
    """

    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """환경변수에서 로깅 설정 로드"""
        default = cls()
        return cls(
            level=os.getenv("CTA_LOG_LEVEL", default.level).upper(),
            format=os.getenv("CTA_LOG_FORMAT", default.format),
            date_format=default.date_format,
        )


# =============================================================================
# 프로젝트 경로
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로 (core/ 의 상위 디렉토리)"""
    return Path(__file__).resolve().parent.parent


def get_version() -> str:
    """version.txt에서 버전 문자열을 읽어 반환

    파일이 없으면 "0.0.0"을 반환합니다.
    """
    version_file = get_project_root() / "version.txt"
    if version_file.exists():
        return version_file.read_text(encoding="utf-8").strip()
    return "0.0.0"


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_int(name: str, default: int) -> int:
    """환경변수를 int로 변환 (실패 시 default)"""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_str(name: str, default: str) -> str:
    """환경변수 문자열 (빈 문자열이면 default)"""
    value = os.getenv(name)
    return value if value else default


def get_max_workers() -> int:
    """워커 수 조회 (CTA_MAX_WORKERS > 기본값)

    Raises:
        ConfigError: 1 미만 또는 상한 초과
    """
    workers = get_env_int("CTA_MAX_WORKERS", settings.DEFAULT_MAX_WORKERS)
    if workers < 1 or workers > settings.MAX_WORKERS_LIMIT:
        raise ConfigError(
            "CTA_MAX_WORKERS",
            f"1 ~ {settings.MAX_WORKERS_LIMIT} 범위여야 합니다 (현재: {workers})",
        )
    return workers


def get_output_dir() -> Path:
    """출력 디렉토리 조회 (CTA_OUTPUT_DIR > 기본값)"""
    return Path(get_env_str("CTA_OUTPUT_DIR", settings.DEFAULT_OUTPUT_DIR))


def get_timezone() -> str:
    """차트 타임존 조회 (CTA_TIMEZONE > 기본값)"""
    return get_env_str("CTA_TIMEZONE", settings.DEFAULT_TIMEZONE)

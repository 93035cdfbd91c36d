"""
core/parallel/types.py - 병렬 실행 결과 타입

개별 작업의 결과(TaskResult)와 배치 전체의 결과(ParallelExecutionResult)를
불변 데이터클래스로 정의합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TaskError:
    """작업 실패 정보

    Attributes:
        item: 실패한 작업 항목 (파일 경로, S3 키 등)
        error_type: 예외 클래스 이름
        message: 에러 메시지
        original_exception: 원본 예외 (재발생용)
    """

    item: str
    error_type: str
    message: str
    original_exception: BaseException | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"[{self.item}] {self.error_type}: {self.message}"


@dataclass(frozen=True)
class TaskResult(Generic[T]):
    """단일 작업 결과"""

    item: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0


@dataclass(frozen=True)
class ParallelExecutionResult(Generic[T]):
    """배치 실행 결과

    Attributes:
        results: 작업 결과 튜플 (완료 순서)
    """

    results: tuple[TaskResult[T], ...] = ()

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def errors(self) -> list[TaskError]:
        return [r.error for r in self.results if r.error is not None]

    def get_data(self) -> list[T]:
        """성공한 작업의 데이터만 반환"""
        return [r.data for r in self.results if r.success and r.data is not None]

    def get_error_summary(self) -> str:
        """실패 요약 문자열"""
        if not self.errors:
            return ""
        lines = [f"실패 {self.error_count}건:"]
        lines.extend(f"  - {err}" for err in self.errors)
        return "\n".join(lines)

"""
core/parallel/executor.py - 배치 병렬 실행기

파일 단위 작업(압축 해제, S3 다운로드)을 고정 크기 워커 풀로 병렬 처리합니다.
ThreadPoolExecutor 기반이며, 풀은 단계(phase)마다 한 번 생성되고
한 번 종료됩니다. 작업은 폴더 단위 배치로 제출하고 배치가 끝날 때까지
블로킹 대기합니다.

주요 구성 요소:
- ParallelConfig: 병렬 실행 설정 (워커 수, fail-fast)
- ParallelExecutor: 컨텍스트 매니저 형태의 배치 실행기

Example:
    from core.parallel import ParallelConfig, ParallelExecutor

    with ParallelExecutor(ParallelConfig(max_workers=4)) as executor:
        for folder in folders:
            executor.run_batch(decompress_file, find_gz_files(folder))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from core.config import get_max_workers, settings
from core.exceptions import ConfigError

from .types import ParallelExecutionResult, TaskError, TaskResult

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")
ItemT = TypeVar("ItemT")


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 워커 스레드 수 (1 ~ MAX_WORKERS_LIMIT).
            기본값은 CTA_MAX_WORKERS 환경변수 또는 settings.DEFAULT_MAX_WORKERS
        fail_fast: True이면 첫 실패에서 남은 작업을 취소하고 예외를 다시 발생
    """

    max_workers: int = field(default_factory=get_max_workers)
    fail_fast: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.max_workers <= settings.MAX_WORKERS_LIMIT:
            raise ConfigError(
                "max_workers",
                f"1 ~ {settings.MAX_WORKERS_LIMIT} 범위여야 합니다 (현재: {self.max_workers})",
            )


class ParallelExecutor:
    """배치 병렬 실행기

    with 블록 진입 시 워커 풀을 생성하고, 종료 시 풀을 정리합니다.
    블록 안에서 run_batch()를 여러 번 호출할 수 있으며 각 호출은
    제출한 배치가 모두 끝날 때까지 블로킹합니다.
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()
        self._pool: ThreadPoolExecutor | None = None

    def __enter__(self) -> ParallelExecutor:
        self._pool = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="cta-worker",
        )
        logger.debug(f"워커 풀 생성: max_workers={self.config.max_workers}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._pool is not None:
            # 실패로 빠져나가는 경우 대기 중인 작업은 버림
            self._pool.shutdown(wait=True, cancel_futures=exc_type is not None)
            self._pool = None
            logger.debug("워커 풀 종료")

    def run_batch(
        self,
        func: Callable[[ItemT], T],
        items: Iterable[ItemT],
        progress_tracker: ParallelTracker | None = None,
    ) -> ParallelExecutionResult[T]:
        """배치 실행 후 완료까지 대기

        Args:
            func: 항목 하나를 처리하는 함수
            items: 작업 항목 (파일 경로 등)
            progress_tracker: 작업 완료마다 on_complete(success)를 호출받는 추적기

        Returns:
            ParallelExecutionResult[T]

        Raises:
            RuntimeError: with 블록 밖에서 호출한 경우
            Exception: fail_fast일 때 첫 번째로 실패한 작업의 원본 예외
        """
        if self._pool is None:
            raise RuntimeError("ParallelExecutor는 with 블록 안에서 사용해야 합니다")

        items = list(items)
        if not items:
            return ParallelExecutionResult()

        start_time = time.monotonic()
        futures: dict[Future[TaskResult[T]], ItemT] = {
            self._pool.submit(self._execute_single, func, item): item for item in items
        }

        results: list[TaskResult[T]] = []
        for future in as_completed(futures):
            result = future.result()
            results.append(result)

            if progress_tracker:
                progress_tracker.on_complete(result.success)

            if not result.success and self.config.fail_fast:
                for pending in futures:
                    pending.cancel()
                error = result.error
                logger.error(f"작업 실패로 배치 중단: {error}")
                if error is not None and error.original_exception is not None:
                    raise error.original_exception
                raise RuntimeError(str(error))

        exec_result = ParallelExecutionResult(results=tuple(results))
        total_time = (time.monotonic() - start_time) * 1000
        logger.debug(
            f"배치 완료: 성공 {exec_result.success_count}, 실패 {exec_result.error_count}, 총 {total_time:.0f}ms"
        )
        return exec_result

    @staticmethod
    def _execute_single(func: Callable[[ItemT], T], item: ItemT) -> TaskResult[T]:
        """단일 작업 실행 (워커 스레드 내에서 호출)"""
        start_time = time.monotonic()
        try:
            data = func(item)
        except Exception as e:
            return TaskResult(
                item=str(item),
                success=False,
                error=TaskError(
                    item=str(item),
                    error_type=type(e).__name__,
                    message=str(e),
                    original_exception=e,
                ),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
        return TaskResult(
            item=str(item),
            success=True,
            data=data,
            duration_ms=(time.monotonic() - start_time) * 1000,
        )


"""
core/parallel - 병렬 처리 모듈

파일 단위 작업(압축 해제, S3 다운로드)을 고정 크기 워커 풀로 처리합니다.

주요 구성 요소:
- ParallelExecutor: 단계별 1회 생성되는 배치 실행기
- ParallelConfig: 워커 수 / fail-fast 설정

Example:
    from core.parallel import ParallelConfig, ParallelExecutor

    with ParallelExecutor(ParallelConfig(max_workers=4)) as executor:
        for folder in folders:
            result = executor.run_batch(decompress_file, find_gz_files(folder))
            print(f"성공: {result.success_count}")
"""

from .executor import ParallelConfig, ParallelExecutor
from .types import ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelExecutor",
    "ParallelConfig",
    # Types
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]

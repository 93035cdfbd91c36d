# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

CLI 전용 UI 컴포넌트들 (메시지 출력, 테이블, 진행 표시)
"""

from .console import (
    INDENT,
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    get_console,
    print_error,
    print_info,
    print_step_header,
    print_sub_task_done,
    print_success,
    print_table,
    print_warning,
)
from .progress import (
    FolderTracker,
    ParallelTracker,
    StageTracker,
    folder_progress,
    parallel_progress,
    stage_progress,
)

__all__: list[str] = [
    # Console
    "console",
    "get_console",
    "INDENT",
    "SYMBOL_SUCCESS",
    "SYMBOL_ERROR",
    "SYMBOL_WARNING",
    "SYMBOL_INFO",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_step_header",
    "print_sub_task_done",
    "print_table",
    # Progress
    "ParallelTracker",
    "FolderTracker",
    "StageTracker",
    "parallel_progress",
    "folder_progress",
    "stage_progress",
]

"""
cli/ui/progress.py - 진행 상황 표시 컴포넌트

Components:
- ParallelTracker: 병렬 작업 성공/실패 카운트 추적 (스레드 세이프)
- FolderTracker: 폴더 단위 단계 진행 추적
- StageTracker: 파이프라인 단계별 폴더 진행 추적

Context managers:
- parallel_progress: ParallelExecutor 배치용
- folder_progress: 폴더 순회 단계(압축 해제, 집계, 필터)용
- stage_progress: run_analysis() 전체 실행용

Example:
    with folder_progress("이벤트 집계", total=len(folders)) as tracker:
        tally = tally_events(folders, on_folder=tracker.as_callback())
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .console import console as default_console

if TYPE_CHECKING:
    from rich.console import Console


def _new_progress(cons: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        MofNCompleteColumn(),
        BarColumn(),
        TextColumn("[dim]{task.fields[detail]}"),
        TimeElapsedColumn(),
        console=cons,
        transient=False,
    )


class ParallelTracker:
    """병렬 작업 진행 추적기

    ParallelExecutor.run_batch()가 작업 완료마다 on_complete(success)를 호출합니다.
    모든 public 메서드는 내부 lock으로 스레드 세이프합니다.
    """

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self._progress = progress
        self._task_id = task_id
        self._lock = threading.Lock()
        self._success = 0
        self._failed = 0
        self._total = 0

    def set_total(self, total: int) -> None:
        with self._lock:
            self._total = total
            self._progress.update(self._task_id, total=total)

    def on_complete(self, success: bool) -> None:
        with self._lock:
            if success:
                self._success += 1
            else:
                self._failed += 1
            self._progress.update(
                self._task_id,
                completed=self._success + self._failed,
                detail=f"{self._success}✓ {self._failed}✗",
            )

    @property
    def stats(self) -> tuple[int, int, int]:
        """(성공, 실패, 전체)"""
        with self._lock:
            return self._success, self._failed, self._total


class FolderTracker:
    """폴더 단위 진행 추적기"""

    def __init__(self, progress: Progress, task_id: TaskID, unit: str) -> None:
        self._progress = progress
        self._task_id = task_id
        self._unit = unit
        self.folders_done = 0

    def advance(self, folder: Path, value: int) -> None:
        """폴더 1개 완료 (value는 단계별 의미: 파일 수, 레코드 수, 누적 매칭 수)"""
        self.folders_done += 1
        self._progress.update(
            self._task_id,
            advance=1,
            detail=f"{folder.parent.name}/{folder.name} · {value:,} {self._unit}",
        )

    def as_callback(self) -> Callable[[Path, int], None]:
        return self.advance


@contextmanager
def parallel_progress(
    description: str,
    total: int = 0,
    console: Console | None = None,
) -> Generator[ParallelTracker, None, None]:
    """병렬 배치 진행 표시"""
    progress = _new_progress(console or default_console)
    with progress:
        task_id = progress.add_task(description, total=total or None, detail="")
        tracker = ParallelTracker(progress, task_id)
        if total:
            tracker.set_total(total)
        yield tracker


@contextmanager
def folder_progress(
    description: str,
    total: int,
    unit: str = "",
    console: Console | None = None,
) -> Generator[FolderTracker, None, None]:
    """폴더 순회 진행 표시"""
    progress = _new_progress(console or default_console)
    with progress:
        task_id = progress.add_task(description, total=total, detail="")
        yield FolderTracker(progress, task_id, unit)


class StageTracker:
    """단계별(압축 해제/집계/필터) 폴더 진행 추적기

    run_analysis(on_folder=...)의 (stage, folder, value) 콜백을 받아
    단계마다 별도의 진행 바를 갱신합니다.
    """

    def __init__(self, progress: Progress, stages: dict[str, str], total: int) -> None:
        self._progress = progress
        self._stages = stages
        self._total = total
        self._task_ids: dict[str, TaskID] = {}

    def on_folder(self, stage: str, folder: Path, value: int) -> None:
        task_id = self._task_ids.get(stage)
        if task_id is None:
            description = self._stages.get(stage, stage)
            task_id = self._progress.add_task(description, total=self._total, detail="")
            self._task_ids[stage] = task_id
        self._progress.update(
            task_id,
            advance=1,
            detail=f"{folder.parent.name}/{folder.name} · {value:,}",
        )


@contextmanager
def stage_progress(
    stages: dict[str, str],
    total: int,
    console: Console | None = None,
) -> Generator[StageTracker, None, None]:
    """파이프라인 단계별 진행 표시

    Args:
        stages: 단계 이름 -> 표시 문구
        total: 단계당 폴더 수
    """
    progress = _new_progress(console or default_console)
    with progress:
        yield StageTracker(progress, stages, total)

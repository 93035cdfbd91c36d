"""
cli/ui/console.py - rich 콘솔 출력 헬퍼

명령어 출력은 모두 전역 console을 거칩니다.
로그(logging)는 stderr 기본 핸들러로 나가며, 진행 바와 섞이지 않도록
기본 레벨을 WARNING으로 둡니다 (cli/app.py 참고).
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.table import Table

for _noisy in ("botocore", "urllib3", "matplotlib", "PIL"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"

INDENT = "   "

_STYLES = {
    SYMBOL_SUCCESS: "green",
    SYMBOL_ERROR: "red",
    SYMBOL_WARNING: "yellow",
    SYMBOL_INFO: "blue",
}


def get_console() -> Console:
    """출력용 Console 생성 (Windows 콘솔은 이모지 비활성화)"""
    return Console(
        soft_wrap=True,
        highlight=True,
        markup=True,
        emoji=not sys.platform.startswith("win"),
    )


console = get_console()


def _emit(symbol: str, message: str, indent: str = "") -> None:
    style = _STYLES[symbol]
    console.print(f"{indent}[{style}]{symbol} {message}[/{style}]")


def print_success(message: str) -> None:
    _emit(SYMBOL_SUCCESS, message)


def print_error(message: str) -> None:
    _emit(SYMBOL_ERROR, message)


def print_warning(message: str) -> None:
    _emit(SYMBOL_WARNING, message)


def print_info(message: str) -> None:
    _emit(SYMBOL_INFO, message)


def print_sub_task_done(message: str) -> None:
    """들여쓴 완료 표시 (단계 헤더 아래 항목용)"""
    _emit(SYMBOL_SUCCESS, message, indent=INDENT)


def print_step_header(step: int, total: int, message: str) -> None:
    """[1/3] 로그 분석 형식의 단계 헤더"""
    console.print(f"[bold cyan][{step}/{total}] {message}[/bold cyan]")


def print_table(
    title: str,
    columns: list[str],
    rows: list[list],
    justify: dict[str, str] | None = None,
) -> None:
    """rich Table 출력

    Args:
        title: 표 제목
        columns: 헤더
        rows: 행 (셀은 str()로 변환)
        justify: 헤더 이름별 정렬 ("right" 등). 없으면 왼쪽 정렬
    """
    justify = justify or {}
    table = Table(title=title, header_style="bold magenta")
    for column in columns:
        table.add_column(column, justify=justify.get(column, "left"))
    for row in rows:
        table.add_row(*map(str, row))
    console.print(table)

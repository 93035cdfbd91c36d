"""
main.py - cta 실행 진입점

    $ python main.py run ./cloudtrail -o output
    $ cta run ./cloudtrail -o output          # pip install 후
"""

import sys
from pathlib import Path

# 소스 트리에서 직접 실행할 때 패키지 루트를 import 경로에 추가
_ROOT = str(Path(__file__).resolve().parent)
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

from cli.app import cli  # noqa: E402


def main() -> None:
    """cta CLI 실행 (cli.app:cli 위임)"""
    cli(prog_name="cta")


if __name__ == "__main__":
    main()

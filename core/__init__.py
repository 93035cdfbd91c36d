# core/__init__.py
"""
core - CloudTrail Analyzer 공통 인프라

설정, 예외, 병렬 처리를 포함하는 최상위 패키지입니다.

아키텍처:
    core/
    ├── parallel/       # 배치 병렬 실행 (압축 해제, S3 다운로드)
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_max_workers
    workers = get_max_workers()  # 4

    # 예외 처리
    from core.exceptions import CTAError
    try:
        result = run_analysis(root)
    except CTAError as e:
        print(e.to_dict())
"""

from core import config, exceptions, parallel

__all__: list[str] = [
    "config",
    "exceptions",
    "parallel",
]

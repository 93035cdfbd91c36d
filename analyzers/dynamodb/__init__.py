"""
analyzers/dynamodb - DynamoDB 프로비저닝 용량 분석
"""

from .throughput import (
    THROUGHPUT_COLUMNS,
    ThroughputEvent,
    build_throughput_table,
    convert_timezone,
    summarize_capacity,
)

__all__: list[str] = [
    "THROUGHPUT_COLUMNS",
    "ThroughputEvent",
    "build_throughput_table",
    "convert_timezone",
    "summarize_capacity",
]

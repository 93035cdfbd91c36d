"""
analyzers - 로그 분석 모듈

하위 패키지:
    cloudtrail/   - CloudTrail 아카이브 압축 해제, 이벤트 집계/필터, 파이프라인
    dynamodb/     - UpdateTable 이벤트 기반 프로비저닝 용량 테이블
"""

"""reports - 분석 결과 출력 모듈

하위 모듈:
- throughput: DynamoDB 용량 차트(PNG) 및 Excel 보고서
"""

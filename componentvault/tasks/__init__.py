"""
Celery Tasks for ComponentVault

이 모듈은 검색 인덱스 동기화 등 백그라운드 작업을 처리하는 Celery 작업을 포함합니다.
"""

from celery import Celery

# Celery 애플리케이션 인스턴스 생성
app = Celery("componentvault_tasks")

# celeryconfig 모듈에서 설정 로드
app.config_from_object("celeryconfig")


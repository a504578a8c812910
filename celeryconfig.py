"""
Celery Configuration for ComponentVault

이 파일은 Celery 브로커, 결과 백엔드, 작업 라우팅을 설정합니다.
"""

import os

# =======================
# Broker and Backend
# =======================

# Redis broker URL
broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")

# Redis result backend
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

# =======================
# Task Configuration
# =======================

# 작업 직렬화 포맷
task_serializer = "json"
accept_content = ["json"]
result_serializer = "json"

timezone = "UTC"
enable_utc = True

# 작업 결과 만료 시간 (1일)
result_expires = 60 * 60 * 24

# 작업 재시도 설정 (at-least-once 전달)
task_acks_late = True  # 작업 완료 후 ACK
task_reject_on_worker_lost = True  # 워커 중단 시 작업 재큐잉
worker_prefetch_multiplier = 4

# 워커 시작 시 등록할 작업 모듈
imports = ("componentvault.tasks.search_sync",)

# =======================
# Task Routing
# =======================

task_routes = {
    "componentvault.tasks.search_sync.sync_search_document": {
        "queue": "search",
        "priority": 5,
    },
}

# =======================
# Worker Configuration
# =======================

worker_log_format = "[%(asctime)s: %(levelname)s/%(processName)s] %(message)s"
worker_task_log_format = (
    "[%(asctime)s: %(levelname)s/%(processName)s] "
    "[%(task_name)s(%(task_id)s)] %(message)s"
)

worker_concurrency = int(os.getenv("CELERY_WORKER_CONCURRENCY", "4"))

# =======================
# Monitoring
# =======================

# 작업 이벤트 활성화 (Flower 모니터링용)
worker_send_task_events = True
task_send_sent_event = True

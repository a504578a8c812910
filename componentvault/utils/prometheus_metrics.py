"""
Prometheus 메트릭 수집 유틸리티

주요 메트릭:
- HTTP 요청 수 및 응답 시간 (Counter, Histogram)
- 진행 중인 요청 수 (Gauge)
- 컴포넌트 지표 이벤트 (view/download/copy/like/unlike)
- 검색 인덱스 동기화 결과
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    generate_latest,
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
)


# 커스텀 레지스트리 (기본 프로세스 메트릭 제외)
registry = CollectorRegistry()

# ===========================
# HTTP 요청 메트릭
# ===========================
http_requests_total = Counter(
    "componentvault_http_requests_total",
    "전체 HTTP 요청 수",
    ["method", "endpoint", "status_code"],
    registry=registry,
)

http_request_duration_seconds = Histogram(
    "componentvault_http_request_duration_seconds",
    "HTTP 요청 처리 시간 (초)",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=registry,
)

http_requests_in_progress = Gauge(
    "componentvault_http_requests_in_progress",
    "현재 처리 중인 HTTP 요청 수",
    ["method", "endpoint"],
    registry=registry,
)

errors_total = Counter(
    "componentvault_errors_total",
    "에러 발생 수",
    ["error_type", "severity"],
    registry=registry,
)

# ===========================
# 도메인 메트릭
# ===========================
component_metric_events_total = Counter(
    "componentvault_component_metric_events_total",
    "컴포넌트 지표 이벤트 수",
    ["action"],  # view, download, copy, like, unlike
    registry=registry,
)

search_sync_operations_total = Counter(
    "componentvault_search_sync_operations_total",
    "검색 인덱스 동기화 작업 수",
    ["index", "operation", "outcome"],  # outcome: success, failure
    registry=registry,
)


def get_metrics() -> bytes:
    """Prometheus exposition 포맷으로 메트릭 직렬화"""
    return generate_latest(registry)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def record_component_metric(action: str) -> None:
    component_metric_events_total.labels(action=action).inc()


def record_search_sync(index: str, operation: str, success: bool) -> None:
    search_sync_operations_total.labels(
        index=index, operation=operation, outcome="success" if success else "failure"
    ).inc()

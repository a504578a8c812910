"""
Prometheus 메트릭 미들웨어

모든 HTTP 요청에 대해 요청 수, 처리 시간, 동시 처리 수를 기록합니다.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import time
from typing import Callable

from componentvault.utils.prometheus_metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
    errors_total,
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Prometheus 메트릭을 수집하는 FastAPI 미들웨어
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # /metrics 엔드포인트는 메트릭 수집에서 제외
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = request.url.path

        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            # 라우팅 후에는 경로 템플릿 사용 (/v1/components/{component_id})
            endpoint = self._get_endpoint_template(request)
            return response

        except Exception as e:
            errors_total.labels(error_type=type(e).__name__, severity="critical").inc()
            raise

        finally:
            duration = time.time() - start_time

            http_requests_total.labels(
                method=method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                duration
            )
            http_requests_in_progress.labels(
                method=method, endpoint=request.url.path
            ).dec()

            if status_code >= 400:
                severity = "warning" if status_code < 500 else "error"
                errors_total.labels(
                    error_type=f"http_{status_code}", severity=severity
                ).inc()

    @staticmethod
    def _get_endpoint_template(request: Request) -> str:
        """
        FastAPI 라우트 템플릿 추출

        예: /v1/components/123 -> /v1/components/{component_id}
        """
        route = request.scope.get("route")
        if route is not None and hasattr(route, "path"):
            return route.path

        return request.url.path

"""
Prometheus 메트릭 엔드포인트

/metrics 엔드포인트를 통해 Prometheus가 메트릭을 수집할 수 있도록 합니다.
"""

from fastapi import APIRouter, Response

from componentvault.utils.prometheus_metrics import get_content_type, get_metrics

router = APIRouter(tags=["Monitoring"])


@router.get("/metrics")
async def metrics():
    """
    Prometheus 메트릭 노출 엔드포인트

    **사용법:**
    ```yaml
    # prometheus.yml
    scrape_configs:
      - job_name: 'componentvault-api'
        scrape_interval: 15s
        static_configs:
          - targets: ['componentvault-api:8000']
    ```

    **응답 예시:**
    ```
    # HELP componentvault_component_metric_events_total 컴포넌트 지표 액션 수
    # TYPE componentvault_component_metric_events_total counter
    componentvault_component_metric_events_total{action="download"} 42.0
    ```
    """
    return Response(content=get_metrics(), media_type=get_content_type())

"""
Sentry 에러 트래킹 설정

처리되지 않은 예외와 검색 동기화 실패를 Sentry로 전송합니다.
DSN이 설정되지 않은 경우 아무 작업도 하지 않습니다.
"""

import logging
from typing import Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from componentvault.config import Settings


SENSITIVE_KEYS = ("token", "api_key", "apikey", "secret", "authorization", "code")


def init_sentry(settings: Settings, traces_sample_rate: float = 1.0) -> bool:
    """
    Sentry SDK 초기화

    환경별 샘플링 비율:
    - development: 1.0
    - staging: 0.5
    - production: 0.1

    Returns:
        bool: 초기화 여부
    """
    if not settings.SENTRY_DSN:
        logging.info("Sentry DSN이 설정되지 않았습니다. Sentry 모니터링이 비활성화됩니다.")
        return False

    environment = settings.SENTRY_ENVIRONMENT or settings.ENV
    if environment == "production":
        traces_sample_rate = min(traces_sample_rate, 0.1)
    elif environment == "staging":
        traces_sample_rate = min(traces_sample_rate, 0.5)

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=environment,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=traces_sample_rate,
        release=settings.APP_VERSION,
        send_default_pii=False,
        before_send=before_send_filter,
    )

    logging.info(
        f"Sentry 초기화 완료: environment={environment}, "
        f"traces_sample_rate={traces_sample_rate}"
    )
    return True


def before_send_filter(event, hint):
    """
    이벤트 전송 전 민감 정보 마스킹

    요청 헤더의 Authorization, 본문/extra의 토큰·API 키를 제거합니다.
    컴포넌트 소스 코드(`code`)도 용량과 저작권 문제로 전송하지 않습니다.
    """
    request = event.get("request")
    if request:
        if "data" in request:
            request["data"] = mask_sensitive_data(request["data"])

        headers = request.get("headers")
        if headers:
            for key in list(headers.keys()):
                if key.lower() in ("authorization", "x-algolia-api-key"):
                    headers[key] = "[Filtered]"

    if "extra" in event:
        event["extra"] = mask_sensitive_data(event["extra"])

    return event


def mask_sensitive_data(data, sensitive_keys: tuple = SENSITIVE_KEYS):
    """민감 데이터 마스킹 (재귀적)"""
    if isinstance(data, dict):
        return {
            key: "[Filtered]"
            if any(sensitive in str(key).lower() for sensitive in sensitive_keys)
            else mask_sensitive_data(value, sensitive_keys)
            for key, value in data.items()
        }

    if isinstance(data, list):
        return [mask_sensitive_data(item, sensitive_keys) for item in data]

    return data


def capture_exception_with_context(
    exception: Exception, user_id: Optional[str] = None, **extra
) -> None:
    """
    예외를 Sentry에 수동으로 전송 (추가 컨텍스트 포함)

    Example:
        capture_exception_with_context(e, index="components", object_id="...")
    """
    with sentry_sdk.new_scope() as scope:
        if user_id:
            scope.set_user({"id": user_id})

        for key, value in extra.items():
            scope.set_extra(key, value)

        sentry_sdk.capture_exception(exception)

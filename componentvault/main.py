"""
ComponentVault FastAPI 메인 애플리케이션

UI 컴포넌트 공유 플랫폼의 백엔드 API 서버입니다.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from componentvault.config import Settings, get_settings
from componentvault.models.base import create_engine, create_session_factory
from componentvault.middleware.prometheus import PrometheusMiddleware
from componentvault.search.client import SearchIndexClient
from componentvault.search.publishers import build_change_publisher
from componentvault.utils.logging import setup_logging, get_logger
from componentvault.utils.exceptions import AppException
from componentvault.utils.sentry_config import init_sentry

# API 라우터
from componentvault.api.components import router as components_router
from componentvault.api.collections import router as collections_router
from componentvault.api.favorites import router as favorites_router
from componentvault.api.follows import router as follows_router
from componentvault.api.reviews import router as reviews_router
from componentvault.api.comments import router as comments_router
from componentvault.api.users import router as users_router
from componentvault.api.profile import router as profile_router
from componentvault.api.leaderboard import router as leaderboard_router
from componentvault.api.stats import router as stats_router
from componentvault.api.search import router as search_router
from componentvault.api.metrics import router as metrics_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 라이프사이클 관리

    시작 시: 로깅/Sentry 초기화, 데이터베이스 엔진, 검색 인덱스 클라이언트, change publisher 생성
    종료 시: 리소스 정리
    """
    settings: Settings = app.state.settings

    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)
    init_sentry(settings)
    logger.info("ComponentVault 서버 시작 중...")

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    search_index: Optional[SearchIndexClient] = None
    if settings.search_enabled:
        search_index = SearchIndexClient.from_settings(settings)
    else:
        logger.warning("[WARNING] Search credentials not configured")

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.search_index = search_index
    app.state.change_publisher = build_change_publisher(
        settings, search_index, session_factory
    )

    logger.info("[OK] 서버 시작 완료")
    yield

    logger.info("ComponentVault 서버 종료 중...")
    if search_index is not None:
        await search_index.aclose()
    await engine.dispose()
    logger.info("[OK] 서버 종료 완료")


def _error_body(exc: AppException) -> dict:
    return {
        "error": exc.error_code,
        "message": exc.message,
        "details": exc.details,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """전역 예외 핸들러 등록 (오류 응답 형식: {error, message, details})"""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """애플리케이션 정의 예외 처리"""
        logger.warning(
            f"AppException: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """요청 형식 오류는 422 대신 400으로 응답"""
        logger.warning(f"RequestValidationError: {request.url.path}")
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "입력 데이터가 유효하지 않습니다.",
                "details": {"errors": jsonable_encoder(exc.errors())},
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """모든 예외를 캐치하는 최종 핸들러"""
        logger.error(
            f"Unhandled exception: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "서버 내부 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
                "details": {},
            },
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성

    테스트에서는 TestSettings를 넘기고 app.state에 세션 팩토리를 직접 설정합니다.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="ComponentVault API",
        description="""
## ComponentVault

UI 컴포넌트를 공유하고 탐색하는 플랫폼의 백엔드 API입니다.

### 주요 기능

- [OK] **컴포넌트**: 등록, 조회, 수정, 삭제, 조회수/다운로드/복사/좋아요 지표
- [OK] **컬렉션**: 컴포넌트 묶음 관리
- [OK] **소셜**: 즐겨찾기, 팔로우, 리뷰(별점, 도움돼요 투표), 댓글
- [OK] **프로필**: 활동 피드, 업적
- [OK] **리더보드 & 통계**: 기여자 랭킹, 플랫폼 통계
- [OK] **검색**: 호스팅 검색 인덱스 동기화 및 전체 재동기화
        """,
        version=settings.APP_VERSION,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS 미들웨어 설정 (프론트엔드 연동)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PrometheusMiddleware)

    register_exception_handlers(app)

    # 헬스 체크 엔드포인트
    @app.get("/", tags=["Health"])
    async def root():
        """루트 엔드포인트"""
        return {
            "service": settings.APP_NAME,
            "status": "running",
            "version": settings.APP_VERSION,
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """헬스 체크 엔드포인트 (로드 밸런서용)"""
        return {
            "status": "healthy",
            "search_index": (
                "configured"
                if getattr(request.app.state, "search_index", None) is not None
                else "disabled"
            ),
        }

    # API 라우터 등록
    app.include_router(components_router)
    app.include_router(collections_router)
    app.include_router(favorites_router)
    app.include_router(follows_router)
    app.include_router(reviews_router)
    app.include_router(comments_router)
    app.include_router(users_router)
    app.include_router(profile_router)
    app.include_router(leaderboard_router)
    app.include_router(stats_router)
    app.include_router(search_router)
    app.include_router(metrics_router)

    return app


app = create_app()


if __name__ == "__main__":
    # 개발 서버 실행
    _settings = get_settings()
    uvicorn.run(
        "componentvault.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.is_development,
        log_level="info",
    )

"""
SQLAlchemy Base 모델 및 데이터베이스 세션 관리

이 모듈은 모든 데이터베이스 모델의 기본 클래스와 비동기 세션 팩토리를 제공합니다.
엔진과 세션 팩토리는 애플리케이션 lifespan에서 생성되어 app.state에 보관되며,
요청마다 get_db 의존성으로 주입됩니다 (전역 싱글톤 없음).
"""

from datetime import datetime
from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from componentvault.config import Settings
from componentvault.utils.timeutils import utcnow


# 네이밍 컨벤션 정의 (Alembic 마이그레이션 시 일관된 제약 조건 이름 생성)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """
    모든 데이터베이스 모델의 기본 클래스
    """

    metadata = metadata


class TimestampMixin:
    """
    생성/수정 시간 자동 추적 Mixin

    같은 초에 생성된 레코드도 최신순 정렬이 가능하도록 애플리케이션에서 값을 채웁니다.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        comment="생성 일시",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
        comment="수정 일시",
    )


def enable_sqlite_savepoints(engine: AsyncEngine, begin_statement: str = "BEGIN") -> None:
    """
    SQLite 드라이버의 암묵적 트랜잭션 처리를 끄고 BEGIN을 직접 실행

    SAVEPOINT(begin_nested)가 외부 트랜잭션 안에서 올바르게 동작하려면 필요합니다.
    동시 쓰기 테스트에서는 begin_statement="BEGIN IMMEDIATE"로 쓰기 잠금을 먼저 잡습니다.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql(begin_statement)


def create_engine(settings: Settings) -> AsyncEngine:
    """
    설정에 맞는 비동기 엔진 생성

    SQLite(aiosqlite)는 연결 풀 옵션을 지원하지 않으므로 별도로 처리합니다.
    """
    if settings.DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.SQL_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_savepoints(engine)
        return engine

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # 연결 전 핑 테스트 (연결 끊김 방지)
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """비동기 세션 팩토리 생성"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # 커밋 후 객체 만료 방지
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입용 데이터베이스 세션 생성기

    요청 처리가 끝나면 커밋하고, 커밋된 검색 대상 변경 사항을 change publisher에 넘깁니다.

    사용 예시:
    ```python
    @router.get("/components")
    async def list_components(db: AsyncSession = Depends(get_db)):
        ...
    ```
    """
    from componentvault.search.changes import publish_committed_changes
    from componentvault.search.dependencies import get_change_publisher

    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        await publish_committed_changes(session, get_change_publisher(request))


async def init_db(engine: AsyncEngine) -> None:
    """
    데이터베이스 초기화 (테이블 생성)

    주의: 프로덕션 환경에서는 Alembic 마이그레이션을 사용하세요.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine) -> None:
    """
    모든 테이블 삭제 (테스트용)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

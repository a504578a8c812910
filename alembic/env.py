"""
Alembic 마이그레이션 환경 설정

비동기 SQLAlchemy 엔진으로 ComponentVault 스키마 마이그레이션을 실행합니다.
데이터베이스 URL은 애플리케이션 설정(DATABASE_URL)을 그대로 사용합니다.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from componentvault.config import get_settings
from componentvault.models import Base

# Alembic Config 객체 - alembic.ini 파일의 값에 접근
config = context.config

# Python 로깅 설정 (alembic.ini의 [loggers] 섹션 사용)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# 모든 모델은 componentvault.models에서 등록됨
target_metadata = Base.metadata


def get_url() -> str:
    """
    데이터베이스 URL

    우선순위:
    1. 애플리케이션 설정 (DATABASE_URL 환경 변수 / .env)
    2. alembic.ini 파일의 sqlalchemy.url
    """
    return get_settings().DATABASE_URL or config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """
    'offline' 모드로 마이그레이션 실행

    데이터베이스 연결 없이 SQL 스크립트만 생성합니다.
    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """비동기 엔진으로 마이그레이션 실행"""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # 마이그레이션 시에는 연결 풀 사용 안 함
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

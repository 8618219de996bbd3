# mescore/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel/SQLAlchemy 비동기 엔진과 세션 공장을 설정합니다.
- 요청 단위 비동기 세션 제너레이터를 제공합니다.
- 'core' 스키마 및 테이블을 생성하는 함수를 포함합니다 (개발용, 운영은 Alembic 사용).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.config import settings
from mescore.core.model_base import CORE_SCHEMA

logger = logging.getLogger(__name__)


def engine_options(url: str) -> Dict[str, Any]:
    """드라이버별 엔진 옵션. SQLite(aiosqlite)는 풀 크기 옵션을 받지 않습니다."""
    options: Dict[str, Any] = {"echo": settings.DEBUG_MODE}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_recycle=3600,  # 1시간마다 연결 재활용
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return options


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite 연결마다 외래 키 검사를 켭니다. (기본값이 꺼져 있음)"""
    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    options = engine_options(url)
    options.update(overrides)
    new_engine = create_async_engine(url, **options)
    if make_url(url).get_backend_name() == "sqlite":
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine: AsyncEngine = build_engine(settings.DATABASE_URL.get_secret_value())

# 비동기 세션을 생성하는 '세션 공장'
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(target: AsyncEngine = None) -> None:
    """
    'core' 스키마와 모든 테이블을 생성합니다. 기존 테이블은 삭제하지 않습니다.
    """
    # 모든 테이블 모델이 SQLModel.metadata 에 등록되도록 임포트합니다.
    from mescore.domains import models  # noqa: F401

    target = target or engine
    async with target.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {CORE_SCHEMA}"))
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema and tables are ready.")


# =============================================================================
# 비동기 데이터베이스 세션
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    스크립트, 시작 시 데이터 입력 등 요청 밖에서 사용하는 독립적인 세션 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

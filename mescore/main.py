# mescore/main.py

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

# 핵심 설정 및 데이터베이스 모듈 임포트
from mescore import API_PREFIX
from mescore.core.config import settings
from mescore.core.database import create_db_and_tables, engine, get_async_session_context
from mescore.core.dependencies import get_db_session
from mescore.core.exceptions import ErrorType, MesError
from mescore.core.seed import seed_defaults

# 도메인 라우터 임포트
from mescore.domains.eqp.routers import router as eqp_router
from mescore.domains.mode.routers import router as mode_router
from mescore.domains.state.routers import router as state_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# 오류 종류별 HTTP 상태 코드
ERROR_STATUS_CODES = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.REFERENCE: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorType.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    시작 시 (설정된 경우) 테이블 생성과 기본 데이터 입력을 수행하고,
    종료 시 데이터베이스 연결 풀을 닫습니다.
    """
    logger.info(f"{settings.APP_NAME} starting ({settings.APP_ENV})")
    if settings.DB_AUTO_CREATE:
        await create_db_and_tables()
        async with get_async_session_context() as session:
            await seed_defaults(session)
    else:
        logger.info("DB_AUTO_CREATE is off; schema is expected to be managed by Alembic.")

    yield  # 애플리케이션 실행

    await engine.dispose()
    logger.info("Database connection pool closed.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
# 개발용: 모든 출처 허용. 운영에서는 실제 프론트엔드 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 저장소 오류 처리 --
# 메시지가 아닌 오류 종류로 상태 코드를 결정합니다.
@app.exception_handler(MesError)
async def mes_error_handler(request: Request, exc: MesError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# -- 도메인 라우터 포함 --
app.include_router(eqp_router, prefix=f"{API_PREFIX}/eqp")
app.include_router(mode_router, prefix=f"{API_PREFIX}/mode")
app.include_router(state_router, prefix=f"{API_PREFIX}/state")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    MES Core API의 루트 엔드포인트입니다.
    """
    return {"message": "Welcome to MES Core API. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    데이터베이스에 가벼운 쿼리를 실행하여 연결 상태를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )

# mescore/core/model_base.py

"""
모든 테이블 모델이 공유하는 기본 요소입니다.
 - CORE_SCHEMA: 모든 테이블이 속하는 PostgreSQL 스키마
 - TimestampMixin: created_at / updated_at 컬럼
"""

from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel

CORE_SCHEMA = "core"


def utcnow() -> datetime:
    return datetime.now(UTC)


def core_fk(table_column: str) -> str:
    """'equipment_type.id' -> 'core.equipment_type.id'"""
    return f"{CORE_SCHEMA}.{table_column}"


class TimestampMixin(SQLModel):
    """
    생성/수정 일시 컬럼 믹스인.
    updated_at 은 애플리케이션 시계로 갱신하여 같은 트랜잭션 안의 연속 수정에서도 증가합니다.
    """
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "nullable": False},
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": utcnow, "nullable": False},
        description="레코드 마지막 업데이트 일시"
    )

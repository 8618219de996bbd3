# mescore/domains/mode/models.py

"""
'mode' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 모드 그룹(ModeGroup) -> 모드(Mode) 2단계 분류 체계
 - 모드 설명(description)은 같은 모드 그룹 안에서만 유일합니다.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlmodel import Column, Field, SQLModel

from mescore.core.model_base import CORE_SCHEMA, TimestampMixin, core_fk


# =============================================================================
# 1. core.mode_group 테이블 모델
# =============================================================================
class ModeGroupBase(SQLModel):
    name: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="모드 그룹 이름 (전역 유일)")
    description: str = Field(max_length=2048, description="모드 그룹 설명")


class ModeGroup(ModeGroupBase, TimestampMixin, table=True):
    __tablename__ = "mode_group"
    __table_args__ = {'schema': CORE_SCHEMA}

    id: Optional[int] = Field(default=None, primary_key=True, description="모드 그룹 고유 ID")


# =============================================================================
# 2. core.mode 테이블 모델
# =============================================================================
class Mode(TimestampMixin, table=True):
    __tablename__ = "mode"
    __table_args__ = (
        UniqueConstraint("mode_group_id", "description", name="uq_mode_group_description"),
        {'schema': CORE_SCHEMA},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="모드 고유 ID")
    mode_group_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("mode_group.id")), nullable=False, index=True),
        description="소속 모드 그룹 ID"
    )
    description: str = Field(max_length=2048, description="모드 설명 (그룹 내 유일)")

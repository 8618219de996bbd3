# mescore/domains/state/models.py

"""
'state' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 상태 그룹(StateGroup) -> 상태(State)
 - 상태는 그룹 안에서 코드(code)와 설명(description)이 각각 유일해야 합니다.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlmodel import Column, Field, SQLModel

from mescore.core.model_base import CORE_SCHEMA, TimestampMixin, core_fk


# =============================================================================
# 1. core.state_group 테이블 모델
# =============================================================================
class StateGroupBase(SQLModel):
    name: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="상태 그룹 이름 (전역 유일)")
    description: str = Field(max_length=2048, description="상태 그룹 설명")


class StateGroup(StateGroupBase, TimestampMixin, table=True):
    __tablename__ = "state_group"
    __table_args__ = {'schema': CORE_SCHEMA}

    id: Optional[int] = Field(default=None, primary_key=True, description="상태 그룹 고유 ID")


# =============================================================================
# 2. core.state 테이블 모델
# =============================================================================
class State(TimestampMixin, table=True):
    __tablename__ = "state"
    __table_args__ = (
        UniqueConstraint("state_group_id", "code", name="uq_state_group_code"),
        UniqueConstraint("state_group_id", "description", name="uq_state_group_description"),
        {'schema': CORE_SCHEMA},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="상태 고유 ID")
    state_group_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("state_group.id")), nullable=False, index=True),
        description="소속 상태 그룹 ID"
    )
    code: int = Field(description="상태 코드 (0 이상, 그룹 내 유일)")
    description: str = Field(max_length=2048, description="상태 설명 (그룹 내 유일)")

# mescore/domains/eqp/models.py

"""
'eqp' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 설비 유형(EquipmentType)
 - 설비(Equipment): parent_id 로 이어지는 숲(forest) 구조
   (enterprise -> site -> area -> line -> cell)
 - 설비와 모드 그룹 / 상태 그룹의 연결 테이블

관계는 외래 키 ID 필드로만 표현하며, 연관 객체는 쿼리로 조회합니다.
"""

from typing import Any, Dict, Optional

from sqlalchemy import JSON, ForeignKey, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Column, Field, SQLModel

from mescore.core.model_base import CORE_SCHEMA, TimestampMixin, core_fk

# PostgreSQL 에서는 JSONB, 그 외(SQLite 등)에서는 JSON 으로 저장합니다.
MetadataType = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# 1. core.equipment_type 테이블 모델
# =============================================================================
class EquipmentType(TimestampMixin, table=True):
    __tablename__ = "equipment_type"
    __table_args__ = {'schema': CORE_SCHEMA}

    id: Optional[int] = Field(default=None, primary_key=True, description="설비 유형 고유 ID")
    name: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="설비 유형 이름 (전역 유일)")


# =============================================================================
# 2. core.equipment 테이블 모델
# =============================================================================
class Equipment(TimestampMixin, table=True):
    __tablename__ = "equipment"
    __table_args__ = {'schema': CORE_SCHEMA}

    id: Optional[int] = Field(default=None, primary_key=True, description="설비 고유 ID")
    name: str = Field(max_length=255, index=True, description="설비 이름")
    type_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("equipment_type.id")), nullable=False, index=True),
        description="설비 유형 ID"
    )
    parent_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey(core_fk("equipment.id")), nullable=True, index=True),
        description="상위 설비 ID (없으면 최상위)"
    )
    enabled: bool = Field(default=True, description="사용 여부")
    # 'metadata' 는 SQLModel 예약어이므로 속성 이름을 달리하고 컬럼 이름만 metadata 로 둡니다.
    equipment_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", MetadataType, nullable=False),
        description="설비 부가 정보 (키/값)"
    )


# =============================================================================
# 3. 설비 - 모드 그룹 / 상태 그룹 연결 테이블
# =============================================================================
class EquipmentModeGroup(SQLModel, table=True):
    __tablename__ = "equipment_mode_group"
    __table_args__ = {'schema': CORE_SCHEMA}

    equipment_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("equipment.id"), ondelete="CASCADE"), primary_key=True)
    )
    mode_group_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("mode_group.id")), primary_key=True)
    )


class EquipmentStateGroup(SQLModel, table=True):
    __tablename__ = "equipment_state_group"
    __table_args__ = {'schema': CORE_SCHEMA}

    equipment_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("equipment.id"), ondelete="CASCADE"), primary_key=True)
    )
    state_group_id: int = Field(
        sa_column=Column(Integer, ForeignKey(core_fk("state_group.id")), primary_key=True)
    )

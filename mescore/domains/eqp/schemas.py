# mescore/domains/eqp/schemas.py

"""
'eqp' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.

설비 부가 정보(metadata)는 ORM 모델에서 equipment_metadata 속성으로 저장되므로,
API 에서는 'metadata' 라는 이름으로 주고받습니다.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from sqlmodel import SQLModel


# =============================================================================
# 1. 설비 유형 스키마
# =============================================================================
class EquipmentTypeCreate(SQLModel):
    name: str = Field(..., description="설비 유형 이름")


class EquipmentTypeUpdate(SQLModel):
    name: Optional[str] = Field(None, description="설비 유형 이름")


class EquipmentTypeRead(SQLModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class EquipmentTypeBulkCreate(SQLModel):
    items: List[EquipmentTypeCreate] = Field(..., description="생성할 설비 유형 목록 (최대 100개)")


# =============================================================================
# 2. 설비 스키마
# =============================================================================
class EquipmentCreate(BaseModel):
    name: str = Field(..., description="설비 이름")
    type_id: int = Field(..., description="설비 유형 ID")
    parent_id: Optional[int] = Field(None, description="상위 설비 ID (없으면 최상위)")
    enabled: bool = Field(True, description="사용 여부")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="설비 부가 정보")


class EquipmentMetadataUpdate(BaseModel):
    metadata: Dict[str, Any] = Field(..., description="새 부가 정보 (전체 교체)")


class EquipmentEnabledUpdate(BaseModel):
    enabled: bool


class EquipmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type_id: int
    parent_id: Optional[int] = None
    enabled: bool
    # ORM 객체의 'metadata' 속성은 SQLAlchemy MetaData 이므로 equipment_metadata 를 먼저 찾습니다.
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("equipment_metadata", "metadata"),
    )
    created_at: datetime
    updated_at: datetime


class EquipmentPathRead(BaseModel):
    """루트 -> 대상 순서의 경로와 계층별 조상."""
    nodes: List[EquipmentRead]
    enterprise: Optional[EquipmentRead] = None
    site: Optional[EquipmentRead] = None
    area: Optional[EquipmentRead] = None
    line: Optional[EquipmentRead] = None
    cell: Optional[EquipmentRead] = None
    parent: Optional[EquipmentRead] = None


class GroupAssignmentRead(BaseModel):
    equipment_id: int
    group_ids: List[int]

# mescore/domains/state/schemas.py

"""
'state' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field
from sqlmodel import SQLModel


# =============================================================================
# 1. 상태 그룹 스키마
# =============================================================================
class StateGroupCreate(SQLModel):
    name: str = Field(..., description="상태 그룹 이름")
    description: str = Field(..., description="상태 그룹 설명")


class StateGroupUpdate(SQLModel):
    name: Optional[str] = Field(None, description="상태 그룹 이름")
    description: Optional[str] = Field(None, description="상태 그룹 설명")


class StateGroupRead(SQLModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


class StateGroupBulkCreate(SQLModel):
    items: List[StateGroupCreate]


# =============================================================================
# 2. 상태 스키마
# =============================================================================
class StateCreate(SQLModel):
    state_group_id: int = Field(..., description="소속 상태 그룹 ID")
    code: int = Field(..., description="상태 코드 (0 이상)")
    description: str = Field(..., description="상태 설명")


class StateUpdate(SQLModel):
    """코드와 설명을 부분 업데이트합니다."""
    code: Optional[int] = Field(None, description="상태 코드")
    description: Optional[str] = Field(None, description="상태 설명")


class StateGroupChange(SQLModel):
    state_group_id: int = Field(..., description="이동할 상태 그룹 ID")


class StateRead(SQLModel):
    id: int
    state_group_id: int
    code: int
    description: str
    created_at: datetime
    updated_at: datetime


class StateBulkCreate(SQLModel):
    items: List[StateCreate] = Field(..., description="생성할 상태 목록 (최대 100개)")

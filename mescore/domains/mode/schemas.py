# mescore/domains/mode/schemas.py

"""
'mode' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.

문자열 필드의 공백 제거, 필수 여부, 길이 제한은 저장소(crud)의 검증 규칙이 담당하므로
여기서는 형식(타입)만 정의합니다.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field
from sqlmodel import SQLModel


# =============================================================================
# 1. 모드 그룹 스키마
# =============================================================================
class ModeGroupCreate(SQLModel):
    name: str = Field(..., description="모드 그룹 이름")
    description: str = Field(..., description="모드 그룹 설명")


class ModeGroupUpdate(SQLModel):
    """부분 업데이트. 전달한 필드만 변경됩니다."""
    name: Optional[str] = Field(None, description="모드 그룹 이름")
    description: Optional[str] = Field(None, description="모드 그룹 설명")


class ModeGroupRead(SQLModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 2. 모드 스키마
# =============================================================================
class ModeCreate(SQLModel):
    mode_group_id: int = Field(..., description="소속 모드 그룹 ID")
    description: str = Field(..., description="모드 설명")


class ModeUpdate(SQLModel):
    description: Optional[str] = Field(None, description="모드 설명")


class ModeGroupChange(SQLModel):
    mode_group_id: int = Field(..., description="이동할 모드 그룹 ID")


class ModeRead(SQLModel):
    id: int
    mode_group_id: int
    description: str
    created_at: datetime
    updated_at: datetime


class ModeBulkCreate(SQLModel):
    items: List[ModeCreate] = Field(..., description="생성할 모드 목록 (최대 100개)")


class ModeGroupBulkCreate(SQLModel):
    items: List[ModeGroupCreate] = Field(..., description="생성할 모드 그룹 목록 (최대 100개)")

# mescore/core/schemas.py

"""
여러 도메인이 공유하는 API 응답 스키마입니다.
"""

from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel, Field

from mescore.core.query import PageRequest

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """페이지 단위 목록 응답."""
    data: List[T] = Field(default_factory=list, description="현재 페이지의 행 목록")
    total_count: int = Field(..., description="필터 조건에 맞는 전체 건수")
    page: int = Field(..., description="현재 페이지 (1부터 시작)")
    per_page: int = Field(..., description="페이지당 행 수")
    total_pages: int = Field(..., description="전체 페이지 수")

    @classmethod
    def build(cls, rows: Sequence, total_count: int, page: PageRequest) -> "PaginatedResponse":
        return cls(
            data=list(rows),
            total_count=total_count,
            page=page.page,
            per_page=page.per_page,
            total_pages=page.total_pages(total_count),
        )


class CountResponse(BaseModel):
    count: int


class ExistsResponse(BaseModel):
    exists: bool

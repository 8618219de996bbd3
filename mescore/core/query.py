# mescore/core/query.py

"""
조회/필터 엔진 모듈입니다.

- PageRequest: 페이지 번호(1부터 시작) 또는 offset/limit 기반 페이징 요청과 그 검증
- bytewise_lower: 로케일과 무관한 대소문자 무시 비교를 위한 SQL 함수
- FilterSet: 선택적 필터(동등, 부분 문자열, 범위)로부터 바인딩된 조건식 목록 생성
- paginate: 같은 FilterSet 으로 페이지 쿼리와 카운트 쿼리를 함께 실행

모든 값은 바인드 파라미터로 전달되며 쿼리 문자열에 직접 포맷되지 않습니다.
"""

import math
import string
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Type

from sqlalchemy import String, func
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.exceptions import ValidationError

MAX_PER_PAGE = 1000
DEFAULT_PER_PAGE = 50

# DB 측 lower() 는 ASCII 만 변환하므로 검색어도 ASCII 만 소문자로 바꿉니다.
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_LIKE_ESCAPE = "\\"


# =============================================================================
# 1. 페이징 요청
# =============================================================================
@dataclass(frozen=True)
class PageRequest:
    offset: int = 0
    limit: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        if self.limit < 1 or self.limit > MAX_PER_PAGE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PER_PAGE}", field="per_page")
        if self.offset < 0:
            raise ValidationError("Offset cannot be negative", field="offset")

    @classmethod
    def from_page(cls, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> "PageRequest":
        """1부터 시작하는 페이지 번호를 offset 으로 변환합니다. offset = (page - 1) * per_page"""
        if per_page < 1 or per_page > MAX_PER_PAGE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PER_PAGE}", field="per_page")
        return cls(offset=(page - 1) * per_page, limit=per_page)

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def per_page(self) -> int:
        return self.limit

    def total_pages(self, total_count: int) -> int:
        return math.ceil(total_count / self.limit) if total_count else 0


# =============================================================================
# 2. 대소문자 무시 비교 함수
# =============================================================================
class bytewise_lower(FunctionElement):
    """
    lower() 를 로케일과 무관하게 적용합니다.
    PostgreSQL 에서는 "C" 콜레이션을 지정하여 DB 로케일 설정의 영향을 받지 않게 합니다.
    """
    type = String()
    name = "bytewise_lower"
    inherit_cache = True


@compiles(bytewise_lower)
def _compile_bytewise_lower(element, compiler, **kw):
    return "lower(%s)" % compiler.process(element.clauses, **kw)


@compiles(bytewise_lower, "postgresql")
def _compile_bytewise_lower_pg(element, compiler, **kw):
    return 'lower(CAST(%s AS TEXT) COLLATE "C")' % compiler.process(element.clauses, **kw)


def ascii_lower(value: str) -> str:
    return value.translate(_ASCII_LOWER)


def contains_pattern(term: str) -> str:
    """LIKE 와일드카드를 이스케이프한 '%term%' 패턴을 만듭니다."""
    escaped = (
        ascii_lower(term)
        .replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def icontains(column, term: str):
    return bytewise_lower(column).like(contains_pattern(term), escape=_LIKE_ESCAPE)


# =============================================================================
# 3. 동적 필터 조합
# =============================================================================
class FilterSet:
    """
    선택적 필터를 누적하는 조건식 빌더입니다. 값이 None 인 필터는 무시됩니다.
    페이지 쿼리와 카운트 쿼리는 모두 apply() 를 거쳐 동일한 조건을 사용합니다.
    """

    def __init__(self) -> None:
        self._conditions: List[Any] = []

    @property
    def conditions(self) -> List[Any]:
        return list(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def where(self, *clauses: Any) -> "FilterSet":
        self._conditions.extend(clauses)
        return self

    def eq(self, column, value: Any) -> "FilterSet":
        if value is not None:
            self._conditions.append(column == value)
        return self

    def contains(self, column, term: Optional[str]) -> "FilterSet":
        if term is not None and term.strip():
            self._conditions.append(icontains(column, term.strip()))
        return self

    def between(self, column, low: Any = None, high: Any = None) -> "FilterSet":
        if low is not None:
            self._conditions.append(column >= low)
        if high is not None:
            self._conditions.append(column <= high)
        return self

    def apply(self, statement):
        if self._conditions:
            return statement.where(*self._conditions)
        return statement


async def count_rows(db: AsyncSession, model: Type[SQLModel], filters: Optional[FilterSet] = None) -> int:
    statement = (filters or FilterSet()).apply(select(func.count()).select_from(model))
    result = await db.execute(statement)
    return result.scalar_one()


async def paginate(
    db: AsyncSession,
    model: Type[SQLModel],
    *,
    page: PageRequest,
    filters: Optional[FilterSet] = None,
    order_by: Sequence[Any] = (),
) -> Tuple[List[Any], int]:
    """
    (페이지 행 목록, 전체 건수)를 반환합니다.
    전체 건수는 페이징 없이 같은 조건으로 계산합니다.
    """
    filters = filters or FilterSet()
    total = await count_rows(db, model, filters)

    statement = filters.apply(select(model))
    if order_by:
        statement = statement.order_by(*order_by)
    statement = statement.offset(page.offset).limit(page.limit)

    result = await db.execute(statement)
    return list(result.scalars().all()), total

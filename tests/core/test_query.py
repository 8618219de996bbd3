# tests/core/test_query.py

"""
페이징 요청, 대소문자 무시 검색 패턴, 조건식 빌더에 대한 테스트입니다.
"""

import pytest
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import select

from mescore.core.exceptions import ValidationError
from mescore.core.query import (
    MAX_PER_PAGE,
    FilterSet,
    PageRequest,
    ascii_lower,
    bytewise_lower,
    contains_pattern,
)
from mescore.domains.mode.models import Mode


# =============================================================================
# 1. PageRequest
# =============================================================================
def test_page_request_defaults():
    page = PageRequest()
    assert page.offset == 0
    assert page.limit == 50
    assert page.page == 1


@pytest.mark.parametrize("limit", [0, MAX_PER_PAGE + 1, -5])
def test_page_request_rejects_limit_out_of_range(limit):
    with pytest.raises(ValidationError, match="Limit must be between 1 and 1000"):
        PageRequest(offset=0, limit=limit)


def test_page_request_rejects_negative_offset():
    with pytest.raises(ValidationError, match="Offset cannot be negative"):
        PageRequest(offset=-1, limit=10)


def test_from_page_converts_to_offset():
    page = PageRequest.from_page(3, 20)
    assert page.offset == 40
    assert page.limit == 20
    assert page.page == 3
    assert page.per_page == 20


def test_from_page_zero_is_rejected():
    with pytest.raises(ValidationError, match="Offset cannot be negative"):
        PageRequest.from_page(0, 10)


def test_total_pages():
    page = PageRequest(limit=10)
    assert page.total_pages(0) == 0
    assert page.total_pages(10) == 1
    assert page.total_pages(11) == 2


# =============================================================================
# 2. 대소문자 무시 검색
# =============================================================================
def test_ascii_lower_leaves_non_ascii_untouched():
    assert ascii_lower("LINE Ä") == "line Ä"


def test_contains_pattern_escapes_wildcards():
    assert contains_pattern("Run") == "%run%"
    assert contains_pattern("100%") == "%100\\%%"
    assert contains_pattern("a_b") == "%a\\_b%"
    assert contains_pattern("c:\\x") == "%c:\\\\x%"


def test_bytewise_lower_compiles_with_c_collation_on_postgresql():
    sql = str(bytewise_lower(Mode.description).compile(dialect=postgresql.dialect()))
    assert sql.startswith("lower(CAST(")
    assert 'COLLATE "C"' in sql


def test_bytewise_lower_compiles_to_plain_lower_elsewhere():
    sql = str(bytewise_lower(Mode.description).compile(dialect=sqlite.dialect()))
    assert sql.startswith("lower(")
    assert "COLLATE" not in sql


# =============================================================================
# 3. FilterSet
# =============================================================================
def test_filter_set_skips_absent_values():
    filters = (
        FilterSet()
        .eq(Mode.mode_group_id, None)
        .contains(Mode.description, None)
        .contains(Mode.description, "   ")
        .between(Mode.id, None, None)
    )
    assert len(filters) == 0
    statement = select(Mode)
    assert filters.apply(statement) is statement


def test_filter_set_binds_values_as_parameters():
    filters = FilterSet().eq(Mode.mode_group_id, 7).contains(Mode.description, "Prod'; DROP")
    compiled = filters.apply(select(Mode)).compile(dialect=postgresql.dialect())
    assert "DROP" not in str(compiled)
    assert 7 in compiled.params.values()
    assert "%prod'; drop%" in compiled.params.values()

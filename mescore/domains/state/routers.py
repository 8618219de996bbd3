# mescore/domains/state/routers.py

"""
'state' 도메인의 API 엔드포인트를 정의하는 모듈입니다.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core import dependencies as deps
from mescore.core.query import DEFAULT_PER_PAGE, PageRequest
from mescore.core.schemas import CountResponse, ExistsResponse, PaginatedResponse
from mescore.domains.state import crud as state_crud
from mescore.domains.state import schemas as state_schemas

router = APIRouter(
    tags=["State Management (상태 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 상태 그룹 엔드포인트
# =============================================================================
@router.post("/state_groups/", response_model=state_schemas.StateGroupRead, status_code=status.HTTP_201_CREATED, summary="새 상태 그룹 생성")
async def create_state_group(
    group_create: state_schemas.StateGroupCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state_group.create(db, obj_in=group_create)


@router.post("/state_groups/bulk", response_model=List[state_schemas.StateGroupRead], status_code=status.HTTP_201_CREATED, summary="상태 그룹 일괄 생성")
async def bulk_create_state_groups(
    bulk_in: state_schemas.StateGroupBulkCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state_group.bulk_create(db, objs_in=bulk_in.items)


@router.get("/state_groups/", response_model=PaginatedResponse[state_schemas.StateGroupRead], summary="상태 그룹 목록 조회")
async def read_state_groups(
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await state_crud.state_group.get_paginated(db, page=page_request)
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/state_groups/search", response_model=List[state_schemas.StateGroupRead], summary="상태 그룹 이름 검색")
async def search_state_groups(name: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await state_crud.state_group.search_by_name(db, term=name)


@router.get("/state_groups/by_date", response_model=List[state_schemas.StateGroupRead], summary="생성일 기간으로 상태 그룹 조회")
async def read_state_groups_by_date(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state_group.get_by_date_range(db, start_date=start_date, end_date=end_date)


@router.get("/state_groups/count", response_model=CountResponse, summary="상태 그룹 개수")
async def count_state_groups(db: AsyncSession = Depends(deps.get_db_session)):
    return CountResponse(count=await state_crud.state_group.count(db))


@router.get("/state_groups/search_by_description", response_model=List[state_schemas.StateGroupRead], summary="상태 그룹 설명 검색")
async def search_state_groups_by_description(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await state_crud.state_group.search_by_description(db, term=description)


@router.get("/state_groups/by_description", response_model=state_schemas.StateGroupRead, summary="설명으로 상태 그룹 조회")
async def read_state_group_by_description(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_group = await state_crud.state_group.get_by_description(db, description=description)
    if db_group is None:
        raise HTTPException(status_code=404, detail="State group not found")
    return db_group


@router.get("/state_groups/exists", response_model=ExistsResponse, summary="상태 그룹 이름 사용 여부")
async def state_group_name_exists(name: str, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await state_crud.state_group.name_exists(db, name=name))


@router.get("/state_groups/{group_id}/exists", response_model=ExistsResponse, summary="상태 그룹 존재 여부")
async def state_group_exists(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await state_crud.state_group.exists(db, group_id))


@router.get("/state_groups/{group_id}", response_model=state_schemas.StateGroupRead, summary="특정 상태 그룹 조회")
async def read_state_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_group = await state_crud.state_group.get(db, id=group_id)
    if db_group is None:
        raise HTTPException(status_code=404, detail="State group not found")
    return db_group


@router.put("/state_groups/{group_id}", response_model=state_schemas.StateGroupRead, summary="상태 그룹 수정")
async def update_state_group(
    group_id: int,
    group_update: state_schemas.StateGroupUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state_group.update(db, id=group_id, obj_in=group_update)


@router.delete("/state_groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT, summary="상태 그룹 삭제")
async def delete_state_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if not await state_crud.state_group.delete(db, id=group_id):
        raise HTTPException(status_code=404, detail="State group not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/state_groups/{group_id}/states", response_model=List[state_schemas.StateRead], summary="그룹의 상태 목록")
async def read_states_for_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """상태 코드 오름차순으로 반환합니다."""
    return await state_crud.state.get_states_for_group(db, state_group_id=group_id)


@router.get("/state_groups/{group_id}/states/paged", response_model=PaginatedResponse[state_schemas.StateRead], summary="그룹의 상태 목록 (페이지)")
async def read_states_for_group_paged(
    group_id: int,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """존재하지 않는 그룹이면 400 을 반환합니다."""
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await state_crud.state.get_paginated_by_group(db, state_group_id=group_id, page=page_request)
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/state_groups/{group_id}/states/range", response_model=List[state_schemas.StateRead], summary="코드 범위로 상태 조회")
async def read_states_by_code_range(
    group_id: int,
    min_code: int,
    max_code: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """min_code 가 max_code 보다 크면 400 을 반환합니다."""
    return await state_crud.state.get_states_by_code_range(
        db, state_group_id=group_id, min_code=min_code, max_code=max_code
    )


# =============================================================================
# 2. 상태 엔드포인트
# =============================================================================
@router.post("/states/", response_model=state_schemas.StateRead, status_code=status.HTTP_201_CREATED, summary="새 상태 생성")
async def create_state(
    state_create: state_schemas.StateCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 상태를 생성합니다.
    - `code`: 0 이상의 정수, 그룹 안에서 유일
    - `description`: 그룹 안에서 유일
    """
    return await state_crud.state.create(db, obj_in=state_create)


@router.post("/states/bulk", response_model=List[state_schemas.StateRead], status_code=status.HTTP_201_CREATED, summary="상태 일괄 생성")
async def bulk_create_states(
    bulk_in: state_schemas.StateBulkCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state.bulk_create(db, objs_in=bulk_in.items)


@router.get("/states/", response_model=PaginatedResponse[state_schemas.StateRead], summary="상태 목록 조회 (필터)")
async def read_states(
    state_group_id: Optional[int] = None,
    description: Optional[str] = None,
    min_code: Optional[int] = None,
    max_code: Optional[int] = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await state_crud.state.search_with_filters(
        db, page=page_request, state_group_id=state_group_id,
        description=description, min_code=min_code, max_code=max_code,
    )
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/states/search", response_model=List[state_schemas.StateRead], summary="상태 설명 검색")
async def search_states(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await state_crud.state.search_by_description(db, term=description)


@router.get("/states/{state_id}", response_model=state_schemas.StateRead, summary="특정 상태 조회")
async def read_state(state_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_state = await state_crud.state.get(db, id=state_id)
    if db_state is None:
        raise HTTPException(status_code=404, detail="State not found")
    return db_state


@router.put("/states/{state_id}", response_model=state_schemas.StateRead, summary="상태 수정")
async def update_state(
    state_id: int,
    state_update: state_schemas.StateUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state.update(db, id=state_id, obj_in=state_update)


@router.patch("/states/{state_id}/group", response_model=state_schemas.StateRead, summary="상태를 다른 그룹으로 이동")
async def move_state(
    state_id: int,
    group_change: state_schemas.StateGroupChange,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await state_crud.state.update_group(db, id=state_id, new_group_id=group_change.state_group_id)


@router.delete("/states/{state_id}", status_code=status.HTTP_204_NO_CONTENT, summary="상태 삭제")
async def delete_state(state_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if not await state_crud.state.delete(db, id=state_id):
        raise HTTPException(status_code=404, detail="State not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

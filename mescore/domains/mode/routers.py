# mescore/domains/mode/routers.py

"""
'mode' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

모드 그룹과 모드에 대한 CRUD, 검색, 페이징 조회, 그룹 이동 엔드포인트를 제공합니다.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core import dependencies as deps
from mescore.core.query import DEFAULT_PER_PAGE, PageRequest
from mescore.core.schemas import CountResponse, ExistsResponse, PaginatedResponse
from mescore.domains.mode import crud as mode_crud
from mescore.domains.mode import schemas as mode_schemas

router = APIRouter(
    tags=["Mode Management (모드 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 모드 그룹 엔드포인트
# =============================================================================
@router.post("/mode_groups/", response_model=mode_schemas.ModeGroupRead, status_code=status.HTTP_201_CREATED, summary="새 모드 그룹 생성")
async def create_mode_group(
    group_create: mode_schemas.ModeGroupCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 모드 그룹을 생성합니다.
    - `name`: 그룹 이름 (1~255자, 전역 유일)
    - `description`: 그룹 설명 (1~2048자)
    """
    return await mode_crud.mode_group.create(db, obj_in=group_create)


@router.post("/mode_groups/bulk", response_model=List[mode_schemas.ModeGroupRead], status_code=status.HTTP_201_CREATED, summary="모드 그룹 일괄 생성")
async def bulk_create_mode_groups(
    bulk_in: mode_schemas.ModeGroupBulkCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mode_crud.mode_group.bulk_create(db, objs_in=bulk_in.items)


@router.get("/mode_groups/", response_model=PaginatedResponse[mode_schemas.ModeGroupRead], summary="모드 그룹 목록 조회")
async def read_mode_groups(
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await mode_crud.mode_group.get_paginated(db, page=page_request)
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/mode_groups/search", response_model=List[mode_schemas.ModeGroupRead], summary="모드 그룹 이름 검색")
async def search_mode_groups(name: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await mode_crud.mode_group.search_by_name(db, term=name)


@router.get("/mode_groups/by_date", response_model=List[mode_schemas.ModeGroupRead], summary="생성일 기간으로 모드 그룹 조회")
async def read_mode_groups_by_date(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mode_crud.mode_group.get_by_date_range(db, start_date=start_date, end_date=end_date)


@router.get("/mode_groups/count", response_model=CountResponse, summary="모드 그룹 개수")
async def count_mode_groups(db: AsyncSession = Depends(deps.get_db_session)):
    return CountResponse(count=await mode_crud.mode_group.count(db))


@router.get("/mode_groups/search_by_description", response_model=List[mode_schemas.ModeGroupRead], summary="모드 그룹 설명 검색")
async def search_mode_groups_by_description(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await mode_crud.mode_group.search_by_description(db, term=description)


@router.get("/mode_groups/by_description", response_model=mode_schemas.ModeGroupRead, summary="설명으로 모드 그룹 조회")
async def read_mode_group_by_description(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_group = await mode_crud.mode_group.get_by_description(db, description=description)
    if db_group is None:
        raise HTTPException(status_code=404, detail="Mode group not found")
    return db_group


@router.get("/mode_groups/exists", response_model=ExistsResponse, summary="모드 그룹 이름 사용 여부")
async def mode_group_name_exists(name: str, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await mode_crud.mode_group.name_exists(db, name=name))


@router.get("/mode_groups/{group_id}/exists", response_model=ExistsResponse, summary="모드 그룹 존재 여부")
async def mode_group_exists(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await mode_crud.mode_group.exists(db, group_id))


@router.get("/mode_groups/{group_id}", response_model=mode_schemas.ModeGroupRead, summary="특정 모드 그룹 조회")
async def read_mode_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_group = await mode_crud.mode_group.get(db, id=group_id)
    if db_group is None:
        raise HTTPException(status_code=404, detail="Mode group not found")
    return db_group


@router.put("/mode_groups/{group_id}", response_model=mode_schemas.ModeGroupRead, summary="모드 그룹 수정")
async def update_mode_group(
    group_id: int,
    group_update: mode_schemas.ModeGroupUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mode_crud.mode_group.update(db, id=group_id, obj_in=group_update)


@router.delete("/mode_groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT, summary="모드 그룹 삭제")
async def delete_mode_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """소속 모드나 설비 연결이 남아있으면 400 으로 거부합니다."""
    if not await mode_crud.mode_group.delete(db, id=group_id):
        raise HTTPException(status_code=404, detail="Mode group not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/mode_groups/{group_id}/modes", response_model=List[mode_schemas.ModeRead], summary="그룹의 모드 목록")
async def read_modes_for_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await mode_crud.mode.get_modes_for_group(db, mode_group_id=group_id)


@router.get("/mode_groups/{group_id}/modes/count", response_model=CountResponse, summary="그룹의 모드 개수")
async def count_modes_for_group(group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return CountResponse(count=await mode_crud.mode.count_by_group(db, mode_group_id=group_id))


@router.get("/mode_groups/{group_id}/modes/paged", response_model=PaginatedResponse[mode_schemas.ModeRead], summary="그룹의 모드 목록 (페이지)")
async def read_modes_for_group_paged(
    group_id: int,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await mode_crud.mode.get_paginated_by_group(db, mode_group_id=group_id, page=page_request)
    return PaginatedResponse.build(rows, total, page_request)


# =============================================================================
# 2. 모드 엔드포인트
# =============================================================================
@router.post("/modes/", response_model=mode_schemas.ModeRead, status_code=status.HTTP_201_CREATED, summary="새 모드 생성")
async def create_mode(
    mode_create: mode_schemas.ModeCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 모드를 생성합니다.
    - `mode_group_id`: 존재하는 모드 그룹 ID
    - `description`: 모드 설명 (그룹 안에서 유일)
    """
    return await mode_crud.mode.create(db, obj_in=mode_create)


@router.post("/modes/bulk", response_model=List[mode_schemas.ModeRead], status_code=status.HTTP_201_CREATED, summary="모드 일괄 생성")
async def bulk_create_modes(
    bulk_in: mode_schemas.ModeBulkCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mode_crud.mode.bulk_create(db, objs_in=bulk_in.items)


@router.get("/modes/", response_model=PaginatedResponse[mode_schemas.ModeRead], summary="모드 목록 조회 (필터)")
async def read_modes(
    mode_group_id: Optional[int] = None,
    description: Optional[str] = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    - `mode_group_id`: 그룹 ID 가 같은 모드만
    - `description`: 설명에 이 문자열을 포함하는 모드만 (대소문자 무시)
    """
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await mode_crud.mode.search_with_filters(
        db, page=page_request, mode_group_id=mode_group_id, description=description
    )
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/modes/search", response_model=List[mode_schemas.ModeRead], summary="모드 설명 검색")
async def search_modes(description: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await mode_crud.mode.search_by_description(db, term=description)


@router.get("/modes/{mode_id}", response_model=mode_schemas.ModeRead, summary="특정 모드 조회")
async def read_mode(mode_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_mode = await mode_crud.mode.get(db, id=mode_id)
    if db_mode is None:
        raise HTTPException(status_code=404, detail="Mode not found")
    return db_mode


@router.put("/modes/{mode_id}", response_model=mode_schemas.ModeRead, summary="모드 수정")
async def update_mode(
    mode_id: int,
    mode_update: mode_schemas.ModeUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await mode_crud.mode.update(db, id=mode_id, obj_in=mode_update)


@router.patch("/modes/{mode_id}/group", response_model=mode_schemas.ModeRead, summary="모드를 다른 그룹으로 이동")
async def move_mode(
    mode_id: int,
    group_change: mode_schemas.ModeGroupChange,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """대상 그룹에 같은 설명의 모드가 있으면 409 로 거부합니다."""
    return await mode_crud.mode.update_group(db, id=mode_id, new_group_id=group_change.mode_group_id)


@router.delete("/modes/{mode_id}", status_code=status.HTTP_204_NO_CONTENT, summary="모드 삭제")
async def delete_mode(mode_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if not await mode_crud.mode.delete(db, id=mode_id):
        raise HTTPException(status_code=404, detail="Mode not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# mescore/domains/eqp/routers.py

"""
'eqp' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

설비 유형, 설비 계층(경로/하위 설비 조회 포함), 설비-모드/상태 그룹 연결에 대한
HTTP 엔드포인트를 제공합니다. 저장소 오류(MesError)는 main.py 의 예외 처리기가
상태 코드로 변환합니다.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core import dependencies as deps
from mescore.core.query import DEFAULT_PER_PAGE, PageRequest
from mescore.core.schemas import CountResponse, ExistsResponse, PaginatedResponse
from mescore.domains.eqp import crud as eqp_crud
from mescore.domains.eqp import schemas as eqp_schemas

router = APIRouter(
    tags=["Equipment Management (설비 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 설비 유형 엔드포인트
# =============================================================================
@router.post("/equipment_types/", response_model=eqp_schemas.EquipmentTypeRead, status_code=status.HTTP_201_CREATED, summary="새 설비 유형 생성")
async def create_equipment_type(
    type_create: eqp_schemas.EquipmentTypeCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 설비 유형을 생성합니다.
    - `name`: 설비 유형 이름 (앞뒤 공백 제거 후 1~255자, 전역 유일)
    """
    return await eqp_crud.equipment_type.create(db, obj_in=type_create)


@router.post("/equipment_types/bulk", response_model=List[eqp_schemas.EquipmentTypeRead], status_code=status.HTTP_201_CREATED, summary="설비 유형 일괄 생성")
async def bulk_create_equipment_types(
    bulk_in: eqp_schemas.EquipmentTypeBulkCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """이미 존재하는 이름은 건너뛰고, 새로 생성된 유형만 반환합니다."""
    return await eqp_crud.equipment_type.bulk_create(db, objs_in=bulk_in.items)


@router.get("/equipment_types/", response_model=PaginatedResponse[eqp_schemas.EquipmentTypeRead], summary="설비 유형 목록 조회")
async def read_equipment_types(
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await eqp_crud.equipment_type.get_paginated(db, page=page_request)
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/equipment_types/search", response_model=List[eqp_schemas.EquipmentTypeRead], summary="설비 유형 이름 검색")
async def search_equipment_types(
    name: str,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """대소문자를 구분하지 않는 부분 문자열 검색입니다."""
    return await eqp_crud.equipment_type.search_by_name(db, term=name)


@router.get("/equipment_types/by_date", response_model=List[eqp_schemas.EquipmentTypeRead], summary="생성일 기간으로 설비 유형 조회")
async def read_equipment_types_by_date(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await eqp_crud.equipment_type.get_by_date_range(db, start_date=start_date, end_date=end_date)


@router.get("/equipment_types/count", response_model=CountResponse, summary="설비 유형 개수")
async def count_equipment_types(db: AsyncSession = Depends(deps.get_db_session)):
    return CountResponse(count=await eqp_crud.equipment_type.count(db))


@router.get("/equipment_types/exists", response_model=ExistsResponse, summary="설비 유형 이름 사용 여부")
async def equipment_type_name_exists(name: str, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await eqp_crud.equipment_type.name_exists(db, name=name))


@router.get("/equipment_types/{type_id}/exists", response_model=ExistsResponse, summary="설비 유형 존재 여부")
async def equipment_type_exists(type_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return ExistsResponse(exists=await eqp_crud.equipment_type.exists(db, type_id))


@router.get("/equipment_types/{type_id}", response_model=eqp_schemas.EquipmentTypeRead, summary="특정 설비 유형 조회")
async def read_equipment_type(
    type_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_type = await eqp_crud.equipment_type.get(db, id=type_id)
    if db_type is None:
        raise HTTPException(status_code=404, detail="Equipment type not found")
    return db_type


@router.put("/equipment_types/{type_id}", response_model=eqp_schemas.EquipmentTypeRead, summary="설비 유형 수정")
async def update_equipment_type(
    type_id: int,
    type_update: eqp_schemas.EquipmentTypeUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await eqp_crud.equipment_type.update(db, id=type_id, obj_in=type_update)


@router.delete("/equipment_types/{type_id}", status_code=status.HTTP_204_NO_CONTENT, summary="설비 유형 삭제")
async def delete_equipment_type(
    type_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """이 유형을 사용하는 설비가 있으면 400 으로 거부합니다."""
    if not await eqp_crud.equipment_type.delete(db, id=type_id):
        raise HTTPException(status_code=404, detail="Equipment type not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. 설비 엔드포인트
# =============================================================================
@router.post("/equipment/", response_model=eqp_schemas.EquipmentRead, status_code=status.HTTP_201_CREATED, summary="새 설비 생성")
async def create_equipment(
    equipment_create: eqp_schemas.EquipmentCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 설비를 생성합니다.
    - `type_id`: 존재하는 설비 유형 ID (필수)
    - `parent_id`: 존재하는 상위 설비 ID (선택). 상위 설비는 더 높은 계층이어야 합니다.
    """
    return await eqp_crud.equipment.create(db, obj_in=equipment_create)


@router.get("/equipment/", response_model=PaginatedResponse[eqp_schemas.EquipmentRead], summary="설비 목록 조회 (필터)")
async def read_equipment_list(
    type_id: Optional[int] = None,
    parent_id: Optional[int] = None,
    enabled: Optional[bool] = None,
    name: Optional[str] = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: AsyncSession = Depends(deps.get_db_session),
):
    page_request = PageRequest.from_page(page, per_page)
    rows, total = await eqp_crud.equipment.search_with_filters(
        db, page=page_request, type_id=type_id, parent_id=parent_id, enabled=enabled, name=name,
    )
    return PaginatedResponse.build(rows, total, page_request)


@router.get("/equipment/roots", response_model=List[eqp_schemas.EquipmentRead], summary="최상위 설비 목록")
async def read_root_equipment(db: AsyncSession = Depends(deps.get_db_session)):
    return await eqp_crud.equipment.get_by_parent(db, parent_id=None)


@router.get("/equipment/enabled", response_model=List[eqp_schemas.EquipmentRead], summary="사용 중인 설비 목록")
async def read_enabled_equipment(db: AsyncSession = Depends(deps.get_db_session)):
    return await eqp_crud.equipment.get_enabled(db)


@router.get("/equipment/{equipment_id}", response_model=eqp_schemas.EquipmentRead, summary="특정 설비 조회")
async def read_equipment(
    equipment_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_equipment = await eqp_crud.equipment.get(db, id=equipment_id)
    if db_equipment is None:
        raise HTTPException(status_code=404, detail="Equipment not found")
    return db_equipment


@router.get("/equipment/{equipment_id}/children", response_model=List[eqp_schemas.EquipmentRead], summary="하위 설비 목록")
async def read_equipment_children(
    equipment_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await eqp_crud.equipment.get_children(db, id=equipment_id)


@router.get("/equipment/{equipment_id}/path", response_model=eqp_schemas.EquipmentPathRead, summary="설비 경로 조회")
async def read_equipment_path(
    equipment_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    최상위 설비부터 대상 설비까지의 경로와, 계층별(enterprise~cell) 조상을 반환합니다.
    """
    path = await eqp_crud.equipment.get_path(db, id=equipment_id)

    def _read(node):
        return eqp_schemas.EquipmentRead.model_validate(node) if node is not None else None

    return eqp_schemas.EquipmentPathRead(
        nodes=[_read(node) for node in path],
        enterprise=_read(path.get_enterprise()),
        site=_read(path.get_site()),
        area=_read(path.get_area()),
        line=_read(path.get_line()),
        cell=_read(path.get_cell()),
        parent=_read(path.get_parent()),
    )


@router.patch("/equipment/{equipment_id}/metadata", response_model=eqp_schemas.EquipmentRead, summary="설비 부가 정보 교체")
async def update_equipment_metadata(
    equipment_id: int,
    metadata_update: eqp_schemas.EquipmentMetadataUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await eqp_crud.equipment.update_metadata(db, id=equipment_id, metadata=metadata_update.metadata)


@router.patch("/equipment/{equipment_id}/enabled", response_model=eqp_schemas.EquipmentRead, summary="설비 사용 여부 변경")
async def update_equipment_enabled(
    equipment_id: int,
    enabled_update: eqp_schemas.EquipmentEnabledUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await eqp_crud.equipment.set_enabled(db, id=equipment_id, enabled=enabled_update.enabled)


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="설비 삭제")
async def delete_equipment(
    equipment_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """하위 설비가 있으면 400 으로 거부합니다."""
    if not await eqp_crud.equipment.delete(db, id=equipment_id):
        raise HTTPException(status_code=404, detail="Equipment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 3. 설비 - 모드/상태 그룹 연결 엔드포인트
# =============================================================================
@router.get("/equipment/{equipment_id}/mode_groups", response_model=eqp_schemas.GroupAssignmentRead, summary="설비에 연결된 모드 그룹")
async def read_equipment_mode_groups(equipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    group_ids = await eqp_crud.equipment_mode_group.get_group_ids(db, equipment_id=equipment_id)
    return eqp_schemas.GroupAssignmentRead(equipment_id=equipment_id, group_ids=group_ids)


@router.put("/equipment/{equipment_id}/mode_groups/{mode_group_id}", response_model=eqp_schemas.GroupAssignmentRead, summary="설비에 모드 그룹 연결")
async def assign_mode_group(equipment_id: int, mode_group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    group_ids = await eqp_crud.equipment_mode_group.assign(db, equipment_id=equipment_id, group_id=mode_group_id)
    return eqp_schemas.GroupAssignmentRead(equipment_id=equipment_id, group_ids=group_ids)


@router.delete("/equipment/{equipment_id}/mode_groups/{mode_group_id}", status_code=status.HTTP_204_NO_CONTENT, summary="설비-모드 그룹 연결 해제")
async def unassign_mode_group(equipment_id: int, mode_group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if not await eqp_crud.equipment_mode_group.unassign(db, equipment_id=equipment_id, group_id=mode_group_id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/equipment/{equipment_id}/state_groups", response_model=eqp_schemas.GroupAssignmentRead, summary="설비에 연결된 상태 그룹")
async def read_equipment_state_groups(equipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    group_ids = await eqp_crud.equipment_state_group.get_group_ids(db, equipment_id=equipment_id)
    return eqp_schemas.GroupAssignmentRead(equipment_id=equipment_id, group_ids=group_ids)


@router.put("/equipment/{equipment_id}/state_groups/{state_group_id}", response_model=eqp_schemas.GroupAssignmentRead, summary="설비에 상태 그룹 연결")
async def assign_state_group(equipment_id: int, state_group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    group_ids = await eqp_crud.equipment_state_group.assign(db, equipment_id=equipment_id, group_id=state_group_id)
    return eqp_schemas.GroupAssignmentRead(equipment_id=equipment_id, group_ids=group_ids)


@router.delete("/equipment/{equipment_id}/state_groups/{state_group_id}", status_code=status.HTTP_204_NO_CONTENT, summary="설비-상태 그룹 연결 해제")
async def unassign_state_group(equipment_id: int, state_group_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if not await eqp_crud.equipment_state_group.unassign(db, equipment_id=equipment_id, group_id=state_group_id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# tests/domains/test_state.py

"""
'state' 도메인 (상태 그룹, 상태) 저장소 및 API 통합 테스트입니다.

- 그룹 안에서 코드/설명 각각의 유일성
- 음수 코드 거부
- 코드 범위 조회와 정렬
- 그룹 이동 시 대상 그룹의 코드/설명 충돌 검사
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.exceptions import AlreadyExistsError, InvalidReferenceError, ValidationError
from mescore.core.query import PageRequest
from mescore.domains.state import crud as state_crud

API = "/api/v1/state"


@pytest.fixture(name="line_states")
async def line_states_fixture(db_session: AsyncSession):
    """'Line States' 그룹과 기본 상태 두 개 (0: Disabled, 1: Running)"""
    group = await state_crud.state_group.create(
        db_session, obj_in={"name": "Line States", "description": "States for production lines"}
    )
    await state_crud.state.create(db_session, obj_in={"state_group_id": group.id, "code": 1, "description": "Running"})
    await state_crud.state.create(db_session, obj_in={"state_group_id": group.id, "code": 0, "description": "Disabled"})
    return group


# =============================================================================
# 1. 그룹 내 유일성
# =============================================================================
async def test_line_states_scenario(db_session: AsyncSession, line_states):
    states = await state_crud.state.get_states_for_group(db_session, state_group_id=line_states.id)
    assert [(s.code, s.description) for s in states] == [(0, "Disabled"), (1, "Running")]

    with pytest.raises(AlreadyExistsError, match="state_code '0' already exists in this state group"):
        await state_crud.state.create(
            db_session, obj_in={"state_group_id": line_states.id, "code": 0, "description": "Other"}
        )
    with pytest.raises(AlreadyExistsError, match="description 'Running' already exists"):
        await state_crud.state.create(
            db_session, obj_in={"state_group_id": line_states.id, "code": 2, "description": "Running"}
        )


async def test_same_code_in_different_groups(db_session: AsyncSession, line_states, state_group_factory):
    other = await state_group_factory("Cell States")
    state = await state_crud.state.create(
        db_session, obj_in={"state_group_id": other.id, "code": 0, "description": "Disabled"}
    )
    assert state.state_group_id == other.id


async def test_negative_code_is_rejected(db_session: AsyncSession, line_states):
    with pytest.raises(ValidationError, match="cannot be negative"):
        await state_crud.state.create(
            db_session, obj_in={"state_group_id": line_states.id, "code": -1, "description": "x"}
        )
    state = await state_crud.state.create(
        db_session, obj_in={"state_group_id": line_states.id, "code": 10, "description": "x"}
    )
    assert state.code == 10


async def test_state_requires_existing_group(db_session: AsyncSession):
    with pytest.raises(InvalidReferenceError, match="state_group_id '3' does not exist"):
        await state_crud.state.create(db_session, obj_in={"state_group_id": 3, "code": 0, "description": "x"})


async def test_update_code_and_description(db_session: AsyncSession, line_states):
    running = await state_crud.state.get_by_code_and_group(db_session, code=1, state_group_id=line_states.id)

    updated = await state_crud.state.update(db_session, id=running.id, obj_in={"code": 1, "description": "Running"})
    assert updated.code == 1

    with pytest.raises(AlreadyExistsError):
        await state_crud.state.update_code(db_session, id=running.id, code=0)
    with pytest.raises(AlreadyExistsError):
        await state_crud.state.update_description(db_session, id=running.id, description="Disabled")
    with pytest.raises(ValidationError):
        await state_crud.state.update_code(db_session, id=running.id, code=-5)

    moved = await state_crud.state.update_code(db_session, id=running.id, code=100)
    assert moved.code == 100


# =============================================================================
# 2. 조회
# =============================================================================
async def test_code_range(db_session: AsyncSession, state_group_factory):
    group = await state_group_factory("Wide Codes")
    for code in (300, 150, 250, 100, 200):
        await state_crud.state.create(
            db_session, obj_in={"state_group_id": group.id, "code": code, "description": f"state {code}"}
        )

    states = await state_crud.state.get_states_by_code_range(
        db_session, state_group_id=group.id, min_code=150, max_code=250
    )
    assert [s.code for s in states] == [150, 200, 250]

    with pytest.raises(ValidationError, match="min_code cannot be greater than max_code"):
        await state_crud.state.get_states_by_code_range(
            db_session, state_group_id=group.id, min_code=200, max_code=100
        )


async def test_code_range_requires_existing_group(db_session: AsyncSession):
    with pytest.raises(InvalidReferenceError, match="state_group_id '999' does not exist"):
        await state_crud.state.get_states_by_code_range(db_session, state_group_id=999, min_code=0, max_code=5)


async def test_state_group_lookup_by_description(db_session: AsyncSession, line_states, state_group_factory):
    await state_group_factory("Cell States", "States for work cells")

    found = await state_crud.state_group.get_by_description(db_session, description="States for production lines")
    assert found.id == line_states.id
    assert await state_crud.state_group.get_by_description(db_session, description="States") is None

    rows = await state_crud.state_group.search_by_description(db_session, term="STATES FOR")
    assert [group.name for group in rows] == ["Line States", "Cell States"]
    rows = await state_crud.state_group.search_by_description(db_session, term="cells")
    assert [group.name for group in rows] == ["Cell States"]


async def test_search_with_filters(db_session: AsyncSession, line_states, state_group_factory):
    other = await state_group_factory("Cell States")
    await state_crud.state.create(db_session, obj_in={"state_group_id": other.id, "code": 5, "description": "Running slow"})

    rows, total = await state_crud.state.search_with_filters(db_session, page=PageRequest(), description="running")
    assert total == 2

    rows, total = await state_crud.state.search_with_filters(
        db_session, page=PageRequest(), state_group_id=line_states.id, min_code=1
    )
    assert [(s.code, s.description) for s in rows] == [(1, "Running")]
    assert await state_crud.state.count_by_group(db_session, state_group_id=line_states.id) == 2


# =============================================================================
# 3. 그룹 이동
# =============================================================================
async def test_move_state_checks_target_group(db_session: AsyncSession, line_states, state_group_factory):
    target = await state_group_factory("Cell States")
    await state_crud.state.create(db_session, obj_in={"state_group_id": target.id, "code": 0, "description": "Off"})
    running = await state_crud.state.get_by_code_and_group(db_session, code=1, state_group_id=line_states.id)
    disabled = await state_crud.state.get_by_code_and_group(db_session, code=0, state_group_id=line_states.id)

    with pytest.raises(AlreadyExistsError, match="state_code '0' already exists in the target state group"):
        await state_crud.state.update_group(db_session, id=disabled.id, new_group_id=target.id)

    moved = await state_crud.state.update_group(db_session, id=running.id, new_group_id=target.id)
    assert moved.state_group_id == target.id
    assert await state_crud.state.count_by_group(db_session, state_group_id=line_states.id) == 1


async def test_state_group_in_use_cannot_be_deleted(db_session: AsyncSession, line_states):
    with pytest.raises(InvalidReferenceError, match="still referenced by states"):
        await state_crud.state_group.delete(db_session, id=line_states.id)


# =============================================================================
# 4. API 엔드포인트
# =============================================================================
async def test_state_api_flow(client: AsyncClient):
    response = await client.post(f"{API}/state_groups/", json={"name": "Line States", "description": "Line"})
    assert response.status_code == 201
    group_id = response.json()["id"]

    response = await client.post(
        f"{API}/states/bulk",
        json={"items": [
            {"state_group_id": group_id, "code": 0, "description": "Disabled"},
            {"state_group_id": group_id, "code": 1, "description": "Running"},
            {"state_group_id": group_id, "code": 1, "description": "Duplicate"},
        ]},
    )
    assert response.status_code == 201
    assert [s["code"] for s in response.json()] == [0, 1]

    response = await client.post(f"{API}/states/", json={"state_group_id": group_id, "code": -1, "description": "x"})
    assert response.status_code == 400
    assert response.json()["detail"] == "code cannot be negative"

    response = await client.get(f"{API}/state_groups/{group_id}/states")
    assert [s["description"] for s in response.json()] == ["Disabled", "Running"]

    response = await client.get(
        f"{API}/state_groups/{group_id}/states/range", params={"min_code": 1, "max_code": 5}
    )
    assert [s["code"] for s in response.json()] == [1]

    response = await client.get(
        f"{API}/state_groups/{group_id}/states/range", params={"min_code": 5, "max_code": 1}
    )
    assert response.status_code == 400

    response = await client.get(f"{API}/states/", params={"state_group_id": group_id, "per_page": 1, "page": 2})
    body = response.json()
    assert body["total_count"] == 2
    assert body["total_pages"] == 2
    assert [s["code"] for s in body["data"]] == [1]

    response = await client.get(f"{API}/state_groups/{group_id}/states/paged", params={"per_page": 1})
    body = response.json()
    assert body["total_count"] == 2
    assert [s["code"] for s in body["data"]] == [0]

    response = await client.get(f"{API}/state_groups/{group_id}/states/range", params={"min_code": 0, "max_code": 5})
    assert len(response.json()) == 2
    response = await client.get(f"{API}/state_groups/9999/states/range", params={"min_code": 0, "max_code": 5})
    assert response.status_code == 400


async def test_state_group_api_lookups(client: AsyncClient, line_states):
    group_id = line_states.id

    response = await client.get(f"{API}/state_groups/by_description", params={"description": "States for production lines"})
    assert response.json()["id"] == group_id
    response = await client.get(f"{API}/state_groups/search_by_description", params={"description": "production"})
    assert [g["id"] for g in response.json()] == [group_id]

    response = await client.get(f"{API}/state_groups/exists", params={"name": "Line States"})
    assert response.json() == {"exists": True}
    response = await client.get(f"{API}/state_groups/exists", params={"name": "Cell States"})
    assert response.json() == {"exists": False}
    response = await client.get(f"{API}/state_groups/{group_id}/exists")
    assert response.json() == {"exists": True}

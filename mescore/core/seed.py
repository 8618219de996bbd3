# mescore/core/seed.py

"""
기본 구성 데이터를 입력합니다. 여러 번 실행해도 이미 있는 행은 건너뜁니다.

 - 설비 유형: enterprise, site, area, line, cell (새 DB 에서 ID 1..5 로 생성되어 계층 번호와 일치)
 - 기본 모드 그룹과 모드
 - 기본 상태 그룹과 상태 코드 0..10
"""

import logging
from typing import Dict

from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.domains.eqp import crud as eqp_crud
from mescore.domains.mode import crud as mode_crud
from mescore.domains.state import crud as state_crud

logger = logging.getLogger(__name__)

DEFAULT_EQUIPMENT_TYPES = ("enterprise", "site", "area", "line", "cell")

DEFAULT_MODE_GROUP = ("Default MES Mode Group", "Default modes for MES equipment")
DEFAULT_MODES = ("disabled", "production", "idle", "change over")

DEFAULT_STATE_GROUP = ("Default MES State Group", "Default states for MES equipment")
DEFAULT_STATES = (
    (0, "disabled"),
    (1, "running"),
    (2, "change over"),
    (3, "idle"),
    (4, "e-stop"),
    (5, "blocked"),
    (6, "starved"),
    (7, "planned downtime"),
    (8, "unplanned downtime"),
    (9, "user planned downtime"),
    (10, "user unplanned downtime"),
)


async def seed_defaults(db: AsyncSession) -> Dict[str, int]:
    """기본 데이터를 입력하고, 새로 만든 행 수를 종류별로 반환합니다."""
    created = {"equipment_types": 0, "mode_groups": 0, "modes": 0, "state_groups": 0, "states": 0}

    for name in DEFAULT_EQUIPMENT_TYPES:
        if not await eqp_crud.equipment_type.name_exists(db, name=name):
            await eqp_crud.equipment_type.create(db, obj_in={"name": name})
            created["equipment_types"] += 1

    group_name, group_description = DEFAULT_MODE_GROUP
    group = await mode_crud.mode_group.get_by_name(db, name=group_name)
    if group is None:
        group = await mode_crud.mode_group.create(db, obj_in={"name": group_name, "description": group_description})
        created["mode_groups"] += 1
    for description in DEFAULT_MODES:
        if not await mode_crud.mode.description_exists_in_group(db, mode_group_id=group.id, description=description):
            await mode_crud.mode.create(db, obj_in={"mode_group_id": group.id, "description": description})
            created["modes"] += 1

    group_name, group_description = DEFAULT_STATE_GROUP
    group = await state_crud.state_group.get_by_name(db, name=group_name)
    if group is None:
        group = await state_crud.state_group.create(db, obj_in={"name": group_name, "description": group_description})
        created["state_groups"] += 1
    for code, description in DEFAULT_STATES:
        if not await state_crud.state.code_exists_in_group(db, state_group_id=group.id, code=code):
            await state_crud.state.create(
                db, obj_in={"state_group_id": group.id, "code": code, "description": description}
            )
            created["states"] += 1

    logger.info(f"Default configuration seeded: {created}")
    return created

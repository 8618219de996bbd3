# mescore/domains/state/crud.py

"""
'state' 도메인 (상태 그룹, 상태)과 관련된 CRUD 로직을 담당하는 모듈입니다.

상태는 같은 상태 그룹 안에서 두 가지 유일성 조건을 가집니다.
 - code 는 그룹 내 유일
 - description 은 그룹 내 유일
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import update as sa_update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.crud_base import CRUDBase, input_data
from mescore.core.crud_named import CRUDDescribedGroup
from mescore.core.exceptions import AlreadyExistsError, InvalidReferenceError, ValidationError
from mescore.core.model_base import utcnow
from mescore.core.query import FilterSet, PageRequest
from mescore.core.validation import require_description, require_non_negative, require_ordered_range
from mescore.domains.eqp.models import EquipmentStateGroup
from . import models as state_models
from . import schemas as state_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 상태 그룹 (StateGroup) CRUD
# =============================================================================
class CRUDStateGroup(
    CRUDDescribedGroup[
        state_models.StateGroup,
        state_schemas.StateGroupCreate,
        state_schemas.StateGroupUpdate
    ]
):
    def __init__(self):
        super().__init__(model=state_models.StateGroup, label="StateGroup")

    def references(self):
        return (
            (state_models.State.state_group_id, "states"),
            (EquipmentStateGroup.state_group_id, "equipment assignments"),
        )


state_group = CRUDStateGroup()


# =============================================================================
# 2. 상태 (State) CRUD
# =============================================================================
def _require_code(value: Any) -> int:
    if value is None:
        raise ValidationError("code cannot be empty", field="code")
    return require_non_negative("code", value)


class CRUDState(
    CRUDBase[
        state_models.State,
        state_schemas.StateCreate,
        state_schemas.StateUpdate
    ]
):
    def __init__(self):
        super().__init__(model=state_models.State, label="State", default_order=("code", "description", "id"))

    async def validate_group_exists(self, db: AsyncSession, state_group_id: int) -> None:
        if not await state_group.exists(db, state_group_id):
            logger.warning(f"State references missing state_group_id={state_group_id}")
            raise InvalidReferenceError.missing("state_group_id", state_group_id)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    async def get_by_description(
        self, db: AsyncSession, *, description: str, state_group_id: Optional[int] = None
    ) -> Optional[state_models.State]:
        statement = select(self.model).where(self.model.description == (description or "").strip())
        if state_group_id is not None:
            statement = statement.where(self.model.state_group_id == state_group_id)
        result = await self.run_query(db, statement.order_by(self.model.id).limit(1), operation="get_by_description")
        return result.scalars().first()

    async def get_by_code_and_group(
        self, db: AsyncSession, *, code: int, state_group_id: int
    ) -> Optional[state_models.State]:
        statement = select(self.model).where(
            self.model.code == code,
            self.model.state_group_id == state_group_id,
        )
        result = await self.run_query(db, statement, operation="get_by_code_and_group", target_id=state_group_id)
        return result.scalars().one_or_none()

    async def code_exists_in_group(
        self, db: AsyncSession, *, state_group_id: int, code: int, exclude_id: Optional[int] = None
    ) -> bool:
        return await self.attribute_exists(
            db, attribute="code", value=code, exclude_id=exclude_id, state_group_id=state_group_id
        )

    async def description_exists_in_group(
        self, db: AsyncSession, *, state_group_id: int, description: str, exclude_id: Optional[int] = None
    ) -> bool:
        return await self.attribute_exists(
            db, attribute="description", value=(description or "").strip(),
            exclude_id=exclude_id, state_group_id=state_group_id,
        )

    async def search_by_description(self, db: AsyncSession, *, term: str) -> List[state_models.State]:
        return await self.search(db, field="description", term=term)

    async def get_states_for_group(self, db: AsyncSession, *, state_group_id: int) -> List[state_models.State]:
        """그룹의 모든 상태를 코드, 설명 순으로 반환합니다."""
        await self.validate_group_exists(db, state_group_id)
        statement = (
            select(self.model)
            .where(self.model.state_group_id == state_group_id)
            .order_by(self.model.code, self.model.description)
        )
        result = await self.run_query(db, statement, operation="get_states_for_group", target_id=state_group_id)
        return list(result.scalars().all())

    async def get_states_by_code_range(
        self, db: AsyncSession, *, state_group_id: int, min_code: int, max_code: int
    ) -> List[state_models.State]:
        """min_code <= code <= max_code 인 상태를 코드 오름차순으로 반환합니다."""
        require_ordered_range("min_code", min_code, "max_code", max_code)
        await self.validate_group_exists(db, state_group_id)
        filters = (
            FilterSet()
            .eq(self.model.state_group_id, state_group_id)
            .between(self.model.code, min_code, max_code)
        )
        statement = filters.apply(select(self.model)).order_by(self.model.code, self.model.id)
        result = await self.run_query(db, statement, operation="get_states_by_code_range", target_id=state_group_id)
        return list(result.scalars().all())

    async def count_by_group(self, db: AsyncSession, *, state_group_id: int) -> int:
        return await self.count(db, filters=FilterSet().eq(self.model.state_group_id, state_group_id))

    async def get_paginated_by_group(
        self, db: AsyncSession, *, state_group_id: int, page: PageRequest
    ) -> Tuple[List[state_models.State], int]:
        await self.validate_group_exists(db, state_group_id)
        return await self.get_paginated(
            db, page=page, filters=FilterSet().eq(self.model.state_group_id, state_group_id)
        )

    async def search_with_filters(
        self,
        db: AsyncSession,
        *,
        page: PageRequest,
        state_group_id: Optional[int] = None,
        description: Optional[str] = None,
        min_code: Optional[int] = None,
        max_code: Optional[int] = None,
    ) -> Tuple[List[state_models.State], int]:
        require_ordered_range("min_code", min_code, "max_code", max_code)
        filters = (
            FilterSet()
            .eq(self.model.state_group_id, state_group_id)
            .between(self.model.code, min_code, max_code)
            .contains(self.model.description, description)
        )
        return await self.get_paginated(db, page=page, filters=filters)

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------
    async def _ensure_available(
        self, db: AsyncSession, *, state_group_id: int, code: Optional[int] = None,
        description: Optional[str] = None, exclude_id: Optional[int] = None,
        scope: str = "this state group",
    ) -> None:
        """그룹 내 코드/설명 중복을 확인합니다."""
        if code is not None and await self.code_exists_in_group(
            db, state_group_id=state_group_id, code=code, exclude_id=exclude_id
        ):
            raise AlreadyExistsError(
                f"state_code '{code}' already exists in {scope}", entity=self.label, field="code"
            )
        if description is not None and await self.description_exists_in_group(
            db, state_group_id=state_group_id, description=description, exclude_id=exclude_id
        ):
            raise AlreadyExistsError(
                f"State with description '{description}' already exists in {scope}",
                entity=self.label, field="description",
            )

    async def create(self, db: AsyncSession, *, obj_in: Any) -> state_models.State:
        data = input_data(obj_in)
        code = _require_code(data.get("code"))
        description = require_description(data.get("description"))
        state_group_id = data.get("state_group_id")

        await self.validate_group_exists(db, state_group_id)
        await self._ensure_available(db, state_group_id=state_group_id, code=code, description=description)
        return await super().create(
            db, obj_in={"state_group_id": state_group_id, "code": code, "description": description}
        )

    async def update(self, db: AsyncSession, *, id: Any, obj_in: Any) -> state_models.State:
        """코드/설명을 부분 수정합니다. 중복 검사는 자기 자신을 제외합니다."""
        data = input_data(obj_in, exclude_unset=True)
        changes = {}
        if "code" in data:
            changes["code"] = _require_code(data["code"])
        if "description" in data:
            changes["description"] = require_description(data["description"])

        db_obj = await self.get_or_raise(db, id)
        await self._ensure_available(
            db, state_group_id=db_obj.state_group_id,
            code=changes.get("code"), description=changes.get("description"), exclude_id=id,
        )
        return await super().update(db, id=id, obj_in=changes)

    async def update_code(self, db: AsyncSession, *, id: Any, code: int) -> state_models.State:
        return await self.update(db, id=id, obj_in={"code": code})

    async def update_description(self, db: AsyncSession, *, id: Any, description: str) -> state_models.State:
        return await self.update(db, id=id, obj_in={"description": description})

    async def update_group(self, db: AsyncSession, *, id: Any, new_group_id: int) -> state_models.State:
        """
        상태를 다른 상태 그룹으로 이동합니다.
        대상 그룹에 같은 코드나 설명이 있으면 이동하지 않습니다.
        """
        db_obj = await self.get_or_raise(db, id)
        await self.validate_group_exists(db, new_group_id)
        await self._ensure_available(
            db, state_group_id=new_group_id, code=db_obj.code, description=db_obj.description,
            exclude_id=id, scope="the target state group",
        )

        statement = (
            sa_update(self.model)
            .where(self.model.id == id)
            .values(state_group_id=new_group_id, updated_at=utcnow())
        )
        async with self.store_errors(db, operation="update_group", target_id=id):
            await db.execute(statement)
            await db.commit()
            await db.refresh(db_obj)
        logger.info(f"State {id} moved to state group {new_group_id}")
        return db_obj


state = CRUDState()

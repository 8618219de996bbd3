# mescore/domains/mode/crud.py

"""
'mode' 도메인 (모드 그룹, 모드)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import update as sa_update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.crud_base import CRUDBase, input_data
from mescore.core.crud_named import CRUDDescribedGroup
from mescore.core.exceptions import AlreadyExistsError, InvalidReferenceError
from mescore.core.model_base import utcnow
from mescore.core.query import FilterSet, PageRequest
from mescore.core.validation import require_description
from mescore.domains.eqp.models import EquipmentModeGroup
from . import models as mode_models
from . import schemas as mode_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 모드 그룹 (ModeGroup) CRUD
# =============================================================================
class CRUDModeGroup(
    CRUDDescribedGroup[
        mode_models.ModeGroup,
        mode_schemas.ModeGroupCreate,
        mode_schemas.ModeGroupUpdate
    ]
):
    def __init__(self):
        super().__init__(model=mode_models.ModeGroup, label="ModeGroup")

    def references(self):
        # 소속 모드 또는 설비 연결이 남아있으면 삭제 불가
        return (
            (mode_models.Mode.mode_group_id, "modes"),
            (EquipmentModeGroup.mode_group_id, "equipment assignments"),
        )


mode_group = CRUDModeGroup()


# =============================================================================
# 2. 모드 (Mode) CRUD
# =============================================================================
class CRUDMode(
    CRUDBase[
        mode_models.Mode,
        mode_schemas.ModeCreate,
        mode_schemas.ModeUpdate
    ]
):
    def __init__(self):
        super().__init__(model=mode_models.Mode, label="Mode", default_order=("description", "id"))

    async def validate_group_exists(self, db: AsyncSession, mode_group_id: int) -> None:
        if not await mode_group.exists(db, mode_group_id):
            logger.warning(f"Mode references missing mode_group_id={mode_group_id}")
            raise InvalidReferenceError.missing("mode_group_id", mode_group_id)

    async def get_by_description(
        self, db: AsyncSession, *, description: str, mode_group_id: Optional[int] = None
    ) -> Optional[mode_models.Mode]:
        """설명으로 조회합니다. mode_group_id 를 주면 해당 그룹 안에서만 찾습니다."""
        statement = select(self.model).where(self.model.description == (description or "").strip())
        if mode_group_id is not None:
            statement = statement.where(self.model.mode_group_id == mode_group_id)
        result = await self.run_query(db, statement.order_by(self.model.id).limit(1), operation="get_by_description")
        return result.scalars().first()

    async def description_exists_in_group(
        self, db: AsyncSession, *, mode_group_id: int, description: str, exclude_id: Optional[int] = None
    ) -> bool:
        return await self.attribute_exists(
            db, attribute="description", value=(description or "").strip(),
            exclude_id=exclude_id, mode_group_id=mode_group_id,
        )

    async def _ensure_description_available(
        self, db: AsyncSession, mode_group_id: int, description: str,
        exclude_id: Optional[int] = None, scope: str = "this mode group"
    ) -> None:
        if await self.description_exists_in_group(
            db, mode_group_id=mode_group_id, description=description, exclude_id=exclude_id
        ):
            raise AlreadyExistsError(
                f"Mode with description '{description}' already exists in {scope}",
                entity=self.label, field="description",
            )

    async def search_by_description(self, db: AsyncSession, *, term: str) -> List[mode_models.Mode]:
        return await self.search(db, field="description", term=term)

    async def create(self, db: AsyncSession, *, obj_in: Any) -> mode_models.Mode:
        """그룹 존재 여부와 그룹 내 설명 중복을 확인하고 생성합니다."""
        data = input_data(obj_in)
        description = require_description(data.get("description"))
        mode_group_id = data.get("mode_group_id")

        await self.validate_group_exists(db, mode_group_id)
        await self._ensure_description_available(db, mode_group_id, description)
        return await super().create(db, obj_in={"mode_group_id": mode_group_id, "description": description})

    async def update(self, db: AsyncSession, *, id: Any, obj_in: Any) -> mode_models.Mode:
        """설명을 수정합니다. 그룹 이동은 update_group 을 사용합니다."""
        data = input_data(obj_in, exclude_unset=True)
        changes = {}
        if "description" in data:
            changes["description"] = require_description(data["description"])

        db_obj = await self.get_or_raise(db, id)
        if "description" in changes:
            await self._ensure_description_available(db, db_obj.mode_group_id, changes["description"], exclude_id=id)
        return await super().update(db, id=id, obj_in=changes)

    async def update_description(self, db: AsyncSession, *, id: Any, description: str) -> mode_models.Mode:
        return await self.update(db, id=id, obj_in={"description": description})

    async def update_group(self, db: AsyncSession, *, id: Any, new_group_id: int) -> mode_models.Mode:
        """
        모드를 다른 모드 그룹으로 이동합니다.
        대상 그룹 존재 여부와 대상 그룹 내 설명 중복을 모두 확인한 뒤 단일 UPDATE 로 이동합니다.
        """
        db_obj = await self.get_or_raise(db, id)
        await self.validate_group_exists(db, new_group_id)
        await self._ensure_description_available(
            db, new_group_id, db_obj.description, exclude_id=id, scope="the target mode group"
        )

        statement = (
            sa_update(self.model)
            .where(self.model.id == id)
            .values(mode_group_id=new_group_id, updated_at=utcnow())
        )
        async with self.store_errors(db, operation="update_group", target_id=id):
            await db.execute(statement)
            await db.commit()
            await db.refresh(db_obj)
        logger.info(f"Mode {id} moved to mode group {new_group_id}")
        return db_obj

    async def count_by_group(self, db: AsyncSession, *, mode_group_id: int) -> int:
        return await self.count(db, filters=FilterSet().eq(self.model.mode_group_id, mode_group_id))

    async def get_modes_for_group(self, db: AsyncSession, *, mode_group_id: int) -> List[mode_models.Mode]:
        await self.validate_group_exists(db, mode_group_id)
        statement = (
            select(self.model)
            .where(self.model.mode_group_id == mode_group_id)
            .order_by(self.model.description, self.model.id)
        )
        result = await self.run_query(db, statement, operation="get_modes_for_group", target_id=mode_group_id)
        return list(result.scalars().all())

    async def get_paginated_by_group(
        self, db: AsyncSession, *, mode_group_id: int, page: PageRequest
    ) -> Tuple[List[mode_models.Mode], int]:
        await self.validate_group_exists(db, mode_group_id)
        return await self.get_paginated(db, page=page, filters=FilterSet().eq(self.model.mode_group_id, mode_group_id))

    async def search_with_filters(
        self,
        db: AsyncSession,
        *,
        page: PageRequest,
        mode_group_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Tuple[List[mode_models.Mode], int]:
        """선택적 필터(그룹 ID, 설명 부분 문자열)와 페이징을 함께 적용합니다."""
        filters = (
            FilterSet()
            .eq(self.model.mode_group_id, mode_group_id)
            .contains(self.model.description, description)
        )
        return await self.get_paginated(db, page=page, filters=filters)


mode = CRUDMode()

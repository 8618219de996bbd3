# mescore/domains/eqp/crud.py

"""
'eqp' 도메인 (설비 유형, 설비 계층, 설비-그룹 연결)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Integer, literal_column
from sqlalchemy.orm import aliased
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.crud_base import CRUDBase, input_data
from mescore.core.crud_named import CRUDNamedEntity
from mescore.core.exceptions import AlreadyExistsError, InvalidReferenceError, ValidationError
from mescore.core.query import FilterSet, PageRequest
from mescore.core.validation import MAX_NAME_LENGTH, require_name
from mescore.domains.mode.models import ModeGroup
from mescore.domains.state.models import StateGroup
from . import models as eqp_models
from . import schemas as eqp_schemas
from .hierarchy import EquipmentPath, check_parent_level

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 설비 유형 (EquipmentType) CRUD
# =============================================================================
class CRUDEquipmentType(
    CRUDNamedEntity[
        eqp_models.EquipmentType,
        eqp_schemas.EquipmentTypeCreate,
        eqp_schemas.EquipmentTypeUpdate
    ]
):
    text_fields = {"name": MAX_NAME_LENGTH}

    def __init__(self):
        super().__init__(model=eqp_models.EquipmentType, label="EquipmentType")

    def references(self):
        # 이 유형을 사용하는 설비가 있으면 삭제 불가
        return ((eqp_models.Equipment.type_id, "equipment"),)


equipment_type = CRUDEquipmentType()


# =============================================================================
# 2. 설비 (Equipment) CRUD
# =============================================================================
class CRUDEquipment(
    CRUDBase[
        eqp_models.Equipment,
        eqp_schemas.EquipmentCreate,
        eqp_schemas.EquipmentMetadataUpdate
    ]
):
    updatable_fields = ("equipment_metadata", "enabled")

    def __init__(self):
        super().__init__(model=eqp_models.Equipment, label="Equipment", default_order=("name", "id"))

    async def create(self, db: AsyncSession, *, obj_in: Any) -> eqp_models.Equipment:
        """
        설비를 생성합니다.
        - 유형(type_id)과 상위 설비(parent_id)가 존재해야 합니다.
        - 상위/하위가 모두 계층 유형이면 상위 계층이 더 높아야 합니다.
        """
        data = input_data(obj_in)
        name = require_name(data.get("name"))
        metadata = data.get("metadata", data.get("equipment_metadata")) or {}
        if not isinstance(metadata, dict):
            raise ValidationError("metadata must be a key/value object", field="metadata")
        type_id = data.get("type_id")
        parent_id = data.get("parent_id")

        if not await equipment_type.exists(db, type_id):
            raise InvalidReferenceError.missing("type_id", type_id)
        if parent_id is not None:
            parent = await self.get(db, parent_id)
            if parent is None:
                raise InvalidReferenceError.missing("parent_id", parent_id)
            check_parent_level(parent.type_id, type_id)

        return await super().create(db, obj_in={
            "name": name,
            "type_id": type_id,
            "parent_id": parent_id,
            "enabled": data.get("enabled", True),
            "equipment_metadata": metadata,
        })

    async def update(self, db: AsyncSession, *, id: Any, obj_in: Any) -> eqp_models.Equipment:
        """
        부가 정보(metadata)와 사용 여부(enabled)만 수정할 수 있습니다.
        이름, 유형, 상위 설비는 생성 후 변경하지 않습니다.
        """
        data = input_data(obj_in, exclude_unset=True)
        if "metadata" in data:
            data["equipment_metadata"] = data.pop("metadata")
        rejected = sorted(set(data) - set(self.updatable_fields))
        if rejected:
            raise ValidationError(
                f"Equipment field(s) cannot be updated: {', '.join(rejected)}", field=rejected[0]
            )
        if "equipment_metadata" in data:
            if not isinstance(data["equipment_metadata"], dict):
                raise ValidationError("metadata must be a key/value object", field="metadata")
            data["equipment_metadata"] = dict(data["equipment_metadata"])
        if "enabled" in data:
            data["enabled"] = bool(data["enabled"])
        return await super().update(db, id=id, obj_in=data)

    async def update_metadata(self, db: AsyncSession, *, id: Any, metadata: Dict[str, Any]) -> eqp_models.Equipment:
        """부가 정보를 통째로 교체합니다."""
        return await self.update(db, id=id, obj_in={"equipment_metadata": metadata})

    async def set_enabled(self, db: AsyncSession, *, id: Any, enabled: bool) -> eqp_models.Equipment:
        return await self.update(db, id=id, obj_in={"enabled": enabled})

    async def delete(self, db: AsyncSession, *, id: Any) -> bool:
        """
        하위 설비가 있으면 삭제를 거부합니다.
        모드/상태 그룹 연결은 DB 의 ON DELETE CASCADE 로 함께 삭제됩니다.
        """
        if not await self.exists(db, id):
            return False
        await self.ensure_unreferenced(db, id=id, references=((self.model.parent_id, "child equipment"),))
        return await super().delete(db, id=id)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[eqp_models.Equipment]:
        """이름이 같은 설비 중 가장 먼저 등록된 것을 반환합니다."""
        return await self.get_by_attribute(db, attribute="name", value=(name or "").strip())

    async def get_by_type(self, db: AsyncSession, *, type_id: int) -> List[eqp_models.Equipment]:
        statement = select(self.model).where(self.model.type_id == type_id).order_by(self.model.name, self.model.id)
        result = await self.run_query(db, statement, operation="get_by_type", target_id=type_id)
        return list(result.scalars().all())

    async def get_by_parent(self, db: AsyncSession, *, parent_id: Optional[int]) -> List[eqp_models.Equipment]:
        """parent_id 가 None 이면 최상위 설비 목록을 반환합니다."""
        if parent_id is None:
            condition = self.model.parent_id.is_(None)
        else:
            condition = self.model.parent_id == parent_id
        statement = select(self.model).where(condition).order_by(self.model.name, self.model.id)
        result = await self.run_query(db, statement, operation="get_by_parent", target_id=parent_id)
        return list(result.scalars().all())

    async def get_children(self, db: AsyncSession, *, id: int) -> List[eqp_models.Equipment]:
        await self.get_or_raise(db, id)
        return await self.get_by_parent(db, parent_id=id)

    async def get_enabled(self, db: AsyncSession) -> List[eqp_models.Equipment]:
        statement = select(self.model).where(self.model.enabled.is_(True)).order_by(self.model.name, self.model.id)
        result = await self.run_query(db, statement, operation="get_enabled")
        return list(result.scalars().all())

    async def search_by_name(self, db: AsyncSession, *, term: str) -> List[eqp_models.Equipment]:
        return await self.search(db, field="name", term=term)

    async def search_with_filters(
        self,
        db: AsyncSession,
        *,
        page: PageRequest,
        type_id: Optional[int] = None,
        parent_id: Optional[int] = None,
        enabled: Optional[bool] = None,
        name: Optional[str] = None,
    ) -> Tuple[List[eqp_models.Equipment], int]:
        filters = (
            FilterSet()
            .eq(self.model.type_id, type_id)
            .eq(self.model.parent_id, parent_id)
            .eq(self.model.enabled, enabled)
            .contains(self.model.name, name)
        )
        return await self.get_paginated(db, page=page, filters=filters)

    async def get_path(self, db: AsyncSession, *, id: int) -> EquipmentPath[eqp_models.Equipment]:
        """
        재귀 CTE 로 조상을 모아 최상위 -> 대상 순서의 EquipmentPath 를 만듭니다.
        """
        await self.get_or_raise(db, id)

        ancestors = (
            select(self.model.id, self.model.parent_id, literal_column("0", Integer).label("depth"))
            .where(self.model.id == id)
            .cte("ancestors", recursive=True)
        )
        parent = aliased(self.model)
        ancestors = ancestors.union_all(
            select(parent.id, parent.parent_id, (ancestors.c.depth + 1).label("depth"))
            .where(parent.id == ancestors.c.parent_id)
        )
        statement = (
            select(self.model)
            .join(ancestors, self.model.id == ancestors.c.id)
            .order_by(ancestors.c.depth.desc())
        )
        result = await self.run_query(db, statement, operation="get_path", target_id=id)
        return EquipmentPath(result.scalars().all())


equipment = CRUDEquipment()


# =============================================================================
# 3. 설비 - 그룹 연결 CRUD
# =============================================================================
class CRUDGroupAssignment:
    """
    설비와 모드 그룹(또는 상태 그룹)의 다대다 연결을 관리합니다.
    영속성 오류는 설비 저장소의 store_errors 로 StoreError 가 됩니다.
    """
    def __init__(self, link_model, group_model, group_field: str, label: str):
        self.link_model = link_model
        self.group_model = group_model
        self.group_field = group_field
        self.label = label

    @property
    def _group_column(self):
        return getattr(self.link_model, self.group_field)

    def _link_statement(self, equipment_id: int, group_id: int):
        return select(self.link_model).where(
            self.link_model.equipment_id == equipment_id,
            self._group_column == group_id,
        )

    async def _validate(self, db: AsyncSession, equipment_id: int, group_id: int) -> None:
        if not await equipment.exists(db, equipment_id):
            raise InvalidReferenceError.missing("equipment_id", equipment_id)
        statement = select(self.group_model.id).where(self.group_model.id == group_id).limit(1)
        result = await equipment.run_query(db, statement, operation=f"{self.group_field}_exists", target_id=group_id)
        if result.first() is None:
            raise InvalidReferenceError.missing(self.group_field, group_id)

    async def is_assigned(self, db: AsyncSession, *, equipment_id: int, group_id: int) -> bool:
        result = await equipment.run_query(
            db, self._link_statement(equipment_id, group_id).limit(1),
            operation=f"is_{self.group_field}_assigned", target_id=equipment_id,
        )
        return result.first() is not None

    async def assign(self, db: AsyncSession, *, equipment_id: int, group_id: int) -> List[int]:
        await self._validate(db, equipment_id, group_id)
        if await self.is_assigned(db, equipment_id=equipment_id, group_id=group_id):
            raise AlreadyExistsError(
                f"{self.label} {group_id} is already assigned to equipment {equipment_id}",
                entity=self.label, field=self.group_field,
            )
        db.add(self.link_model(equipment_id=equipment_id, **{self.group_field: group_id}))
        async with equipment.store_errors(db, operation=f"assign_{self.group_field}", target_id=equipment_id):
            await db.commit()
        logger.info(f"{self.label} {group_id} assigned to equipment {equipment_id}")
        return await self.get_group_ids(db, equipment_id=equipment_id)

    async def unassign(self, db: AsyncSession, *, equipment_id: int, group_id: int) -> bool:
        operation = f"unassign_{self.group_field}"
        result = await equipment.run_query(
            db, self._link_statement(equipment_id, group_id), operation=operation, target_id=equipment_id
        )
        link = result.scalars().first()
        if link is None:
            return False
        await db.delete(link)
        async with equipment.store_errors(db, operation=operation, target_id=equipment_id):
            await db.commit()
        return True

    async def get_group_ids(self, db: AsyncSession, *, equipment_id: int) -> List[int]:
        await equipment.get_or_raise(db, equipment_id)
        statement = (
            select(self._group_column)
            .where(self.link_model.equipment_id == equipment_id)
            .order_by(self._group_column)
        )
        result = await equipment.run_query(db, statement, operation=f"get_{self.group_field}s", target_id=equipment_id)
        return list(result.scalars().all())


equipment_mode_group = CRUDGroupAssignment(eqp_models.EquipmentModeGroup, ModeGroup, "mode_group_id", "ModeGroup")
equipment_state_group = CRUDGroupAssignment(eqp_models.EquipmentStateGroup, StateGroup, "state_group_id", "StateGroup")

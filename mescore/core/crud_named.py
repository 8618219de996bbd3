# mescore/core/crud_named.py

"""
이름(name)이 전역적으로 유일한 분류 엔티티(설비 유형, 모드 그룹, 상태 그룹)의 공통 CRUD 입니다.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.crud_base import CRUDBase, CreateSchemaType, ModelType, UpdateSchemaType, input_data
from mescore.core.exceptions import AlreadyExistsError
from mescore.core.validation import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, require_text

logger = logging.getLogger(__name__)


class CRUDNamedEntity(CRUDBase[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    - text_fields: 검증할 문자열 필드와 최대 길이
    - references(): 삭제 전 확인할 (참조 컬럼, 설명) 목록
    """

    text_fields: Dict[str, int] = {"name": MAX_NAME_LENGTH, "description": MAX_DESCRIPTION_LENGTH}

    def __init__(self, model, *, label: str):
        super().__init__(model=model, label=label, default_order=("name", "id"))

    def references(self) -> Sequence[Tuple[Any, str]]:
        return ()

    def _clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """data 에 있는 문자열 필드만 검증하여 정리된 값을 돌려줍니다."""
        return {
            field: require_text(field, data[field], max_length)
            for field, max_length in self.text_fields.items()
            if field in data
        }

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[ModelType]:
        """이름으로 조회합니다. 앞뒤 공백은 무시합니다."""
        return await self.get_by_attribute(db, attribute="name", value=(name or "").strip())

    async def name_exists(self, db: AsyncSession, *, name: str, exclude_id: Optional[int] = None) -> bool:
        return await self.attribute_exists(db, attribute="name", value=(name or "").strip(), exclude_id=exclude_id)

    async def search_by_name(self, db: AsyncSession, *, term: str) -> List[ModelType]:
        return await self.search(db, field="name", term=term)

    async def _ensure_name_available(self, db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
        if await self.name_exists(db, name=name, exclude_id=exclude_id):
            logger.warning(f"Duplicate {self.label} name rejected: '{name}'")
            raise AlreadyExistsError(f"{self.label} with name '{name}' already exists", entity=self.label, field="name")

    async def create(self, db: AsyncSession, *, obj_in: Any) -> ModelType:
        """문자열 필드를 검증하고 이름 중복을 확인한 뒤 생성합니다."""
        data = input_data(obj_in)
        cleaned = self._clean({field: data.get(field) for field in self.text_fields})
        await self._ensure_name_available(db, cleaned["name"])
        return await super().create(db, obj_in=cleaned)

    async def update(self, db: AsyncSession, *, id: Any, obj_in: Any) -> ModelType:
        """
        전달된 필드만 다시 검증합니다. 이름 중복 검사는 자기 자신을 제외합니다.
        """
        cleaned = self._clean(input_data(obj_in, exclude_unset=True))
        await self.get_or_raise(db, id)
        if "name" in cleaned:
            await self._ensure_name_available(db, cleaned["name"], exclude_id=id)
        return await super().update(db, id=id, obj_in=cleaned)

    async def update_name(self, db: AsyncSession, *, id: Any, name: str) -> ModelType:
        return await self.update(db, id=id, obj_in={"name": name})

    async def delete(self, db: AsyncSession, *, id: Any) -> bool:
        """참조하는 행이 남아있으면 InvalidReferenceError 로 삭제를 거부합니다."""
        if not await self.exists(db, id):
            return False
        await self.ensure_unreferenced(db, id=id, references=self.references())
        return await super().delete(db, id=id)


class CRUDDescribedGroup(CRUDNamedEntity[ModelType, CreateSchemaType, UpdateSchemaType]):
    """이름 + 설명을 가진 그룹(모드 그룹, 상태 그룹)."""

    async def get_by_description(self, db: AsyncSession, *, description: str) -> Optional[ModelType]:
        """설명이 정확히 같은 첫 번째 그룹(id 순). 앞뒤 공백은 무시합니다."""
        return await self.get_by_attribute(db, attribute="description", value=(description or "").strip())

    async def search_by_description(self, db: AsyncSession, *, term: str) -> List[ModelType]:
        return await self.search(db, field="description", term=term)

    async def update_description(self, db: AsyncSession, *, id: Any, description: str) -> ModelType:
        return await self.update(db, id=id, obj_in={"description": description})

# mescore/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.

도메인 저장소는 이 클래스를 상속하여 검증 규칙과 범위 내 중복 검사를 추가합니다.
커밋 시 발생하는 DB 제약조건 위반은 AlreadyExistsError / InvalidReferenceError 로,
조회와 커밋에서 발생하는 그 밖의 영속성 오류는 StoreError 로 변환됩니다.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta, UTC
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.exceptions import (
    AlreadyExistsError,
    InvalidReferenceError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from mescore.core.model_base import utcnow
from mescore.core.query import FilterSet, PageRequest, count_rows, paginate
from mescore.core.validation import require_ordered_range

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

MAX_BULK_SIZE = 100

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def integrity_kind(exc: IntegrityError) -> Optional[str]:
    """
    IntegrityError 를 'unique' / 'foreign_key' / None 으로 분류합니다.
    PostgreSQL 은 SQLSTATE, SQLite 는 드라이버 메시지로 판별합니다.
    """
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == UNIQUE_VIOLATION:
            return "unique"
        if code == FOREIGN_KEY_VIOLATION:
            return "foreign_key"

    message = str(orig or exc)
    if "UNIQUE constraint failed" in message:
        return "unique"
    if "FOREIGN KEY constraint failed" in message:
        return "foreign_key"
    return None


def input_data(obj_in: Any, *, exclude_unset: bool = False) -> Dict[str, Any]:
    """스키마 객체 또는 딕셔너리를 딕셔너리로 변환합니다."""
    if isinstance(obj_in, dict):
        return dict(obj_in)
    return obj_in.model_dump(exclude_unset=exclude_unset)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.

    - label: 오류 메시지에 사용하는 엔티티 이름
    - default_order: 목록 조회 기본 정렬 컬럼 이름
    """
    def __init__(self, model: Type[ModelType], *, label: Optional[str] = None, default_order: Sequence[str] = ("id",)):
        self.model = model
        self.label = label or model.__name__
        self.default_order = tuple(default_order)

    def _order_columns(self, fields: Optional[Sequence[str]] = None) -> List[Any]:
        return [getattr(self.model, name) for name in (fields or self.default_order)]

    # -------------------------------------------------------------------------
    # 영속성 오류 변환
    # -------------------------------------------------------------------------
    async def _rollback(self, db: AsyncSession) -> None:
        try:
            await db.rollback()
        except SQLAlchemyError as e:
            # 연결이 끊긴 경우 롤백도 실패할 수 있습니다. 원래 오류를 보고합니다.
            logger.error(f"Rollback failed after {self.label} store error: {e}")

    @asynccontextmanager
    async def store_errors(self, db: AsyncSession, *, operation: str, target_id: Any = None) -> AsyncIterator[None]:
        """
        블록 안에서 발생한 영속성 오류를 롤백한 뒤 분류하여 다시 발생시킵니다.
        - 유일성 위반 -> AlreadyExistsError
        - 외래 키 위반 -> InvalidReferenceError
        - 그 밖의 오류 -> StoreError(operation, target_id)
        """
        try:
            yield
        except IntegrityError as e:
            await self._rollback(db)
            kind = integrity_kind(e)
            logger.warning(f"{self.label} {operation} rejected by constraint (id={target_id}, kind={kind}): {e.orig}")
            if kind == "unique":
                raise AlreadyExistsError(f"{self.label} already exists", entity=self.label) from e
            if kind == "foreign_key":
                raise InvalidReferenceError(f"{self.label} references a row that does not exist or is still referenced") from e
            raise StoreError(operation, target_id, message=f"{self.label} {operation} violated a constraint") from e
        except SQLAlchemyError as e:
            await self._rollback(db)
            logger.error(f"Unexpected store error during {self.label} {operation} (id={target_id}): {e}", exc_info=True)
            raise StoreError(operation, target_id) from e

    async def run_query(self, db: AsyncSession, statement: Any, *, operation: str, target_id: Any = None) -> Result:
        """조회 구문을 실행합니다. 실패하면 StoreError(operation, target_id) 가 발생합니다."""
        async with self.store_errors(db, operation=operation, target_id=target_id):
            return await db.execute(statement)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        async with self.store_errors(db, operation="get", target_id=id):
            return await db.get(self.model, id)

    async def get_or_raise(self, db: AsyncSession, id: Any) -> ModelType:
        db_obj = await self.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.label, id)
        return db_obj

    async def exists(self, db: AsyncSession, id: Any) -> bool:
        statement = select(self.model.id).where(self.model.id == id).limit(1)
        result = await self.run_query(db, statement, operation="exists", target_id=id)
        return result.first() is not None

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        """속성 값이 같은 첫 번째 레코드(id 순)를 반환합니다."""
        statement = (
            select(self.model)
            .where(getattr(self.model, attribute) == value)
            .order_by(self.model.id)
            .limit(1)
        )
        response = await self.run_query(db, statement, operation=f"get_by_{attribute}")
        return response.scalars().first()

    async def attribute_exists(
        self, db: AsyncSession, *, attribute: str, value: Any, exclude_id: Optional[int] = None, **scope: Any
    ) -> bool:
        """
        같은 범위(scope) 안에 attribute == value 인 다른 행이 있는지 확인합니다.
        exclude_id 로 수정 중인 행 자신을 제외합니다.
        """
        statement = select(self.model.id).where(getattr(self.model, attribute) == value)
        for field, scope_value in scope.items():
            statement = statement.where(getattr(self.model, field) == scope_value)
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        result = await self.run_query(db, statement.limit(1), operation=f"{attribute}_exists", target_id=exclude_id)
        return result.first() is not None

    async def count(self, db: AsyncSession, *, filters: Optional[FilterSet] = None) -> int:
        async with self.store_errors(db, operation="count"):
            return await count_rows(db, self.model, filters)

    async def search(self, db: AsyncSession, *, field: str, term: Optional[str]) -> List[ModelType]:
        """
        대소문자를 무시한 부분 문자열 검색. 검색한 필드 순으로 정렬합니다.
        빈 검색어는 조건 없이 전체 행을 반환합니다.
        """
        filters = FilterSet().contains(getattr(self.model, field), term)
        statement = filters.apply(select(self.model)).order_by(getattr(self.model, field), self.model.id)
        result = await self.run_query(db, statement, operation=f"search_by_{field}")
        return list(result.scalars().all())

    async def get_paginated(
        self,
        db: AsyncSession,
        *,
        page: PageRequest,
        filters: Optional[FilterSet] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> Tuple[List[ModelType], int]:
        """(페이지 행 목록, 전체 건수)"""
        async with self.store_errors(db, operation="get_paginated"):
            return await paginate(db, self.model, page=page, filters=filters, order_by=self._order_columns(order_by))

    async def get_by_date_range(
        self,
        db: AsyncSession,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        date_range_field: str = "created_at",
    ) -> List[ModelType]:
        """
        기간 검색. end_date 가 날짜이면 그날 하루 전체를 포함합니다.
        최신 레코드가 먼저 오도록 내림차순으로 정렬합니다.
        """
        require_ordered_range("start_date", start_date, "end_date", end_date)
        date_field = getattr(self.model, date_range_field)
        conditions = []
        if start_date is not None:
            conditions.append(date_field >= _as_datetime(start_date))
        if end_date is not None:
            if isinstance(end_date, datetime):
                conditions.append(date_field <= end_date)
            else:
                # end_date 당일까지 포함하기 위함
                conditions.append(date_field < _as_datetime(end_date + timedelta(days=1)))

        statement = select(self.model)
        if conditions:
            statement = statement.where(*conditions)
        statement = statement.order_by(date_field.desc(), self.model.id.desc())
        result = await self.run_query(db, statement, operation="get_by_date_range")
        return list(result.scalars().all())

    async def ensure_unreferenced(self, db: AsyncSession, *, id: Any, references: Sequence[Tuple[Any, str]]) -> None:
        """
        references 의 (참조 컬럼, 참조하는 대상 이름) 중 하나라도 id 를 가리키는 행이 있으면
        삭제를 거부합니다.
        """
        for column, referenced_by in references:
            check_stmt = select(column).where(column == id).limit(1)
            result = await self.run_query(db, check_stmt, operation="delete", target_id=id)
            if result.first():
                logger.warning(f"Refusing to delete {self.label} {id}: still referenced by {referenced_by}")
                raise InvalidReferenceError(
                    f"Cannot delete {self.label} {id}: it is still referenced by {referenced_by}",
                    field="id",
                    value=id,
                )

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------
    async def _commit(self, db: AsyncSession, db_obj: Any = None, *, operation: str, target_id: Any = None) -> None:
        """커밋한 뒤 db_obj 가 있으면 DB 값으로 다시 읽어옵니다."""
        async with self.store_errors(db, operation=operation, target_id=target_id):
            await db.commit()
            if db_obj is not None:
                await db.refresh(db_obj)

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await self._commit(db, db_obj, operation="create")
        logger.info(f"{self.label} created (id={db_obj.id})")
        return db_obj

    async def update(
        self, db: AsyncSession, *, id: Any, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다. created_at 은 변경하지 않습니다.
        """
        db_obj = await self.get_or_raise(db, id)
        update_data = input_data(obj_in, exclude_unset=True)
        for key, value in update_data.items():
            if key in ("id", "created_at", "updated_at"):
                continue
            setattr(db_obj, key, value)
        db_obj.updated_at = utcnow()

        db.add(db_obj)
        await self._commit(db, db_obj, operation="update", target_id=id)
        logger.info(f"{self.label} updated (id={id}, fields={sorted(update_data)})")
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> bool:
        """
        ID를 기준으로 레코드를 삭제합니다. 삭제된 행이 있으면 True 를 반환합니다.
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return False
        await db.delete(db_obj)
        await self._commit(db, operation="delete", target_id=id)
        logger.info(f"{self.label} deleted (id={id})")
        return True

    async def bulk_create(
        self, db: AsyncSession, *, objs_in: Sequence[Union[CreateSchemaType, Dict[str, Any]]]
    ) -> List[ModelType]:
        """
        여러 레코드를 차례로 생성합니다. 이미 존재하는 항목은 건너뜁니다.
        """
        if not objs_in or len(objs_in) > MAX_BULK_SIZE:
            raise ValidationError(f"Bulk create accepts between 1 and {MAX_BULK_SIZE} items", field="items")

        created: List[ModelType] = []
        rolled_back = False
        for obj_in in objs_in:
            try:
                created.append(await self.create(db, obj_in=obj_in))
            except AlreadyExistsError as e:
                rolled_back = True
                logger.warning(f"Skipping duplicate {self.label} in bulk create: {e.message}")

        # 롤백으로 만료된 앞선 행들을 다시 읽어옵니다.
        if rolled_back:
            async with self.store_errors(db, operation="bulk_create"):
                for db_obj in created:
                    await db.refresh(db_obj)
        return created


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=UTC)

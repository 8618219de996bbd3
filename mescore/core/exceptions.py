# mescore/core/exceptions.py

"""
저장소 계층의 오류 분류 체계를 정의하는 모듈입니다.

모든 오류는 실패 지점에서 타입이 지정된 예외로 생성되며,
HTTP 계층은 메시지 문자열이 아닌 `error_type`으로 상태 코드를 결정합니다.

- ValidationError: 입력값 형식 오류 (I/O 이전에 검출)
- InvalidReferenceError: 참조하는 그룹/유형/상위 설비가 존재하지 않거나, 사용 중인 행의 삭제
- NotFoundError: 대상 ID가 존재하지 않음
- AlreadyExistsError: 범위 내 유일성 위반 (사전 검사 또는 DB 제약조건 위반)
- StoreError: 그 밖의 영속성 계층 오류 (작업 이름, 대상 ID 포함)
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """오류 종류 구분자."""

    VALIDATION = "validation"
    REFERENCE = "reference"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    STORE = "store"


class MesError(Exception):
    """모든 저장소 오류의 기본 클래스입니다."""

    error_type: ErrorType = ErrorType.STORE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """API 응답용 딕셔너리로 변환합니다."""
        return {
            "detail": self.message,
            "type": self.error_type.value,
            "details": self.details,
        }


class ValidationError(MesError):
    error_type = ErrorType.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
        super().__init__(message, details)
        self.field = field


class InvalidReferenceError(ValidationError):
    """
    참조 대상이 존재하지 않거나(예: "mode_group_id '3' does not exist"),
    다른 행이 참조 중이어서 작업을 수행할 수 없을 때 발생합니다.
    검증 오류의 한 종류이므로 ValidationError를 상속합니다.
    """

    error_type = ErrorType.REFERENCE

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        details = {"value": value} if value is not None else None
        super().__init__(message, field=field, details=details)
        self.value = value

    @classmethod
    def missing(cls, field: str, value: Any) -> "InvalidReferenceError":
        return cls(f"{field} '{value}' does not exist", field=field, value=value)


class NotFoundError(MesError):
    error_type = ErrorType.NOT_FOUND

    def __init__(self, entity: str, target_id: Any) -> None:
        super().__init__(f"{entity} with id {target_id} not found", {"entity": entity, "id": target_id})
        self.entity = entity
        self.target_id = target_id


class AlreadyExistsError(MesError):
    error_type = ErrorType.ALREADY_EXISTS

    def __init__(self, message: str, entity: Optional[str] = None, field: Optional[str] = None) -> None:
        details = {key: value for key, value in (("entity", entity), ("field", field)) if value is not None}
        super().__init__(message, details)
        self.entity = entity
        self.field = field


class StoreError(MesError):
    error_type = ErrorType.STORE

    def __init__(self, operation: str, target_id: Any = None, message: Optional[str] = None) -> None:
        text = message or f"Store operation '{operation}' failed"
        if target_id is not None:
            text = f"{text} (id={target_id})"
        super().__init__(text, {"operation": operation, "id": target_id})
        self.operation = operation
        self.target_id = target_id

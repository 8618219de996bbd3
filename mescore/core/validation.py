# mescore/core/validation.py

"""
모든 저장소가 공유하는 입력값 검증 규칙입니다.
I/O가 없는 순수 함수이며, 저장소는 쿼리를 실행하기 전에 이 함수들을 호출합니다.
"""

from typing import Optional

from mescore.core.exceptions import ValidationError

MAX_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 2048


def require_text(field: str, value: Optional[str], max_length: int) -> str:
    """앞뒤 공백을 제거한 뒤 비어있지 않고 최대 길이 이하인지 확인하여 정리된 값을 반환합니다."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} cannot be empty", field=field)
    if len(cleaned) > max_length:
        raise ValidationError(f"{field} exceeds max length of {max_length} characters", field=field)
    return cleaned


def require_name(value: Optional[str], field: str = "name") -> str:
    return require_text(field, value, MAX_NAME_LENGTH)


def require_description(value: Optional[str], field: str = "description") -> str:
    return require_text(field, value, MAX_DESCRIPTION_LENGTH)


def require_non_negative(field: str, value: int) -> int:
    if value < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return value


def require_ordered_range(low_field: str, low, high_field: str, high) -> None:
    """low > high 이면 ValidationError를 발생시킵니다. 숫자와 날짜 모두에 사용합니다."""
    if low is not None and high is not None and low > high:
        raise ValidationError(f"{low_field} cannot be greater than {high_field}", field=low_field)

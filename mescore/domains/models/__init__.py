# mescore/domains/models/__init__.py

"""
모든 테이블 모델을 한곳에서 임포트하여 SQLModel.metadata 에 등록합니다.
테이블 생성(create_all)과 Alembic autogenerate 가 이 모듈에 의존합니다.
"""

from mescore.domains.eqp.models import (  # noqa: F401
    Equipment,
    EquipmentModeGroup,
    EquipmentStateGroup,
    EquipmentType,
)
from mescore.domains.mode.models import Mode, ModeGroup  # noqa: F401
from mescore.domains.state.models import State, StateGroup  # noqa: F401

__all__ = [
    "Equipment",
    "EquipmentModeGroup",
    "EquipmentStateGroup",
    "EquipmentType",
    "Mode",
    "ModeGroup",
    "State",
    "StateGroup",
]

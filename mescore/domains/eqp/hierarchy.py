# mescore/domains/eqp/hierarchy.py

"""
설비 계층 규칙과 경로 해석.

- EquipmentLevel: enterprise(1) -> site(2) -> area(3) -> line(4) -> cell(5)
  설비 유형 ID 가 1..5 이면 해당 계층으로 간주합니다.
- check_parent_level: 상위 설비의 계층은 하위 설비보다 엄격히 높아야(숫자가 작아야) 합니다.
- EquipmentPath: 최상위 -> 자기 자신 순으로 정렬된 설비 목록에서 계층별 조상을 찾습니다.
"""

from enum import IntEnum
from typing import Any, Generic, Iterator, List, Optional, Sequence, TypeVar

from mescore.core.exceptions import ValidationError

NodeType = TypeVar("NodeType")


class EquipmentLevel(IntEnum):
    ENTERPRISE = 1
    SITE = 2
    AREA = 3
    LINE = 4
    CELL = 5

    @classmethod
    def from_type_id(cls, type_id: Optional[int]) -> Optional["EquipmentLevel"]:
        """계층에 해당하지 않는 사용자 정의 유형이면 None."""
        try:
            return cls(type_id)
        except ValueError:
            return None


def check_parent_level(parent_type_id: int, child_type_id: int) -> None:
    """
    상위/하위 모두 계층 유형이면 상위 계층이 더 높아야 합니다.
    어느 한쪽이라도 사용자 정의 유형이면 제약하지 않습니다.
    """
    parent_level = EquipmentLevel.from_type_id(parent_type_id)
    child_level = EquipmentLevel.from_type_id(child_type_id)
    if parent_level is None or child_level is None:
        return
    if parent_level >= child_level:
        raise ValidationError(
            f"A {child_level.name.lower()} cannot be placed under a {parent_level.name.lower()}",
            field="parent_id",
            details={"parent_level": parent_level.name.lower(), "child_level": child_level.name.lower()},
        )


class EquipmentPath(Generic[NodeType]):
    """
    최상위 설비부터 대상 설비까지 정렬된 목록입니다.
    각 get_* 메서드는 순서대로 훑어 type_id 가 일치하는 첫 번째 노드를 반환합니다.
    """

    def __init__(self, nodes: Sequence[NodeType]):
        self.nodes: List[NodeType] = list(nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[NodeType]:
        return iter(self.nodes)

    @property
    def node(self) -> Optional[NodeType]:
        return self.nodes[-1] if self.nodes else None

    @property
    def depth(self) -> int:
        return max(len(self.nodes) - 1, 0)

    def get_level(self, level: EquipmentLevel) -> Optional[NodeType]:
        for item in self.nodes:
            if _type_id(item) == int(level):
                return item
        return None

    def get_enterprise(self) -> Optional[NodeType]:
        return self.get_level(EquipmentLevel.ENTERPRISE)

    def get_site(self) -> Optional[NodeType]:
        return self.get_level(EquipmentLevel.SITE)

    def get_area(self) -> Optional[NodeType]:
        return self.get_level(EquipmentLevel.AREA)

    def get_line(self) -> Optional[NodeType]:
        return self.get_level(EquipmentLevel.LINE)

    def get_cell(self) -> Optional[NodeType]:
        return self.get_level(EquipmentLevel.CELL)

    def get_parent(self) -> Optional[NodeType]:
        """자기 자신 바로 위 노드. 최상위 노드이면 None."""
        if len(self.nodes) > 1:
            return self.nodes[-2]
        return None


def _type_id(item: Any) -> Optional[int]:
    if isinstance(item, dict):
        return item.get("type_id")
    return getattr(item, "type_id", None)

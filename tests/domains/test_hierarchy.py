# tests/domains/test_hierarchy.py

"""
설비 계층 규칙(check_parent_level)과 경로 해석(EquipmentPath) 단위 테스트입니다.
"""

import pytest

from mescore.core.exceptions import ValidationError
from mescore.domains.eqp.hierarchy import EquipmentLevel, EquipmentPath, check_parent_level


def _node(id, type_id, parent_id=None):
    return {"id": id, "type_id": type_id, "parent_id": parent_id}


def test_level_from_type_id():
    assert EquipmentLevel.from_type_id(1) is EquipmentLevel.ENTERPRISE
    assert EquipmentLevel.from_type_id(5) is EquipmentLevel.CELL
    assert EquipmentLevel.from_type_id(6) is None
    assert EquipmentLevel.from_type_id(None) is None


@pytest.mark.parametrize("parent_type, child_type", [(1, 2), (2, 3), (1, 5), (4, 5)])
def test_higher_level_parent_is_allowed(parent_type, child_type):
    check_parent_level(parent_type, child_type)


@pytest.mark.parametrize("parent_type, child_type", [(5, 4), (3, 3), (4, 1)])
def test_lower_or_same_level_parent_is_rejected(parent_type, child_type):
    with pytest.raises(ValidationError) as excinfo:
        check_parent_level(parent_type, child_type)
    assert excinfo.value.field == "parent_id"


def test_rejection_message_names_levels():
    with pytest.raises(ValidationError, match="A line cannot be placed under a cell"):
        check_parent_level(5, 4)


def test_custom_types_are_unconstrained():
    check_parent_level(7, 1)
    check_parent_level(5, 9)


def test_path_level_lookup():
    path = EquipmentPath([
        _node(10, 1),
        _node(11, 2, 10),
        _node(12, 3, 11),
        _node(13, 4, 12),
        _node(14, 5, 13),
    ])
    assert len(path) == 5
    assert path.depth == 4
    assert path.get_enterprise()["id"] == 10
    assert path.get_site()["id"] == 11
    assert path.get_area()["id"] == 12
    assert path.get_line()["id"] == 13
    assert path.get_cell()["id"] == 14
    assert path.get_parent()["id"] == 13
    assert path.node["id"] == 14


def test_path_with_missing_levels():
    """중간 계층이 없는 경로 (enterprise -> line)"""
    path = EquipmentPath([_node(1, 1), _node(2, 4, 1)])
    assert path.get_site() is None
    assert path.get_area() is None
    assert path.get_line()["id"] == 2
    assert path.get_cell() is None


def test_root_only_path():
    path = EquipmentPath([_node(1, 1)])
    assert path.get_parent() is None
    assert path.depth == 0


def test_path_accepts_objects():
    class Node:
        def __init__(self, id, type_id):
            self.id = id
            self.type_id = type_id

    path = EquipmentPath([Node(1, 2), Node(2, 3)])
    assert path.get_site().id == 1
    assert path.get_area().id == 2
    assert [node.id for node in path] == [1, 2]

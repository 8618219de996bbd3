# tests/domains/test_seed.py

from sqlmodel.ext.asyncio.session import AsyncSession

from mescore.core.seed import DEFAULT_EQUIPMENT_TYPES, DEFAULT_MODE_GROUP, DEFAULT_STATES, DEFAULT_STATE_GROUP, seed_defaults
from mescore.domains.eqp import crud as eqp_crud
from mescore.domains.eqp.hierarchy import EquipmentLevel
from mescore.domains.mode import crud as mode_crud
from mescore.domains.state import crud as state_crud


async def test_seed_creates_defaults_once(db_session: AsyncSession):
    created = await seed_defaults(db_session)
    assert created == {
        "equipment_types": 5,
        "mode_groups": 1,
        "modes": 4,
        "state_groups": 1,
        "states": len(DEFAULT_STATES),
    }

    again = await seed_defaults(db_session)
    assert set(again.values()) == {0}


async def test_seeded_type_ids_match_levels(db_session: AsyncSession):
    await seed_defaults(db_session)
    for name in DEFAULT_EQUIPMENT_TYPES:
        equipment_type = await eqp_crud.equipment_type.get_by_name(db_session, name=name)
        assert EquipmentLevel(equipment_type.id).name.lower() == name


async def test_seeded_groups_are_populated(db_session: AsyncSession):
    await seed_defaults(db_session)
    mode_group = await mode_crud.mode_group.get_by_name(db_session, name=DEFAULT_MODE_GROUP[0])
    assert await mode_crud.mode.count_by_group(db_session, mode_group_id=mode_group.id) == 4

    state_group = await state_crud.state_group.get_by_name(db_session, name=DEFAULT_STATE_GROUP[0])
    states = await state_crud.state.get_states_for_group(db_session, state_group_id=state_group.id)
    assert [s.code for s in states] == list(range(11))

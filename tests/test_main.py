# tests/test_main.py

from httpx import AsyncClient


async def test_read_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to MES Core API. Visit /docs for interactive API documentation."}


async def test_health_check(client: AsyncClient):
    response = await client.get("/health-check")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database_connection": "successful"}


async def test_openapi_lists_domain_routes(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/api/v1/eqp/equipment/{equipment_id}/path" in paths
    assert "/api/v1/mode/modes/{mode_id}/group" in paths
    assert "/api/v1/state/state_groups/{group_id}/states/range" in paths

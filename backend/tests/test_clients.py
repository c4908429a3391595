"""Tests for the client directory."""

import pytest

from services.clients.service import SEARCH_LIMIT, ClientService
from shared.client_models import ClientCreateRequest, ClientUpdateRequest, SocialMedia, SortOrder
from shared.errors import NotFoundError


def client_request(name: str, **fields) -> ClientCreateRequest:
    return ClientCreateRequest(
        name=name,
        position=fields.pop("position", "Mayor"),
        election_date=fields.pop("election_date", "2026-10-04"),
        campaign_start=fields.pop("campaign_start", "2026-06-01"),
        **fields,
    )


@pytest.fixture
def client_service(session) -> ClientService:
    return ClientService(session)


class TestClientService:
    @pytest.mark.asyncio
    async def test_create_and_get(self, client_service) -> None:
        created = await client_service.create(
            client_request("Maria Silva", political_party="Green", social_media=SocialMedia(twitter="@maria"))
        )

        fetched = await client_service.get(created.id)

        assert fetched.name == "Maria Silva"
        assert fetched.social_media.twitter == "@maria"
        assert fetched.is_active is True
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_pagination_and_sorting(self, client_service) -> None:
        for name in ["Carla", "Ana", "Bruno", "Diego", "Elena"]:
            await client_service.create(client_request(name))

        page = await client_service.list_clients(page=2, limit=2, sort_by="name", sort_order=SortOrder.ASC)

        assert [item.name for item in page.data] == ["Carla", "Diego"]
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3
        assert page.pagination.has_next is True
        assert page.pagination.has_prev is True

    @pytest.mark.asyncio
    async def test_unknown_sort_field_falls_back(self, client_service) -> None:
        await client_service.create(client_request("Only"))

        page = await client_service.list_clients(sort_by="password")

        assert [item.name for item in page.data] == ["Only"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, client_service) -> None:
        await client_service.create(client_request("Maria Silva", political_party="Green"))
        await client_service.create(client_request("John Smith", position="Governor"))

        assert [item.name for item in await client_service.search("GREEN")] == ["Maria Silva"]
        assert [item.name for item in await client_service.search("govern")] == ["John Smith"]

        page = await client_service.list_clients(search="silva")
        assert page.pagination.total == 1

    @pytest.mark.asyncio
    async def test_search_is_limited(self, client_service) -> None:
        for index in range(SEARCH_LIMIT + 3):
            await client_service.create(client_request(f"Candidate {index:02d}"))

        assert len(await client_service.search("candidate")) == SEARCH_LIMIT

    @pytest.mark.asyncio
    async def test_stats(self, client_service) -> None:
        await client_service.create(client_request("Active One"))
        await client_service.create(client_request("Active Two"))
        await client_service.create(client_request("Retired", is_active=False))

        stats = await client_service.get_stats()

        assert (stats.total, stats.active, stats.inactive, stats.this_month) == (3, 2, 1, 3)

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client_service) -> None:
        created = await client_service.create(client_request("Maria"))

        updated = await client_service.update(created.id, ClientUpdateRequest(position="Senator", is_active=False))
        assert updated.position == "Senator"
        assert updated.is_active is False
        assert updated.name == "Maria"

        await client_service.delete(created.id)
        with pytest.raises(NotFoundError):
            await client_service.get(created.id)
        with pytest.raises(NotFoundError):
            await client_service.delete(created.id)


class TestClientApi:
    @pytest.mark.asyncio
    async def test_requires_authentication(self, client) -> None:
        assert (await client.get("/api/clients")).status_code == 401

    @pytest.mark.asyncio
    async def test_crud_flow(self, client, auth_headers) -> None:
        created = await client.post(
            "/api/clients",
            json={
                "name": "Maria Silva",
                "position": "Mayor",
                "election_date": "2026-10-04",
                "campaign_start": "2026-06-01",
            },
            headers=auth_headers,
        )
        assert created.status_code == 201
        client_id = created.json()["data"]["id"]

        listing = await client.get("/api/clients", params={"search": "maria"}, headers=auth_headers)
        assert listing.json()["data"]["pagination"]["total"] == 1

        search = await client.get("/api/clients/search", params={"q": "silva"}, headers=auth_headers)
        assert [item["id"] for item in search.json()["data"]] == [client_id]

        stats = await client.get("/api/clients/stats", headers=auth_headers)
        assert stats.json()["data"]["total"] == 1

        updated = await client.put(f"/api/clients/{client_id}", json={"color": "#00aa00"}, headers=auth_headers)
        assert updated.json()["data"]["color"] == "#00aa00"

        deleted = await client.delete(f"/api/clients/{client_id}", headers=auth_headers)
        assert deleted.status_code == 204

        missing = await client.get(f"/api/clients/{client_id}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "not_found"

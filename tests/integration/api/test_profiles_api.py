"""Integration tests for Profiles API."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import UserProfileModel
from tests.conftest import InMemoryProfileCache

BASE = "/api/v1/profiles"


async def _create(client: AsyncClient, user_id: str, **fields: str):
    body = {"user_id": user_id, "first_name": "Ada", "last_name": "Lovelace"}
    body.update(fields)
    return await client.post(BASE, json=body)


async def _count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(UserProfileModel)) or 0


class TestCreateProfile:
    @pytest.mark.asyncio
    async def test_create_then_get_round_trips_input(self, api_client: AsyncClient):
        create = await _create(
            api_client, "user-1", phone="+12025550123", date_of_birth="1990-12-10"
        )

        assert create.status_code == 201
        created = create.json()["data"]
        assert created["created_at"]
        assert created["updated_at"]

        response = await api_client.get(f"{BASE}/user-1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_id"] == "user-1"
        assert data["first_name"] == "Ada"
        assert data["last_name"] == "Lovelace"
        assert data["phone"] == "+12025550123"
        assert data["date_of_birth"] == "1990-12-10"
        assert data["created_at"] == created["created_at"]

    @pytest.mark.asyncio
    async def test_create_populates_cache(
        self, api_client: AsyncClient, profile_cache: InMemoryProfileCache
    ):
        await _create(api_client, "user-1")

        assert "user-1" in profile_cache.entries
        assert profile_cache.entries["user-1"].id is not None

    @pytest.mark.asyncio
    async def test_duplicate_create_returns_409_and_keeps_one_row(
        self,
        api_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await _create(api_client, "dup-user")
        response = await _create(api_client, "dup-user", first_name="Grace")

        assert response.status_code == 409
        assert response.json()["error_code"] == "PROFILE_ALREADY_EXISTS"
        assert await _count(session_factory) == 1

    @pytest.mark.asyncio
    async def test_invalid_fields_return_400_with_messages(
        self,
        api_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        response = await api_client.post(
            BASE,
            json={
                "user_id": "user-1",
                "first_name": "",
                "last_name": "Lovelace",
                "phone": "abc",
                "date_of_birth": "2024-13-40",
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_INPUT"
        assert body["details"] == {
            "first_name": "first_name is required",
            "phone": "phone must be a valid phone number",
            "date_of_birth": "date_of_birth must be a valid date in YYYY-MM-DD format",
        }
        assert await _count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_non_ascii_digits_in_date_return_400(
        self,
        api_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        response = await _create(api_client, "user-1", date_of_birth="２０２４-01-01")

        assert response.status_code == 400
        assert response.json()["details"] == {
            "date_of_birth": "date_of_birth must be a valid date in YYYY-MM-DD format"
        }
        assert await _count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_missing_required_fields_return_400(self, api_client: AsyncClient):
        response = await api_client.post(BASE, json={})

        assert response.status_code == 400
        assert set(response.json()["details"]) == {"user_id", "first_name", "last_name"}


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_unknown_profile_returns_404_without_side_effects(
        self,
        api_client: AsyncClient,
        profile_cache: InMemoryProfileCache,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        response = await api_client.get(f"{BASE}/nobody")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROFILE_NOT_FOUND"
        assert profile_cache.entries == {}
        assert await _count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_cache_unreachable_falls_through_to_store(
        self, api_client: AsyncClient, profile_cache: InMemoryProfileCache
    ):
        await _create(api_client, "user-1")
        profile_cache.available = False

        response = await api_client.get(f"{BASE}/user-1")

        assert response.status_code == 200
        assert response.json()["data"]["user_id"] == "user-1"

    @pytest.mark.asyncio
    async def test_cache_miss_repopulates_cache(
        self, api_client: AsyncClient, profile_cache: InMemoryProfileCache
    ):
        await _create(api_client, "user-1")
        profile_cache.entries.clear()

        response = await api_client.get(f"{BASE}/user-1")

        assert response.status_code == 200
        assert "user-1" in profile_cache.entries

    @pytest.mark.asyncio
    async def test_response_omits_address_fields(self, api_client: AsyncClient):
        await _create(api_client, "user-1")
        await api_client.patch(f"{BASE}/user-1", json={"city": "Oslo", "country": "Norway"})

        data = (await api_client.get(f"{BASE}/user-1")).json()["data"]

        assert "city" not in data
        assert "country" not in data
        assert "driving_license" not in data


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_single_field_update_leaves_others(self, api_client: AsyncClient):
        created = (
            await _create(api_client, "user-1", phone="+12025550123", date_of_birth="1990-12-10")
        ).json()["data"]

        response = await api_client.patch(f"{BASE}/user-1", json={"phone": "+442071838750"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+442071838750"
        assert data["first_name"] == created["first_name"]
        assert data["last_name"] == created["last_name"]
        assert data["date_of_birth"] == created["date_of_birth"]
        assert data["created_at"] == created["created_at"]
        assert data["updated_at"] >= created["updated_at"]

    @pytest.mark.asyncio
    async def test_update_refreshes_cache(
        self, api_client: AsyncClient, profile_cache: InMemoryProfileCache
    ):
        await _create(api_client, "user-1")

        await api_client.patch(f"{BASE}/user-1", json={"first_name": "Augusta"})

        assert profile_cache.entries["user-1"].first_name == "Augusta"
        fetched = (await api_client.get(f"{BASE}/user-1")).json()["data"]
        assert fetched["first_name"] == "Augusta"

    @pytest.mark.asyncio
    async def test_update_unknown_returns_404(self, api_client: AsyncClient):
        response = await api_client.patch(f"{BASE}/nobody", json={"city": "Oslo"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_invalid_phone_returns_400(self, api_client: AsyncClient):
        await _create(api_client, "user-1")

        response = await api_client.patch(f"{BASE}/user-1", json={"phone": "abc"})

        assert response.status_code == 400
        assert response.json()["details"] == {"phone": "phone must be a valid phone number"}


class TestDeleteProfile:
    @pytest.mark.asyncio
    async def test_delete_removes_store_and_cache_entries(
        self,
        api_client: AsyncClient,
        profile_cache: InMemoryProfileCache,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await _create(api_client, "user-1")

        response = await api_client.delete(f"{BASE}/user-1")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert "user-1" not in profile_cache.entries
        assert await _count(session_factory) == 0
        assert (await api_client.get(f"{BASE}/user-1")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_returns_404(self, api_client: AsyncClient):
        response = await api_client.delete(f"{BASE}/nobody")

        assert response.status_code == 404


class TestBatchGetProfiles:
    @pytest.mark.asyncio
    async def test_missing_ids_are_dropped(self, api_client: AsyncClient):
        await _create(api_client, "A")
        await _create(api_client, "C")

        response = await api_client.post(f"{BASE}/batch", json={"user_ids": ["A", "B", "C"]})

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 2
        assert {p["user_id"] for p in data} == {"A", "C"}

    @pytest.mark.asyncio
    async def test_works_with_cache_down(
        self, api_client: AsyncClient, profile_cache: InMemoryProfileCache
    ):
        await _create(api_client, "A")
        profile_cache.available = False

        response = await api_client.post(f"{BASE}/batch", json={"user_ids": ["A", "B"]})

        assert response.status_code == 200
        assert [p["user_id"] for p in response.json()["data"]] == ["A"]

"""Tests for the CurseForge and Modrinth registry clients."""

import json

import aiohttp
import pytest

from conftest import FakeResponse, FakeSession, cf_payload, mr_payload
from packrelease.exceptions import RegistryError
from packrelease.services.curseforge import CurseForgeClient, is_library
from packrelease.services.modrinth import ModrinthClient


class TestCurseForgeLibraryInference:
    def test_library_primary_and_library_categories(self):
        data = cf_payload(1, primary=421, categories=[(421, "API and Library"), (435, "Server Utility")])
        assert is_library(data) is True

    def test_non_library_primary(self):
        data = cf_payload(1, primary=406, categories=[(421, "API and Library")])
        assert is_library(data) is False

    def test_any_non_library_category_disqualifies(self):
        data = cf_payload(1, primary=421, categories=[(421, "API and Library"), (406, "World Gen")])
        assert is_library(data) is False


class TestCurseForgeClient:
    @pytest.mark.asyncio
    async def test_fetch_batch_posts_all_ids_in_one_request(self):
        session = FakeSession(
            lambda **call: (200, {"data": [cf_payload(i) for i in call["json"]["modIds"]]})
        )
        client = CurseForgeClient("key", base_url="https://cf.test/v1", session=session)

        mods = await client.fetch_batch(["10", "11"])

        assert len(session.calls) == 1
        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["url"] == "https://cf.test/v1/mods"
        assert call["json"] == {"modIds": [10, 11]}
        assert call["headers"]["x-api-key"] == "key"
        assert sorted(mod.external_id for mod in mods) == ["10", "11"]

    @pytest.mark.asyncio
    async def test_fetch_one_normalizes_payload(self):
        payload = cf_payload(
            238222, name="Just Enough Items", primary=421,
            categories=[(421, "API and Library"), (435, "Server Utility"), (423, "Map and Information")],
        )
        session = FakeSession(lambda **call: (200, {"data": payload}))
        client = CurseForgeClient("key", base_url="https://cf.test/v1", session=session)

        mod = await client.fetch_one("238222")

        assert session.calls[0]["url"] == "https://cf.test/v1/mods/238222"
        assert mod.external_id == "238222"
        assert mod.name == "Just Enough Items"
        assert mod.slug == "just-enough-items"
        assert mod.categories == ("library", "server-utility", "utility")
        assert mod.library is True
        assert mod.popularity_score == 42
        assert mod.icon == "https://media.forgecdn.net/238222.png"
        assert mod.website_url == "https://www.curseforge.com/minecraft/mc-mods/238222"
        assert mod.summary == "Just Enough Items summary"

    @pytest.mark.asyncio
    async def test_error_response_carries_backend_and_ids(self):
        session = FakeSession(lambda **call: (403, {"error": "forbidden"}))
        client = CurseForgeClient("bad", session=session)

        with pytest.raises(RegistryError) as exc_info:
            await client.fetch_batch(["1", "2"])

        assert exc_info.value.backend == "curseforge"
        assert exc_info.value.ids == ["1", "2"]
        assert exc_info.value.status == 403

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_request(self):
        session = FakeSession(lambda **call: pytest.fail("unexpected request"))
        client = CurseForgeClient("key", session=session)
        assert await client.fetch_batch([]) == []
        assert session.calls == []


class TestModrinthClient:
    @pytest.mark.asyncio
    async def test_fetch_batch_encodes_ids_as_json_array(self):
        def responder(**call):
            ids = json.loads(call["params"]["ids"])
            return 200, [mr_payload(i, f"mod-{i}") for i in ids]

        session = FakeSession(responder)
        client = ModrinthClient(base_url="https://mr.test/v2", session=session)

        mods = await client.fetch_batch(["AANobbMI", "P7dR8mSH"])

        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "https://mr.test/v2/projects"
        assert call["params"] == {"ids": '["AANobbMI","P7dR8mSH"]'}
        assert "Authorization" not in call["headers"]
        assert [mod.external_id for mod in mods] == ["AANobbMI", "P7dR8mSH"]

    @pytest.mark.asyncio
    async def test_fetch_one_passes_categories_through(self):
        payload = mr_payload("AANobbMI", "sodium", categories=["optimization", "utility", "optimization"])
        session = FakeSession(lambda **call: (200, payload))
        client = ModrinthClient(token="secret", base_url="https://mr.test/v2", session=session)

        mod = await client.fetch_one("AANobbMI")

        assert session.calls[0]["url"] == "https://mr.test/v2/project/AANobbMI"
        assert session.calls[0]["headers"]["Authorization"] == "secret"
        assert mod.categories == ("optimization", "utility")
        assert mod.library is None
        assert mod.name == "Sodium"
        assert mod.summary == "sodium description"
        assert mod.popularity_score == 1000
        assert mod.icon == "https://cdn.modrinth.com/AANobbMI.png"
        assert mod.website_url == "https://modrinth.com/mod/sodium"

    @pytest.mark.asyncio
    async def test_not_found_raises_registry_error(self):
        session = FakeSession(lambda **call: (404, {"error": "not_found"}))
        client = ModrinthClient(session=session)

        with pytest.raises(RegistryError) as exc_info:
            await client.fetch_one("missing")

        assert exc_info.value.backend == "modrinth"
        assert exc_info.value.ids == ["missing"]
        assert exc_info.value.context["status_code"] == 404

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self):
        session = FakeSession(lambda **call: (200, []))
        async with ModrinthClient(session=session) as client:
            await client.fetch_batch(["a"])
        assert session.closed is False


class FailingSession(FakeSession):
    def __init__(self, error):
        super().__init__(lambda **call: (200, None))
        self.error = error

    def request(self, method, url, params=None, json=None, headers=None):
        self.calls.append({"method": method, "url": url})
        raise self.error


class BrokenBodyResponse(FakeResponse):
    async def json(self):
        raise aiohttp.ClientPayloadError("truncated body")


class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_connection_error_becomes_registry_error(self):
        client = ModrinthClient(session=FailingSession(aiohttp.ClientConnectionError("connection refused")))

        with pytest.raises(RegistryError) as exc_info:
            await client.fetch_batch(["a", "b"])

        assert exc_info.value.backend == "modrinth"
        assert exc_info.value.ids == ["a", "b"]
        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_unreadable_body_becomes_registry_error(self):
        session = FakeSession(lambda **call: (200, None))
        session.request = lambda method, url, **kwargs: BrokenBodyResponse(200, None, url)
        client = CurseForgeClient("key", session=session)

        with pytest.raises(RegistryError) as exc_info:
            await client.fetch_one("10")

        assert exc_info.value.backend == "curseforge"
        assert exc_info.value.ids == ["10"]

"""Tests for the Azure DevOps REST adapters using httpx.MockTransport."""

from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from adapters.azure_devops import AzureBuildClient, AzureGitContentFetcher
from adapters.http_client import build_async_client, get_json
from core.errors import FileNotFound, RepositoryNotFound, ServiceRequestError

ORG = "https://devdiv.example/DefaultCollection"


def _client(settings, handler, *, token="test-pat") -> httpx.AsyncClient:
    return build_async_client(
        settings,
        base_url=ORG,
        token=token,
        transport=httpx.MockTransport(handler),
    )


def _fetch(settings, handler, path=".corext\\Configs\\default.config", branch="main"):
    async def go():
        async with _client(settings, handler) as http:
            fetcher = AzureGitContentFetcher(http, project="DevDiv", repository="VS")
            return await fetcher.fetch_text(path, branch)

    return asyncio.run(go())


# ===========================================================================
# http_client
# ===========================================================================

class TestBuildAsyncClient:

    def test_basic_auth_and_headers(self, settings):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["headers"] = dict(request.headers)
            return httpx.Response(200, json={"value": []})

        async def go():
            async with _client(settings, handler) as http:
                return await get_json(http, "DevDiv/_apis/build/definitions", name="X")

        asyncio.run(go())

        expected = base64.b64encode(b"vslsnap:test-pat").decode()
        assert captured["headers"]["authorization"] == f"Basic {expected}"
        assert captured["headers"]["user-agent"] == settings.user_agent
        assert captured["url"].startswith(f"{ORG}/DevDiv/_apis/build/definitions?")
        assert "api-version=7.0" in captured["url"]

    def test_non_200_is_service_error(self, settings):
        def handler(request):
            return httpx.Response(401)

        async def go():
            async with _client(settings, handler) as http:
                await get_json(http, "x/_apis/build/builds")

        with pytest.raises(ServiceRequestError) as excinfo:
            asyncio.run(go())
        assert excinfo.value.status_code == 401

    def test_html_login_page_is_service_error(self, settings):
        def handler(request):
            return httpx.Response(200, text="<html>Sign in</html>")

        async def go():
            async with _client(settings, handler) as http:
                await get_json(http, "x/_apis/build/builds")

        with pytest.raises(ServiceRequestError, match="Non-JSON"):
            asyncio.run(go())

    def test_transport_error_is_service_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async def go():
            async with _client(settings, handler) as http:
                await get_json(http, "x/_apis/build/builds")

        with pytest.raises(ServiceRequestError, match="refused") as excinfo:
            asyncio.run(go())
        assert excinfo.value.status_code is None


# ===========================================================================
# git items
# ===========================================================================

class TestAzureGitContentFetcher:

    def test_fetches_item_at_branch(self, settings):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["params"] = dict(request.url.params)
            return httpx.Response(200, content="\ufeff<packages />".encode("utf-8"))

        text = _fetch(settings, handler, branch="rel/d16.9")

        assert text == "<packages />"
        assert captured["path"] == "/DefaultCollection/DevDiv/_apis/git/repositories/VS/items"
        assert captured["params"]["path"] == "/.corext/Configs/default.config"
        assert captured["params"]["versionDescriptor.version"] == "rel/d16.9"
        assert captured["params"]["versionDescriptor.versionType"] == "branch"
        assert captured["params"]["download"] == "true"

    def test_missing_item(self, settings):
        def handler(request):
            return httpx.Response(404, json={"typeKey": "GitItemNotFoundException"})

        with pytest.raises(FileNotFound, match="on branch main"):
            _fetch(settings, handler)

    def test_missing_repository(self, settings):
        def handler(request):
            return httpx.Response(404, json={"typeKey": "GitRepositoryNotFoundException"})

        with pytest.raises(RepositoryNotFound, match="DevDiv/VS"):
            _fetch(settings, handler)

    def test_server_error(self, settings):
        def handler(request):
            return httpx.Response(500, text="oops")

        with pytest.raises(ServiceRequestError) as excinfo:
            _fetch(settings, handler)
        assert excinfo.value.status_code == 500


# ===========================================================================
# builds
# ===========================================================================

class TestAzureBuildClient:

    def test_list_definitions(self, settings):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "count": 1,
                    "value": [
                        {"id": 15, "name": "Roslyn-Signed", "project": {"id": "p-guid", "name": "DevDiv"}}
                    ],
                },
            )

        async def go():
            async with _client(settings, handler) as http:
                return await AzureBuildClient(http, organization=ORG).list_definitions("DevDiv", "Roslyn-Signed")

        definitions = asyncio.run(go())

        assert captured["path"].endswith("/DevDiv/_apis/build/definitions")
        assert captured["params"]["name"] == "Roslyn-Signed"
        assert len(definitions) == 1
        assert definitions[0].id == 15
        assert definitions[0].project_id == "p-guid"

    def test_list_builds(self, settings):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "count": 2,
                    "value": [
                        {
                            "id": 1001,
                            "buildNumber": "20210301.4",
                            "sourceVersion": "abc123",
                            "sourceBranch": "refs/heads/release/dev16.9",
                            "project": {"id": "p-guid"},
                            "status": "completed",
                        },
                        {
                            "id": 1002,
                            "buildNumber": "20210301.4",
                            "sourceVersion": "abc123",
                            "sourceBranch": "refs/heads/release/dev16.9",
                            "project": {"id": "p-guid"},
                        },
                    ],
                },
            )

        async def go():
            async with _client(settings, handler) as http:
                client = AzureBuildClient(http, organization=ORG)
                return await client.list_builds("p-guid", [15, 16], "20210301.4")

        builds = asyncio.run(go())

        assert captured["params"]["definitions"] == "15,16"
        assert captured["params"]["buildNumber"] == "20210301.4"
        assert [b.id for b in builds] == [1001, 1002]
        assert builds[0].source_version == "abc123"
        assert builds[0].source_branch == "refs/heads/release/dev16.9"
        assert builds[0].project_id == "p-guid"

    def test_unexpected_payload(self, settings):
        def handler(request):
            return httpx.Response(200, json={"message": "nope"})

        async def go():
            async with _client(settings, handler) as http:
                await AzureBuildClient(http, organization=ORG).list_definitions("DevDiv", "X")

        with pytest.raises(ServiceRequestError, match="Unexpected payload"):
            asyncio.run(go())

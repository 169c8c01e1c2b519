"""Integration tests for the Lieutenant cluster fact provider.

Uses an httpx mock transport to simulate the Kubernetes API.
"""

import httpx
import pytest

from src.infrastructure.integrations.lieutenant_client import (
    LieutenantClusterFactProvider,
    LieutenantError,
)


def make_provider(handler, **kwargs) -> LieutenantClusterFactProvider:
    return LieutenantClusterFactProvider(
        api_url="https://k8s.example.com/",
        namespace="lieutenant",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


class TestLieutenantClusterFactProvider:
    """Tests for LieutenantClusterFactProvider."""

    @pytest.mark.asyncio
    async def test_returns_facts(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            return httpx.Response(
                200,
                json={
                    "apiVersion": "syn.tools/v1alpha1",
                    "kind": "Cluster",
                    "metadata": {"name": "c-green-test-1234"},
                    "spec": {"facts": {"cloud": "cloudscale", "region": "rma"}},
                },
            )

        async with make_provider(handler) as provider:
            facts = await provider.get_cluster_facts("c-green-test-1234")

        assert facts == {"cloud": "cloudscale", "region": "rma"}
        assert seen["path"] == (
            "/apis/syn.tools/v1alpha1/namespaces/lieutenant/clusters/c-green-test-1234"
        )

    @pytest.mark.asyncio
    async def test_cluster_without_facts(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"spec": {}})

        async with make_provider(handler) as provider:
            assert await provider.get_cluster_facts("c-1") == {}

    @pytest.mark.asyncio
    async def test_not_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"kind": "Status", "reason": "NotFound"})

        async with make_provider(handler) as provider:
            with pytest.raises(LieutenantError, match="404"):
                await provider.get_cluster_facts("c-missing")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with make_provider(handler) as provider:
            with pytest.raises(LieutenantError):
                await provider.get_cluster_facts("c-1")

    @pytest.mark.asyncio
    async def test_malformed_facts(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"spec": {"facts": ["cloud"]}})

        async with make_provider(handler) as provider:
            with pytest.raises(LieutenantError, match="malformed"):
                await provider.get_cluster_facts("c-1")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        async with make_provider(handler) as provider:
            with pytest.raises(LieutenantError, match="invalid response"):
                await provider.get_cluster_facts("c-1")

    def test_bearer_token_header(self):
        provider = LieutenantClusterFactProvider(token="s3cret")

        assert provider.client.headers["Authorization"] == "Bearer s3cret"

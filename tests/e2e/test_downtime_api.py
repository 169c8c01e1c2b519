"""E2E tests for the downtime window API."""

import pytest
from httpx import AsyncClient


WINDOW = {
    "start_time": "2024-03-01T22:00:00Z",
    "end_time": "2024-03-02T02:00:00Z",
    "title": "OpenShift upgrade",
    "description": "Minor version upgrade",
    "external_id": "CHG-1234",
    "external_link": "https://tickets.example.com/CHG-1234",
    "affects": [{"cloud": "cloudscale"}],
}


@pytest.mark.e2e
class TestAuthentication:
    """Every downtime route requires HTTP Basic credentials."""

    @pytest.mark.asyncio
    async def test_missing_credentials(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get(
            "/downtime", params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-03T00:00:00Z"}
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")
        assert response.headers["content-type"] == "application/problem+json"

    @pytest.mark.asyncio
    async def test_wrong_password(self, anonymous_client: AsyncClient):
        response = await anonymous_client.post(
            "/downtime", json=WINDOW, auth=("reporter", "wrong")
        )

        assert response.status_code == 401


@pytest.mark.e2e
class TestCreateDowntime:
    """Tests for POST /downtime."""

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, client: AsyncClient):
        # Act
        response = await client.post("/downtime", json=WINDOW)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["title"] == "OpenShift upgrade"
        assert data["start_time"] == "2024-03-01T22:00:00Z"
        assert data["affects"] == [{"cloud": "cloudscale"}]

    @pytest.mark.asyncio
    async def test_created_window_can_be_fetched(self, client: AsyncClient):
        created = (await client.post("/downtime", json=WINDOW)).json()

        response = await client.get(f"/downtime/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_timestamps_normalized_to_utc(self, client: AsyncClient):
        body = {**WINDOW, "start_time": "2024-03-02T00:00:00+02:00"}

        data = (await client.post("/downtime", json=body)).json()

        assert data["start_time"] == "2024-03-01T22:00:00Z"

    @pytest.mark.asyncio
    async def test_same_external_id_updates_existing(self, client: AsyncClient):
        """Creating twice with one external_id keeps a single window."""
        first = (await client.post("/downtime", json=WINDOW)).json()

        second = await client.post("/downtime", json={**WINDOW, "title": "Rescheduled"})

        assert second.status_code == 201
        assert second.json()["id"] == first["id"]
        listed = await client.get(
            "/downtime", params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-03T00:00:00Z"}
        )
        assert [w["title"] for w in listed.json()] == ["Rescheduled"]

    @pytest.mark.asyncio
    async def test_open_ended_window_omits_end_time(self, client: AsyncClient):
        body = {"start_time": "2024-03-01T22:00:00Z", "title": "Until further notice"}

        data = (await client.post("/downtime", json=body)).json()

        assert "end_time" not in data
        assert "external_id" not in data
        assert data["affects"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"title": "No start"},
            {**WINDOW, "end_time": "2024-03-01T21:00:00Z"},
            {**WINDOW, "start_time": "1970-01-01T00:00:00Z"},
            {**WINDOW, "start_time": "2024-03-01T22:00:00"},
            {**WINDOW, "affects": [{"cloud": 1}]},
        ],
    )
    async def test_invalid_window_rejected(self, client: AsyncClient, body):
        response = await client.post("/downtime", json=body)

        assert response.status_code == 400
        assert response.json()["status"] == 400

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, client: AsyncClient):
        response = await client.post(
            "/downtime", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400


@pytest.mark.e2e
class TestUpdateDowntime:
    """Tests for POST and PATCH /downtime/{id}."""

    @pytest.mark.asyncio
    async def test_full_update(self, client: AsyncClient):
        created = (await client.post("/downtime", json=WINDOW)).json()

        response = await client.post(
            f"/downtime/{created['id']}",
            json={"start_time": "2024-03-05T22:00:00Z", "title": "Moved"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data == {
            "id": created["id"],
            "start_time": "2024-03-05T22:00:00Z",
            "title": "Moved",
            "affects": [],
        }

    @pytest.mark.asyncio
    async def test_update_unknown_window(self, client: AsyncClient):
        response = await client.post("/downtime/does-not-exist", json=WINDOW)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_taken_external_id(self, client: AsyncClient):
        await client.post("/downtime", json=WINDOW)
        other = (
            await client.post("/downtime", json={**WINDOW, "external_id": "CHG-9999"})
        ).json()

        response = await client.post(f"/downtime/{other['id']}", json=WINDOW)

        assert response.status_code == 409
        assert response.json()["title"] == "Conflict"

    @pytest.mark.asyncio
    async def test_patch_merges_fields(self, client: AsyncClient):
        created = (await client.post("/downtime", json=WINDOW)).json()

        response = await client.patch(
            f"/downtime/{created['id']}",
            json={"end_time": "2024-03-02T04:00:00Z", "title": "Extended"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["end_time"] == "2024-03-02T04:00:00Z"
        assert data["title"] == "Extended"
        assert data["description"] == "Minor version upgrade"
        assert data["external_id"] == "CHG-1234"
        assert data["affects"] == [{"cloud": "cloudscale"}]

    @pytest.mark.asyncio
    async def test_patch_with_taken_external_id(self, client: AsyncClient):
        await client.post("/downtime", json=WINDOW)
        other = (
            await client.post("/downtime", json={**WINDOW, "external_id": "CHG-9999"})
        ).json()

        response = await client.patch(
            f"/downtime/{other['id']}", json={"external_id": "CHG-1234"}
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_patch_unknown_window(self, client: AsyncClient):
        response = await client.patch("/downtime/does-not-exist", json={"title": "x"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_unknown_window(self, client: AsyncClient):
        response = await client.get("/downtime/does-not-exist")

        assert response.status_code == 404
        assert response.json()["instance"] == "/downtime/does-not-exist"


@pytest.mark.e2e
class TestListDowntime:
    """Tests for GET /downtime and GET /downtime/cluster/{id}."""

    @pytest.fixture
    async def windows(self, client: AsyncClient):
        bodies = [
            {
                "start_time": "2024-03-01T08:00:00Z",
                "end_time": "2024-03-01T10:00:00Z",
                "title": "cloudscale",
                "affects": [{"cloud": "cloudscale"}],
            },
            {
                "start_time": "2024-03-01T12:00:00Z",
                "title": "everything",
                "affects": [{}],
            },
            {
                "start_time": "2024-03-01T09:00:00Z",
                "end_time": "2024-03-01T11:00:00Z",
                "title": "nothing",
                "affects": [],
            },
            {
                "start_time": "2024-02-01T09:00:00Z",
                "end_time": "2024-02-01T11:00:00Z",
                "title": "last month",
                "affects": [{}],
            },
        ]
        for body in bodies:
            assert (await client.post("/downtime", json=body)).status_code == 201

    @pytest.mark.asyncio
    async def test_list_in_interval(self, client: AsyncClient, windows):
        response = await client.get(
            "/downtime", params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-02T00:00:00Z"}
        )

        assert response.status_code == 200
        assert [w["title"] for w in response.json()] == ["cloudscale", "nothing", "everything"]

    @pytest.mark.asyncio
    async def test_list_for_cluster(self, client: AsyncClient, windows):
        response = await client.get(
            "/downtime/cluster/c-cloudscale-rma-1",
            params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-02T00:00:00Z"},
        )

        assert response.status_code == 200
        assert [w["title"] for w in response.json()] == ["cloudscale", "everything"]

    @pytest.mark.asyncio
    async def test_list_for_other_cluster(self, client: AsyncClient, windows):
        response = await client.get(
            "/downtime/cluster/c-exoscale-gva-1",
            params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-02T00:00:00Z"},
        )

        assert [w["title"] for w in response.json()] == ["everything"]

    @pytest.mark.asyncio
    async def test_unknown_cluster_is_bad_gateway(self, client: AsyncClient, windows):
        response = await client.get(
            "/downtime/cluster/c-unknown",
            params={"from": "2024-03-01T00:00:00Z", "to": "2024-03-02T00:00:00Z"},
        )

        assert response.status_code == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [
            {"to": "2024-03-02T00:00:00Z"},
            {"from": "2024-03-01T00:00:00Z"},
            {"from": "yesterday", "to": "2024-03-02T00:00:00Z"},
            {"from": "2024-03-01T00:00:00", "to": "2024-03-02T00:00:00Z"},
            {"from": "2024-03-02T00:00:00Z", "to": "2024-03-01T00:00:00Z"},
        ],
    )
    async def test_invalid_interval(self, client: AsyncClient, params):
        response = await client.get("/downtime", params=params)

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/problem+json"

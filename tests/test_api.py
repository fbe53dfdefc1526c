"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from pastebox.config import settings
from pastebox.database import PasteStore
from pastebox.main import create_app
from pastebox.models import MAX_TTL_SECONDS

T0 = 1_700_000_000_000


def at(ms: int) -> dict:
    return {"x-test-now-ms": str(ms)}


def create(client: TestClient, now: int = T0, **body) -> dict:
    response = client.post("/api/pastes", json=body, headers=at(now))
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    """Tests for POST /api/pastes."""

    def test_returns_id_and_url(self, client: TestClient) -> None:
        body = create(client, content="hello")
        assert body["id"]
        assert body["url"] == f"http://testserver/p/{body['id']}"

    def test_url_uses_forwarded_proto(self, client: TestClient) -> None:
        response = client.post(
            "/api/pastes",
            json={"content": "hello"},
            headers={"x-forwarded-proto": "https", "host": "paste.example"},
        )
        body = response.json()
        assert body["url"] == f"https://paste.example/p/{body['id']}"

    def test_url_uses_app_domain(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(settings, "APP_DOMAIN", "https://share.example/")
        body = create(client, content="hello")
        assert body["url"] == f"https://share.example/p/{body['id']}"

    def test_missing_content(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={})
        assert response.status_code == 400
        assert response.json()["detail"]

    def test_blank_content(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={"content": "   "})
        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "content"

    def test_non_positive_ttl(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={"content": "x", "ttl_seconds": 0})
        assert response.status_code == 400

    def test_non_positive_max_views(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={"content": "x", "max_views": -3})
        assert response.status_code == 400

    def test_ttl_above_limit(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={"content": "x", "ttl_seconds": 10**12, "max_views": 5})
        assert response.status_code == 400

    def test_longest_ttl_round_trip(self, client: TestClient) -> None:
        paste_id = create(client, content="x", ttl_seconds=MAX_TTL_SECONDS)["id"]
        response = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 1000))
        assert response.status_code == 200
        assert response.json()["expires_at"].endswith("Z")

    def test_non_integer_ttl(self, client: TestClient) -> None:
        response = client.post("/api/pastes", json={"content": "x", "ttl_seconds": 1.5})
        assert response.status_code == 400


class TestFetch:
    """Tests for GET /api/pastes/{id}."""

    def test_view_limit_scenario(self, client: TestClient) -> None:
        paste_id = create(client, content="hello", ttl_seconds=10, max_views=2)["id"]

        first = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 1000))
        assert first.status_code == 200
        assert first.json() == {
            "content": "hello",
            "remaining_views": 1,
            "expires_at": "2023-11-14T22:13:30.000Z",
        }

        second = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 2000))
        assert second.json()["remaining_views"] == 0

        third = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 3000))
        assert third.status_code == 404
        assert third.json() == {"detail": "Paste not found"}

    def test_ttl_scenario(self, client: TestClient) -> None:
        paste_id = create(client, content="hello", ttl_seconds=5)["id"]

        response = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 6000))
        assert response.status_code == 404

    def test_unknown_and_expired_look_the_same(self, client: TestClient) -> None:
        paste_id = create(client, content="hello", ttl_seconds=1)["id"]

        expired = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 1000))
        unknown = client.get("/api/pastes/does-not-exist", headers=at(T0))
        assert expired.status_code == unknown.status_code == 404
        assert expired.json() == unknown.json()

    def test_unbounded_paste(self, client: TestClient) -> None:
        paste_id = create(client, content="hello")["id"]

        body = client.get(f"/api/pastes/{paste_id}").json()
        assert body == {"content": "hello", "remaining_views": None, "expires_at": None}

    def test_time_override_ignored_outside_test_mode(self, store: PasteStore) -> None:
        client = TestClient(create_app(store=store, test_mode=False))
        paste_id = create(client, content="hello", ttl_seconds=60)["id"]

        # A far-future header would expire the paste if it were honoured
        response = client.get(f"/api/pastes/{paste_id}", headers=at(T0 + 10**12))
        assert response.status_code == 200


class TestViewPage:
    """Tests for GET /p/{id}."""

    def test_renders_escaped_content(self, client: TestClient) -> None:
        paste_id = create(client, content="<script>alert(1)</script>")["id"]

        response = client.get(f"/p/{paste_id}", headers=at(T0))
        assert response.status_code == 200
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in response.text
        assert "<script>" not in response.text

    def test_counts_a_view(self, client: TestClient) -> None:
        paste_id = create(client, content="hello", max_views=1)["id"]

        assert client.get(f"/p/{paste_id}", headers=at(T0)).status_code == 200
        assert client.get(f"/api/pastes/{paste_id}", headers=at(T0)).status_code == 404

    def test_not_found_page(self, client: TestClient) -> None:
        response = client.get("/p/missing")
        assert response.status_code == 404
        assert "404" in response.text


class TestStorageFailures:
    """Backend failures surface as 500s."""

    def test_create_fails_with_500(self, broken_store: PasteStore) -> None:
        client = TestClient(create_app(store=broken_store, test_mode=True))
        response = client.post("/api/pastes", json={"content": "hello"})
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_fetch_fails_with_500(self, broken_store: PasteStore) -> None:
        client = TestClient(create_app(store=broken_store, test_mode=True))
        response = client.get("/api/pastes/anything")
        assert response.status_code == 500


class TestHealth:
    """Tests for GET /api/healthz."""

    def test_healthy(self, client: TestClient) -> None:
        response = client.get("/api/healthz")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_unhealthy_still_200(self, broken_store: PasteStore) -> None:
        client = TestClient(create_app(store=broken_store))
        response = client.get("/api/healthz")
        assert response.status_code == 200
        assert response.json() == {"ok": False}

"""
Tests for the secret service HTTP routes.

Uses FastAPI TestClient against ``create_app`` with an injected in-memory
store, a generous rate limiter and the ManualClock fixture.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from apps.secret_service.main import create_app
from apps.secret_service.middleware import SECURITY_HEADERS
from config.settings import Settings
from libs.rate_limit import RateLimiter
from libs.secrets import InMemorySecretStore

CIPHERTEXT = "U2FsdGVkX1+vupppZksvRf5pq5g5XjFRlipRkwB0K1Y="
IV = "AAECAwQFBgcICQoL"


@pytest.fixture()
def client(memory_store: InMemorySecretStore, clock) -> Iterator[TestClient]:
    app = create_app(
        settings=Settings(_env_file=None, secret_backend="memory"),
        store=memory_store,
        rate_limiter=RateLimiter(max_requests_per_window=1_000, window_seconds=60, clock=clock),
        clock=clock,
    )
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, ttl_secs: int = 3600) -> str:
    response = client.post(
        "/api/secrets", json={"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": ttl_secs}
    )
    assert response.status_code == 200
    return response.json()["id"]


class TestHealth:
    @pytest.mark.unit()
    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "ok"
        assert response.headers["content-type"].startswith("text/plain")


class TestCreateSecret:
    @pytest.mark.unit()
    def test_create_returns_only_id(self, client: TestClient) -> None:
        response = client.post(
            "/api/secrets", json={"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": 60}
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id"}
        assert len(body["id"]) == 22

    @pytest.mark.unit()
    @pytest.mark.parametrize(
        "overrides",
        [{"ciphertext": ""}, {"iv": ""}, {"ciphertext": "   "}, {"iv": "\t"}],
    )
    def test_blank_fields_rejected(self, client: TestClient, overrides: dict[str, str]) -> None:
        body = {"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": 60, **overrides}

        response = client.post("/api/secrets", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "ciphertext and iv must be non-empty strings"}

    @pytest.mark.unit()
    @pytest.mark.parametrize("ttl_secs", [0, -1, 86_401])
    def test_out_of_range_ttl_rejected(self, client: TestClient, ttl_secs: int) -> None:
        response = client.post(
            "/api/secrets", json={"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": ttl_secs}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "ttl_secs must be between 1 and 86400 seconds"}

    @pytest.mark.unit()
    @pytest.mark.parametrize("ttl_secs", [1, 86_400])
    def test_ttl_bounds_accepted(self, client: TestClient, ttl_secs: int) -> None:
        _create(client, ttl_secs=ttl_secs)

    @pytest.mark.unit()
    @pytest.mark.parametrize(
        "body",
        [
            {"ciphertext": CIPHERTEXT, "iv": IV},
            {"ciphertext": CIPHERTEXT, "ttl_secs": 60},
            {"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": "soon"},
            {"ciphertext": 42, "iv": IV, "ttl_secs": 60},
        ],
    )
    def test_malformed_body_rejected(self, client: TestClient, body: dict[str, object]) -> None:
        response = client.post("/api/secrets", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "invalid request body"}

    @pytest.mark.unit()
    def test_non_json_body_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/secrets", content=b"not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid request body"}


class TestReadSecret:
    @pytest.mark.unit()
    def test_read_returns_payload_once(self, client: TestClient) -> None:
        secret_id = _create(client)

        first = client.get(f"/api/secret/{secret_id}")
        second = client.get(f"/api/secret/{secret_id}")

        assert first.status_code == 200
        assert first.json() == {
            "id": secret_id,
            "ciphertext": CIPHERTEXT,
            "iv": IV,
            "ttl_secs": 3600,
        }
        assert second.status_code == 404
        assert second.json() == {"error": "secret not found"}

    @pytest.mark.unit()
    def test_unknown_id_is_404(self, client: TestClient) -> None:
        response = client.get("/api/secret/unknown-id")

        assert response.status_code == 404
        assert response.json() == {"error": "secret not found"}

    @pytest.mark.unit()
    def test_expired_secret_is_404(self, client: TestClient, clock) -> None:
        secret_id = _create(client, ttl_secs=30)
        clock.advance(30)

        response = client.get(f"/api/secret/{secret_id}")

        assert response.status_code == 404
        assert response.json() == {"error": "secret not found"}


class TestSecurityHeaders:
    @pytest.mark.unit()
    @pytest.mark.parametrize(
        ("method", "path", "body"),
        [
            ("GET", "/health", None),
            ("GET", "/api/secret/missing", None),
            ("POST", "/api/secrets", {"ciphertext": "", "iv": IV, "ttl_secs": 60}),
            ("POST", "/api/secrets", {"ciphertext": CIPHERTEXT, "iv": IV, "ttl_secs": 60}),
        ],
    )
    def test_headers_on_every_response(
        self, client: TestClient, method: str, path: str, body: dict[str, object] | None
    ) -> None:
        response = client.request(method, path, json=body)

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value


class TestLoggingHygiene:
    @pytest.mark.unit()
    def test_payload_never_logged(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level("DEBUG")

        secret_id = _create(client)
        client.get(f"/api/secret/{secret_id}")
        client.get(f"/api/secret/{secret_id}")
        client.post("/api/secrets", json={"ciphertext": CIPHERTEXT, "iv": IV})

        assert any(getattr(r, "secret_id", None) == secret_id for r in caplog.records)
        for record in caplog.records:
            rendered = f"{record.getMessage()} {record.__dict__}"
            assert CIPHERTEXT not in rendered
            assert IV not in rendered

"""
Integration Tests: Middleware Pipeline

Security headers, compression, request IDs, rate limiting, CORS, body
limits and error handling, each observed through real HTTP requests.
"""

import re

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api.middleware import INTERNAL_ERROR_MESSAGE, REQUEST_ID_HEADER
from security.rate_limit import DEFAULT_LIMIT_MESSAGE, RateLimitConfig, RateLimiter

ALLOWED_ORIGIN = "http://localhost:3000"

SECURITY_HEADERS = {
    "content-security-policy",
    "cross-origin-opener-policy",
    "cross-origin-resource-policy",
    "origin-agent-cluster",
    "referrer-policy",
    "strict-transport-security",
    "x-content-type-options",
    "x-dns-prefetch-control",
    "x-download-options",
    "x-frame-options",
    "x-permitted-cross-domain-policies",
    "x-xss-protection",
}


def client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# =============================================================================
# Security Headers Tests
# =============================================================================

class TestSecurityHeaders:

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/health", "/api/unknown", "/uploads/missing.txt"])
    async def test_headers_on_every_response(self, client: AsyncClient, path):
        response = await client.get(path)

        assert SECURITY_HEADERS <= set(response.headers.keys())
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "SAMEORIGIN"
        assert response.headers["referrer-policy"] == "no-referrer"
        assert response.headers["x-xss-protection"] == "0"
        assert response.headers["strict-transport-security"] == "max-age=15552000; includeSubDomains"
        assert "x-powered-by" not in response.headers

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_csp_restricts_to_self(self, client: AsyncClient):
        response = await client.get("/api/health")

        csp = response.headers["content-security-policy"]
        assert "default-src 'self'" in csp
        assert "frame-ancestors 'self'" in csp


# =============================================================================
# Compression Tests
# =============================================================================

class TestCompression:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_large_response_is_compressed(self, client: AsyncClient, uploads_dir):
        content = "sakura " * 2000
        (uploads_dir / "petals.txt").write_text(content)

        response = await client.get("/uploads/petals.txt", headers={"Accept-Encoding": "gzip"})

        assert response.status_code == 200
        assert response.headers["content-encoding"] == "gzip"
        assert response.text == content

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_small_response_is_not_compressed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Accept-Encoding": "gzip"})

        assert "content-encoding" not in response.headers

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_no_compression_without_accept_encoding(self, client: AsyncClient, uploads_dir):
        (uploads_dir / "petals.txt").write_text("sakura " * 2000)

        response = await client.get("/uploads/petals.txt", headers={"Accept-Encoding": "identity"})

        assert "content-encoding" not in response.headers


# =============================================================================
# Request Context Tests
# =============================================================================

class TestRequestId:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_generated_request_id(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert re.fullmatch(r"[0-9a-f]{32}", response.headers[REQUEST_ID_HEADER])

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_incoming_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={REQUEST_ID_HEADER: "trace-42"})

        assert response.headers[REQUEST_ID_HEADER] == "trace-42"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_overlong_request_id_is_truncated(self, client: AsyncClient):
        response = await client.get("/api/health", headers={REQUEST_ID_HEADER: "x" * 500})

        assert response.headers[REQUEST_ID_HEADER] == "x" * 128


# =============================================================================
# Rate Limiting Tests
# =============================================================================

class TestRateLimiting:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_hundred_and_first_request_is_rejected(self, client: AsyncClient):
        for i in range(100):
            response = await client.get("/api/health")
            assert response.status_code == 200
            assert response.headers["x-ratelimit-limit"] == "100"
            assert response.headers["x-ratelimit-remaining"] == str(99 - i)

        response = await client.get("/api/health")

        assert response.status_code == 429
        assert response.json() == {"error": DEFAULT_LIMIT_MESSAGE}
        assert response.headers["x-ratelimit-remaining"] == "0"
        assert 0 < int(response.headers["retry-after"]) <= 900
        assert SECURITY_HEADERS <= set(response.headers.keys())

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_limit_is_shared_across_api_routes(self, app_factory):
        app = app_factory(rate_limiter=RateLimiter(RateLimitConfig(max_requests=2)))

        async with client_for(app) as client:
            assert (await client.get("/api/projects")).status_code == 200
            assert (await client.get("/api/students")).status_code == 200
            assert (await client.get("/api")).status_code == 429
            assert (await client.get("/api/unknown")).status_code == 429

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_paths_outside_api_are_not_limited(self, app_factory, uploads_dir):
        app = app_factory(rate_limiter=RateLimiter(RateLimitConfig(max_requests=1)))
        (uploads_dir / "a.txt").write_text("a")

        async with client_for(app) as client:
            await client.get("/api/health")
            for _ in range(3):
                response = await client.get("/uploads/a.txt")
                assert response.status_code == 200
                assert "x-ratelimit-limit" not in response.headers

            assert (await client.get("/apiary")).status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_clients_identified_by_forwarded_address(self, app_factory):
        app = app_factory(rate_limiter=RateLimiter(RateLimitConfig(max_requests=1)))

        async with client_for(app) as client:
            first = {"X-Forwarded-For": "203.0.113.1, 10.0.0.1"}
            second = {"X-Forwarded-For": "203.0.113.2"}

            assert (await client.get("/api/health", headers=first)).status_code == 200
            assert (await client.get("/api/health", headers=second)).status_code == 200
            assert (await client.get("/api/health", headers=first)).status_code == 429

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_disabled_rate_limiting(self, app_factory, settings_factory):
        settings = settings_factory(security={"rate_limit_enabled": False})
        app = app_factory(settings, rate_limiter=RateLimiter(RateLimitConfig(max_requests=1)))

        async with client_for(app) as client:
            for _ in range(3):
                response = await client.get("/api/health")
                assert response.status_code == 200
                assert "x-ratelimit-limit" not in response.headers


# =============================================================================
# CORS Tests
# =============================================================================

class TestCors:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_allowed_origin(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Origin": ALLOWED_ORIGIN})

        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_other_origin_gets_no_cors_headers(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"Origin": "https://evil.example"})

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_preflight(self, client: AsyncClient):
        response = await client.options(
            "/api/contact",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_preflight_from_other_origin(self, client: AsyncClient):
        response = await client.options(
            "/api/contact",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_configured_frontend_url(self, app_factory, settings_factory):
        settings = settings_factory(security={"frontend_url": "https://sakura.example"})

        async with client_for(app_factory(settings)) as client:
            allowed = await client.get("/api/health", headers={"Origin": "https://sakura.example"})
            default = await client.get("/api/health", headers={"Origin": ALLOWED_ORIGIN})

        assert allowed.headers["access-control-allow-origin"] == "https://sakura.example"
        assert "access-control-allow-origin" not in default.headers


# =============================================================================
# Body Limit Tests
# =============================================================================

class TestBodyLimit:

    @pytest_asyncio.fixture
    async def small_body_client(self, app_factory, settings_factory, recording_mailer):
        settings = settings_factory(security={"max_body_size_bytes": 64})
        async with client_for(app_factory(settings, mailer=recording_mailer)) as client:
            yield client

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_declared_oversize_body(self, small_body_client: AsyncClient, recording_mailer):
        response = await small_body_client.post("/api/contact", json={"message": "x" * 100})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": INTERNAL_ERROR_MESSAGE}
        assert recording_mailer.sent == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_oversize_detail_in_development(
        self, app_factory, settings_factory, recording_mailer
    ):
        settings = settings_factory(
            environment="development", security={"max_body_size_bytes": 64}
        )

        async with client_for(app_factory(settings, mailer=recording_mailer)) as client:
            response = await client.post("/api/contact", json={"message": "x" * 100})

        assert response.status_code == 500
        assert "exceeds maximum" in response.json()["error"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_streamed_oversize_body(self, small_body_client: AsyncClient, recording_mailer):
        async def chunks():
            yield b'{"message": "'
            yield b"x" * 100
            yield b'"}'

        response = await small_body_client.post(
            "/api/contact",
            content=chunks(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert recording_mailer.sent == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_streamed_body_reading_stops_at_limit(
        self, small_body_client: AsyncClient, recording_mailer
    ):
        consumed = 0

        async def chunks():
            nonlocal consumed
            for _ in range(2000):
                consumed += 1
                yield b"x" * 1024

        response = await small_body_client.post(
            "/api/contact",
            content=chunks(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert consumed < 10
        assert recording_mailer.sent == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_body_within_limit(self, small_body_client: AsyncClient, recording_mailer):
        payload = {"name": "A", "email": "a@b.c", "subject": "S", "message": "M"}

        response = await small_body_client.post("/api/contact", json=payload)

        assert response.status_code == 200
        assert len(recording_mailer.sent) == 1


# =============================================================================
# Error Handler Tests
# =============================================================================

class TestErrorHandler:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_internal_error_hides_details(self, app_factory, exploding_project_repository):
        app = app_factory(project_repository=exploding_project_repository)

        async with client_for(app) as client:
            response = await client.get("/api/projects")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": INTERNAL_ERROR_MESSAGE}
        assert SECURITY_HEADERS <= set(response.headers.keys())

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_internal_error_details_in_development(
        self, app_factory, settings_factory, exploding_project_repository
    ):
        settings = settings_factory(environment="development")
        app = app_factory(settings, project_repository=exploding_project_repository)

        async with client_for(app) as client:
            response = await client.get("/api/projects")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": INTERNAL_ERROR_MESSAGE,
            "error": "database on fire",
        }

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_internal_error_hidden_in_production(
        self, app_factory, settings_factory, exploding_project_repository
    ):
        settings = settings_factory(environment="production")
        app = app_factory(settings, project_repository=exploding_project_repository)

        async with client_for(app) as client:
            response = await client.get("/api/projects")

        assert response.status_code == 500
        assert "error" not in response.json()

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_server_keeps_serving_after_error(self, app_factory, exploding_project_repository):
        app = app_factory(project_repository=exploding_project_repository)

        async with client_for(app) as client:
            assert (await client.get("/api/projects")).status_code == 500
            assert (await client.get("/api/students")).status_code == 200

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_custom_environment_hides_details(
        self, app_factory, settings_factory, exploding_project_repository
    ):
        settings = settings_factory(environment="staging")
        app = app_factory(settings, project_repository=exploding_project_repository)

        async with client_for(app) as client:
            health = await client.get("/api/health")
            response = await client.get("/api/projects")

        assert health.json()["environment"] == "staging"
        assert response.status_code == 500
        assert "error" not in response.json()

"""
Unit tests for FastAPI application setup and configuration.

This test suite verifies the application structure and wiring:
- build_app() creates properly configured FastAPI instance
- Application metadata (title, version, docs URLs)
- Router registration (health, leases and modifications with correct prefixes)
- OpenAPI schema generation
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import FastAPI
from fastapi.testclient import TestClient

from ifrs16_lite.entrypoints.http.app import build_app


LEASE_PATHS = [
    "/v1/leases/measurement",
    "/v1/leases/validation",
    "/v1/leases/exemptions",
    "/v1/leases/sensitivity",
    "/v1/leases/state",
    "/v1/leases/modifications/impact",
    "/v1/leases/modifications/validation",
]


# ==============================================================================
# Application Creation
# ==============================================================================


def test_build_app_returns_fastapi_instance() -> None:
    """build_app() returns a FastAPI application instance."""
    app = build_app()
    assert isinstance(app, FastAPI)


def test_build_app_creates_new_instance_each_call() -> None:
    """build_app() creates a new app instance for each call (not cached)."""
    assert build_app() is not build_app()


# ==============================================================================
# Application Metadata
# ==============================================================================


def test_app_metadata() -> None:
    app = build_app()

    assert app.title == "IFRS 16 Lite API"
    assert app.version == "0.1.0"
    assert "IFRS 16" in app.description
    assert app.contact == {"name": "IFRS 16 Lite Team", "email": "dev@ifrs16-lite.com"}
    assert app.license_info == {"name": "Proprietary"}


def test_app_documentation_urls() -> None:
    app = build_app()

    assert app.docs_url == "/docs"
    assert app.redoc_url == "/redoc"
    assert app.openapi_url == "/openapi.json"


def test_app_documentation_endpoints_are_accessible() -> None:
    """Documentation endpoints are accessible."""
    client = TestClient(build_app())

    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200

    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"


# ==============================================================================
# Router Registration
# ==============================================================================


def test_app_includes_health_router_without_prefix() -> None:
    client = TestClient(build_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_app_registers_lease_routes_with_v1_prefix() -> None:
    paths = build_app().openapi()["paths"]

    for path in LEASE_PATHS:
        assert path in paths, path
        assert "post" in paths[path]
        assert path.removeprefix("/v1") not in paths


def test_openapi_documents_tags() -> None:
    paths = build_app().openapi()["paths"]

    assert paths["/v1/leases/measurement"]["post"]["tags"] == ["Leases"]
    assert paths["/v1/leases/state"]["post"]["tags"] == ["Modifications"]
    assert paths["/health"]["get"]["tags"] == ["Health"]


def test_openapi_documents_error_response_schema() -> None:
    schema = build_app().openapi()

    responses = schema["paths"]["/v1/leases/modifications/impact"]["post"]["responses"]
    assert "422" in responses
    assert "ErrorResponse" in schema["components"]["schemas"]


def test_app_returns_404_for_unknown_routes() -> None:
    client = TestClient(build_app())

    assert client.get("/unknown").status_code == 404
    assert client.get("/v1/unknown").status_code == 404


# ==============================================================================
# End-to-end
# ==============================================================================


def test_measure_lease_end_to_end() -> None:
    client = TestClient(build_app())

    response = client.post(
        "/v1/leases/measurement",
        json={
            "lease_start_date": "2024-01-01",
            "lease_end_date": "2026-12-31",
            "lease_term_months": 36,
            "payment_amount": "1000.00",
            "discount_rate_annual": "8.5",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert abs(Decimal(data["lease_liability_initial"]) - Decimal("31824.69")) <= Decimal("0.5")
    assert len(data["amortization_schedule"]) == 36
    assert data["amortization_schedule"][-1]["ending_liability"] == "0.00"


def test_domain_errors_are_translated_end_to_end() -> None:
    client = TestClient(build_app(), raise_server_exceptions=False)

    response = client.post(
        "/v1/leases/measurement",
        json={
            "lease_start_date": "2024-01-01",
            "lease_end_date": "2024-10-31",
            "lease_term_months": 10,
            "payment_amount": "3000.00",
            "payment_frequency": "quarterly",
            "discount_rate_annual": "8.5",
        },
    )

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_TERM"


# ==============================================================================
# Application Structure
# ==============================================================================


def test_app_module_exports_app_instance() -> None:
    """App module exports 'app' instance at module level."""
    from ifrs16_lite.entrypoints.http.app import app

    assert isinstance(app, FastAPI)
    assert app.title == "IFRS 16 Lite API"

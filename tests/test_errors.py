"""
Tests for the error envelope and logging setup.
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from courierdesk.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDenied,
    RequestValidationFailed,
    register_error_handlers,
)
from courierdesk.core.logging import configure_logging


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    
    @app.get("/boom")
    async def boom():
        raise exc
    
    return app


@pytest.mark.parametrize("exc,status_code,code", [
    (RequestValidationFailed("tracking_number is required"), 400, "validation_error"),
    (PermissionDenied("nope"), 403, "forbidden"),
    (NotFoundError("Customer X not found"), 404, "not_found"),
    (ConflictError("taken"), 409, "conflict"),
])
async def test_domain_errors_map_to_status(exc, status_code, code):
    transport = ASGITransport(app=_app_raising(exc))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")
    
    assert response.status_code == status_code
    assert response.json() == {"error": code, "detail": exc.detail}


async def test_unexpected_error_is_generic(caplog):
    transport = ASGITransport(app=_app_raising(RuntimeError("db password is hunter2")), raise_app_exceptions=False)
    with caplog.at_level(logging.ERROR):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/boom")
    
    assert response.status_code == 500
    assert response.json() == {"error": "internal_error", "detail": "An unexpected error occurred"}
    assert "hunter2" not in response.text
    assert any("Unhandled error" in r.message for r in caplog.records)


def test_configure_logging_sets_level():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
    configure_logging("INFO")

"""
Tests for error handling and request validation.
Tests custom exceptions, validation middleware, and error response formatting.
"""

import pytest
from fastapi.testclient import TestClient
from fastapi import FastAPI, HTTPException, Request
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from unittest.mock import Mock
import json

from homeswift.services.error_handler import ErrorHandlerService
from homeswift.middleware.validation import ValidationMiddleware
from homeswift.utils.exceptions import (
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    InsufficientPermissionsError,
    DuplicateResourceError,
    RateLimitExceededError,
    ServiceUnavailableError,
    UpstreamServiceError,
    InvalidLinkTokenError,
    GoogleSignInError,
    GoogleSignInUnavailableError,
    SelfDeletionError
)


class TestExceptions:
    """Test status codes and error codes of the custom exceptions."""

    @pytest.mark.parametrize("exception, status_code, error_code", [
        (ValidationError("bad"), 422, "VALIDATION_ERROR"),
        (NotFoundError("Property"), 404, "NOT_FOUND"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (InsufficientPermissionsError("create properties"), 403, "FORBIDDEN"),
        (DuplicateResourceError("User", "a@example.com"), 409, "CONFLICT"),
        (RateLimitExceededError(30), 429, "RATE_LIMIT_EXCEEDED"),
        (ServiceUnavailableError(), 503, "SERVICE_UNAVAILABLE"),
        (UpstreamServiceError("Supabase", "Invalid API key"), 502, "UPSTREAM_ERROR"),
        (GoogleSignInError("invalid_grant"), 400, "BAD_REQUEST"),
        (GoogleSignInUnavailableError(), 503, "SERVICE_UNAVAILABLE"),
        (SelfDeletionError(), 400, "BAD_REQUEST"),
    ])
    def test_codes(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code

    def test_messages(self):
        assert NotFoundError("Property", "42").detail == "Property not found with ID: 42"
        assert InsufficientPermissionsError("create properties").detail == "Insufficient permissions to create properties"
        assert UpstreamServiceError("Supabase", "Invalid API key").detail == "Supabase error: Invalid API key"
        assert RateLimitExceededError(30).headers == {"Retry-After": "30"}
        assert UnauthorizedError().headers == {"WWW-Authenticate": "Bearer"}
        assert InvalidLinkTokenError("reset").detail == "Invalid or expired reset token"
        assert GoogleSignInError("invalid_grant").detail == "Google authentication failed: invalid_grant"
        assert GoogleSignInUnavailableError().detail == "Google sign-in is temporarily unavailable"


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_format_error_response_without_details(self):
        response = ErrorHandlerService.format_error_response(error_code="X", message="y")
        assert "details" not in response["error"]

    def test_handle_api_exception(self):
        exception = ValidationError("Year built cannot be in the future", [{"field": "year_built", "message": "too late"}])
        response = ErrorHandlerService.handle_api_exception(exception)

        assert response.status_code == 422
        data = json.loads(response.body)
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["message"] == "Year built cannot be in the future"
        assert data["error"]["details"] == [{"field": "year_built", "message": "too late"}]
        assert data["error"]["request_id"]

    def test_handle_api_exception_keeps_headers(self):
        response = ErrorHandlerService.handle_api_exception(RateLimitExceededError(12))

        assert response.status_code == 429
        assert response.headers["retry-after"] == "12"

    def test_handle_validation_error(self):
        mock_error = Mock()
        mock_error.errors.return_value = [
            {"loc": ("body", "email"), "msg": "value is not a valid email address", "type": "value_error", "input": "x"},
            {"loc": ("query", "limit"), "msg": "Input should be greater than or equal to 1", "type": "greater_than_equal", "input": "0"},
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 422
        details = json.loads(response.body)["error"]["details"]
        assert [d["field"] for d in details] == ["body -> email", "query -> limit"]
        assert details[1]["type"] == "greater_than_equal"

    def test_handle_integrity_error(self):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
        response = ErrorHandlerService.handle_database_error(error)

        assert response.status_code == 409
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTEGRITY_ERROR"
        assert data["error"]["message"] == "Constraint violation: Duplicate value for unique field"

    def test_handle_other_database_error(self):
        error = OperationalError("SELECT 1", {}, Exception("connection refused on 10.0.0.5"))
        response = ErrorHandlerService.handle_database_error(error)

        assert response.status_code == 500
        data = json.loads(response.body)
        assert data["error"]["code"] == "DATABASE_ERROR"
        assert "10.0.0.5" not in data["error"]["message"]

    def test_handle_http_exception(self):
        response = ErrorHandlerService.handle_http_exception(HTTPException(status_code=405, detail="Method Not Allowed"))

        assert response.status_code == 405
        data = json.loads(response.body)
        assert data["error"]["code"] == "HTTP_405"
        assert data["error"]["message"] == "Method Not Allowed"

    def test_handle_unexpected_error(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret stack detail"))

        assert response.status_code == 500
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in data["error"]["message"]


class TestValidationMiddleware:
    """Test validation middleware functionality."""

    @staticmethod
    def make_app(**options) -> FastAPI:
        test_app = FastAPI()
        test_app.add_middleware(ValidationMiddleware, **options)

        @test_app.get("/api/ping")
        async def ping():
            return {"message": "pong"}

        @test_app.post("/api/echo")
        async def echo(request: Request):
            return {"body": (await request.body()).decode()}

        @test_app.post("/webhook")
        async def webhook(request: Request):
            return {"received": len(await request.body())}

        return test_app

    def test_request_id_header(self):
        client = TestClient(self.make_app())

        first = client.get("/api/ping")
        second = client.get("/api/ping")

        assert first.status_code == 200
        assert len(first.headers["X-Request-ID"]) == 8
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]

    def test_request_size_validation(self):
        client = TestClient(self.make_app(max_request_size=1024))

        response = client.post(
            "/api/echo",
            json={"test": "data"},
            headers={"content-length": str(20 * 1024 * 1024)}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert "exceeds maximum allowed size" in error["message"]
        assert error["request_id"] == response.headers["X-Request-ID"]

    def test_invalid_content_length(self):
        client = TestClient(self.make_app())

        response = client.post("/api/echo", json={"a": 1}, headers={"content-length": "lots"})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid content-length header"

    def test_content_type_validation(self):
        client = TestClient(self.make_app())

        rejected = client.post("/api/echo", content="hello", headers={"content-type": "text/plain"})
        accepted = client.post("/api/echo", json={"hello": "world"})
        outside_api = client.post("/webhook", content="hello", headers={"content-type": "text/plain"})

        assert rejected.status_code == 400
        assert "Unsupported content type" in rejected.json()["error"]["message"]
        assert accepted.status_code == 200
        assert outside_api.status_code == 200

    def test_rate_limiting(self):
        client = TestClient(self.make_app(enable_rate_limiting=True, rate_limit_requests=2, rate_limit_window=60))

        assert client.get("/api/ping").status_code == 200
        assert client.get("/api/ping").status_code == 200
        limited = client.get("/api/ping")

        assert limited.status_code == 429
        assert limited.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
        assert 1 <= int(limited.headers["Retry-After"]) <= 60

        # Counted per forwarded client address
        other = client.get("/api/ping", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
        assert other.status_code == 200

    def test_rate_limiting_disabled_by_default(self):
        client = TestClient(self.make_app(rate_limit_requests=1))

        assert all(client.get("/api/ping").status_code == 200 for _ in range(3))


class TestAPIErrorResponses:
    """Test API error responses through actual endpoints."""

    @pytest.mark.asyncio
    async def test_validation_error_response_format(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"limit": 0})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Request validation failed"
        assert error["request_id"] == response.headers["X-Request-ID"]
        assert error["details"][0]["field"] == "query -> limit"

    @pytest.mark.asyncio
    async def test_authentication_error_response_format(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", json={})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_not_found_error_response_format(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/123e4567-e89b-12d3-a456-426614174000")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == (
            "Property not found with ID: 123e4567-e89b-12d3-a456-426614174000"
        )

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, async_client: AsyncClient):
        response = await async_client.delete("/api/properties")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "HTTP_405"

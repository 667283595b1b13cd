"""
Error response schemas for API documentation and consistent error formatting.
Every error leaves the API as {"error": {...}}.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message", examples=["Invalid email format"])
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])
    input: Optional[Any] = Field(None, description="Input value that caused the error")
    rule: Optional[str] = Field(None, description="Database rule that was violated", examples=["unique_constraint"])


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message", examples=["Request validation failed"])
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2024-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information for validation errors")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(..., description="Error information")


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "timestamp": "2024-01-01T00:00:00Z",
            "request_id": "abc12345"
        }
    }


def _response(description: str, examples: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "description": description,
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    name: {"summary": summary, "value": value}
                    for name, (summary, value) in examples.items()
                }
            }
        }
    }


# Common error response examples for documentation
COMMON_ERROR_RESPONSES = {
    400: _response("Bad Request - Invalid request parameters", {
        "bad_request": ("Bad Request", _example("BAD_REQUEST", "Missing code or redirect_uri")),
    }),
    401: _response("Unauthorized - Authentication required", {
        "unauthorized": ("Authentication Required", _example("UNAUTHORIZED", "Authentication required")),
        "invalid_credentials": ("Invalid Credentials", _example("UNAUTHORIZED", "Invalid email or password")),
        "token_expired": ("Token Expired", _example("UNAUTHORIZED", "Token has expired")),
    }),
    403: _response("Forbidden - Insufficient permissions", {
        "forbidden": ("Insufficient Permissions", _example("FORBIDDEN", "Insufficient permissions to create properties")),
        "ownership": ("Not The Owner", _example("FORBIDDEN", "You don't own this property")),
    }),
    404: _response("Not Found - Resource does not exist", {
        "not_found": ("Resource Not Found", _example("NOT_FOUND", "Property not found with ID: 123e4567-e89b-12d3-a456-426614174000")),
    }),
    409: _response("Conflict - Resource already exists", {
        "conflict": ("Duplicate Resource", _example("CONFLICT", "User with identifier 'buyer@example.com' already exists")),
    }),
    422: _response("Unprocessable Entity - Validation failed", {
        "validation_error": ("Validation Error", {
            "error": {
                **_example("VALIDATION_ERROR", "Request validation failed")["error"],
                "details": [
                    {"field": "price", "message": "Input should be greater than 0", "type": "greater_than"}
                ]
            }
        }),
    }),
    500: _response("Internal Server Error", {
        "internal_error": ("Internal Server Error", _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred")),
    }),
    502: _response("Bad Gateway - Upstream service error", {
        "upstream_error": ("Upstream Error", _example("UPSTREAM_ERROR", "Supabase error: relation \"properties\" does not exist")),
    }),
    503: _response("Service Unavailable", {
        "unavailable": ("Service Unavailable", _example("SERVICE_UNAVAILABLE", "Database connection failed")),
    }),
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get common error response schemas for most endpoints."""
    return get_error_responses(400, 401, 403, 404, 422, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 409, 422, 500)

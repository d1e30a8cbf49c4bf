"""API Index — self-describing root document listing the public endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"

_BEARER = {"Authorization": "Bearer <token>"}

ENDPOINTS = {
    "health": {"method": "GET", "path": "/health", "description": "Server status"},
    "auth": {
        "register": {
            "method": "POST", "path": "/api/auth/register",
            "description": "Register a user",
            "body": {
                "email": "string", "password": "string", "name": "string",
                "role": "REQUESTER|APPROVER|ADMIN",
            },
        },
        "login": {
            "method": "POST", "path": "/api/auth/login",
            "description": "Log in and receive a bearer token",
            "body": {"email": "string", "password": "string"},
        },
        "me": {
            "method": "GET", "path": "/api/auth/me",
            "description": "Current user", "headers": _BEARER,
        },
    },
    "purchaseRequests": {
        "create": {
            "method": "POST", "path": "/api/purchase-requests",
            "description": "Create a purchase request", "headers": _BEARER,
            "body": {
                "title": "string", "description": "string",
                "items": [{
                    "description": "string", "quantity": "number",
                    "unitPrice": "number",
                }],
            },
        },
        "list": {
            "method": "GET", "path": "/api/purchase-requests",
            "description": "List visible purchase requests", "headers": _BEARER,
        },
        "get": {
            "method": "GET", "path": "/api/purchase-requests/{id}",
            "description": "Get one purchase request", "headers": _BEARER,
        },
        "update": {
            "method": "PATCH", "path": "/api/purchase-requests/{id}",
            "description": "Update a request (approve/reject/cancel)",
            "headers": _BEARER,
            "body": {
                "title": "string", "description": "string",
                "status": "APPROVED|REJECTED|CANCELLED", "reason": "string",
            },
        },
    },
}


@router.get("/")
async def api_info():
    return {
        "message": "Purchase Request Approval API",
        "version": API_VERSION,
        "status": "online",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINTS,
    }

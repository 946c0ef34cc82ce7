# dental_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from django.db import DatabaseError, IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


# -------------------------------------------------------------------
# Domain error taxonomy
# -------------------------------------------------------------------

class Forbidden(PermissionDenied):
    """Authenticated, but missing a capability or crossing a tenant boundary."""
    default_code = "forbidden"


class NotFound(APIException):
    """
    Absent OR cross-tenant entity. Both cases produce the same payload so that
    existence never leaks across tenants.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"

    def __init__(self, entity: str | None = None):
        detail = f"{entity} not found." if entity else self.default_detail
        super().__init__(detail=detail, code=self.default_code)


class ConflictError(APIException):
    """
    409 Conflict that still flows through the global exception handler.
    Use when business rules block an action.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


class InvalidState(ConflictError):
    default_detail = "Illegal lifecycle transition."
    default_code = "invalid_state"


class StockInsufficient(ConflictError):
    default_detail = "Insufficient stock."
    default_code = "stock_insufficient"

    def __init__(self, *, available: int, requested: int, item_id=None):
        self.available = int(available)
        self.requested = int(requested)
        self.item_id = item_id
        super().__init__(
            detail=f"Insufficient stock. Available: {self.available}, requested: {self.requested}.",
        )

    @property
    def details(self) -> dict[str, Any]:
        out: dict[str, Any] = {"available": self.available, "requested": self.requested}
        if self.item_id is not None:
            out["inventory_item_id"] = str(self.item_id)
        return out


class InvalidQuantity(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid quantity."
    default_code = "invalid_quantity"


class TenantSuspended(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "This clinic account is suspended."
    default_code = "tenant_suspended"


class ServiceUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "This clinic is under maintenance. Please try again later."
    default_code = "service_unavailable"


class Transient(APIException):
    """Store/connectivity failure. Every mutation is atomic, so the caller may retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Temporary failure. Please retry."
    default_code = "transient"


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return "unauthorized"
    if isinstance(exc, Forbidden):
        return "forbidden"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, Http404):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")

    # Storage failures never leak driver messages; IntegrityError is a bug, not a retry case.
    if isinstance(exc, DatabaseError) and not isinstance(exc, IntegrityError):
        logger.error("store failure on %s: %s", getattr(request, "path", "?"), exc.__class__.__name__)
        exc = Transient()

    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.exception("unhandled error", exc_info=exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Unexpected server error.",
                details=None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)

    # DRF standardizes errors into response.data
    data = response.data

    # Message + details rules:
    # 1) If {"detail": "..."} only -> message=detail, details=None
    # 2) If {"detail": "...", ...} -> message=detail, details={...without detail}
    # 3) Otherwise -> message="Request failed.", details=data
    message = "Request failed."
    details = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        details = rest or None

    if isinstance(exc, StockInsufficient):
        details = exc.details

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )

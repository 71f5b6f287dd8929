"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module traduit les erreurs du service SCL en réponses JSON `{code, message, trace_id,
details}` avec un statut HTTP cohérent. La correspondance erreur -> statut n'existe qu'ici: le
domaine ignore tout du transport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from scldata.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_SERVICE_UNAVAILABLE,
)
from scldata.domain.errors import ErrorCodes, SclDataServiceError

log = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCodes.HEADER_NOT_FOUND: HTTP_BAD_REQUEST,
    ErrorCodes.INVALID_VERSION_FORMAT: HTTP_BAD_REQUEST,
    ErrorCodes.INVALID_SCL: HTTP_BAD_REQUEST,
    ErrorCodes.NO_DATA_FOUND: HTTP_NOT_FOUND,
    ErrorCodes.PERSISTENCE_CONFLICT: HTTP_CONFLICT,
    ErrorCodes.PERSISTENCE_UNAVAILABLE: HTTP_SERVICE_UNAVAILABLE,
}


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    envelope = ErrorEnvelope(
        code=code,
        message=message,
        trace_id=trace_id,
        details=details,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "code": envelope.code,
            "message": envelope.message,
            "trace_id": envelope.trace_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Extract trace ID from request headers or request state."""
    trace_id = request.headers.get("X-Trace-ID") or request.headers.get("X-Request-ID")
    if trace_id:
        return trace_id

    # Set by RequestIDMiddleware
    return getattr(request.state, "request_id", None)


def handle_scl_error(request: Request, exc: SclDataServiceError) -> JSONResponse:
    """Handle SCL service errors with standard envelope."""
    trace_id = extract_trace_id(request)
    status_code = STATUS_BY_CODE.get(exc.code, HTTP_INTERNAL_SERVER_ERROR)

    log.error(
        "SCL service error occurred",
        extra={
            "code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "trace_id": trace_id,
            "details": exc.details,
        },
    )

    return create_error_response(
        status_code=status_code,
        code=exc.code,
        message=exc.message,
        trace_id=trace_id,
        details=exc.details,
    )

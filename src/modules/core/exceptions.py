"""Domain error taxonomy and the API error translator.

Every module raises subclasses of the base classes below.  Services never
catch them: they abort the enclosing ``transaction.atomic`` block and travel
up to the API layer, where ``standard_exception_handler`` renders them as::

    {"type": "not_found", "errors": [{"code": "OrderNotFound", "detail": "..."}]}

DRF's own errors (authentication, throttling, parse errors, serializer
validation) are rendered in the same envelope.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations raised by the service layer."""

    error_type = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(DomainError):
    """A cart, order, item, coupon, customer or history record is missing."""

    error_type = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(DomainError):
    """The operation is not permitted from the aggregate's current state."""

    error_type = "invalid_state"
    status_code = status.HTTP_409_CONFLICT


class InvalidTransition(InvalidState):
    """A status transition outside the order state machine was requested."""


class Unauthorized(DomainError):
    """The requesting customer does not own the aggregate."""

    error_type = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationFailed(DomainError):
    """The request payload is malformed or violates an input rule."""

    error_type = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(DomainError):
    """The request conflicts with current data (stock, uniqueness, references)."""

    error_type = "conflict"
    status_code = status.HTTP_409_CONFLICT


# ---------------------------------------------------------------------------
# DRF integration
# ---------------------------------------------------------------------------


def _drf_errors(detail: Any, field: Optional[str] = None) -> List[Dict[str, str]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, str]] = []
        for key, value in detail.items():
            errors.extend(_drf_errors(value, field=key))
        return errors
    if isinstance(detail, list):
        errors = []
        for value in detail:
            errors.extend(_drf_errors(value, field=field))
        return errors
    code = getattr(detail, "code", "error")
    entry = {"code": str(code), "detail": str(detail)}
    if field and field != "non_field_errors":
        entry["field"] = field
    return [entry]


def _pydantic_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        entry = {"code": error.get("type", "invalid"), "detail": error.get("msg", "")}
        location = ".".join(str(part) for part in error.get("loc", ()))
        if location:
            entry["field"] = location
        errors.append(entry)
    return errors


def standard_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Render domain and DRF errors in the ``type`` / ``errors`` envelope.

    DTO validation failures (pydantic) are reported like serializer errors.
    """
    if isinstance(exc, PydanticValidationError):
        return Response(
            {"type": "validation_error", "errors": _pydantic_errors(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=exc.__class__.__name__,
            detail=str(exc),
        )
        return Response(
            {
                "type": exc.error_type,
                "errors": [{"code": exc.__class__.__name__, "detail": str(exc)}],
            },
            status=exc.status_code,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        error_type = "validation_error"
    elif isinstance(exc, APIException):
        error_type = exc.default_code
    else:
        error_type = "error"

    response.data = {
        "type": error_type,
        "errors": _drf_errors(getattr(exc, "detail", response.data)),
    }
    return response

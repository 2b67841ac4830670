"""Order domain exceptions.

Stock failures during placement surface as the inventory exceptions
(``InsufficientStock``, ``ItemUnavailable``) raised by the ledger.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError, NotFound, ValidationFailed


class OrderNotFound(NotFound):
    """The requested order does not exist (or was archived or cancelled)."""


class EmptyCart(ValidationFailed):
    """An order cannot be placed from an empty cart."""


class PaymentVerificationFailed(DomainError):
    """The payment provider's signature did not verify."""

    error_type = "payment_failed"
    status_code = status.HTTP_402_PAYMENT_REQUIRED

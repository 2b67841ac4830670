"""Payment confirmation check used before an order is persisted.

The provider is an opaque oracle: the core only asks whether the
(order id, payment id, signature) triple it received from the client was
really issued by the provider.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional, Protocol

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class PaymentGateway(Protocol):
    def verify(self, payment_order_id: str, payment_id: str, signature: str) -> bool: ...


class RazorpaySignatureVerifier:
    """Razorpay checkout signature: hex HMAC-SHA256 of ``"{order_id}|{payment_id}"``."""

    def __init__(self, key_secret: Optional[str] = None) -> None:
        self._key_secret = key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET

    def expected_signature(self, payment_order_id: str, payment_id: str) -> str:
        if not self._key_secret:
            raise ImproperlyConfigured("RAZORPAY_KEY_SECRET is not configured.")
        message = f"{payment_order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self._key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify(self, payment_order_id: str, payment_id: str, signature: str) -> bool:
        expected = self.expected_signature(payment_order_id, payment_id)
        return hmac.compare_digest(expected, signature or "")

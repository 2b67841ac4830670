"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups needed for unique
email checks and for resolving the customer behind an API account.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""

    @abstractmethod
    def get_by_user(self, user_id: int) -> Optional[Customer]:
        """Retrieve the customer linked to a Django account."""

"""Customer domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class CustomerAlreadyExists(Conflict):
    """A customer with the same email (or linked account) already exists."""


class CustomerNotFound(NotFound):
    """The requested customer does not exist."""

"""Order history exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class HistoryNotFound(NotFound):
    """The requested history record does not exist."""

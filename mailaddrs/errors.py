from __future__ import annotations

ADD_EXPECTS_MESSAGE = "add expects an email address or an Address value"


class InvalidArgumentError(ValueError):
    """Raised when a caller passes a value the address API cannot accept."""

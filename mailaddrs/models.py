from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .email_utils import is_valid_email
from .errors import InvalidArgumentError
from .parser import parse

# RFC 5322 "specials"; a display name containing any of them must be quoted.
NAME_SPECIALS_RE = re.compile(r'[()<>\[\]:;@\\,."]')


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Address:
    email: str
    name: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject empty emails and store blank name/comment as None."""
        if not isinstance(self.email, str) or not self.email.strip():
            raise InvalidArgumentError(
                f"Address requires a non-empty email string, got {self.email!r}"
            )
        object.__setattr__(self, "email", self.email.strip())
        object.__setattr__(self, "name", _blank_to_none(self.name))
        object.__setattr__(self, "comment", _blank_to_none(self.comment))

    @classmethod
    def from_string(cls, raw: str, comment: Optional[str] = None) -> "Address":
        """Parse exactly one mailbox specification.

        Args:
            raw: A single mailbox, e.g. ``"Jane Doe" <jane@example.com>``.
            comment: Optional comment overriding any parsed ``(comment)``.

        Returns:
            The parsed Address.

        Raises:
            InvalidArgumentError: When ``raw`` holds no mailbox, more than one
                mailbox, or an email that is not a plausible addr-spec.
        """
        if not isinstance(raw, str):
            raise InvalidArgumentError(f"Expected a string address, got {raw!r}")
        parsed = parse(raw)
        if not parsed:
            raise InvalidArgumentError(f"No email address found in {raw!r}")
        if len(parsed) > 1:
            raise InvalidArgumentError(
                f"Expected a single address, found {len(parsed)} in {raw!r}"
            )
        email, name, parsed_comment = parsed[0]
        if not is_valid_email(email):
            raise InvalidArgumentError(f"Invalid email address: {email!r}")
        return cls(email, name, comment if comment is not None else parsed_comment)

    def to_string(self) -> str:
        """Render the address as it would appear in a header value."""
        if self.name:
            name = self.name
            if NAME_SPECIALS_RE.search(name):
                # Parentheses are escaped so they stay part of the name.
                escaped = re.sub(r'(["()\\])', r"\\\1", name)
                name = f'"{escaped}"'
            rendered = f"{name} <{self.email}>"
        else:
            rendered = self.email
        if self.comment:
            comment = re.sub(r"([()\\])", r"\\\1", self.comment)
            rendered = f"{rendered} ({comment})"
        return rendered

    def __str__(self) -> str:
        return self.to_string()

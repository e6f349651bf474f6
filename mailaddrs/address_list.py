from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from .errors import ADD_EXPECTS_MESSAGE, InvalidArgumentError
from .models import Address
from .parser import parse

AddressLike = Union[Address, str]


class AddressList:
    """Ordered collection of unique addresses keyed by email.

    - the first address stored for an email wins; later duplicates are ignored
    - iteration follows insertion order
    - a cursor (rewind/next/key/current/valid) walks the same order
    """

    def __init__(self, addresses: Optional[Iterable[Any]] = None):
        self._addresses: dict[str, Address] = {}
        self._cursor: Optional[int] = None
        self._keys: Optional[list[str]] = None
        if addresses is not None:
            self.add_many(addresses)

    @classmethod
    def from_string(cls, raw: Optional[str]) -> "AddressList":
        """Build a list from a raw address header value."""
        return cls().add_from_string(raw)

    def add(self, email_or_address: AddressLike, name: Optional[str] = None) -> "AddressList":
        """Add an address unless its email is already present.

        Args:
            email_or_address: An Address, or an email string.
            name: Display name, used only with an email string.

        Returns:
            This list, for chaining.

        Raises:
            InvalidArgumentError: When given neither a non-empty string nor an
                Address.
        """
        if isinstance(email_or_address, Address):
            address = email_or_address
        elif isinstance(email_or_address, str) and email_or_address.strip():
            address = Address(email_or_address, name)
        else:
            raise InvalidArgumentError(ADD_EXPECTS_MESSAGE)

        if address.email not in self._addresses:
            self._addresses[address.email] = address
            self._keys = None
        return self

    def add_many(self, addresses: Union[Mapping[str, Optional[str]], Iterable[Any]]) -> "AddressList":
        """Add several addresses in order.

        Args:
            addresses: A mapping of email to name, or an iterable of email
                strings, Address values and ``(email, name)`` pairs.

        Returns:
            This list, for chaining.
        """
        if isinstance(addresses, Mapping):
            items: Iterable[Any] = addresses.items()
        else:
            items = addresses
        for item in items:
            if isinstance(item, tuple) and len(item) == 2:
                self.add(item[0], item[1])
            else:
                self.add(item)
        return self

    def add_from_string(self, raw: Optional[str]) -> "AddressList":
        """Parse a raw header value and add every address found."""
        for email, name, comment in parse(raw):
            self.add(Address(email, name, comment))
        return self

    def merge(self, other: "AddressList") -> "AddressList":
        """Add every address of ``other``; entries already here are kept."""
        for address in other:
            self.add(address)
        return self

    def has(self, email: str) -> bool:
        return email in self._addresses

    def get(self, email: str) -> Optional[Address]:
        """Return the stored Address for ``email``, or None."""
        return self._addresses.get(email)

    def delete(self, email: str) -> bool:
        """Remove ``email``; return True when something was removed."""
        if email not in self._addresses:
            return False
        del self._addresses[email]
        self._keys = None
        return True

    def count(self) -> int:
        return len(self._addresses)

    def emails(self) -> list[str]:
        return list(self._addresses)

    def items(self) -> list[tuple[str, Address]]:
        return list(self._addresses.items())

    def to_string(self, separator: str = ", ") -> str:
        """Render the addresses as a header value."""
        return separator.join(address.to_string() for address in self)

    # Cursor protocol

    def rewind(self) -> None:
        self._cursor = 0 if self._addresses else None

    def next(self) -> None:
        if self._cursor is None:
            return
        self._cursor += 1
        if self._cursor >= len(self._addresses):
            self._cursor = None

    def valid(self) -> bool:
        return self._cursor is not None and self._cursor < len(self._addresses)

    def key(self) -> Optional[str]:
        """Return the email at the cursor, or None when not positioned."""
        if not self.valid():
            return None
        if self._keys is None:
            self._keys = list(self._addresses)
        return self._keys[self._cursor]

    def current(self) -> Optional[Address]:
        """Return the Address at the cursor, or None when not positioned."""
        key = self.key()
        return None if key is None else self._addresses[key]

    # Python protocols

    def __len__(self) -> int:
        return len(self._addresses)

    def __contains__(self, email: object) -> bool:
        return email in self._addresses

    def __iter__(self) -> Iterator[Address]:
        return iter(list(self._addresses.values()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AddressList):
            return NotImplemented
        return list(self._addresses.items()) == list(other._addresses.items())

    def __repr__(self) -> str:
        return f"AddressList({list(self._addresses.values())!r})"

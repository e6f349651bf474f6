"""Address-bearing message headers (To, Cc, Bcc, From, Reply-To)."""

from __future__ import annotations

import logging
from typing import Optional

from .address_list import AddressList
from .email_utils import unfold
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _split_header_line(line: str) -> tuple[str, str]:
    """Split ``Name: value`` into its field name and unfolded value."""
    if not isinstance(line, str) or ":" not in line:
        logger.warning(f"Rejected header line without a field name: {line!r}")
        raise InvalidArgumentError(f"Invalid header line: {line!r}")
    name, value = line.split(":", 1)
    return name.strip(), unfold(value)


class AddressHeader:
    field_name = ""

    def __init__(self, address_list: Optional[AddressList] = None):
        self._address_list = address_list if address_list is not None else AddressList()

    @classmethod
    def from_string(cls, line: str) -> "AddressHeader":
        """Build the header from a full ``Field: value`` line.

        Raises:
            InvalidArgumentError: When the line is not a header of this type.
        """
        name, value = _split_header_line(line)
        if name.lower() != cls.field_name.lower():
            logger.warning(f"Expected a {cls.field_name} header, got {name!r}")
            raise InvalidArgumentError(
                f"Invalid header line for {cls.field_name}: {line!r}"
            )
        return cls(AddressList.from_string(value))

    @property
    def address_list(self) -> AddressList:
        return self._address_list

    def get_address_list(self) -> AddressList:
        return self._address_list

    def field_value(self, separator: str = ", ") -> str:
        return self._address_list.to_string(separator)

    def to_string(self, separator: str = ", ") -> str:
        return f"{self.field_name}: {self.field_value(separator)}"

    def __str__(self) -> str:
        return self.to_string()


class To(AddressHeader):
    field_name = "To"


class Cc(AddressHeader):
    field_name = "Cc"


class Bcc(AddressHeader):
    field_name = "Bcc"


class From(AddressHeader):
    field_name = "From"


class ReplyTo(AddressHeader):
    field_name = "Reply-To"


HEADER_CLASSES: dict[str, type[AddressHeader]] = {
    cls.field_name.lower(): cls for cls in (To, Cc, Bcc, From, ReplyTo)
}


def header_from_string(line: str) -> AddressHeader:
    """Build the matching address header for a ``Field: value`` line.

    Raises:
        InvalidArgumentError: When the field is not an address header.
    """
    name, _ = _split_header_line(line)
    header_cls = HEADER_CLASSES.get(name.lower())
    if header_cls is None:
        logger.warning(f"Unsupported address header: {name!r}")
        raise InvalidArgumentError(f"Not an address header: {name!r}")
    return header_cls.from_string(line)

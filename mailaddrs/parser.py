"""
Address-list header parser.

Splits an unfolded header value such as a ``To:`` field into mailbox
specifications and reduces each one to an ``(email, name, comment)`` triple.
Parsing is tolerant of real-world deviations:
- semicolons used as separators (Outlook)
- apostrophes inside quoted display names
- parenthesised text inside names, which becomes the comment
- empty segments and group labels (``team: a@x, b@y;``), which are skipped
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import NamedTuple, Optional

from .email_utils import clean_text
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

SEPARATORS = ",;"
QUOTED_PAIR_RE = re.compile(r"\\(.)")


class ParsedAddress(NamedTuple):
    email: str
    name: Optional[str] = None
    comment: Optional[str] = None


def _scan_top_level(text: str) -> Iterator[tuple[int, str]]:
    """Yield (index, char) for characters outside quotes, comments and <addr>.

    Quoted strings and (nested) comments are consumed silently, as are
    backslash-escaped characters inside them. An opening ``<`` is yielded,
    and everything up to its ``>`` is skipped; a ``<`` with no ``>`` after
    it is yielded as ordinary text.
    """
    last_gt = text.rfind(">")
    in_quote = False
    in_angle = False
    depth = 0
    escaped = False
    for i, ch in enumerate(text):
        if in_angle:
            if ch == ">":
                in_angle = False
            continue
        if escaped:
            escaped = False
            continue
        if ch == "\\" and (in_quote or depth):
            escaped = True
            continue
        if in_quote:
            if ch == '"':
                in_quote = False
            continue
        if depth:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            continue
        if ch == '"':
            in_quote = True
            continue
        if ch == "(":
            depth = 1
            continue
        if ch == "<" and i < last_gt:
            in_angle = True
        yield i, ch


def _unmatched_quoted_parens(text: str) -> set[int]:
    """Return indexes of ``(`` inside quoted strings that never close there."""
    unmatched: set[int] = set()
    stack: list[int] = []
    in_quote = False
    escaped = False
    for i, ch in enumerate(text):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            if in_quote:
                unmatched.update(stack)
                stack = []
            in_quote = not in_quote
        elif in_quote and ch == "(":
            stack.append(i)
        elif in_quote and ch == ")" and stack:
            stack.pop()
    unmatched.update(stack)
    return unmatched


def _extract_comments(text: str, honor_quotes: bool = True) -> tuple[str, list[str]]:
    """Remove parenthesised runs from text.

    Args:
        text: Text to scan.
        honor_quotes: When False, balanced parentheses inside double quotes
            are still treated as comments (display names like
            ``"Support (E-mail)"``). An unbalanced ``(`` inside quotes is
            always literal.

    Returns:
        The text with each comment replaced by a space, and the comments.
    """
    literal_parens = set() if honor_quotes else _unmatched_quoted_parens(text)
    out: list[str] = []
    comments: list[str] = []
    current: list[str] = []
    depth = 0
    in_quote = False
    escaped = False
    for i, ch in enumerate(text):
        if depth:
            if escaped:
                current.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "(":
                depth += 1
                current.append(ch)
            elif ch == ")":
                depth -= 1
                if depth:
                    current.append(ch)
                else:
                    comments.append("".join(current))
                    current = []
                    out.append(" ")
            else:
                current.append(ch)
            continue
        if escaped:
            out.append(ch)
            escaped = False
            continue
        if ch == "\\":
            out.append(ch)
            escaped = True
            continue
        if ch == '"':
            in_quote = not in_quote
        elif ch == "(" and i not in literal_parens and (not in_quote or not honor_quotes):
            depth = 1
            continue
        out.append(ch)
    if depth:
        # Unterminated comment: keep what was collected.
        comments.append("".join(current))
    cleaned = [clean_text(c) for c in comments]
    return "".join(out), [c for c in cleaned if c]


def _is_group_label(
    raw: str, start: int, colon: int, next_semi: Optional[int], next_comma: Optional[int]
) -> bool:
    """A ``label:`` opens a group only when it ends in ``;`` and is empty or a list."""
    label = raw[start:colon]
    if "<" in label or "@" in label or next_semi is None:
        return False
    if not raw[colon + 1:next_semi].strip():
        return True
    return next_comma is not None and next_comma < next_semi


def _find_angle_addr(segment: str) -> tuple[int, int]:
    """Return (open, close) indexes of the ``<addr>`` part, or (-1, -1)."""
    lt = next((i for i, ch in _scan_top_level(segment) if ch == "<"), -1)
    if lt < 0:
        # An unterminated quote hides the bracket from the scanner.
        lt = segment.rfind("<")
        if lt < 0 or segment.find(">", lt) < 0:
            return -1, -1
    gt = segment.find(">", lt + 1)
    if gt < 0:
        gt = len(segment)
    return lt, gt


def _unquote_name(text: str) -> Optional[str]:
    name = clean_text(text)
    if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
        name = QUOTED_PAIR_RE.sub(r"\1", name[1:-1]).strip()
    return name or None


def split_addresses(raw: str) -> list[str]:
    """Split a header value on top-level commas and semicolons.

    A group label (``team: a@x, b@y;`` or ``undisclosed-recipients:;``) is
    dropped; the group's closing ``;`` acts as a separator.

    Args:
        raw: Unfolded header value.

    Returns:
        Trimmed, non-empty mailbox specifications in encounter order.
    """
    if not raw:
        return []
    tokens = [(i, ch) for i, ch in _scan_top_level(raw) if ch in ",;:"]
    next_semi: list[Optional[int]] = [None] * len(tokens)
    next_comma: list[Optional[int]] = [None] * len(tokens)
    semi = comma = None
    for k in range(len(tokens) - 1, -1, -1):
        next_semi[k], next_comma[k] = semi, comma
        i, ch = tokens[k]
        if ch == ";":
            semi = i
        elif ch == ",":
            comma = i

    segments: list[str] = []
    start = 0
    in_group = False
    for k, (i, ch) in enumerate(tokens):
        if ch in SEPARATORS:
            segments.append(raw[start:i])
            start = i + 1
            if ch == ";":
                in_group = False
        elif not in_group and _is_group_label(raw, start, i, next_semi[k], next_comma[k]):
            start = i + 1
            in_group = True
    segments.append(raw[start:])
    return [s.strip() for s in segments if s.strip()]


def parse_mailbox(segment: str) -> Optional[ParsedAddress]:
    """Reduce one mailbox specification to an (email, name, comment) triple.

    Args:
        segment: A single mailbox, without surrounding separators.

    Returns:
        The parsed triple, or None when no email can be found.
    """
    segment = segment.strip()
    if not segment:
        return None

    lt, gt = _find_angle_addr(segment)
    if lt >= 0:
        email = segment[lt + 1:gt].strip()
        name_region, comments = _extract_comments(segment[:lt], honor_quotes=False)
        _, trailing = _extract_comments(segment[gt + 1:])
        comments.extend(trailing)
        name = _unquote_name(name_region)
    else:
        bare, comments = _extract_comments(segment)
        email = clean_text(bare)
        name = None

    if not email:
        return None
    return ParsedAddress(email, name, " ".join(comments) or None)


def parse(raw: Optional[str]) -> list[ParsedAddress]:
    """Parse an address-list header value.

    Segments that hold no email (trailing separators, empty groups) are
    skipped rather than failing the whole header.

    Args:
        raw: Unfolded header value, e.g. ``'A <a@x.org>; b@y.org'``.

    Returns:
        Parsed addresses in encounter order.
    """
    if raw is None:
        return []
    if not isinstance(raw, str):
        raise InvalidArgumentError(f"Expected a header string, got {type(raw).__name__}")

    parsed: list[ParsedAddress] = []
    for segment in split_addresses(raw):
        address = parse_mailbox(segment)
        if address is None:
            logger.debug(f"Skipping segment without an email: {segment!r}")
            continue
        parsed.append(address)
    return parsed

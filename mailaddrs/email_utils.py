from __future__ import annotations

import re
from email.utils import parseaddr

EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+$"
)
MAX_EMAIL_LENGTH = 320
FOLD_RE = re.compile(r"\r?\n(?=[ \t])")


def is_valid_email(email: str) -> bool:
    """Return True when an email has a pragmatic valid format."""
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    if "\r" in email or "\n" in email:
        return False
    _, parsed = parseaddr(email)
    if parsed != email:
        return False
    return bool(EMAIL_PATTERN.fullmatch(email))


def unfold(value: str | None) -> str:
    """Join folded header continuation lines into a single line."""
    if not value:
        return ""
    return FOLD_RE.sub("", value).strip()


def clean_text(s: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return re.sub(r"\s+", " ", s).strip()

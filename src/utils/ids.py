"""Opaque record identifiers."""

import re
import secrets

# 12 random bytes rendered as 24 lowercase hex characters
ID_BYTES = 12
_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def generate_id() -> str:
    return secrets.token_hex(ID_BYTES)


def is_valid_id(value) -> bool:
    """Return True if value looks like an id this service could have issued."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))

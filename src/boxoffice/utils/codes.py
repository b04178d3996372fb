"""Human-facing reservation codes."""

import secrets
import string

CODE_PREFIX = "RES"
CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 10


def generate_reservation_code() -> str:
    """Return a code like ``RES7K2QX9M4AB``, read out at the box office."""
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{CODE_PREFIX}{suffix}"

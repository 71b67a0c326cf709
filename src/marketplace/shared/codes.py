"""Generators for the human-facing codes printed on orders and vouchers."""

import random
import secrets
import string

SHORT_CODE_ALPHABET = string.ascii_uppercase + string.digits
SHORT_CODE_LENGTH = 6
REFUND_CODE_PREFIX = "REF-"


def generate_short_code() -> str:
    """Six uppercase alphanumeric characters, e.g. ``K7Q2ZD``."""
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def generate_refund_code() -> str:
    """``REF-`` followed by six uppercase alphanumeric characters."""
    return REFUND_CODE_PREFIX + generate_short_code()


def generate_collection_code() -> str:
    """Four ASCII digits in the range 1000-9999."""
    return str(1000 + random.randrange(9000))

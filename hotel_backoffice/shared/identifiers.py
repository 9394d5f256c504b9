"""Record identifier generation"""

import secrets
import string
import time
from typing import Iterable, Optional

_BASE36 = string.digits + string.ascii_lowercase


def generate_record_id(prefix: str) -> str:
    """
    Build a time-plus-random identifier such as ``APT-1718000000000-k3j9x0a2b``.

    Collisions are treated as negligible: callers do not retry on a duplicate.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}-{millis}-{suffix}"


def next_sequential_code(prefix: str, existing_codes: Iterable[Optional[str]], width: int = 4) -> str:
    """
    Return the code after the highest ``<prefix><digits>`` code in use
    (``CR0007`` -> ``CR0008``), starting at 1. Codes in any other shape are ignored.
    """
    last_number = 0
    for code in existing_codes:
        if code and code.startswith(prefix):
            digits = code[len(prefix) :]
            if digits.isdigit():
                last_number = max(last_number, int(digits))
    return f"{prefix}{str(last_number + 1).zfill(width)}"

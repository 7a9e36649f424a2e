"""Small parsing and formatting helpers shared by pages and tests."""

from __future__ import annotations

import random
import re
import string
import time
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

_CURRENCY_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_currency(text: str) -> float:
    """Parse a rendered price such as ``"Rs. 1,300"`` into a float.

    The first numeric token is used, so currency prefixes containing a dot
    do not leak into the value. Text with no digits parses as 0.0.
    """
    match = _CURRENCY_RE.search(text or "")
    if match is None:
        return 0.0
    return float(match.group(0).replace(",", ""))


def extract_numbers(text: str) -> list[float]:
    """Return every number appearing in text, in order."""
    return [float(n) for n in _NUMBER_RE.findall(text or "")]


def arrays_equal_ignore_order(first: Iterable[Any], second: Iterable[Any]) -> bool:
    """Compare two sequences as multisets."""
    return Counter(first) == Counter(second)


def to_title_case(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def get_current_timestamp(fmt: str = "iso") -> str | int:
    """Current time as ``iso`` string, ``unix`` milliseconds or ``readable`` text."""
    now = datetime.now(timezone.utc)
    if fmt == "unix":
        return int(now.timestamp() * 1000)
    if fmt == "readable":
        return now.strftime("%Y-%m-%d %H:%M:%S")
    return now.isoformat()


def generate_test_id(prefix: str = "test", rng: random.Random | None = None) -> str:
    """Build an identifier like ``test_1700000000000_k3j9x2ab1``."""
    rng = rng or random
    suffix = "".join(rng.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def timestamped_name(name: str) -> str:
    """Append a filesystem-safe timestamp to name, e.g. for screenshots."""
    stamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
    safe = re.sub(r"[^\w.-]+", "_", name).strip("_") or "capture"
    return f"{safe}_{stamp}"

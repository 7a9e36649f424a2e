"""Utility helpers for shopqa."""

from shopqa.utils.helpers import (
    arrays_equal_ignore_order,
    extract_numbers,
    generate_test_id,
    get_current_timestamp,
    is_valid_email,
    parse_currency,
    timestamped_name,
    to_title_case,
)
from shopqa.utils.wait import poll_until, wait_for, wait_for_stable_value

__all__ = [
    "arrays_equal_ignore_order",
    "extract_numbers",
    "generate_test_id",
    "get_current_timestamp",
    "is_valid_email",
    "parse_currency",
    "poll_until",
    "timestamped_name",
    "to_title_case",
    "wait_for",
    "wait_for_stable_value",
]

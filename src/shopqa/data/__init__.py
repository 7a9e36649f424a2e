"""Test data generation and fixtures."""

from shopqa.data.fixtures import FixtureLoader
from shopqa.data.generators import (
    Address,
    CreditCard,
    DateOfBirth,
    TestDataGenerator,
    User,
    fake,
    generate_bulk_data,
    generate_random_address,
    generate_random_date,
    generate_random_email,
    generate_random_number,
    generate_random_phone_number,
    generate_random_string,
    generate_random_user,
    generate_test_credit_card,
    generate_test_data,
)

__all__ = [
    "Address",
    "CreditCard",
    "DateOfBirth",
    "FixtureLoader",
    "TestDataGenerator",
    "User",
    "fake",
    "generate_bulk_data",
    "generate_random_address",
    "generate_random_date",
    "generate_random_email",
    "generate_random_number",
    "generate_random_phone_number",
    "generate_random_string",
    "generate_random_user",
    "generate_test_credit_card",
    "generate_test_data",
]

"""Data generators using Faker for storefront test data.

Generates sign-up users, postal addresses, test credit cards and contact
details shaped the way the storefront forms expect them. Every
TestDataGenerator owns its own Faker instance; passing a seed makes its
output reproducible without touching the global random state.

Example:
    >>> from shopqa.data import fake, TestDataGenerator
    >>>
    >>> user = fake.random_user()
    >>> user.email
    'testuser_1718000000000_417@example.com'
    >>>
    >>> seeded = TestDataGenerator(seed=12345)
    >>> card = seeded.test_credit_card()
"""

from __future__ import annotations

import string
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

from faker import Faker
from faker.providers import BaseProvider

DEFAULT_EMAIL_DOMAIN = "example.com"
DEFAULT_PASSWORD = "TestPassword123!"
ALPHANUMERIC = string.ascii_letters + string.digits


class StorefrontUserProvider(BaseProvider):
    """Provider for sign-up form values."""

    honorifics = ["Mr", "Ms"]

    def honorific(self) -> str:
        return self.random_element(self.honorifics)

    def test_street(self) -> str:
        return f"{self.random_int(1, 9999)} Test Street"

    def apartment(self, max_number: int = 100) -> str:
        return f"Apt {self.random_int(1, max_number)}"

    def five_digit_zipcode(self) -> str:
        return str(self.random_int(10000, 99999))

    def us_mobile_number(self) -> str:
        """Generate a ``+1`` prefixed ten digit mobile number."""
        return f"+1{self.random_int(1000000000, 9999999999)}"


class StorefrontAddressProvider(BaseProvider):
    """Provider for short US postal addresses."""

    street_names = [
        "Main St",
        "Oak Ave",
        "Pine Rd",
        "Elm St",
        "Cedar Ln",
        "Park Ave",
        "First St",
        "Second St",
    ]

    city_names = [
        "Springfield",
        "Riverside",
        "Franklin",
        "Greenville",
        "Bristol",
        "Fairview",
        "Salem",
        "Georgetown",
    ]

    state_codes = ["CA", "NY", "TX", "FL", "IL", "PA", "OH", "GA"]

    def short_street_address(self) -> str:
        return f"{self.random_int(1, 9999)} {self.random_element(self.street_names)}"

    def short_city(self) -> str:
        return self.random_element(self.city_names)

    def short_state(self) -> str:
        return self.random_element(self.state_codes)


class TestCardProvider(BaseProvider):
    """Provider for card-shaped numbers.

    Numbers only carry the issuer prefix and length; they are not Luhn
    valid and must never be used against a real payment gateway.
    """

    card_types = [
        ("Visa", "4", 16),
        ("MasterCard", "5", 16),
        ("American Express", "37", 15),
    ]

    def test_card_type(self) -> tuple[str, str, int]:
        return self.random_element(self.card_types)

    def test_card_number(self, prefix: str, length: int) -> str:
        digits = "".join(str(self.random_digit()) for _ in range(length - len(prefix)))
        return f"{prefix}{digits}"


@dataclass
class DateOfBirth:
    day: int
    month: int
    year: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class User:
    """A complete sign-up record."""

    name: str
    email: str
    password: str
    title: str
    date_of_birth: DateOfBirth
    first_name: str
    last_name: str
    company: str
    address1: str
    address2: str
    country: str
    state: str
    city: str
    zipcode: str
    mobile_number: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Address:
    address1: str
    address2: str
    city: str
    state: str
    zipcode: str
    country: str = "United States"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CreditCard:
    card_number: str
    expiry_month: str
    expiry_year: str
    cvv: str
    card_type: str
    card_holder_name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class _MillisecondClock:
    """Strictly increasing millisecond timestamps, shared process-wide."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def now(self) -> int:
        with self._lock:
            current = max(int(time.time() * 1000), self._last + 1)
            self._last = current
            return current


_clock = _MillisecondClock()


@dataclass
class TestDataGenerator:
    """Main data generator with Faker integration and seed support.

    Example:
        >>> gen = TestDataGenerator(seed=7)
        >>> gen.random_address().state in StorefrontAddressProvider.state_codes
        True
    """

    __test__ = False

    locale: str = "en_US"
    seed: int | None = None
    _faker: Faker = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._faker = Faker(self.locale)
        self._faker.add_provider(StorefrontUserProvider)
        self._faker.add_provider(StorefrontAddressProvider)
        self._faker.add_provider(TestCardProvider)
        if self.seed is not None:
            self._faker.seed_instance(self.seed)

    def reset_seed(self) -> None:
        """Restart the sequence from the original seed."""
        if self.seed is not None:
            self._faker.seed_instance(self.seed)

    @property
    def faker(self) -> Faker:
        return self._faker

    def timestamp(self) -> int:
        """Millisecond timestamp, strictly greater than any previously returned."""
        return _clock.now()

    def random_email(self, domain: str = DEFAULT_EMAIL_DOMAIN) -> str:
        """Generate a unique address like ``testuser_<ms>_<n>@example.com``."""
        return f"testuser_{self.timestamp()}_{self._faker.random_int(0, 999)}@{domain}"

    def random_string(self, length: int = 10, charset: str = ALPHANUMERIC) -> str:
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        if not charset:
            raise ValueError("charset must not be empty")
        return "".join(self._faker.random.choices(charset, k=length))

    def random_number(self, minimum: int = 1, maximum: int = 100) -> int:
        """Uniform integer in the inclusive range [minimum, maximum]."""
        if minimum > maximum:
            raise ValueError(f"minimum ({minimum}) must not exceed maximum ({maximum})")
        return self._faker.random_int(minimum, maximum)

    def random_phone_number(self, fmt: str = "US") -> str:
        fmt = fmt.upper()
        if fmt == "US":
            return (
                f"+1{self.random_number(100, 999)}"
                f"{self.random_number(100, 999)}{self.random_number(1000, 9999)}"
            )
        if fmt == "UK":
            return f"+44{self.random_number(1000000000, 9999999999)}"
        return f"+1{self.random_number(1000000000, 9999999999)}"

    def random_date(
        self,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> datetime:
        """Uniform datetime between start (default 1970-01-01) and end (default now)."""
        start = start or datetime(1970, 1, 1)
        end = end or datetime.now()
        return self._faker.date_time_between(start_date=start, end_date=end)

    def date_of_birth(self) -> DateOfBirth:
        return DateOfBirth(
            day=self.random_number(1, 28),
            month=self.random_number(1, 12),
            year=self.random_number(1970, 2019),
        )

    def random_user(self) -> User:
        """Generate a full sign-up record with a unique email."""
        first_name = self._faker.first_name()
        last_name = self._faker.last_name()
        return User(
            name=f"{first_name} {last_name}",
            email=self.random_email(),
            password=DEFAULT_PASSWORD,
            title=self._faker.honorific(),
            date_of_birth=self.date_of_birth(),
            first_name=first_name,
            last_name=last_name,
            company=f"{first_name} Corp",
            address1=self._faker.test_street(),
            address2=self._faker.apartment(),
            country="United States",
            state="California",
            city="Test City",
            zipcode=self._faker.five_digit_zipcode(),
            mobile_number=self._faker.us_mobile_number(),
        )

    def random_address(self) -> Address:
        """Generate an address; address2 is empty about half of the time."""
        address2 = self._faker.apartment(999) if self._faker.pybool() else ""
        return Address(
            address1=self._faker.short_street_address(),
            address2=address2,
            city=self._faker.short_city(),
            state=self._faker.short_state(),
            zipcode=self._faker.five_digit_zipcode(),
        )

    def test_credit_card(self) -> CreditCard:
        card_type, prefix, length = self._faker.test_card_type()
        return CreditCard(
            card_number=self._faker.test_card_number(prefix, length),
            expiry_month=f"{self.random_number(1, 12):02d}",
            expiry_year=str(date.today().year + self.random_number(1, 5)),
            cvv=str(self.random_number(100, 999)),
            card_type=card_type,
            card_holder_name=f"{self.random_string(5).upper()} {self.random_string(7).upper()}",
        )

    def bulk_data(self, count: int = 10, kind: str = "user") -> list[Any]:
        """Generate count records of kind (user, email, address, creditcard).

        Unknown kinds fall back to users.
        """
        factories = {
            "user": self.random_user,
            "email": self.random_email,
            "address": self.random_address,
            "creditcard": self.test_credit_card,
        }
        factory = factories.get(kind.lower(), self.random_user)
        return [factory() for _ in range(count)]

    def test_data(self, kind: str) -> str:
        """Generate a single timestamp-tagged value for a form field."""
        ts = self.timestamp()
        kind = kind.lower()
        if kind == "email":
            return f"testuser_{ts}@{DEFAULT_EMAIL_DOMAIN}"
        if kind == "name":
            return f"TestUser_{ts}"
        if kind == "phone":
            return self._faker.us_mobile_number()
        if kind == "password":
            return f"TestPass{ts}!"
        return f"TestData_{ts}"

    def signup_data(self) -> dict[str, str]:
        """Flat sign-up payload used by the ``generate signup`` CLI task."""
        ts = self.timestamp()
        return {
            "email": f"testuser_{ts}@{DEFAULT_EMAIL_DOMAIN}",
            "first_name": f"TestUser{ts}",
            "last_name": "TestSuite",
            "password": DEFAULT_PASSWORD,
            "company": "Test Company",
            "address": "123 Test Street",
            "city": "Test City",
            "state": "Test State",
            "zipcode": "12345",
            "mobile": "1234567890",
        }


fake = TestDataGenerator()


def generate_random_email(domain: str = DEFAULT_EMAIL_DOMAIN) -> str:
    return fake.random_email(domain)


def generate_random_user() -> User:
    return fake.random_user()


def generate_random_string(length: int = 10, charset: str = ALPHANUMERIC) -> str:
    return fake.random_string(length, charset)


def generate_random_number(minimum: int = 1, maximum: int = 100) -> int:
    return fake.random_number(minimum, maximum)


def generate_random_phone_number(fmt: str = "US") -> str:
    return fake.random_phone_number(fmt)


def generate_random_date(
    start: date | datetime | None = None,
    end: date | datetime | None = None,
) -> datetime:
    return fake.random_date(start, end)


def generate_random_address() -> Address:
    return fake.random_address()


def generate_test_credit_card() -> CreditCard:
    return fake.test_credit_card()


def generate_bulk_data(count: int = 10, kind: str = "user") -> list[Any]:
    return fake.bulk_data(count, kind)


def generate_test_data(kind: str) -> str:
    return fake.test_data(kind)

"""Country registry and phone number normalization.

Each ``Country`` carries its international dialing code, the exit code used
to dial *out* of it, and a small mobile numbering plan (national significant
number lengths and leading digits).  Phone parsing is deliberately soft: a
number that cannot be parsed is dropped from the result, never raised.

The registry is a static read-only mapping (``COUNTRIES``).  Look countries
up with ``get_country``; unknown ids return ``None``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import SMSConfigError

logger = logging.getLogger(__name__)

# Visual separators people type into phone numbers.
_SEPARATORS = re.compile(r"[\s\-().]")

_MIN_NSN_LENGTH = 4
_MAX_NSN_LENGTH = 15


@dataclass(frozen=True)
class Country:
    """A country's dialing conventions.

    Attributes:
        id: ISO 3166-1 alpha-2 code (``"CN"``).
        phone_code: International dialing code without ``+`` (``"86"``).
        exit_code: Prefix dialed to leave this country (``"00"``).
        trunk_prefix: Domestic prefix stripped from input (``"0"``).
        national_prefix: Prefix prepended to mobiles in national format.
        mobile_prefixes: Leading digits of mobile national numbers.
        mobile_lengths: Valid lengths of mobile national numbers.
    """

    id: str
    phone_code: str
    exit_code: str
    trunk_prefix: str
    national_prefix: str
    mobile_prefixes: tuple[str, ...]
    mobile_lengths: tuple[int, ...]

    def is_mobile_number(self, number: str) -> bool:
        """Whether a national significant number fits the mobile plan."""
        return len(number) in self.mobile_lengths and number.startswith(self.mobile_prefixes)


CN = Country("CN", "86", "00", "0", "", ("1",), (11,))
HK = Country("HK", "852", "001", "", "", ("5", "6", "7", "9"), (8,))
MO = Country("MO", "853", "00", "", "", ("6",), (8,))
TW = Country("TW", "886", "002", "0", "0", ("9",), (9,))
SG = Country("SG", "65", "000", "", "", ("8", "9"), (8,))
JP = Country("JP", "81", "010", "0", "0", ("70", "80", "90"), (10,))
AU = Country("AU", "61", "0011", "0", "0", ("4",), (9,))
NZ = Country("NZ", "64", "00", "0", "0", ("2",), (8, 9, 10))
GB = Country("GB", "44", "00", "0", "0", ("7",), (10,))
US = Country("US", "1", "011", "1", "", tuple("23456789"), (10,))

COUNTRIES: Mapping[str, Country] = MappingProxyType(
    {c.id: c for c in (CN, HK, MO, TW, SG, JP, AU, NZ, GB, US)}
)

# Longest dialing codes first so "852" wins over a hypothetical "85".
_BY_PHONE_CODE: tuple[Country, ...] = tuple(
    sorted(COUNTRIES.values(), key=lambda c: len(c.phone_code), reverse=True)
)


def get_country(country_id: str | None) -> Country | None:
    """Return the registered country for an alpha-2 id (case-insensitive)."""
    if not country_id:
        return None
    return COUNTRIES.get(country_id.strip().upper())


@dataclass(frozen=True)
class Phone:
    """A parsed phone number.

    Equality and hashing use only ``(country.id, number)`` so the same
    subscriber typed two different ways is treated as one recipient.
    """

    country: Country = field(compare=False)
    number: str = field(compare=False)
    raw: str = field(default="", compare=False, repr=False)
    is_mobile: bool = field(default=False, compare=False)
    _key: tuple[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_key", (self.country.id, self.number))

    @property
    def country_id(self) -> str:
        return self.country.id

    @property
    def phone_number(self) -> str:
        """National format: what a domestic sender dials."""
        return self.country.national_prefix + self.number

    def to_international_format(self, exit_code: str) -> str:
        """Exit code + dialing code + national number (trunk zero / plus removed)."""
        return f"{exit_code}{self.country.phone_code}{self.number.lstrip('+0')}"


def _strip_trunk(country: Country, digits: str) -> str:
    if country.trunk_prefix and digits.startswith(country.trunk_prefix):
        return digits[len(country.trunk_prefix):]
    return digits


def _match_phone_code(digits: str) -> tuple[Country, str] | None:
    for country in _BY_PHONE_CODE:
        if digits.startswith(country.phone_code):
            return country, digits[len(country.phone_code):]
    return None


def parse_phone(raw: str, default_country: Country) -> Phone | None:
    """Parse one raw number in the context of *default_country*.

    ``+<code>`` and ``<exit code><code>`` prefixes attribute the number to the
    matching registered country.  A bare digit string that is not a valid
    domestic mobile but is a valid mobile once read as ``<code><number>`` is
    attributed to that country as well.

    Returns:
        The parsed ``Phone``, or ``None`` when *raw* is not a phone number.
    """
    if not raw:
        return None
    cleaned = _SEPARATORS.sub("", raw)

    international = False
    if cleaned.startswith("+"):
        cleaned = cleaned[1:]
        international = True
    elif cleaned.startswith(default_country.exit_code):
        cleaned = cleaned[len(default_country.exit_code):]
        international = True

    if not cleaned.isdigit():
        return None

    if international:
        matched = _match_phone_code(cleaned)
        if matched is None:
            return None
        country, rest = matched
        number = rest.lstrip("0")
    else:
        country = default_country
        number = _strip_trunk(country, cleaned)
        if not country.is_mobile_number(number):
            matched = _match_phone_code(cleaned)
            if matched is not None and matched[0].is_mobile_number(matched[1]):
                country, number = matched

    if not _MIN_NSN_LENGTH <= len(number) <= _MAX_NSN_LENGTH:
        return None

    return Phone(
        country=country,
        number=number,
        raw=raw,
        is_mobile=country.is_mobile_number(number),
    )


def create_phones(raw_numbers: Iterable[str], default_country_id: str) -> list[Phone]:
    """Parse *raw_numbers*, silently excluding anything unparseable.

    Raises:
        SMSConfigError: If *default_country_id* is not a registered country.
    """
    default_country = get_country(default_country_id)
    if default_country is None:
        raise SMSConfigError(f"Unknown country {default_country_id!r}")

    phones: list[Phone] = []
    for raw in raw_numbers:
        phone = parse_phone(raw, default_country)
        if phone is None:
            logger.debug("Excluded unparseable number ending %s", raw[-4:] if raw else "????")
            continue
        phones.append(phone)
    return phones


def unique_phones(phones: Iterable[Phone]) -> list[Phone]:
    """Drop duplicate recipients, keeping first-seen order."""
    seen: set[Phone] = set()
    unique: list[Phone] = []
    for phone in phones:
        if phone in seen:
            continue
        seen.add(phone)
        unique.append(phone)
    return unique

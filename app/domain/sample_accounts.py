"""Synthetic account name and address generators for the bulk demo."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from typing import Final


SAMPLE_NAME_PREFIX: Final[str] = "Bulk Account"
SALESFORCE_NAME_MAX_LENGTH: Final[int] = 255

_BUSINESS_TYPES: Final[tuple[str, ...]] = (
    "Tech", "Global", "Advanced", "Innovative", "Strategic", "Premier", "Elite", "Dynamic", "Pacific",
    "Atlantic", "Modern", "Future", "Smart", "Connected", "Digital", "Quantum", "Unified", "Integrated",
    "Precision", "Summit",
)
_BUSINESS_NAMES: Final[tuple[str, ...]] = (
    "Solutions", "Systems", "Enterprises", "Industries", "Dynamics", "Partners", "Networks", "Technologies",
    "Services", "Innovations", "Analytics", "Consulting", "Operations", "Group", "Corporation", "Associates",
    "International", "Management", "Ventures", "Labs",
)
_INDUSTRIES: Final[tuple[str, ...]] = (
    "Manufacturing", "Software", "Healthcare", "Logistics", "Energy", "Communications", "Engineering",
    "Research", "Development", "Robotics",
)
_STREET_TYPES: Final[tuple[str, ...]] = (
    "Street", "Avenue", "Boulevard", "Road", "Drive", "Lane", "Way", "Circle", "Court", "Place", "Square",
    "Terrace", "Parkway", "Plaza",
)
_STREET_NAMES: Final[tuple[str, ...]] = (
    "Maple", "Oak", "Cedar", "Pine", "Elm", "Washington", "Lincoln", "Park", "Lake", "River", "Mountain",
    "Valley", "Forest", "Meadow", "Spring", "Sunset", "Highland", "Madison", "Jefferson", "Franklin",
)
_CITIES: Final[tuple[str, ...]] = (
    "San Francisco", "New York", "Chicago", "Los Angeles", "Seattle", "Boston", "Austin", "Denver", "Miami",
    "Portland", "Atlanta", "Dallas", "Houston", "Phoenix", "Minneapolis",
)
_STATES: Final[tuple[tuple[str, str], ...]] = (
    ("California", "CA"),
    ("New York", "NY"),
    ("Texas", "TX"),
    ("Florida", "FL"),
    ("Illinois", "IL"),
    ("Washington", "WA"),
    ("Massachusetts", "MA"),
    ("Colorado", "CO"),
    ("Oregon", "OR"),
    ("Georgia", "GA"),
)


@dataclass(frozen=True)
class SampleAddress:
    """Generated postal address.

    Attributes:
        street: Street number, name and type.
        city: City name.
        state: Full state name.
        state_abbr: Two-letter state code.
        zip_code: Five-digit postal code.
    """

    street: str
    city: str
    state: str
    state_abbr: str
    zip_code: str


def domain_generate_address(rng: random.Random | None = None) -> SampleAddress:
    """Generate one random US address.

    Args:
        rng: Optional random source for deterministic output.

    Returns:
        SampleAddress: Generated address.
    """

    source = rng or random.Random()
    street_number = source.randint(100, 9999)
    state_name, state_abbr = source.choice(_STATES)
    return SampleAddress(
        street=f"{street_number} {source.choice(_STREET_NAMES)} {source.choice(_STREET_TYPES)}",
        city=source.choice(_CITIES),
        state=state_name,
        state_abbr=state_abbr,
        zip_code=str(source.randint(10000, 99999)),
    )


def domain_generate_business_name(rng: random.Random | None = None) -> str:
    """Generate one random account name prefixed with `Bulk Account`.

    The prefix is what the bulk demo queries for to detect earlier runs.

    Args:
        rng: Optional random source for deterministic output.

    Returns:
        str: Account name no longer than 255 characters.
    """

    source = rng or random.Random()
    business_type = source.choice(_BUSINESS_TYPES)
    business_name = source.choice(_BUSINESS_NAMES)
    industry = source.choice(_INDUSTRIES)
    timestamp_suffix = str(int(time.time() * 1000))[-4:]
    random_suffix = "".join(source.choices(string.ascii_uppercase + string.digits, k=3))

    name_formats = (
        f"{SAMPLE_NAME_PREFIX} {business_type} {business_name} {random_suffix}",
        f"{SAMPLE_NAME_PREFIX} {business_type} {industry} {random_suffix}",
        f"{SAMPLE_NAME_PREFIX} {industry} {business_name} {timestamp_suffix}",
        f"{SAMPLE_NAME_PREFIX} {business_type} {business_name} {industry} {random_suffix}",
    )
    generated_name = source.choice(name_formats)
    if len(generated_name) > SALESFORCE_NAME_MAX_LENGTH:
        return f"{SAMPLE_NAME_PREFIX} {business_type} {random_suffix}"
    return generated_name

"""Tests for synthetic account generators."""

import random

from app.domain import domain_generate_address, domain_generate_business_name


def test_domain_business_names_use_bulk_prefix_and_length_limit() -> None:
    rng = random.Random(42)

    names = [domain_generate_business_name(rng) for _ in range(200)]

    assert all(name.startswith("Bulk Account ") for name in names)
    assert all(len(name) <= 255 for name in names)


def test_domain_addresses_are_well_formed() -> None:
    """Generate addresses with numbered streets, known states and five-digit zips."""

    rng = random.Random(3)

    for _ in range(100):
        address = domain_generate_address(rng)
        street_number = int(address.street.split(" ", 1)[0])
        assert 100 <= street_number <= 9999
        assert len(address.zip_code) == 5 and address.zip_code.isdigit()
        assert len(address.state_abbr) == 2
        assert address.city


def test_domain_generators_are_deterministic_for_seeded_source() -> None:
    assert domain_generate_address(random.Random(9)) == domain_generate_address(random.Random(9))

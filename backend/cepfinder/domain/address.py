from __future__ import annotations

import re
from dataclasses import dataclass


_SEPARATORS = re.compile(r"[\s.\-]+")

ADDRESS_TEMPLATE = (
    "Street: {street}, Neighborhood: {neighborhood}, City: {city}, "
    "State: {state}, PostalCode: {postal_code}"
)


@dataclass(frozen=True, slots=True)
class Address:
    """Address resolved from a postal code.

    Providers fill only what they know; missing parts are empty strings.
    """

    street: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""


def format_address(address: Address) -> str:
    """Render an address as a single human readable line."""

    return ADDRESS_TEMPLATE.format(
        street=address.street,
        neighborhood=address.neighborhood,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
    )


def normalize_postal_code(value: str) -> str:
    """Strip whitespace and common separators, e.g. ``"01001-000"``."""

    return _SEPARATORS.sub("", value or "")

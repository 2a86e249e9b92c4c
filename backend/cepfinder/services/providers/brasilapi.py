from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from cepfinder.domain.address import Address
from cepfinder.services.providers.base import ProviderClient, ProviderPayload, Text
from cepfinder.services.providers.registry import register_provider


class BrasilApiPayload(ProviderPayload):
    cep: Text = ""
    state: Text = ""
    city: Text = ""
    neighborhood: Text = ""
    street: Text = ""
    service: Text = ""


def brasilapi_to_address(payload: Mapping[str, Any]) -> Address:
    data = BrasilApiPayload.model_validate(payload)
    return Address(
        street=data.street,
        neighborhood=data.neighborhood,
        city=data.city,
        state=data.state,
        postal_code=data.cep,
    )


@register_provider
class BrasilApiClient(ProviderClient):
    """BrasilAPI CEP v1 endpoint."""

    name = "brasilapi"
    display_name = "BrasilAPI"
    # BrasilAPI answers 400 or 404 depending on how malformed the code is.
    not_found_statuses = frozenset({400, 404})

    def build_url(self, postal_code: str) -> str:
        return f"{self.base_url}/api/cep/v1/{quote(postal_code, safe='')}"

    def parse_payload(self, payload: Mapping[str, Any]) -> Address:
        return brasilapi_to_address(payload)

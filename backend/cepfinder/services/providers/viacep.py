from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from cepfinder.domain.address import Address
from cepfinder.services.providers.base import (
    AddressNotFoundError,
    ProviderClient,
    ProviderPayload,
    Text,
)
from cepfinder.services.providers.registry import register_provider


class ViaCepPayload(ProviderPayload):
    cep: Text = ""
    logradouro: Text = ""
    complemento: Text = ""
    bairro: Text = ""
    localidade: Text = ""
    uf: Text = ""
    ibge: Text = ""
    ddd: Text = ""
    erro: bool = False


def viacep_to_address(payload: Mapping[str, Any]) -> Address:
    data = ViaCepPayload.model_validate(payload)
    # ViaCEP reports unknown codes with HTTP 200 and {"erro": true}.
    if data.erro:
        raise AddressNotFoundError("Postal code not found")
    return Address(
        street=data.logradouro,
        neighborhood=data.bairro,
        city=data.localidade,
        state=data.uf,
        postal_code=data.cep,
    )


@register_provider
class ViaCepClient(ProviderClient):
    """ViaCEP JSON web service."""

    name = "viacep"
    display_name = "ViaCEP"
    not_found_statuses = frozenset({400, 404})

    def build_url(self, postal_code: str) -> str:
        return f"{self.base_url}/ws/{quote(postal_code, safe='')}/json/"

    def parse_payload(self, payload: Mapping[str, Any]) -> Address:
        return viacep_to_address(payload)

from __future__ import annotations

import asyncio

import httpx
import pytest

from cepfinder.domain.address import Address
from cepfinder.domain.results import Failure, Success
from cepfinder.services.providers.brasilapi import (
    BrasilApiClient,
    brasilapi_to_address,
)
from cepfinder.services.providers.viacep import ViaCepClient, viacep_to_address


BRASILAPI_PAYLOAD = {
    "cep": "01001000",
    "state": "SP",
    "city": "São Paulo",
    "neighborhood": "Sé",
    "street": "Praça da Sé",
    "service": "open-cep",
}

VIACEP_PAYLOAD = {
    "cep": "01001-000",
    "logradouro": "Praça da Sé",
    "complemento": "lado ímpar",
    "bairro": "Sé",
    "localidade": "São Paulo",
    "uf": "SP",
    "ibge": "3550308",
    "gia": "1004",
    "ddd": "11",
    "siafi": "7107",
}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _respond(*args, **kwargs):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(*args, **kwargs)

    return handler


async def _lookup(provider, handler, timeout=1.0):
    async with _client(handler) as client:
        return await provider.lookup("01001000", client, timeout)


def test_brasilapi_payload_maps_to_address():
    assert brasilapi_to_address(BRASILAPI_PAYLOAD) == Address(
        street="Praça da Sé",
        neighborhood="Sé",
        city="São Paulo",
        state="SP",
        postal_code="01001000",
    )


def test_viacep_payload_maps_to_address():
    assert viacep_to_address(VIACEP_PAYLOAD) == Address(
        street="Praça da Sé",
        neighborhood="Sé",
        city="São Paulo",
        state="SP",
        postal_code="01001-000",
    )


def test_missing_and_null_fields_become_empty_strings():
    address = brasilapi_to_address(
        {"cep": "69900000", "state": "AC", "city": "Rio Branco", "street": None}
    )

    assert address.street == ""
    assert address.neighborhood == ""
    assert address.city == "Rio Branco"


def test_provider_urls():
    assert (
        BrasilApiClient("https://brasilapi.com.br/").build_url("01001000")
        == "https://brasilapi.com.br/api/cep/v1/01001000"
    )
    assert (
        ViaCepClient("https://viacep.com.br").build_url("01001000")
        == "https://viacep.com.br/ws/01001000/json/"
    )


@pytest.mark.asyncio
async def test_lookup_success_requests_provider_url():
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=BRASILAPI_PAYLOAD)

    result = await _lookup(BrasilApiClient("https://brasilapi.test"), handler)

    assert isinstance(result, Success)
    assert result.value.street == "Praça da Sé"
    assert seen == ["https://brasilapi.test/api/cep/v1/01001000"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 404])
async def test_brasilapi_not_found_statuses(status_code):
    result = await _lookup(
        BrasilApiClient("https://brasilapi.test"),
        _respond(status_code, json={"message": "CEP não encontrado"}),
    )

    assert isinstance(result, Failure)
    assert result.error.provider == "brasilapi"
    assert result.error.kind == "not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize("erro", [True, "true"])
async def test_viacep_error_flag_means_not_found(erro):
    result = await _lookup(
        ViaCepClient("https://viacep.test"), _respond(200, json={"erro": erro})
    )

    assert isinstance(result, Failure)
    assert result.error.kind == "not_found"


@pytest.mark.asyncio
async def test_server_error_is_transport_error():
    result = await _lookup(
        ViaCepClient("https://viacep.test"), _respond(503, text="unavailable")
    )

    assert isinstance(result, Failure)
    assert result.error.kind == "transport_error"
    assert "503" in result.error.message


@pytest.mark.asyncio
async def test_connection_failure_is_transport_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _lookup(BrasilApiClient("https://brasilapi.test"), handler)

    assert isinstance(result, Failure)
    assert result.error.kind == "transport_error"
    assert "connection refused" in result.error.message


@pytest.mark.asyncio
async def test_slow_upstream_is_timeout():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=BRASILAPI_PAYLOAD)

    result = await _lookup(
        BrasilApiClient("https://brasilapi.test"), handler, timeout=0.05
    )

    assert isinstance(result, Failure)
    assert result.error.kind == "timeout"


@pytest.mark.asyncio
async def test_httpx_timeout_is_timeout():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    result = await _lookup(ViaCepClient("https://viacep.test"), handler)

    assert isinstance(result, Failure)
    assert result.error.kind == "timeout"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"text": "<html>not json</html>"},
        {"json": ["01001000"]},
        {"json": {"cep": "01001000", "street": {"name": "Praça da Sé"}}},
    ],
)
async def test_malformed_payload_is_decode_error(response_kwargs):
    result = await _lookup(
        BrasilApiClient("https://brasilapi.test"), _respond(200, **response_kwargs)
    )

    assert isinstance(result, Failure)
    assert result.error.kind == "decode_error"

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from cepfinder.domain.address import format_address, normalize_postal_code
from cepfinder.domain.results import AllFailed, Resolved
from cepfinder.schemas.cep import (
    AddressSchema,
    CepLookupError,
    CepLookupResponse,
    ProviderErrorSchema,
)
from cepfinder.services.cep_service import CepLookupService


router = APIRouter()


def get_service(request: Request) -> CepLookupService:
    return request.app.state.cep_service


@router.get("/", status_code=status.HTTP_400_BAD_REQUEST, include_in_schema=False)
async def missing_postal_code() -> None:
    raise HTTPException(status.HTTP_400_BAD_REQUEST, "Postal code is required")


@router.get(
    "/{cep}",
    response_model=CepLookupResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Empty postal code"},
        404: {"model": CepLookupError},
        502: {"model": CepLookupError},
        504: {"model": CepLookupError},
    },
)
async def lookup_postal_code(
    cep: str, service: CepLookupService = Depends(get_service)
) -> CepLookupResponse:
    postal_code = normalize_postal_code(cep)
    if not postal_code:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Postal code is required")

    outcome = await service.resolve(postal_code)

    if isinstance(outcome, Resolved):
        formatted = format_address(outcome.value)
        display_name = service.display_name(outcome.provider)
        return CepLookupResponse(
            provider=outcome.provider,
            address=AddressSchema(**asdict(outcome.value)),
            formatted=formatted,
            message=f"Received from {display_name}: {formatted}",
        )

    if isinstance(outcome, AllFailed):
        errors = [
            ProviderErrorSchema(
                provider=error.provider, kind=error.kind, message=error.message
            )
            for error in outcome.errors
        ]
        if errors and all(error.kind == "not_found" for error in errors):
            code, message = status.HTTP_404_NOT_FOUND, "Postal code not found"
        else:
            code, message = status.HTTP_502_BAD_GATEWAY, "All providers failed"
        detail = CepLookupError(message=message, errors=errors)
        raise HTTPException(code, detail.model_dump())

    detail = CepLookupError(message="Timed out looking up postal code")
    raise HTTPException(status.HTTP_504_GATEWAY_TIMEOUT, detail.model_dump())

from __future__ import annotations

from pydantic import BaseModel, Field

from cepfinder.domain.results import ProviderErrorKind


class AddressSchema(BaseModel):
    street: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""


class CepLookupResponse(BaseModel):
    provider: str
    address: AddressSchema
    formatted: str
    message: str


class ProviderErrorSchema(BaseModel):
    provider: str
    kind: ProviderErrorKind
    message: str


class CepLookupError(BaseModel):
    message: str
    errors: list[ProviderErrorSchema] = Field(default_factory=list)

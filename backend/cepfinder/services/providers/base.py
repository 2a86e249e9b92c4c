"""Base class for postal code lookup providers."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Annotated, Any, ClassVar, Mapping

import httpx
from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from cepfinder.core.logging import get_logger
from cepfinder.domain.address import Address
from cepfinder.domain.results import (
    Failure,
    ProviderError,
    ProviderErrorKind,
    Result,
    Success,
)


ProviderResult = Result[Address, ProviderError]

# Upstreams send null for fields they do not know.
Text = Annotated[str, BeforeValidator(lambda value: "" if value is None else value)]


_logger = get_logger(__name__)


class AddressNotFoundError(LookupError):
    """Raised by payload mappers when the upstream reports an unknown code."""


class ProviderPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ProviderClient(ABC):
    """One upstream postal code service.

    Subclasses describe where to send the request and how to read the payload;
    :meth:`lookup` performs the single round-trip and maps every outcome into a
    :class:`Success` or a :class:`Failure`.
    """

    name: ClassVar[str]
    display_name: ClassVar[str]
    # Status codes the upstream uses to say the postal code does not exist.
    not_found_statuses: ClassVar[frozenset[int]] = frozenset({404})

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    @abstractmethod
    def build_url(self, postal_code: str) -> str:
        """Return the lookup URL for ``postal_code``."""

    @abstractmethod
    def parse_payload(self, payload: Mapping[str, Any]) -> Address:
        """Map a decoded JSON object into an :class:`Address`.

        Raises:
            AddressNotFoundError: If the payload reports an unknown code.
            pydantic.ValidationError: If the payload has an unexpected shape.
        """

    async def lookup(
        self,
        postal_code: str,
        client: httpx.AsyncClient,
        timeout: float,
    ) -> ProviderResult:
        """Query the upstream once, bounded by ``timeout`` seconds overall."""

        url = self.build_url(postal_code)
        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                client.get(url, timeout=timeout), timeout=timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return self._fail(
                "timeout", f"No response within {timeout:g}s", postal_code
            )
        except httpx.HTTPError as exc:
            return self._fail(
                "transport_error", str(exc) or type(exc).__name__, postal_code
            )

        if response.status_code in self.not_found_statuses:
            return self._fail(
                "not_found",
                f"Postal code not found (HTTP {response.status_code})",
                postal_code,
            )
        if not response.is_success:
            return self._fail(
                "transport_error",
                f"Unexpected HTTP status {response.status_code}",
                postal_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            return self._fail("decode_error", f"Invalid JSON: {exc}", postal_code)
        if not isinstance(payload, Mapping):
            return self._fail(
                "decode_error",
                f"Expected a JSON object, got {type(payload).__name__}",
                postal_code,
            )

        try:
            address = self.parse_payload(payload)
        except AddressNotFoundError as exc:
            return self._fail("not_found", str(exc), postal_code)
        except ValidationError as exc:
            return self._fail(
                "decode_error",
                f"Unexpected payload shape ({exc.error_count()} errors)",
                postal_code,
            )

        _logger.info(
            "Provider lookup succeeded",
            provider=self.name,
            postal_code=postal_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return Success(address)

    def _fail(
        self, kind: ProviderErrorKind, message: str, postal_code: str
    ) -> ProviderResult:
        _logger.warning(
            "Provider lookup failed",
            provider=self.name,
            postal_code=postal_code,
            kind=kind,
            error=message,
        )
        return Failure(ProviderError(self.name, kind, message))

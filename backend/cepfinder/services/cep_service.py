from __future__ import annotations

import time
from functools import partial
from typing import Sequence

import httpx

from cepfinder.core.config import Settings
from cepfinder.core.logging import get_logger
from cepfinder.domain.address import Address
from cepfinder.domain.results import (
    AllFailed,
    ProviderError,
    RaceOutcome,
    Resolved,
    TimedOut,
)
from cepfinder.services.providers.base import ProviderClient
from cepfinder.services.providers.registry import build_providers
from cepfinder.services.race import race_first_success


CepOutcome = RaceOutcome[Address, ProviderError]


_logger = get_logger(__name__)


class CepLookupService:
    """Resolve postal codes by racing every configured provider."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        providers: Sequence[ProviderClient],
        *,
        race_timeout: float = 1.0,
        provider_timeout: float = 1.0,
    ) -> None:
        if race_timeout <= 0 or provider_timeout <= 0:
            raise ValueError("Timeouts must be positive")
        self._client = client
        self._providers = tuple(providers)
        self._race_timeout = race_timeout
        self._provider_timeout = provider_timeout

    @property
    def providers(self) -> tuple[ProviderClient, ...]:
        return self._providers

    def display_name(self, provider: str) -> str:
        for client in self._providers:
            if client.name == provider:
                return client.display_name
        return provider

    async def resolve(self, postal_code: str) -> CepOutcome:
        operations = {
            provider.name: partial(
                provider.lookup, postal_code, self._client, self._provider_timeout
            )
            for provider in self._providers
        }

        started = time.perf_counter()
        outcome = await race_first_success(operations, self._race_timeout)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        if isinstance(outcome, Resolved):
            _logger.info(
                "Postal code resolved",
                postal_code=postal_code,
                provider=outcome.provider,
                elapsed_ms=elapsed_ms,
            )
        elif isinstance(outcome, AllFailed):
            _logger.warning(
                "All providers failed",
                postal_code=postal_code,
                errors=[f"{error.provider}:{error.kind}" for error in outcome.errors],
                elapsed_ms=elapsed_ms,
            )
        elif isinstance(outcome, TimedOut):
            _logger.warning(
                "Postal code lookup timed out",
                postal_code=postal_code,
                timeout=outcome.timeout,
            )
        return outcome


def create_cep_service(
    settings: Settings, client: httpx.AsyncClient
) -> CepLookupService:
    return CepLookupService(
        client,
        build_providers(settings),
        race_timeout=settings.race_timeout,
        provider_timeout=settings.provider_timeout,
    )

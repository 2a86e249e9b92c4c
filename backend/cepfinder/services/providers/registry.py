"""Registry of postal code providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from cepfinder.core.config import Settings
    from cepfinder.services.providers.base import ProviderClient


_providers: dict[str, type["ProviderClient"]] = {}


class ProviderConfigurationError(RuntimeError):
    """Raised when providers cannot be built from the provided settings."""


def register_provider(
    provider_class: type["ProviderClient"],
) -> type["ProviderClient"]:
    """Class decorator that makes a provider available by its ``name``."""

    _providers[provider_class.name] = provider_class
    return provider_class


def list_providers() -> list[str]:
    return sorted(_providers)


def build_providers(settings: "Settings") -> list["ProviderClient"]:
    """Instantiate the configured providers, preserving configuration order.

    Raises:
        ProviderConfigurationError: If no provider is configured or a name is
            not registered.
    """

    # Provider modules register themselves on import.
    from cepfinder.services.providers import brasilapi, viacep  # noqa: F401

    if not settings.providers:
        raise ProviderConfigurationError("At least one provider must be configured")

    providers: list[ProviderClient] = []
    for name in dict.fromkeys(settings.providers):
        if name not in _providers:
            available = ", ".join(list_providers())
            raise ProviderConfigurationError(
                f"Unknown provider '{name}'. Available providers: {available}"
            )
        providers.append(_providers[name](getattr(settings, f"{name}_base_url")))
    return providers

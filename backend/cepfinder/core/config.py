from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    debug: bool = Field(False, alias="CEPFINDER_DEBUG")
    host: str = Field("0.0.0.0", alias="CEPFINDER_HOST")
    port: int = Field(8080, alias="CEPFINDER_PORT")

    race_timeout: float = Field(1.0, gt=0, alias="CEPFINDER_RACE_TIMEOUT")
    provider_timeout: float = Field(1.0, gt=0, alias="CEPFINDER_PROVIDER_TIMEOUT")

    providers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["brasilapi", "viacep"],
        alias="CEPFINDER_PROVIDERS",
    )
    brasilapi_base_url: str = Field(
        "https://brasilapi.com.br", alias="CEPFINDER_BRASILAPI_BASE_URL"
    )
    viacep_base_url: str = Field(
        "https://viacep.com.br", alias="CEPFINDER_VIACEP_BASE_URL"
    )
    user_agent: str = Field("cepfinder/0.1", alias="CEPFINDER_USER_AGENT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("providers", mode="before")
    def _split_providers(cls, value: str | list[str]) -> list[str]:
        """Accept a comma separated string and normalize every name."""
        if isinstance(value, str):
            value = value.split(",")
        return [item.strip().lower() for item in value if item and item.strip()]

    @field_validator("brasilapi_base_url", "viacep_base_url", mode="before")
    def _strip_trailing_slash(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]

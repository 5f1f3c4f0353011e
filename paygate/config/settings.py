from typing import List

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000

    # Simulated processor behaviour; delays are given in milliseconds
    provider_failure_rate: float = Field(0.05, ge=0.0, le=1.0)
    provider_min_delay_ms: float = Field(500, ge=0)
    provider_max_delay_ms: float = Field(1500, ge=0)

    # CORS allow origins (comma-separated), "*" allows any origin
    cors_allow_origins: str = "*"

    # CLI client
    api_url: str = Field(
        "http://localhost:3000/api",
        validation_alias=AliasChoices("paygate_api_url", "api_url"),
    )
    client_timeout: float = Field(
        10.0,
        gt=0,
        validation_alias=AliasChoices("paygate_client_timeout", "client_timeout"),
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def check_delay_bounds(self):
        if self.provider_max_delay_ms < self.provider_min_delay_ms:
            raise ValueError("provider_max_delay_ms must not be below provider_min_delay_ms")
        return self

    @property
    def provider_min_delay(self) -> float:
        return self.provider_min_delay_ms / 1000

    @property
    def provider_max_delay(self) -> float:
        return self.provider_max_delay_ms / 1000

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

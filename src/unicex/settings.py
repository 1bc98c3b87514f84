from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid"}

    def as_options(self) -> dict[str, Any] | None:
        if not self.enabled or not self.url:
            return None
        return {
            "url": self.url,
            "username": self.username,
            "password": self.password.get_secret_value() if self.password else None,
        }


class HttpSettings(BaseModel):
    timeout: float = Field(default=5.0, gt=0)

    model_config = {"extra": "forbid"}


class ExchangeCredentials(BaseModel):
    api_key: SecretStr
    api_secret: SecretStr

    model_config = {"extra": "forbid"}


class ExchangeSettings(BaseModel):
    enabled: bool = True
    base_url: str | None = None
    rate_cache_seconds: float | None = Field(default=None, ge=0)
    currency_pairs_cache_seconds: float | None = Field(default=None, ge=0)
    timeout: float | None = Field(default=None, gt=0)
    credentials: ExchangeCredentials | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class Settings(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    exchanges: dict[str, ExchangeSettings] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        for exch in data.get("exchanges", {}).values():
            creds = exch.get("credentials")
            if isinstance(creds, dict):
                if "api_key" in creds:
                    creds["api_key"] = "***"
                if "api_secret" in creds:
                    creds["api_secret"] = "***"
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data

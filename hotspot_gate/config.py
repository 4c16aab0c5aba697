from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotspot_gate.schemas.enums import BindingMode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Token protocol
    HOTSPOT_SECRET: SecretStr = SecretStr("")
    BINDING_MODE: BindingMode = BindingMode.IP_AND_IDENTITY
    MAX_VALIDITY_MS: int = 10 * 60 * 60 * 1000
    ROTATE_ON_VALIDATE: bool = False
    IDENTITY_FALLBACK_TO_IP: bool = False

    # Issuer credentials
    ISSUE_SHARED_SECRET: SecretStr = SecretStr("")
    ISSUE_SECRET_HEADER: str = "X-Issue-Secret"
    ISSUE_ACCESS_KEY: SecretStr = SecretStr("")

    # Redirect targets
    APP_REDIRECT_URL: str = "https://iptvsample.vercel.app/"
    PORTAL_URL: str = "http://10.0.0.1/portal.html"

    # Network
    TRUST_FORWARDED_FOR: bool = True
    ALLOWED_IPS: str = ""
    ENFORCE_HOTSPOT_RANGE: bool = False
    HOTSPOT_IP_START: str = "10.0.0.1"
    HOTSPOT_IP_END: str = "10.0.0.254"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 20
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    RATE_LIMIT_MAX_KEYS: int = 100

    # HTTP / proxy
    REQUEST_TIMEOUT: int = 30
    MAX_RETRIES: int = 3
    BACKOFF_FACTOR: float = 0.5
    VERIFY_SSL: bool = True
    PROXY_MAX_MB: int = 50

    # Session guard
    GUARD_INTERVAL_SECONDS: float = 300.0
    GUARD_TIMEOUT_SECONDS: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    @property
    def allowed_ips(self) -> list[str]:
        return [ip.strip() for ip in self.ALLOWED_IPS.split(",") if ip.strip()]

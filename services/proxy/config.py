"""
Proxy configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator

from services.common.core.config import BaseAppConfig

_BACKEND_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class ProxyConfig(BaseAppConfig):
    """
    Configuration management for the function URL proxy.
    """

    # Backend (required from env)
    BACKEND: str = Field(..., description="Backend URL receiving invocation events")
    BACKEND_TIMEOUT: float = Field(default=30.0, gt=0, description="Backend call timeout (seconds)")
    BACKEND_MAX_CONNECTIONS: int = Field(default=100, ge=1, description="HTTP pool size")
    DISCONNECT_POLL_INTERVAL: float = Field(
        default=0.5, gt=0, description="Caller disconnect polling interval (seconds)"
    )

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8000", description="Listen address")
    GRACEFUL_SHUTDOWN_TIMEOUT: float = Field(
        default=30.0, description="Seconds to drain in-flight requests on shutdown"
    )
    LOG_CONFIG_PATH: str = Field(
        default="config/proxy_log.yaml", description="Logging dictConfig YAML path"
    )

    # Placeholder request context values (no real function URL environment exists)
    EVENT_ACCOUNT_ID: str = Field(default="anonymous")
    EVENT_API_ID: str = Field(default="xxxxxxxxxx")
    EVENT_DOMAIN_NAME: str = Field(default="xxxxxxxxxx.lambda-url.ap-northeast-1.on.aws")
    EVENT_DOMAIN_PREFIX: str = Field(default="xxxxxxxxxx")
    EVENT_REQUEST_ID: str = Field(default="xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx")
    EVENT_SOURCE_IP: str = Field(default="1.2.3.4")
    EVENT_USER_AGENT: str = Field(default="curl/7.81.0")

    @field_validator("BACKEND")
    @classmethod
    def _check_backend_url(cls, value: str) -> str:
        # Stored verbatim; str(AnyHttpUrl) would append "/" to a bare host.
        try:
            _BACKEND_URL_ADAPTER.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"BACKEND is not a valid http(s) URL: {value!r}") from e
        return value

    @property
    def backend_url(self) -> str:
        return self.BACKEND

    @property
    def bind_host(self) -> str:
        return self.UVICORN_BIND_ADDR.rsplit(":", 1)[0]

    @property
    def bind_port(self) -> int:
        return int(self.UVICORN_BIND_ADDR.rsplit(":", 1)[1])


def load_config() -> ProxyConfig:
    """
    Read the configuration once at startup.

    pydantic-settings reads environment variables during instantiation;
    a missing or invalid BACKEND fails fast.
    """
    try:
        return ProxyConfig()
    except Exception as e:
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise

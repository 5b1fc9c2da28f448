# bill_proxy/config.py
from __future__ import annotations

import os
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from bill_proxy.errors import ConfigError

# ------------------------------------------------------------------------------
# Environment keys
# ------------------------------------------------------------------------------
MODE_ENV = "MODE"
PORT_ENV = "BOHECO2_PROXY_SERVER_PORT"
API_BASE_URL_ENV = "BOHECO2_API_BASE_URL"
ALLOWED_ORIGINS_ENV = "BOHECO2_PROXY_SERVER_ALLOWED_ORIGINS"
FRONTEND_ORIGIN_ENV = "BOHECO2_FRONTEND_ORIGIN"
TIMEOUT_ENV = "BOHECO2_UPSTREAM_TIMEOUT_SECONDS"
LOG_LEVEL_ENV = "LOG_LEVEL"

PRODUCTION = "production"
DEVELOPMENT = "development"

# Development fallbacks. Production mode never uses the first three.
DEFAULTS: Dict[str, str] = {
    PORT_ENV: "3000",
    API_BASE_URL_ENV: "https://bill-inquiry-api.onrender.com",
    ALLOWED_ORIGINS_ENV: "*",
    FRONTEND_ORIGIN_ENV: "https://www.boheco2.com.ph",
    TIMEOUT_ENV: "15",
    LOG_LEVEL_ENV: "INFO",
}

REQUIRED_IN_PRODUCTION = (PORT_ENV, API_BASE_URL_ENV, ALLOWED_ORIGINS_ENV)

WILDCARD = "*"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: str = DEVELOPMENT
    port: str = DEFAULTS[PORT_ENV]
    api_base_url: str = DEFAULTS[API_BASE_URL_ENV]
    allowed_origins: str = DEFAULTS[ALLOWED_ORIGINS_ENV]
    frontend_origin: str = DEFAULTS[FRONTEND_ORIGIN_ENV]
    request_timeout: float = float(DEFAULTS[TIMEOUT_ENV])
    log_level: str = DEFAULTS[LOG_LEVEL_ENV]

    @property
    def is_production(self) -> bool:
        return self.mode == PRODUCTION

    @property
    def origin_list(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def is_origin_allowed(self, origin: str) -> bool:
        """True if the allow-list is the wildcard or names ``origin`` exactly."""
        if self.allowed_origins == WILDCARD:
            return True
        return origin in self.origin_list


def _env(env: Mapping[str, str], name: str) -> str:
    # Empty strings count as unset, in both modes.
    return (env.get(name) or "").strip()


def _with_fallback(env: Mapping[str, str], name: str) -> str:
    return _env(env, name) or DEFAULTS[name]


def _check_port(port: str) -> str:
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ConfigError(f"{PORT_ENV} must be a port number, got {port!r}")
    return port


def _check_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{TIMEOUT_ENV} must be positive, got {raw!r}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolve the proxy configuration from the environment.

    MODE=production is strict: port, upstream base URL and allowed origins
    must all be set, and every missing key is reported in one ConfigError.
    Any other mode (default: development) falls back to built-in defaults.
    """
    env = os.environ if env is None else env
    mode = _env(env, MODE_ENV) or DEVELOPMENT

    if mode == PRODUCTION:
        missing = [k for k in REQUIRED_IN_PRODUCTION if not _env(env, k)]
        if missing:
            raise ConfigError(
                f"Required environment variables must be set in production mode: {', '.join(missing)}",
                missing=missing,
            )
        port = _env(env, PORT_ENV)
        api_base_url = _env(env, API_BASE_URL_ENV)
        allowed_origins = _env(env, ALLOWED_ORIGINS_ENV)
    else:
        port = _with_fallback(env, PORT_ENV)
        api_base_url = _with_fallback(env, API_BASE_URL_ENV)
        allowed_origins = _with_fallback(env, ALLOWED_ORIGINS_ENV)

    return Settings(
        mode=mode,
        port=_check_port(port),
        api_base_url=api_base_url.rstrip("/"),
        allowed_origins=allowed_origins,
        frontend_origin=_with_fallback(env, FRONTEND_ORIGIN_ENV),
        request_timeout=_check_timeout(_with_fallback(env, TIMEOUT_ENV)),
        log_level=_with_fallback(env, LOG_LEVEL_ENV).upper(),
    )

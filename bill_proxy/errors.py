# bill_proxy/errors.py
from __future__ import annotations


class ProxyError(Exception):
    """Base class for errors raised by the bill proxy."""


class ConfigError(ProxyError):
    """Required configuration is missing or malformed. Fatal at startup."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = list(missing or [])


class SessionBootstrapError(ProxyError):
    """The upstream session-init call did not yield a usable session."""


class UpstreamError(ProxyError):
    """Transport failure while talking to the upstream bill API."""

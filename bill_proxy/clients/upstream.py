# bill_proxy/clients/upstream.py
from __future__ import annotations

import logging
import time
from typing import Optional
from urllib.parse import urlparse

import httpx

from bill_proxy.config import Settings
from bill_proxy.errors import SessionBootstrapError, UpstreamError
from bill_proxy.utils.http import (
    BILL_PATH,
    SESSION_INIT_PATH,
    frontend_headers,
    join_url,
    make_timeout,
)

log = logging.getLogger("boheco2.upstream")

TOKEN_COOKIE = "session_token"


def _domain_matches(host: str, cookie_domain: str) -> bool:
    domain = cookie_domain.lstrip(".").lower()
    return host == domain or host.endswith("." + domain)


class UpstreamSession:
    """
    Cookie-bound client for the upstream bill-inquiry API.

    One instance lives for the whole process and is shared by every inbound
    request. The cookie jar is the only mutable state: it is written by
    ``bootstrap`` (through httpx's Set-Cookie handling) and read on every
    call. Concurrent bootstraps are allowed; the last Set-Cookie wins.
    """

    def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.base_url = settings.api_base_url
        host = (urlparse(self.base_url).hostname or "").lower()
        # http.cookiejar files dotless hosts (e.g. localhost) under "<host>.local".
        self.host = host if "." in host else host + ".local"
        self.client = httpx.AsyncClient(
            timeout=make_timeout(settings.request_timeout),
            follow_redirects=True,
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self.client.cookies

    def has_valid_token(self, now: Optional[float] = None) -> bool:
        """True iff a non-expired ``session_token`` cookie applies to the upstream host."""
        now = time.time() if now is None else now
        for cookie in self.client.cookies.jar:
            if cookie.name != TOKEN_COOKIE:
                continue
            if not _domain_matches(self.host, cookie.domain):
                continue
            # A cookie without Expires never counts as a live token.
            if cookie.expires is not None and cookie.expires > now:
                return True
        return False

    async def bootstrap(self) -> None:
        """Call session-init so the upstream issues a fresh token cookie."""
        url = join_url(self.base_url, SESSION_INIT_PATH)
        try:
            r = await self.client.get(url, headers=frontend_headers(self.settings.frontend_origin))
        except httpx.HTTPError as e:
            raise SessionBootstrapError(str(e) or e.__class__.__name__) from e
        # Body is irrelevant; the cookie jar has already absorbed Set-Cookie.
        await r.aclose()
        if not r.is_success:
            raise SessionBootstrapError(f"session-init returned HTTP {r.status_code}")
        log.info("Upstream session initialised (token present: %s)", self.has_valid_token())

    async def ensure_token(self) -> bool:
        """Bootstrap if no valid token is held. Returns True when a bootstrap ran."""
        if self.has_valid_token():
            return False
        log.info("No valid session token, initialising upstream session")
        await self.bootstrap()
        return True

    async def forward_bill(self, body: bytes) -> httpx.Response:
        """POST ``body`` unchanged to the upstream bill endpoint."""
        url = join_url(self.base_url, BILL_PATH)
        headers = frontend_headers(
            self.settings.frontend_origin,
            {"Content-Type": "application/json"},
        )
        try:
            return await self.client.post(url, content=body, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or e.__class__.__name__) from e

    async def aclose(self) -> None:
        await self.client.aclose()

# Shared fixtures: a scripted upstream behind httpx.MockTransport, so tests
# exercise the real UpstreamSession and cookie jar without any network.
import http.cookiejar
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from bill_proxy.clients.upstream import UpstreamSession
from bill_proxy.config import Settings

UPSTREAM = "https://api.example.com"
UPSTREAM_HOST = "api.example.com"
FRONTEND = "https://www.boheco2.com.ph"
FUTURE = "Wed, 01 Jan 2098 00:00:00 GMT"


class FakeUpstream:
    """Records every request and answers session-init and bill calls."""

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.init_status = 200
        self.init_set_cookie: Optional[str] = f"session_token=abc; Expires={FUTURE}; Path=/"
        self.bill_status = 200
        self.bill_body = b'{"balance":42}'
        self.bill_content_type = "application/json"
        self.bill_extra_headers: Dict[str, str] = {}
        self.fail_with: Optional[Exception] = None

    @property
    def routes(self) -> List[Tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.calls]

    @property
    def bootstraps(self) -> int:
        return self.routes.count(("GET", "/api/v1/session-init"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.calls.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if request.url.path == "/api/v1/session-init":
            headers = {"Set-Cookie": self.init_set_cookie} if self.init_set_cookie else {}
            return httpx.Response(self.init_status, headers=headers, text="ok")
        if request.url.path == "/api/v1/bill":
            return httpx.Response(
                self.bill_status,
                content=self.bill_body,
                headers={"Content-Type": self.bill_content_type, **self.bill_extra_headers},
            )
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_token_cookie(value: str, expires: Optional[int], domain: str = UPSTREAM_HOST) -> http.cookiejar.Cookie:
    return http.cookiejar.Cookie(
        version=0, name="session_token", value=value,
        port=None, port_specified=False,
        domain=domain, domain_specified=False, domain_initial_dot=False,
        path="/", path_specified=True,
        secure=False, expires=expires, discard=expires is None,
        comment=None, comment_url=None, rest={},
    )


@pytest.fixture
def settings():
    return Settings(api_base_url=UPSTREAM, allowed_origins=f"{FRONTEND}, http://localhost:5173")


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def session(settings, upstream):
    return UpstreamSession(settings, transport=upstream.transport())

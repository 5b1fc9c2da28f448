# bill_proxy/utils/http.py
from __future__ import annotations

from typing import Dict, Optional

import httpx

SESSION_INIT_PATH = "/api/v1/session-init"
BILL_PATH = "/api/v1/bill"

ACCEPT_JSON = "application/json, text/plain, */*"


def join_url(base: str, path: str) -> str:
    if not base:
        return path
    if not base.endswith("/") and not path.startswith("/"):
        return f"{base}/{path}"
    if base.endswith("/") and path.startswith("/"):
        return f"{base}{path[1:]}"
    return f"{base}{path}"


def frontend_headers(origin: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Headers the upstream expects from its own web frontend."""
    base = {"Accept": ACCEPT_JSON, "Origin": origin, "Referer": origin}
    if extra:
        base.update(extra)
    return base


def make_timeout(seconds: float) -> httpx.Timeout:
    # Connect stays short; read/write/pool share the configured budget.
    return httpx.Timeout(seconds, connect=min(seconds, 4.0))

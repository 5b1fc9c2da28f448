# bill_proxy/utils/cors.py
from __future__ import annotations

from typing import Dict, Optional

from bill_proxy.config import Settings

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(settings: Settings, origin: Optional[str]) -> Dict[str, str]:
    """
    CORS headers for a response to ``origin``.

    Allow-Methods and Allow-Headers are always present; Allow-Origin only
    echoes the request origin when the allow-list accepts it.
    """
    headers = {
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }
    if origin and settings.is_origin_allowed(origin):
        headers["Access-Control-Allow-Origin"] = origin
    return headers

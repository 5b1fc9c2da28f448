"""Small helpers shared by the proxy route and the upstream client.

- http: upstream paths, URL joining and the frontend-mimicking headers
- cors: CORS response headers for the bill endpoint
"""

from .http import (
    SESSION_INIT_PATH, BILL_PATH, ACCEPT_JSON,
    join_url, frontend_headers, make_timeout,
)

from .cors import cors_headers, ALLOW_METHODS, ALLOW_HEADERS

__all__ = [
    # http
    "SESSION_INIT_PATH", "BILL_PATH", "ACCEPT_JSON",
    "join_url", "frontend_headers", "make_timeout",
    # cors
    "cors_headers", "ALLOW_METHODS", "ALLOW_HEADERS",
]

# bill_proxy/proxy.py
import logging
from typing import Dict

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from bill_proxy.clients.upstream import UpstreamSession
from bill_proxy.config import Settings
from bill_proxy.errors import SessionBootstrapError, UpstreamError
from bill_proxy.utils.cors import cors_headers
from bill_proxy.utils.http import BILL_PATH

log = logging.getLogger("boheco2.proxy")

router = APIRouter()


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _session(request: Request) -> UpstreamSession:
    return request.app.state.session


def _error(message: str, status_code: int, headers: Dict[str, str]) -> PlainTextResponse:
    # Plain text, newline terminated, CORS headers kept so the browser can read it.
    return PlainTextResponse(message + "\n", status_code=status_code, headers=headers)


@router.get("/healthz")
async def healthz(request: Request):
    return {"ok": True, "has_session": _session(request).has_valid_token()}


@router.api_route(BILL_PATH, methods=["POST", "OPTIONS"])
async def bill(request: Request):
    log.info("Received %s request to %s", request.method, BILL_PATH)
    settings = _settings(request)
    session = _session(request)

    headers = cors_headers(settings, request.headers.get("origin"))

    # Preflight never reaches the upstream
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=headers)

    try:
        await session.ensure_token()
    except SessionBootstrapError as e:
        log.error("Failed to init session: %s", e)
        return _error(f"Failed to init session: {e}", 500, headers)

    try:
        body = await request.body()
    except ClientDisconnect:
        return _error("Failed to read request body", 400, headers)

    try:
        r = await session.forward_bill(body)
    except UpstreamError as e:
        log.error("Upstream bill request failed: %s", e)
        return _error(str(e), 502, headers)

    # Relay status and body untouched; only the content type travels with them.
    content_type = r.headers.get("content-type")
    if content_type:
        headers["Content-Type"] = content_type
    return Response(content=r.content, status_code=r.status_code, headers=headers)

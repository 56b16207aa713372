"""HTTP middleware for security headers, request throttling and session enforcement."""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from weblist.api.deps import AUTH_COOKIE, client_address, get_services, set_cookie

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "; ".join((
        "default-src 'self'",
        "img-src 'self' data:",
        "style-src 'self' 'unsafe-inline'",
        "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
        "font-src 'self'",
    )),
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-Robots-Tag": "noindex, nofollow",
}

PUBLIC_PATHS = frozenset({"/login", "/api/health", "/api/ping"})
PUBLIC_PREFIXES = ("/assets/",)


async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def rate_limit(request: Request, call_next):
    """Per-address request throttle. Installed only when a request rate is configured."""
    limiter = get_services(request).request_limiter
    if limiter is not None and not limiter.allow(client_address(request)):
        return PlainTextResponse(
            "You have reached maximum request limit.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        )
    return await call_next(request)


def _is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


async def require_auth(request: Request, call_next):
    """Session cookie first, then HTTP Basic (which mints a cookie), else the login page.

    Installed only when a password is configured.
    """
    if _is_public(request.url.path):
        return await call_next(request)

    services = get_services(request)
    authenticator = services.authenticator
    if authenticator is None:
        return await call_next(request)

    if authenticator.validate(request.cookies.get(AUTH_COOKIE)):
        return await call_next(request)

    token = authenticator.try_basic_auth(request.headers.get("Authorization"))
    if token is not None:
        response = await call_next(request)
        set_cookie(response, request, services.settings, AUTH_COOKIE, token, authenticator.ttl_seconds)
        return response

    logger.debug("Unauthenticated request to %s redirected to login", request.url.path)
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)

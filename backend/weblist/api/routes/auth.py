"""Login and logout, the session cookie lifecycle."""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from weblist.api.deps import AUTH_COOKIE, clear_cookie, client_address, get_services, set_cookie
from weblist.api.templating import render
from weblist.exceptions import PathNotFoundError, RateLimitedError
from weblist.services import ServiceRegistry
from weblist.services.csrf import CSRF_COOKIE
from weblist.services.session_auth import SessionAuthenticator

logger = logging.getLogger(__name__)
router = APIRouter()


def require_authenticator(services: ServiceRegistry = Depends(get_services)) -> SessionAuthenticator:
    """Login routes exist only while a password is configured."""
    if services.authenticator is None:
        raise PathNotFoundError("not found")
    return services.authenticator


def _login_page(request: Request, services: ServiceRegistry, error: str = ""):
    """Render the form with a fresh CSRF token mirrored into a short-lived cookie."""
    token = services.csrf.issue()
    response = render(request, "login.html", services.settings, error=error, csrf_token=token)
    set_cookie(
        response, request, services.settings, CSRF_COOKIE, token,
        max_age=services.csrf.ttl_seconds, samesite="strict",
    )
    return response


@router.get("/login", include_in_schema=False)
async def login_page(
    request: Request,
    services: ServiceRegistry = Depends(get_services),
    _: SessionAuthenticator = Depends(require_authenticator),
):
    return _login_page(request, services)


@router.post("/login", include_in_schema=False)
async def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    csrf_token: str = Form(""),
    services: ServiceRegistry = Depends(get_services),
    authenticator: SessionAuthenticator = Depends(require_authenticator),
):
    """
    Check rate limit, then CSRF, then credentials.

    Failures re-render the form with a generic message; neither the CSRF
    nor the credential branch says which part was wrong.
    """
    address = client_address(request)
    if not services.limiter.allow(address):
        raise RateLimitedError("Too many login attempts, please try again later")

    if not services.csrf.verify(csrf_token, request.cookies.get(CSRF_COOKIE)):
        logger.warning("Login from %s rejected: invalid or missing CSRF token", address)
        return _login_page(request, services, "Invalid or missing CSRF token")

    if not authenticator.check_credentials(username, password):
        logger.warning("Login from %s rejected: bad credentials", address)
        return _login_page(request, services, "Invalid username or password")

    logger.info("Login succeeded from %s", address)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    clear_cookie(response, request, services.settings, CSRF_COOKIE)
    set_cookie(response, request, services.settings, AUTH_COOKIE, authenticator.issue(), authenticator.ttl_seconds)
    return response


@router.get("/logout", include_in_schema=False)
async def logout(
    request: Request,
    services: ServiceRegistry = Depends(get_services),
    _: SessionAuthenticator = Depends(require_authenticator),
):
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    clear_cookie(response, request, services.settings, AUTH_COOKIE)
    return response

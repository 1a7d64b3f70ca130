"""Authentication routes"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials

from ...application.dtos.results import ActionResult
from ...application.dtos.user_dtos import SessionDto, SignInResult, SocialSignInResult
from ...application.use_cases.sign_in_user import SignInUseCase
from ...application.use_cases.sign_out_user import SignOutUseCase
from ...application.use_cases.sign_up_user import SignUpUseCase
from ...application.use_cases.social_sign_in import SocialSignInUseCase
from ...core.config import settings
from ...core.security import generate_oauth_state
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.session import SessionIdentity
from ...infrastructure.external_services.identity_providers import IdentityProviderRegistry
from ..dependencies import (
    clear_session_cookie,
    get_broadcaster,
    get_current_session,
    get_identity_providers,
    get_unit_of_work,
    read_request_session,
    security,
    set_session_cookie,
)
from ..event_broadcaster import InvalidationBroadcaster
from ..forms import read_fields
from ..responses import apply_status

logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_MAX_AGE = 10 * 60


def _callback_uri(provider: str) -> str:
    return f"{settings.BACKEND_URL}{settings.API_V1_PREFIX}/auth/callback/{provider}"


def _sign_in_failed_redirect(message: str) -> RedirectResponse:
    query = urlencode({"error": message})
    return RedirectResponse(f"{settings.FRONTEND_URL}/login?{query}", status_code=status.HTTP_302_FOUND)


@router.post("/signup", response_model=ActionResult)
async def sign_up(
    request: Request,
    response: Response,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Create an account. Does not sign the new user in."""
    fields = await read_fields(request)
    result = await SignUpUseCase(unit_of_work, invalidator).execute(fields)
    return apply_status(response, result, status.HTTP_201_CREATED)


@router.post("/signin", response_model=SignInResult)
async def sign_in(
    request: Request,
    response: Response,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Check credentials and start a session"""
    fields = await read_fields(request)
    result = await SignInUseCase(unit_of_work).execute(fields)
    if result.success:
        set_session_cookie(response, result.token)
    return apply_status(response, result)


@router.post("/signout", response_model=ActionResult)
async def sign_out(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """End the session. Signing out without a session is not an error."""
    identity, _ = read_request_session(request, credentials)
    result = await SignOutUseCase().execute(identity)
    clear_session_cookie(response)
    return result


@router.get("/session", response_model=SessionDto)
async def current_session(identity: SessionIdentity = Depends(get_current_session)):
    """Get the identity carried by the current session"""
    return SessionDto.from_identity(identity)


@router.get("/clear-cookies")
async def clear_cookies(request: Request, response: Response):
    """Delete every cookie sent with the request"""
    cleared = list(request.cookies.keys())
    for name in cleared:
        response.delete_cookie(key=name, path="/")
    logger.info("Cleared %d cookie(s)", len(cleared))
    return {"message": "All cookies cleared", "cleared": cleared}


@router.post("/social/{provider}", response_model=SocialSignInResult)
async def social_sign_in(
    provider: str,
    response: Response,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    providers: IdentityProviderRegistry = Depends(get_identity_providers),
):
    """Get the authorization URL of a third-party identity provider"""
    state = generate_oauth_state()
    result = SocialSignInUseCase(unit_of_work, providers).start(provider, state, _callback_uri(provider))
    if result.error:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return result

    response.set_cookie(
        key=settings.OAUTH_STATE_COOKIE_NAME,
        value=state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    return result


@router.get("/callback/{provider}")
async def social_callback(
    provider: str,
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    providers: IdentityProviderRegistry = Depends(get_identity_providers),
):
    """Finish a third-party sign-in and redirect back to the frontend"""
    expected_state = request.cookies.get(settings.OAUTH_STATE_COOKIE_NAME)

    if error:
        logger.info("Provider %s returned error %s", provider, error)
        redirect = _sign_in_failed_redirect("Authentication failed")
    elif not code or not state or state != expected_state:
        logger.warning("Rejected %s callback with missing or mismatched state", provider)
        redirect = _sign_in_failed_redirect("Authentication failed")
    else:
        result = await SocialSignInUseCase(unit_of_work, providers).complete(provider, code, _callback_uri(provider))
        if result.success:
            redirect = RedirectResponse(settings.FRONTEND_URL, status_code=status.HTTP_302_FOUND)
            set_session_cookie(redirect, result.token)
        else:
            redirect = _sign_in_failed_redirect(result.message)

    redirect.delete_cookie(key=settings.OAUTH_STATE_COOKIE_NAME, path="/")
    return redirect


@router.get("/providers")
async def list_providers(providers: IdentityProviderRegistry = Depends(get_identity_providers)):
    """Get registered identity providers and whether each can be used"""
    return {
        "providers": [
            {"name": name, "configured": providers.get(name).is_configured}
            for name in providers.names()
        ]
    }

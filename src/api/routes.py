"""
API routes - Login, signup and OTP verification endpoints.

This module defines the HTTP endpoints:
- GET/POST /login - Password login
- GET/POST /signup - Begin signup, email a one-time code
- GET /otpverification, POST /verifyotp - Complete signup with the code
- GET /logout - Drop any pending signup and clear the session
- GET /about - Current user's details

Handlers are plain ``def`` so FastAPI runs their blocking database, bcrypt
and SMTP calls in its threadpool.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from src.api import pages
from src.api.dependencies import (
    PENDING_SESSION_KEY,
    PRINCIPAL_SESSION_KEY,
    get_authentication_strategy,
    get_current_principal,
    get_pending_session_key,
    get_registration_flow,
)
from src.api.models import LoginForm, OtpForm, SignupForm
from src.domain.authentication import AuthenticationStrategy
from src.domain.exceptions import (
    DuplicateAccountError,
    HashingError,
    OTPMismatchError,
    PersistenceError,
    ValidationError,
)
from src.domain.models import AuthenticatedPrincipal
from src.domain.ports import VerifyResult
from src.domain.registration import RegistrationFlow
from src.domain.session import SessionIdentity

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

GENERIC_FAILURE = "We could not complete your request. Please try again."

_OTP_MESSAGES = {
    VerifyResult.INVALID_CODE: "That code is not correct. Please try again.",
    VerifyResult.EXPIRED: "That code has expired. Please sign up again.",
    VerifyResult.LOCKED: "Too many incorrect codes. Please sign up again.",
    VerifyResult.NOT_FOUND: "No signup is waiting for a code. Please sign up first.",
}


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _log_in(request: Request, principal: AuthenticatedPrincipal) -> None:
    request.session.clear()
    request.session[PRINCIPAL_SESSION_KEY] = SessionIdentity.serialize(principal)


@router.get("/", response_class=HTMLResponse)
def landing() -> HTMLResponse:
    return HTMLResponse(pages.landing_page())


@router.get("/login", response_class=HTMLResponse)
def login_form() -> HTMLResponse:
    return HTMLResponse(pages.login_page())


@router.post("/login")
def login(
    request: Request,
    form: Annotated[LoginForm, Form()],
    strategy: AuthenticationStrategy = Depends(get_authentication_strategy),
) -> RedirectResponse:
    """
    Verify credentials and start an authenticated session.

    Every failure, including unexpected errors, redirects back to /login.
    """
    try:
        result = strategy.authenticate(form.username, form.password)
    except Exception:
        logger.exception("Unexpected error during login")
        return _redirect("/login")

    if not result.ok or result.user is None:
        return _redirect("/login")

    _log_in(request, SessionIdentity.from_user(result.user))
    return _redirect("/about")


@router.get("/signup", response_class=HTMLResponse)
def signup_form() -> HTMLResponse:
    return HTMLResponse(pages.signup_page())


@router.post("/signup", response_model=None)
def signup(
    request: Request,
    form: Annotated[SignupForm, Form()],
    flow: RegistrationFlow = Depends(get_registration_flow),
) -> RedirectResponse | HTMLResponse:
    """
    Begin signup and email a one-time code.

    An existing account redirects to /login, indistinguishable to the
    visitor from any other redirect.
    """
    session_key = get_pending_session_key(request)
    try:
        flow.begin_signup(
            session_key,
            email=form.username,
            password=form.password,
            first_name=form.firstname,
            last_name=form.lastname,
        )
    except ValidationError:
        return HTMLResponse(
            pages.signup_page("Please fill in every field."),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except DuplicateAccountError:
        return _redirect("/login")
    except (HashingError, PersistenceError):
        logger.exception("Signup failed")
        return HTMLResponse(
            pages.error_page(GENERIC_FAILURE),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _redirect("/otpverification")


@router.get("/otpverification", response_class=HTMLResponse)
def otp_form() -> HTMLResponse:
    return HTMLResponse(pages.otp_page())


@router.post("/verifyotp", response_model=None)
def verify_otp(
    request: Request,
    form: Annotated[OtpForm, Form()],
    flow: RegistrationFlow = Depends(get_registration_flow),
) -> RedirectResponse | HTMLResponse:
    """
    Check the code; on a match create the account and log the user in.
    """
    session_key = request.session.get(PENDING_SESSION_KEY)
    if not isinstance(session_key, str) or not session_key:
        return HTMLResponse(
            pages.otp_page(_OTP_MESSAGES[VerifyResult.NOT_FOUND]),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        principal = flow.verify(session_key, form.otp.strip())
    except OTPMismatchError as e:
        return HTMLResponse(
            pages.otp_page(_OTP_MESSAGES[e.result]),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except PersistenceError:
        logger.exception("Account creation failed after OTP verification")
        return HTMLResponse(
            pages.error_page(GENERIC_FAILURE),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    _log_in(request, principal)
    return _redirect("/about")


@router.get("/logout")
def logout(
    request: Request,
    flow: RegistrationFlow = Depends(get_registration_flow),
) -> RedirectResponse:
    session_key = request.session.get(PENDING_SESSION_KEY)
    if isinstance(session_key, str) and session_key:
        try:
            flow.abandon(session_key)
        except PersistenceError:
            logger.exception("Could not discard pending registration on logout")
    request.session.clear()
    return _redirect("/")



@router.get("/about", response_model=None)
def about(
    principal: AuthenticatedPrincipal | None = Depends(get_current_principal),
) -> RedirectResponse | HTMLResponse:
    if principal is None:
        return _redirect("/login")
    return HTMLResponse(pages.about_page(principal))

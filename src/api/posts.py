"""
API routes - Post listing and creation.

All endpoints require an authenticated session and redirect anonymous
visitors to /login.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from src.api import pages
from src.api.dependencies import get_current_principal, get_post_board
from src.api.models import PostForm
from src.domain.exceptions import PersistenceError, ValidationError
from src.domain.models import AuthenticatedPrincipal
from src.domain.posts import PostBoard

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])


def _login_redirect() -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


def _unavailable() -> HTMLResponse:
    return HTMLResponse(
        pages.error_page("Posts are unavailable right now."),
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@router.get("/home", response_model=None)
def home(
    principal: AuthenticatedPrincipal | None = Depends(get_current_principal),
    board: PostBoard = Depends(get_post_board),
) -> RedirectResponse | HTMLResponse:
    if principal is None:
        return _login_redirect()
    try:
        posts = board.list_all()
    except PersistenceError:
        logger.exception("Listing posts failed")
        return _unavailable()
    return HTMLResponse(pages.posts_page("Home", principal, posts))


@router.get("/mypost", response_model=None)
def my_posts(
    principal: AuthenticatedPrincipal | None = Depends(get_current_principal),
    board: PostBoard = Depends(get_post_board),
) -> RedirectResponse | HTMLResponse:
    if principal is None:
        return _login_redirect()
    try:
        posts = board.list_for(principal)
    except PersistenceError:
        logger.exception("Listing posts for user %s failed", principal.id)
        return _unavailable()
    return HTMLResponse(pages.posts_page("My posts", principal, posts))


@router.get("/create", response_model=None)
def create_form(
    principal: AuthenticatedPrincipal | None = Depends(get_current_principal),
) -> RedirectResponse | HTMLResponse:
    if principal is None:
        return _login_redirect()
    return HTMLResponse(pages.create_page(principal))


@router.post("/create", response_model=None)
def create_post(
    form: Annotated[PostForm, Form()],
    principal: AuthenticatedPrincipal | None = Depends(get_current_principal),
    board: PostBoard = Depends(get_post_board),
) -> RedirectResponse | HTMLResponse:
    if principal is None:
        return _login_redirect()
    try:
        board.create(principal, form.topic, form.thought)
    except ValidationError:
        return HTMLResponse(
            pages.create_page(principal, "Please fill in both fields."),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except PersistenceError:
        logger.exception("Creating post for user %s failed", principal.id)
        return _unavailable()
    return HTMLResponse(pages.create_page(principal, "Posted."))

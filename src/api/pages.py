"""
HTML pages.

Minimal server-rendered forms and listings. All interpolated values are
escaped.
"""

from html import escape

from src.domain.models import AuthenticatedPrincipal, Post


def _layout(title: str, body: str, principal: AuthenticatedPrincipal | None = None) -> str:
    if principal is not None:
        nav = (
            '<a href="/home">Home</a> <a href="/mypost">My posts</a> '
            '<a href="/create">New post</a> <a href="/about">About</a> '
            '<a href="/logout">Log out</a>'
        )
    else:
        nav = '<a href="/login">Log in</a> <a href="/signup">Sign up</a>'
    return (
        "<!DOCTYPE html>"
        f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head>"
        f"<body><nav>{nav}</nav><main><h1>{escape(title)}</h1>{body}</main></body></html>"
    )


def _message(message: str | None) -> str:
    return f'<p class="message">{escape(message)}</p>' if message else ""


def landing_page() -> str:
    return _layout("Welcome", "<p>Sign up or log in to share your thoughts.</p>")


def login_page(message: str | None = None) -> str:
    body = (
        _message(message)
        + '<form method="post" action="/login">'
        '<label>Email <input type="email" name="username"></label>'
        '<label>Password <input type="password" name="password"></label>'
        '<button type="submit">Log in</button></form>'
    )
    return _layout("Log in", body)


def signup_page(message: str | None = None) -> str:
    body = (
        _message(message)
        + '<form method="post" action="/signup">'
        '<label>First name <input name="firstname"></label>'
        '<label>Last name <input name="lastname"></label>'
        '<label>Email <input type="email" name="username"></label>'
        '<label>Password <input type="password" name="password"></label>'
        '<button type="submit">Sign up</button></form>'
    )
    return _layout("Sign up", body)


def otp_page(message: str | None = None) -> str:
    body = (
        _message(message)
        + "<p>Check your email for the one-time code.</p>"
        '<form method="post" action="/verifyotp">'
        '<label>Code <input name="otp" inputmode="numeric" autocomplete="one-time-code"></label>'
        '<button type="submit">Verify</button></form>'
    )
    return _layout("Verify your email", body)


def error_page(message: str) -> str:
    return _layout("Something went wrong", _message(message))


def about_page(principal: AuthenticatedPrincipal) -> str:
    body = (
        f"<p>{escape(principal.first_name)} {escape(principal.last_name)}</p>"
        f"<p>{escape(principal.email)}</p>"
    )
    return _layout("About you", body, principal)


def create_page(principal: AuthenticatedPrincipal, message: str | None = None) -> str:
    body = (
        _message(message)
        + '<form method="post" action="/create">'
        '<label>Topic <input name="topic"></label>'
        '<label>Thought <textarea name="thought"></textarea></label>'
        '<button type="submit">Post</button></form>'
    )
    return _layout("New post", body, principal)


def posts_page(title: str, principal: AuthenticatedPrincipal, posts: list[Post]) -> str:
    items = "".join(
        "<article>"
        f"<h2>{escape(post.topic)}</h2>"
        f"<p>{escape(post.thought)}</p>"
        f"<footer>{escape(post.author_name)} &middot; {post.created_at:%Y-%m-%d %H:%M}</footer>"
        "</article>"
        for post in posts
    )
    return _layout(title, items or "<p>No posts yet.</p>", principal)

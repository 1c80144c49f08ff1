"""
API form models.

Pydantic models for the HTML form bodies. Every field defaults to an empty
string so a missing field reaches the domain layer, which re-renders the
form instead of returning a 422.
"""

from pydantic import BaseModel


class LoginForm(BaseModel):
    """Login form. ``username`` carries the email address."""

    username: str = ""
    password: str = ""


class SignupForm(BaseModel):
    """Signup form. ``username`` carries the email address."""

    username: str = ""
    password: str = ""
    firstname: str = ""
    lastname: str = ""


class OtpForm(BaseModel):
    """One-time code entry form."""

    otp: str = ""


class PostForm(BaseModel):
    """New post form."""

    topic: str = ""
    thought: str = ""

"""
Unit tests for API form models.
"""

from src.api.models import LoginForm, OtpForm, PostForm, SignupForm


class TestFormDefaults:
    """Missing form fields become empty strings for domain validation."""

    def test_signup_form_defaults(self) -> None:
        form = SignupForm()
        assert (form.username, form.password, form.firstname, form.lastname) == ("", "", "", "")

    def test_login_form_defaults(self) -> None:
        assert LoginForm().model_dump() == {"username": "", "password": ""}

    def test_otp_form_keeps_leading_zeros(self) -> None:
        assert OtpForm(otp="000123").otp == "000123"

    def test_post_form_values(self) -> None:
        form = PostForm(topic="T", thought="X")
        assert (form.topic, form.thought) == ("T", "X")

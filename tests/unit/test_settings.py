"""
Unit tests for settings and dependency wiring.
"""

from unittest.mock import MagicMock

import pytest

from src.adapters.smtp.console import ConsoleMailDispatcher
from src.adapters.smtp.smtp import SmtpMailDispatcher
from src.api import dependencies
from src.config.settings import Settings, get_settings


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Clear cached settings and singletons around each test."""
    get_settings.cache_clear()
    dependencies.get_mail_dispatcher.cache_clear()
    dependencies.get_hasher.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
    dependencies.get_mail_dispatcher.cache_clear()
    dependencies.get_hasher.cache_clear()


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("OTP_LENGTH", "OTP_TTL_SECONDS", "OTP_MAX_ATTEMPTS", "BCRYPT_COST"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.otp_length == 6
        assert settings.otp_ttl_seconds is None
        assert settings.otp_max_attempts is None
        assert settings.bcrypt_cost == 10
        assert settings.session_max_age_seconds == 86400

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OTP_TTL_SECONDS", "300")
        monkeypatch.setenv("OTP_MAX_ATTEMPTS", "5")

        settings = Settings(_env_file=None)

        assert settings.otp_ttl_seconds == 300
        assert settings.otp_max_attempts == 5


class TestDependencies:
    def test_console_dispatcher_without_smtp_host(self, fresh_settings) -> None:
        fresh_settings.delenv("SMTP_HOST", raising=False)
        assert isinstance(dependencies.get_mail_dispatcher(), ConsoleMailDispatcher)

    def test_smtp_dispatcher_with_host(self, fresh_settings) -> None:
        fresh_settings.setenv("SMTP_HOST", "smtp.example.com")
        fresh_settings.setenv("SMTP_PORT", "2525")

        dispatcher = dependencies.get_mail_dispatcher()

        assert isinstance(dispatcher, SmtpMailDispatcher)
        assert (dispatcher.host, dispatcher.port) == ("smtp.example.com", 2525)

    def test_registration_flow_uses_hardening_settings(self, fresh_settings) -> None:
        settings = Settings(_env_file=None, otp_length=8, otp_ttl_seconds=60, otp_max_attempts=3)

        flow = dependencies.get_registration_flow(
            users=MagicMock(),
            pending=MagicMock(),
            mailer=MagicMock(),
            hasher=MagicMock(),
            settings=settings,
        )

        assert flow.otp_generator.length == 8
        assert flow.ttl_seconds == 60
        assert flow.max_attempts == 3

    def test_pending_session_key_is_stable(self) -> None:
        request = MagicMock()
        request.session = {}

        key = dependencies.get_pending_session_key(request)

        assert len(key) >= 32
        assert dependencies.get_pending_session_key(request) == key

"""Mail adapters - OTP delivery implementations."""

from .console import ConsoleMailDispatcher
from .smtp import SmtpMailDispatcher

__all__ = ["ConsoleMailDispatcher", "SmtpMailDispatcher"]

"""
One-time code generation.
"""

import secrets
from dataclasses import dataclass

DIGITS = "0123456789"


@dataclass
class OTPGenerator:
    """Generates numeric one-time codes from the secrets module."""

    length: int = 6

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("OTP length must be at least 1")

    def generate(self, length: int | None = None) -> str:
        """
        Generate a numeric code.

        Returns a string to preserve leading zeros. Codes are not unique
        across calls; each one is scoped to a single pending registration.
        """
        size = self.length if length is None else length
        if size < 1:
            raise ValueError("OTP length must be at least 1")
        return "".join(secrets.choice(DIGITS) for _ in range(size))

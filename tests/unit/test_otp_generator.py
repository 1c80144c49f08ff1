"""
Unit tests for OTPGenerator.
"""

import re

import pytest

from src.domain.otp import OTPGenerator


class TestGenerate:
    """Tests for generate()."""

    def test_default_length_is_6_digits(self) -> None:
        code = OTPGenerator().generate()
        assert re.fullmatch(r"\d{6}", code)

    def test_configured_length(self) -> None:
        assert len(OTPGenerator(length=8).generate()) == 8

    def test_length_argument_overrides_default(self) -> None:
        assert re.fullmatch(r"\d{4}", OTPGenerator().generate(4))

    def test_code_is_string(self) -> None:
        """String type preserves leading zeros."""
        assert isinstance(OTPGenerator().generate(), str)

    def test_codes_vary(self) -> None:
        """Codes are not always the same (probability of 20 equal codes is 1e-95)."""
        generator = OTPGenerator()
        assert len({generator.generate() for _ in range(20)}) >= 2

    @pytest.mark.parametrize("length", [0, -1])
    def test_invalid_length_rejected(self, length: int) -> None:
        with pytest.raises(ValueError):
            OTPGenerator().generate(length)
        with pytest.raises(ValueError):
            OTPGenerator(length=length)

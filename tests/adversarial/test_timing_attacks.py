"""
Adversarial tests for timing oracle attack prevention on login.

Verifies that "no such user" and "wrong password" take statistically
similar time, so an attacker cannot enumerate registered emails by
measuring login latency. Both paths run one full bcrypt check.
"""

import statistics
import time

import pytest

from src.domain.authentication import AuthenticationStrategy
from src.domain.credentials import CredentialHasher
from src.domain.models import NewUser

pytestmark = pytest.mark.adversarial


class TestLoginTiming:
    """Unknown email and wrong password are indistinguishable by timing."""

    ITERATIONS = 15

    # Maximum allowed difference in mean times
    MAX_VARIANCE_RATIO = 0.20

    @pytest.fixture
    def timing_strategy(self, users) -> AuthenticationStrategy:
        # Production cost so bcrypt dominates the measurement
        hasher = CredentialHasher(cost=10)
        users.create(NewUser("A", "B", "a@x.com", hasher.hash("secret1")))
        return AuthenticationStrategy(users=users, hasher=hasher)

    def measure(self, strategy: AuthenticationStrategy, email: str, password: str) -> list[float]:
        times = []
        for _ in range(self.ITERATIONS):
            start = time.perf_counter()
            result = strategy.authenticate(email, password)
            times.append(time.perf_counter() - start)
            assert result.ok is False
        return times

    def test_unknown_email_vs_wrong_password(self, timing_strategy: AuthenticationStrategy) -> None:
        unknown = self.measure(timing_strategy, "nobody@x.com", "secret1")
        wrong = self.measure(timing_strategy, "a@x.com", "wrong-password")

        mean_unknown = statistics.mean(unknown)
        mean_wrong = statistics.mean(wrong)
        ratio = abs(mean_unknown - mean_wrong) / max(mean_unknown, mean_wrong)

        assert ratio < self.MAX_VARIANCE_RATIO, (
            f"Timing difference too large: {ratio:.1%} "
            f"(unknown={mean_unknown:.4f}s, wrong={mean_wrong:.4f}s)"
        )

"""
Exception types raised by the cryptosystems package.

All errors derive from CryptoError. The parameter and inverse errors also
derive from ValueError so callers catching the built-in keep working.
"""


class CryptoError(Exception):
    """Base class for all cryptosystem failures."""


class NoInverseError(CryptoError, ValueError):
    """Raised when a modular inverse does not exist (gcd(a, n) != 1)."""

    def __init__(self, a: int, n: int):
        self.a = a
        self.n = n
        super().__init__(f"No modular inverse for {a} modulo {n}")


class InvalidParameterError(CryptoError, ValueError):
    """Raised for bit lengths, thresholds or plaintexts out of range."""


class InsufficientSharesError(CryptoError, ValueError):
    """Raised when fewer than t distinct shares reach reconstruction."""

    def __init__(self, needed: int, got: int):
        self.needed = needed
        self.got = got
        super().__init__(f"Need at least {needed} distinct shares, got {got}")


class AttemptsExceededError(CryptoError, RuntimeError):
    """Raised when a bounded resampling loop runs out of attempts."""

    def __init__(self, what: str, attempts: int):
        self.what = what
        self.attempts = attempts
        super().__init__(f"Gave up on {what} after {attempts} attempts")

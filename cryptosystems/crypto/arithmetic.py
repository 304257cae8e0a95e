"""
Big-integer arithmetic provider.

Supplies the number-theoretic services the cryptosystems are built on:
- Probable prime generation and Miller-Rabin primality testing
- Modular exponentiation (negative exponents allowed) and modular inverse
- gcd / lcm
- Cryptographically secure random integers in a closed range

Randomness comes from the `secrets` module throughout.
"""

import math
import secrets
from typing import Optional, Tuple

from .errors import AttemptsExceededError, InvalidParameterError, NoInverseError


# Miller-Rabin rounds used when the caller does not ask for more
DEFAULT_ROUNDS = 16

# Prime search gives up after this many candidates per bit of length
PRIME_ATTEMPTS_PER_BIT = 64

_SMALL_PRIMES = (
    3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71,
    73, 79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137, 139, 149, 151,
    157, 163, 167, 173, 179, 181, 191, 193, 197, 199, 211, 223, 227, 229, 233,
    239, 241, 251,
)


def is_probable_prime(n: int, rounds: int = DEFAULT_ROUNDS) -> bool:
    """
    Miller-Rabin primality test.

    Args:
        n: Number to test for primality
        rounds: Number of random witnesses (higher = more accurate)

    Returns:
        True if probably prime, False if composite
    """
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    for sp in _SMALL_PRIMES:
        if n == sp:
            return True
        if n % sp == 0:
            return False

    # Write n-1 as 2^r * d
    r, d = 0, n - 1
    while d % 2 == 0:
        r += 1
        d //= 2

    # Witness loop
    for _ in range(rounds):
        a = rand_between(2, n - 2)
        x = pow(a, d, n)

        if x == 1 or x == n - 1:
            continue

        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_prime(
    bits: int,
    rounds: int = DEFAULT_ROUNDS,
    max_attempts: Optional[int] = None
) -> int:
    """
    Generate a probable prime with exactly `bits` bits.

    Candidates have their top bit forced so the bit length is exact; every
    candidate is run through the primality test before it is accepted.

    Raises:
        InvalidParameterError: if bits < 2
        AttemptsExceededError: if no prime is found within max_attempts
    """
    if bits < 2:
        raise InvalidParameterError(f"Prime bit length must be at least 2, got {bits}")
    if max_attempts is None:
        max_attempts = PRIME_ATTEMPTS_PER_BIT * bits

    for _ in range(max_attempts):
        candidate = secrets.randbits(bits)
        candidate |= (1 << bits - 1) | 1  # Ensure correct bit length and odd
        if is_probable_prime(candidate, rounds):
            return candidate
    raise AttemptsExceededError(f"{bits}-bit prime search", max_attempts)


def _extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """Iterative extended Euclid: returns (g, x, y) with a*x + b*y = g."""
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y
    return old_r, old_x, old_y


def mod_inv(a: int, n: int) -> int:
    """
    Compute the modular multiplicative inverse of a modulo n.

    Raises:
        NoInverseError: if gcd(a, n) != 1
    """
    if n == 1:
        return 0
    g, x, _ = _extended_gcd(a % n, n)
    if g != 1:
        raise NoInverseError(a, n)
    return x % n


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """base^exponent mod modulus; a negative exponent inverts base first."""
    if exponent < 0:
        return pow(mod_inv(base, modulus), -exponent, modulus)
    return pow(base, exponent, modulus)


def gcd(a: int, b: int) -> int:
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """Compute least common multiple of a and b."""
    return abs(a * b) // math.gcd(a, b)


def rand_between(low: int, high: int) -> int:
    """
    Cryptographically secure uniform integer in [low, high].

    Raises:
        InvalidParameterError: if high < low
    """
    if high < low:
        raise InvalidParameterError(f"Empty range [{low}, {high}]")
    return low + secrets.randbelow(high - low + 1)

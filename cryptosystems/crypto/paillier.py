"""
Paillier Cryptosystem Implementation.

Implements the Paillier public-key cryptosystem supporting:
- Randomized encryption of integers in Z_n
- Homomorphic addition of ciphertexts
- Scalar multiplication of ciphertexts
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .arithmetic import (
    DEFAULT_ROUNDS,
    gcd,
    generate_prime,
    lcm,
    mod_inv,
    mod_pow,
    rand_between,
)
from .errors import AttemptsExceededError, InvalidParameterError, NoInverseError

logger = logging.getLogger(__name__)

GENERATOR_RANDOM = 'random'
GENERATOR_SIMPLE = 'simple'

DEFAULT_KEYGEN_ATTEMPTS = 16
DEFAULT_NONCE_ATTEMPTS = 1024


def _L(x: int, n: int) -> int:
    """L function: L(x) = (x - 1) / n."""
    return (x - 1) // n


@dataclass(frozen=True)
class PaillierPublicKey:
    """Paillier public key for encryption and homomorphic operations."""

    n: int
    n2: int
    g: int
    nonce_attempts: int = field(default=DEFAULT_NONCE_ATTEMPTS, compare=False, repr=False)

    def get_n(self) -> int:
        return self.n

    def get_n2(self) -> int:
        return self.n2

    def get_g(self) -> int:
        return self.g

    def _random_nonce(self) -> int:
        for _ in range(self.nonce_attempts):
            r = rand_between(1, self.n2 - 1)
            if gcd(r, self.n) == 1:
                return r
        raise AttemptsExceededError("Paillier nonce search", self.nonce_attempts)

    def encrypt(self, m: int) -> int:
        """
        Encrypt a plaintext message with a fresh random nonce.

        Args:
            m: Message to encrypt (must be in Z_n)

        Returns:
            Ciphertext c = g^m * r^n mod n^2

        Raises:
            InvalidParameterError: if m is outside [0, n)
        """
        if not 0 <= m < self.n:
            raise InvalidParameterError(f"Plaintext must lie in [0, n), got {m}")

        r = self._random_nonce()
        return (mod_pow(self.g, m, self.n2) * mod_pow(r, self.n, self.n2)) % self.n2

    def add(self, cs: Iterable[int]) -> int:
        """
        Homomorphic addition: Dec(c_1 * ... * c_k) = m_1 + ... + m_k mod n.

        Args:
            cs: Ciphertexts to combine

        Returns:
            Encrypted sum
        """
        ret = 1
        for c in cs:
            ret = (ret * c) % self.n2
        return ret

    def multiply(self, c: int, m: int) -> int:
        """
        Scalar multiplication: Dec(c^m) = m * Dec(c) mod n.

        Args:
            c: Ciphertext
            m: Plaintext scalar

        Returns:
            Encrypted product
        """
        return mod_pow(c, m, self.n2)


@dataclass(frozen=True)
class PaillierPrivateKey:
    """Paillier private key for decryption."""

    lam: int
    mu: int
    pub_key: PaillierPublicKey

    def get_lambda(self) -> int:
        return self.lam

    def get_mu(self) -> int:
        return self.mu

    def get_pub_key(self) -> PaillierPublicKey:
        return self.pub_key

    def decrypt(self, c: int) -> int:
        """
        Decrypt a ciphertext.

        Args:
            c: Encrypted message

        Returns:
            Plaintext m = L(c^lambda mod n^2) * mu mod n
        """
        n = self.pub_key.n
        return (_L(mod_pow(c, self.lam, self.pub_key.n2), n) * self.mu) % n


def generate_paillier_keys(
    bits: int = 2048,
    generator: str = GENERATOR_RANDOM,
    max_attempts: int = DEFAULT_KEYGEN_ATTEMPTS,
    rounds: int = DEFAULT_ROUNDS
) -> PaillierPrivateKey:
    """
    Generate a new Paillier key pair.

    The primes are split unevenly: q has bits//2 + 1 bits and p has bits//2.
    With generator='random' g is drawn from [1, n^2) and generation restarts
    whenever L(g^lambda mod n^2) is not invertible modulo n; with
    generator='simple' g = n + 1, which is always valid.

    Args:
        bits: Nominal bit length of n
        generator: 'random' or 'simple'
        max_attempts: Number of full generation attempts before giving up
        rounds: Miller-Rabin rounds for prime generation

    Returns:
        PaillierPrivateKey holding its PaillierPublicKey

    Raises:
        InvalidParameterError: if bits < 4 or the generator mode is unknown
        AttemptsExceededError: if every attempt failed
    """
    if bits < 4:
        raise InvalidParameterError(f"Paillier key size must be at least 4 bits, got {bits}")
    if generator not in (GENERATOR_RANDOM, GENERATOR_SIMPLE):
        raise InvalidParameterError(f"Unknown generator mode: {generator}")

    for attempt in range(1, max_attempts + 1):
        q = generate_prime(bits // 2 + 1, rounds)
        p = generate_prime(bits // 2, rounds)

        n = p * q
        n2 = n * n
        lam = lcm(p - 1, q - 1)
        if gcd(n, (p - 1) * (q - 1)) != 1:
            logger.debug(f"gcd(n, phi) != 1 (attempt {attempt}/{max_attempts}), regenerating")
            continue

        if generator == GENERATOR_SIMPLE:
            g = n + 1
        else:
            g = rand_between(1, n2 - 1)
            if gcd(g, n) != 1:
                continue

        try:
            mu = mod_inv(_L(mod_pow(g, lam, n2), n), n)
        except NoInverseError:
            logger.debug(f"Generator not usable (attempt {attempt}/{max_attempts}), regenerating")
            continue

        logger.info(f"Generated Paillier key with {n.bit_length()}-bit modulus")
        return PaillierPrivateKey(lam, mu, PaillierPublicKey(n, n2, g))

    raise AttemptsExceededError("Paillier key generation", max_attempts)


if __name__ == '__main__':
    # Basic functionality test
    print("Testing Paillier encryption...")

    sk = generate_paillier_keys(512)
    pk = sk.pub_key

    # Test encryption/decryption
    m1, m2 = 42, 58
    c1 = pk.encrypt(m1)
    c2 = pk.encrypt(m2)

    assert sk.decrypt(c1) == m1, "Decryption failed"
    assert sk.decrypt(c2) == m2, "Decryption failed"

    # Test homomorphic addition
    c_sum = pk.add([c1, c2])
    assert sk.decrypt(c_sum) == m1 + m2, "Homomorphic addition failed"

    # Test scalar multiplication
    scalar = 3
    c_mult = pk.multiply(c1, scalar)
    assert sk.decrypt(c_mult) == m1 * scalar, "Scalar multiplication failed"

    print("All tests passed!")

"""
RSA Cryptosystem Implementation.

Implements the textbook RSA trapdoor permutation supporting:
- Encryption / decryption
- Signing / verification
- Blinding and unblinding for blind signatures

Keys are immutable values; operations are plain modular exponentiations
with no padding.
"""

import logging
from dataclasses import dataclass

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

# Bounds for the resampling loops in key generation
DEFAULT_KEYGEN_ATTEMPTS = 16
DEFAULT_EXPONENT_ATTEMPTS = 1024


@dataclass(frozen=True)
class RSAPublicKey:
    """RSA public key (e, n) for encryption, verification and blinding."""

    e: int
    n: int

    def get_exp_e(self) -> int:
        return self.e

    def get_mod_n(self) -> int:
        return self.n

    def encrypt(self, m: int) -> int:
        """
        Encrypt a plaintext message.

        Args:
            m: Message to encrypt (must be in Z_n)

        Returns:
            Ciphertext c = m^e mod n
        """
        return mod_pow(m, self.e, self.n)

    def verify(self, s: int) -> int:
        """Recover the signed value h = s^e mod n from a signature."""
        return mod_pow(s, self.e, self.n)

    def blind(self, r: int, m: int) -> int:
        """
        Blind a message before sending it to the signer.

        Args:
            r: Blinding factor, coprime to n
            m: Message to hide

        Returns:
            Blinded message m * r^e mod n
        """
        return (m * mod_pow(r, self.e, self.n)) % self.n

    def unblind(self, r: int, blind_signature: int) -> int:
        """
        Remove the blinding factor from a signature on a blinded message.

        Args:
            r: Blinding factor used in blind()
            blind_signature: Signer's signature on the blinded message

        Returns:
            Signature on the original message, sigma' * r^-1 mod n

        Raises:
            NoInverseError: if r is not invertible modulo n
        """
        return (blind_signature * mod_inv(r, self.n)) % self.n

    def random_blinding_factor(self, max_attempts: int = DEFAULT_EXPONENT_ATTEMPTS) -> int:
        """Draw a random r in [2, n) coprime to n."""
        for _ in range(max_attempts):
            r = rand_between(2, self.n - 1)
            if gcd(r, self.n) == 1:
                return r
        raise AttemptsExceededError("blinding factor search", max_attempts)


@dataclass(frozen=True)
class RSAPrivateKey:
    """RSA private key for decryption and signing."""

    d: int
    pub_key: RSAPublicKey

    def get_exp_d(self) -> int:
        return self.d

    def get_rsa_public_key(self) -> RSAPublicKey:
        return self.pub_key

    def decrypt(self, c: int) -> int:
        """
        Decrypt a ciphertext.

        Args:
            c: Encrypted message

        Returns:
            Plaintext m = c^d mod n
        """
        return mod_pow(c, self.d, self.pub_key.n)

    def sign(self, h: int) -> int:
        """Sign a (hashed) value: s = h^d mod n."""
        return mod_pow(h, self.d, self.pub_key.n)


def _generate_exponent(lam: int, max_attempts: int) -> int:
    """Draw e in [1, lam) until gcd(e, lam) == 1."""
    for attempt in range(1, max_attempts + 1):
        e = rand_between(1, lam - 1)
        if gcd(e, lam) == 1:
            logger.debug(f"Public exponent found after {attempt} draw(s)")
            return e
    raise AttemptsExceededError("public exponent search", max_attempts)


def generate_rsa_keys(
    bits: int = 2048,
    max_attempts: int = DEFAULT_KEYGEN_ATTEMPTS,
    exponent_attempts: int = DEFAULT_EXPONENT_ATTEMPTS,
    rounds: int = DEFAULT_ROUNDS
) -> RSAPrivateKey:
    """
    Generate a new RSA key pair.

    Both primes have `bits` bits, so the modulus has about 2 * bits bits.
    The public exponent is chosen coprime to lambda = lcm(p-1, q-1) while
    the private exponent is inverted modulo phi = (p-1)(q-1); when that
    inverse does not exist generation restarts with fresh primes.

    Args:
        bits: Bit length of each prime
        max_attempts: Number of full generation attempts before giving up
        exponent_attempts: Draws allowed for the public exponent
        rounds: Miller-Rabin rounds for prime generation

    Returns:
        RSAPrivateKey holding its RSAPublicKey

    Raises:
        InvalidParameterError: if bits < 3
        AttemptsExceededError: if every attempt failed
    """
    # The only 2-bit prime is 3, so p and q need at least 3 bits to differ
    if bits < 3:
        raise InvalidParameterError(f"RSA prime bit length must be at least 3, got {bits}")

    for attempt in range(1, max_attempts + 1):
        p = generate_prime(bits, rounds)
        q = generate_prime(bits, rounds)
        if q == p:
            continue

        n = p * q
        phi = (p - 1) * (q - 1)
        lam = lcm(p - 1, q - 1)

        e = _generate_exponent(lam, exponent_attempts)
        try:
            d = mod_inv(e, phi)
        except NoInverseError:
            logger.debug(f"e has no inverse modulo phi (attempt {attempt}/{max_attempts}), regenerating")
            continue

        logger.info(f"Generated RSA key with {n.bit_length()}-bit modulus")
        return RSAPrivateKey(d, RSAPublicKey(e, n))

    raise AttemptsExceededError("RSA key generation", max_attempts)


if __name__ == '__main__':
    # Basic functionality test
    print("Testing RSA encryption...")

    priv = generate_rsa_keys(256)
    pub = priv.pub_key

    m = 2
    assert priv.decrypt(pub.encrypt(m)) == m, "Decryption failed"
    assert pub.verify(priv.sign(m)) == m, "Verification failed"

    r = pub.random_blinding_factor()
    blind_sig = priv.sign(pub.blind(r, m))
    assert pub.unblind(r, blind_sig) == priv.sign(m), "Unblinding failed"

    print("All tests passed!")

"""
Shamir Secret Sharing Implementation.

Implements (T, N)-threshold secret sharing scheme where:
- A secret is split into N shares over a random prime field Z_p
- Any T shares reconstruct the secret by Lagrange interpolation at x = 0
- Fewer than T shares reveal nothing about the secret (with full-range
  coefficients)

Array helpers share every element of a numpy array under a single prime so
that share vectors can be combined element-wise.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .arithmetic import DEFAULT_ROUNDS, generate_prime, mod_inv, rand_between
from .errors import InsufficientSharesError, InvalidParameterError

logger = logging.getLogger(__name__)

# Small coefficient range kept for compatibility with older share sets
REFERENCE_COEFF_MIN = 1
REFERENCE_COEFF_MAX = 1000


class CoefficientMode(Enum):
    """How the random polynomial coefficients are drawn."""
    FULL = 'full'            # uniform in [0, p)
    REFERENCE = 'reference'  # uniform in [1, 1000]


@dataclass(frozen=True)
class SharedKey:
    """
    One share of a secret.

    Attributes:
        s: Share value f(index) mod p
        index: 1-based evaluation point of the share
        t: Threshold needed for reconstruction
        p: Prime field modulus
    """

    s: int
    index: int
    t: int
    p: int

    def get_shared_key_s(self) -> int:
        return self.s

    def get_position(self) -> int:
        return self.index

    def get_threshold(self) -> int:
        return self.t

    def get_mod_p(self) -> int:
        return self.p


def _check_threshold(t: int, n: int):
    if n < 1:
        raise InvalidParameterError(f"Share count must be at least 1, got {n}")
    if t < 1:
        raise InvalidParameterError(f"Threshold must be at least 1, got {t}")
    if t > n:
        raise InvalidParameterError("Threshold cannot exceed number of shares")


def _check_field(p: int, n: int):
    # Share indices 1..n must all be nonzero in Z_p
    if p <= n:
        raise InvalidParameterError(f"Prime modulus {p} must exceed the share count {n}")


def validate_parameters(t: int, n: int, p: int):
    """Check a threshold, share count and prime modulus for a sharing."""
    _check_threshold(t, n)
    _check_field(p, n)


def _check_field_bits(bits: int, n: int):
    # Every bits-bit prime is above 2^(bits-1)
    if bits < 2:
        raise InvalidParameterError(f"Prime bit length must be at least 2, got {bits}")
    if 1 << (bits - 1) < n:
        raise InvalidParameterError(f"A {bits}-bit prime field is too small for {n} shares")


def _generate_polynomial_coeffs(secret: int, t: int, p: int, mode: CoefficientMode) -> List[int]:
    """
    Generate random polynomial coefficients.

    Polynomial: f(x) = secret + a_1*x + a_2*x^2 + ... + a_{T-1}*x^{T-1}
    """
    coeffs = [secret]
    for _ in range(t - 1):
        if mode is CoefficientMode.REFERENCE:
            coeffs.append(rand_between(REFERENCE_COEFF_MIN, REFERENCE_COEFF_MAX))
        else:
            coeffs.append(rand_between(0, p - 1))
    return coeffs


def _evaluate_polynomial(coeffs: List[int], x: int, p: int) -> int:
    """Evaluate polynomial at point x using Horner's method."""
    result = 0
    for coeff in reversed(coeffs):
        result = (result * x + coeff) % p
    return result


def split_secret(
    secret: int,
    t: int,
    n: int,
    p: int,
    coefficients: CoefficientMode = CoefficientMode.FULL
) -> List[SharedKey]:
    """
    Split a secret into n shares over an existing prime field Z_p.

    Args:
        secret: Secret value; reduced modulo p
        t: Threshold
        n: Number of shares
        p: Prime modulus
        coefficients: Coefficient sampling mode

    Returns:
        Shares with indices 1..n

    Raises:
        InvalidParameterError: for a bad threshold or when p <= n
    """
    validate_parameters(t, n, p)
    if not 0 <= secret < p:
        logger.warning("Secret is outside [0, p) and will be reduced modulo p")

    coeffs = _generate_polynomial_coeffs(secret, t, p, coefficients)
    return [SharedKey(_evaluate_polynomial(coeffs, x, p), x, t, p) for x in range(1, n + 1)]


def gen_shared_keys(
    secret: int,
    t: int,
    n: int,
    bits: int,
    coefficients: CoefficientMode = CoefficientMode.FULL,
    rounds: int = DEFAULT_ROUNDS
) -> List[SharedKey]:
    """
    Split a secret into n threshold shares over a fresh random prime field.

    Args:
        secret: The secret value to share
        t: Minimum shares for reconstruction
        n: Total number of shares
        bits: Bit length of the prime modulus
        coefficients: FULL (uniform in Z_p) or REFERENCE ([1, 1000])
        rounds: Miller-Rabin rounds for prime generation

    Returns:
        List of n SharedKey

    Raises:
        InvalidParameterError: if t < 1, n < 1 or t > n, or if a bits-bit
            prime can be no larger than n
    """
    _check_threshold(t, n)
    _check_field_bits(bits, n)
    p = generate_prime(bits, rounds)
    logger.debug(f"Sharing secret with t={t}, n={n} over a {bits}-bit prime field")
    return split_secret(secret, t, n, p, coefficients)


def _validate_shares(shares: Sequence[SharedKey]) -> Tuple[int, int]:
    t, p = shares[0].t, shares[0].p
    seen = set()
    for share in shares:
        if share.t != t or share.p != p:
            raise InvalidParameterError("Shares come from different sharings (threshold or modulus differ)")
        if share.index % p == 0:
            raise InvalidParameterError(f"Invalid share index {share.index}")
        if share.index in seen:
            raise InvalidParameterError(f"Duplicate share index {share.index}")
        seen.add(share.index)
    if len(seen) < t:
        raise InsufficientSharesError(t, len(seen))
    return t, p


def lagrange_interpolation(shares: Sequence[SharedKey], strict: bool = True) -> int:
    """
    Reconstruct the secret from shares using Lagrange interpolation at x=0.

    The first t shares are used, with t read from shares[0]. Pairs of shares
    with equal index contribute nothing to each other's basis product.

    Args:
        shares: Shares from a single sharing
        strict: Validate the shares first (consistent t and p, distinct
            indices, at least t of them); False skips these checks and
            trusts the caller

    Returns:
        Reconstructed secret f(0) mod p

    Raises:
        InsufficientSharesError: if fewer than t (distinct) shares are given
        InvalidParameterError: in strict mode, for inconsistent or duplicate shares
    """
    if not shares:
        raise InsufficientSharesError(1, 0)

    if strict:
        t, p = _validate_shares(shares)
    else:
        t, p = shares[0].t, shares[0].p
        if len(shares) < t:
            raise InsufficientSharesError(t, len(shares))

    used = shares[:t]
    secret = 0
    for share_i in used:
        product = 1
        for share_j in used:
            if share_i.index != share_j.index:
                denominator = mod_inv(share_j.index - share_i.index, p)
                product = (product * share_j.index * denominator) % p
        secret = (secret + share_i.s * product) % p

    return secret


def add_shares(a: SharedKey, b: SharedKey) -> SharedKey:
    """
    Add two shares held at the same index (homomorphic property).

    The result reconstructs to the sum of the two secrets modulo p.
    """
    if a.p != b.p or a.t != b.t or a.index != b.index:
        raise InvalidParameterError("Only shares with the same modulus, threshold and index can be added")
    return SharedKey((a.s + b.s) % a.p, a.index, a.t, a.p)


def share_array(
    values: np.ndarray,
    t: int,
    n: int,
    bits: Optional[int] = None,
    p: Optional[int] = None,
    coefficients: CoefficientMode = CoefficientMode.FULL
) -> Tuple[List[np.ndarray], int]:
    """
    Share an integer array element-wise under one prime.

    Args:
        values: Integer numpy array to share
        t: Threshold
        n: Number of shares
        bits: Bit length of a fresh prime (ignored when p is given)
        p: Existing prime modulus
        coefficients: Coefficient sampling mode

    Returns:
        (share_arrays, p): share_arrays[k] holds the values of share index k+1
    """
    _check_threshold(t, n)
    if p is None:
        if bits is None:
            raise InvalidParameterError("Either bits or p must be given")
        _check_field_bits(bits, n)
        p = generate_prime(bits)
    _check_field(p, n)

    values = np.asarray(values)
    original_shape = values.shape
    flat = values.flatten()

    share_arrays = [np.empty(len(flat), dtype=object) for _ in range(n)]
    for idx, val in enumerate(flat):
        shares = split_secret(int(val) % p, t, n, p, coefficients)
        for k, share in enumerate(shares):
            share_arrays[k][idx] = share.s

    return [sa.reshape(original_shape) for sa in share_arrays], p


def reconstruct_array(
    share_arrays: Sequence[np.ndarray],
    indices: Sequence[int],
    t: int,
    p: int
) -> np.ndarray:
    """
    Reconstruct an array from share arrays.

    Args:
        share_arrays: At least t share arrays
        indices: Share index of each array (1-based)
        t: Threshold
        p: Prime modulus

    Returns:
        Reconstructed array (object dtype, Python ints)
    """
    if len(share_arrays) != len(indices):
        raise InvalidParameterError("Each share array needs exactly one index")
    if len(share_arrays) < t:
        raise InsufficientSharesError(t, len(share_arrays))

    original_shape = np.asarray(share_arrays[0]).shape
    flats = [np.asarray(sa, dtype=object).flatten() for sa in share_arrays]

    result = np.empty(len(flats[0]), dtype=object)
    for idx in range(len(result)):
        shares = [SharedKey(int(flat[idx]), index, t, p) for flat, index in zip(flats, indices)]
        result[idx] = lagrange_interpolation(shares)

    return result.reshape(original_shape)


def quantize_to_field(data: np.ndarray, prime: int, scale: int = 16) -> np.ndarray:
    """
    Quantize real-valued data to finite field elements.

    Args:
        data: Real-valued numpy array
        prime: Prime modulus for the field
        scale: Number of bits for scaling (precision)

    Returns:
        Quantized data as Python ints in Z_p (object dtype)
    """
    scaled = np.round(np.asarray(data, dtype=np.float64) * (2 ** scale)).astype(np.int64)

    # Map negative values to field
    to_field = np.vectorize(lambda v: int(v) % prime, otypes=[object])
    return to_field(scaled)


def dequantize_from_field(data: np.ndarray, prime: int, scale: int = 16) -> np.ndarray:
    """
    Convert field elements back to real values.

    Values above p/2 are read as negative numbers.
    """
    half_prime = prime // 2
    to_signed = np.vectorize(
        lambda v: int(v) - prime if int(v) > half_prime else int(v),
        otypes=[object]
    )
    signed = to_signed(np.asarray(data, dtype=object))
    return signed.astype(np.float64) / (2 ** scale)


class ShamirSecretSharing:
    """
    Shamir (T, N)-threshold secret sharing with fixed parameters.

    Attributes:
        threshold: Minimum number of shares needed for reconstruction
        num_shares: Total number of shares to generate
        bits: Bit length of the prime modulus drawn per sharing
        coefficients: Coefficient sampling mode
        strict: Validate shares on reconstruction
    """

    def __init__(
        self,
        threshold: int,
        num_shares: int,
        bits: int = 256,
        coefficients: CoefficientMode = CoefficientMode.FULL,
        strict: bool = True
    ):
        _check_threshold(threshold, num_shares)
        _check_field_bits(bits, num_shares)

        self.threshold = threshold
        self.num_shares = num_shares
        self.bits = bits
        self.coefficients = coefficients
        self.strict = strict

    def share_secret(self, secret: int) -> List[SharedKey]:
        """Split a secret into N shares over a fresh prime."""
        return gen_shared_keys(secret, self.threshold, self.num_shares, self.bits, self.coefficients)

    def reconstruct_secret(self, shares: Sequence[SharedKey]) -> int:
        """Reconstruct secret from T or more shares."""
        return lagrange_interpolation(shares, strict=self.strict)

    def share_array(self, values: np.ndarray, p: Optional[int] = None) -> Tuple[List[np.ndarray], int]:
        """Share an integer array element-wise."""
        return share_array(values, self.threshold, self.num_shares, self.bits, p, self.coefficients)

    def reconstruct_array(
        self,
        share_arrays: Sequence[np.ndarray],
        indices: Sequence[int],
        p: int
    ) -> np.ndarray:
        """Reconstruct an array from T or more share arrays."""
        return reconstruct_array(share_arrays, indices, self.threshold, p)


if __name__ == '__main__':
    # Basic functionality test
    print("Testing Shamir Secret Sharing...")

    shares = gen_shared_keys(11, 3, 5, 256)
    assert lagrange_interpolation(shares) == 11, "Secret reconstruction failed"

    # Test with different subset of shares
    assert lagrange_interpolation([shares[1], shares[3], shares[4]]) == 11, \
        "Reconstruction with different shares failed"

    # Test array sharing
    matrix = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.int64)
    share_arrays, p = share_array(matrix, 3, 5, 128)
    reconstructed = reconstruct_array(share_arrays[:3], [1, 2, 3], 3, p)
    assert np.array_equal(matrix, reconstructed.astype(np.int64)), "Array reconstruction failed"

    # Test quantization
    real_data = np.array([[0.5, -0.3], [1.2, -0.8]])
    quantized = quantize_to_field(real_data, p, scale=16)
    dequantized = dequantize_from_field(quantized, p, scale=16)
    assert np.allclose(real_data, dequantized, atol=1e-4), "Quantization roundtrip failed"

    print("All tests passed!")

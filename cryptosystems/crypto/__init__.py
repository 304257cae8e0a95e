"""
Cryptographic primitives for the cryptosystems package.

Provides implementations of:
- RSA encryption, signatures and blind signatures
- Paillier encryption with additive homomorphism
- Shamir threshold secret sharing
- The big-integer arithmetic they are built on
"""

from .errors import (
    CryptoError,
    NoInverseError,
    InvalidParameterError,
    InsufficientSharesError,
    AttemptsExceededError
)

from .arithmetic import (
    is_probable_prime,
    generate_prime,
    mod_pow,
    mod_inv,
    gcd,
    lcm,
    rand_between
)

from .rsa import (
    RSAPublicKey,
    RSAPrivateKey,
    generate_rsa_keys
)

from .paillier import (
    PaillierPublicKey,
    PaillierPrivateKey,
    generate_paillier_keys
)

from .shamir import (
    CoefficientMode,
    SharedKey,
    ShamirSecretSharing,
    gen_shared_keys,
    split_secret,
    validate_parameters,
    lagrange_interpolation,
    add_shares,
    share_array,
    reconstruct_array,
    quantize_to_field,
    dequantize_from_field
)

__all__ = [
    # Errors
    'CryptoError',
    'NoInverseError',
    'InvalidParameterError',
    'InsufficientSharesError',
    'AttemptsExceededError',
    # Arithmetic
    'is_probable_prime',
    'generate_prime',
    'mod_pow',
    'mod_inv',
    'gcd',
    'lcm',
    'rand_between',
    # RSA
    'RSAPublicKey',
    'RSAPrivateKey',
    'generate_rsa_keys',
    # Paillier
    'PaillierPublicKey',
    'PaillierPrivateKey',
    'generate_paillier_keys',
    # Shamir
    'CoefficientMode',
    'SharedKey',
    'ShamirSecretSharing',
    'gen_shared_keys',
    'split_secret',
    'validate_parameters',
    'lagrange_interpolation',
    'add_shares',
    'share_array',
    'reconstruct_array',
    'quantize_to_field',
    'dequantize_from_field'
]

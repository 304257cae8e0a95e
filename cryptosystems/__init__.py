"""
cryptosystems: RSA, Paillier and Shamir secret sharing over big integers

Main components:
- RSA trapdoor permutation with signatures and blind signatures
- Paillier additively homomorphic encryption
- Shamir (t, n)-threshold secret sharing with Lagrange reconstruction
- Blind signature and secure aggregation protocols built on them

All key and share objects are immutable; values are Python ints.
"""

__version__ = '1.0.0'

from . import config
from . import crypto
from . import protocols
from . import utils
from .config import (
    BenchmarkConfig,
    DEFAULT_CONFIG,
    get_config
)
from .crypto import (
    CryptoError,
    NoInverseError,
    InvalidParameterError,
    InsufficientSharesError,
    AttemptsExceededError,
    RSAPublicKey,
    RSAPrivateKey,
    generate_rsa_keys,
    PaillierPublicKey,
    PaillierPrivateKey,
    generate_paillier_keys,
    CoefficientMode,
    SharedKey,
    gen_shared_keys,
    lagrange_interpolation
)

__all__ = [
    'BenchmarkConfig',
    'DEFAULT_CONFIG',
    'get_config',
    'CryptoError',
    'NoInverseError',
    'InvalidParameterError',
    'InsufficientSharesError',
    'AttemptsExceededError',
    'RSAPublicKey',
    'RSAPrivateKey',
    'generate_rsa_keys',
    'PaillierPublicKey',
    'PaillierPrivateKey',
    'generate_paillier_keys',
    'CoefficientMode',
    'SharedKey',
    'gen_shared_keys',
    'lagrange_interpolation'
]

"""
Protocols built on the cryptosystems.

Implements:
1. RSA blind signatures
2. Secure aggregation with Paillier encryption or Shamir shares
"""

from .blind_signature import (
    BlindingSession,
    BlindSigner,
    BlindSignatureRequester
)

from .aggregation import (
    PaillierAggregator,
    ShareAggregator
)

__all__ = [
    # Blind signatures
    'BlindingSession',
    'BlindSigner',
    'BlindSignatureRequester',
    # Aggregation
    'PaillierAggregator',
    'ShareAggregator'
]

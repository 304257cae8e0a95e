"""
Secure Aggregation Protocols.

Two ways of summing values held by several parties without revealing them:
1. PaillierAggregator: each party encrypts its vector under a shared public
   key; ciphertexts are combined homomorphically and only the key holder
   decrypts the total
2. ShareAggregator: each dealer Shamir-shares its vector under a common
   prime; share holders add what they receive and any T of them
   reconstruct the total
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..crypto.errors import InvalidParameterError
from ..crypto.paillier import PaillierPrivateKey, PaillierPublicKey
from ..crypto.shamir import (
    CoefficientMode,
    SharedKey,
    add_shares,
    lagrange_interpolation,
    split_secret,
    validate_parameters,
)

logger = logging.getLogger(__name__)


class PaillierAggregator:
    """
    Homomorphic aggregation of integer vectors under one Paillier key.

    Attributes:
        public_key: Key used by every contributing party
    """

    def __init__(self, public_key: PaillierPublicKey):
        self.public_key = public_key

    def encrypt_vector(self, values: np.ndarray) -> np.ndarray:
        """
        Encrypt an integer vector element-wise.

        Args:
            values: Integers in [0, n)

        Returns:
            Object array of ciphertexts
        """
        flat = np.asarray(values).flatten()
        encrypted = np.empty(len(flat), dtype=object)
        for idx, val in enumerate(flat):
            encrypted[idx] = self.public_key.encrypt(int(val))
        return encrypted

    def aggregate(self, encrypted_vectors: Sequence[np.ndarray]) -> np.ndarray:
        """
        Homomorphically sum encrypted vectors of equal length.

        Returns:
            Object array whose decryption is the element-wise sum mod n
        """
        if not encrypted_vectors:
            raise InvalidParameterError("Nothing to aggregate")
        length = len(encrypted_vectors[0])
        if any(len(vec) != length for vec in encrypted_vectors):
            raise InvalidParameterError("Encrypted vectors must have the same length")

        result = np.empty(length, dtype=object)
        for idx in range(length):
            result[idx] = self.public_key.add(vec[idx] for vec in encrypted_vectors)
        logger.debug(f"Aggregated {len(encrypted_vectors)} encrypted vectors of length {length}")
        return result

    def weighted_aggregate(
        self,
        encrypted_vectors: Sequence[np.ndarray],
        weights: Sequence[int]
    ) -> np.ndarray:
        """Sum of weight_k * vector_k, computed on ciphertexts."""
        if len(weights) != len(encrypted_vectors):
            raise InvalidParameterError("One weight per encrypted vector is required")

        scaled = []
        for vec, weight in zip(encrypted_vectors, weights):
            scaled.append(np.array([self.public_key.multiply(c, int(weight)) for c in vec], dtype=object))
        return self.aggregate(scaled)

    @staticmethod
    def decrypt_vector(private_key: PaillierPrivateKey, encrypted: np.ndarray) -> np.ndarray:
        """Decrypt an object array of ciphertexts."""
        return np.array([private_key.decrypt(int(c)) for c in encrypted], dtype=object)


class ShareAggregator:
    """
    Additive aggregation over Shamir shares.

    Every dealer shares its vector with the same threshold, share count and
    prime; holder k keeps the k-th share of every element.
    """

    def __init__(
        self,
        threshold: int,
        num_holders: int,
        prime: int,
        coefficients: CoefficientMode = CoefficientMode.FULL
    ):
        """
        Initialize the aggregator.

        Args:
            threshold: T - minimum holders for reconstruction
            num_holders: N - number of share holders
            prime: Common prime modulus
            coefficients: Coefficient sampling mode for dealers
        """
        validate_parameters(threshold, num_holders, prime)

        self.threshold = threshold
        self.num_holders = num_holders
        self.prime = prime
        self.coefficients = coefficients
        # holder index -> list of accumulated shares, one per element
        self.holder_shares: Dict[int, Optional[List[SharedKey]]] = {
            index: None for index in range(1, num_holders + 1)
        }
        self.num_dealers = 0

    def deal(self, values: np.ndarray) -> Dict[int, List[SharedKey]]:
        """
        Share a dealer's vector among all holders.

        Returns:
            Mapping holder index -> shares of each element
        """
        flat = np.asarray(values).flatten()
        dealt: Dict[int, List[SharedKey]] = {index: [] for index in self.holder_shares}
        for val in flat:
            shares = split_secret(int(val) % self.prime, self.threshold, self.num_holders,
                                  self.prime, self.coefficients)
            for share in shares:
                dealt[share.index].append(share)
        return dealt

    def receive(self, dealt: Dict[int, List[SharedKey]]):
        """Accumulate one dealer's shares at every holder."""
        for index, shares in dealt.items():
            current = self.holder_shares[index]
            if current is None:
                self.holder_shares[index] = list(shares)
            else:
                if len(current) != len(shares):
                    raise InvalidParameterError("Dealt vectors must have the same length")
                self.holder_shares[index] = [add_shares(a, b) for a, b in zip(current, shares)]
        self.num_dealers += 1

    def contribute(self, values: np.ndarray):
        """Deal a vector and accumulate it in one step."""
        self.receive(self.deal(values))

    def reconstruct(self, holder_indices: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Reconstruct the element-wise sum from a set of holders.

        Args:
            holder_indices: Holders taking part (defaults to the first T)

        Returns:
            Object array of sums modulo the prime

        Raises:
            InvalidParameterError: with no contributions or an unknown holder
        """
        if self.num_dealers == 0:
            raise InvalidParameterError("No contributions received")
        if holder_indices is None:
            holder_indices = list(range(1, self.threshold + 1))
        for index in holder_indices:
            if index not in self.holder_shares:
                raise InvalidParameterError(f"Unknown holder index {index}, expected 1..{self.num_holders}")

        per_holder = [self.holder_shares[index] for index in holder_indices]
        length = len(per_holder[0])
        result = np.empty(length, dtype=object)
        for idx in range(length):
            result[idx] = lagrange_interpolation([shares[idx] for shares in per_holder])
        return result

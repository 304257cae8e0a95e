"""
Configuration settings for the cryptosystems package.
Default parameters for key generation, secret sharing and benchmark runs.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ArithmeticConfig:
    """Prime generation parameters."""
    # Miller-Rabin rounds per primality test
    prime_test_rounds: int = 16


@dataclass
class RSAConfig:
    """RSA key generation parameters."""
    # Full key generation restarts before giving up
    max_keygen_attempts: int = 16
    # Draws allowed when searching for a public exponent
    max_exponent_attempts: int = 1024


@dataclass
class PaillierConfig:
    """Paillier key generation parameters."""
    # Generator choice: 'random' (g uniform in [1, n^2)) or 'simple' (g = n + 1)
    generator: str = 'random'
    # Full key generation restarts before giving up
    max_keygen_attempts: int = 16


@dataclass
class SharingConfig:
    """Shamir secret sharing parameters."""
    # Shares needed for reconstruction
    threshold_t: int = 3
    # Shares produced
    num_shares: int = 5
    # Bit length of the prime field modulus
    prime_bits: int = 256
    # Coefficient sampling: 'full' (uniform in Z_p) or 'reference' ([1, 1000])
    coefficients: str = 'full'
    # Validate shares before interpolation
    strict_interpolation: bool = True
    # Quantization bit precision for real-valued data
    quantization_bits: int = 16


@dataclass
class BenchmarkConfig:
    """Complete benchmark run configuration."""
    arithmetic: ArithmeticConfig = field(default_factory=ArithmeticConfig)
    rsa: RSAConfig = field(default_factory=RSAConfig)
    paillier: PaillierConfig = field(default_factory=PaillierConfig)
    sharing: SharingConfig = field(default_factory=SharingConfig)

    # Run settings
    schemes: List[str] = field(default_factory=lambda: ['rsa', 'paillier', 'shamir'])
    key_sizes: List[int] = field(default_factory=lambda: [256, 512, 1024])
    repeats: int = 3
    log_interval: int = 1
    output_dir: str = './outputs'
    make_dirs: bool = True

    def __post_init__(self):
        if self.make_dirs:
            os.makedirs(self.output_dir, exist_ok=True)


# Default configuration instance
DEFAULT_CONFIG = BenchmarkConfig(make_dirs=False)


def get_config(
    key_sizes: Optional[List[int]] = None,
    repeats: int = 3,
    threshold: int = 3,
    num_shares: int = 5,
    coefficients: str = 'full',
    paillier_generator: str = 'random',
    output_dir: str = './outputs',
    make_dirs: bool = True
) -> BenchmarkConfig:
    """
    Get configuration for a specific benchmark setup.

    Args:
        key_sizes: Bit lengths to benchmark
        repeats: Key generations per bit length
        threshold: Shamir threshold T
        num_shares: Shamir share count N
        coefficients: 'full' or 'reference' coefficient sampling
        paillier_generator: 'random' or 'simple'
        output_dir: Directory for results
        make_dirs: Create output_dir on construction

    Returns:
        Configured BenchmarkConfig instance
    """
    config = BenchmarkConfig(output_dir=output_dir, make_dirs=make_dirs)
    if key_sizes is not None:
        config.key_sizes = list(key_sizes)
    config.repeats = repeats
    config.sharing.threshold_t = threshold
    config.sharing.num_shares = num_shares
    config.sharing.coefficients = coefficients
    config.paillier.generator = paillier_generator

    return config

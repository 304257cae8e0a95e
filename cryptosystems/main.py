"""
Benchmark runner for the cryptosystems package.

For every selected scheme and key size:
1. Times key generation (or share generation for Shamir)
2. Checks the scheme's correctness properties on random inputs
3. Records timings and check results, then saves metrics and a timing plot
"""

import os
import time
import random
import argparse
from dataclasses import asdict
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np

from .config import BenchmarkConfig, get_config
from .crypto import (
    CoefficientMode,
    rand_between,
    generate_prime,
    generate_rsa_keys,
    generate_paillier_keys,
    gen_shared_keys,
    lagrange_interpolation,
    share_array,
    reconstruct_array,
    quantize_to_field,
    dequantize_from_field
)
from .protocols import BlindSigner, BlindSignatureRequester
from .utils import (
    setup_logging,
    MetricsTracker,
    ResultsSaver,
    plot_keygen_times,
    format_time
)

SCHEMES = ['rsa', 'paillier', 'shamir']


class CryptoBenchmark:
    """
    Main benchmark class.

    Generates keys for each scheme and key size, verifies the algebraic
    properties of the resulting keys and collects timings.
    """

    def __init__(self, config: BenchmarkConfig, run_name: Optional[str] = None):
        """
        Initialize benchmark.

        Args:
            config: Benchmark configuration
            run_name: Subdirectory name (timestamped if not provided)
        """
        self.config = config

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        self.output_dir = os.path.join(config.output_dir, run_name or f'benchmark_{timestamp}')
        os.makedirs(self.output_dir, exist_ok=True)

        self.logger = setup_logging(
            os.path.join(self.output_dir, 'logs'),
            experiment_name='cryptosystems_benchmark'
        )
        self.results_saver = ResultsSaver(self.output_dir)
        self.metrics_tracker = MetricsTracker()
        self.timings: Dict[str, Dict[int, List[float]]] = {}

        self.results_saver.save_config(asdict(self.config))

    def _record(self, scheme: str, bits: int, elapsed: float, ok: bool):
        self.timings.setdefault(scheme, {}).setdefault(bits, []).append(elapsed)
        self.metrics_tracker.add_scalar(f'{scheme}_{bits}_keygen_time', elapsed)
        self.metrics_tracker.add_scalar(f'{scheme}_{bits}_ok', 1.0 if ok else 0.0)

    def run_rsa(self, bits: int) -> bool:
        """Generate an RSA key and check encryption, signatures and blinding."""
        cfg = self.config.rsa
        start = time.time()
        priv = generate_rsa_keys(
            bits,
            max_attempts=cfg.max_keygen_attempts,
            exponent_attempts=cfg.max_exponent_attempts,
            rounds=self.config.arithmetic.prime_test_rounds
        )
        elapsed = time.time() - start
        pub = priv.pub_key

        m = rand_between(0, pub.n - 1)
        ok = priv.decrypt(pub.encrypt(m)) == m and pub.verify(priv.sign(m)) == m

        signer = BlindSigner(priv)
        requester = BlindSignatureRequester(pub)
        ok = ok and requester.request_signature(signer, m) == priv.sign(m)

        self._record('rsa', bits, elapsed, ok)
        return ok

    def run_paillier(self, bits: int) -> bool:
        """Generate a Paillier key and check decryption and homomorphisms."""
        cfg = self.config.paillier
        start = time.time()
        priv = generate_paillier_keys(
            bits,
            generator=cfg.generator,
            max_attempts=cfg.max_keygen_attempts,
            rounds=self.config.arithmetic.prime_test_rounds
        )
        elapsed = time.time() - start
        pub = priv.pub_key

        m1 = rand_between(0, pub.n - 1)
        m2 = rand_between(0, pub.n - 1)
        c1, c2 = pub.encrypt(m1), pub.encrypt(m2)
        ok = (
            priv.decrypt(c1) == m1
            and priv.decrypt(pub.add([c1, c2])) == (m1 + m2) % pub.n
            and priv.decrypt(pub.multiply(c1, m2)) == (m1 * m2) % pub.n
        )

        self._record('paillier', bits, elapsed, ok)
        return ok

    def run_shamir(self, bits: int) -> bool:
        """Share a random secret over a bits-bit prime and reconstruct it."""
        cfg = self.config.sharing
        secret = rand_between(0, 2 ** (bits - 1) - 1)

        start = time.time()
        shares = gen_shared_keys(
            secret,
            cfg.threshold_t,
            cfg.num_shares,
            bits,
            coefficients=CoefficientMode(cfg.coefficients),
            rounds=self.config.arithmetic.prime_test_rounds
        )
        elapsed = time.time() - start

        subset = random.sample(shares, cfg.threshold_t)
        ok = lagrange_interpolation(subset, strict=cfg.strict_interpolation) == secret
        ok = ok and self._check_quantized_sharing()

        self._record('shamir', bits, elapsed, ok)
        return ok

    def _check_quantized_sharing(self) -> bool:
        """Share a real-valued vector through the quantized array path."""
        cfg = self.config.sharing
        data = np.array([rand_between(-1000, 1000) / 1000 for _ in range(4)])

        p = generate_prime(cfg.prime_bits, self.config.arithmetic.prime_test_rounds)
        quantized = quantize_to_field(data, p, scale=cfg.quantization_bits)
        arrays, _ = share_array(
            quantized,
            cfg.threshold_t,
            cfg.num_shares,
            p=p,
            coefficients=CoefficientMode(cfg.coefficients)
        )

        indices = sorted(random.sample(range(1, cfg.num_shares + 1), cfg.threshold_t))
        restored = reconstruct_array([arrays[i - 1] for i in indices], indices, cfg.threshold_t, p)
        values = dequantize_from_field(restored, p, scale=cfg.quantization_bits)
        return bool(np.allclose(values, data, atol=2.0 ** -cfg.quantization_bits))

    def run(self) -> Dict[str, List[float]]:
        """
        Execute the complete benchmark.

        Returns:
            Metrics dictionary
        """
        runners = {
            'rsa': self.run_rsa,
            'paillier': self.run_paillier,
            'shamir': self.run_shamir
        }
        start_time = time.time()

        self.logger.info("=" * 60)
        self.logger.info("Starting cryptosystems benchmark")
        self.logger.info("=" * 60)
        self.logger.info(f"Schemes: {', '.join(self.config.schemes)}")
        self.logger.info(f"Key sizes: {self.config.key_sizes}, repeats: {self.config.repeats}")

        failures = 0
        for scheme in self.config.schemes:
            self.logger.info(f"\n[{scheme.upper()}]")
            for bits in self.config.key_sizes:
                for rep in range(1, self.config.repeats + 1):
                    ok = runners[scheme](bits)
                    if not ok:
                        failures += 1
                        self.logger.error(f"  {scheme} {bits} bits: correctness check FAILED (run {rep})")
                    elif rep % self.config.log_interval == 0:
                        elapsed = self.timings[scheme][bits][-1]
                        self.logger.info(f"  {bits} bits run {rep}/{self.config.repeats}: {format_time(elapsed)}")
                mean = self.metrics_tracker.get_mean(f'{scheme}_{bits}_keygen_time')
                self.logger.info(f"  {bits} bits: mean generation time {format_time(mean)}")

        self._save_results()

        elapsed = time.time() - start_time
        self.logger.info("\n" + "=" * 60)
        self.logger.info(f"Benchmark completed in {format_time(elapsed)} with {failures} failure(s)")
        self.logger.info("=" * 60)

        return self.metrics_tracker.to_dict()

    def _save_results(self):
        """Save metrics and timing plot."""
        self.results_saver.save_metrics(self.metrics_tracker.to_dict(), 'benchmark_metrics')
        plot_keygen_times(
            self.timings,
            save_path=os.path.join(self.output_dir, 'keygen_times.png')
        )
        self.logger.info(f"\nResults saved to: {self.output_dir}")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Benchmark RSA, Paillier and Shamir secret sharing'
    )

    parser.add_argument('--schemes', nargs='+', default=SCHEMES,
                       choices=SCHEMES,
                       help='Schemes to benchmark')
    parser.add_argument('--bits', nargs='+', type=int, default=[256, 512],
                       help='Key sizes (prime bits for RSA and Shamir, modulus bits for Paillier)')
    parser.add_argument('--repeats', type=int, default=3,
                       help='Key generations per size')

    # Secret sharing settings
    parser.add_argument('--threshold', type=int, default=3,
                       help='Shamir threshold T')
    parser.add_argument('--shares', type=int, default=5,
                       help='Shamir share count N')
    parser.add_argument('--coefficients', type=str, default='full',
                       choices=['full', 'reference'],
                       help='Polynomial coefficient sampling')

    # Paillier settings
    parser.add_argument('--paillier-generator', type=str, default='random',
                       choices=['random', 'simple'],
                       help='Paillier generator g choice')

    parser.add_argument('--output-dir', type=str, default='./outputs',
                       help='Output directory')

    args = parser.parse_args(argv)

    config = get_config(
        key_sizes=args.bits,
        repeats=args.repeats,
        threshold=args.threshold,
        num_shares=args.shares,
        coefficients=args.coefficients,
        paillier_generator=args.paillier_generator,
        output_dir=args.output_dir
    )
    config.schemes = list(args.schemes)

    benchmark = CryptoBenchmark(config)
    return benchmark.run()


if __name__ == '__main__':
    main()

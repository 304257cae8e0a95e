#!/usr/bin/env python3
"""
Test script for the cryptosystems package.

Runs tests on all components to verify correct implementation.
Works under pytest or directly as a script.
"""

import sys
import os
import json
import logging
import tempfile
from dataclasses import replace

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def _close_log_handlers():
    logger = logging.getLogger('cryptosystems')
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


def _raises(exc_type, fn, *args, **kwargs):
    try:
        fn(*args, **kwargs)
    except exc_type:
        return True
    return False


def test_arithmetic():
    """Test the arithmetic provider."""
    print("Testing arithmetic provider...")

    from cryptosystems.crypto import arithmetic
    from cryptosystems.crypto.errors import (
        AttemptsExceededError,
        InvalidParameterError,
        NoInverseError
    )

    # Primality
    for prime in [2, 3, 5, 97, 251, 257, 7919, 2**61 - 1, 2**127 - 1]:
        assert arithmetic.is_probable_prime(prime), f"{prime} should be prime"
    for composite in [0, 1, 4, 9, 561, 1105, 7917, 2**64 + 1, (2**61 - 1) * (2**31 - 1)]:
        assert not arithmetic.is_probable_prime(composite), f"{composite} should be composite"

    # Prime generation has exact bit length
    for bits in [2, 3, 16, 64, 128]:
        p = arithmetic.generate_prime(bits)
        assert p.bit_length() == bits, f"Prime has {p.bit_length()} bits, expected {bits}"
        assert arithmetic.is_probable_prime(p), "Generated number is not prime"

    assert _raises(InvalidParameterError, arithmetic.generate_prime, 1)
    assert _raises(InvalidParameterError, arithmetic.generate_prime, 0)
    assert _raises(AttemptsExceededError, arithmetic.generate_prime, 64, max_attempts=0)

    # Inverses and exponentiation
    assert arithmetic.mod_inv(3, 7) == 5
    assert arithmetic.mod_inv(-3, 7) == 2
    assert (arithmetic.mod_inv(65537, 2**127 - 2) * 65537) % (2**127 - 2) == 1
    assert _raises(NoInverseError, arithmetic.mod_inv, 2, 4)
    assert _raises(ValueError, arithmetic.mod_inv, 6, 9), "NoInverseError should be a ValueError"
    assert arithmetic.mod_pow(3, -1, 7) == 5
    assert arithmetic.mod_pow(3, -2, 7) == 4
    assert arithmetic.mod_pow(2, 10, 1000) == 24

    assert arithmetic.gcd(12, 18) == 6
    assert arithmetic.lcm(4, 6) == 12

    # Random range
    values = {arithmetic.rand_between(1, 3) for _ in range(200)}
    assert values == {1, 2, 3}, f"Unexpected range coverage {values}"
    assert arithmetic.rand_between(5, 5) == 5
    assert _raises(InvalidParameterError, arithmetic.rand_between, 3, 2)

    print("  Arithmetic tests passed!")
    return True


def test_crypto_rsa():
    """Test RSA encryption, signatures and blinding."""
    print("Testing RSA...")

    from cryptosystems.crypto import generate_rsa_keys, RSAPrivateKey, RSAPublicKey, gcd
    from cryptosystems.crypto.errors import InvalidParameterError, NoInverseError

    keys = generate_rsa_keys(512)
    assert isinstance(keys, RSAPrivateKey)
    pub = keys.get_rsa_public_key()
    assert isinstance(pub, RSAPublicKey)
    assert pub.get_mod_n().bit_length() in (1023, 1024), "Modulus should have about 2 * bits bits"

    # Scenario: encrypt 2, decrypt back
    c = pub.encrypt(2)
    assert keys.decrypt(c) == 2, "Decryption failed"

    # Round trips on random messages
    for m in [0, 1, 12345, pub.n - 1, pub.random_blinding_factor()]:
        assert keys.decrypt(pub.encrypt(m)) == m, f"Decryption failed for {m}"
        assert pub.verify(keys.sign(m)) == m, f"Verification failed for {m}"

    # Signing a ciphertext made for another party
    other = generate_rsa_keys(256)
    c_other = other.pub_key.encrypt(2)
    assert pub.verify(keys.sign(c_other)) == c_other, "Signature on ciphertext failed"

    # Blind signatures
    m = 424242
    r = pub.random_blinding_factor()
    assert gcd(r, pub.n) == 1
    blinded = pub.blind(r, m)
    assert blinded != m
    assert pub.unblind(r, keys.sign(blinded)) == keys.sign(m), "Unblinded signature mismatch"
    assert _raises(NoInverseError, pub.unblind, 0, 5)

    # Immutability
    assert _raises(AttributeError, setattr, pub, 'e', 3), "Public key should be frozen"
    assert _raises(AttributeError, setattr, keys, 'd', 3), "Private key should be frozen"

    # Parameter checks and bounded retries
    assert _raises(InvalidParameterError, generate_rsa_keys, 1)
    # Only one 2-bit prime exists, so p and q could never differ
    assert _raises(InvalidParameterError, generate_rsa_keys, 2)
    assert not _raises(InvalidParameterError, generate_rsa_keys, 3, max_attempts=64)

    print("  RSA tests passed!")
    return True


def test_crypto_paillier():
    """Test Paillier encryption."""
    print("Testing Paillier encryption...")

    from cryptosystems.crypto import generate_paillier_keys, PaillierPrivateKey, PaillierPublicKey
    from cryptosystems.crypto.errors import InvalidParameterError

    keys = generate_paillier_keys(512)
    assert isinstance(keys, PaillierPrivateKey)
    pk = keys.get_pub_key()
    assert isinstance(pk, PaillierPublicKey)
    assert pk.get_n2() == pk.get_n() ** 2
    assert 1 <= pk.get_g() < pk.get_n2()

    # Test encryption/decryption
    c = pk.encrypt(2)
    assert keys.decrypt(c) == 2, "Decryption failed"
    assert keys.decrypt(pk.encrypt(pk.n - 1)) == pk.n - 1, "Decryption of n - 1 failed"

    # Encryption is randomized
    assert pk.encrypt(5) != pk.encrypt(5), "Encryption should be randomized"

    # Scenario: 3 + 4
    c_sum = pk.add([pk.encrypt(3), pk.encrypt(4)])
    assert keys.decrypt(c_sum) == 7, "Homomorphic addition failed"

    # Vector sum
    assert keys.decrypt(pk.add([pk.encrypt(m) for m in [2, 3, 4]])) == 9

    # Sum wraps modulo n
    big = [pk.n - 1, pk.n - 2, 10]
    assert keys.decrypt(pk.add([pk.encrypt(m) for m in big])) == sum(big) % pk.n

    # Scenario: 3 * 5
    c_mult = pk.multiply(pk.encrypt(3), 5)
    assert keys.decrypt(c_mult) == 15, "Scalar multiplication failed"

    # Scalar products wrap modulo n
    m1, m2 = pk.n - 1, pk.n - 2
    assert keys.decrypt(pk.multiply(pk.encrypt(m1), m2)) == (m1 * m2) % pk.n, "Wrapped product failed"

    # Negative scalars act modulo n
    assert keys.decrypt(pk.multiply(pk.encrypt(3), -1)) == pk.n - 3
    assert keys.decrypt(pk.multiply(pk.encrypt(m1), -5)) == (m1 * -5) % pk.n

    # Plaintext range
    assert _raises(InvalidParameterError, pk.encrypt, -1)
    assert _raises(InvalidParameterError, pk.encrypt, pk.n)

    # Simple generator
    simple = generate_paillier_keys(256, generator='simple')
    assert simple.pub_key.g == simple.pub_key.n + 1
    assert simple.decrypt(simple.pub_key.encrypt(77)) == 77

    assert _raises(InvalidParameterError, generate_paillier_keys, 256, generator='other')
    assert _raises(InvalidParameterError, generate_paillier_keys, 2)

    print("  Paillier tests passed!")
    return True


def test_paillier_small_keys():
    """Paillier works across a range of key sizes."""
    print("Testing Paillier key sizes...")

    from cryptosystems.crypto import generate_paillier_keys

    for bits in [32, 64, 128, 256]:
        keys = generate_paillier_keys(bits)
        pk = keys.pub_key
        ms = [2, 3, 4]
        assert keys.decrypt(pk.add([pk.encrypt(m) for m in ms])) == 9, f"{bits}-bit sum failed"
        assert keys.decrypt(pk.multiply(pk.encrypt(3), 2)) == 6, f"{bits}-bit multiply failed"

    print("  Paillier key size tests passed!")
    return True


def test_crypto_shamir():
    """Test Shamir secret sharing."""
    print("Testing Shamir secret sharing...")

    from cryptosystems.crypto import gen_shared_keys, lagrange_interpolation, SharedKey, is_probable_prime

    # Scenario: 11 with shares {1, 3, 5}
    shares = gen_shared_keys(11, 3, 5, 256)
    assert len(shares) == 5
    assert all(isinstance(s, SharedKey) for s in shares)
    assert [s.get_position() for s in shares] == [1, 2, 3, 4, 5]
    assert all(s.get_threshold() == 3 for s in shares)
    p = shares[0].get_mod_p()
    assert p.bit_length() == 256 and is_probable_prime(p)
    assert lagrange_interpolation([shares[0], shares[2], shares[4]]) == 11, "Reconstruction failed"

    # Scenario: 42 with shares {2, 4, 5} over a 1024-bit field
    shares = gen_shared_keys(42, 3, 5, 1024)
    assert lagrange_interpolation([shares[1], shares[3], shares[4]]) == 42, "Reconstruction failed"

    # Every 3-subset reconstructs; order does not matter
    from itertools import combinations, permutations
    shares = gen_shared_keys(987654321, 3, 5, 128)
    for subset in combinations(shares, 3):
        assert lagrange_interpolation(list(subset)) == 987654321
    for ordering in permutations(shares[:3]):
        assert lagrange_interpolation(list(ordering)) == 987654321

    # Extra shares beyond t are ignored
    assert lagrange_interpolation(shares) == 987654321

    # Threshold 1 and t == n
    assert all(s.s == 7 for s in gen_shared_keys(7, 1, 4, 64))
    shares = gen_shared_keys(5, 4, 4, 64)
    assert lagrange_interpolation(shares) == 5

    print("  Shamir tests passed!")
    return True


def test_shamir_field_size():
    """The prime field must be larger than the share count."""
    print("Testing Shamir field size...")

    from itertools import combinations
    from cryptosystems.crypto import (
        ShamirSecretSharing,
        gen_shared_keys,
        lagrange_interpolation,
        share_array,
        split_secret
    )
    from cryptosystems.crypto.errors import InvalidParameterError
    from cryptosystems.protocols import ShareAggregator

    # 3-bit primes are 5 and 7; in Z_5 the share at index 5 would be f(0)
    assert _raises(InvalidParameterError, gen_shared_keys, 3, 2, 5, 3)
    assert _raises(InvalidParameterError, split_secret, 3, 2, 5, 5)
    assert _raises(InvalidParameterError, split_secret, 3, 2, 6, 5)
    assert _raises(InvalidParameterError, share_array, np.arange(3), 2, 5, p=5)
    assert _raises(InvalidParameterError, share_array, np.arange(3), 2, 5, bits=3)
    assert _raises(InvalidParameterError, ShamirSecretSharing, 2, 5, bits=3)
    assert _raises(InvalidParameterError, ShareAggregator, 2, 5, 5)

    # Four shares fit every 3-bit field; each pair reconstructs
    for _ in range(20):
        shares = gen_shared_keys(3, 2, 4, 3)
        assert shares[0].p > 4
        for pair in combinations(shares, 2):
            assert lagrange_interpolation(list(pair)) == 3

    shares = split_secret(3, 2, 4, 5)
    for pair in combinations(shares, 2):
        assert lagrange_interpolation(list(pair)) == 3

    print("  Field size tests passed!")
    return True


def test_keygen_restarts():
    """Key generation restarts on unusable parameters and gives up when bounded."""
    print("Testing key generation restarts...")

    from math import isqrt
    from unittest import mock

    from cryptosystems.crypto import rsa, paillier
    from cryptosystems.crypto.errors import AttemptsExceededError, NoInverseError

    def fail_first(real, calls):
        def wrapped(*args):
            calls.append(args)
            if len(calls) == 1:
                raise NoInverseError(*args)
            return real(*args)
        return wrapped

    # RSA: e has no inverse modulo phi on the first attempt
    calls = []
    with mock.patch.object(rsa, 'mod_inv', side_effect=fail_first(rsa.mod_inv, calls)):
        keys = rsa.generate_rsa_keys(128)
    assert len(calls) >= 2, "RSA generation did not restart"
    assert keys.decrypt(keys.pub_key.encrypt(1234)) == 1234
    assert keys.pub_key.verify(keys.sign(99)) == 99

    with mock.patch.object(rsa, 'mod_inv', side_effect=NoInverseError(3, 6)) as always:
        assert _raises(AttemptsExceededError, rsa.generate_rsa_keys, 64, max_attempts=3)
    assert always.call_count == 3

    # Paillier: L(g^lambda) not invertible on the first attempt
    calls = []
    with mock.patch.object(paillier, 'mod_inv', side_effect=fail_first(paillier.mod_inv, calls)):
        keys = paillier.generate_paillier_keys(128)
    assert len(calls) >= 2, "Paillier generation did not restart"
    pk = keys.pub_key
    assert keys.decrypt(pk.add([pk.encrypt(3), pk.encrypt(4)])) == 7

    # Paillier: first random g shares a factor with n
    draws = []
    real_rand = paillier.rand_between

    def bad_generator_first(low, high):
        draws.append((low, high))
        if len(draws) == 1:
            return isqrt(high + 1)
        return real_rand(low, high)

    with mock.patch.object(paillier, 'rand_between', side_effect=bad_generator_first):
        keys = paillier.generate_paillier_keys(128)
    assert len(draws) >= 2, "Generator with gcd(g, n) != 1 was accepted"
    assert keys.pub_key.g != isqrt(draws[0][1] + 1)
    pk = keys.pub_key
    assert keys.decrypt(pk.multiply(pk.encrypt(3), 5)) == 15

    with mock.patch.object(paillier, 'mod_inv', side_effect=NoInverseError(2, 4)) as always:
        assert _raises(AttemptsExceededError, paillier.generate_paillier_keys, 64,
                       generator='simple', max_attempts=2)
    assert always.call_count == 2

    print("  Restart tests passed!")
    return True


def test_shamir_validation():
    """Test parameter and share validation."""
    print("Testing Shamir validation...")

    from cryptosystems.crypto import gen_shared_keys, lagrange_interpolation
    from cryptosystems.crypto.errors import InsufficientSharesError, InvalidParameterError

    assert _raises(InvalidParameterError, gen_shared_keys, 1, 0, 5, 64)
    assert _raises(InvalidParameterError, gen_shared_keys, 1, 6, 5, 64)
    assert _raises(InvalidParameterError, gen_shared_keys, 1, 1, 0, 64)
    assert _raises(InvalidParameterError, gen_shared_keys, 1, 2, 3, 1)

    shares = gen_shared_keys(11, 3, 5, 128)

    assert _raises(InsufficientSharesError, lagrange_interpolation, [])
    assert _raises(InsufficientSharesError, lagrange_interpolation, shares[:2])
    assert _raises(InsufficientSharesError, lagrange_interpolation, shares[:2], strict=False)

    # Duplicate index
    assert _raises(InvalidParameterError, lagrange_interpolation, [shares[0], shares[0], shares[2]])

    # Shares from different sharings
    other = gen_shared_keys(11, 3, 5, 128)
    assert _raises(InvalidParameterError, lagrange_interpolation, [shares[0], shares[1], other[2]])

    # Unchecked mode: equal indices contribute nothing, no error
    value = lagrange_interpolation([shares[0], shares[0], shares[2]], strict=False)
    assert 0 <= value < shares[0].p

    print("  Shamir validation tests passed!")
    return True


def test_shamir_coefficient_modes():
    """Test reference and full-range coefficient sampling."""
    print("Testing coefficient modes...")

    from cryptosystems.crypto import CoefficientMode, gen_shared_keys, lagrange_interpolation

    # Reference mode: f(1) - secret is the single coefficient in [1, 1000]
    for _ in range(20):
        shares = gen_shared_keys(11, 2, 3, 128, coefficients=CoefficientMode.REFERENCE)
        coeff = shares[0].s - 11
        assert 1 <= coeff <= 1000, f"Reference coefficient {coeff} out of range"
        assert lagrange_interpolation(shares[1:]) == 11

    # Full mode reaches far beyond 1000
    large = 0
    for _ in range(20):
        shares = gen_shared_keys(11, 2, 3, 128)
        if (shares[0].s - 11) % shares[0].p > 1000:
            large += 1
    assert large > 0, "Full-range coefficients never exceeded 1000"

    print("  Coefficient mode tests passed!")
    return True


def test_shamir_no_leakage():
    """t - 1 shares do not reproduce the secret."""
    print("Testing reconstruction with t - 1 shares...")

    from cryptosystems.crypto import gen_shared_keys, lagrange_interpolation

    secret = 42
    matches = 0
    trials = 30
    for _ in range(trials):
        shares = gen_shared_keys(secret, 3, 5, 256)
        # Pretend the threshold is one lower and interpolate two shares
        partial = [replace(s, t=2) for s in shares[:2]]
        if lagrange_interpolation(partial) == secret:
            matches += 1
    assert matches == 0, f"{matches}/{trials} partial reconstructions hit the secret"

    print("  No-leakage tests passed!")
    return True


def test_shamir_arrays():
    """Test array sharing and quantization."""
    print("Testing array sharing...")

    from cryptosystems.crypto import (
        ShamirSecretSharing,
        share_array,
        reconstruct_array,
        quantize_to_field,
        dequantize_from_field
    )

    matrix = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.int64)
    share_arrays, p = share_array(matrix, 3, 5, 128)
    assert len(share_arrays) == 5
    assert share_arrays[0].shape == matrix.shape

    reconstructed = reconstruct_array([share_arrays[0], share_arrays[2], share_arrays[4]], [1, 3, 5], 3, p)
    assert np.array_equal(matrix, reconstructed.astype(np.int64)), "Array reconstruction failed"

    # Class wrapper
    ss = ShamirSecretSharing(threshold=2, num_shares=4, bits=96)
    shares = ss.share_secret(12345)
    assert ss.reconstruct_secret(shares[2:]) == 12345
    arrays, p = ss.share_array(np.arange(6))
    assert list(ss.reconstruct_array(arrays[1:3], [2, 3], p)) == list(range(6))

    # Quantization round trip, including negatives
    real_data = np.array([[0.5, -0.3], [1.2, -0.8]])
    quantized = quantize_to_field(real_data, p, scale=16)
    assert all(0 <= int(v) < p for v in quantized.flatten())
    dequantized = dequantize_from_field(quantized, p, scale=16)
    assert np.allclose(real_data, dequantized, atol=1e-4), "Quantization roundtrip failed"

    print("  Array sharing tests passed!")
    return True


def test_blind_signature_protocol():
    """Test the blind signature protocol."""
    print("Testing blind signature protocol...")

    from cryptosystems.crypto import generate_rsa_keys
    from cryptosystems.crypto.errors import InvalidParameterError
    from cryptosystems.protocols import BlindSigner, BlindSignatureRequester

    signer = BlindSigner(generate_rsa_keys(256))
    requester = BlindSignatureRequester(signer.public_key)

    message = 2
    session = requester.blind(message)
    assert session.blinded_message != message
    blind_sig = signer.sign_blinded(session.blinded_message)
    signature = requester.unblind(session, blind_sig)
    assert signature == signer.private_key.sign(message), "Blind signature mismatch"
    assert session.signature == signature
    assert signer.public_key.verify(signature) == message

    assert requester.request_signature(signer, 99) == signer.private_key.sign(99)
    assert signer.signatures_issued == 2

    # Tampered reply
    assert _raises(InvalidParameterError, requester.unblind, session, (blind_sig + 1) % signer.public_key.n)
    assert _raises(InvalidParameterError, requester.blind, signer.public_key.n)

    print("  Blind signature tests passed!")
    return True


def test_aggregation():
    """Test Paillier and Shamir aggregation."""
    print("Testing secure aggregation...")

    from cryptosystems.crypto import generate_paillier_keys, generate_prime
    from cryptosystems.crypto.errors import InvalidParameterError
    from cryptosystems.protocols import PaillierAggregator, ShareAggregator

    # Paillier
    keys = generate_paillier_keys(256)
    aggregator = PaillierAggregator(keys.pub_key)
    vectors = [np.array([1, 2, 3]), np.array([10, 20, 30]), np.array([100, 200, 300])]
    encrypted = [aggregator.encrypt_vector(v) for v in vectors]
    total = PaillierAggregator.decrypt_vector(keys, aggregator.aggregate(encrypted))
    assert list(total) == [111, 222, 333], f"Encrypted sum wrong: {total}"

    weighted = PaillierAggregator.decrypt_vector(keys, aggregator.weighted_aggregate(encrypted, [3, 2, 1]))
    assert list(weighted) == [123, 246, 369], f"Weighted sum wrong: {weighted}"

    # Shamir
    prime = generate_prime(64)
    shares = ShareAggregator(threshold=3, num_holders=5, prime=prime)
    for v in vectors:
        shares.contribute(v)
    assert shares.num_dealers == 3
    assert list(shares.reconstruct()) == [111, 222, 333]
    assert list(shares.reconstruct([2, 4, 5])) == [111, 222, 333]
    assert _raises(InvalidParameterError, shares.reconstruct, [1, 2, 6])
    assert _raises(InvalidParameterError, shares.reconstruct, [0, 1, 2])

    print("  Aggregation tests passed!")
    return True


def test_config():
    """Test configuration."""
    print("Testing configuration...")

    from cryptosystems.config import DEFAULT_CONFIG, get_config

    assert DEFAULT_CONFIG.rsa.max_keygen_attempts == 16
    assert DEFAULT_CONFIG.paillier.generator == 'random'
    assert DEFAULT_CONFIG.sharing.prime_bits == 256
    assert DEFAULT_CONFIG.sharing.quantization_bits == 16
    assert DEFAULT_CONFIG.arithmetic.prime_test_rounds == 16
    assert DEFAULT_CONFIG.sharing.coefficients == 'full'
    assert DEFAULT_CONFIG.sharing.strict_interpolation

    config = get_config(key_sizes=[64], repeats=2, threshold=2, num_shares=4,
                        coefficients='reference', paillier_generator='simple',
                        make_dirs=False)
    assert config.key_sizes == [64]
    assert config.repeats == 2
    assert config.sharing.threshold_t == 2
    assert config.sharing.num_shares == 4
    assert config.sharing.coefficients == 'reference'
    assert config.paillier.generator == 'simple'

    print("  Configuration tests passed!")
    return True


def test_utils():
    """Test utility functions."""
    print("Testing utilities...")

    from cryptosystems.utils import MetricsTracker, ResultsSaver, format_time, plot_keygen_times

    tracker = MetricsTracker()
    for i in range(10):
        tracker.add_scalar('time', 1.0 + i)
    assert tracker.get_best('time', mode='min') == 1.0
    assert tracker.get_latest('time') == 10.0
    assert tracker.get_mean('time') == 5.5
    assert tracker.get_latest('missing') is None

    assert format_time(3661) == '1h 1m 1s'
    assert format_time(61) == '1m 1s'
    assert format_time(5) == '5s'
    assert format_time(0.25) == '250ms'

    with tempfile.TemporaryDirectory() as tmp:
        saver = ResultsSaver(tmp)
        saver.save_metrics(tracker.to_dict(), 'metrics')
        assert saver.load_metrics('metrics') == tracker.to_dict()

        path = os.path.join(tmp, 'tracker.json')
        tracker.save(path)
        assert MetricsTracker.load(path).to_dict() == tracker.to_dict()

        saver.save_numpy(np.arange(4), 'values')
        assert np.array_equal(saver.load_numpy('values'), np.arange(4))

        plot_path = os.path.join(tmp, 'plot.png')
        plot_keygen_times({'rsa': {64: [0.01, 0.02], 128: [0.05]}}, save_path=plot_path)
        assert os.path.exists(plot_path)

    print("  Utility tests passed!")
    return True


def test_benchmark():
    """Test the benchmark runner end to end."""
    print("Testing benchmark runner...")

    from cryptosystems.config import get_config
    from cryptosystems.main import CryptoBenchmark, main

    with tempfile.TemporaryDirectory() as tmp:
        config = get_config(key_sizes=[64, 96], repeats=2, output_dir=tmp)
        benchmark = CryptoBenchmark(config, run_name='run')
        metrics = benchmark.run()
        _close_log_handlers()

        for scheme in ['rsa', 'paillier', 'shamir']:
            for bits in [64, 96]:
                assert metrics[f'{scheme}_{bits}_ok'] == [1.0, 1.0], f"{scheme} {bits} check failed"
                assert len(metrics[f'{scheme}_{bits}_keygen_time']) == 2

        run_dir = os.path.join(tmp, 'run')
        assert os.path.exists(os.path.join(run_dir, 'keygen_times.png'))
        with open(os.path.join(run_dir, 'config.json')) as f:
            assert json.load(f)['key_sizes'] == [64, 96]

        metrics = main(['--schemes', 'shamir', '--bits', '64', '--repeats', '1',
                        '--coefficients', 'reference', '--output-dir', tmp])
        _close_log_handlers()
        assert metrics['shamir_64_ok'] == [1.0]

    print("  Benchmark tests passed!")
    return True


def run_all_tests():
    """Run all tests."""
    print("="*60)
    print("Running cryptosystems tests")
    print("="*60)

    tests = [
        ("Arithmetic", test_arithmetic),
        ("RSA", test_crypto_rsa),
        ("Paillier Encryption", test_crypto_paillier),
        ("Paillier Key Sizes", test_paillier_small_keys),
        ("Key Generation Restarts", test_keygen_restarts),
        ("Shamir Secret Sharing", test_crypto_shamir),
        ("Shamir Field Size", test_shamir_field_size),
        ("Shamir Validation", test_shamir_validation),
        ("Coefficient Modes", test_shamir_coefficient_modes),
        ("No Leakage", test_shamir_no_leakage),
        ("Array Sharing", test_shamir_arrays),
        ("Blind Signatures", test_blind_signature_protocol),
        ("Aggregation", test_aggregation),
        ("Configuration", test_config),
        ("Utilities", test_utils),
        ("Benchmark", test_benchmark),
    ]

    results = []
    for name, test_fn in tests:
        try:
            success = test_fn()
            results.append((name, success))
        except Exception as e:
            print(f"  ERROR: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("Test Summary")
    print("="*60)

    passed = sum(1 for _, s in results if s)
    total = len(results)

    for name, success in results:
        status = "PASS" if success else "FAIL"
        print(f"  {name}: {status}")

    print(f"\nTotal: {passed}/{total} tests passed")

    return passed == total


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)

from .config import (
    ArithmeticConfig,
    RSAConfig,
    PaillierConfig,
    SharingConfig,
    BenchmarkConfig,
    DEFAULT_CONFIG,
    get_config
)

__all__ = [
    'ArithmeticConfig',
    'RSAConfig',
    'PaillierConfig',
    'SharingConfig',
    'BenchmarkConfig',
    'DEFAULT_CONFIG',
    'get_config'
]

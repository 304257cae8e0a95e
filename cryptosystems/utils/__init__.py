"""
Utility functions for the cryptosystems package.
"""

from .helpers import (
    setup_logging,
    MetricsTracker,
    ResultsSaver,
    plot_keygen_times,
    format_time
)

__all__ = [
    'setup_logging',
    'MetricsTracker',
    'ResultsSaver',
    'plot_keygen_times',
    'format_time'
]

"""
Utility functions for the cryptosystems package.

Provides helper functions for:
- Logging configuration
- Metrics tracking
- Result saving and loading
- Key generation timing plots
"""

import os
import json
import logging
import numpy as np
from datetime import datetime
from typing import Dict, List, Any, Optional
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def setup_logging(
    log_dir: str = './logs',
    log_level: int = logging.INFO,
    experiment_name: Optional[str] = None
) -> logging.Logger:
    """
    Setup logging configuration.

    Configures the 'cryptosystems' logger, so every module logger in the
    package writes to the same file and console handlers.

    Args:
        log_dir: Directory for log files
        log_level: Logging level
        experiment_name: Name used for the log file

    Returns:
        Configured logger
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    name = experiment_name if experiment_name else 'cryptosystems'
    log_file = os.path.join(log_dir, f'{name}_{timestamp}.log')

    logger = logging.getLogger('cryptosystems')
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


class MetricsTracker:
    """Tracks and stores benchmark metrics."""

    def __init__(self):
        self.metrics: Dict[str, List[float]] = {}

    def add_scalar(self, name: str, value: float):
        """Add a scalar metric."""
        if name not in self.metrics:
            self.metrics[name] = []
        self.metrics[name].append(value)

    def add_dict(self, metrics_dict: Dict[str, float]):
        """Add multiple metrics at once."""
        for name, value in metrics_dict.items():
            self.add_scalar(name, value)

    def get_metric(self, name: str) -> List[float]:
        """Get all values for a metric."""
        return self.metrics.get(name, [])

    def get_latest(self, name: str) -> Optional[float]:
        """Get latest value for a metric."""
        values = self.metrics.get(name, [])
        return values[-1] if values else None

    def get_best(self, name: str, mode: str = 'max') -> Optional[float]:
        """Get best value for a metric."""
        values = self.metrics.get(name, [])
        if not values:
            return None
        return max(values) if mode == 'max' else min(values)

    def get_mean(self, name: str) -> Optional[float]:
        values = self.metrics.get(name, [])
        if not values:
            return None
        return float(np.mean(values))

    def to_dict(self) -> Dict[str, List[float]]:
        """Convert to dictionary."""
        return self.metrics.copy()

    def save(self, path: str):
        """Save metrics to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.metrics, f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'MetricsTracker':
        """Load metrics from JSON file."""
        tracker = cls()
        with open(path, 'r') as f:
            tracker.metrics = json.load(f)
        return tracker


class ResultsSaver:
    """Handles saving and loading benchmark results."""

    def __init__(self, output_dir: str = './outputs'):
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def save_config(self, config: Dict[str, Any], name: str = 'config'):
        """Save configuration dictionary."""
        path = os.path.join(self.output_dir, f'{name}.json')
        with open(path, 'w') as f:
            json.dump(config, f, indent=2, default=str)

    def save_metrics(self, metrics: Dict[str, List[float]], name: str = 'metrics'):
        """Save benchmark metrics."""
        path = os.path.join(self.output_dir, f'{name}.json')
        with open(path, 'w') as f:
            json.dump(metrics, f, indent=2)

    def load_metrics(self, name: str = 'metrics') -> Dict[str, List[float]]:
        path = os.path.join(self.output_dir, f'{name}.json')
        with open(path, 'r') as f:
            return json.load(f)

    def save_numpy(self, array: np.ndarray, name: str):
        """Save numpy array."""
        path = os.path.join(self.output_dir, f'{name}.npy')
        np.save(path, array)

    def load_numpy(self, name: str) -> np.ndarray:
        """Load numpy array."""
        path = os.path.join(self.output_dir, f'{name}.npy')
        return np.load(path)


def plot_keygen_times(
    timings: Dict[str, Dict[int, List[float]]],
    save_path: Optional[str] = None,
    title: str = 'Key Generation Time'
):
    """
    Plot mean key generation time against key size for each scheme.

    Args:
        timings: scheme -> {bits: [seconds, ...]}
        save_path: Path to save figure
        title: Plot title
    """
    fig, ax = plt.subplots(figsize=(8, 5))

    for scheme, per_size in timings.items():
        sizes = sorted(per_size)
        means = [np.mean(per_size[b]) for b in sizes]
        stds = [np.std(per_size[b]) for b in sizes]
        ax.errorbar(sizes, means, yerr=stds, marker='o', capsize=3, label=scheme)

    ax.set_xlabel('Key size (bits)')
    ax.set_ylabel('Time (s)')
    ax.set_yscale('log')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def format_time(seconds: float) -> str:
    """Format seconds to human-readable string."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f'{hours}h {minutes}m {secs}s'
    elif minutes > 0:
        return f'{minutes}m {secs}s'
    elif seconds >= 1:
        return f'{secs}s'
    else:
        return f'{seconds * 1000:.0f}ms'

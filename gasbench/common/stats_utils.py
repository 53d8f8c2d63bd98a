"""
Shared reductions over gas cost samples: min, max, sum, mean and sample standard deviation.
"""

import math
import logging
from typing import Dict, Sequence, Union

from gasbench.common.errors import EmptySequence

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _require_samples(samples: Sequence[Number]) -> None:
    if len(samples) == 0:
        raise EmptySequence()


def sample_min(samples: Sequence[Number]) -> Number:
    """Smallest sample."""
    _require_samples(samples)
    return min(samples)


def sample_max(samples: Sequence[Number]) -> Number:
    """Largest sample."""
    _require_samples(samples)
    return max(samples)


def sample_sum(samples: Sequence[Number]) -> Number:
    """
    Exact sum of the samples.

    Gas samples are Python ints, so the sum never overflows or loses
    precision regardless of how many units were measured.
    """
    _require_samples(samples)
    return sum(samples)


def sample_mean(samples: Sequence[Number]) -> float:
    """Arithmetic mean, sum(S) / n."""
    _require_samples(samples)
    return sample_sum(samples) / len(samples)


def sample_stddev(samples: Sequence[Number], mean: float) -> float:
    """
    Sample standard deviation with Bessel's correction (n - 1 denominator).

    A single sample has no dispersion, so n < 2 yields 0 instead of an error.

    Args:
        samples: Gas cost samples
        mean: Precomputed mean of the samples

    Returns:
        Standard deviation of the samples
    """
    _require_samples(samples)
    n = len(samples)
    if n < 2:
        return 0.0
    sum_of_sq_diffs = math.fsum((s - mean) ** 2 for s in samples)
    return math.sqrt(sum_of_sq_diffs / (n - 1))


def summarize(samples: Sequence[Number]) -> Dict[str, Number]:
    """
    Reduce one label's samples to the reported statistics.

    Args:
        samples: Gas cost samples for a single label

    Returns:
        Dictionary with samples, min, max, avg, dev and sum (avg/dev unrounded)
    """
    mean = sample_mean(samples)
    return {
        'samples': len(samples),
        'min': sample_min(samples),
        'max': sample_max(samples),
        'avg': mean,
        'dev': sample_stddev(samples, mean),
        'sum': sample_sum(samples),
    }

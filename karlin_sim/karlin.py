"""
Karlin Distribution

Density and rejection sampler for the randomized rent-or-buy threshold.
For a break-even cost ``c`` the density on ``[0, c]`` is

    pdf(t, c) = e^(t / c) / ((e - 1) * c)

which integrates to 1 over ``[0, c]`` and grows with ``t``, so longer waits
before discarding are drawn more often than short ones.
"""

import math
import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10_000


class KarlinSamplingError(RuntimeError):
    """Raised when no sample is accepted; signals a bad cost parameter."""


def pdf(t: float, c: float) -> float:
    """Karlin density at elapsed time ``t`` for break-even cost ``c``."""
    return math.exp(t / c) / ((math.e - 1.0) * c)


def sample(cost: float, rng: Optional[np.random.Generator] = None,
           max_attempts: int = MAX_ATTEMPTS) -> int:
    """
    Draw one integer wait in ``[0, cost]`` by rejection sampling.

    Args:
        cost: Break-even cost, in ticks
        rng: Random source; a fresh unseeded generator when omitted
        max_attempts: Rejections tolerated before giving up

    Returns:
        Number of idle ticks to wait before moving out of the kept state

    Raises:
        KarlinSamplingError: if ``cost`` is not positive or no candidate is
            accepted within ``max_attempts`` draws
    """
    if not (cost > 0 and math.isfinite(cost)):
        raise KarlinSamplingError(f"Karlin sampling needs a positive finite cost, got {cost}")
    if rng is None:
        rng = np.random.default_rng()

    upper = int(math.floor(cost))
    max_value = pdf(cost, cost)
    for _ in range(max_attempts):
        rand_x = int(rng.integers(0, upper, endpoint=True))
        rand_y = max_value * rng.random()
        if rand_y <= pdf(rand_x, cost):
            return rand_x

    logger.error(f"Karlin sampling exhausted {max_attempts} attempts for cost={cost}")
    raise KarlinSamplingError(f"could not find a sample in {max_attempts} attempts (cost={cost})")


def sample_many(cost: float, size: int,
                rng: Optional[np.random.Generator] = None,
                max_rounds: int = 100) -> np.ndarray:
    """
    Vectorised counterpart of :func:`sample`, returning ``size`` waits.

    Each round proposes a batch for every slot still empty; acceptance
    follows the same rule as the scalar sampler.
    """
    if not (cost > 0 and math.isfinite(cost)):
        raise KarlinSamplingError(f"Karlin sampling needs a positive finite cost, got {cost}")
    if rng is None:
        rng = np.random.default_rng()

    upper = int(math.floor(cost))
    max_value = pdf(cost, cost)
    samples = np.empty(size, dtype=np.int64)
    filled = 0

    for _ in range(max_rounds):
        if filled >= size:
            break
        remaining = size - filled
        rand_x = rng.integers(0, upper, size=remaining, endpoint=True)
        rand_y = max_value * rng.random(remaining)
        density = np.exp(rand_x / cost) / ((math.e - 1.0) * cost)
        accepted = rand_x[rand_y <= density]
        samples[filled:filled + len(accepted)] = accepted
        filled += len(accepted)

    if filled < size:
        raise KarlinSamplingError(
            f"only {filled}/{size} samples accepted in {max_rounds} rounds (cost={cost})"
        )
    return samples

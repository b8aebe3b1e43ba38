from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

ArrayFloat = NDArray[np.floating]

_LIMIT_NUMERATOR = 2.4

__all__ = ["initialization_limit", "initialize"]


def _resolve_rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def initialization_limit(fan_in: int) -> float:
    """Half-width of the uniform range used for a transition with ``fan_in`` inputs."""
    if fan_in <= 0:
        raise ValueError("fan_in must be positive")
    return _LIMIT_NUMERATOR / fan_in


def initialize(
    fan_in: int, fan_out: int, *, rng: np.random.Generator | None = None
) -> tuple[ArrayFloat, ArrayFloat]:
    """
    Draw the weights and biases of one layer transition

    Every entry is sampled independently and uniformly from
    [-2.4 / fan_in, 2.4 / fan_in], which keeps early pre-activations small
    enough that bounded activations do not start saturated.

    Args:
        fan_in: Number of neurons in the source layer
        fan_out: Number of neurons in the destination layer
        rng: Optional NumPy random number generator
    Returns:
        Tuple of (weights shaped (fan_in, fan_out), biases shaped (fan_out,))
    Raises:
        ValueError: when either size is not positive
    """
    if fan_out <= 0:
        raise ValueError("fan_out must be positive")
    limit = initialization_limit(fan_in)
    generator = _resolve_rng(rng)
    weights = generator.uniform(-limit, limit, size=(fan_in, fan_out))
    biases = generator.uniform(-limit, limit, size=(fan_out,))
    return weights, biases

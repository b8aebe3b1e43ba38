"""Synthetic two-feature datasets for trying out topologies."""

from __future__ import annotations

from typing import Callable

import numpy as np

from my_mlp_trainer.dataset import DataSetInfo, encode_rows

Rows = list[tuple[list[float], str]]
SampleFactory = Callable[[np.random.Generator, int], Rows]

DEFAULT_POINTS_PER_CLASS = 50
_SPREAD = 0.6


def _blobs(
    rng: np.random.Generator,
    points_per_class: int,
    centers: dict[str, tuple[float, float]],
) -> Rows:
    rows: Rows = []
    for label, (cx, cy) in centers.items():
        points = rng.normal((cx, cy), _SPREAD, size=(points_per_class, 2))
        rows.extend(([float(x), float(y)], label) for x, y in points)
    return rows


def _binary(rng: np.random.Generator, points_per_class: int) -> Rows:
    return _blobs(rng, points_per_class, {"A": (-2.0, -2.0), "B": (2.0, 2.0)})


def _non_linear_binary(rng: np.random.Generator, points_per_class: int) -> Rows:
    # Inner disc against a surrounding ring.
    rows: Rows = []
    for label, (low, high) in {"Inner": (0.0, 1.0), "Outer": (2.0, 3.0)}.items():
        radius = rng.uniform(low, high, size=points_per_class)
        angle = rng.uniform(0.0, 2 * np.pi, size=points_per_class)
        rows.extend(
            ([float(r * np.cos(a)), float(r * np.sin(a))], label)
            for r, a in zip(radius, angle)
        )
    return rows


def _three_classes(rng: np.random.Generator, points_per_class: int) -> Rows:
    return _blobs(
        rng,
        points_per_class,
        {"A": (-2.5, -1.5), "B": (2.5, -1.5), "C": (0.0, 2.5)},
    )


def _four_classes(rng: np.random.Generator, points_per_class: int) -> Rows:
    return _blobs(
        rng,
        points_per_class,
        {"A": (-2.0, -2.0), "B": (2.0, -2.0), "C": (-2.0, 2.0), "D": (2.0, 2.0)},
    )


SAMPLE_DATASETS: dict[str, SampleFactory] = {
    "4 Classes": _four_classes,
    "3 Classes": _three_classes,
    "Non-Linear Binary": _non_linear_binary,
    "Binary": _binary,
}


def load_sample_dataset(
    name: str,
    *,
    seed: int | None = None,
    binary: bool = True,
    points_per_class: int = DEFAULT_POINTS_PER_CLASS,
) -> DataSetInfo:
    """
    Generate one of the built-in sample datasets.

    Args:
        name: Key of SAMPLE_DATASETS, matched case-insensitively.
        seed: Optional seed for reproducible points.
        binary: Encode two-class samples with a single 0/1 target.
        points_per_class: Number of points drawn for each class.

    Returns:
        DataSetInfo encoded the same way as CSV datasets.

    Raises:
        ValueError: If the name is unknown or points_per_class is not positive.
    """
    if points_per_class <= 0:
        raise ValueError("points_per_class must be positive")
    factories = {key.lower(): factory for key, factory in SAMPLE_DATASETS.items()}
    factory = factories.get(name.strip().lower())
    if factory is None:
        available = ", ".join(SAMPLE_DATASETS)
        raise ValueError(f"Unknown sample dataset '{name}'. Available: {available}")
    rng = np.random.default_rng(seed)
    return encode_rows(factory(rng, points_per_class), binary=binary)

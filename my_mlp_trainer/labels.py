from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np
from numpy.typing import ArrayLike

BINARY_THRESHOLD = 0.5


def create_label_prediction_map(
    output: ArrayLike, classes: Sequence[str]
) -> dict[str, float]:
    """
    Pairs every class name with its output value, keys sorted.

    Raises:
        ValueError: If the output and class counts differ.
    """
    values = np.asarray(output, dtype=float)
    if values.shape != (len(classes),):
        raise ValueError("output must hold one value per class")
    return {
        label: float(values[index])
        for index, label in sorted(enumerate(classes), key=lambda item: item[1])
    }


def find_max_entry(mapping: Mapping[str, float]) -> tuple[str, float]:
    """Returns the first key holding the largest value."""
    if not mapping:
        raise ValueError("mapping must not be empty")
    max_key = ""
    max_value = -np.inf
    for key, value in mapping.items():
        if value > max_value:
            max_key, max_value = key, value
    return max_key, max_value


def map_prediction_to_label(prediction: float, classes: Sequence[str]) -> str:
    """Binary decision: the second class above 0.5, the first otherwise."""
    if len(classes) != 2:
        raise ValueError("binary predictions need exactly two classes")
    return classes[1] if prediction > BINARY_THRESHOLD else classes[0]


def describe_prediction(output: ArrayLike, classes: Sequence[str]) -> str:
    """
    Returns the class name predicted by a network output.

    A single output value is read as a binary decision, longer outputs pick
    the class with the highest value.
    """
    values = np.asarray(output, dtype=float)
    if values.size == 1:
        return map_prediction_to_label(float(values[0]), classes)
    label, _ = find_max_entry(create_label_prediction_map(values, classes))
    return label

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import ArrayLike, NDArray

ArrayFloat = NDArray[np.floating]

__all__ = ["Example", "DataSet", "make_example"]


@dataclass(frozen=True, slots=True)
class Example:
    """
    One labelled sample.

    ``target`` holds a one-hot vector, or a single 0/1 value for binary
    problems. ``label`` is the class name and only used for display.
    """

    input: ArrayFloat
    target: ArrayFloat
    label: str = ""


DataSet = List[Example]


def make_example(inputs: ArrayLike, target: ArrayLike, label: str = "") -> Example:
    """Build an Example from plain sequences, validating they are 1D."""
    input_array = np.asarray(inputs, dtype=float)
    target_array = np.asarray(target, dtype=float)
    if input_array.ndim != 1 or target_array.ndim != 1:
        raise ValueError("example input and target must be 1D sequences")
    return Example(input=input_array, target=target_array, label=str(label))

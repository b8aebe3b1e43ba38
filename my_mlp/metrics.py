from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from .config import Config
    from .dataset import Example

ArrayFloat = NDArray[np.floating]
LossFn = Callable[[ArrayFloat, ArrayFloat], float]

LOG_EPSILON = 1e-15
BINARY_THRESHOLD = 0.5

logger = logging.getLogger(__name__)

__all__ = [
    "GoalMetric",
    "UnknownMetric",
    "EvaluationResult",
    "calculate_sse",
    "calculate_cross_entropy",
    "is_correct",
    "evaluate",
]


class UnknownMetric(ValueError):
    """Raised when a goal metric is not one of SSE, MSE or CrossEntropy."""


class GoalMetric(str, Enum):
    """Loss used both for the convergence check and for reporting."""

    SSE = "SSE"
    MSE = "MSE"
    CROSS_ENTROPY = "CrossEntropy"

    @classmethod
    def parse(cls, name: GoalMetric | str) -> GoalMetric:
        """
        Resolve a metric from a member or a case-insensitive name

        Raises:
            UnknownMetric: when the name matches no metric
        """
        if isinstance(name, GoalMetric):
            return name
        if isinstance(name, str):
            key = name.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        available = ", ".join(member.value for member in cls)
        raise UnknownMetric(f"unknown goal metric '{name}', choose from: {available}")


class EvaluatedNetwork(Protocol):
    """Structural view of the network used while collecting metrics."""

    config: Config

    def train_one(self, inputs: ArrayLike, target: ArrayLike) -> None: ...

    def predict(self, inputs: ArrayLike) -> ArrayFloat: ...


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Loss and accuracy (in percent) over one pass on a dataset."""

    loss: float
    accuracy: float


def _as_pair(output: ArrayLike, target: ArrayLike) -> tuple[ArrayFloat, ArrayFloat]:
    output_array = np.asarray(output, dtype=float)
    target_array = np.asarray(target, dtype=float)
    if output_array.shape != target_array.shape:
        raise ValueError("output and target must share the same shape")
    return output_array, target_array


def calculate_sse(output: ArrayLike, target: ArrayLike) -> float:
    """Sum of squared differences between a single output and its target."""
    output_array, target_array = _as_pair(output, target)
    return float(np.sum(np.square(target_array - output_array)))


def calculate_cross_entropy(output: ArrayLike, target: ArrayLike) -> float:
    """
    Cross-entropy of a single probability output against its target

    A fixed epsilon is added before the logarithm so zero probabilities give a
    large finite loss instead of infinity.

    Args:
        output: Predicted probabilities
        target: Expected distribution, usually one-hot
    Returns:
        Scalar loss -sum(target * log(output + eps))
    Raises:
        ValueError: when shapes differ
    """
    output_array, target_array = _as_pair(output, target)
    return float(-np.sum(target_array * np.log(output_array + LOG_EPSILON)))


_LOSS_FUNCTIONS: dict[GoalMetric, LossFn] = {
    GoalMetric.SSE: calculate_sse,
    GoalMetric.MSE: calculate_sse,
    GoalMetric.CROSS_ENTROPY: calculate_cross_entropy,
}

_AVERAGED_METRICS = frozenset({GoalMetric.MSE, GoalMetric.CROSS_ENTROPY})


def is_correct(output: ArrayLike, target: ArrayLike) -> bool:
    """
    Whether a single output predicts the class encoded by its target

    Single-value targets are binary: the prediction is 1 above 0.5, else 0.
    Longer targets compare the first argmax of output and target.
    """
    output_array = np.asarray(output, dtype=float)
    target_array = np.asarray(target, dtype=float)
    if target_array.size == 1:
        predicted = 1.0 if output_array[0] > BINARY_THRESHOLD else 0.0
        return predicted == float(target_array[0])
    return int(np.argmax(output_array)) == int(np.argmax(target_array))


def evaluate(
    network: EvaluatedNetwork,
    dataset: Sequence[Example],
    train_during_pass: bool,
) -> EvaluationResult:
    """
    Measure loss and accuracy over a dataset, optionally training as it goes

    When ``train_during_pass`` is set each example first updates the network
    and is then measured with the updated parameters, so the reported numbers
    mix the states the network went through during the pass.

    Args:
        network: Network providing ``config``, ``train_one`` and ``predict``
        dataset: Examples to visit in order; never reordered here
        train_during_pass: Run one backpropagation step before measuring each example
    Returns:
        EvaluationResult holding the loss of the configured goal metric and
        accuracy in percent; both are NaN for an empty dataset except SSE, which is 0
    Raises:
        UnknownMetric: when the configured goal metric is not recognised
    """
    metric = GoalMetric.parse(network.config.goal.metric)
    loss_fn = _LOSS_FUNCTIONS[metric]

    loss = 0.0
    correct = 0
    for example in dataset:
        if train_during_pass:
            network.train_one(example.input, example.target)
        output = network.predict(example.input)
        loss += loss_fn(output, example.target)
        if is_correct(output, example.target):
            correct += 1

    total = len(dataset)
    if total == 0:
        logger.warning("evaluating an empty dataset, loss and accuracy are undefined")
        empty_loss = loss if metric not in _AVERAGED_METRICS else math.nan
        return EvaluationResult(loss=empty_loss, accuracy=math.nan)

    if metric in _AVERAGED_METRICS:
        loss /= total
    return EvaluationResult(loss=loss, accuracy=correct / total * 100)

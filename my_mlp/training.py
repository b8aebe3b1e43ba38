from __future__ import annotations

import logging
import math
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import TYPE_CHECKING, MutableSequence, Protocol, Sequence, TypeVar

import numpy as np

from .metrics import EvaluatedNetwork, evaluate
from .results import HistoryPoint, ModelResultData, TestResults, TrainResults

if TYPE_CHECKING:
    from .dataset import Example

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = [
    "TrainingState",
    "shuffle_dataset",
    "split_dataset",
    "fit",
    "fit_in_background",
]


class TrainingState(str, Enum):
    """Phases a network goes through during :func:`fit`."""

    INITIALIZING = "Initializing"
    TRAINING = "Training"
    EVALUATING = "Evaluating"
    DONE = "Done"


class TrainableNetwork(EvaluatedNetwork, Protocol):
    """Network surface :func:`fit` drives."""

    state: TrainingState
    rng: np.random.Generator


def shuffle_dataset(
    dataset: MutableSequence[T], rng: np.random.Generator | None = None
) -> None:
    """Reorder ``dataset`` in place with a uniformly random permutation."""
    generator = rng if rng is not None else np.random.default_rng()
    order = generator.permutation(len(dataset))
    dataset[:] = [dataset[int(index)] for index in order]


def split_dataset(
    dataset: Sequence[T], ratio: float
) -> tuple[list[T], list[T]]:
    """
    Split a dataset at ``floor(len(dataset) * ratio)``

    Args:
        dataset: Examples, already shuffled if a random split is wanted
        ratio: Fraction in [0, 1] of examples placed in the first (training) part
    Returns:
        Tuple of (train_set, test_set), together holding every example once
    Raises:
        ValueError: when ratio is outside [0, 1]
    """
    if not 0.0 <= ratio <= 1.0:
        raise ValueError("ratio must be between 0 and 1")
    split_index = math.floor(len(dataset) * ratio)
    return list(dataset[:split_index]), list(dataset[split_index:])


def fit(
    network: TrainableNetwork,
    dataset: MutableSequence[Example],
    *,
    rng: np.random.Generator | None = None,
) -> ModelResultData:
    """
    Train a network on part of a dataset and evaluate it on the rest

    The dataset is shuffled in place and split by the configured
    ``test_data_ratio``; the first part is trained on. Each epoch is a single
    online pass that updates the network per example and measures it right
    after, stopping once the epoch budget is spent or the training loss
    reaches the goal error.

    Args:
        network: Network to train; its parameters are mutated
        dataset: Examples to learn from; reordered in place
        rng: Optional random generator for the shuffle, defaults to the network's
    Returns:
        ModelResultData with the epoch count, training history and test metrics
    Raises:
        UnknownMetric: when the configured goal metric is not recognised
    """
    config = network.config
    generator = rng if rng is not None else network.rng

    network.state = TrainingState.INITIALIZING
    shuffle_dataset(dataset, generator)
    train_set, test_set = split_dataset(dataset, config.test_data_ratio)
    logger.info(
        "training on %d examples, testing on %d examples",
        len(train_set),
        len(test_set),
    )

    network.state = TrainingState.TRAINING
    epoch = 0
    train_loss = math.inf
    train_accuracy = 0.0
    loss_history: list[HistoryPoint] = []
    accuracy_history: list[HistoryPoint] = []
    while epoch < config.max_epochs and train_loss > config.goal.error:
        epoch += 1
        result = evaluate(network, train_set, train_during_pass=True)
        train_loss, train_accuracy = result.loss, result.accuracy
        loss_history.append(HistoryPoint(epoch, train_loss))
        accuracy_history.append(HistoryPoint(epoch, train_accuracy))
        logger.debug(
            "epoch %d: loss=%.6f accuracy=%.2f", epoch, train_loss, train_accuracy
        )

    network.state = TrainingState.EVALUATING
    test_result = evaluate(network, test_set, train_during_pass=False)

    network.state = TrainingState.DONE
    logger.info(
        "finished after %d epoch(s): train loss=%.6f, test loss=%.6f",
        epoch,
        train_loss,
        test_result.loss,
    )
    return ModelResultData(
        epoch=epoch,
        train_results=TrainResults(
            loss=train_loss,
            accuracy=train_accuracy,
            loss_history=tuple(loss_history),
            accuracy_history=tuple(accuracy_history),
        ),
        test_results=TestResults(
            loss=test_result.loss, accuracy=test_result.accuracy
        ),
    )


def fit_in_background(
    network: TrainableNetwork,
    dataset: MutableSequence[Example],
    *,
    executor: Executor | None = None,
    rng: np.random.Generator | None = None,
) -> Future[ModelResultData]:
    """
    Run :func:`fit` on a worker thread and return a future of its result

    Without an executor a private single-worker pool is used and shut down
    once the run is submitted. The network must not be used by the caller
    until the future completes.
    """
    if executor is not None:
        return executor.submit(fit, network, dataset, rng=rng)
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="my-mlp-fit")
    try:
        return pool.submit(fit, network, dataset, rng=rng)
    finally:
        pool.shutdown(wait=False)

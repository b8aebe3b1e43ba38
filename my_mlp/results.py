from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

__all__ = [
    "HistoryPoint",
    "TrainResults",
    "TestResults",
    "ModelResultData",
    "format_result_summary",
]


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    """Metric value recorded at the end of an epoch."""

    epoch: int
    value: float


@dataclass(frozen=True, slots=True)
class TrainResults:
    """Metrics of the last training epoch plus the per-epoch history."""

    loss: float
    accuracy: float
    loss_history: tuple[HistoryPoint, ...]
    accuracy_history: tuple[HistoryPoint, ...]


@dataclass(frozen=True, slots=True)
class TestResults:
    """Metrics of the single pass over the held-out split."""

    __test__ = False

    loss: float
    accuracy: float


@dataclass(frozen=True, slots=True)
class ModelResultData:
    """Summary of one training run."""

    epoch: int
    train_results: TrainResults
    test_results: TestResults

    def to_dict(self) -> dict[str, Any]:
        """Plain data form, suitable for JSON; undefined metrics become ``None``."""
        train = self.train_results
        return {
            "epoch": self.epoch,
            "trainResults": {
                "loss": _json_number(train.loss),
                "accuracy": _json_number(train.accuracy),
                "lossHistory": [
                    {"epoch": point.epoch, "value": _json_number(point.value)}
                    for point in train.loss_history
                ],
                "accuracyHistory": [
                    {"epoch": point.epoch, "value": _json_number(point.value)}
                    for point in train.accuracy_history
                ],
            },
            "testResults": {
                "loss": _json_number(self.test_results.loss),
                "accuracy": _json_number(self.test_results.accuracy),
            },
        }


def _json_number(value: float) -> float | None:
    return None if math.isnan(value) else value


def format_result_summary(result: ModelResultData) -> str:
    """Return a short human readable report of a training run."""

    lines = [
        "Training Summary:",
        f"Epochs Performed: {result.epoch}",
        f"Final Training Loss: {result.train_results.loss:.6f}",
        f"Final Training Accuracy: {result.train_results.accuracy:.2f}%",
        f"Test Loss: {result.test_results.loss:.6f}",
        f"Test Accuracy: {result.test_results.accuracy:.2f}%",
    ]
    return "\n".join(lines)

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from numbers import Integral, Real
from pathlib import Path
from typing import Any, Iterable, Mapping

from .activations import Activation, UnsupportedActivation
from .metrics import GoalMetric

__all__ = [
    "InvalidTopology",
    "Layer",
    "Goal",
    "Config",
    "DEFAULT_CONFIG",
    "parse_layers",
    "format_layers",
    "load_config",
]


class InvalidTopology(ValueError):
    """Raised when a network is described with fewer than two layers."""


@dataclass(frozen=True, slots=True)
class Layer:
    """A stage of ``size`` neurons sharing one activation kind."""

    size: int
    activation: Activation

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, Integral):
            raise ValueError("layer size must be an integer")
        if self.size <= 0:
            raise ValueError("layer size must be positive")
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "activation", Activation.parse(self.activation))


@dataclass(frozen=True, slots=True)
class Goal:
    """
    Convergence target for training.

    The metric is stored as given; it is resolved when the network is
    evaluated, which raises ``UnknownMetric`` for unrecognised names.
    """

    metric: GoalMetric | str = GoalMetric.MSE
    error: float = 0.001

    def __post_init__(self) -> None:
        if not _is_finite_real(self.error) or self.error < 0:
            raise ValueError("goal error must be a finite non-negative number")


@dataclass(frozen=True, slots=True)
class Config:
    """
    Immutable description of a network and how to train it.

    Raises:
        InvalidTopology: If fewer than two layers are given.
        UnsupportedActivation: If the first layer does not use Input.
        ValueError: If a scalar hyperparameter is out of range or a layer
            cannot be built.
    """

    layers: tuple[Layer, ...]
    learning_rate: float = 0.1
    max_epochs: int = 500
    goal: Goal = field(default_factory=Goal)
    test_data_ratio: float = 0.3

    def __post_init__(self) -> None:
        layers = tuple(_coerce_layer(layer) for layer in self.layers)
        if len(layers) < 2:
            raise InvalidTopology(
                "at least two layers (input and output) are required"
            )
        object.__setattr__(self, "layers", layers)
        if layers[0].activation is not Activation.INPUT:
            raise UnsupportedActivation(
                f"the first layer must use Input, got {layers[0].activation.value}"
            )
        if not _is_finite_real(self.learning_rate) or self.learning_rate <= 0:
            raise ValueError("learning_rate must be a finite positive number")
        if isinstance(self.max_epochs, bool) or not isinstance(
            self.max_epochs, Integral
        ):
            raise ValueError("max_epochs must be an integer")
        if self.max_epochs <= 0:
            raise ValueError("max_epochs must be positive")
        if not _is_finite_real(self.test_data_ratio) or not (
            0.0 <= self.test_data_ratio <= 1.0
        ):
            raise ValueError("test_data_ratio must be between 0 and 1")

    @property
    def output_activation(self) -> Activation:
        return self.layers[-1].activation


def _is_finite_real(value: object) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _coerce_layer(value: object) -> Layer:
    if isinstance(value, Layer):
        return value
    if isinstance(value, Mapping):
        try:
            return Layer(value["size"], value["activation"])
        except KeyError as exc:
            raise ValueError(
                "layer mappings require 'size' and 'activation' keys"
            ) from exc
    if isinstance(value, (list, tuple)) and len(value) == 2:
        size, activation = value
        return Layer(size, activation)
    raise ValueError(f"cannot build a layer from {value!r}")


DEFAULT_CONFIG = Config(
    layers=(Layer(2, Activation.INPUT), Layer(4, Activation.SOFTMAX)),
    learning_rate=0.1,
    max_epochs=500,
    goal=Goal(GoalMetric.MSE, 0.001),
    test_data_ratio=0.3,
)


def parse_layers(text: str) -> tuple[Layer, ...]:
    """
    Parse layers written one per line as ``<size> <Activation>``.

    Blank lines are ignored, so ``"2 Input\\n4 Softmax"`` yields two layers.

    Raises:
        ValueError: If a line is malformed, naming the offending line.
    """
    layers: list[Layer] = []
    for line_num, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        parts = stripped.split()
        if len(parts) != 2:
            raise ValueError(
                f"Line {line_num}: expected '<size> <activation>', got '{stripped}'"
            )
        size_text, activation = parts
        try:
            size = int(size_text)
        except ValueError as exc:
            raise ValueError(
                f"Line {line_num}: layer size must be an integer, got '{size_text}'"
            ) from exc
        try:
            layers.append(Layer(size, activation))
        except ValueError as exc:
            raise ValueError(f"Line {line_num}: {exc}") from exc
    return tuple(layers)


def format_layers(layers: Iterable[Layer]) -> str:
    """Inverse of :func:`parse_layers`."""
    return "\n".join(f"{layer.size} {layer.activation.value}" for layer in layers)


_KEY_ALIASES = {
    "layers": "layers",
    "learningRate": "learning_rate",
    "learning_rate": "learning_rate",
    "maxEpochs": "max_epochs",
    "max_epochs": "max_epochs",
    "goal": "goal",
    "testDataRatio": "test_data_ratio",
    "test_data_ratio": "test_data_ratio",
}


def load_config(path: str | Path, *, base: Config = DEFAULT_CONFIG) -> Config:
    """
    Load a training configuration from a JSON file.

    Keys may be written in camelCase or snake_case; missing keys keep the
    values of ``base``. Layers are either a list of ``[size, activation]``
    pairs / ``{"size", "activation"}`` objects or a multi-line string accepted
    by :func:`parse_layers`.

    Args:
        path: Path to the JSON configuration file.
        base: Configuration providing defaults for missing keys.

    Returns:
        A validated Config.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is invalid or contains unexpected keys.
        UnknownMetric: If the goal metric is not recognised.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError("Configuration root must be a dictionary")
    return config_from_mapping(raw, base=base)


def config_from_mapping(
    raw: Mapping[str, Any], *, base: Config = DEFAULT_CONFIG
) -> Config:
    """Build a Config from already decoded JSON data, see :func:`load_config`."""
    unexpected = set(raw) - set(_KEY_ALIASES)
    if unexpected:
        unknown = ", ".join(sorted(unexpected))
        raise ValueError(f"Unexpected configuration keys: {unknown}")

    values: dict[str, Any] = {
        "layers": base.layers,
        "learning_rate": base.learning_rate,
        "max_epochs": base.max_epochs,
        "goal": base.goal,
        "test_data_ratio": base.test_data_ratio,
    }
    for key, value in raw.items():
        values[_KEY_ALIASES[key]] = value

    layers = values["layers"]
    if isinstance(layers, str):
        values["layers"] = parse_layers(layers)
    elif not isinstance(layers, (list, tuple)):
        raise ValueError("'layers' must be a list or a layer description string")

    values["goal"] = _goal_from_value(values["goal"])
    return Config(**values)


def _goal_from_value(value: object) -> Goal:
    if isinstance(value, Goal):
        return value
    if not isinstance(value, Mapping):
        raise ValueError("'goal' must be an object with 'metric' and 'error'")
    unexpected = set(value) - {"metric", "error"}
    if unexpected:
        unknown = ", ".join(sorted(unexpected))
        raise ValueError(f"Unexpected goal keys: {unknown}")
    metric = GoalMetric.parse(value.get("metric", GoalMetric.MSE))
    error = value.get("error", 0.001)
    if isinstance(error, bool) or not isinstance(error, Real):
        raise ValueError("goal error must be a number")
    return Goal(metric, float(error))

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import MutableSequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from . import activations, training
from .activations import Activation, ActivationFn
from .config import Config, format_layers
from .dataset import Example
from .initializers import initialize
from .results import ModelResultData
from .training import TrainingState

ArrayFloat = NDArray[np.floating]

logger = logging.getLogger(__name__)

__all__ = ["ForwardPass", "NeuralNetwork"]


@dataclass(frozen=True, slots=True)
class ForwardPass:
    """Activations produced by one forward pass."""

    hidden_outputs: tuple[ArrayFloat, ...]
    output: ArrayFloat


class NeuralNetwork:
    """
    Fully connected feedforward network trained one example at a time.

    Every transition computes ``z = a @ W - b``; the bias is subtracted
    throughout. Activation functions and derivatives are resolved once per
    layer when the network is built, so an activation that cannot be used
    where it is placed fails construction rather than a later update.

    Raises:
        InvalidTopology: If the config describes fewer than two layers.
        UnsupportedActivation: If a hidden layer uses Input or Softmax, or the
            output layer uses Input.
        ValueError: If both ``seed`` and ``rng`` are given.
    """

    config: Config
    weights: list[ArrayFloat]
    biases: list[ArrayFloat]
    state: TrainingState
    rng: np.random.Generator

    def __init__(
        self,
        config: Config,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("provide either rng or seed, not both")
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        layers = config.layers
        self._activations: list[ActivationFn] = []
        self._derivatives: list[ActivationFn] = []
        for layer in layers[1:-1]:
            self._activations.append(activations.lookup(layer.activation))
            self._derivatives.append(activations.lookup_derivative(layer.activation))

        output_activation = config.output_activation
        self._softmax_output = output_activation is Activation.SOFTMAX
        self._output_activation = activations.lookup(output_activation)
        self._output_derivative: ActivationFn | None = (
            None
            if self._softmax_output
            else activations.lookup_derivative(output_activation)
        )

        self.weights = []
        self.biases = []
        for current, following in zip(layers, layers[1:]):
            weights, biases = initialize(current.size, following.size, rng=self.rng)
            self.weights.append(weights)
            self.biases.append(biases)

        self.state = TrainingState.DONE
        logger.info(
            "created network with topology %s",
            format_layers(layers).replace("\n", " -> "),
        )

    @property
    def input_size(self) -> int:
        return self.config.layers[0].size

    @property
    def output_size(self) -> int:
        return self.config.layers[-1].size

    def forward(self, inputs: ArrayLike) -> ForwardPass:
        """
        Propagate one input vector through every transition.

        Raises:
            ValueError: If the input length differs from the input layer size.
        """
        current = self._as_vector(inputs, self.input_size, "input")
        hidden_outputs: list[ArrayFloat] = []
        last = len(self.weights) - 1
        for index, (weights, biases) in enumerate(zip(self.weights, self.biases)):
            z = current @ weights - biases
            if index < last:
                current = self._activations[index](z)
                hidden_outputs.append(current)
            else:
                current = self._output_activation(z)
        return ForwardPass(hidden_outputs=tuple(hidden_outputs), output=current)

    def train_one(self, inputs: ArrayLike, target: ArrayLike) -> None:
        """
        Run one backpropagation step on a single labelled example.

        Each transition is updated exactly once, from the output backwards.
        The delta handed to the previous layer is propagated through the
        freshly updated weights.

        Raises:
            ValueError: If input or target lengths do not match the topology.
        """
        input_vector = self._as_vector(inputs, self.input_size, "input")
        target_vector = self._as_vector(target, self.output_size, "target")
        result = self.forward(input_vector)
        hidden_outputs, output = result.hidden_outputs, result.output

        if self._output_derivative is None:
            delta = output - target_vector
        else:
            delta = self._output_derivative(output) * (target_vector - output)

        learning_rate = self.config.learning_rate
        for index in range(len(self.weights) - 1, -1, -1):
            previous = hidden_outputs[index - 1] if index > 0 else input_vector
            weight_delta = learning_rate * np.outer(previous, delta)
            bias_delta = -learning_rate * delta
            self._apply_update(index, weight_delta, bias_delta)
            if index > 0:
                derivative = self._derivatives[index - 1]
                delta = derivative(previous) * (delta @ self.weights[index].T)

    def _apply_update(
        self, index: int, weight_delta: ArrayFloat, bias_delta: ArrayFloat
    ) -> None:
        # The direction follows the output activation for every transition.
        if self._softmax_output:
            self.weights[index] = self.weights[index] - weight_delta
            self.biases[index] = self.biases[index] - bias_delta
        else:
            self.weights[index] = self.weights[index] + weight_delta
            self.biases[index] = self.biases[index] + bias_delta

    def predict(self, inputs: ArrayLike) -> ArrayFloat:
        """Output vector for one input; does not touch the parameters."""
        return self.forward(inputs).output

    def fit(
        self,
        dataset: MutableSequence[Example],
        *,
        rng: np.random.Generator | None = None,
    ) -> ModelResultData:
        """Shuffle, split, train and test; see :func:`my_mlp.training.fit`."""
        return training.fit(self, dataset, rng=rng)

    def fit_in_background(
        self,
        dataset: MutableSequence[Example],
        *,
        executor: Executor | None = None,
        rng: np.random.Generator | None = None,
    ) -> Future[ModelResultData]:
        """Run :meth:`fit` on a worker thread and return a future of its result."""
        return training.fit_in_background(
            self, dataset, executor=executor, rng=rng
        )

    def parameters(self) -> list[ArrayFloat]:
        """Weights and biases interleaved in transition order."""
        return [
            param
            for weights, biases in zip(self.weights, self.biases)
            for param in (weights, biases)
        ]

    @staticmethod
    def _as_vector(values: ArrayLike, size: int, name: str) -> ArrayFloat:
        vector = np.asarray(values, dtype=float)
        if vector.shape != (size,):
            raise ValueError(
                f"{name} must be a 1D sequence of length {size}, got shape {vector.shape}"
            )
        return vector

from __future__ import annotations

from enum import Enum
from typing import Callable, cast

import numpy as np
from numpy.typing import NDArray

ArrayFloat = NDArray[np.floating]
ActivationFn = Callable[[ArrayFloat], ArrayFloat]

LEAKY_RELU_SLOPE = 0.01

__all__ = [
    "Activation",
    "ActivationFn",
    "UnsupportedActivation",
    "sigmoid",
    "sigmoid_derivative",
    "tanh",
    "tanh_derivative",
    "relu",
    "relu_derivative",
    "leaky_relu",
    "leaky_relu_derivative",
    "softmax",
    "lookup",
    "lookup_derivative",
]


class UnsupportedActivation(ValueError):
    """Raised when an activation has no function or derivative to dispatch to."""


class Activation(str, Enum):
    """Closed set of activation kinds a layer can carry."""

    INPUT = "Input"
    SIGMOID = "Sigmoid"
    TANH = "Tanh"
    RELU = "ReLU"
    LEAKY_RELU = "LeakyReLU"
    SOFTMAX = "Softmax"

    @classmethod
    def parse(cls, name: Activation | str) -> Activation:
        """
        Resolve an activation from a member or a case-insensitive name

        Raises:
            UnsupportedActivation: when the name matches no activation
        """
        if isinstance(name, Activation):
            return name
        if not isinstance(name, str):
            raise UnsupportedActivation(
                f"activation must be a string, got {type(name).__name__}"
            )
        key = name.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        available = ", ".join(member.value for member in cls)
        raise UnsupportedActivation(
            f"unknown activation '{name}', choose from: {available}"
        )


def sigmoid(x: ArrayFloat) -> ArrayFloat:
    """Sigmoid activation with stable computation"""
    x = np.asarray(x, dtype=float)
    decay = np.exp(-np.abs(x))
    return np.where(x >= 0, 1 / (1 + decay), decay / (1 + decay))


def sigmoid_derivative(activated: ArrayFloat) -> ArrayFloat:
    """Derivative of sigmoid expressed through its output"""
    return activated * (1 - activated)


def tanh(x: ArrayFloat) -> ArrayFloat:
    """Hyperbolic tangent activation"""
    return np.tanh(x)


def tanh_derivative(activated: ArrayFloat) -> ArrayFloat:
    """Derivative of tanh expressed through its output"""
    return 1 - activated**2


def relu(x: ArrayFloat) -> ArrayFloat:
    """Rectified linear activation"""
    return np.maximum(0, x)


def relu_derivative(activated: ArrayFloat) -> ArrayFloat:
    """Derivative of ReLU, zero at and below the origin"""
    activated = np.asarray(activated, dtype=float)
    return (activated > 0).astype(activated.dtype, copy=False)


def leaky_relu(x: ArrayFloat) -> ArrayFloat:
    """ReLU with a small slope for negative inputs"""
    x = np.asarray(x, dtype=float)
    return np.where(x > 0, x, LEAKY_RELU_SLOPE * x)


def leaky_relu_derivative(activated: ArrayFloat) -> ArrayFloat:
    """Derivative of leaky ReLU expressed through its output"""
    activated = np.asarray(activated, dtype=float)
    return np.where(activated > 0, 1.0, LEAKY_RELU_SLOPE)


def softmax(z: ArrayFloat) -> ArrayFloat:
    """Softmax over a whole vector with overflow protection"""
    z = np.asarray(z, dtype=float)
    exps = np.exp(z - np.max(z))
    return cast(ArrayFloat, exps / np.sum(exps))


_ACTIVATIONS: dict[Activation, ActivationFn] = {
    Activation.SIGMOID: sigmoid,
    Activation.TANH: tanh,
    Activation.RELU: relu,
    Activation.LEAKY_RELU: leaky_relu,
    Activation.SOFTMAX: softmax,
}

# No Softmax entry: a Softmax output layer uses delta = output - target.
_DERIVATIVES: dict[Activation, ActivationFn] = {
    Activation.SIGMOID: sigmoid_derivative,
    Activation.TANH: tanh_derivative,
    Activation.RELU: relu_derivative,
    Activation.LEAKY_RELU: leaky_relu_derivative,
}


def lookup(activation: Activation | str) -> ActivationFn:
    """
    Resolve the function applied by a layer

    Args:
        activation: Activation member or its name
    Returns:
        Callable mapping pre-activations to activations; softmax is vector valued
    Raises:
        UnsupportedActivation: for Input or an unknown name
    """
    kind = Activation.parse(activation)
    try:
        return _ACTIVATIONS[kind]
    except KeyError as exc:
        raise UnsupportedActivation(
            f"activation '{kind.value}' has no function"
        ) from exc


def lookup_derivative(activation: Activation | str) -> ActivationFn:
    """
    Resolve the derivative of an activation, taking the activated value

    Args:
        activation: Activation member or its name
    Returns:
        Callable mapping activated values to local derivatives
    Raises:
        UnsupportedActivation: for Input, Softmax, or an unknown name
    """
    kind = Activation.parse(activation)
    try:
        return _DERIVATIVES[kind]
    except KeyError as exc:
        raise UnsupportedActivation(
            f"activation '{kind.value}' has no standalone derivative"
        ) from exc

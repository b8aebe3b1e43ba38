from __future__ import annotations

import numpy as np
import pytest

from my_mlp import (
    Config,
    InvalidTopology,
    NeuralNetwork,
    UnsupportedActivation,
    calculate_cross_entropy,
    sigmoid,
)


def _network(layers: list[tuple[int, str]], seed: int = 0, **kwargs: float) -> NeuralNetwork:
    return NeuralNetwork(Config(layers=layers, **kwargs), seed=seed)


@pytest.mark.parametrize(
    "layers",
    [
        [(2, "Input"), (1, "Sigmoid")],
        [(3, "Input"), (4, "ReLU"), (2, "Softmax")],
        [(2, "Input"), (5, "Tanh"), (3, "LeakyReLU"), (4, "Sigmoid")],
    ],
)
def test_forward_lengths_follow_topology(layers: list[tuple[int, str]]) -> None:
    network = _network(layers)
    result = network.forward(np.ones(layers[0][0]))
    assert result.output.shape == (layers[-1][0],)
    assert len(result.hidden_outputs) == len(layers) - 2
    for hidden, (size, _) in zip(result.hidden_outputs, layers[1:-1]):
        assert hidden.shape == (size,)


def test_forward_subtracts_bias() -> None:
    network = _network([(2, "Input"), (3, "Tanh"), (1, "Sigmoid")])
    network.weights[0] = np.array([[0.2, -0.4, 1.0], [0.5, -0.3, 0.8]])
    network.biases[0] = np.array([0.1, -0.2, 0.05])
    network.weights[1] = np.array([[0.7], [-1.2], [0.3]])
    network.biases[1] = np.array([0.4])

    inputs = np.array([1.0, 2.0])
    result = network.forward(inputs)

    expected_hidden = np.tanh(inputs @ network.weights[0] - network.biases[0])
    expected_output = sigmoid(expected_hidden @ network.weights[1] - network.biases[1])
    assert np.allclose(result.hidden_outputs[0], expected_hidden)
    assert np.allclose(result.output, expected_output)


def test_softmax_output_is_a_distribution() -> None:
    network = _network([(2, "Input"), (6, "ReLU"), (4, "Softmax")], seed=5)
    rng = np.random.default_rng(11)
    for _ in range(5):
        output = network.predict(rng.normal(size=2) * 10)
        assert np.isclose(np.sum(output), 1.0)
        assert np.all((output >= 0) & (output <= 1))


def test_train_one_matches_manual_backpropagation() -> None:
    network = _network([(2, "Input"), (2, "Sigmoid"), (1, "Sigmoid")], learning_rate=0.5)
    w0 = np.array([[0.15, 0.25], [0.20, 0.30]])
    b0 = np.array([0.35, 0.35])
    w1 = np.array([[0.40], [0.45]])
    b1 = np.array([0.60])
    network.weights = [w0.copy(), w1.copy()]
    network.biases = [b0.copy(), b1.copy()]
    x = np.array([0.05, 0.10])
    t = np.array([0.99])
    lr = 0.5

    hidden = sigmoid(x @ w0 - b0)
    output = sigmoid(hidden @ w1 - b1)
    delta_out = output * (1 - output) * (t - output)
    new_w1 = w1 + lr * np.outer(hidden, delta_out)
    new_b1 = b1 - lr * delta_out
    delta_hidden = hidden * (1 - hidden) * (delta_out @ new_w1.T)
    new_w0 = w0 + lr * np.outer(x, delta_hidden)
    new_b0 = b0 - lr * delta_hidden

    network.train_one(x, t)

    assert np.allclose(network.weights[1], new_w1)
    assert np.allclose(network.biases[1], new_b1)
    assert np.allclose(network.weights[0], new_w0)
    assert np.allclose(network.biases[0], new_b0)


def test_train_one_with_softmax_output_reduces_cross_entropy() -> None:
    network = _network([(2, "Input"), (4, "Tanh"), (3, "Softmax")], seed=3, learning_rate=0.1)
    x = np.array([0.5, -1.0])
    t = np.array([0.0, 1.0, 0.0])
    before = calculate_cross_entropy(network.predict(x), t)
    network.train_one(x, t)
    after = calculate_cross_entropy(network.predict(x), t)
    assert after < before


def test_train_one_with_softmax_output_subtracts_deltas() -> None:
    network = _network([(1, "Input"), (2, "Softmax")], learning_rate=1.0)
    network.weights = [np.array([[0.0, 0.0]])]
    network.biases = [np.array([0.0, 0.0])]
    network.train_one([1.0], [1.0, 0.0])

    # output is [0.5, 0.5], so delta = output - target = [-0.5, 0.5]
    assert np.allclose(network.weights[0], [[0.5, -0.5]])
    assert np.allclose(network.biases[0], [-0.5, 0.5])


def test_train_one_replaces_parameter_arrays() -> None:
    network = _network([(2, "Input"), (3, "ReLU"), (1, "Sigmoid")])
    old_weights = [w.copy() for w in network.weights]
    old_arrays = list(network.weights)
    network.train_one([1.0, -1.0], [1.0])
    for old, current, snapshot in zip(old_arrays, network.weights, old_weights):
        assert current is not old
        assert np.array_equal(old, snapshot)


def test_train_one_rejects_bad_target_without_mutating() -> None:
    network = _network([(2, "Input"), (2, "Sigmoid")])
    before = [param.copy() for param in network.parameters()]
    with pytest.raises(ValueError):
        network.train_one([0.0, 1.0], [1.0, 0.0, 0.0])
    for param, snapshot in zip(network.parameters(), before):
        assert np.array_equal(param, snapshot)


def test_forward_rejects_wrong_input_length() -> None:
    network = _network([(3, "Input"), (1, "Sigmoid")])
    with pytest.raises(ValueError, match="length 3"):
        network.forward([1.0, 2.0])


def test_predict_does_not_touch_parameters() -> None:
    network = _network([(2, "Input"), (3, "Tanh"), (2, "Softmax")])
    before = [param.copy() for param in network.parameters()]
    network.predict([0.3, 0.7])
    for param, snapshot in zip(network.parameters(), before):
        assert np.array_equal(param, snapshot)


def test_parameter_shapes_per_transition() -> None:
    network = _network([(3, "Input"), (5, "ReLU"), (2, "Softmax")])
    assert [w.shape for w in network.weights] == [(3, 5), (5, 2)]
    assert [b.shape for b in network.biases] == [(5,), (2,)]
    assert len(network.parameters()) == 4


def test_instances_do_not_share_parameters() -> None:
    config = Config(layers=[(2, "Input"), (2, "Sigmoid")])
    first = NeuralNetwork(config, seed=1)
    second = NeuralNetwork(config, seed=1)
    assert np.array_equal(first.weights[0], second.weights[0])
    first.train_one([1.0, 1.0], [1.0, 0.0])
    assert not np.array_equal(first.weights[0], second.weights[0])


def test_same_seed_gives_same_initial_parameters() -> None:
    config = Config(layers=[(2, "Input"), (3, "ReLU"), (1, "Sigmoid")])
    first = NeuralNetwork(config, seed=42)
    second = NeuralNetwork(config, rng=np.random.default_rng(42))
    for a, b in zip(first.parameters(), second.parameters()):
        assert np.array_equal(a, b)


def test_seed_and_rng_are_exclusive() -> None:
    config = Config(layers=[(2, "Input"), (1, "Sigmoid")])
    with pytest.raises(ValueError):
        NeuralNetwork(config, seed=1, rng=np.random.default_rng(1))


def test_fewer_than_two_layers_is_invalid_topology() -> None:
    with pytest.raises(InvalidTopology):
        _network([(2, "Input")])


@pytest.mark.parametrize(
    "layers",
    [
        [(2, "Input"), (3, "Softmax"), (2, "Softmax")],
        [(2, "Input"), (3, "Input"), (1, "Sigmoid")],
        [(2, "Input"), (2, "Input")],
        [(2, "Softmax"), (1, "Sigmoid")],
    ],
)
def test_misplaced_activation_fails_construction(layers: list[tuple[int, str]]) -> None:
    with pytest.raises(UnsupportedActivation):
        _network(layers)

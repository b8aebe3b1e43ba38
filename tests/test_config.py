import json
from pathlib import Path

import pytest

from my_mlp import (
    DEFAULT_CONFIG,
    Activation,
    Config,
    Goal,
    GoalMetric,
    InvalidTopology,
    Layer,
    UnknownMetric,
    UnsupportedActivation,
    format_layers,
    load_config,
    parse_layers,
)


def test_config_coerces_layer_pairs() -> None:
    config = Config(layers=[(2, "Input"), (3, "sigmoid"), (1, Activation.TANH)])
    assert config.layers == (
        Layer(2, Activation.INPUT),
        Layer(3, Activation.SIGMOID),
        Layer(1, Activation.TANH),
    )
    assert config.output_activation is Activation.TANH


@pytest.mark.parametrize("layers", [[], [(2, "Input")]])
def test_config_requires_two_layers(layers: list[tuple[int, str]]) -> None:
    with pytest.raises(InvalidTopology):
        Config(layers=layers)


@pytest.mark.parametrize(
    "overrides",
    [
        {"learning_rate": 0.0},
        {"learning_rate": float("nan")},
        {"learning_rate": float("inf")},
        {"learning_rate": "fast"},
        {"max_epochs": 0},
        {"max_epochs": 2.5},
        {"test_data_ratio": 1.5},
        {"test_data_ratio": -0.1},
        {"test_data_ratio": float("nan")},
    ],
)
def test_config_rejects_out_of_range_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        Config(layers=[(2, "Input"), (1, "Sigmoid")], **overrides)


def test_layer_rejects_bad_size_and_activation() -> None:
    with pytest.raises(ValueError):
        Layer(0, Activation.SIGMOID)
    with pytest.raises(UnsupportedActivation):
        Layer(2, "Gelu")  # type: ignore[arg-type]


def test_goal_rejects_negative_error() -> None:
    with pytest.raises(ValueError):
        Goal(GoalMetric.SSE, -1.0)


@pytest.mark.parametrize("error", [float("nan"), float("inf"), "0.1"])
def test_goal_rejects_non_finite_error(error: object) -> None:
    with pytest.raises(ValueError):
        Goal(GoalMetric.MSE, error)  # type: ignore[arg-type]


@pytest.mark.parametrize("activation", ["Softmax", "Sigmoid", "ReLU"])
def test_config_requires_input_activation_on_first_layer(activation: str) -> None:
    with pytest.raises(UnsupportedActivation, match="first layer"):
        Config(layers=[(2, activation), (1, "Sigmoid")])


def test_default_config_matches_documented_values() -> None:
    assert format_layers(DEFAULT_CONFIG.layers) == "2 Input\n4 Softmax"
    assert DEFAULT_CONFIG.learning_rate == 0.1
    assert DEFAULT_CONFIG.max_epochs == 500
    assert DEFAULT_CONFIG.goal == Goal(GoalMetric.MSE, 0.001)
    assert DEFAULT_CONFIG.test_data_ratio == 0.3


def test_parse_layers_round_trips_text_form() -> None:
    text = "2 Input\n\n 5 ReLU \n3 Softmax"
    layers = parse_layers(text)
    assert [layer.size for layer in layers] == [2, 5, 3]
    assert format_layers(layers) == "2 Input\n5 ReLU\n3 Softmax"


@pytest.mark.parametrize(
    "text, message",
    [
        ("2 Input\nfour Softmax", "Line 2"),
        ("2 Input Sigmoid", "Line 1"),
        ("2 Input\n3 Swish", "Line 2"),
    ],
)
def test_parse_layers_reports_bad_line(text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_layers(text)


def test_load_valid_config(tmp_path: Path) -> None:
    config = {
        "layers": [[2, "Input"], [4, "Tanh"], [3, "Softmax"]],
        "learningRate": 0.2,
        "maxEpochs": 50,
        "goal": {"metric": "CrossEntropy", "error": 0.05},
        "testDataRatio": 0.8,
    }
    p = tmp_path / "valid.json"
    p.write_text(json.dumps(config), encoding="utf-8")

    loaded = load_config(p)
    assert [layer.activation for layer in loaded.layers] == [
        Activation.INPUT,
        Activation.TANH,
        Activation.SOFTMAX,
    ]
    assert loaded.learning_rate == 0.2
    assert loaded.max_epochs == 50
    assert loaded.goal == Goal(GoalMetric.CROSS_ENTROPY, 0.05)
    assert loaded.test_data_ratio == 0.8


def test_load_config_accepts_snake_case_and_layer_text(tmp_path: Path) -> None:
    config = {"layers": "2 Input\n1 Sigmoid", "max_epochs": 10}
    p = tmp_path / "snake.json"
    p.write_text(json.dumps(config), encoding="utf-8")

    loaded = load_config(p)
    assert format_layers(loaded.layers) == "2 Input\n1 Sigmoid"
    assert loaded.max_epochs == 10
    assert loaded.learning_rate == DEFAULT_CONFIG.learning_rate
    assert loaded.goal == DEFAULT_CONFIG.goal


def test_load_config_defaults(tmp_path: Path) -> None:
    p = tmp_path / "empty.json"
    p.write_text("{}", encoding="utf-8")
    assert load_config(p) == DEFAULT_CONFIG


def test_load_config_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "invalid.json"
    p.write_text("{invalid json", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        load_config(p)


def test_load_config_root_must_be_object(tmp_path: Path) -> None:
    p = tmp_path / "list.json"
    p.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError, match="root must be a dictionary"):
        load_config(p)


def test_load_config_rejects_unexpected_keys(tmp_path: Path) -> None:
    p = tmp_path / "extra.json"
    p.write_text(json.dumps({"batchSize": 32}), encoding="utf-8")

    with pytest.raises(ValueError, match="Unexpected configuration keys: batchSize"):
        load_config(p)


def test_load_config_unknown_metric(tmp_path: Path) -> None:
    p = tmp_path / "metric.json"
    p.write_text(json.dumps({"goal": {"metric": "MAE", "error": 0.1}}), encoding="utf-8")

    with pytest.raises(UnknownMetric):
        load_config(p)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")

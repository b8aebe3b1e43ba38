from __future__ import annotations

from .activations import (
    Activation,
    UnsupportedActivation,
    leaky_relu,
    leaky_relu_derivative,
    lookup,
    lookup_derivative,
    relu,
    relu_derivative,
    sigmoid,
    sigmoid_derivative,
    softmax,
    tanh,
    tanh_derivative,
)
from .config import (
    DEFAULT_CONFIG,
    Config,
    Goal,
    InvalidTopology,
    Layer,
    format_layers,
    load_config,
    parse_layers,
)
from .dataset import DataSet, Example, make_example
from .initializers import initialization_limit, initialize
from .metrics import (
    EvaluationResult,
    GoalMetric,
    UnknownMetric,
    calculate_cross_entropy,
    calculate_sse,
    evaluate,
    is_correct,
)
from .neural_network import ForwardPass, NeuralNetwork
from .results import (
    HistoryPoint,
    ModelResultData,
    TestResults,
    TrainResults,
    format_result_summary,
)
from .training import (
    TrainingState,
    fit,
    fit_in_background,
    shuffle_dataset,
    split_dataset,
)

__all__ = [
    "Activation",
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
    "initialize",
    "initialization_limit",
    "Layer",
    "Goal",
    "GoalMetric",
    "Config",
    "DEFAULT_CONFIG",
    "InvalidTopology",
    "parse_layers",
    "format_layers",
    "load_config",
    "Example",
    "DataSet",
    "make_example",
    "EvaluationResult",
    "UnknownMetric",
    "calculate_sse",
    "calculate_cross_entropy",
    "is_correct",
    "evaluate",
    "ForwardPass",
    "NeuralNetwork",
    "HistoryPoint",
    "TrainResults",
    "TestResults",
    "ModelResultData",
    "format_result_summary",
    "TrainingState",
    "shuffle_dataset",
    "split_dataset",
    "fit",
    "fit_in_background",
]

import argparse
import dataclasses
import json
import logging
import sys
from typing import NoReturn

import numpy as np

from my_mlp.config import DEFAULT_CONFIG, Config, Goal, load_config, parse_layers
from my_mlp.metrics import GoalMetric
from my_mlp.neural_network import NeuralNetwork
from my_mlp.results import format_result_summary
from my_mlp_trainer.dataset import DataSetInfo, load_training_data
from my_mlp_trainer.labels import create_label_prediction_map, describe_prediction
from my_mlp_trainer.samples import SAMPLE_DATASETS, load_sample_dataset

EXIT_SUCCESS = 0
EXIT_ERROR = 84

HELP_TEXT = f"""USAGE
./my_mlp_trainer [OPTIONS] (DATAFILE | --sample NAME)
DESCRIPTION
Train a feedforward neural network on a labelled dataset, report the training
and test metrics, then optionally classify new inputs.
DATAFILE
CSV file with a header row; every row holds numeric features followed by the
class label in the last column.
--sample NAME
Use a generated sample dataset instead of DATAFILE; two-class samples always
use a single 0/1 target. One of:
{", ".join(SAMPLE_DATASETS)}
--config FILE
JSON configuration (layers, learningRate, maxEpochs, goal, testDataRatio)
--layers TEXT
Layers as '<size> <Activation>' separated by ';' (e.g. "2 Input;4 Softmax")
--lr
Learning rate
--epochs
Maximum number of epochs
--goal-metric {{SSE,MSE,CrossEntropy}}
Loss used to decide convergence
--goal-error
Training stops once the loss is at or below this value
--test-data-ratio
Fraction of the shuffled dataset used for training, the rest is tested on
--binary
Encode a two-class DATAFILE with a single 0/1 target
--seed
Random seed for initialization and shuffling
--predict X1,X2,...
Classify the given input after training (can be repeated)
--json
Print the training result as JSON instead of a summary
--verbose
Log training progress to stderr"""

logger = logging.getLogger(__name__)


class SubjectArgumentParser(argparse.ArgumentParser):
    """
    ArgumentParser that prints the help text and exits with code 84 on error.
    """

    def error(self, message: str) -> NoReturn:
        print(HELP_TEXT)
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


def _parse_vector(text: str) -> list[float]:
    try:
        return [float(value) for value in text.split(",") if value.strip()]
    except ValueError as exc:
        raise ValueError(f"Invalid prediction input '{text}'") from exc


def _build_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    changes: dict[str, object] = {}
    if args.layers:
        changes["layers"] = parse_layers(args.layers.replace(";", "\n"))
    if args.lr is not None:
        changes["learning_rate"] = args.lr
    if args.epochs is not None:
        changes["max_epochs"] = args.epochs
    if args.test_data_ratio is not None:
        changes["test_data_ratio"] = args.test_data_ratio
    if args.goal_metric is not None or args.goal_error is not None:
        changes["goal"] = Goal(
            metric=GoalMetric.parse(args.goal_metric)
            if args.goal_metric is not None
            else config.goal.metric,
            error=args.goal_error if args.goal_error is not None else config.goal.error,
        )
    return dataclasses.replace(config, **changes) if changes else config


def _load_data(args: argparse.Namespace) -> DataSetInfo:
    if args.sample:
        return load_sample_dataset(args.sample, seed=args.seed)
    return load_training_data(args.datafile, binary=args.binary)


def _check_compatibility(config: Config, info: DataSetInfo) -> None:
    example = info.dataset[0]
    input_size = config.layers[0].size
    output_size = config.layers[-1].size
    if example.input.size != input_size:
        raise ValueError(
            f"Input layer has {input_size} neuron(s) but the dataset has "
            f"{example.input.size} feature(s)."
        )
    if example.target.size != output_size:
        raise ValueError(
            f"Output layer has {output_size} neuron(s) but targets have "
            f"{example.target.size} value(s)."
        )


def run_trainer(args: argparse.Namespace) -> None:
    """
    Core logic for training a network and running predictions.
    """
    if args.sample and args.datafile:
        raise ValueError("DATAFILE and --sample are mutually exclusive.")
    if not args.sample and not args.datafile:
        raise ValueError("Missing DATAFILE or --sample.")

    config = _build_config(args)
    info = _load_data(args)
    _check_compatibility(config, info)

    network = NeuralNetwork(config, seed=args.seed)
    result = network.fit(info.dataset)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result_summary(result))

    for raw_input in args.predict or []:
        vector = _parse_vector(raw_input)
        output = network.predict(vector)
        predicted = describe_prediction(output, info.classes)
        if output.size == len(info.classes):
            scores = create_label_prediction_map(output, info.classes)
            details = ", ".join(f"{label}={value:.4f}" for label, value in scores.items())
        else:
            details = f"output={float(np.ravel(output)[0]):.4f}"
        print(f"{raw_input} -> {predicted} ({details})")


def main() -> int:
    """
    Main entry point for the my_mlp_trainer CLI.
    """
    if "-h" in sys.argv or "--help" in sys.argv:
        print(HELP_TEXT)
        return EXIT_SUCCESS

    parser = SubjectArgumentParser(add_help=False)
    parser.add_argument("--sample", type=str)
    parser.add_argument("--config", type=str)
    parser.add_argument("--layers", type=str)
    parser.add_argument("--lr", type=float)
    parser.add_argument("--epochs", type=int)
    parser.add_argument(
        "--goal-metric", choices=[metric.value for metric in GoalMetric]
    )
    parser.add_argument("--goal-error", type=float)
    parser.add_argument("--test-data-ratio", type=float)
    parser.add_argument("--binary", action="store_true")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--predict", action="append")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("datafile", nargs="?")

    try:
        args = parser.parse_args()
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        run_trainer(args)
        return EXIT_SUCCESS

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        logger.debug("training failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

"""Command line trainer and dataset helpers for the my_mlp project."""

from .cli import main
from .dataset import DataSetInfo, encode_rows, load_training_data, one_hot_encode
from .labels import (
    create_label_prediction_map,
    describe_prediction,
    find_max_entry,
    map_prediction_to_label,
)
from .samples import SAMPLE_DATASETS, load_sample_dataset

__all__ = [
    "DataSetInfo",
    "SAMPLE_DATASETS",
    "create_label_prediction_map",
    "describe_prediction",
    "encode_rows",
    "find_max_entry",
    "load_sample_dataset",
    "load_training_data",
    "main",
    "map_prediction_to_label",
    "one_hot_encode",
]

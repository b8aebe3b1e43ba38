from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from my_mlp.dataset import DataSet, make_example

MIN_ROW_CELLS = 3


@dataclass(slots=True)
class DataSetInfo:
    """Encoded examples together with the class order used to encode them."""

    dataset: DataSet
    classes: list[str]
    class_legend: dict[str, int]


def one_hot_encode(
    label: str, class_to_index: Mapping[str, int], *, binary: bool = False
) -> list[float]:
    """
    Encode a class name as a target vector.

    With ``binary`` set and exactly two classes the target is the single
    value ``[index]``; otherwise it is a one-hot vector.

    Raises:
        ValueError: If the label is not a known class.
    """
    if label not in class_to_index:
        raise ValueError(f"Unknown label: '{label}'")
    index = class_to_index[label]
    if binary and len(class_to_index) == 2:
        return [float(index)]
    one_hot = [0.0] * len(class_to_index)
    one_hot[index] = 1.0
    return one_hot


def encode_rows(
    rows: Iterable[tuple[Sequence[float], str]], *, binary: bool = False
) -> DataSetInfo:
    """
    Turn (features, label) pairs into examples with encoded targets.

    Classes are indexed in lexicographic order of their names so the legend
    is stable regardless of row order.
    """
    materialized = [(list(features), str(label)) for features, label in rows]
    classes = sorted({label for _, label in materialized})
    class_legend = {name: index for index, name in enumerate(classes)}
    dataset = [
        make_example(
            features,
            one_hot_encode(label, class_legend, binary=binary),
            label,
        )
        for features, label in materialized
    ]
    return DataSetInfo(dataset=dataset, classes=classes, class_legend=class_legend)


def load_training_data(file_path: str | Path, *, binary: bool = False) -> DataSetInfo:
    """
    Loads a labelled dataset from a CSV file.

    The first row is a header and is skipped. Each following row holds the
    numeric features followed by the class label in the last column; rows
    with fewer than three cells are ignored.

    Args:
        file_path: Path to the CSV file.
        binary: Encode two-class problems with a single 0/1 target.

    Returns:
        DataSetInfo with the examples, class names and class legend.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a feature is not numeric or the file holds no rows.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    rows: list[tuple[list[float], str]] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)
        for line_num, row in enumerate(reader, start=2):
            cells = [cell.strip() for cell in row]
            if len(cells) < MIN_ROW_CELLS:
                continue
            *feature_cells, label = cells
            try:
                features = [float(cell) for cell in feature_cells]
            except ValueError as exc:
                raise ValueError(
                    f"Line {line_num}: features must be numeric."
                ) from exc
            rows.append((features, label))

    if not rows:
        raise ValueError(f"No examples found in {path}")
    widths = {len(features) for features, _ in rows}
    if len(widths) != 1:
        raise ValueError("All rows must have the same number of features")
    return encode_rows(rows, binary=binary)

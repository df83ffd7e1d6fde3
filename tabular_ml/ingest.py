"""
CSV ingestion.

Turns a CSV file into a SampleTable, or returns None when the file holds no
usable data. Callers never receive a partially populated table.
"""

import os
from typing import Optional, Union

import numpy as np
import pandas as pd

from .dataset import LABEL_LIMIT, SampleTable
from .logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _no_data(filepath, reason: str) -> None:
    logger.warning("No data loaded from %s: %s", filepath, reason)
    return None


def _encode_labels(raw: pd.Series):
    """
    Convert a label column to integer ids.

    Numeric labels are truncated to int. Anything else is interned in order
    of first appearance and the original values are returned as names.
    Returns None when a numeric label does not fit in int64.
    """
    numeric = pd.to_numeric(raw, errors="coerce")
    if numeric.notna().all():
        values = numeric.to_numpy(dtype=np.float64)
        if np.all(np.isfinite(values)):
            values = np.trunc(values)
            if np.any(np.abs(values) >= LABEL_LIMIT):
                return None
            return values.astype(np.int64), None

    codes, uniques = pd.factorize(raw.astype(str), sort=False)
    return codes.astype(np.int64), tuple(uniques)


def load_csv(
    filepath: PathLike,
    has_header: bool = True,
    label_column: int = -1,
) -> Optional[SampleTable]:
    """
    Load a labeled table from a CSV file.

    Args:
        filepath: Path to a file with a ``.csv`` extension.
        has_header: Whether the first line holds column names.
        label_column: Position of the label column; -1 selects the last one.

    Returns:
        SampleTable with every other column as a feature, or None when the
        path is not a CSV file, cannot be read or parsed, has no data rows,
        or contains a missing or non-numeric feature value.
    """
    path = os.fspath(filepath)
    if not path.lower().endswith(".csv"):
        return _no_data(path, "not a .csv file")

    try:
        df = pd.read_csv(path, header=0 if has_header else None, skipinitialspace=True)
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        return _no_data(path, f"{type(e).__name__}: {e}")

    if df.empty:
        return _no_data(path, "no data rows")

    n_cols = df.shape[1]
    if n_cols < 2:
        return _no_data(path, "need at least one feature column and a label column")

    label_idx = n_cols - 1 if label_column == -1 else label_column
    if not 0 <= label_idx < n_cols:
        return _no_data(path, f"label column {label_column} out of range for {n_cols} columns")

    raw_labels = df.iloc[:, label_idx]
    if raw_labels.isna().any():
        return _no_data(path, "missing label value")

    feature_idx = [i for i in range(n_cols) if i != label_idx]
    features = df.iloc[:, feature_idx].apply(pd.to_numeric, errors="coerce")
    X = features.to_numpy(dtype=np.float64)
    if not np.all(np.isfinite(X)):
        return _no_data(path, "missing or non-numeric feature value")

    encoded = _encode_labels(raw_labels)
    if encoded is None:
        return _no_data(path, "label value out of integer range")
    labels, label_names = encoded

    table = SampleTable(X, labels, label_names=label_names)
    logger.debug("Loaded %r from %s", table, path)
    return table

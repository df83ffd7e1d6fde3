"""
Pytest configuration for the tabular_ml tests.

Puts the project root and the evaluation/ directory on the import path so
the tests run from a plain checkout as well as from an installed package.
"""

import sys
from pathlib import Path

import numpy as np
import pytest


def _setup_import_path():
    """Make tabular_ml and the evaluation harness importable."""
    project_root = Path(__file__).parent.parent
    for path in (project_root, project_root / "evaluation"):
        if str(path) not in sys.path:
            sys.path.insert(0, str(path))

_setup_import_path()

from tabular_ml import SampleTable  # noqa: E402


@pytest.fixture
def two_clusters():
    """Two well separated clusters, labels 0 and 1."""
    features = [
        [1.0, 1.0], [1.5, 2.0], [2.0, 1.0], [1.0, 2.5],
        [10.0, 10.0], [10.5, 11.0], [11.0, 10.0], [10.0, 11.5],
    ]
    labels = [0, 0, 0, 0, 1, 1, 1, 1]
    return SampleTable(features, labels)


@pytest.fixture
def random_table():
    """A 40 x 3 table with distinct rows and three classes."""
    rng = np.random.default_rng(7)
    features = rng.normal(loc=5.0, scale=3.0, size=(40, 3))
    labels = np.arange(40) % 3
    return SampleTable(features, labels)


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file under tmp_path and return its path."""
    def _write(text, name="data.csv"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write

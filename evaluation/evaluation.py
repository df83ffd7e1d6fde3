#!/usr/bin/env python3
"""
Evaluation harness for the KNN classifier.

Loads a labeled CSV file, optionally rescales it, splits it into train and
test tables, fits a KNNClassifier and writes a JSON report to
<reports-dir>/latest.json.

Usage:
    python evaluation/evaluation.py --data data/iris.csv --k 5 --scaling normalize
"""

import argparse
import json
import platform
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from tabular_ml import KNNClassifier, TabularMLError, get_metric, load_csv
from tabular_ml import config, metrics
from tabular_ml.logger import get_logger, setup_logger

logger = get_logger("evaluation")

SCALINGS = ("none", "normalize", "standardize")


def environment_info():
    """Collect environment metadata."""
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform()
    }


def _now():
    return datetime.now(timezone.utc)


def _timestamp(moment):
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Train and evaluate a KNN classifier on a labeled CSV file."
    )
    parser.add_argument("--data", type=str, default=config.DATA_PATH,
                        help=f"Path to the dataset CSV file (default: {config.DATA_PATH}).")
    parser.add_argument("--k", type=int, default=config.DEFAULT_K,
                        help=f"Number of neighbors (default: {config.DEFAULT_K}).")
    parser.add_argument("--metric", type=str, default="euclidean",
                        choices=["euclidean", "manhattan", "chebyshev", "minkowski"],
                        help="Distance metric (default: euclidean).")
    parser.add_argument("--p", type=float, default=None,
                        help="Order of the Minkowski metric (default: 2).")
    parser.add_argument("--test-ratio", type=float, default=config.DEFAULT_TEST_RATIO,
                        help=f"Held-out fraction (default: {config.DEFAULT_TEST_RATIO}).")
    parser.add_argument("--seed", type=int, default=config.DEFAULT_SEED,
                        help=f"Split seed (default: {config.DEFAULT_SEED}).")
    parser.add_argument("--scaling", type=str, choices=SCALINGS, default="none",
                        help="Rescaling applied before the split (default: none).")
    parser.add_argument("--no-header", action="store_true",
                        help="The CSV file has no header line.")
    parser.add_argument("--label-column", type=int, default=-1,
                        help="Position of the label column, -1 for the last (default: -1).")
    parser.add_argument("--reports-dir", type=str, default=config.REPORTS_DIR,
                        help=f"Directory for latest.json (default: {config.REPORTS_DIR}).")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Override the log level (e.g. INFO, DEBUG).")
    return parser


def _label_name(table, label):
    if table.label_names:
        return str(table.label_names[label])
    return str(label)


def run_pipeline(args):
    """
    Run load -> scale -> split -> fit -> evaluate.

    Returns:
        dict with split sizes, accuracy, confusion matrix and per-class
        precision/recall/F1, or None when the CSV file holds no usable data.

    Raises:
        TabularMLError: If a parameter is invalid (test ratio, k, p, ...).
    """
    table = load_csv(args.data, has_header=not args.no_header, label_column=args.label_column)
    if table is None:
        return None
    logger.info("Loaded %r from %s", table, args.data)

    if args.scaling == "normalize":
        table.normalize()
    elif args.scaling == "standardize":
        table.standardize()

    train, test = table.split(args.test_ratio, args.seed)
    logger.info("Split into %d training and %d test rows", len(train), len(test))

    model = KNNClassifier(k=args.k, metric=get_metric(args.metric, args.p))
    model.fit(train)

    predictions = model.predict(test.features) if len(test) else np.empty(0, dtype=np.int64)
    acc = model.score(test)
    logger.info("Accuracy: %.2f%%", acc * 100)

    # Confusion matrix rows/columns follow the sorted label order in "classes"
    classes = np.unique(np.concatenate([train.labels, test.labels]))
    cm = metrics.confusion_matrix(
        np.searchsorted(classes, test.labels),
        np.searchsorted(classes, predictions),
        n_classes=len(classes),
    )

    names = [_label_name(table, label) for label in classes.tolist()]
    per_class = {}
    for label, name in zip(classes.tolist(), names):
        per_class[name] = {
            "precision": metrics.precision(test.labels, predictions, label),
            "recall": metrics.recall(test.labels, predictions, label),
            "f1": metrics.f1_score(test.labels, predictions, label),
        }

    return {
        "n_samples": len(table),
        "n_features": table.n_features,
        "n_train": len(train),
        "n_test": len(test),
        "accuracy": acc,
        "classes": names,
        "confusion_matrix": cm.tolist(),
        "per_class": per_class,
    }


def run_evaluation(args):
    """
    Run the pipeline and wrap its outcome in a report.

    Returns:
        dict with the complete evaluation report
    """
    run_id = str(uuid.uuid4())
    start = _now()

    results = None
    error = None
    try:
        results = run_pipeline(args)
        if results is None:
            error = f"no data loaded from {args.data}"
    except TabularMLError as e:
        error = f"{type(e).__name__}: {e}"
        logger.error("Evaluation failed: %s", error)

    end = _now()
    return {
        "run_id": run_id,
        "started_at": _timestamp(start),
        "finished_at": _timestamp(end),
        "duration_seconds": (end - start).total_seconds(),
        "environment": environment_info(),
        "config": {
            "data": args.data,
            "k": args.k,
            "metric": args.metric,
            "p": args.p,
            "test_ratio": args.test_ratio,
            "seed": args.seed,
            "scaling": args.scaling,
            "has_header": not args.no_header,
            "label_column": args.label_column,
        },
        "results": results,
        "success": error is None,
        "error": error,
    }


def main(argv=None):
    """
    Main entry point for the evaluation script.

    Returns:
        int: Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)
    if args.log_level:
        setup_logger(args.log_level.upper())

    report = run_evaluation(args)

    reports = Path(args.reports_dir)
    reports.mkdir(parents=True, exist_ok=True)
    report_path = reports / "latest.json"
    report_path.write_text(json.dumps(report, indent=2))

    print(f"Report written to {report_path}")
    if not report["success"]:
        print(f"Evaluation error: {report['error']}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

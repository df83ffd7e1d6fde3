"""Tests for the evaluation harness."""

import json
import logging

import pytest

import evaluation


def _cluster_csv(n_per_class=10, labels=("setosa", "virginica")):
    low, high = labels
    lines = ["x,y,species"]
    for i in range(n_per_class):
        lines.append(f"{1.0 + 0.1 * i},{1.0 + 0.05 * i},{low}")
        lines.append(f"{10.0 + 0.1 * i},{10.0 - 0.05 * i},{high}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def dataset(write_csv):
    return write_csv(_cluster_csv())


def _report(reports_dir):
    return json.loads((reports_dir / "latest.json").read_text())


class TestMain:
    def test_successful_run_writes_report(self, dataset, tmp_path, capsys):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(dataset), "--k", "3", "--test-ratio", "0.25",
            "--seed", "7", "--reports-dir", str(reports),
        ])

        assert code == 0
        assert "Report written to" in capsys.readouterr().out

        report = _report(reports)
        assert report["success"] is True
        assert report["error"] is None
        assert report["config"]["k"] == 3
        assert report["config"]["seed"] == 7

        results = report["results"]
        assert results["n_samples"] == 20
        assert results["n_features"] == 2
        assert results["n_test"] == 5
        assert results["n_train"] == 15
        assert results["accuracy"] == 1.0
        assert set(results["per_class"]) <= {"setosa", "virginica"}
        assert sum(map(sum, results["confusion_matrix"])) == 5

    def test_report_metadata(self, dataset, tmp_path):
        reports = tmp_path / "reports"
        evaluation.main(["--data", str(dataset), "--reports-dir", str(reports)])
        report = _report(reports)

        assert report["run_id"]
        assert report["started_at"].endswith("Z")
        assert report["duration_seconds"] >= 0
        assert "python_version" in report["environment"]

    @pytest.mark.parametrize("scaling", ["normalize", "standardize"])
    def test_scaling_options(self, dataset, tmp_path, scaling):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(dataset), "--scaling", scaling, "--test-ratio", "0.5",
            "--reports-dir", str(reports),
        ])
        assert code == 0
        assert _report(reports)["results"]["accuracy"] == 1.0

    def test_minkowski_metric(self, dataset, tmp_path):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(dataset), "--metric", "minkowski", "--p", "3",
            "--test-ratio", "0.5", "--reports-dir", str(reports),
        ])
        assert code == 0
        assert _report(reports)["config"]["p"] == 3.0

    def test_report_lists_classes_in_matrix_order(self, dataset, tmp_path):
        reports = tmp_path / "reports"
        evaluation.main([
            "--data", str(dataset), "--test-ratio", "0.5", "--reports-dir", str(reports),
        ])
        results = _report(reports)["results"]

        assert results["classes"] == ["setosa", "virginica"]
        matrix = results["confusion_matrix"]
        assert sum(map(sum, matrix)) == 10
        assert matrix[0][1] == matrix[1][0] == 0
        assert list(results["per_class"]) == results["classes"]

    @pytest.mark.parametrize("labels", [(-1, 1), (0, 1000000), (-5, -2)])
    def test_negative_and_sparse_labels(self, write_csv, tmp_path, labels):
        path = write_csv(_cluster_csv(labels=labels))
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(path), "--test-ratio", "0.5", "--reports-dir", str(reports),
        ])

        assert code == 0
        results = _report(reports)["results"]
        assert results["classes"] == [str(label) for label in labels]
        matrix = results["confusion_matrix"]
        assert len(matrix) == 2
        assert all(len(row) == 2 for row in matrix)
        assert sum(map(sum, matrix)) == results["n_test"] == 10
        assert results["accuracy"] == 1.0
        assert matrix[0][1] == matrix[1][0] == 0

    def test_missing_data_fails(self, tmp_path, capsys):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(tmp_path / "missing.csv"), "--reports-dir", str(reports),
        ])

        assert code == 1
        assert "no data loaded" in capsys.readouterr().err
        report = _report(reports)
        assert report["success"] is False
        assert report["results"] is None

    def test_k_larger_than_training_set_fails(self, dataset, tmp_path):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(dataset), "--k", "50", "--reports-dir", str(reports),
        ])

        assert code == 1
        assert "InvalidArgumentError" in _report(reports)["error"]

    def test_invalid_test_ratio_fails(self, dataset, tmp_path):
        reports = tmp_path / "reports"
        code = evaluation.main([
            "--data", str(dataset), "--test-ratio", "1.5", "--reports-dir", str(reports),
        ])

        assert code == 1
        assert "test_ratio" in _report(reports)["error"]


class TestParser:
    def test_defaults_come_from_config(self):
        from tabular_ml import config

        args = evaluation.build_parser().parse_args([])
        assert args.k == config.DEFAULT_K
        assert args.seed == config.DEFAULT_SEED
        assert args.test_ratio == config.DEFAULT_TEST_RATIO
        assert args.scaling == "none"
        assert args.metric == "euclidean"

    def test_rejects_unknown_metric(self):
        with pytest.raises(SystemExit):
            evaluation.build_parser().parse_args(["--metric", "cosine"])

    def test_log_level_override(self, dataset, tmp_path):
        root = logging.getLogger("tabular_ml")
        previous = root.level
        try:
            code = evaluation.main([
                "--data", str(dataset), "--log-level", "debug",
                "--reports-dir", str(tmp_path / "reports"),
            ])
            assert code == 0
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)

"""Unit tests for the command-line interface."""

import json

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

from cytogate.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def analysis_files(tmp_path, gated_dataset, parameter_metadata) -> dict:
    """Write a gated dataset to disk in the formats the CLI reads."""
    sample = tmp_path / "sample.csv"
    gated_dataset["data"].to_csv(sample, index=False)

    labels = tmp_path / "labels.csv"
    pd.DataFrame({"labels": gated_dataset["labels"]}).to_csv(labels, index=False)

    tree = tmp_path / "tree.json"
    tree.write_text(json.dumps(gated_dataset["mark_tree"]))

    annotation = tmp_path / "annotation.csv"
    gated_dataset["annotation"].to_csv(annotation, index=False)

    metadata = tmp_path / "meta.yaml"
    metadata.write_text(yaml.safe_dump(parameter_metadata))

    return {
        "sample": str(sample),
        "labels": str(labels),
        "tree": str(tree),
        "annotation": str(annotation),
        "metadata": str(metadata),
    }


class TestAnalyzeCommand:
    """Tests for `cytogate analyze`."""

    def test_writes_result(self, runner, analysis_files, tmp_path):
        """Test a complete run writing the result file."""
        out = tmp_path / "out" / "result.json"
        result = runner.invoke(
            cli,
            [
                "analyze",
                "--sample", analysis_files["sample"],
                "--metadata", analysis_files["metadata"],
                "--labels", analysis_files["labels"],
                "--tree", analysis_files["tree"],
                "--annotation", analysis_files["annotation"],
                "--max-cells", "20",
                "--seed", "1",
                "--out", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        payload = json.loads(out.read_text())
        assert len(payload["treeNodes"]) == 5
        assert len(payload["phenotypes"]) == 3
        assert len(payload["cellData"]) == 20
        assert payload["markerMappings"]["FL1-A"]["biological"] == "CD3"

    def test_config_and_log_file(
        self, runner, analysis_files, sample_analysis_config, tmp_path
    ):
        """Test configuration loading and the run log."""
        out = tmp_path / "result.json"
        log_file = tmp_path / "logs" / "analyze.log"
        result = runner.invoke(
            cli,
            [
                "analyze",
                "--sample", analysis_files["sample"],
                "--labels", analysis_files["labels"],
                "--tree", analysis_files["tree"],
                "--config", str(sample_analysis_config),
                "--log-file", str(log_file),
                "--out", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        payload = json.loads(out.read_text())
        assert len(payload["cellData"]) == 50
        summaries = list((tmp_path / "logs").glob("*.jsonl"))
        assert len(summaries) == 1
        summary = json.loads(summaries[0].read_text().splitlines()[-1])
        assert summary["ok"] is True
        assert summary["tree_nodes"] == 5

    def test_empty_sample_fails(self, runner, analysis_files, tmp_path):
        """Test the non-zero exit on empty input."""
        empty = tmp_path / "empty.csv"
        empty.write_text("CD3,CD4\n")
        result = runner.invoke(
            cli,
            ["analyze", "--sample", str(empty), "--labels", analysis_files["labels"]],
        )
        assert result.exit_code == 1
        assert "No valid data found" in result.output

    def test_marker_option(self, runner, analysis_files, tmp_path):
        """Test that --marker narrows the gating markers."""
        out = tmp_path / "result.json"
        result = runner.invoke(
            cli,
            [
                "analyze",
                "--sample", analysis_files["sample"],
                "--labels", analysis_files["labels"],
                "--marker", "CD4",
                "--out", str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["markers"] == ["CD4"]


class TestNormalizeTreeCommand:
    """Tests for `cytogate normalize-tree`."""

    def test_writes_tree(self, runner, analysis_files, tmp_path):
        """Test normalization with leaf counts from the label file."""
        out = tmp_path / "tree_out.json"
        result = runner.invoke(
            cli,
            [
                "normalize-tree",
                "--tree", analysis_files["tree"],
                "--labels", analysis_files["labels"],
                "--marker", "CD3",
                "--marker", "CD4",
                "--out", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        payload = json.loads(out.read_text())
        assert payload["strategy"] == "matrix"
        assert [n.get("cells") for n in payload["nodes"]] == [None, 30, None, 20, 50]
        assert len(payload["links"]) == 4

    def test_stdout(self, runner, analysis_files):
        """Test printing to stdout without --out."""
        result = runner.invoke(
            cli, ["normalize-tree", "--tree", analysis_files["tree"], "--marker", "CD3"]
        )
        assert result.exit_code == 0
        assert '"nodes"' in result.output

    def test_version(self, runner):
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

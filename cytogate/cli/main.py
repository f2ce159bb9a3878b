"""Command-line interface for CytoGate.

Provides CLI commands for running an analysis on saved gating outputs and
for normalizing a tree description on its own.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Setup logging for CLI commands."""
    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    return logging.getLogger("cytogate")


def _emit(payload: dict, out: Optional[str]) -> None:
    """Write a payload to ``out``, or print it when no path is given."""
    from cytogate.io import write_json

    if out:
        path = write_json(payload, out)
        click.echo(f"Wrote {path}")
    else:
        click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.version_option(version="0.1.0", prog_name="cytogate")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """CytoGate: gating tree reconstruction and phenotype annotation.

    Turns the outputs of a hierarchical binary gating routine into a
    canonical node/link tree plus per-population phenotypes.

    Examples:

        # Assemble the full result from saved gating outputs
        cytogate analyze --sample s1.csv --labels labels.csv \\
            --tree tree.json --annotation annotation.csv --out result.json

        # Normalize a tree description only
        cytogate normalize-tree --tree tree.json --labels labels.csv --marker CD3
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["logger"] = setup_logging(verbose, debug)


@cli.command()
@click.option("--sample", "-s", "samples", required=True, multiple=True,
              type=click.Path(exists=True), help="Sample matrix CSV (repeatable)")
@click.option("--metadata", "-m", "metadata_paths", multiple=True,
              type=click.Path(exists=True),
              help="Acquisition metadata JSON/YAML, aligned with --sample (repeatable)")
@click.option("--labels", "-l", "labels_path", required=True, type=click.Path(exists=True),
              help="Per-event population ids (CSV/JSON/YAML)")
@click.option("--tree", "-t", "tree_path", type=click.Path(exists=True),
              help="Raw tree description (JSON/YAML/CSV)")
@click.option("--annotation", "-a", "annotation_path", type=click.Path(exists=True),
              help="Per-population annotation table (CSV/JSON/YAML)")
@click.option("--marker", "markers", multiple=True, help="Gating marker (repeatable)")
@click.option("--config", "-c", type=click.Path(exists=True),
              help="Analysis configuration file (YAML)")
@click.option("--max-cells", type=int, default=None, help="Cell sample ceiling")
@click.option("--seed", type=int, default=None, help="Cell sample seed")
@click.option("--out", "-o", "output_path", type=click.Path(),
              help="Output JSON file (default: stdout)")
@click.option("--log-file", type=click.Path(), help="Also write a run log to this file")
@click.pass_context
def analyze(
    ctx: click.Context,
    samples: Tuple[str, ...],
    metadata_paths: Tuple[str, ...],
    labels_path: str,
    tree_path: Optional[str],
    annotation_path: Optional[str],
    markers: Tuple[str, ...],
    config: Optional[str],
    max_cells: Optional[int],
    seed: Optional[int],
    output_path: Optional[str],
    log_file: Optional[str],
) -> None:
    """Assemble the analysis result from saved gating outputs."""
    logger = ctx.obj["logger"]

    # Import here to avoid slow startup
    from cytogate.core.assembly import AnalysisConfig, analyze as run_analysis
    from cytogate.core.clustering import PrecomputedBackend
    from cytogate.io import (
        append_run_summary,
        load_annotation_table,
        load_label_assignment,
        load_parameter_metadata,
        load_sample_matrix,
        load_tree_description,
        log_run_config,
        open_run_log,
        run_summary,
    )

    log_path = None
    if log_file:
        logger, log_path = open_run_log(
            log_file,
            level=logging.DEBUG if ctx.obj["debug"] else logging.INFO,
        )
        click.echo(f"Logging to {log_path}")

    cfg = AnalysisConfig.from_yaml(Path(config)) if config else AnalysisConfig.default()
    if max_cells is not None:
        cfg.assembly.max_cells = max_cells
    if seed is not None:
        cfg.assembly.seed = seed
    log_run_config(logger, cfg.to_dict())

    sample_frames = [load_sample_matrix(path) for path in samples]
    metadata = [load_parameter_metadata(path) for path in metadata_paths]
    backend = PrecomputedBackend(
        labels=load_label_assignment(labels_path),
        mark_tree=load_tree_description(tree_path) if tree_path else None,
        annotation=load_annotation_table(annotation_path) if annotation_path else None,
    )

    result = run_analysis(
        sample_frames,
        backend,
        metadata=metadata,
        markers=list(markers) or None,
        config=cfg,
        logger=logger,
    )
    payload = result.to_dict()

    if log_path is not None:
        append_run_summary(log_path.with_suffix(".jsonl"), run_summary(samples, payload))

    if not result.ok:
        click.echo(json.dumps(payload), err=True)
        sys.exit(1)

    _emit(payload, output_path)


@cli.command("normalize-tree")
@click.option("--tree", "-t", "tree_path", required=True, type=click.Path(exists=True),
              help="Raw tree description (JSON/YAML/CSV)")
@click.option("--labels", "-l", "labels_path", type=click.Path(exists=True),
              help="Per-event population ids, for leaf cell counts")
@click.option("--marker", "markers", multiple=True,
              help="Gating marker, in matrix column order (repeatable)")
@click.option("--config", "-c", type=click.Path(exists=True),
              help="Analysis configuration file (YAML); only the tree section is used")
@click.option("--out", "-o", "output_path", type=click.Path(),
              help="Output JSON file (default: stdout)")
@click.pass_context
def normalize_tree(
    ctx: click.Context,
    tree_path: str,
    labels_path: Optional[str],
    markers: Tuple[str, ...],
    config: Optional[str],
    output_path: Optional[str],
) -> None:
    """Normalize a raw tree description into {nodes, links}."""
    logger = ctx.obj["logger"]

    from cytogate.core.assembly import AnalysisConfig
    from cytogate.core.phenotype import compute_label_counts
    from cytogate.core.tree import TreeNormalizer
    from cytogate.io import load_label_assignment, load_tree_description

    cfg = AnalysisConfig.from_yaml(Path(config)) if config else AnalysisConfig.default()
    raw_tree = load_tree_description(tree_path)
    label_counts = (
        compute_label_counts(load_label_assignment(labels_path)) if labels_path else []
    )

    tree = TreeNormalizer(cfg.tree, logger=logger).normalize(
        raw_tree, label_counts, list(markers)
    )
    if tree.is_empty:
        click.echo("No gating tree could be reconstructed", err=True)

    payload = tree.to_dict()
    payload["strategy"] = tree.strategy
    payload["anomalies"] = list(tree.anomalies)
    _emit(payload, output_path)


def main() -> None:
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

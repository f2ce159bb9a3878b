"""CytoGate: gating tree reconstruction and phenotype annotation for flow cytometry.

This package provides tools for:
- Normalizing the tree description emitted by a binary gating routine
  (split table, name-keyed descriptors or level-ordered labels) into one
  canonical node/link graph
- Building phenotype signatures and statistics for terminal populations
- Extracting marker metadata and intensity ranges from sample matrices
- Assembling everything into a single renderable payload

Example usage:
    >>> from cytogate.core.tree import normalize
    >>> from cytogate.core.phenotype import build_phenotypes
    >>>
    >>> tree = normalize(mark_tree, label_counts, markers)
    >>> phenotypes = build_phenotypes(labels, annotation, markers_in_use)
"""

__version__ = "0.1.0"

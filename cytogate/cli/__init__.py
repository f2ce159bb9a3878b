"""Command-line interface for CytoGate.

Example Usage
-------------
    # From command line:
    cytogate --help
    cytogate analyze --sample s1.csv --labels labels.csv --tree tree.json --out result.json
    cytogate normalize-tree --tree tree.json --marker CD3 --marker CD4
"""

from .main import cli, main

__all__ = [
    "cli",
    "main",
]

"""Core computational modules for CytoGate.

This package contains the analysis components:
- preprocessing: Sample combination and marker selection
- markers: Marker metadata and intensity ranges
- tree: Gating tree shape normalization
- phenotype: Phenotype annotation of terminal populations
- clustering: Interface to the external gating routine
- assembly: Result assembly and orchestration
"""

"""Result assembly module.

Provides:
- AnalysisEngine / analyze: Orchestration of an analysis run
- assemble_result: Pure composition of the result payload
- sample_cell_data: Bounded, seeded cell sampling
- AnalysisConfig: Master configuration with YAML loading
"""

from .assembler import assemble_result, scatter_axes
from .config import AnalysisConfig, AssemblyConfig
from .engine import AnalysisEngine, analyze
from .sampling import sample_cell_data
from .schema import RESULT_KEYS, AnalysisResult, ErrorResult

__all__ = [
    # Config
    "AnalysisConfig",
    "AssemblyConfig",
    # Schema
    "AnalysisResult",
    "ErrorResult",
    "RESULT_KEYS",
    # Assembly
    "assemble_result",
    "scatter_axes",
    "sample_cell_data",
    # Engine
    "AnalysisEngine",
    "analyze",
]

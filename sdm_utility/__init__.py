# -*- coding: utf-8 -*-
"""
SDM Utility: Structured Decision Making utility scoring
=======================================================

Turns ordinal rankings of alternatives across criteria into comparable
utility scores, under equal weights and under user-defined weights.

Method
------
  1. Ranks (1 = best) are normalised against the largest rank in the table:
     u = (R_max − r) / (R_max − 1)
  2. TotalUtility sums the utilities of an alternative
  3. UtilityScore is the weight-averaged utility (weights sum to 1)

Package Structure
-----------------
sdm_utility/
├── mcdm/
│   ├── utility.py      # normalize_rank, equal/weighted entry points
│   └── weights.py      # WeightVector, validation
├── analysis/
│   └── comparison.py   # Equal-weight vs weighted rankings
├── data_loader.py      # RankTable, CSV/JSON loading
├── output_manager.py   # Rounded CSV/JSON/text outputs
├── visualization.py    # Heatmap, grouped bar chart
├── pipeline.py         # End-to-end orchestrator
├── config.py
├── logger.py
└── exceptions.py

Quick Start
-----------
>>> from sdm_utility import run_pipeline
>>> result = run_pipeline('data/rankings.csv', 'data/weights.csv')
>>> print(result.summary())
"""

from .config import Config, get_default_config
from .exceptions import SDMError, ValidationError, InputFormatError
from .logger import (
    setup_logger,
    get_logger,
    get_module_logger,
    ProgressLogger,
    PipelineLogger,
    LoggerFactory,
)
from .data_loader import RankDataLoader, RankTable, load_rankings, load_weights
from .mcdm import (
    WeightVector,
    equal_weights,
    validate_weights,
    normalize_rank,
    UtilityResult,
    UtilityCalculator,
    equal_weight_utility,
    weighted_utility,
    compute_utility,
)
from .analysis import RegimeComparison, compare_regimes
from .pipeline import SDMPipeline, run_pipeline, PipelineResult
from .output_manager import OutputManager, create_output_manager
from .visualization import UtilityVisualizer, create_visualizer

__version__ = '1.0.0'

__all__ = [
    # Configuration
    'Config',
    'get_default_config',

    # Errors
    'SDMError',
    'ValidationError',
    'InputFormatError',

    # Logging
    'setup_logger',
    'get_logger',
    'get_module_logger',
    'ProgressLogger',
    'PipelineLogger',
    'LoggerFactory',

    # Data Loading
    'RankDataLoader',
    'RankTable',
    'load_rankings',
    'load_weights',

    # Utility scoring
    'WeightVector',
    'equal_weights',
    'validate_weights',
    'normalize_rank',
    'UtilityResult',
    'UtilityCalculator',
    'equal_weight_utility',
    'weighted_utility',
    'compute_utility',

    # Analysis
    'RegimeComparison',
    'compare_regimes',

    # Pipeline
    'SDMPipeline',
    'run_pipeline',
    'PipelineResult',

    # Output Management
    'OutputManager',
    'create_output_manager',

    # Visualization
    'UtilityVisualizer',
    'create_visualizer',
]

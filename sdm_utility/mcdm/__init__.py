# -*- coding: utf-8 -*-
"""
Utility Scoring Module
======================

Rank-to-utility normalisation and additive aggregation for Structured
Decision Making.

Usage
-----
>>> from sdm_utility.mcdm import equal_weight_utility, weighted_utility
>>> equal = equal_weight_utility(rank_table)
>>> weighted = weighted_utility(rank_table, {'Cost': 0.3, 'Effectiveness': 0.7})
>>> weighted.score_table()
"""

from .weights import WeightVector, equal_weights, validate_weights, WEIGHT_TOLERANCE
from .utility import (
    normalize_rank,
    UtilityResult,
    UtilityCalculator,
    equal_weight_utility,
    weighted_utility,
    compute_utility,
    TOTAL_UTILITY_COL,
    UTILITY_SCORE_COL,
    EQUAL_WEIGHT,
    WEIGHTED,
)

__all__ = [
    # Weights
    'WeightVector',
    'equal_weights',
    'validate_weights',
    'WEIGHT_TOLERANCE',

    # Utility
    'normalize_rank',
    'UtilityResult',
    'UtilityCalculator',
    'equal_weight_utility',
    'weighted_utility',
    'compute_utility',
    'TOTAL_UTILITY_COL',
    'UTILITY_SCORE_COL',
    'EQUAL_WEIGHT',
    'WEIGHTED',
]

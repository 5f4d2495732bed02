# -*- coding: utf-8 -*-
"""Analysis of utility results across aggregation regimes."""

from .comparison import RegimeComparison, compare_regimes

__all__ = ['RegimeComparison', 'compare_regimes']

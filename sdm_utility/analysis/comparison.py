# -*- coding: utf-8 -*-
"""
Regime Comparison
=================

How much the user weights move alternatives relative to the equal-weight
baseline.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from scipy.stats import spearmanr, kendalltau

from ..exceptions import ValidationError
from ..logger import get_module_logger
from ..mcdm.utility import UtilityResult

logger = get_module_logger('analysis.comparison')


@dataclass
class RegimeComparison:
    """Result container for an equal-weight vs weighted comparison."""
    table: pd.DataFrame       # per alternative: scores, ranks, shift
    spearman_rho: float
    kendall_tau: float
    n_compared: int

    @property
    def top_changed(self) -> bool:
        """Whether the best alternative differs between the regimes."""
        equal_ranks = self.table['EqualWeightRank'].dropna()
        weighted_ranks = self.table['WeightedRank'].dropna()
        if equal_ranks.empty or weighted_ranks.empty:
            return False
        best_equal = equal_ranks.idxmin()
        best_weighted = weighted_ranks.idxmin()
        return best_equal != best_weighted

    @property
    def max_shift(self) -> int:
        shifts = self.table['RankShift'].dropna()
        return int(shifts.abs().max()) if len(shifts) else 0

    def summary(self) -> str:
        lines = [
            f"\n{'='*60}",
            "EQUAL-WEIGHT vs WEIGHTED COMPARISON",
            f"{'='*60}",
            f"\nAlternatives compared: {self.n_compared}",
            f"Spearman rho: {self.spearman_rho:.4f}",
            f"Kendall tau: {self.kendall_tau:.4f}",
            f"Best alternative changed: {'yes' if self.top_changed else 'no'}",
            f"\n{'─'*30}",
            "RANK SHIFTS (positive = moved up under weights)",
            f"{'─'*30}",
        ]
        for alt, row in self.table.sort_values('WeightedRank').iterrows():
            if pd.isna(row['RankShift']):
                lines.append(f"  {alt}: n/a")
            else:
                lines.append(f"  {alt}: {int(row['EqualWeightRank'])} → "
                             f"{int(row['WeightedRank'])} ({int(row['RankShift']):+d})")
        lines.append("=" * 60)
        return "\n".join(lines)


def _correlation(func, a: np.ndarray, b: np.ndarray) -> float:
    if len(a) < 2 or np.ptp(a) == 0 or np.ptp(b) == 0:
        return float('nan')
    stat, _ = func(a, b)
    return float(stat)


def compare_regimes(equal: UtilityResult, weighted: UtilityResult) -> RegimeComparison:
    """
    Compare the rankings of the two regimes over the same alternatives.

    Correlations use complete alternatives only; they are NaN when fewer than
    two remain or either score vector is constant.
    """
    if list(equal.table[equal.alternative_col]) != list(weighted.table[weighted.alternative_col]):
        raise ValidationError("Results cover different alternatives and cannot be compared")

    equal_scores = equal.scores
    weighted_scores = weighted.scores
    equal_ranks = equal.ranks
    weighted_ranks = weighted.ranks

    table = pd.DataFrame({
        'EqualWeightScore': equal_scores,
        'WeightedScore': weighted_scores,
        'EqualWeightRank': equal_ranks,
        'WeightedRank': weighted_ranks,
    })
    table['RankShift'] = table['EqualWeightRank'] - table['WeightedRank']
    table.index.name = equal.alternative_col

    complete = table[['EqualWeightScore', 'WeightedScore']].dropna()
    a = complete['EqualWeightScore'].to_numpy()
    b = complete['WeightedScore'].to_numpy()

    rho = _correlation(spearmanr, a, b)
    tau = _correlation(kendalltau, a, b)

    logger.debug(f"Regime comparison over {len(complete)} alternatives: "
                 f"rho={rho:.4f}, tau={tau:.4f}")

    return RegimeComparison(
        table=table,
        spearman_rho=rho,
        kendall_tau=tau,
        n_compared=len(complete),
    )

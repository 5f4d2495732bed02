# -*- coding: utf-8 -*-
"""
SDM Utility Scoring: rank-to-utility normalisation and additive aggregation

Ranks (1 = best) are mapped linearly onto [0, 1] against the largest rank
found anywhere in the table:

    u_ij = (R_max − r_ij) / (R_max − 1)

and aggregated per alternative:

    TotalUtility_i = Σ_j  u_ij
    UtilityScore_i = Σ_j  w_j × u_ij

R_max is one scalar over all criteria combined, so every criterion shares
the same rank scale. With equal weights w_j = 1/J the score is
TotalUtility / J.

Properties
----------
- Linear, fully compensatory aggregation.
- Missing ranks give missing utilities and missing row sums.
- Pure: inputs are never modified and nothing is rounded.

References
----------
[1] Gregory, R. et al. (2012). "Structured Decision Making: A Practical
    Guide to Environmental Management Choices." Wiley-Blackwell.
[2] Fishburn, P.C. (1967). "Additive Utilities with Incomplete Product
    Sets: Application to Priorities and Assignments."
    Operations Research, 15(3), 537–542.
"""

import numpy as np
import pandas as pd
from typing import List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass

from ..data_loader import RankTable, RankDataLoader
from ..exceptions import InputFormatError, ValidationError
from ..logger import get_module_logger
from .weights import WeightVector, WEIGHT_TOLERANCE, equal_weights, validate_weights

logger = get_module_logger('mcdm.utility')

TOTAL_UTILITY_COL = 'TotalUtility'
UTILITY_SCORE_COL = 'UtilityScore'

EQUAL_WEIGHT = 'equal_weight'
WEIGHTED = 'weighted'

RankInput = Union[RankTable, pd.DataFrame]
WeightInput = Union[Mapping[str, float], WeightVector]


def normalize_rank(rank, max_rank: float):
    """
    Map rank(s) onto utility in [0, 1], 1 = best.

    Parameters
    ----------
    rank : float, np.ndarray, pd.Series or pd.DataFrame
        Rank value(s); NaN stays NaN
    max_rank : float
        Largest rank in the whole table

    Raises
    ------
    ValidationError
        If ``max_rank`` is not greater than 1, i.e. every rank equals 1 and
        the formula would divide by zero.
    """
    max_rank = float(max_rank)
    if not np.isfinite(max_rank) or max_rank <= 1.0:
        raise ValidationError(
            f"Cannot normalise ranks with maximum rank {max_rank:g}: "
            f"at least one rank above 1 is required",
            reason=ValidationError.DEGENERATE_RANKS,
        )
    return (max_rank - rank) / (max_rank - 1.0)


@dataclass
class UtilityResult:
    """Result container for one aggregation regime."""
    table: pd.DataFrame
    weights: WeightVector
    max_rank: float
    regime: str
    alternative_col: str
    criteria: Tuple[str, ...]

    @property
    def utilities(self) -> pd.DataFrame:
        """Per-criterion utilities indexed by alternative."""
        return self.table.set_index(self.alternative_col)[list(self.criteria)]

    @property
    def total_utility(self) -> pd.Series:
        return self.table.set_index(self.alternative_col)[TOTAL_UTILITY_COL]

    @property
    def scores(self) -> pd.Series:
        return self.table.set_index(self.alternative_col)[UTILITY_SCORE_COL]

    @property
    def ranks(self) -> pd.Series:
        """1 = best; ties keep input order; incomplete alternatives stay NaN."""
        ranks = self.scores.rank(ascending=False, method='first')
        ranks.name = f'{self.regime}_rank'
        return ranks

    @property
    def incomplete_alternatives(self) -> List[str]:
        mask = self.table[list(self.criteria)].isna().any(axis=1)
        return self.table.loc[mask, self.alternative_col].tolist()

    def ranked(self) -> pd.DataFrame:
        """Full table sorted by UtilityScore, best first, stable on ties."""
        return self.table.sort_values(
            UTILITY_SCORE_COL, ascending=False, kind='mergesort', na_position='last'
        ).reset_index(drop=True)

    def score_table(self) -> pd.DataFrame:
        """Two-column alternative/UtilityScore table, best first."""
        return self.ranked()[[self.alternative_col, UTILITY_SCORE_COL]]

    def top_n(self, n: int = 10) -> pd.DataFrame:
        return self.score_table().head(n)

    def summary(self) -> str:
        title = "EQUAL-WEIGHT" if self.regime == EQUAL_WEIGHT else "WEIGHTED"
        lines = [
            f"\n{'='*60}",
            f"SDM UTILITY RESULTS ({title})",
            f"{'='*60}",
            f"\nAlternatives: {len(self.table)}",
            f"Criteria: {len(self.criteria)}",
            f"Maximum rank: {self.max_rank:g}",
            "\nWeights:",
        ]
        for c, w in self.weights.weights.items():
            lines.append(f"  {c}: {w:.4f}")
        lines.append("\nTop Alternatives:")
        for i, row in enumerate(self.top_n(10).itertuples(index=False), 1):
            lines.append(f"  {i}. {row[0]}: Score={row[1]:.4f}")
        if self.incomplete_alternatives:
            lines.append(f"\nIncomplete (missing ranks): {', '.join(self.incomplete_alternatives)}")
        lines.append("=" * 60)
        return "\n".join(lines)


def _as_rank_table(rank_table: RankInput) -> RankTable:
    """Validated rank table; hand-built tables get the same checks as loaded ones."""
    if isinstance(rank_table, RankTable):
        return RankDataLoader().validate(rank_table)
    if isinstance(rank_table, pd.DataFrame):
        return RankDataLoader().from_dataframe(rank_table)
    raise InputFormatError(f"Expected a RankTable or DataFrame, got {type(rank_table).__name__}")


def _aggregate(rank_table: RankTable, weights: WeightVector, regime: str) -> UtilityResult:
    """Normalise every rank and form the unweighted and weighted row sums."""
    criteria = list(rank_table.criteria)
    if not criteria or rank_table.n_alternatives == 0:
        raise InputFormatError("Rank table needs at least one criterion and one alternative")
    reserved = {TOTAL_UTILITY_COL, UTILITY_SCORE_COL, rank_table.alternative_col} & set(criteria)
    if reserved:
        raise InputFormatError(f"Reserved column name(s) used as criteria: {sorted(reserved)}")

    ranks = rank_table.data[criteria].to_numpy(dtype=float)
    if np.isnan(ranks).all():
        raise InputFormatError("Rank table contains no rank values")

    max_rank = float(np.nanmax(ranks))
    utilities = normalize_rank(ranks, max_rank)
    w = weights.as_array(criteria)

    # NaN propagates through both sums so incomplete rows stay missing
    total = utilities.sum(axis=1)
    score = (utilities * w).sum(axis=1)

    table = pd.DataFrame({rank_table.alternative_col: rank_table.alternatives})
    for j, c in enumerate(criteria):
        table[c] = utilities[:, j]
    table[TOTAL_UTILITY_COL] = total
    table[UTILITY_SCORE_COL] = score

    result = UtilityResult(
        table=table,
        weights=weights,
        max_rank=max_rank,
        regime=regime,
        alternative_col=rank_table.alternative_col,
        criteria=tuple(criteria),
    )

    logger.debug(f"{regime}: {len(table)} alternatives × {len(criteria)} criteria, "
                 f"max rank {max_rank:g}")
    incomplete = result.incomplete_alternatives
    if incomplete:
        logger.warning(f"{regime}: no utility score for {len(incomplete)} "
                       f"alternative(s) with missing ranks: {incomplete}")
    return result


def equal_weight_utility(rank_table: RankInput) -> UtilityResult:
    """Utility scores with weight 1/J on each of the J criteria."""
    table = _as_rank_table(rank_table)
    return _aggregate(table, equal_weights(table.criteria), EQUAL_WEIGHT)


def weighted_utility(rank_table: RankInput,
                     weights: WeightInput,
                     tolerance: float = WEIGHT_TOLERANCE) -> UtilityResult:
    """
    Utility scores with user-supplied criterion weights.

    Raises
    ------
    ValidationError
        If the weight keys differ from the criteria, a weight is negative,
        or the weights do not sum to 1 within ``tolerance``.
    """
    table = _as_rank_table(rank_table)
    validated = validate_weights(weights, table.criteria, tolerance=tolerance)
    return _aggregate(table, validated, WEIGHTED)


class UtilityCalculator:
    """
    SDM utility calculator.

    Parameters
    ----------
    weight_tolerance : float
        Allowed deviation of a weight vector's sum from 1.
    """

    def __init__(self, weight_tolerance: float = WEIGHT_TOLERANCE):
        self.weight_tolerance = weight_tolerance

    def equal_weight(self, rank_table: RankInput) -> UtilityResult:
        return equal_weight_utility(rank_table)

    def weighted(self, rank_table: RankInput, weights: WeightInput) -> UtilityResult:
        return weighted_utility(rank_table, weights, tolerance=self.weight_tolerance)

    def calculate(self, rank_table: RankInput,
                  weights: Optional[WeightInput] = None) -> UtilityResult:
        """Equal-weight scores when ``weights`` is None, weighted scores otherwise."""
        if weights is None:
            return self.equal_weight(rank_table)
        return self.weighted(rank_table, weights)


def compute_utility(rank_table: RankInput,
                    weights: Optional[WeightInput] = None) -> UtilityResult:
    """Convenience function for a single regime."""
    return UtilityCalculator().calculate(rank_table, weights)


__all__ = [
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

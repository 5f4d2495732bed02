# -*- coding: utf-8 -*-
"""Criterion weight vectors and their validation."""

import math
import numpy as np
import pandas as pd
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Union
from dataclasses import dataclass

from ..exceptions import ValidationError

WEIGHT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class WeightVector:
    """Immutable criterion → weight mapping."""
    weights: Mapping[str, float]
    method: str

    @property
    def criteria(self):
        return list(self.weights.keys())

    @property
    def total(self) -> float:
        return float(sum(self.weights.values()))

    def as_series(self) -> pd.Series:
        return pd.Series(dict(self.weights), name='Weight', dtype=float)

    def as_array(self, criteria: Sequence[str]) -> np.ndarray:
        """Weights aligned to ``criteria`` order."""
        return np.array([self.weights[c] for c in criteria], dtype=float)

    def to_dict(self) -> Dict[str, float]:
        return dict(self.weights)


def equal_weights(criteria: Sequence[str]) -> WeightVector:
    """Equal weight 1/J for each of the J criteria."""
    if len(criteria) == 0:
        raise ValidationError("Cannot build weights for zero criteria",
                              reason=ValidationError.KEY_MISMATCH)
    w = 1.0 / len(criteria)
    return WeightVector(weights=MappingProxyType({c: w for c in criteria}), method='equal')


def validate_weights(weights: Union[Mapping[str, float], WeightVector],
                     criteria: Sequence[str],
                     tolerance: float = WEIGHT_TOLERANCE) -> WeightVector:
    """
    Check a user weight vector against the rank table's criteria.

    Parameters
    ----------
    weights : mapping or WeightVector
        Criterion → weight
    criteria : sequence of str
        Criteria of the rank table
    tolerance : float
        Allowed deviation of the weight sum from 1

    Returns
    -------
    WeightVector
        Validated weights, ordered like ``criteria``

    Raises
    ------
    ValidationError
        ``reason`` is ``key_mismatch`` when the key set differs from the
        criteria, ``invalid_weight`` for non-numeric values,
        ``negative_weight`` for negative or non-finite values and
        ``sum_mismatch`` when the weights do not sum to 1.
    """
    method = 'user'
    if isinstance(weights, WeightVector):
        method = weights.method
        weights = weights.weights

    keys = set(weights.keys())
    expected = set(criteria)
    if keys != expected:
        missing = [c for c in criteria if c not in keys]
        extra = sorted(str(k) for k in keys - expected)
        raise ValidationError(
            f"Weight keys do not match criteria (missing: {missing}, extra: {extra})",
            reason=ValidationError.KEY_MISMATCH,
        )

    ordered = {}
    for c in criteria:
        try:
            value = float(weights[c])
        except (TypeError, ValueError):
            raise ValidationError(f"Weight for {c} is not numeric: {weights[c]!r}",
                                  reason=ValidationError.INVALID_WEIGHT)
        if not math.isfinite(value) or value < 0:
            raise ValidationError(f"Weight for {c} must be a finite non-negative number, got {value}",
                                  reason=ValidationError.NEGATIVE_WEIGHT)
        ordered[c] = value

    total = sum(ordered.values())
    if abs(total - 1.0) >= tolerance:
        raise ValidationError(
            f"Weights must sum to 1 (±{tolerance:g}), got {total:.6f}",
            reason=ValidationError.SUM_MISMATCH,
        )

    return WeightVector(weights=MappingProxyType(ordered), method=method)

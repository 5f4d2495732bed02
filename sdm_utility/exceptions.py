# -*- coding: utf-8 -*-
"""Error taxonomy for SDM utility scoring."""

from typing import Optional


class SDMError(ValueError):
    """Base class for all SDM scoring errors."""


class ValidationError(SDMError):
    """
    Inputs are well-formed but violate a scoring invariant.

    Parameters
    ----------
    message : str
        Human readable description
    reason : str, optional
        Which invariant failed: one of ``KEY_MISMATCH``, ``SUM_MISMATCH``,
        ``NEGATIVE_WEIGHT``, ``INVALID_WEIGHT`` or ``DEGENERATE_RANKS``
    """

    KEY_MISMATCH = "key_mismatch"
    SUM_MISMATCH = "sum_mismatch"
    NEGATIVE_WEIGHT = "negative_weight"
    INVALID_WEIGHT = "invalid_weight"
    DEGENERATE_RANKS = "degenerate_ranks"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class InputFormatError(SDMError):
    """Rank table or weight file is missing, empty or malformed."""


__all__ = ['SDMError', 'ValidationError', 'InputFormatError']

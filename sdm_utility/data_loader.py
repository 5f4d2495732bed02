# -*- coding: utf-8 -*-
"""Rank table and weight file loading and validation."""

import json
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from dataclasses import dataclass

from .config import Config, DataConfig, get_default_config
from .exceptions import InputFormatError
from .logger import get_module_logger

logger = get_module_logger('data_loader')


@dataclass(frozen=True)
class RankTable:
    """
    Ordinal ranks of alternatives (rows) across criteria (columns).

    ``data`` holds the identifier column followed by one float column per
    criterion; rank 1 is best and NaN marks a missing rank. Treat it as
    read-only: the accessors below hand out copies.
    """
    data: pd.DataFrame
    alternative_col: str
    criteria: Tuple[str, ...]

    @property
    def alternatives(self) -> List[str]:
        return self.data[self.alternative_col].tolist()

    @property
    def ranks(self) -> pd.DataFrame:
        """Criterion ranks indexed by alternative."""
        ranks = self.data.set_index(self.alternative_col)[list(self.criteria)]
        return ranks.copy()

    @property
    def n_alternatives(self) -> int:
        return len(self.data)

    @property
    def n_criteria(self) -> int:
        return len(self.criteria)

    @property
    def n_missing(self) -> int:
        return int(self.data[list(self.criteria)].isna().sum().sum())

    @property
    def max_rank(self) -> float:
        """Largest rank over all criteria combined, ignoring missing values."""
        return float(np.nanmax(self.data[list(self.criteria)].to_numpy(dtype=float)))

    def to_dataframe(self) -> pd.DataFrame:
        return self.data.copy()


class RankDataLoader:
    """Loads and validates rank tables and weight files."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_default_config()
        self._data_config: DataConfig = self.config.data

    # -----------------------------------------------------------------
    # Rank tables
    # -----------------------------------------------------------------

    def load_rankings(self, filepath: Union[str, Path]) -> RankTable:
        """
        Load a rank table from CSV.

        The first column identifies the alternative; every remaining column
        is a criterion holding numeric ranks (1 = best).
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise InputFormatError(f"Rank table not found at {filepath}")

        logger.info(f"Loading rank table from {filepath}")
        try:
            df = pd.read_csv(filepath)
        except pd.errors.EmptyDataError:
            raise InputFormatError(f"Rank table {filepath} is empty")
        except pd.errors.ParserError as e:
            raise InputFormatError(f"Rank table {filepath} could not be parsed: {e}")

        return self.from_dataframe(df)

    def from_dataframe(self, df: pd.DataFrame) -> RankTable:
        """Validate an in-memory rank table; the input is not modified."""
        rank_table = self._build(df, self._data_config.alternative_col)

        if rank_table.n_missing:
            logger.warning(f"Rank table has {rank_table.n_missing} missing rank(s)")
        logger.info(f"✓ Loaded: {rank_table.n_alternatives} alternatives, "
                    f"{rank_table.n_criteria} criteria")
        return rank_table

    def validate(self, rank_table: RankTable) -> RankTable:
        """
        Re-check a ``RankTable`` that did not come from this loader.

        Applies the same checks as ``from_dataframe`` to the identifier
        column and the declared criteria and returns a normalised copy.
        """
        data = rank_table.data
        if not isinstance(data, pd.DataFrame):
            raise InputFormatError(
                f"RankTable.data must be a DataFrame, got {type(data).__name__}"
            )
        columns = [rank_table.alternative_col] + list(rank_table.criteria)
        absent = [c for c in columns if c not in data.columns]
        if absent:
            raise InputFormatError(f"RankTable.data is missing column(s): {absent}")

        validated = self._build(data[columns], rank_table.alternative_col)
        logger.debug(f"Validated rank table: {validated.n_alternatives} alternatives, "
                     f"{validated.n_criteria} criteria")
        return validated

    def _build(self, df: pd.DataFrame, alt_col: str) -> RankTable:
        if df is None or df.shape[1] == 0 or len(df) == 0:
            raise InputFormatError("Rank table is empty")
        if df.shape[1] < 2:
            raise InputFormatError("Rank table has no criterion columns")

        id_col = df.columns[0]
        criteria = [str(c).strip() for c in df.columns[1:]]
        if any(c == "" for c in criteria):
            raise InputFormatError("Blank criterion name")
        dup_cols = sorted({c for c in criteria if criteria.count(c) > 1})
        if dup_cols:
            raise InputFormatError(f"Duplicate criterion names: {dup_cols}")

        if alt_col in criteria:
            raise InputFormatError(
                f"'{alt_col}' must be the first column, found it among the criteria"
            )
        if id_col != alt_col:
            logger.debug(f"Using first column '{id_col}' as '{alt_col}'")

        alternatives = self._validate_alternatives(df.iloc[:, 0])
        ranks = self._validate_ranks(df.iloc[:, 1:], alternatives, criteria)

        table = pd.DataFrame({alt_col: alternatives})
        for col in criteria:
            table[col] = ranks[col].to_numpy()

        return RankTable(data=table, alternative_col=alt_col, criteria=tuple(criteria))

    def _validate_alternatives(self, ids: pd.Series) -> List[str]:
        if ids.isna().any():
            rows = (np.flatnonzero(ids.isna().to_numpy()) + 1).tolist()
            raise InputFormatError(f"Missing alternative identifier in row(s) {rows}")

        alternatives = [str(a).strip() for a in ids]
        if any(a == "" for a in alternatives):
            raise InputFormatError("Blank alternative identifier")

        seen, dups = set(), []
        for a in alternatives:
            if a in seen and a not in dups:
                dups.append(a)
            seen.add(a)
        if dups:
            raise InputFormatError(f"Duplicate alternatives: {dups}")
        return alternatives

    def _validate_ranks(self, raw: pd.DataFrame, alternatives: List[str],
                        criteria: List[str]) -> pd.DataFrame:
        raw = raw.copy()
        raw.columns = criteria
        raw.index = alternatives
        # Blank cells are missing ranks, not malformed ones
        raw = raw.replace(r'^\s*$', np.nan, regex=True)

        ranks = raw.apply(pd.to_numeric, errors='coerce').astype(float)

        bad = ranks.isna() & raw.notna()
        if bad.to_numpy().any():
            cells = [
                f"{alternatives[i]}/{criteria[j]}={raw.iat[i, j]!r}"
                for i, j in np.argwhere(bad.to_numpy())
            ]
            raise InputFormatError(f"Non-numeric rank value(s): {', '.join(cells[:5])}"
                                   + (" ..." if len(cells) > 5 else ""))

        values = ranks.to_numpy()
        if np.isinf(values).any():
            raise InputFormatError("Rank values must be finite")
        if np.isnan(values).all():
            raise InputFormatError("Rank table contains no rank values")

        min_rank = self._data_config.min_rank
        below = ranks < min_rank
        if below.to_numpy().any():
            cells = [f"{alternatives[i]}/{criteria[j]}" for i, j in np.argwhere(below.to_numpy())]
            raise InputFormatError(
                f"Ranks must be >= {min_rank:g} (1 = best): {', '.join(cells[:5])}"
            )
        return ranks

    # -----------------------------------------------------------------
    # Weight files
    # -----------------------------------------------------------------

    def load_weights(self, filepath: Union[str, Path]) -> Dict[str, float]:
        """
        Load a criterion → weight mapping from JSON or CSV.

        JSON must be an object; CSV is either long (``Criterion,Weight``
        or any two columns) or a single row with one column per criterion.
        Only the file format is checked here; the weight invariants are
        checked against the rank table at scoring time.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise InputFormatError(f"Weight file not found at {filepath}")

        logger.info(f"Loading weights from {filepath}")
        if filepath.suffix.lower() == '.json':
            pairs = self._read_json_weights(filepath)
        else:
            pairs = self._read_csv_weights(filepath)

        weights: Dict[str, float] = {}
        for name, value in pairs:
            name = str(name).strip()
            if name in weights:
                raise InputFormatError(f"Duplicate criterion in weight file: {name}")
            try:
                weights[name] = float(value)
            except (TypeError, ValueError):
                raise InputFormatError(f"Non-numeric weight for {name}: {value!r}")

        if not weights:
            raise InputFormatError(f"Weight file {filepath} is empty")
        logger.debug(f"Weights read: {weights}")
        return weights

    def _read_json_weights(self, filepath: Path) -> List[Tuple[str, object]]:
        try:
            with open(filepath, encoding='utf-8') as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise InputFormatError(f"Weight file {filepath} is not valid JSON: {e}")
        if not isinstance(payload, dict):
            raise InputFormatError("JSON weight file must map criterion names to weights")
        return list(payload.items())

    def _read_csv_weights(self, filepath: Path) -> List[Tuple[str, object]]:
        try:
            df = pd.read_csv(filepath)
        except pd.errors.EmptyDataError:
            raise InputFormatError(f"Weight file {filepath} is empty")
        except pd.errors.ParserError as e:
            raise InputFormatError(f"Weight file {filepath} could not be parsed: {e}")

        crit_col = self._data_config.weight_criterion_col
        value_col = self._data_config.weight_value_col
        if {crit_col, value_col} <= set(df.columns):
            return list(zip(df[crit_col], df[value_col]))
        if df.shape[1] == 2 and len(df) > 1:
            return list(zip(df.iloc[:, 0], df.iloc[:, 1]))
        if len(df) == 1:
            return list(df.iloc[0].items())
        raise InputFormatError(
            f"Weight file must have '{crit_col}' and '{value_col}' columns, "
            f"two columns, or a single row of weights"
        )


def load_rankings(filepath: Union[str, Path], config: Optional[Config] = None) -> RankTable:
    """Convenience function to load a rank table."""
    return RankDataLoader(config).load_rankings(filepath)


def load_weights(filepath: Union[str, Path], config: Optional[Config] = None) -> Dict[str, float]:
    """Convenience function to load a weight file."""
    return RankDataLoader(config).load_weights(filepath)

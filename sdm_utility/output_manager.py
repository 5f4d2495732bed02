# -*- coding: utf-8 -*-
"""
Output Management for SDM Utility Results
=========================================

Persists results into an organised directory structure::

    outputs/
    ├── results/   — utility tables and comparison (CSV, JSON)
    ├── figures/   — heatmap and regime comparison charts (PNG)
    └── reports/   — text summaries

Numbers are rounded here, at the serialization boundary, and nowhere else.
"""

import json
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime

from .analysis.comparison import RegimeComparison
from .mcdm.utility import UtilityResult, EQUAL_WEIGHT, WEIGHTED
from .logger import get_module_logger

logger = get_module_logger('output_manager')

# Regime → (full table, reduced score table)
RESULT_FILES = {
    EQUAL_WEIGHT: ('equal_weight_results.csv', 'equal_weight_table.csv'),
    WEIGHTED: ('weighted_results.csv', 'weighted_utility_table.csv'),
}


class OutputManager:
    """
    Manages structured output to ``results/``, ``figures/``, ``reports/``.

    Parameters
    ----------
    base_output_dir : str or Path
        Root of the output tree
    decimals : int
        Decimal places for saved numbers
    """

    def __init__(self, base_output_dir='outputs', decimals: int = 3):
        self.base_dir = Path(base_output_dir)
        self.results_dir = self.base_dir / 'results'
        self.figures_dir = self.base_dir / 'figures'
        self.reports_dir = self.base_dir / 'reports'
        self.decimals = decimals
        self._setup_directories()

    def _setup_directories(self) -> None:
        for d in [self.results_dir, self.figures_dir, self.reports_dir]:
            d.mkdir(parents=True, exist_ok=True)

    def _round(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.round(self.decimals)

    def _file_names(self, regime: str):
        return RESULT_FILES.get(regime, (f'{regime}_results.csv', f'{regime}_table.csv'))

    # -----------------------------------------------------------------
    # Utility tables
    # -----------------------------------------------------------------

    def save_utility_table(self, result: UtilityResult) -> str:
        """Save per-criterion utilities, TotalUtility and UtilityScore, best first."""
        path = self.results_dir / self._file_names(result.regime)[0]
        self._round(result.ranked()).to_csv(path, index=False)
        logger.debug(f"Saved {result.regime} utility table to {path}")
        return str(path)

    def save_score_table(self, result: UtilityResult) -> str:
        """Save the two-column alternative/UtilityScore table, best first."""
        path = self.results_dir / self._file_names(result.regime)[1]
        self._round(result.score_table()).to_csv(path, index=False)
        logger.debug(f"Saved {result.regime} score table to {path}")
        return str(path)

    def save_weights(self, results: Dict[str, UtilityResult]) -> str:
        """Save the weights used by each regime side by side."""
        df = pd.DataFrame({
            regime: result.weights.as_series() for regime, result in results.items()
        })
        df.index.name = 'Criterion'
        path = self.results_dir / 'weights.csv'
        self._round(df).to_csv(path)
        return str(path)

    # -----------------------------------------------------------------
    # Comparison
    # -----------------------------------------------------------------

    def save_comparison(self, comparison: RegimeComparison) -> Dict[str, str]:
        saved = {}
        path = self.results_dir / 'regime_comparison.csv'
        self._round(comparison.table).to_csv(path)
        saved['table'] = str(path)

        path = self.reports_dir / 'regime_comparison.txt'
        path.write_text(comparison.summary(), encoding='utf-8')
        saved['report'] = str(path)
        return saved

    def save_report(self, text: str, name: str = 'utility_report.txt') -> str:
        path = self.reports_dir / name
        path.write_text(text, encoding='utf-8')
        return str(path)

    # -----------------------------------------------------------------
    # Execution summary
    # -----------------------------------------------------------------

    def save_execution_summary(self, execution_time: float,
                               extra: Optional[Dict[str, Any]] = None) -> str:
        summary = {
            'timestamp': datetime.now().isoformat(),
            'execution_time_seconds': round(execution_time, 2),
        }
        if extra:
            summary.update(extra)
        path = self.results_dir / 'execution_summary.json'
        with open(path, 'w') as f:
            json.dump(summary, f, indent=2, default=str)
        return str(path)

    def save_config_snapshot(self, config: Any) -> str:
        path = self.results_dir / 'config_snapshot.json'
        config.save(path)
        return str(path)


def create_output_manager(output_dir='outputs', decimals: int = 3) -> OutputManager:
    """Factory function to create an OutputManager."""
    return OutputManager(output_dir, decimals=decimals)

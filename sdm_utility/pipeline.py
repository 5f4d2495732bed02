# -*- coding: utf-8 -*-
"""SDM utility pipeline orchestrator."""

import time
from pathlib import Path
from typing import Dict, Mapping, Optional, Union
from dataclasses import dataclass, field

from .config import Config, get_default_config
from .logger import setup_logger, ProgressLogger, PipelineLogger
from .data_loader import RankDataLoader, RankTable
from .exceptions import SDMError
from .mcdm import UtilityCalculator, UtilityResult, WeightVector
from .analysis import RegimeComparison, compare_regimes
from .output_manager import OutputManager
from .visualization import UtilityVisualizer

WeightSource = Union[str, Path, Mapping[str, float], WeightVector, None]


@dataclass
class PipelineResult:
    """Container for all pipeline results."""
    rank_table: RankTable
    equal_weight: UtilityResult
    weighted: Optional[UtilityResult] = None
    comparison: Optional[RegimeComparison] = None
    saved_files: Dict[str, str] = field(default_factory=dict)
    execution_time: float = 0.0
    config: Optional[Config] = None

    @property
    def results(self) -> Dict[str, UtilityResult]:
        results = {self.equal_weight.regime: self.equal_weight}
        if self.weighted is not None:
            results[self.weighted.regime] = self.weighted
        return results

    def summary(self) -> str:
        parts = [r.summary() for r in self.results.values()]
        if self.comparison is not None:
            parts.append(self.comparison.summary())
        parts.append(f"\nExecution time: {self.execution_time:.2f}s")
        return "\n".join(parts)


class SDMPipeline:
    """
    Structured Decision Making utility pipeline.

    Loads a rank table, scores it under equal weights and (optionally)
    user weights, compares the two rankings, and writes tables, reports
    and figures below the configured output directory.
    """

    def __init__(self, config: Optional[Config] = None, console: bool = True):
        """
        Initialize pipeline.

        Parameters
        ----------
        config : Config, optional
            Pipeline configuration
        console : bool
            Log to the console as well as to ``logs/debug.log``
        """
        self.config = config or get_default_config()
        self.config.paths.ensure_directories()

        debug_file = self.config.paths.logs_dir / 'debug.log'
        self.logger = setup_logger('sdm_utility', console=console, debug_file=debug_file)
        self.report = PipelineLogger(self.logger)

        self.loader = RankDataLoader(self.config)
        self.calculator = UtilityCalculator(weight_tolerance=self.config.data.weight_tolerance)
        self.output_manager = OutputManager(self.config.output_dir,
                                            decimals=self.config.output.decimals)
        vis = self.config.visualization
        self.visualizer = UtilityVisualizer(
            output_dir=str(self.config.paths.figures_dir),
            style=vis.style,
            figsize=vis.figsize,
            dpi=vis.dpi,
            heatmap_cmap=vis.heatmap_cmap,
            regime_colors=vis.regime_colors,
        )

    def run(self, rank_path: Union[str, Path, None] = None,
            weights: WeightSource = None) -> PipelineResult:
        """
        Execute the full pipeline.

        Parameters
        ----------
        rank_path : str or Path, optional
            Rank table CSV; defaults to ``data/rankings.csv``
        weights : path, mapping or WeightVector, optional
            User weights; without them only the equal-weight regime runs

        Returns
        -------
        PipelineResult
        """
        start_time = time.time()
        self.report.banner("SDM UTILITY ANALYSIS")

        try:
            with ProgressLogger(self.logger, "Phase 1: Data Loading") as progress:
                rank_table = self.loader.load_rankings(rank_path or self.config.paths.rankings_file)
                user_weights = self._resolve_weights(weights)
                progress.log_step(f"{rank_table.n_alternatives} alternatives, "
                                  f"{rank_table.n_criteria} criteria")

            with ProgressLogger(self.logger, "Phase 2: Equal-Weight Utility"):
                equal = self.calculator.equal_weight(rank_table)
                self._log_ranking(equal)

            weighted = None
            comparison = None
            if user_weights is not None:
                with ProgressLogger(self.logger, "Phase 3: Weighted Utility"):
                    weighted = self.calculator.weighted(rank_table, user_weights)
                    self._log_ranking(weighted)

                with ProgressLogger(self.logger, "Phase 4: Regime Comparison"):
                    comparison = compare_regimes(equal, weighted)
                    self.report.metrics({
                        'Spearman rho': comparison.spearman_rho,
                        'Kendall tau': comparison.kendall_tau,
                        'Max rank shift': comparison.max_shift,
                    })
            else:
                self.logger.info("No user weights supplied; skipping weighted regime")
        except SDMError as e:
            self.logger.error(f"Analysis aborted: {e}")
            raise

        result = PipelineResult(
            rank_table=rank_table,
            equal_weight=equal,
            weighted=weighted,
            comparison=comparison,
            config=self.config,
        )

        with ProgressLogger(self.logger, "Phase 5: Saving Results"):
            result.saved_files.update(self._save_results(result))

        if self.config.visualization.enabled:
            with ProgressLogger(self.logger, "Phase 6: Visualization"):
                result.saved_files.update(self._generate_visualizations(result))

        result.execution_time = time.time() - start_time
        result.saved_files['execution_summary'] = self.output_manager.save_execution_summary(
            result.execution_time,
            extra={
                'n_alternatives': rank_table.n_alternatives,
                'n_criteria': rank_table.n_criteria,
                'regimes': list(result.results.keys()),
            },
        )
        self.logger.info(f"Finished in {result.execution_time:.2f}s; "
                         f"outputs in {self.config.output_dir}")
        return result

    def _resolve_weights(self, weights: WeightSource):
        if weights is None or isinstance(weights, (Mapping, WeightVector)):
            return weights
        return self.loader.load_weights(weights)

    def _log_ranking(self, result: UtilityResult) -> None:
        table = result.score_table().dropna()
        self.report.ranking(
            list(table.itertuples(index=False, name=None)),
            title=f"{result.regime} ranking",
        )

    def _save_results(self, result: PipelineResult) -> Dict[str, str]:
        out = self.config.output
        saved: Dict[str, str] = {}
        for regime, res in result.results.items():
            if out.save_full_tables:
                saved[f'{regime}_results'] = self.output_manager.save_utility_table(res)
            if out.save_score_tables:
                saved[f'{regime}_table'] = self.output_manager.save_score_table(res)
        saved['weights'] = self.output_manager.save_weights(result.results)
        saved['report'] = self.output_manager.save_report(
            "\n".join(r.summary() for r in result.results.values())
        )
        if out.save_comparison and result.comparison is not None:
            for key, path in self.output_manager.save_comparison(result.comparison).items():
                saved[f'comparison_{key}'] = path
        saved['config'] = self.output_manager.save_config_snapshot(self.config)
        return saved

    def _generate_visualizations(self, result: PipelineResult) -> Dict[str, str]:
        saved: Dict[str, str] = {}
        try:
            heatmap_source = result.weighted or result.equal_weight
            saved['utility_heatmap'] = self.visualizer.plot_utility_heatmap(heatmap_source)
            if result.weighted is not None:
                saved['score_comparison'] = self.visualizer.plot_regime_comparison(
                    result.equal_weight, result.weighted
                )
        except (ValueError, OSError, RuntimeError) as e:
            self.logger.warning(f"Visualization generation failed: {e}")
            self.logger.debug("Visualization traceback", exc_info=True)
        return saved


def run_pipeline(rank_path: Union[str, Path, None] = None,
                 weights: WeightSource = None,
                 config: Optional[Config] = None) -> PipelineResult:
    """
    Convenience function to run the full pipeline.

    Parameters
    ----------
    rank_path : str or Path, optional
        Rank table CSV
    weights : path, mapping or WeightVector, optional
        User weights
    config : Config, optional
        Pipeline configuration

    Returns
    -------
    PipelineResult
    """
    pipeline = SDMPipeline(config)
    return pipeline.run(rank_path, weights)

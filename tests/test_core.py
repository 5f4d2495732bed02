# -*- coding: utf-8 -*-
"""
Core unit tests for the SDM utility package.

Tests cover:
- Configuration management
- Logging setup
- Rank table and weight file loading
- Regime comparison
- Output management and visualization
- Full pipeline runs
"""

import pytest
import json
import logging
import numpy as np
import pandas as pd
from pathlib import Path
import sys
import warnings

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

warnings.filterwarnings('ignore')


class TestConfig:
    """Test configuration module."""

    def test_default_config_creation(self):
        from sdm_utility.config import get_default_config
        config = get_default_config()
        assert config.data.alternative_col == 'Alternative'
        assert config.data.weight_tolerance == 1e-6
        assert config.output.decimals == 3

    def test_fresh_config_per_call(self):
        from sdm_utility.config import get_default_config
        a = get_default_config()
        a.output.decimals = 6
        assert get_default_config().output.decimals == 3

    def test_config_save(self, tmp_path):
        from sdm_utility.config import get_default_config
        config = get_default_config()
        config.paths.base_dir = tmp_path
        path = tmp_path / 'config.json'
        config.save(path)

        saved = json.loads(path.read_text())
        assert saved['data']['alternative_col'] == 'Alternative'
        assert saved['paths']['base_dir'] == str(tmp_path)

    def test_paths(self, tmp_path):
        from sdm_utility.config import PathConfig
        paths = PathConfig(base_dir=tmp_path, output_name='out')
        paths.ensure_directories()
        assert paths.results_dir == tmp_path / 'out' / 'results'
        assert paths.figures_dir.is_dir()
        assert paths.logs_dir.is_dir()


class TestLogger:
    """Test logging setup."""

    def test_debug_file_written(self, tmp_path):
        from sdm_utility.logger import setup_logger, get_module_logger
        log_file = tmp_path / 'logs' / 'debug.log'
        logger = setup_logger('sdm_utility', console=False, debug_file=log_file)

        get_module_logger('tests').debug("\033[32mcolored\033[0m message")
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding='utf-8')
        assert 'colored message' in text
        assert '\033[' not in text

    def test_module_logger_hierarchy(self):
        from sdm_utility.logger import get_module_logger
        from sdm_utility.logger import get_logger
        assert get_module_logger('mcdm.utility').name == 'sdm_utility.mcdm.utility'
        assert get_logger('report').name == 'sdm_utility.report'

    def test_progress_logger_records_failure(self):
        from sdm_utility.logger import ProgressLogger
        logger = logging.getLogger('sdm_utility.tests.progress')
        with pytest.raises(RuntimeError):
            with ProgressLogger(logger, "failing phase") as progress:
                raise RuntimeError("boom")
        assert progress.status == 'failed'


class TestDataLoader:
    """Test rank table and weight file loading."""

    def test_load_rankings(self, rank_csv):
        from sdm_utility.data_loader import RankDataLoader
        table = RankDataLoader().load_rankings(rank_csv)

        assert table.alternatives == ['A1', 'A2', 'A3', 'A4']
        assert table.criteria == ('Cost', 'Effectiveness', 'Quality')
        assert table.max_rank == 4.0
        assert table.ranks.dtypes.eq(float).all()

    def test_first_column_is_identifier(self):
        from sdm_utility.data_loader import RankDataLoader
        df = pd.DataFrame({'Option': ['a', 'b'], 'Cost': [1, 2]})
        table = RankDataLoader().from_dataframe(df)
        assert table.alternative_col == 'Alternative'
        assert table.alternatives == ['a', 'b']
        assert list(df.columns) == ['Option', 'Cost']

    def test_numeric_identifiers_become_strings(self):
        from sdm_utility.data_loader import RankDataLoader
        table = RankDataLoader().from_dataframe(
            pd.DataFrame({'Alternative': [10, 20], 'Cost': [1, 2]})
        )
        assert table.alternatives == ['10', '20']

    def test_ranks_accessor_returns_copy(self, rank_table):
        ranks = rank_table.ranks
        ranks.iloc[0, 0] = 99
        assert rank_table.max_rank == 4.0

    def test_missing_file(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        with pytest.raises(InputFormatError):
            RankDataLoader().load_rankings(tmp_path / 'nope.csv')

    def test_empty_file(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        path = tmp_path / 'empty.csv'
        path.write_text('')
        with pytest.raises(InputFormatError):
            RankDataLoader().load_rankings(path)

    def test_header_only_file(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        path = tmp_path / 'header.csv'
        path.write_text('Alternative,Cost\n')
        with pytest.raises(InputFormatError, match='empty'):
            RankDataLoader().load_rankings(path)

    def test_no_criterion_columns(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        with pytest.raises(InputFormatError, match='criterion'):
            RankDataLoader().from_dataframe(pd.DataFrame({'Alternative': ['a']}))

    def test_non_numeric_rank(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        path = tmp_path / 'bad.csv'
        path.write_text('Alternative,Cost,Time\nX,1,2\nY,high,1\n')
        with pytest.raises(InputFormatError) as exc:
            RankDataLoader().load_rankings(path)
        assert 'Y/Cost' in str(exc.value)

    def test_blank_cells_are_missing(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        path = tmp_path / 'blank.csv'
        path.write_text('Alternative,Cost,Time\nX,1,2\nY,,1\nZ,3,3\n')
        table = RankDataLoader().load_rankings(path)
        assert table.n_missing == 1
        assert np.isnan(table.ranks.loc['Y', 'Cost'])

    def test_duplicate_alternatives(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        df = pd.DataFrame({'Alternative': ['a', 'a'], 'Cost': [1, 2]})
        with pytest.raises(InputFormatError, match='Duplicate'):
            RankDataLoader().from_dataframe(df)

    def test_duplicate_criteria(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        df = pd.DataFrame([['a', 1, 2], ['b', 2, 1]], columns=['Alternative', 'Cost', 'Cost'])
        with pytest.raises(InputFormatError, match='Duplicate'):
            RankDataLoader().from_dataframe(df)

    def test_criterion_headers_are_stripped(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.mcdm import weighted_utility
        ranks = tmp_path / 'spaced.csv'
        ranks.write_text('Alternative, Cost, Time\nX,1,2\nY,2,1\n')
        weights = tmp_path / 'spaced_weights.csv'
        weights.write_text('Criterion,Weight\n Cost,0.25\nTime ,0.75\n')

        loader = RankDataLoader()
        table = loader.load_rankings(ranks)
        assert table.criteria == ('Cost', 'Time')

        result = weighted_utility(table, loader.load_weights(weights))
        assert result.scores.to_dict() == {'X': 0.25, 'Y': 0.75}

    def test_criteria_duplicated_after_stripping(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        df = pd.DataFrame({'Alternative': ['a', 'b'], 'Cost': [1, 2], ' Cost': [2, 1]})
        with pytest.raises(InputFormatError, match='Duplicate'):
            RankDataLoader().from_dataframe(df)

    def test_rank_below_one(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        df = pd.DataFrame({'Alternative': ['a', 'b'], 'Cost': [0, 2]})
        with pytest.raises(InputFormatError, match='a/Cost'):
            RankDataLoader().from_dataframe(df)

    def test_all_missing(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import InputFormatError
        df = pd.DataFrame({'Alternative': ['a', 'b'], 'Cost': [np.nan, np.nan]})
        with pytest.raises(InputFormatError):
            RankDataLoader().from_dataframe(df)

    def test_load_weights_csv(self, weights_csv, sample_weights):
        from sdm_utility.data_loader import load_weights
        assert load_weights(weights_csv) == sample_weights

    def test_load_weights_json(self, tmp_path, sample_weights):
        from sdm_utility.data_loader import load_weights
        path = tmp_path / 'weights.json'
        path.write_text(json.dumps(sample_weights))
        assert load_weights(path) == sample_weights

    def test_load_weights_wide_csv(self, tmp_path):
        from sdm_utility.data_loader import load_weights
        path = tmp_path / 'wide.csv'
        path.write_text('Cost,Time\n0.25,0.75\n')
        assert load_weights(path) == {'Cost': 0.25, 'Time': 0.75}

    def test_load_weights_rejects_json_list(self, tmp_path):
        from sdm_utility.data_loader import load_weights
        from sdm_utility.exceptions import InputFormatError
        path = tmp_path / 'weights.json'
        path.write_text('[0.5, 0.5]')
        with pytest.raises(InputFormatError):
            load_weights(path)

    def test_load_weights_non_numeric(self, tmp_path):
        from sdm_utility.data_loader import load_weights
        from sdm_utility.exceptions import InputFormatError
        path = tmp_path / 'weights.csv'
        path.write_text('Criterion,Weight\nCost,heavy\nTime,0.5\n')
        with pytest.raises(InputFormatError, match='Cost'):
            load_weights(path)


class TestRegimeComparison:
    """Test equal-weight vs weighted comparison."""

    def test_identical_rankings(self, rank_table):
        from sdm_utility.mcdm import equal_weight_utility, weighted_utility
        from sdm_utility.analysis import compare_regimes

        equal = equal_weight_utility(rank_table)
        same = weighted_utility(rank_table, {c: 1 / 3 for c in rank_table.criteria})
        comparison = compare_regimes(equal, same)

        assert comparison.spearman_rho == pytest.approx(1.0)
        assert comparison.kendall_tau == pytest.approx(1.0)
        assert comparison.max_shift == 0
        assert not comparison.top_changed

    def test_rank_shift(self, rank_table):
        from sdm_utility.mcdm import equal_weight_utility, weighted_utility
        from sdm_utility.analysis import compare_regimes

        equal = equal_weight_utility(rank_table)
        # All weight on Quality: A3 (rank 1 on Quality) moves from 3rd to 1st
        weighted = weighted_utility(rank_table, {'Cost': 0.0, 'Effectiveness': 0.0, 'Quality': 1.0})
        comparison = compare_regimes(equal, weighted)

        assert comparison.table.loc['A3', 'EqualWeightRank'] == 3
        assert comparison.table.loc['A3', 'WeightedRank'] == 1
        assert comparison.table.loc['A3', 'RankShift'] == 2
        assert comparison.top_changed
        assert 'A3' in comparison.summary()

    def test_constant_scores_give_nan_correlation(self):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.mcdm import equal_weight_utility, weighted_utility
        from sdm_utility.analysis import compare_regimes

        table = RankDataLoader().from_dataframe(pd.DataFrame({
            'Alternative': ['a', 'b'], 'C1': [1, 2], 'C2': [2, 1],
        }))
        comparison = compare_regimes(
            equal_weight_utility(table), weighted_utility(table, {'C1': 0.5, 'C2': 0.5})
        )
        assert np.isnan(comparison.spearman_rho)

    def test_mismatched_alternatives(self, rank_table):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.exceptions import ValidationError
        from sdm_utility.mcdm import equal_weight_utility
        from sdm_utility.analysis import compare_regimes

        other = RankDataLoader().from_dataframe(pd.DataFrame({
            'Alternative': ['x', 'y'], 'Cost': [1, 2],
        }))
        with pytest.raises(ValidationError):
            compare_regimes(equal_weight_utility(rank_table), equal_weight_utility(other))


class TestOutputManager:
    """Test output management."""

    def test_output_manager_initialization(self, tmp_path):
        from sdm_utility.output_manager import OutputManager
        om = OutputManager(str(tmp_path / 'outputs'))
        assert om.results_dir.exists()
        assert om.figures_dir.exists()
        assert om.reports_dir.exists()

    def test_saved_tables_are_rounded(self, tmp_path, rank_table, sample_weights):
        from sdm_utility.output_manager import OutputManager
        from sdm_utility.mcdm import weighted_utility

        result = weighted_utility(rank_table, sample_weights)
        om = OutputManager(tmp_path, decimals=3)
        full_path = om.save_utility_table(result)
        score_path = om.save_score_table(result)

        assert Path(full_path).name == 'weighted_results.csv'
        assert Path(score_path).name == 'weighted_utility_table.csv'

        full = pd.read_csv(full_path)
        assert full.loc[0, 'Alternative'] == result.ranked().loc[0, 'Alternative']
        assert full['Effectiveness'].tolist() == [round(v, 3) for v in
                                                  result.ranked()['Effectiveness']]

        scores = pd.read_csv(score_path)
        assert list(scores.columns) == ['Alternative', 'UtilityScore']
        # Engine values keep full precision
        assert result.utilities.loc['A1', 'Effectiveness'] == pytest.approx(2 / 3, abs=1e-15)

    def test_equal_weight_file_name(self, tmp_path, rank_table):
        from sdm_utility.output_manager import OutputManager
        from sdm_utility.mcdm import equal_weight_utility

        om = OutputManager(tmp_path)
        path = om.save_score_table(equal_weight_utility(rank_table))
        assert Path(path).name == 'equal_weight_table.csv'

    def test_save_weights(self, tmp_path, rank_table, sample_weights):
        from sdm_utility.output_manager import OutputManager
        from sdm_utility.mcdm import equal_weight_utility, weighted_utility

        results = {
            'equal_weight': equal_weight_utility(rank_table),
            'weighted': weighted_utility(rank_table, sample_weights),
        }
        path = OutputManager(tmp_path).save_weights(results)
        df = pd.read_csv(path, index_col='Criterion')
        assert df.loc['Effectiveness', 'weighted'] == 0.5
        assert df.loc['Effectiveness', 'equal_weight'] == 0.333


class TestVisualization:
    """Test chart rendering."""

    def test_heatmap(self, tmp_path, rank_table):
        from sdm_utility.visualization import UtilityVisualizer
        from sdm_utility.mcdm import equal_weight_utility

        viz = UtilityVisualizer(output_dir=str(tmp_path), dpi=40)
        path = viz.plot_utility_heatmap(equal_weight_utility(rank_table))
        assert Path(path).exists()

    def test_heatmap_with_missing_values(self, tmp_path):
        from sdm_utility.data_loader import RankDataLoader
        from sdm_utility.visualization import UtilityVisualizer
        from sdm_utility.mcdm import equal_weight_utility

        table = RankDataLoader().from_dataframe(pd.DataFrame({
            'Alternative': ['a', 'b', 'c'], 'C1': [1, np.nan, 3], 'C2': [2, 1, 3],
        }))
        viz = UtilityVisualizer(output_dir=str(tmp_path), dpi=40)
        assert Path(viz.plot_utility_heatmap(equal_weight_utility(table))).exists()

    def test_regime_comparison_chart(self, tmp_path, rank_table, sample_weights):
        from sdm_utility.visualization import UtilityVisualizer
        from sdm_utility.mcdm import equal_weight_utility, weighted_utility

        viz = UtilityVisualizer(output_dir=str(tmp_path), dpi=40)
        path = viz.plot_regime_comparison(
            equal_weight_utility(rank_table), weighted_utility(rank_table, sample_weights)
        )
        assert Path(path).name == 'utility_score_comparison.png'
        assert Path(path).exists()


class TestPipeline:
    """Test the end-to-end pipeline."""

    def test_full_pipeline(self, test_config, rank_csv, weights_csv):
        from sdm_utility.pipeline import SDMPipeline

        result = SDMPipeline(test_config, console=False).run(rank_csv, weights_csv)

        assert result.weighted is not None
        assert result.comparison is not None
        assert set(result.results) == {'equal_weight', 'weighted'}
        for key in ['equal_weight_table', 'weighted_table', 'equal_weight_results',
                    'weighted_results', 'comparison_table', 'utility_heatmap',
                    'score_comparison', 'execution_summary']:
            assert Path(result.saved_files[key]).exists(), key
        assert (test_config.paths.logs_dir / 'debug.log').exists()

    def test_pipeline_without_weights(self, test_config, rank_csv):
        from sdm_utility.pipeline import SDMPipeline

        result = SDMPipeline(test_config, console=False).run(rank_csv)

        assert result.weighted is None
        assert result.comparison is None
        assert 'score_comparison' not in result.saved_files
        assert Path(result.saved_files['equal_weight_table']).exists()

    def test_pipeline_with_weight_mapping(self, test_config, rank_csv, sample_weights):
        from sdm_utility.pipeline import SDMPipeline

        test_config.visualization.enabled = False
        result = SDMPipeline(test_config, console=False).run(rank_csv, sample_weights)
        assert result.weighted.weights.to_dict() == sample_weights
        assert 'utility_heatmap' not in result.saved_files

    def test_invalid_weights_abort(self, test_config, rank_csv):
        from sdm_utility.pipeline import SDMPipeline
        from sdm_utility.exceptions import ValidationError

        pipeline = SDMPipeline(test_config, console=False)
        with pytest.raises(ValidationError):
            pipeline.run(rank_csv, {'Cost': 0.5, 'Effectiveness': 0.5})
        assert not (test_config.paths.results_dir / 'equal_weight_table.csv').exists()

    def test_run_pipeline_function(self, test_config, rank_csv, weights_csv):
        from sdm_utility import run_pipeline

        result = run_pipeline(rank_csv, weights_csv, config=test_config)
        assert result.execution_time > 0
        assert 'WEIGHTED' in result.summary()

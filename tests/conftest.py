"""
Pytest configuration and fixtures for SDM utility tests.
"""
import pytest
import pandas as pd


@pytest.fixture
def rank_frame():
    """Four alternatives ranked 1-4 on three criteria."""
    return pd.DataFrame({
        'Alternative': ['A1', 'A2', 'A3', 'A4'],
        'Cost': [1, 2, 3, 4],
        'Effectiveness': [2, 1, 4, 3],
        'Quality': [3, 4, 1, 2],
    })


@pytest.fixture
def rank_table(rank_frame):
    from sdm_utility.data_loader import RankDataLoader
    return RankDataLoader().from_dataframe(rank_frame)


@pytest.fixture
def sample_weights():
    return {'Cost': 0.2, 'Effectiveness': 0.5, 'Quality': 0.3}


@pytest.fixture
def rank_csv(tmp_path, rank_frame):
    path = tmp_path / 'rankings.csv'
    rank_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def weights_csv(tmp_path, sample_weights):
    path = tmp_path / 'weights.csv'
    pd.DataFrame({
        'Criterion': list(sample_weights.keys()),
        'Weight': list(sample_weights.values()),
    }).to_csv(path, index=False)
    return path


@pytest.fixture
def test_config(tmp_path):
    """Configuration writing into a temporary directory with cheap figures."""
    from sdm_utility.config import get_default_config
    config = get_default_config()
    config.paths.base_dir = tmp_path
    config.visualization.dpi = 40
    return config

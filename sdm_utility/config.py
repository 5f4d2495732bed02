# -*- coding: utf-8 -*-
"""Configuration management for the SDM utility pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict
import json


@dataclass
class PathConfig:
    """File and directory paths configuration."""
    base_dir: Path = field(default_factory=lambda: Path.cwd())
    output_name: str = "outputs"

    @property
    def data_dir(self) -> Path:
        return self.base_dir / "data"

    @property
    def output_dir(self) -> Path:
        return self.base_dir / self.output_name

    @property
    def figures_dir(self) -> Path:
        return self.output_dir / "figures"

    @property
    def reports_dir(self) -> Path:
        return self.output_dir / "reports"

    @property
    def results_dir(self) -> Path:
        return self.output_dir / "results"

    @property
    def logs_dir(self) -> Path:
        return self.output_dir / "logs"

    @property
    def rankings_file(self) -> Path:
        return self.data_dir / "rankings.csv"

    def ensure_directories(self) -> None:
        """Create all output directories."""
        for d in [self.output_dir, self.figures_dir, self.reports_dir,
                  self.results_dir, self.logs_dir]:
            d.mkdir(parents=True, exist_ok=True)


@dataclass
class DataConfig:
    """Rank table and weight file layout."""
    alternative_col: str = "Alternative"
    min_rank: float = 1.0
    weight_tolerance: float = 1e-6
    weight_criterion_col: str = "Criterion"
    weight_value_col: str = "Weight"


@dataclass
class OutputConfig:
    """
    Serialization settings.

    Rounding applies to saved tables only; the engine never rounds.
    """
    decimals: int = 3
    save_full_tables: bool = True
    save_score_tables: bool = True
    save_comparison: bool = True


@dataclass
class VisualizationConfig:
    """Visualization configuration."""
    enabled: bool = True
    figsize: tuple = (12, 8)
    dpi: int = 300
    style: str = "seaborn-v0_8-whitegrid"
    heatmap_cmap: str = "RdYlGn"
    regime_colors: Dict[str, str] = field(default_factory=lambda: {
        "equal_weight": "#2E86AB",
        "weighted": "#F18F01",
    })


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    paths: PathConfig = field(default_factory=PathConfig)
    data: DataConfig = field(default_factory=DataConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)

    @property
    def output_dir(self) -> str:
        """Get output directory path as string."""
        return str(self.paths.output_dir)

    def to_dict(self) -> Dict:
        def _to_dict(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: _to_dict(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, (list, tuple)):
                return [_to_dict(i) for i in obj]
            elif isinstance(obj, dict):
                return {k: _to_dict(v) for k, v in obj.items()}
            return obj
        return _to_dict(self)

    def save(self, filepath: Path) -> None:
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def summary(self) -> str:
        return f"""
{'='*60}
CONFIGURATION SUMMARY - SDM Utility Scoring
{'='*60}

DATA:
  Alternative column: {self.data.alternative_col}
  Minimum rank: {self.data.min_rank}
  Weight tolerance: {self.data.weight_tolerance}

OUTPUT:
  Directory: {self.output_dir}
  Decimals: {self.output.decimals}

VISUALIZATION:
  Enabled: {self.visualization.enabled}
  DPI: {self.visualization.dpi}
  Heatmap colormap: {self.visualization.heatmap_cmap}
{'='*60}
"""


def get_default_config() -> Config:
    """Get a fresh default configuration."""
    return Config()

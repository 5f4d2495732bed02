# -*- coding: utf-8 -*-
"""
Visualization Module
====================

Utility heatmap and equal-weight vs weighted score chart.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, Optional, Tuple

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from .mcdm.utility import UtilityResult, UTILITY_SCORE_COL


class UtilityVisualizer:
    """
    Charts for SDM utility results.
    """

    def __init__(self,
                 output_dir: str = 'outputs/figures',
                 style: str = 'seaborn-v0_8-whitegrid',
                 figsize: Tuple[int, int] = (12, 8),
                 dpi: int = 300,
                 heatmap_cmap: str = 'RdYlGn',
                 regime_colors: Optional[Dict[str, str]] = None):
        """
        Initialize visualizer.

        Parameters
        ----------
        output_dir : str
            Directory for saving figures
        style : str
            Matplotlib style
        figsize : Tuple[int, int]
            Default figure size
        dpi : int
            Figure resolution
        heatmap_cmap : str
            Colormap for utilities (low → high)
        regime_colors : dict, optional
            Bar colors for ``equal_weight`` and ``weighted``
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.figsize = figsize
        self.dpi = dpi
        self.heatmap_cmap = heatmap_cmap
        self.regime_colors = regime_colors or {
            'equal_weight': '#2E86AB',
            'weighted': '#F18F01',
        }

        if style in plt.style.available:
            plt.style.use(style)
        else:
            plt.style.use('default')

    def _save(self, fig, save_name: str) -> str:
        save_path = self.output_dir / save_name
        fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)
        return str(save_path)

    def plot_utility_heatmap(self,
                             result: UtilityResult,
                             title: str = 'Criterion Utilities by Alternative',
                             save_name: str = 'utility_heatmap.png') -> str:
        """
        Heatmap of per-criterion utilities, alternatives ordered best first.
        """
        ranked = result.ranked().set_index(result.alternative_col)
        utilities = ranked[list(result.criteria)]
        values = np.ma.masked_invalid(utilities.to_numpy(dtype=float))

        n_alt, n_crit = utilities.shape
        fig, ax = plt.subplots(figsize=(max(6, n_crit * 1.4 + 3), max(4, n_alt * 0.5 + 2)))

        im = ax.imshow(values, aspect='auto', cmap=self.heatmap_cmap, vmin=0.0, vmax=1.0)

        ax.set_yticks(range(n_alt))
        ax.set_yticklabels([str(a)[:30] for a in utilities.index], fontsize=9)
        ax.set_xticks(range(n_crit))
        ax.set_xticklabels(utilities.columns, fontsize=10, rotation=30, ha='right')

        cbar = plt.colorbar(im, ax=ax, shrink=0.8)
        cbar.set_label('Utility (1=Best)', fontsize=10)

        for i in range(n_alt):
            for j in range(n_crit):
                u = utilities.iat[i, j]
                label = 'NA' if pd.isna(u) else f'{u:.2f}'
                ax.text(j, i, label, ha='center', va='center', fontsize=8,
                        color='black')

        ax.set_title(title, fontsize=13, fontweight='bold', pad=10)
        ax.set_xlabel('Criterion', fontsize=11)
        ax.set_ylabel('Alternative', fontsize=11)
        ax.grid(False)

        plt.tight_layout()
        return self._save(fig, save_name)

    def plot_regime_comparison(self,
                               equal: UtilityResult,
                               weighted: UtilityResult,
                               title: str = 'Utility Score: Equal vs Weighted',
                               save_name: str = 'utility_score_comparison.png') -> str:
        """
        Grouped horizontal bars of UtilityScore per alternative for both
        regimes, ordered by the weighted score ascending.
        """
        df = pd.DataFrame({
            'Equal weights': equal.scores,
            'User weights': weighted.scores,
        })
        df = df.sort_values('User weights', ascending=True, kind='mergesort', na_position='first')

        n = len(df)
        y = np.arange(n)
        height = 0.38

        fig, ax = plt.subplots(figsize=(self.figsize[0] * 0.8, max(4, n * 0.55 + 2)))
        ax.barh(y - height / 2, df['Equal weights'].fillna(0.0), height,
                label='Equal weights', color=self.regime_colors['equal_weight'])
        ax.barh(y + height / 2, df['User weights'].fillna(0.0), height,
                label='User weights', color=self.regime_colors['weighted'])

        ax.set_yticks(y)
        ax.set_yticklabels([str(a)[:30] for a in df.index], fontsize=9)
        ax.set_xlim(0, 1)
        ax.set_xlabel(UTILITY_SCORE_COL, fontsize=11)
        ax.set_title(title, fontsize=13, fontweight='bold')
        ax.legend(loc='lower right', fontsize=9)
        ax.grid(True, axis='x', alpha=0.3)

        plt.tight_layout()
        return self._save(fig, save_name)


def create_visualizer(output_dir: str = 'outputs/figures', **kwargs) -> UtilityVisualizer:
    """Factory function to create a UtilityVisualizer."""
    return UtilityVisualizer(output_dir=output_dir, **kwargs)

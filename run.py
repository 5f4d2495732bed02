#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Entry point for SDM utility scoring.

Usage:
    python run.py                                   # data/rankings.csv, default weights
    python run.py path/to/rankings.csv              # custom rank table
    python run.py rankings.csv weights.csv          # custom weights (CSV or JSON)
    python run.py rankings.csv weights.json outdir  # custom output directory
"""

import sys
from pathlib import Path

# Configuration
CONFIG = {
    'rankings_path': 'data/rankings.csv',
    'output_dir': 'outputs',
    # Used when no weight file is given and the rank table has exactly these criteria
    'default_weights': {
        'Cost': 0.05,
        'Effectiveness': 0.30,
        'Time': 0.10,
        'Difficulty': 0.10,
        'Liability': 0.40,
        'Attractiveness': 0.05,
    },
}


def main():
    """Run the SDM utility pipeline."""
    rankings_path = sys.argv[1] if len(sys.argv) > 1 else CONFIG['rankings_path']
    weights_path = sys.argv[2] if len(sys.argv) > 2 else None
    output_dir = sys.argv[3] if len(sys.argv) > 3 else CONFIG['output_dir']

    from sdm_utility import SDMPipeline, SDMError, get_default_config, load_rankings

    config = get_default_config()
    config.paths.output_name = output_dir

    print(f"{'─'*70}")
    print("  CONFIGURATION")
    print(f"{'─'*70}")
    print(f"\n  Rank table: {rankings_path}")
    print(f"  Weights: {weights_path or 'built-in defaults'}")
    print(f"  Output: {output_dir}/\n")

    try:
        weights = weights_path
        if weights is None:
            criteria = set(load_rankings(rankings_path, config).criteria)
            if criteria == set(CONFIG['default_weights']):
                weights = CONFIG['default_weights']
            else:
                print("  Rank table criteria differ from the built-in weights; "
                      "running equal-weight regime only\n")

        pipeline = SDMPipeline(config)
        result = pipeline.run(rankings_path, weights)
    except SDMError as e:
        print(f"\n  ❌ Error: {e}")
        sys.exit(1)

    print_results(result)


def print_results(result):
    """Print the score tables of each regime."""
    for regime, res in result.results.items():
        print(f"\n{'─'*70}")
        print(f"  {regime.upper().replace('_', ' ')} UTILITY SCORES")
        print(f"{'─'*70}")
        print(f"     {'Rank':<6} {'Alternative':<30} {'UtilityScore':>12}")
        print(f"     {'-'*50}")
        for i, (alt, score) in enumerate(res.score_table().itertuples(index=False, name=None), 1):
            score_str = 'NA' if score != score else f"{score:.3f}"
            print(f"     {i:<6} {str(alt)[:30]:<30} {score_str:>12}")

    if result.comparison is not None:
        print(f"\n  Spearman rho between regimes: {result.comparison.spearman_rho:.4f}")

    print(f"\n  📊 Results saved to '{Path(result.config.output_dir)}/'")
    print(f"  ⏱️  Execution Time: {result.execution_time:.2f} seconds")


if __name__ == '__main__':
    main()

"""Bar charts comparing replacement algorithms over one trace."""

from typing import Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

METRICS = [
    ('page_faults', 'Page Faults'),
    ('fault_rate', 'Page Fault Rate'),
    ('write_backs', 'Write-backs'),
]


def plot_comparison(results: Dict[str, Dict], output_path: str, title: Optional[str] = None):
    """Save a one-row figure with a bar chart per metric"""
    algorithms = list(results)
    x = np.arange(len(algorithms))

    fig, axes = plt.subplots(1, len(METRICS), figsize=(15, 5))
    fig.suptitle(title or 'Page Replacement Algorithm Comparison', fontsize=14, fontweight='bold')

    for ax, (metric, label) in zip(axes, METRICS):
        values = np.array([results[alg][metric] or 0 for alg in algorithms], dtype=float)
        bars = ax.bar(x, values, 0.6)

        for bar, value in zip(bars, values):
            text = f'{value:.3f}' if metric == 'fault_rate' else f'{int(value)}'
            ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height(),
                    text, ha='center', va='bottom', fontsize=9)

        ax.set_title(label)
        ax.set_xticks(x)
        ax.set_xticklabels(algorithms)
        ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return output_path

# Charts for the on/off eFG analysis.
# The main input is the frame produced by analyze.results_to_frame: one row
# per player with ratio, samples and credibility.

from typing import Optional, Tuple
import os
import logging
import matplotlib
# Only force the non-interactive 'Agg' backend when explicitly requested
# (e.g. in headless CI or via `export FORCE_AGG=1`). Otherwise leave the
# backend selection to matplotlib.
if os.environ.get('FORCE_AGG', '0') == '1':
    matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MISSING_COLOR = '#bbbbbb'
CMAP_NAME = 'Blues'


def _save(fig, out_path: Optional[str]):
    if out_path is None:
        return
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(out_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Saved plot to {out_path}")


def _plottable(frame: pd.DataFrame, min_sample: int = 0) -> pd.DataFrame:
    """Rows with a ratio whose smaller sample reaches `min_sample`, ranked by ratio."""
    df = frame[frame['ratio'].notna()].copy()
    if min_sample > 0 and not df.empty:
        smaller = df[['on_court_sample', 'off_court_sample']].astype(float).min(axis=1)
        df = df[smaller >= min_sample]
    return df.sort_values('ratio', ascending=False, kind='mergesort')


def plot_ratio_bars(frame: pd.DataFrame, team: str, out_path: Optional[str] = None,
                    min_sample: int = 0) -> Tuple[plt.Figure, plt.Axes]:
    """Ranked bar chart of on/off teammate eFG ratio for one team.

    Bar colour gets darker with credibility; players with a missing
    credibility are drawn grey. Players with no ratio are left out.
    """
    df = _plottable(frame, min_sample=min_sample)

    fig, ax = plt.subplots(figsize=(max(6, 0.6 * len(df) + 2), 5))

    # drop the near-white low end so every bar stays visible
    base = matplotlib.colormaps[CMAP_NAME]
    cmap = mcolors.LinearSegmentedColormap.from_list('credibility', base(np.linspace(0.25, 1.0, 256)))
    norm = mcolors.Normalize(vmin=0.0, vmax=1.0)
    colors = [cmap(norm(c)) if pd.notna(c) else MISSING_COLOR for c in df['credibility']]

    x = np.arange(len(df))
    ax.bar(x, df['ratio'].to_numpy(dtype=float), color=colors, edgecolor='black', linewidth=0.5)
    ax.axhline(1.0, color='gray', linestyle='--', alpha=0.7)

    ax.set_xticks(x)
    ax.set_xticklabels([str(p) for p in df.index], rotation=60, ha='right', fontsize=8)
    ax.set_ylabel('Teammate eFG% ratio (on / off)')
    ax.set_title(f'{team}: teammate eFG% on vs off court')
    ax.grid(True, axis='y', linestyle='--', alpha=0.3)

    sm = plt.cm.ScalarMappable(cmap=cmap, norm=norm)
    sm.set_array([])
    cbar = fig.colorbar(sm, ax=ax)
    cbar.set_label('Credibility')

    if df.empty:
        ax.text(0.5, 0.5, 'No players with a defined ratio', transform=ax.transAxes,
                ha='center', va='center', color='gray')

    _save(fig, out_path)
    return fig, ax


def plot_credibility_curve(max_n: int = 100, fixed_n: int = 50,
                           out_path: Optional[str] = None) -> Tuple[plt.Figure, plt.Axes]:
    """Illustrate sqrt(min(n, fixed_n) / max(n, fixed_n)) for n = 1..max_n."""
    n = np.arange(1, max_n + 1)
    cred = np.sqrt(np.minimum(n, fixed_n) / np.maximum(n, fixed_n))

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(n, cred, color='tab:blue')
    ax.axvline(fixed_n, color='gray', linestyle='--', alpha=0.5)
    ax.set_ylim(0, 1.05)
    ax.set_xlabel('On-court sample size')
    ax.set_ylabel('Credibility')
    ax.set_title(f'Square-root credibility (off-court sample = {fixed_n})')
    ax.grid(True, linestyle='--', alpha=0.3)

    _save(fig, out_path)
    return fig, ax

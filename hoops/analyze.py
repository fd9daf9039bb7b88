"""On-court / off-court teammate shooting analysis.

For each player on a team we split the game's events by whether that player
was one of the five on the floor for their side, keep only field goal
attempts taken by teammates, and compare the teammates' effective field
goal percentage (eFG%) with the player on versus off the court:

    eFG% = (FGM + 0.5 * 3PM) / FGA
    ratio = eFG_on / eFG_off
    credibility = sqrt(min(n_on, n_off) / max(n_on, n_off))

Missing values are `None` throughout. A player with no qualifying teammate
shots in one of the partitions gets `None` for that eFG% and sample size,
and for the ratio and credibility that depend on them. That is an expected
outcome for bench players, so it is reported with MissingDataWarning
instead of an exception.
"""

import math
import logging
import warnings
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from hoops import config

logger = logging.getLogger(__name__)


class InvalidSideError(ValueError):
    """Side selector is neither 'home' nor 'away'."""


class MissingDataWarning(UserWarning):
    """A player's on-court or off-court teammate shot subset is empty."""


@dataclass
class EfficiencyResult:
    player: str
    team: str
    side: str
    ratio: Optional[float] = None
    on_court_efg: Optional[float] = None
    off_court_efg: Optional[float] = None
    on_court_sample: Optional[int] = None
    off_court_sample: Optional[int] = None
    credibility: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def is_complete(self) -> bool:
        return self.ratio is not None and self.credibility is not None


def _check_side(side: str) -> str:
    s = str(side).strip().lower() if side is not None else ''
    if s not in config.SIDES:
        raise InvalidSideError(f"side must be one of {config.SIDES}, got {side!r}")
    return s


def lineup_columns(side: str) -> List[str]:
    """Return the five lineup-slot columns for `side`."""
    return list(config.LINEUP_COLS[_check_side(side)])


def get_roster(df: pd.DataFrame, side: str) -> List[str]:
    """Every player who appeared in any lineup slot for `side`, sorted, once each.

    Ids keep the type they have in the frame so they still match the slots.
    """
    cols = lineup_columns(side)
    names = pd.unique(df[cols].to_numpy().ravel())
    return sorted((n for n in names if not pd.isna(n)), key=str)


def _on_court_mask(df: pd.DataFrame, player: str, side: str) -> pd.Series:
    # membership of `player` in the five slots of `side`, one bool per event
    cols = lineup_columns(side)
    mask = df[cols].eq(player).any(axis=1)
    return mask.fillna(False).astype(bool)


def split_on_off(df: pd.DataFrame, player: str, side: str) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Partition the events into (on_court, off_court) for `player` on `side`.

    The two frames are disjoint and together hold every row of `df`.
    Raises InvalidSideError for an unrecognized side.
    """
    on = _on_court_mask(df, player, side)
    return df[on], df[~on]


def teammate_shots(df: pd.DataFrame, player: str, team: str) -> pd.DataFrame:
    """Field goal attempts by `team` that were not taken by `player`.

    Free throws and every non-shot event are dropped, as are the subject
    player's own attempts and anything credited to the other team.
    """
    is_team = df[config.TEAM_COL].eq(team).fillna(False).astype(bool)
    is_shot = df[config.EVENT_COL].isin(config.SHOT_EVENTS).fillna(False).astype(bool)
    is_other = df[config.PLAYER_COL].ne(player).fillna(True).astype(bool)
    return df[is_team & is_shot & is_other]


def effective_fg_pct(shots: pd.DataFrame) -> Optional[float]:
    """eFG% over a frame of field goal attempts, or None if it is empty.

    Args:
        shots: rows already restricted to qualifying attempts (see teammate_shots).

    Returns:
        (made + 0.5 * made_threes) / attempts, or None when there are no attempts.
    """
    attempts = len(shots)
    if attempts == 0:
        return None

    made = shots[config.EVENT_COL] == config.MADE_SHOT
    made_threes = made & (shots[config.POINTS_COL] == config.THREE_POINT_VALUE)

    return (int(made.sum()) + 0.5 * int(made_threes.sum())) / attempts


def efg_ratio(on_efg: Optional[float], off_efg: Optional[float]) -> Optional[float]:
    """on / off, or None if either side is missing or off is zero."""
    if on_efg is None or off_efg is None:
        return None
    if off_efg == 0:
        return None
    return on_efg / off_efg


def credibility(n_on: Optional[int], n_off: Optional[int]) -> Optional[float]:
    """Square-root credibility of an on/off comparison.

    1.0 when both samples are the same size, falling toward 0 as they grow
    lopsided. None when either sample is missing or zero.
    """
    if n_on is None or n_off is None:
        return None
    lo, hi = min(n_on, n_off), max(n_on, n_off)
    if lo <= 0:
        return None
    return min(1.0, max(0.0, math.sqrt(lo / hi)))


def player_ratio(df: pd.DataFrame, player: str, side: str, team: str) -> EfficiencyResult:
    """Teammate eFG% with `player` on vs off the court for one side."""
    side = _check_side(side)

    on_df, off_df = split_on_off(df, player, side)
    on_shots = teammate_shots(on_df, player, team)
    off_shots = teammate_shots(off_df, player, team)

    res = EfficiencyResult(player=player, team=team, side=side)

    if on_shots.empty:
        warnings.warn(f"{player} ({team}): no teammate shots while on court", MissingDataWarning)
    else:
        res.on_court_efg = effective_fg_pct(on_shots)
        res.on_court_sample = len(on_shots)

    if off_shots.empty:
        warnings.warn(f"{player} ({team}): no teammate shots while off court", MissingDataWarning)
    else:
        res.off_court_efg = effective_fg_pct(off_shots)
        res.off_court_sample = len(off_shots)

    res.ratio = efg_ratio(res.on_court_efg, res.off_court_efg)
    res.credibility = credibility(res.on_court_sample, res.off_court_sample)

    logger.debug(f"{side} {player}: on={res.on_court_efg} (n={res.on_court_sample}) "
                 f"off={res.off_court_efg} (n={res.off_court_sample}) ratio={res.ratio}")
    return res


def roster_ratios(df: pd.DataFrame, side: str, team: str) -> Dict[str, EfficiencyResult]:
    """Run player_ratio for every player in the `side` roster.

    Every roster member gets an entry, even when all of its values are None.
    """
    side = _check_side(side)
    roster = get_roster(df, side)
    logger.info(f"Computing on/off eFG for {len(roster)} {side} players ({team})")
    return {p: player_ratio(df, p, side, team) for p in roster}


def analyze_game(df: pd.DataFrame, sides: Dict[str, str]) -> Dict[str, Dict[str, EfficiencyResult]]:
    """Results for each side in `sides` (side -> team abbreviation)."""
    return {_check_side(side): roster_ratios(df, side, team) for side, team in sides.items()}


def results_to_frame(results: Dict[str, EfficiencyResult]) -> pd.DataFrame:
    """Tabulate results, indexed by player and ranked by ratio.

    None becomes NaN here since this frame only feeds CSV output and plots.
    Players without a ratio sort last.
    """
    cols = ['team', 'side', 'ratio', 'on_court_efg', 'off_court_efg',
            'on_court_sample', 'off_court_sample', 'credibility']
    if not results:
        return pd.DataFrame(columns=cols).rename_axis('player')

    rows = [r.to_dict() for r in results.values()]
    frame = pd.DataFrame(rows).set_index('player')[cols]
    for c in ['ratio', 'on_court_efg', 'off_court_efg', 'credibility']:
        frame[c] = pd.to_numeric(frame[c], errors='coerce').astype(float)
    for c in ['on_court_sample', 'off_court_sample']:
        frame[c] = pd.to_numeric(frame[c], errors='coerce').astype('Int64')

    return frame.sort_values('ratio', ascending=False, na_position='last', kind='mergesort')


def summarize(results: Dict[str, EfficiencyResult]) -> dict:
    """Counts and extremes for a batch of results."""
    with_ratio = [r for r in results.values() if r.ratio is not None]
    summary = {
        'players': len(results),
        'with_ratio': len(with_ratio),
        'with_missing': sum(1 for r in results.values() if not r.is_complete),
        'best': None,
        'worst': None,
    }
    if with_ratio:
        ratios = np.array([r.ratio for r in with_ratio])
        summary['best'] = with_ratio[int(np.argmax(ratios))].player
        summary['worst'] = with_ratio[int(np.argmin(ratios))].player
    return summary

"""Load a single game's play-by-play CSV and normalize it for analysis.

The loader only guarantees the columns the on/off analysis reads: team,
event type, player, points and the ten lineup slots (h1..h5, a1..a5).
Any other columns in the file are carried through untouched.
"""

import os
import logging
from typing import Dict

import pandas as pd

from hoops import config

logger = logging.getLogger(__name__)


def load_pbp(csv_path: str) -> pd.DataFrame:
    """Read a play-by-play CSV and return a normalized DataFrame.

    Raises FileNotFoundError if `csv_path` does not exist and ValueError if
    any required column is missing.
    """
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Play-by-play file not found: {csv_path}")

    # ids stay text so '101' in a slot matches shooter '101', even with blank rows
    id_cols = [config.PLAYER_COL] + config.HOME_LINEUP_COLS + config.AWAY_LINEUP_COLS
    df = pd.read_csv(csv_path, dtype={c: str for c in id_cols})
    logger.info(f"Loaded {len(df)} rows from {csv_path}")

    miss = [c for c in config.REQUIRED_COLS if c not in df.columns]
    if miss:
        raise ValueError(f"Required columns not found: {miss}")

    return normalize_pbp(df)


def _clean_str(s: pd.Series) -> pd.Series:
    # blanks -> NA so they never match a player name
    out = s.astype('string').str.strip()
    return out.mask(out == '')


def normalize_pbp(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of `df` with consistent types for the analysis columns.

    - event type: stripped, lower-case ('Shot ' -> 'shot')
    - team: stripped, upper-case
    - player and lineup slots: stripped strings, blanks become missing
    - points: numeric, anything unparseable becomes NaN
    """
    x = df.copy()
    x[config.EVENT_COL] = _clean_str(x[config.EVENT_COL]).str.lower()
    x[config.TEAM_COL] = _clean_str(x[config.TEAM_COL]).str.upper()
    for c in [config.PLAYER_COL] + config.HOME_LINEUP_COLS + config.AWAY_LINEUP_COLS:
        x[c] = _clean_str(x[c])
    x[config.POINTS_COL] = pd.to_numeric(x[config.POINTS_COL], errors='coerce')

    logger.debug(f"Normalized {len(x)} rows; event types: {sorted(x[config.EVENT_COL].dropna().unique())}")
    return x


def infer_sides(df: pd.DataFrame) -> Dict[str, str]:
    """Work out which team abbreviation is home and which is away.

    For every field goal attempt we check whether the shooter is listed in
    the home slots or the away slots. The team whose shooters show up in
    the home slots more often than the other team's is home.

    Returns {'home': abbr, 'away': abbr}. Raises ValueError when the log
    does not contain exactly two teams or the vote is tied.
    """
    teams = sorted(df[config.TEAM_COL].dropna().unique().tolist())
    if len(teams) != 2:
        raise ValueError(f"Expected exactly two teams in the log, found {teams}")

    shots = df[df[config.EVENT_COL].isin(config.SHOT_EVENTS)]
    shooter = shots[config.PLAYER_COL]
    in_home = shots[config.HOME_LINEUP_COLS].eq(shooter, axis=0).any(axis=1)
    in_away = shots[config.AWAY_LINEUP_COLS].eq(shooter, axis=0).any(axis=1)

    # net home votes per team
    votes = {}
    for team in teams:
        m = shots[config.TEAM_COL] == team
        votes[team] = int(in_home[m].sum()) - int(in_away[m].sum())

    logger.debug(f"Home-slot votes by team: {votes}")

    if votes[teams[0]] == votes[teams[1]]:
        raise ValueError(f"Cannot tell home from away, votes tied: {votes}")

    home = max(teams, key=lambda t: votes[t])
    away = teams[1] if home == teams[0] else teams[0]
    return {'home': home, 'away': away}

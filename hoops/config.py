import os
import json
import logging

logger = logging.getLogger(__name__)

# Directory Paths (Absolute)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
CONFIG_FILE = os.environ.get('HOOPS_CONFIG_FILE', os.path.join(BASE_DIR, 'hoops.config.json'))

# Defaults
DATA_DIR = os.path.join(BASE_DIR, 'data')
ANALYSIS_DIR = os.path.join(BASE_DIR, 'analysis')
MIN_SAMPLE = 0

# Play-by-play columns
TEAM_COL = 'team'
EVENT_COL = 'event_type'
PLAYER_COL = 'player'
POINTS_COL = 'points'
HOME_LINEUP_COLS = ['h1', 'h2', 'h3', 'h4', 'h5']
AWAY_LINEUP_COLS = ['a1', 'a2', 'a3', 'a4', 'a5']

# Event vocabulary (after normalization: stripped, lower-case)
MADE_SHOT = 'shot'
MISSED_SHOT = 'miss'
SHOT_EVENTS = (MADE_SHOT, MISSED_SHOT)
THREE_POINT_VALUE = 3

SIDES = ('home', 'away')
LINEUP_COLS = {
    'home': HOME_LINEUP_COLS,
    'away': AWAY_LINEUP_COLS,
}

REQUIRED_COLS = [TEAM_COL, EVENT_COL, PLAYER_COL, POINTS_COL] + HOME_LINEUP_COLS + AWAY_LINEUP_COLS

# Load overrides from config file if present
if os.path.exists(CONFIG_FILE):
    try:
        with open(CONFIG_FILE, 'r') as f:
            config = json.load(f)
        # all-or-nothing: a bad value keeps every default
        _data_dir = config.get('data_dir', DATA_DIR)
        _analysis_dir = config.get('analysis_dir', ANALYSIS_DIR)
        _min_sample = int(config.get('min_sample', MIN_SAMPLE))
        DATA_DIR, ANALYSIS_DIR, MIN_SAMPLE = _data_dir, _analysis_dir, _min_sample
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to load config file: {e}")


def get_analysis_dir(game_label):
    return os.path.join(ANALYSIS_DIR, game_label)


def resolve_data_path(path):
    """Return `path` as given if it exists or is absolute, else look it up under DATA_DIR."""
    if os.path.isabs(path) or os.path.exists(path):
        return path
    return os.path.join(DATA_DIR, path)


logger.debug(f"Data Dir: {DATA_DIR}, Analysis Dir: {ANALYSIS_DIR}")

"""
Constants for the Clubhouse team manager.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Clubhouse"

# Persisted snapshot format
SNAPSHOT_VERSION = 11
DEFAULT_DATA_FILE = "team-storage.json"

# Default team values
DEFAULT_TEAM_NAME = "My Team"
DEFAULT_SPORT = "hockey"
DEFAULT_JERSEY_COLORS = [
    {"name": "White", "color": "#ffffff"},
    {"name": "Black", "color": "#1a1a1a"},
]

# Identifier classification
MIN_PHONE_DIGITS = 7

# Remote sync defaults
DEFAULT_SYNC_TIMEOUT_S = 10.0

# Positions per sport (first entry is the default position)
SPORT_POSITIONS = {
    "baseball": ["P", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH"],
    "basketball": ["PG", "SG", "SF", "PF", "C"],
    "hockey": ["C", "LW", "RW", "LD", "RD", "G"],
    "lacrosse": ["G", "A", "M", "D"],
    "soccer": ["GK", "DEF", "MID", "FWD"],
    "softball": ["P", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH", "EF"],
}

SPORT_NAMES = {
    "baseball": "Baseball",
    "basketball": "Basketball",
    "hockey": "Hockey",
    "lacrosse": "Lacrosse",
    "soccer": "Soccer",
    "softball": "Softball",
}

# Positions grouped by role on the field. A position changes sport by keeping
# its group: keepers stay keepers, defenders stay defenders, and so on.
POSITION_GROUPS = {
    "keeper": {
        "baseball": "C", "basketball": "C", "hockey": "G",
        "lacrosse": "G", "soccer": "GK", "softball": "C",
    },
    "defense": {
        "baseball": "3B", "basketball": "PF", "hockey": "LD",
        "lacrosse": "D", "soccer": "DEF", "softball": "3B",
    },
    "middle": {
        "baseball": "SS", "basketball": "PG", "hockey": "C",
        "lacrosse": "M", "soccer": "MID", "softball": "SS",
    },
    "attack": {
        "baseball": "LF", "basketball": "SG", "hockey": "LW",
        "lacrosse": "A", "soccer": "FWD", "softball": "LF",
    },
}

POSITION_TO_GROUP = {
    "baseball": {
        "P": "keeper", "C": "keeper", "1B": "defense", "2B": "middle", "3B": "defense",
        "SS": "middle", "LF": "attack", "CF": "middle", "RF": "attack", "DH": "attack",
    },
    "basketball": {"PG": "middle", "SG": "attack", "SF": "attack", "PF": "defense", "C": "keeper"},
    "hockey": {"G": "keeper", "LD": "defense", "RD": "defense", "C": "middle", "LW": "attack", "RW": "attack"},
    "lacrosse": {"G": "keeper", "A": "attack", "M": "middle", "D": "defense"},
    "soccer": {"GK": "keeper", "DEF": "defense", "MID": "middle", "FWD": "attack"},
    "softball": {
        "P": "keeper", "C": "keeper", "1B": "defense", "2B": "middle", "3B": "defense",
        "SS": "middle", "LF": "attack", "CF": "middle", "RF": "attack", "DH": "attack",
        "EF": "attack",
    },
}

# Pitchers keep pitching when a team moves between the two diamond sports
DIAMOND_SPORTS = ("baseball", "softball")

SECURITY_QUESTIONS = [
    "What was the name of your first pet?",
    "What city were you born in?",
    "What is your mother's maiden name?",
    "What was the name of your elementary school?",
    "What is your favorite sports team?",
    "What was the make of your first car?",
    "What street did you grow up on?",
    "What is your favorite movie?",
]

# Reasons recorded when a player is marked out automatically
REASON_UNAVAILABLE = "Unavailable"
REASON_INJURED = "Injured"
REASON_SUSPENDED = "Suspended"

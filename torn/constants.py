"""Constants for the Torn league engine."""

from datetime import datetime

# Legacy documents store game time as a day offset from this date
DAY_ZERO = datetime(1899, 12, 30)

# Timestamp format written to league documents
TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

# Timestamp formats accepted when reading (after ISO-8601)
LEGACY_TIME_FORMATS = (
    '%Y/%m/%d %H:%M:%S',
    '%Y/%m/%d %H:%M',
    '%d/%m/%Y %H:%M:%S',
)

# Colour names, indexed by Colour value
COLOUR_NAMES = (
    'None',
    'Red',
    'Blue',
    'Green',
    'Yellow',
    'Purple',
    'Pink',
    'Cyan',
    'Orange',
)

# Short colour spellings some servers report
COLOUR_ALIASES = {
    'blu': 'blue',
    'grn': 'green',
    'yel': 'yellow',
}

# Handicap style markers as written in documents
HANDICAP_STYLE_MARKERS = {
    'Percent': '%',
    'Plus': '+',
    'Minus': '-',
}

# Display grid defaults for a new league
DEFAULT_GRID_HIGH = 3
DEFAULT_GRID_WIDE = 1
DEFAULT_GRID_PLAYERS = 6

DEFAULT_LEAGUE_FILE = 'league.json'

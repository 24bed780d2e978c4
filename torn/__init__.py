from .handicap import Handicap, HandicapError, HandicapStyle
from .models import (
    Colour,
    DisplaySettings,
    Game,
    GamePlayer,
    GameTeam,
    LeaguePlayer,
    LeagueTeam,
    ServerGame,
    ServerPlayer,
    TeamRoster,
)
from .league import League
from .linker import LinkTable, PlayerAppearance, TeamAppearance, rebuild_links, relink
from .matcher import build_rosters, guess_team, guess_teams
from .committer import award_victory_points, commit_game
from .document import league_to_dict, read_document, write_document
from .servers import DemoServer, LaserGameServer, get_server
from .validators import validate_league

__all__ = [
    # Handicaps
    'Handicap',
    'HandicapError',
    'HandicapStyle',
    # Models
    'Colour',
    'DisplaySettings',
    'Game',
    'GamePlayer',
    'GameTeam',
    'LeaguePlayer',
    'LeagueTeam',
    'ServerGame',
    'ServerPlayer',
    'TeamRoster',
    # League
    'League',
    # Linking
    'LinkTable',
    'PlayerAppearance',
    'TeamAppearance',
    'rebuild_links',
    'relink',
    # Team matching
    'build_rosters',
    'guess_team',
    'guess_teams',
    # Committing
    'award_victory_points',
    'commit_game',
    # Documents
    'league_to_dict',
    'read_document',
    'write_document',
    # Game servers
    'DemoServer',
    'LaserGameServer',
    'get_server',
    # Validation
    'validate_league',
]

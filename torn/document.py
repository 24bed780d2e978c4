"""
League documents: reading and writing a league as a JSON file.

Only identity and result fields are written. Links between teams, players
and games are rebuilt by the linker after every read. Zero counters and
default handicaps are left out to keep documents small, and read back as
zero/no handicap.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from .handicap import Handicap, HandicapStyle
from .models import (
    Colour,
    DisplaySettings,
    Game,
    GamePlayer,
    GameTeam,
    LeaguePlayer,
    LeagueTeam,
)
from .schemas import GameRecord, LeagueFile, TeamRecord
from .utils import format_game_time, load_json, parse_game_time, save_json

if TYPE_CHECKING:
    from .league import League

logger = logging.getLogger('torn.document')

# Per-player counters written only when nonzero
PLAYER_COUNTERS = (
    'hits_by',
    'hits_on',
    'base_hits',
    'base_destroys',
    'base_denies',
    'base_denied',
    'yellow_cards',
    'red_cards',
)


def _put(node: dict[str, Any], key: str, value: Any) -> None:
    """Add value unless it is None or empty text."""
    if value is None or value == '':
        return
    node[key] = value


def _put_nonzero(node: dict[str, Any], key: str, value: float) -> None:
    if value:
        node[key] = value


def _put_handicap(node: dict[str, Any], handicap: Optional[Handicap]) -> None:
    if handicap is not None and handicap.value is not None and not handicap.is_zero():
        node['handicap'] = str(handicap)


def _parse_handicap(text: Optional[str]) -> Optional[Handicap]:
    if not text:
        return None
    return Handicap.parse(text)


# Reading


def _read_team(league: 'League', record: TeamRecord) -> LeagueTeam:
    team = LeagueTeam(
        id=record.id,
        name=record.name,
        handicap=_parse_handicap(record.handicap),
        comment=record.comment,
    )

    for player_record in record.players:
        if not player_record.id:
            logger.debug(f'Skipping player with no id in team {record.id}')
            continue

        player = league.players.get(player_record.id)
        if player is None:
            player = LeaguePlayer(id=player_record.id)
            league.players[player.id] = player

        player.name = player_record.name
        player.handicap = _parse_handicap(player_record.handicap)
        player.comment = player_record.comment
        team.add_player(player.id)

    return team


def _read_game(record: GameRecord) -> Game:
    game = Game(
        time=parse_game_time(record.time, record.game_time),
        title=record.title,
        secret=record.secret,
    )

    for team_record in record.teams:
        game.teams.append(
            GameTeam(
                team_id=team_record.team_id,
                colour=Colour.parse(team_record.colour),
                score=team_record.score,
                points=team_record.points,
                adjustment=team_record.adjustment,
                points_adjustment=team_record.points_adjustment,
            )
        )
    game.sort_teams()

    for player_record in record.players:
        game.players.append(
            GamePlayer(
                player_id=player_record.player_id,
                game_team_id=player_record.team_id,
                pack=player_record.pack,
                score=player_record.score,
                rank=player_record.rank,
                colour=Colour.parse(player_record.colour),
                **{name: getattr(player_record, name) for name in PLAYER_COUNTERS},
            )
        )

    return game


def apply_document(league: 'League', document: LeagueFile) -> None:
    """
    Fill an empty league from a validated document.

    Does not link; callers run the linker afterwards.

    Raises:
        HandicapError: If a team or player handicap cannot be parsed
    """
    league.display = DisplaySettings(
        grid_high=document.grid_high,
        grid_wide=document.grid_wide,
        grid_players=document.grid_players,
        sort_mode=document.sort_mode,
        sort_by_rank=document.sort_by_rank,
        auto_update=document.auto_update,
        update_teams=document.update_teams,
        elim_multiplier=document.elim_multiplier,
    )
    league.handicap_style = HandicapStyle.from_text(document.handicap_style)
    league.victory_points = list(document.victory_points)
    league.victory_points_high_score = document.victory_points_high_score
    league.victory_points_proportional = document.victory_points_proportional
    league.auto_victory_points = document.auto_victory_points

    for team_record in document.teams:
        team = _read_team(league, team_record)
        if team.id in league.teams:
            logger.warning(f'Duplicate team id {team.id}; keeping the later team')
        league.teams[team.id] = team

    for game_record in document.games:
        league.all_games.append(_read_game(game_record))

    league.all_games.sort(key=lambda g: g.time)


def read_document(league: 'League', path: Path | str) -> None:
    """
    Read a league file into league, replacing its contents.

    Args:
        league: League to fill; cleared first
        path: League file to read

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not JSON
        ValueError: If the document structure is invalid
        HandicapError: If a handicap cannot be parsed
    """
    document = load_json(path, schema=LeagueFile)
    league.clear()
    apply_document(league, document)
    logger.info(f'Read {len(league.teams)} teams and {len(league.all_games)} games from {path}')


# Writing


def _team_to_dict(league: 'League', team: LeagueTeam) -> dict[str, Any]:
    node: dict[str, Any] = {}
    _put(node, 'name', team.display_name(league.players))
    node['id'] = team.id
    _put_handicap(node, team.handicap)
    _put(node, 'comment', team.comment)

    players = []
    for player_id in team.player_ids:
        player = league.players.get(player_id) or LeaguePlayer(id=player_id)
        player_node: dict[str, Any] = {}
        _put(player_node, 'name', player.name)
        player_node['id'] = player.id
        _put_handicap(player_node, player.handicap)
        _put(player_node, 'comment', player.comment)
        players.append(player_node)
    node['players'] = players

    return node


def _game_to_dict(game: Game) -> dict[str, Any]:
    node: dict[str, Any] = {}
    _put(node, 'title', game.title)
    node['time'] = format_game_time(game.time)
    node['hits'] = game.hits
    if game.secret:
        node['secret'] = True

    teams = []
    for game_team in game.teams:
        team_node: dict[str, Any] = {
            'team_id': game_team.team_id if game_team.team_id is not None else -1,
            'colour': game.team_colour(game_team).label,
            'score': game_team.score,
        }
        _put_nonzero(team_node, 'points', game_team.points)
        _put_nonzero(team_node, 'adjustment', game_team.adjustment)
        _put_nonzero(team_node, 'points_adjustment', game_team.points_adjustment)
        teams.append(team_node)
    node['teams'] = teams

    players = []
    for game_player in game.players:
        player_node: dict[str, Any] = {
            'team_id': game_player.game_team_id,
            'player_id': game_player.player_id,
        }
        _put(player_node, 'pack', game_player.pack)
        player_node['score'] = game_player.score
        player_node['rank'] = game_player.rank
        for name in PLAYER_COUNTERS:
            _put_nonzero(player_node, name, getattr(game_player, name))
        player_node['colour'] = game_player.colour.label
        players.append(player_node)
    node['players'] = players

    return node


def league_to_dict(league: 'League') -> dict[str, Any]:
    """Build the JSON document for a league."""
    display = league.display
    node: dict[str, Any] = {
        'grid_high': display.grid_high,
        'grid_wide': display.grid_wide,
        'grid_players': display.grid_players,
        'sort_mode': display.sort_mode,
        'handicap_style': league.handicap_style.marker,
    }
    _put_nonzero(node, 'sort_by_rank', display.sort_by_rank)
    node['auto_update'] = display.auto_update
    node['update_teams'] = display.update_teams
    _put_nonzero(node, 'elim_multiplier', display.elim_multiplier)

    node['victory_points'] = list(league.victory_points)
    _put_nonzero(node, 'victory_points_high_score', league.victory_points_high_score)
    _put_nonzero(node, 'victory_points_proportional', league.victory_points_proportional)
    if league.auto_victory_points:
        node['auto_victory_points'] = True

    node['teams'] = [_team_to_dict(league, team) for team in league.teams.values()]
    node['games'] = [_game_to_dict(game) for game in league.all_games]

    return node


def write_document(league: 'League', path: Path | str) -> None:
    """Write league to path as a JSON document."""
    save_json(path, league_to_dict(league))
    logger.info(f'Wrote {len(league.teams)} teams and {len(league.all_games)} games to {path}')

"""Commit a finished game's server-reported rosters into the league."""

import logging
from typing import TYPE_CHECKING, Iterable

from .matcher import guess_team
from .models import (
    Colour,
    Game,
    GamePlayer,
    GameTeam,
    LeaguePlayer,
    LeagueTeam,
    ServerGame,
    TeamRoster,
    game_player_sort_key,
)

if TYPE_CHECKING:
    from .league import League

logger = logging.getLogger('torn.committer')


def team_score(league: 'League', team: LeagueTeam, players: Iterable[GamePlayer], adjustment: int) -> int:
    """
    Score for a game team: its players' scores plus adjustment, handicapped.

    The league team's handicap value is applied in the league's handicap
    style, so changing the league style reinterprets every stored value.
    """
    score = sum(p.score for p in players) + adjustment
    if team.handicap is not None:
        score = team.handicap.with_style(league.handicap_style).apply(score)
    return int(round(score))


def award_victory_points(league: 'League', game: Game) -> None:
    """
    Set each game team's victory points from the league's points settings.

    Teams are placed by score. Place n earns victory_points[n]; teams tied on
    score share the mean of the places they cover. The top scorer(s) split
    the high score bonus, and every team earns a proportional share of its
    score when a proportional factor is set. Manual points adjustments are
    added last. Any points already stored on the game teams are replaced,
    so hand-entered points are lost. commit_game() only calls this when
    league.auto_victory_points is set. Leagues without points settings are
    left alone.
    """
    table = league.victory_points
    high = league.victory_points_high_score
    proportional = league.victory_points_proportional
    if not (table or high or proportional) or not game.teams:
        return

    ranked = sorted(game.teams, key=lambda t: -t.score)

    i = 0
    while i < len(ranked):
        j = i
        while j < len(ranked) and ranked[j].score == ranked[i].score:
            j += 1
        places = [table[k] for k in range(i, j) if k < len(table)]
        share = sum(places) / (j - i)
        for game_team in ranked[i:j]:
            game_team.points = share
        i = j

    if high:
        top = [t for t in ranked if t.score == ranked[0].score]
        for game_team in top:
            game_team.points += high / len(top)

    total = sum(t.score for t in ranked)
    if proportional and total > 0:
        for game_team in ranked:
            game_team.points += proportional * game_team.score / total

    for game_team in ranked:
        game_team.points = round(game_team.points + game_team.points_adjustment, 4)


def _resolve_team(league: 'League', roster: TeamRoster, taken: set[int]) -> LeagueTeam:
    if roster.team_id is not None:
        return league.teams[roster.team_id]

    team = guess_team(league, [p.player_id for p in roster.players])
    if team is None or team.id in taken:
        team = league.add_team()
        logger.info(f'Created league team {team.id} for {len(roster.players)} unmatched players')
    return team


def commit_game(league: 'League', server_game: ServerGame, rosters: list[TeamRoster]) -> Game:
    """
    Ingest one finished game into the league.

    The league game for server_game is created or reused and rebuilt from
    the rosters: teams and players from any earlier commit of the same game
    are replaced, not merged, though a league team's or player's earlier
    game record is reused so hand-entered points and edits survive. The game
    time is kept to whole seconds. Each roster is matched to a league team (its
    team_id override, else the team matcher, else a new team), its players
    become league players and team members as needed, and its score is
    computed with the team's handicap. Finally players are ranked by score
    and teams ordered by points then score.

    Nothing is rolled back if this fails part way.

    Args:
        league: League to commit into
        server_game: Server game the rosters came from
        rosters: One roster per server team

    Returns:
        The committed league Game

    Raises:
        KeyError: If a roster names a league team that does not exist
    """
    for roster in rosters:
        if roster.team_id is not None and roster.team_id not in league.teams:
            raise KeyError(f'Unknown league team id {roster.team_id}')

    time = server_game.time.replace(tzinfo=None, microsecond=0)
    game = server_game.game
    if game is None or league.game_at(game.time) is not game:
        game = league.game_at(time)
    if game is None:
        game = Game(time=time, title=server_game.description)
    else:
        league.links.forget_game(game.time)

    game.time = time
    previous_teams = {t.team_id: t for t in game.teams}
    game.teams = []
    previous = {p.player_id: p for p in game.players}
    game.players = []
    taken: set[int] = set()

    for roster in rosters:
        team = _resolve_team(league, roster, taken)
        taken.add(team.id)

        game_team = roster.game_team or previous_teams.get(team.id) or GameTeam()
        game_team.team_id = team.id
        game.teams.append(game_team)
        league.links.add_team_appearance(game, game_team)

        team_players: list[GamePlayer] = []
        for server_player in roster.players:
            player_id = server_player.player_id
            if game.find_player(player_id) is not None:
                logger.warning(f'Player {player_id} appears twice in game {server_game.game_id}')
                continue

            game_player = previous.get(player_id, server_player)
            game_player.game_team_id = team.id
            game.players.append(game_player)
            team_players.append(game_player)

            if player_id not in league.players:
                league.players[player_id] = LeaguePlayer(
                    id=player_id, name=server_player.alias or player_id
                )
                logger.debug(f'Created league player {player_id}')
            team.add_player(player_id)
            league.links.add_player_appearance(game, game_team, game_player, player_id)

        team_players.sort(key=game_player_sort_key)
        game_team.score = team_score(league, team, team_players, game_team.adjustment)
        if game_team.colour is Colour.NONE:
            game_team.colour = game.team_colour(game_team)

    if league.auto_victory_points:
        award_victory_points(league, game)

    game.sort_players()
    game.assign_ranks()
    game.sort_teams()
    game.invalidate_totals()

    if league.game_at(game.time) is None:
        league.all_games.append(game)
        league.all_games.sort(key=lambda g: g.time)

    server_game.game = game

    logger.info(
        f'Committed game {server_game.game_id} at {game.time}: '
        f'{len(game.teams)} teams, {len(game.players)} players'
    )
    return game

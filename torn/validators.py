"""Integrity checks for a linked league."""

from typing import TYPE_CHECKING

from .models import Game, LeagueTeam, game_team_sort_key

if TYPE_CHECKING:
    from .league import League


def validate_team(team: LeagueTeam) -> list[str]:
    """
    Check a league team's member list.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    seen = set()
    duplicates = set()
    for player_id in team.player_ids:
        if player_id in seen:
            duplicates.add(player_id)
        seen.add(player_id)

    if duplicates:
        errors.append(f'Team {team.id} lists players more than once: {", ".join(sorted(duplicates))}')

    if any(not player_id for player_id in team.player_ids):
        errors.append(f'Team {team.id} has a player with no id')

    return errors


def validate_game(game: Game) -> list[str]:
    """
    Check that a game's teams and players are in committed order.

    Checks:
    - Teams ordered by points, then score, both descending
    - Players ordered by score descending
    - Ranks run 1..N down the player list

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    keys = [game_team_sort_key(t) for t in game.teams]
    if keys != sorted(keys):
        errors.append(f'Game {game.time}: teams are not ordered by points and score')

    scores = [p.score for p in game.players]
    if scores != sorted(scores, reverse=True):
        errors.append(f'Game {game.time}: players are not ordered by score')

    ranks = [p.rank for p in game.players]
    if ranks != list(range(1, len(ranks) + 1)):
        errors.append(f'Game {game.time}: player ranks are not 1..{len(ranks)}')

    return errors


def validate_league(league: 'League') -> tuple[list[str], list[str]]:
    """
    Validate a whole league.

    Args:
        league: A linked league

    Returns:
        Tuple of (errors, warnings)
        - errors: Broken invariants that will corrupt scoring or saving
        - warnings: Legacy or partial data that is tolerated, e.g. game
          teams whose league team no longer exists
    """
    errors: list[str] = []
    warnings: list[str] = []

    for key, team in league.teams.items():
        if key != team.id:
            errors.append(f'Team {team.id} is stored under id {key}')
        errors.extend(validate_team(team))
        for player_id in team.player_ids:
            if player_id not in league.players:
                errors.append(f'Team {team.id} member {player_id} is not a league player')

    times = [g.time for g in league.all_games]
    if times != sorted(times):
        errors.append('Games are not in time order')
    if len(set(times)) != len(times):
        errors.append('More than one game at the same time')

    for game in league.all_games:
        errors.extend(validate_game(game))

        for game_team in game.teams:
            if game_team.team_id is None or game_team.team_id not in league.teams:
                warnings.append(f'Game {game.time}: team {game_team.team_id} is not a league team')

    for appearance in league.links.unlinked:
        warnings.append(
            f'Game {appearance.game.time}: player {appearance.game_player.player_id} '
            f'is not linked to a league player'
        )

    return errors, warnings

"""Match the players of a server-reported team to a known league team."""

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from .models import LeagueTeam, ServerGame, ServerPlayer, TeamRoster

if TYPE_CHECKING:
    from .league import League

logger = logging.getLogger('torn.matcher')


def guess_team(league: 'League', player_ids: Iterable[str]) -> Optional[LeagueTeam]:
    """
    Find the league team most likely to be the given set of players.

    Each team with at least one member is scored by the share of its members
    present in player_ids. The team with the strictly highest share wins;
    on a tie the team stored first is kept.

    Args:
        league: League whose teams to search
        player_ids: Player ids seen together on one team in one game

    Returns:
        Best matching LeagueTeam, or None if the league has no teams, no ids
        were given, or no team shares a player
    """
    ids = set(player_ids)
    if not league.teams or not ids:
        return None

    best_team = None
    best_ratio = 0.0

    for team in league.teams.values():
        if not team.player_ids:
            continue
        ratio = sum(1 for pid in team.player_ids if pid in ids) / len(team.player_ids)
        if ratio > best_ratio:
            best_ratio = ratio
            best_team = team

    if best_team is not None:
        logger.debug(f'Matched {len(ids)} players to team {best_team.id} ({best_ratio:.0%})')
    return best_team


def partition_players(server_game: ServerGame) -> list[list[ServerPlayer]]:
    """Split a server game's players by server team, in order of first appearance."""
    partitions: dict[int, list[ServerPlayer]] = {}
    for player in server_game.players:
        partitions.setdefault(player.server_team_id, []).append(player)
    return list(partitions.values())


def guess_teams(league: 'League', server_game: ServerGame) -> list[Optional[LeagueTeam]]:
    """Guess a league team for each server team in a game."""
    return [
        guess_team(league, [p.player_id for p in players])
        for players in partition_players(server_game)
    ]


def build_rosters(league: 'League', server_game: ServerGame) -> list[TeamRoster]:
    """
    Turn a populated server game into rosters ready for commit_game().

    Each roster carries the guessed league team id, or None when no team
    matched and the committer should create one. A league team is guessed
    for at most one roster; later rosters matching it get None.
    """
    rosters = []
    used: set[int] = set()
    for players in partition_players(server_game):
        team = guess_team(league, [p.player_id for p in players])
        if team is not None and team.id in used:
            team = None
        if team is not None:
            used.add(team.id)
        rosters.append(TeamRoster(players=players, team_id=team.id if team else None))
    return rosters

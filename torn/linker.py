"""
Link rebuilding between league entities and game results.

A freshly loaded league knows its relationships only as id fields: a GameTeam
has a team_id, a GamePlayer a player_id and game_team_id. rebuild_links()
turns those ids into a LinkTable answering "which games did this team or
player play in". Entities themselves never hold links; the table is derived
data and is rebuilt, never persisted.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from .models import Game, GamePlayer, GameTeam, LeaguePlayer

if TYPE_CHECKING:
    from .league import League

logger = logging.getLogger('torn.linker')


@dataclass(frozen=True)
class TeamAppearance:
    """A league team's result in one game."""
    game: Game
    game_team: GameTeam


@dataclass(frozen=True)
class PlayerAppearance:
    """A game player, the game it belongs to, and its league player if linked."""
    game: Game
    game_team: Optional[GameTeam]
    game_player: GamePlayer
    league_player_id: Optional[str] = None


@dataclass
class LinkTable:
    """
    Derived links from league teams and players to their game results.

    team_played and player_played are keyed by LeagueTeam.id and
    LeaguePlayer.id. Game players that could not be matched to a league
    player are kept in unlinked, still attached to their game.
    """
    team_played: dict[int, list[TeamAppearance]] = field(default_factory=dict)
    player_played: dict[str, list[PlayerAppearance]] = field(default_factory=dict)
    unlinked: list[PlayerAppearance] = field(default_factory=list)
    _player_index: dict[tuple[datetime, str], str] = field(default_factory=dict, repr=False)

    def team_played_in(self, team_id: int, include_secret: bool = True) -> list[TeamAppearance]:
        appearances = self.team_played.get(team_id, [])
        if include_secret:
            return list(appearances)
        return [a for a in appearances if not a.game.secret]

    def player_played_in(
        self, player_id: str, include_secret: bool = True
    ) -> list[PlayerAppearance]:
        appearances = self.player_played.get(player_id, [])
        if include_secret:
            return list(appearances)
        return [a for a in appearances if not a.game.secret]

    def league_player_id(self, game: Game, game_player: GamePlayer) -> Optional[str]:
        """Id of the league player a game player is linked to, if any."""
        return self._player_index.get((game.time, game_player.player_id))

    def league_team_id(self, game_team: GameTeam) -> Optional[int]:
        """Id of the league team a game team is linked to; None for orphans."""
        if game_team.team_id is None or game_team.team_id not in self.team_played:
            return None
        return game_team.team_id

    def add_team_appearance(self, game: Game, game_team: GameTeam) -> None:
        """Record a team's game, replacing any earlier entry at the same time."""
        if game_team.team_id is None:
            return
        appearances = self.team_played.setdefault(game_team.team_id, [])
        appearances[:] = [a for a in appearances if a.game.time != game.time]
        appearances.append(TeamAppearance(game, game_team))

    def add_player_appearance(
        self, game: Game, game_team: Optional[GameTeam], game_player: GamePlayer, league_player_id: str
    ) -> None:
        """Link a game player to a league player, replacing any entry at the same time."""
        appearances = self.player_played.setdefault(league_player_id, [])
        appearances[:] = [a for a in appearances if a.game.time != game.time]
        appearances.append(PlayerAppearance(game, game_team, game_player, league_player_id))
        self._player_index[(game.time, game_player.player_id)] = league_player_id

    def add_unlinked(self, game: Game, game_team: Optional[GameTeam], game_player: GamePlayer) -> None:
        self.unlinked.append(PlayerAppearance(game, game_team, game_player))

    def forget_game(self, time: datetime) -> None:
        """Drop every entry for the game at time, ahead of re-committing it."""
        for appearances in self.team_played.values():
            appearances[:] = [a for a in appearances if a.game.time != time]
        for appearances in self.player_played.values():
            appearances[:] = [a for a in appearances if a.game.time != time]
        self.unlinked[:] = [a for a in self.unlinked if a.game.time != time]
        for key in [k for k in self._player_index if k[0] == time]:
            del self._player_index[key]


def rebuild_links(league: 'League') -> LinkTable:
    """
    Build a LinkTable from the id fields of a league's teams and games.

    Does not modify the league. For each game team whose team_id names a
    league team, the game's players with a matching game_team_id are linked
    to the league team's members by player_id. Game teams naming an unknown
    team, and players who are not members of their game team's league team,
    end up in LinkTable.unlinked.

    Args:
        league: League whose links to rebuild

    Returns:
        New LinkTable
    """
    links = LinkTable()

    for team in league.teams.values():
        links.team_played[team.id] = []
        for player_id in team.player_ids:
            links.player_played.setdefault(player_id, [])

    for game in league.all_games:
        linked: set[str] = set()

        for game_team in game.teams:
            team = league.teams.get(game_team.team_id) if game_team.team_id is not None else None
            if team is None:
                logger.debug(f'Game {game.time}: no league team {game_team.team_id}')
                continue

            links.team_played[team.id].append(TeamAppearance(game, game_team))

            for game_player in game.team_players(game_team):
                if team.has_player(game_player.player_id):
                    links.add_player_appearance(game, game_team, game_player, game_player.player_id)
                    linked.add(game_player.player_id)

        for game_player in game.players:
            if game_player.player_id not in linked:
                links.add_unlinked(game, game.team_for(game_player), game_player)

    return links


def relink(league: 'League') -> LinkTable:
    """
    Rebuild a league's links after loading or a structural change.

    Sorts the league's teams by name, creates a LeaguePlayer for any game
    player id the league does not know yet, then replaces league.links.
    """
    league.sort_teams()

    for game in league.all_games:
        for game_player in game.players:
            if game_player.player_id and game_player.player_id not in league.players:
                league.players[game_player.player_id] = LeaguePlayer(
                    id=game_player.player_id, name=game_player.player_id
                )
                logger.debug(f'Created league player {game_player.player_id} from game history')

    league.links = rebuild_links(league)

    if league.links.unlinked:
        logger.info(f'{len(league.links.unlinked)} game players not linked to a league team')

    return league.links

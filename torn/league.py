"""The League: owner of a league's teams, players and games."""

import logging
from datetime import datetime
from pathlib import Path
from statistics import mean
from typing import Iterable, Optional

from .committer import commit_game
from .document import read_document, write_document
from .handicap import Handicap, HandicapStyle
from .linker import LinkTable, PlayerAppearance, TeamAppearance, relink
from .matcher import build_rosters, guess_team, guess_teams
from .models import (
    DisplaySettings,
    Game,
    LeaguePlayer,
    LeagueTeam,
    ServerGame,
    TeamRoster,
)
from .utils import title_from_path

logger = logging.getLogger('torn.league')


class League:
    """
    A league file's teams, players and games.

    Teams and players are held by id. Which games each team and player
    played is derived data in self.links, rebuilt by relink() after a load
    and kept current by commit_game().

    Not thread safe: callers must not overlap a commit with a save.

    Example:
        league = League()
        league.load('leagues/Tuesday_League.json')
        server.populate_game(server_game)
        league.commit_game(server_game, league.build_rosters(server_game))
        league.save()
    """

    def __init__(self, handicap_style: HandicapStyle = HandicapStyle.PERCENT):
        self.title = ''
        self.file_path: Optional[Path] = None
        self.display = DisplaySettings()
        self.handicap_style = handicap_style
        self.teams: dict[int, LeagueTeam] = {}
        self.players: dict[str, LeaguePlayer] = {}
        self.all_games: list[Game] = []
        self.victory_points: list[float] = []
        self.victory_points_high_score = 0.0
        self.victory_points_proportional = 0.0
        self.auto_victory_points = False
        self.links = LinkTable()

    def __str__(self) -> str:
        return self.title or 'league with blank title'

    def clear(self) -> None:
        """Empty the league of teams, players, games and points settings."""
        self.title = ''
        self.teams.clear()
        self.players.clear()
        self.all_games.clear()
        self.victory_points.clear()
        self.victory_points_high_score = 0.0
        self.victory_points_proportional = 0.0
        self.auto_victory_points = False
        self.links = LinkTable()

    # Documents

    def load(self, path: Path | str) -> None:
        """
        Load a league file, replacing this league's contents, and link it.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the document structure is invalid
            HandicapError: If a stored handicap cannot be parsed
        """
        path = Path(path)
        read_document(self, path)
        self.title = title_from_path(path)
        self.file_path = path
        self.relink()

    def new_document(self, path: Path | str) -> None:
        """Start an empty league that will be saved to path."""
        path = Path(path)
        self.clear()
        self.title = title_from_path(path)
        self.file_path = path
        logger.info(f'New league {self.title!r} at {path}')

    def save(self, path: Path | str | None = None) -> Path:
        """
        Save the league to path, or to the file it was loaded from.

        A given path becomes the league's file for later saves.

        Returns:
            Path written

        Raises:
            ValueError: If no path was given and the league has no file yet
        """
        if path is not None:
            self.file_path = Path(path)
        if self.file_path is None:
            raise ValueError('No file to save league to')

        write_document(self, self.file_path)
        return self.file_path

    # Linking and committing

    def relink(self) -> LinkTable:
        return relink(self)

    def commit_game(self, server_game: ServerGame, rosters: list[TeamRoster]) -> Game:
        """Commit a finished game; see committer.commit_game()."""
        return commit_game(self, server_game, rosters)

    def guess_team(self, player_ids: Iterable[str]) -> Optional[LeagueTeam]:
        return guess_team(self, player_ids)

    def guess_teams(self, server_game: ServerGame) -> list[Optional[LeagueTeam]]:
        return guess_teams(self, server_game)

    def build_rosters(self, server_game: ServerGame) -> list[TeamRoster]:
        return build_rosters(self, server_game)

    # Teams and players

    def next_team_id(self) -> int:
        return max(self.teams) + 1 if self.teams else 0

    def add_team(
        self,
        name: str = '',
        player_ids: Iterable[str] = (),
        handicap: Optional[Handicap] = None,
        comment: str = '',
    ) -> LeagueTeam:
        """Create a league team with the next free id."""
        team = LeagueTeam(id=self.next_team_id(), name=name, handicap=handicap, comment=comment)
        for player_id in player_ids:
            if player_id not in self.players:
                self.add_player(player_id)
            team.add_player(player_id)
        self.teams[team.id] = team
        self.links.team_played.setdefault(team.id, [])
        return team

    def add_player(
        self,
        player_id: str,
        name: str = '',
        handicap: Optional[Handicap] = None,
        comment: str = '',
    ) -> LeaguePlayer:
        """Create a league player, or return the existing one with this id."""
        player = self.players.get(player_id)
        if player is None:
            player = LeaguePlayer(id=player_id, name=name, handicap=handicap, comment=comment)
            self.players[player_id] = player
        return player

    def find_team(self, team_id: Optional[int]) -> Optional[LeagueTeam]:
        if team_id is None:
            return None
        return self.teams.get(team_id)

    def find_player(self, player_id: str) -> Optional[LeaguePlayer]:
        return self.players.get(player_id)

    def team_name(self, team: LeagueTeam) -> str:
        return team.display_name(self.players)

    def sort_teams(self) -> None:
        """Order teams by name."""
        ordered = sorted(self.teams.values(), key=self.team_name)
        self.teams = {team.id: team for team in ordered}

    # Games

    def games(self, include_secret: bool = True) -> list[Game]:
        """Games in time order, leaving out secret ones unless include_secret."""
        if include_secret:
            return list(self.all_games)
        return [g for g in self.all_games if not g.secret]

    def game_at(self, time: datetime) -> Optional[Game]:
        for game in self.all_games:
            if game.time == time:
                return game
        return None

    def most_recent(self) -> Optional[datetime]:
        """Time of the latest game, or None if there are none."""
        if not self.all_games:
            return None
        return max(g.time for g in self.all_games)

    def is_points_based(self) -> bool:
        """True if any game team has ever been awarded points."""
        return any(t.points != 0 for g in self.all_games for t in g.teams)

    # Played history

    def team_played(self, team_id: int, include_secret: bool = True) -> list[TeamAppearance]:
        return self.links.team_played_in(team_id, include_secret)

    def player_played(self, player_id: str, include_secret: bool = True) -> list[PlayerAppearance]:
        return self.links.player_played_in(player_id, include_secret)

    def average_score(self, team_id: int, include_secret: bool = True) -> float:
        """Mean game score for a team; 0.0 if it has not played."""
        played = self.team_played(team_id, include_secret)
        return mean(a.game_team.score for a in played) if played else 0.0

    def average_points(self, team_id: int, include_secret: bool = True) -> float:
        """Mean victory points for a team; 0.0 if it has not played."""
        played = self.team_played(team_id, include_secret)
        return mean(a.game_team.points for a in played) if played else 0.0

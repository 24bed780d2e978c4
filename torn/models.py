"""Data models for league teams, players and games."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from functools import cached_property
from typing import Mapping, Optional

from .constants import (
    COLOUR_ALIASES,
    COLOUR_NAMES,
    DEFAULT_GRID_HIGH,
    DEFAULT_GRID_PLAYERS,
    DEFAULT_GRID_WIDE,
)
from .handicap import Handicap


class Colour(IntEnum):
    """Team colours reported by laser game servers."""

    NONE = 0
    RED = 1
    BLUE = 2
    GREEN = 3
    YELLOW = 4
    PURPLE = 5
    PINK = 6
    CYAN = 7
    ORANGE = 8

    @classmethod
    def parse(cls, value: object) -> 'Colour':
        """
        Read a colour from a name, a short alias or an integer value.

        Unknown values give Colour.NONE.
        """
        if value is None or isinstance(value, bool):
            return cls.NONE
        if isinstance(value, int):
            return cls(value) if 0 <= value < len(cls) else cls.NONE

        text = str(value).strip().lower()
        if text.isdigit():
            return cls.parse(int(text))
        text = COLOUR_ALIASES.get(text, text)
        for colour in cls:
            if colour.label.lower() == text:
                return colour
        return cls.NONE

    @property
    def label(self) -> str:
        return COLOUR_NAMES[self.value]


@dataclass
class LeaguePlayer:
    """A player identity tracked across many games."""
    id: str  # Under-the-hood game system identifier, e.g. 'P11-JP9' or '1-50-50'
    name: str = ''
    handicap: Optional[Handicap] = None
    comment: str = ''

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class LeagueTeam:
    """A team remembered by the league, with its member player ids."""
    id: int
    name: str = ''
    handicap: Optional[Handicap] = None
    comment: str = ''
    player_ids: list[str] = field(default_factory=list)

    def add_player(self, player_id: str) -> bool:
        """Add a member by id. Returns False if already a member."""
        if player_id in self.player_ids:
            return False
        self.player_ids.append(player_id)
        return True

    def has_player(self, player_id: str) -> bool:
        return player_id in self.player_ids

    def display_name(self, players: Mapping[str, LeaguePlayer]) -> str:
        """
        The team's name, derived from its members when none has been set.

        No members gives 'Team {id}', two members 'A and B', otherwise
        "{first member}'s team".

        Args:
            players: League players by id, used to look up member names
        """
        if self.name:
            return self.name

        names = [
            players[pid].display_name if pid in players else pid
            for pid in self.player_ids
        ]
        if not names:
            return f'Team {self.id}'
        if len(names) == 2:
            return f'{names[0]} and {names[1]}'
        return f"{names[0]}'s team"


@dataclass
class GamePlayer:
    """One player's result in one game."""
    player_id: str
    game_team_id: int = 0  # Matches GameTeam.team_id within the same game
    pack: str = ''
    score: int = 0
    rank: int = 0
    colour: Colour = Colour.NONE
    hits_by: int = 0
    hits_on: int = 0
    base_hits: int = 0
    base_destroys: int = 0
    base_denies: int = 0
    base_denied: int = 0
    yellow_cards: int = 0
    red_cards: int = 0


@dataclass
class ServerPlayer(GamePlayer):
    """A player as reported by a laser game server. Consumed on commit."""
    alias: str = ''
    server_player_id: int = 0
    server_team_id: int = 0
    pack_name: str = ''


@dataclass
class GameTeam:
    """One team's result in one game."""
    team_id: Optional[int] = None
    colour: Colour = Colour.NONE
    score: int = 0
    adjustment: int = 0
    points: float = 0.0
    points_adjustment: float = 0.0


def game_team_sort_key(game_team: GameTeam) -> tuple[float, int]:
    """Points descending, then score descending."""
    return (-game_team.points, -game_team.score)


def game_player_sort_key(game_player: GamePlayer) -> int:
    """Score descending."""
    return -game_player.score


@dataclass(eq=False)
class Game:
    """
    One played game.

    Games are identified by their time. Secret games are left out of any
    externally facing listing.
    """
    time: datetime
    title: str = ''
    secret: bool = False
    teams: list[GameTeam] = field(default_factory=list)
    players: list[GamePlayer] = field(default_factory=list)

    @cached_property
    def hits(self) -> int:
        return sum(p.hits_on for p in self.players)

    @cached_property
    def total_score(self) -> int:
        return sum(t.score for t in self.teams)

    def invalidate_totals(self) -> None:
        """Drop cached hits and total score after teams or players change."""
        self.__dict__.pop('hits', None)
        self.__dict__.pop('total_score', None)

    def team_players(self, game_team: GameTeam) -> list[GamePlayer]:
        """Players of this game who played for game_team, in list order."""
        if game_team.team_id is None:
            return []
        return [p for p in self.players if p.game_team_id == game_team.team_id]

    def team_for(self, game_player: GamePlayer) -> Optional[GameTeam]:
        for game_team in self.teams:
            if game_team.team_id is not None and game_team.team_id == game_player.game_team_id:
                return game_team
        return None

    def find_player(self, player_id: str) -> Optional[GamePlayer]:
        for game_player in self.players:
            if game_player.player_id == player_id:
                return game_player
        return None

    def team_colour(self, game_team: GameTeam) -> Colour:
        """The team's colour, or the most common colour among its players."""
        if game_team.colour is not Colour.NONE:
            return game_team.colour

        counts = Counter(p.colour for p in self.team_players(game_team))
        if not counts:
            return Colour.NONE
        best = max(counts.values())
        return min(colour for colour, count in counts.items() if count == best)

    def sort_teams(self) -> None:
        self.teams.sort(key=game_team_sort_key)

    def sort_players(self) -> None:
        self.players.sort(key=game_player_sort_key)

    def assign_ranks(self) -> None:
        """Rank players 1..N in list order."""
        for rank, game_player in enumerate(self.players, 1):
            game_player.rank = rank


@dataclass
class ServerGame:
    """A game as stored on a laser game server."""
    game_id: int
    time: datetime
    description: str = ''
    end_time: Optional[datetime] = None
    on_server: bool = False
    in_progress: bool = False
    players: list[ServerPlayer] = field(default_factory=list)
    game: Optional[Game] = None  # League game this was last committed as


@dataclass
class TeamRoster:
    """
    The players one server team fielded, ready to commit.

    team_id overrides the team matcher with a league team chosen by hand.
    game_team reuses an existing GameTeam, e.g. one carrying an adjustment.
    """
    players: list[ServerPlayer] = field(default_factory=list)
    team_id: Optional[int] = None
    game_team: Optional[GameTeam] = None


@dataclass
class DisplaySettings:
    """Scoreboard display settings stored with a league. Not used for scoring."""
    grid_high: int = DEFAULT_GRID_HIGH
    grid_wide: int = DEFAULT_GRID_WIDE
    grid_players: int = DEFAULT_GRID_PLAYERS
    sort_mode: int = 0
    sort_by_rank: int = 0
    auto_update: int = 0
    update_teams: int = 0
    elim_multiplier: int = 0

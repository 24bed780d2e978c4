"""Pydantic schemas for league documents and application config."""

import logging
from typing import Any

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger('torn.schemas')


def _lenient_number(value: Any, kind: type) -> Any:
    """Coerce value to kind, falling back to zero for missing or malformed input."""
    if value is None or value == '':
        return kind(0)
    try:
        return kind(float(value)) if kind is int else kind(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug(f'Malformed number {value!r}, using 0')
        return kind(0)


def _lenient_text(value: Any) -> Any:
    if value is None:
        return ''
    return str(value)


def _optional_text(value: Any) -> Any:
    if value is None or value == '':
        return None
    return str(value)


def _lenient_list(value: Any) -> Any:
    return value if isinstance(value, list) else []


class PlayerRecord(BaseModel):
    """League player listed under a team."""

    id: str = ''
    name: str = ''
    handicap: str | None = None
    comment: str = ''

    @field_validator('id', 'name', 'comment', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _lenient_text(v)

    @field_validator('handicap', mode='before')
    @classmethod
    def coerce_handicap(cls, v):
        return _optional_text(v)

    class Config:
        extra = 'ignore'


class TeamRecord(BaseModel):
    """League team and its members."""

    name: str = ''
    id: int = 0
    handicap: str | None = None
    comment: str = ''
    players: list[PlayerRecord] = Field(default_factory=list)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return _lenient_number(v, int)

    @field_validator('name', 'comment', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _lenient_text(v)

    @field_validator('handicap', mode='before')
    @classmethod
    def coerce_handicap(cls, v):
        return _optional_text(v)

    @field_validator('players', mode='before')
    @classmethod
    def coerce_players(cls, v):
        return _lenient_list(v)

    class Config:
        extra = 'ignore'


class GameTeamRecord(BaseModel):
    """One team's result within a game."""

    team_id: int | None = None
    colour: str | int | None = None
    score: int = 0
    points: float = 0.0
    adjustment: int = 0
    points_adjustment: float = 0.0

    @field_validator('team_id', mode='before')
    @classmethod
    def coerce_team_id(cls, v):
        if v is None or v == '':
            return None
        return _lenient_number(v, int)

    @field_validator('score', 'adjustment', mode='before')
    @classmethod
    def coerce_ints(cls, v):
        return _lenient_number(v, int)

    @field_validator('points', 'points_adjustment', mode='before')
    @classmethod
    def coerce_floats(cls, v):
        return _lenient_number(v, float)

    class Config:
        extra = 'ignore'


class GamePlayerRecord(BaseModel):
    """One player's result within a game."""

    team_id: int = 0
    player_id: str = ''
    pack: str = ''
    score: int = 0
    rank: int = 0
    hits_by: int = 0
    hits_on: int = 0
    base_hits: int = 0
    base_destroys: int = 0
    base_denies: int = 0
    base_denied: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    colour: str | int | None = None

    @field_validator(
        'team_id',
        'score',
        'rank',
        'hits_by',
        'hits_on',
        'base_hits',
        'base_destroys',
        'base_denies',
        'base_denied',
        'yellow_cards',
        'red_cards',
        mode='before',
    )
    @classmethod
    def coerce_ints(cls, v):
        return _lenient_number(v, int)

    @field_validator('player_id', 'pack', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _lenient_text(v)

    class Config:
        extra = 'ignore'


class GameRecord(BaseModel):
    """A played game. Either time or the legacy game_time day offset is used."""

    title: str = ''
    time: str | None = None
    game_time: float | None = None
    hits: int = 0
    secret: bool = False
    teams: list[GameTeamRecord] = Field(default_factory=list)
    players: list[GamePlayerRecord] = Field(default_factory=list)

    @field_validator('title', mode='before')
    @classmethod
    def coerce_title(cls, v):
        return _lenient_text(v)

    @field_validator('time', mode='before')
    @classmethod
    def coerce_time(cls, v):
        if v is None or v == '':
            return None
        return str(v)

    @field_validator('game_time', mode='before')
    @classmethod
    def coerce_game_time(cls, v):
        if v is None or v == '':
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator('hits', mode='before')
    @classmethod
    def coerce_hits(cls, v):
        return _lenient_number(v, int)

    @field_validator('secret', mode='before')
    @classmethod
    def coerce_secret(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ('true', 'y', 'yes', '1')
        return bool(v)

    @field_validator('teams', 'players', mode='before')
    @classmethod
    def coerce_lists(cls, v):
        return _lenient_list(v)

    class Config:
        extra = 'ignore'


class LeagueFile(BaseModel):
    """Complete league document."""

    grid_high: int = 0
    grid_wide: int = 0
    grid_players: int = 0
    sort_mode: int = 0
    handicap_style: str = '%'
    sort_by_rank: int = 0
    auto_update: int = 0
    update_teams: int = 0
    elim_multiplier: int = 0
    victory_points: list[float] = Field(default_factory=list)
    victory_points_high_score: float = 0.0
    victory_points_proportional: float = 0.0
    auto_victory_points: bool = False
    teams: list[TeamRecord] = Field(default_factory=list)
    games: list[GameRecord] = Field(default_factory=list)

    @field_validator(
        'grid_high',
        'grid_wide',
        'grid_players',
        'sort_mode',
        'sort_by_rank',
        'auto_update',
        'update_teams',
        'elim_multiplier',
        mode='before',
    )
    @classmethod
    def coerce_ints(cls, v):
        return _lenient_number(v, int)

    @field_validator('victory_points_high_score', 'victory_points_proportional', mode='before')
    @classmethod
    def coerce_floats(cls, v):
        return _lenient_number(v, float)

    @field_validator('victory_points', mode='before')
    @classmethod
    def coerce_victory_points(cls, v):
        if not isinstance(v, list):
            return []
        return [_lenient_number(x, float) for x in v]

    @field_validator('auto_victory_points', mode='before')
    @classmethod
    def coerce_auto_victory_points(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ('true', 'y', 'yes', '1')
        return bool(v)

    @field_validator('handicap_style', mode='before')
    @classmethod
    def coerce_handicap_style(cls, v):
        return _lenient_text(v) or '%'

    @field_validator('teams', 'games', mode='before')
    @classmethod
    def coerce_lists(cls, v):
        return _lenient_list(v)

    class Config:
        extra = 'ignore'


class TornConfig(BaseModel):
    """Application configuration settings."""

    server: str = Field(default='demo', min_length=1)
    handicap_style: str = Field(default='%', pattern=r'^(%|\+|-|Percent|Plus|Minus)$')
    demo_game_count: int = Field(default=10, ge=1, le=100)
    log_level: str = Field(default='INFO', pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$')

    class Config:
        extra = 'forbid'
